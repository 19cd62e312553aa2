"""
Analysis Toolkit for Sales Log Analysis.

판매 기록 (sales_*.jsonl) → DataFrame → 요약 지표.
"""

from .sales_report import (
    load_log_files,
    parse_jsonl,
    to_dataframe,
    load_sales_dataframe,
    calculate_summary,
    calculate_item_breakdown,
)

__all__ = [
    "load_log_files",
    "parse_jsonl",
    "to_dataframe",
    "load_sales_dataframe",
    "calculate_summary",
    "calculate_item_breakdown",
]
