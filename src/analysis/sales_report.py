"""
src/analysis/sales_report.py

Sales log 분석: JSONL 판매 기록 → DataFrame → 요약 지표

DoD:
- sales_*.jsonl 파일 로드
- SaleLogV1 스키마 파싱 (잘못된 라인 스킵)
- DataFrame 변환
- Summary (매출, 배출/환불 건수, 거스름돈 합계)
- Item type별 분해
"""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from infrastructure.logging.sales_logger import (
    SaleLogV1,
    SalesLogValidationError,
    validate_sale_log_v1,
)

logger = logging.getLogger(__name__)

COLUMNS = [
    "event", "code", "item_type", "price", "paid", "change",
    "coins", "reason", "timestamp", "schema_version",
]


def load_log_files(log_dir: Path) -> List[Path]:
    """
    sales_*.jsonl 파일 목록 (파일명 = 날짜 순)

    Raises:
        FileNotFoundError: 디렉토리가 존재하지 않으면
    """
    log_dir = Path(log_dir)
    if not log_dir.exists():
        raise FileNotFoundError(f"Log directory not found: {log_dir}")

    return sorted(log_dir.glob("sales_*.jsonl"))


def parse_jsonl(file_path: Path) -> List[SaleLogV1]:
    """
    JSONL 파일 → SaleLogV1 리스트

    Note:
        - 빈 라인 스킵
        - 잘못된 JSON / 스키마 불일치 라인은 스킵 (경고 로그)
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Log file not found: {file_path}")

    logs: List[SaleLogV1] = []
    with open(file_path, "r", encoding="utf-8") as f:
        for line_num, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue

            try:
                log = SaleLogV1(**json.loads(line))
                validate_sale_log_v1(log)
                logs.append(log)
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid JSON at {file_path}:{line_num} - {e}")
            except (TypeError, SalesLogValidationError) as e:
                logger.warning(f"Schema mismatch at {file_path}:{line_num} - {e}")

    return logs


def to_dataframe(logs: List[SaleLogV1]) -> pd.DataFrame:
    """SaleLogV1 리스트 → DataFrame (빈 리스트면 컬럼만 있는 빈 DataFrame)"""
    if not logs:
        return pd.DataFrame(columns=COLUMNS)

    df = pd.DataFrame([asdict(log) for log in logs], columns=COLUMNS)
    # REFUND는 code/price가 None → NaN
    for column in ("code", "price", "paid", "change"):
        df[column] = pd.to_numeric(df[column])
    df["datetime"] = pd.to_datetime(df["timestamp"], unit="s", utc=True)
    return df


def load_sales_dataframe(log_dir: Path) -> pd.DataFrame:
    """디렉토리의 모든 판매 기록 → DataFrame"""
    logs: List[SaleLogV1] = []
    for file_path in load_log_files(log_dir):
        logs.extend(parse_jsonl(file_path))
    return to_dataframe(logs)


def calculate_summary(df: pd.DataFrame) -> Dict[str, int]:
    """
    Summary 지표

    Returns:
        - revenue: 배출 상품 가격 합계 (cents)
        - dispense_count: 배출 건수
        - refund_count: 환불 건수
        - refunded_amount: 환불 금액 합계
        - change_given: 배출 시 거스름돈 합계
    """
    if df.empty:
        return {
            "revenue": 0,
            "dispense_count": 0,
            "refund_count": 0,
            "refunded_amount": 0,
            "change_given": 0,
        }

    sales = df[df["event"] == "DISPENSE"]
    refunds = df[df["event"] == "REFUND"]

    return {
        "revenue": int(sales["price"].sum()),
        "dispense_count": int(len(sales)),
        "refund_count": int(len(refunds)),
        "refunded_amount": int(refunds["change"].sum()),
        "change_given": int(sales["change"].sum()),
    }


def calculate_item_breakdown(df: pd.DataFrame) -> Dict[str, Dict[str, Any]]:
    """
    Item type별 배출 건수/매출

    Returns:
        {"COKE": {"count": 2, "revenue": 24}, ...}
    """
    if df.empty:
        return {}

    sales = df[df["event"] == "DISPENSE"]
    if sales.empty:
        return {}

    grouped = sales.groupby("item_type")["price"].agg(["count", "sum"])
    return {
        str(item_type): {"count": int(row["count"]), "revenue": int(row["sum"])}
        for item_type, row in grouped.iterrows()
    }
