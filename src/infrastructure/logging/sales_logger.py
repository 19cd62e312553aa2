"""
src/infrastructure/logging/sales_logger.py

Sales Log Schema v1.0 — 배출/환불 기록

필드:
- event: "DISPENSE" | "REFUND"
- code, item_type, price: 배출 상품 (REFUND는 code/item_type None 가능)
- paid, change: 금액 (cents)
- coins: 투입 코인 이름 목록 (투입 순서)
- reason: REFUND 이유 ("customer_request", "insufficient_payment")
- timestamp, schema_version: 무결성 필드
"""

from dataclasses import dataclass, field
from typing import List, Optional

SCHEMA_VERSION = "1.0"
VALID_EVENTS = ["DISPENSE", "REFUND"]


class SalesLogValidationError(Exception):
    """Sales log schema validation 실패"""

    pass


@dataclass
class SaleLogV1:
    """
    Sales Log Schema v1.0

    DISPENSE: change == paid - price
    REFUND: change == paid (전액 반환), price는 참고용
    """
    event: str
    paid: int
    change: int
    timestamp: float
    coins: List[str] = field(default_factory=list)
    code: Optional[int] = None
    item_type: Optional[str] = None
    price: Optional[int] = None
    reason: Optional[str] = None
    schema_version: str = SCHEMA_VERSION


def validate_sale_log_v1(log: SaleLogV1) -> None:
    """
    Sales Log v1.0 validation

    필수 검증:
    - event: VALID_EVENTS 중 하나
    - paid, change: >= 0
    - DISPENSE: code/item_type/price 필수, change == paid - price
    - REFUND: change == paid
    - schema_version: 빈 문자열 금지

    Raises:
        SalesLogValidationError: validation 실패 시
    """
    if log.event not in VALID_EVENTS:
        raise SalesLogValidationError(
            f"Invalid event: {log.event}. Must be one of {VALID_EVENTS}"
        )

    if log.paid < 0 or log.change < 0:
        raise SalesLogValidationError(
            f"Amounts must be >= 0 (paid={log.paid}, change={log.change})"
        )

    if log.event == "DISPENSE":
        for name in ("code", "item_type", "price"):
            if getattr(log, name) is None:
                raise SalesLogValidationError(f"DISPENSE log missing field: {name}")
        if log.change != log.paid - log.price:
            raise SalesLogValidationError(
                f"Inconsistent change: {log.change} != {log.paid} - {log.price}"
            )
    elif log.change != log.paid:
        raise SalesLogValidationError(
            f"REFUND must return full amount: change={log.change}, paid={log.paid}"
        )

    if not log.schema_version:
        raise SalesLogValidationError("schema_version must not be empty")
