"""
src/application/sales_logging.py
Sales logging — VendingMachine에서 분리한 배출/환불 기록 함수

Intent → SaleLogV1 변환 후 LogStorage에 append
"""

import logging
import time
from dataclasses import asdict
from typing import Iterable, Optional

from domain.state import Coin
from domain.intent import DispenseIntent
from infrastructure.logging.sales_logger import SaleLogV1, validate_sale_log_v1
from infrastructure.storage.log_storage import LogStorage
from application.payment import total_paid

logger = logging.getLogger(__name__)


def log_sale(
    log_storage: LogStorage,
    intent: DispenseIntent,
    coins: Iterable[Coin],
    timestamp: Optional[float] = None,
) -> SaleLogV1:
    """
    배출 기록

    Args:
        log_storage: 로그 저장소
        intent: 실행된 DispenseIntent
        coins: 결제에 사용된 코인
        timestamp: 기록 시각 (None이면 time.time())

    Returns:
        기록된 SaleLogV1
    """
    sale_log = SaleLogV1(
        event="DISPENSE",
        code=intent.code,
        item_type=intent.item.type.value,
        price=intent.item.price,
        paid=intent.paid,
        change=intent.change,
        coins=[coin.name for coin in coins],
        timestamp=timestamp if timestamp is not None else time.time(),
    )
    validate_sale_log_v1(sale_log)
    log_storage.append_sales_log(asdict(sale_log))
    return sale_log


def log_refund(
    log_storage: LogStorage,
    coins: Iterable[Coin],
    reason: str,
    code: Optional[int] = None,
    timestamp: Optional[float] = None,
) -> SaleLogV1:
    """
    환불 기록 (change == paid)

    Args:
        log_storage: 로그 저장소
        coins: 환불된 코인
        reason: 환불 이유 ("customer_request", "insufficient_payment")
        code: 선택했던 상품 코드 (금액 부족 환불만)
        timestamp: 기록 시각 (None이면 time.time())
    """
    coins = list(coins)
    paid = total_paid(coins)
    refund_log = SaleLogV1(
        event="REFUND",
        code=code,
        paid=paid,
        change=paid,
        coins=[coin.name for coin in coins],
        reason=reason,
        timestamp=timestamp if timestamp is not None else time.time(),
    )
    validate_sale_log_v1(refund_log)
    log_storage.append_sales_log(asdict(refund_log))
    logger.debug(f"Refund logged: {paid}c ({reason})")
    return refund_log
