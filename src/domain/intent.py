"""
Domain Intents — Action Commands from State Transition

Intent는 순수 전이 함수(transition)의 출력이며,
VendingMachine(context)이 실행하는 명령어다.
(재고 차감, 환불, 에러 전달, 로그 기록)
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from domain.state import Coin, Item


@dataclass(frozen=True)
class DispenseIntent:
    """
    상품 배출 의도

    Executor 책임:
    - shelf sold_out 처리
    - item 반환 + change 전달
    """
    code: int
    item: Item
    paid: int
    change: int
    coins: Tuple[Coin, ...] = ()


@dataclass(frozen=True)
class RefundIntent:
    """
    전액 환불 의도

    Reason:
    - "customer_request": HAS_MONEY에서 refund 버튼
    - "insufficient_payment": SELECTION에서 금액 부족 → 자동 환불
    """
    coins: Tuple[Coin, ...]
    reason: str


@dataclass(frozen=True)
class RejectIntent:
    """
    선택 거절 의도 (executor가 예외로 변환)

    Error:
    - INVALID_CODE: 존재하지 않는 코드
    - SOLD_OUT: 빈 선반 or 품절
    - INSUFFICIENT_PAYMENT: 투입 금액 < 가격
    """
    error: str  # "INVALID_CODE" | "SOLD_OUT" | "INSUFFICIENT_PAYMENT"
    code: int
    price: Optional[int] = None
    paid: Optional[int] = None


@dataclass
class LogIntent:
    """
    로그 기록 의도
    """
    level: str  # "DEBUG" | "INFO" | "WARNING"
    code: str
    message: str
    context: Optional[dict] = None


@dataclass
class TransitionIntents:
    """
    State Transition 결과로 발생하는 행동 의도들

    Oracle 테스트는 이 intents를 검증함
    """
    dispense_intent: Optional[DispenseIntent] = None
    refund_intent: Optional[RefundIntent] = None
    reject_intent: Optional[RejectIntent] = None
    log_intent: Optional[LogIntent] = None
    ignored: bool = False  # 현재 상태에서 처리하지 않는 이벤트 (no-op)

    def is_empty(self) -> bool:
        """실행할 행동이 없는지 (log 제외)"""
        return (
            self.dispense_intent is None
            and self.refund_intent is None
            and self.reject_intent is None
        )
