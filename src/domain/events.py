"""
Domain Events — Machine Events

상태 전환 트리거 이벤트 (외부 caller가 버튼/코인 투입으로 발생)
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from domain.state import Coin


class EventType(Enum):
    """
    Machine Event 타입

    상태 전환 트리거:
    - INSERT_COIN_BUTTON: IDLE → HAS_MONEY
    - INSERT_COIN: HAS_MONEY 유지 (coin 누적)
    - START_SELECTION: HAS_MONEY → SELECTION
    - CHOOSE_PRODUCT: SELECTION → IDLE (dispense/refund) or SELECTION 유지 (reject)
    - REFUND: HAS_MONEY → IDLE (전액 환불)
    """
    INSERT_COIN_BUTTON = "INSERT_COIN_BUTTON"
    INSERT_COIN = "INSERT_COIN"
    START_SELECTION = "START_SELECTION"
    CHOOSE_PRODUCT = "CHOOSE_PRODUCT"
    REFUND = "REFUND"


@dataclass(frozen=True)
class MachineEvent:
    """
    Machine Event

    payload 규칙:
    - INSERT_COIN: coin 필수
    - CHOOSE_PRODUCT: code 필수
    - 그 외: payload 없음
    """
    type: EventType
    coin: Optional["Coin"] = None
    code: Optional[int] = None
