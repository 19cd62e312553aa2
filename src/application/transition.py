"""
State Transition — Pure Function

Vending Machine 상태 전환 로직 (순수 함수)

원칙:
1. 순수 함수 (side-effect 없음, I/O 금지, Inventory 읽기 전용)
2. 입력: (state, coins, event, inventory)
3. 출력: (new_state, new_coins, intents)
4. 상태별 handler 1개, 처리하지 않는 이벤트는 no-op (에러 아님)
5. Oracle 테스트로 전부 검증 가능
"""

from typing import Tuple

from domain.state import Coin, MachineState
from domain.events import EventType, MachineEvent
from domain.intent import (
    TransitionIntents,
    DispenseIntent,
    RefundIntent,
    RejectIntent,
    LogIntent
)
from application.inventory import Inventory
from application.payment import total_paid, calculate_change

Coins = Tuple[Coin, ...]
TransitionResult = Tuple[MachineState, Coins, TransitionIntents]


def transition(
    current_state: MachineState,
    coins: Coins,
    event: MachineEvent,
    inventory: Inventory
) -> TransitionResult:
    """
    순수 함수 State Transition (Oracle Testable)

    Args:
        current_state: 현재 상태
        coins: 현재 거래에서 투입된 코인 (immutable tuple)
        event: Machine event
        inventory: 상품 조회용 (읽기 전용, 변경 금지)

    Returns:
        (new_state, new_coins, intents)

    규칙:
    - IDLE + INSERT_COIN_BUTTON → HAS_MONEY
    - HAS_MONEY + INSERT_COIN → HAS_MONEY (coin 누적)
    - HAS_MONEY + START_SELECTION → SELECTION
    - HAS_MONEY + REFUND → IDLE (전액 환불)
    - SELECTION + CHOOSE_PRODUCT (unknown code) → SELECTION 유지 (INVALID_CODE)
    - SELECTION + CHOOSE_PRODUCT (sold out) → SELECTION 유지 (SOLD_OUT)
    - SELECTION + CHOOSE_PRODUCT (paid >= price) → DISPENSE → IDLE
    - SELECTION + CHOOSE_PRODUCT (paid < price) → IDLE (자동 환불)
    - 그 외: no-op
    """
    coins = tuple(coins)
    intents = TransitionIntents()

    if current_state == MachineState.IDLE:
        return _handle_idle(coins, event, intents)

    elif current_state == MachineState.HAS_MONEY:
        return _handle_has_money(coins, event, intents)

    elif current_state == MachineState.SELECTION:
        return _handle_selection(coins, event, inventory, intents)

    # DISPENSE는 resting state가 아님: 외부 이벤트는 no-op
    return _ignore(current_state, coins, event, intents)


def _handle_idle(
    coins: Coins,
    event: MachineEvent,
    intents: TransitionIntents
) -> TransitionResult:
    """IDLE: INSERT_COIN_BUTTON만 처리"""
    if event.type == EventType.INSERT_COIN_BUTTON:
        return MachineState.HAS_MONEY, (), intents

    return _ignore(MachineState.IDLE, coins, event, intents)


def _handle_has_money(
    coins: Coins,
    event: MachineEvent,
    intents: TransitionIntents
) -> TransitionResult:
    """HAS_MONEY: 코인 누적 / 선택 시작 / 환불"""
    if event.type == EventType.INSERT_COIN:
        if event.coin is None:
            # payload 없는 INSERT_COIN → 무시
            return _ignore(MachineState.HAS_MONEY, coins, event, intents)
        return MachineState.HAS_MONEY, coins + (event.coin,), intents

    elif event.type == EventType.START_SELECTION:
        return MachineState.SELECTION, coins, intents

    elif event.type == EventType.REFUND:
        intents.refund_intent = RefundIntent(
            coins=coins,
            reason="customer_request"
        )
        intents.log_intent = LogIntent(
            level="INFO",
            code="REFUND",
            message="full refund on customer request",
            context={"paid": total_paid(coins), "coin_count": len(coins)}
        )
        return MachineState.IDLE, (), intents

    return _ignore(MachineState.HAS_MONEY, coins, event, intents)


def _handle_selection(
    coins: Coins,
    event: MachineEvent,
    inventory: Inventory,
    intents: TransitionIntents
) -> TransitionResult:
    """
    SELECTION: CHOOSE_PRODUCT만 처리

    검사 순서: code 존재 → 배출 가능 → 금액 충분
    """
    if event.type != EventType.CHOOSE_PRODUCT or event.code is None:
        return _ignore(MachineState.SELECTION, coins, event, intents)

    code = event.code

    # (1) 존재하지 않는 코드 → 상태 유지
    if not inventory.has_code(code):
        intents.reject_intent = RejectIntent(error="INVALID_CODE", code=code)
        intents.log_intent = LogIntent(
            level="WARNING",
            code="INVALID_CODE",
            message=f"no shelf with code {code}",
        )
        return MachineState.SELECTION, coins, intents

    # (2) 빈 선반 or 품절 → 상태 유지
    item = inventory.find_item(code)
    if item is None:
        intents.reject_intent = RejectIntent(error="SOLD_OUT", code=code)
        intents.log_intent = LogIntent(
            level="WARNING",
            code="SOLD_OUT",
            message=f"shelf {code} is sold out",
        )
        return MachineState.SELECTION, coins, intents

    paid = total_paid(coins)

    # (3) 금액 부족 → 전액 환불 + IDLE
    if paid < item.price:
        intents.refund_intent = RefundIntent(
            coins=coins,
            reason="insufficient_payment"
        )
        intents.reject_intent = RejectIntent(
            error="INSUFFICIENT_PAYMENT",
            code=code,
            price=item.price,
            paid=paid
        )
        intents.log_intent = LogIntent(
            level="WARNING",
            code="INSUFFICIENT_PAYMENT",
            message=f"paid {paid} < price {item.price} at {code}, refunding",
            context={"paid": paid, "price": item.price}
        )
        return MachineState.IDLE, (), intents

    # (4) 결제 완료 → DISPENSE (executor가 배출 실행) → IDLE
    intents.dispense_intent = DispenseIntent(
        code=code,
        item=item,
        paid=paid,
        change=calculate_change(coins, item.price),
        coins=coins
    )
    intents.log_intent = LogIntent(
        level="INFO",
        code="DISPENSE",
        message=f"dispensing {item.type.value} from {code}",
        context={"paid": paid, "price": item.price}
    )
    return MachineState.IDLE, (), intents


def _ignore(
    state: MachineState,
    coins: Coins,
    event: MachineEvent,
    intents: TransitionIntents
) -> TransitionResult:
    """처리하지 않는 이벤트: 상태/코인 유지"""
    intents.ignored = True
    intents.log_intent = LogIntent(
        level="DEBUG",
        code="EVENT_IGNORED",
        message=f"{event.type.value} ignored in {state.value}",
    )
    return state, coins, intents


def is_accepting_coins(state: MachineState) -> bool:
    """
    코인 투입 허용 여부

    Returns:
        True: HAS_MONEY
        False: otherwise
    """
    return state == MachineState.HAS_MONEY
