"""
src/application/vending_machine.py
VendingMachine — Transaction Context (상태 + 코인 + Inventory 참조)

책임:
- 외부 caller 호출 → MachineEvent 생성 → transition() (순수 함수)
- transition 결과(intents) 실행: 배출, 환불, 에러 전달, 로그
- 판매 기록 (LogStorage가 연결된 경우만)

원칙:
1. 생성자는 side-effect 없음 (파일 open/재고 변경 금지)
2. 배출은 결제 완료 전이 끝에서 _dispense()로 명시적으로 실행
3. 에러 후 상태: IDLE 또는 SELECTION 유지 (CoinList/Inventory 손상 없음)
4. Single session (동시 고객 미지원)
5. 판매 기록 실패 → logger.error만, 거래 결과는 그대로 반환
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from domain.state import Coin, Item, MachineState
from domain.events import EventType, MachineEvent
from domain.errors import InsufficientPayment, InvalidCode, SoldOut
from domain.intent import DispenseIntent, LogIntent, RejectIntent, TransitionIntents
from application.inventory import Inventory
from application.payment import total_paid
from application.sales_logging import log_refund, log_sale
from application.transition import transition
from infrastructure.logging.sales_logger import SalesLogValidationError
from infrastructure.storage.log_storage import LogStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispenseResult:
    """choose_product() 성공 결과"""

    item: Item
    change: int
    code: int


class VendingMachine:
    """
    VendingMachine — Transaction Context

    Usage:
        machine = VendingMachine(inventory)
        machine.insert_coin_button()
        machine.insert_coin(Coin.NICKEL)
        machine.insert_coin(Coin.QUARTER)
        machine.start_selection()
        result = machine.choose_product(102)  # DispenseResult(item, change=18)
    """

    def __init__(
        self,
        inventory: Inventory,
        log_storage: Optional[LogStorage] = None,
    ):
        """
        Args:
            inventory: 재고 (외부 소유, long-lived)
            log_storage: 판매 기록 저장소 (None이면 기록 안 함)
        """
        self.inventory = inventory
        self.log_storage = log_storage

        self._state = MachineState.IDLE
        self._coins: List[Coin] = []

    @classmethod
    def from_config(cls, config, log_storage: Optional[LogStorage] = None) -> "VendingMachine":
        """
        MachineConfig → Inventory 생성 + 초기 재고 적재

        Args:
            config: MachineConfig
            log_storage: 판매 기록 저장소 (None + config.log_dir 있으면 새로 생성)
        """
        inventory = Inventory(capacity=config.capacity, first_code=config.first_code)
        for code, item in sorted(config.items.items()):
            inventory.add_item(item, code)

        if log_storage is None and config.log_dir:
            log_storage = LogStorage(
                log_dir=Path(config.log_dir),
                fsync_policy=config.fsync_policy,
                fsync_batch_size=config.fsync_batch_size,
            )

        return cls(inventory, log_storage=log_storage)

    def close(self) -> None:
        """LogStorage 정리 (남은 기록 fsync + close)"""
        if self.log_storage is not None:
            self.log_storage.close()

    def __enter__(self) -> "VendingMachine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ===== Read-only =====

    @property
    def state(self) -> MachineState:
        return self._state

    @property
    def coins(self) -> List[Coin]:
        """투입 코인 (copy)"""
        return list(self._coins)

    @property
    def total_paid(self) -> int:
        return total_paid(self._coins)

    # ===== Call interface =====

    def insert_coin_button(self) -> None:
        self._apply(MachineEvent(type=EventType.INSERT_COIN_BUTTON))

    def insert_coin(self, coin: Coin) -> None:
        """
        Raises:
            TypeError: coin이 Coin이 아님
        """
        if not isinstance(coin, Coin):
            raise TypeError(f"Expected Coin, got {type(coin).__name__}")
        self._apply(MachineEvent(type=EventType.INSERT_COIN, coin=coin))

    def start_selection(self) -> None:
        self._apply(MachineEvent(type=EventType.START_SELECTION))

    def choose_product(self, code: int) -> Optional[DispenseResult]:
        """
        상품 선택 → 배출

        Returns:
            DispenseResult(item, change, code)

        Raises:
            InvalidCode: 존재하지 않는 코드 (SELECTION 유지)
            SoldOut: 빈 선반 or 품절 (SELECTION 유지)
            InsufficientPayment: 금액 부족, .refund에 환불 코인 (IDLE)

        Note:
            SELECTION이 아닌 상태에서는 no-op → None 반환
        """
        intents = self._apply(MachineEvent(type=EventType.CHOOSE_PRODUCT, code=code))

        if intents.dispense_intent is not None:
            return self._dispense(intents.dispense_intent)
        return None

    def refund_full_money(self) -> List[Coin]:
        """
        전액 환불 (HAS_MONEY에서만)

        Returns:
            환불 코인 (투입 순서), HAS_MONEY가 아니면 빈 리스트
        """
        intents = self._apply(MachineEvent(type=EventType.REFUND))

        if intents.refund_intent is None:
            return []
        return list(intents.refund_intent.coins)

    # ===== Intent execution =====

    def _apply(self, event: MachineEvent) -> TransitionIntents:
        """
        transition() 실행 + 상태 반영 + intents 실행 (dispense 제외)

        Raises:
            InvalidCode / SoldOut / InsufficientPayment: reject_intent
        """
        previous_state = self._state
        new_state, new_coins, intents = transition(
            self._state,
            tuple(self._coins),
            event,
            self.inventory,
        )

        self._state = new_state
        self._coins = list(new_coins)

        if new_state != previous_state:
            logger.info(f"State: {previous_state.value} → {new_state.value} ({event.type.value})")

        if intents.log_intent is not None:
            self._emit_log(intents.log_intent)

        error = None
        if intents.reject_intent is not None:
            error = self._to_error(intents.reject_intent, intents)

        if intents.refund_intent is not None:
            self._record_refund(intents)

        if error is not None:
            raise error

        return intents

    def _dispense(self, intent: DispenseIntent) -> DispenseResult:
        """
        DISPENSE 단계: 선반 품절 처리 + 배출 결과 반환

        transition()이 IDLE로 전이한 직후 호출된다.
        """
        self.inventory.mark_sold_out(intent.code)

        self._write_record(log_sale, intent, intent.coins)

        logger.info(
            f"Dispensed {intent.item.type.value} from {intent.code}: "
            f"paid={intent.paid} price={intent.item.price} change={intent.change}"
        )
        return DispenseResult(item=intent.item, change=intent.change, code=intent.code)

    def _record_refund(self, intents: TransitionIntents) -> None:
        refund = intents.refund_intent
        logger.info(f"Refunded {total_paid(refund.coins)}c ({refund.reason})")

        code = intents.reject_intent.code if intents.reject_intent is not None else None
        self._write_record(log_refund, refund.coins, reason=refund.reason, code=code)

    def _write_record(self, write, *args, **kwargs) -> None:
        """
        판매 기록 append (LogStorage 연결 시)

        기록 실패는 거래 결과를 바꾸지 않는다: 배출/환불/에러는 그대로 caller에게 전달
        """
        if self.log_storage is None:
            return
        try:
            write(self.log_storage, *args, **kwargs)
        except (OSError, SalesLogValidationError) as e:
            logger.error(f"Sales record write failed: {type(e).__name__}: {e}")

    def _to_error(self, reject: RejectIntent, intents: TransitionIntents) -> Exception:
        if reject.error == "INVALID_CODE":
            return InvalidCode(reject.code)
        if reject.error == "SOLD_OUT":
            return SoldOut(reject.code)

        refund: Tuple[Coin, ...] = ()
        if intents.refund_intent is not None:
            refund = intents.refund_intent.coins
        return InsufficientPayment(
            code=reject.code,
            price=reject.price,
            paid=reject.paid,
            refund=list(refund),
        )

    def _emit_log(self, log_intent: LogIntent) -> None:
        level = getattr(logging, log_intent.level, logging.INFO)
        if log_intent.context:
            logger.log(level, f"[{log_intent.code}] {log_intent.message} {log_intent.context}")
        else:
            logger.log(level, f"[{log_intent.code}] {log_intent.message}")
