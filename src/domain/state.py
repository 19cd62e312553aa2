"""
Domain State Models

Vending Machine 상태 머신 + 재고/코인 도메인 모델 정의
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional

# Re-export events for convenience
from domain.events import EventType, MachineEvent

__all__ = [
    'MachineState',
    'Coin',
    'ItemType',
    'Item',
    'ItemShelf',
    'EventType',
    'MachineEvent'
]


class MachineState(Enum):
    """
    Transaction State Machine

    4가지 상태만 존재:
    - IDLE: 거래 없음, 코인 버튼 대기
    - HAS_MONEY: 코인 투입 중
    - SELECTION: 상품 선택 대기
    - DISPENSE: 배출 중 (transient, SELECTION → IDLE 전이 안에서만 존재)
    """
    IDLE = "IDLE"
    HAS_MONEY = "HAS_MONEY"
    SELECTION = "SELECTION"
    DISPENSE = "DISPENSE"


class Coin(Enum):
    """허용 코인 (value = cents)"""
    PENNY = 1
    NICKEL = 5
    DIME = 10
    QUARTER = 25


class ItemType(Enum):
    """상품 종류"""
    COKE = "COKE"
    PEPSI = "PEPSI"
    JUICE = "JUICE"
    SODA = "SODA"


@dataclass(frozen=True)
class Item:
    """
    상품 (immutable)

    - type: 상품 종류
    - price: 가격 (cents, >= 0)
    """
    type: ItemType
    price: int

    def __post_init__(self):
        if self.price < 0:
            raise ValueError(f"Item price must be >= 0, got {self.price}")


@dataclass
class ItemShelf:
    """
    재고 슬롯 1칸

    - code: 상품 코드 (Inventory 내 unique)
    - item: 적재된 상품 (없으면 None)
    - sold_out: True면 item이 남아 있어도 배출 불가
    """
    code: int
    item: Optional[Item] = None
    sold_out: bool = False

    def is_available(self) -> bool:
        """배출 가능 여부"""
        return self.item is not None and not self.sold_out
