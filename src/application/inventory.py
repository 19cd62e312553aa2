"""
src/application/inventory.py
Inventory — 고정 크기 선반 컬렉션 (product code 기준 조회)

Purpose:
- 선반 생성 (code = first_code부터 순차 할당)
- 상품 적재 / 조회 / 품절 처리

원칙:
1. 선반 수는 생성 시 고정 (추가/삭제 없음)
2. code는 Inventory 내 unique
3. mark_sold_out은 idempotent (두 번 호출해도 에러 아님)

Exports:
- Inventory
- DEFAULT_CAPACITY, DEFAULT_FIRST_CODE
"""

import logging
from typing import Dict, List, Optional, Tuple

from domain.state import Item, ItemShelf
from domain.errors import InvalidCapacity, ItemNotAvailable, UnknownCode

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10
DEFAULT_FIRST_CODE = 101


class Inventory:
    """
    Inventory — 선반 컬렉션

    Usage:
        inventory = Inventory()  # 101..110
        inventory.add_item(Item(ItemType.COKE, 12), 102)
        item = inventory.get_item(102)
        inventory.mark_sold_out(102)
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        first_code: int = DEFAULT_FIRST_CODE,
    ):
        """
        Args:
            capacity: 선반 수 (> 0)
            first_code: 첫 선반 코드 (이후 +1씩 증가)

        Raises:
            InvalidCapacity: capacity <= 0
        """
        self.first_code = first_code
        self._shelves: Dict[int, ItemShelf] = {}
        self.initialize(capacity)

    def initialize(self, capacity: int) -> None:
        """
        빈 선반 capacity개 생성 (기존 선반은 폐기)

        Raises:
            InvalidCapacity: capacity <= 0
        """
        if capacity <= 0:
            raise InvalidCapacity(capacity)

        self._shelves = {
            code: ItemShelf(code=code)
            for code in range(self.first_code, self.first_code + capacity)
        }

    @property
    def capacity(self) -> int:
        return len(self._shelves)

    @property
    def codes(self) -> List[int]:
        return list(self._shelves.keys())

    @property
    def shelves(self) -> Tuple[ItemShelf, ...]:
        """선반 스냅샷 (code 순서)"""
        return tuple(self._shelves.values())

    def has_code(self, code: int) -> bool:
        return code in self._shelves

    def get_shelf(self, code: int) -> ItemShelf:
        """
        Raises:
            UnknownCode: code에 해당하는 선반 없음
        """
        shelf = self._shelves.get(code)
        if shelf is None:
            raise UnknownCode(code)
        return shelf

    def add_item(self, item: Item, code: int) -> None:
        """
        선반에 상품 적재 (sold_out 해제)

        Raises:
            UnknownCode: code에 해당하는 선반 없음
        """
        shelf = self.get_shelf(code)
        shelf.item = item
        shelf.sold_out = False
        logger.debug(f"Stocked {item.type.value} ({item.price}c) at {code}")

    def get_item(self, code: int) -> Item:
        """
        Raises:
            UnknownCode: code에 해당하는 선반 없음
            ItemNotAvailable: 상품 없음 or sold_out
        """
        shelf = self.get_shelf(code)
        if not shelf.is_available():
            raise ItemNotAvailable(code)
        return shelf.item

    def find_item(self, code: int) -> Optional[Item]:
        """배출 가능한 상품 조회 (없으면 None, 예외 없음)"""
        shelf = self._shelves.get(code)
        if shelf is None or not shelf.is_available():
            return None
        return shelf.item

    def mark_sold_out(self, code: int) -> None:
        """
        선반 품절 처리 (idempotent)

        Raises:
            UnknownCode: code에 해당하는 선반 없음
        """
        shelf = self.get_shelf(code)
        shelf.sold_out = True

    def available_codes(self) -> List[int]:
        """배출 가능한 선반 코드 목록"""
        return [code for code, shelf in self._shelves.items() if shelf.is_available()]
