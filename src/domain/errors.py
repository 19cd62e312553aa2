"""
Domain Errors

모든 에러는 로컬/비치명적이며, 호출한 operation의 최종 결과로 동기 전달된다.
VendingMachine 상태는 항상 IDLE 또는 SELECTION(유지)로 남는다.
"""

from typing import List, Optional

from domain.state import Coin


class VendingError(Exception):
    """Vending machine 에러 base"""

    pass


class InvalidCode(VendingError):
    """선택한 코드에 해당하는 선반 없음"""

    def __init__(self, code: int):
        self.code = code
        super().__init__(f"Invalid product code: {code}")


class SoldOut(VendingError):
    """선반이 비어 있거나 품절 처리됨"""

    def __init__(self, code: int):
        self.code = code
        super().__init__(f"Product sold out: {code}")


class InsufficientPayment(VendingError):
    """
    투입 금액 < 가격

    refund: 자동 환불된 코인 (투입 순서 유지)
    """

    def __init__(
        self,
        code: int,
        price: int,
        paid: int,
        refund: Optional[List[Coin]] = None,
    ):
        self.code = code
        self.price = price
        self.paid = paid
        self.refund = list(refund) if refund else []
        super().__init__(
            f"Insufficient payment for {code}: paid {paid}, price {price}"
        )


class UnknownCode(VendingError):
    """Inventory 수준: 코드에 해당하는 선반 없음"""

    def __init__(self, code: int):
        self.code = code
        super().__init__(f"No shelf with code {code}")


class ItemNotAvailable(VendingError):
    """Inventory 수준: 선반에 상품이 없거나 sold_out"""

    def __init__(self, code: int):
        self.code = code
        super().__init__(f"Item not available at {code}")


class InvalidCapacity(VendingError):
    """Inventory 생성 시 capacity <= 0"""

    def __init__(self, capacity: int):
        self.capacity = capacity
        super().__init__(f"Inventory capacity must be > 0, got {capacity}")
