"""
tests/unit/test_inventory.py

Inventory 테스트 (선반 생성, 적재, 조회, 품절 처리)

Failure-mode tests:
- capacity <= 0 → InvalidCapacity
- 존재하지 않는 코드 → UnknownCode
- 빈 선반 / 품절 선반 조회 → ItemNotAvailable
"""

import pytest

from domain.state import Item, ItemType
from domain.errors import InvalidCapacity, ItemNotAvailable, UnknownCode
from application.inventory import Inventory


def test_default_inventory_has_ten_shelves_101_to_110():
    inventory = Inventory()

    assert inventory.capacity == 10
    assert inventory.codes == list(range(101, 111))
    assert all(shelf.item is None for shelf in inventory.shelves)
    assert all(shelf.sold_out is False for shelf in inventory.shelves)


def test_initialize_assigns_sequential_codes_from_first_code():
    inventory = Inventory(capacity=3, first_code=201)

    assert inventory.codes == [201, 202, 203]


@pytest.mark.parametrize("capacity", [0, -1])
def test_non_positive_capacity_raises_invalid_capacity(capacity):
    with pytest.raises(InvalidCapacity) as exc_info:
        Inventory(capacity=capacity)

    assert exc_info.value.capacity == capacity


def test_reinitialize_discards_existing_shelves():
    inventory = Inventory()
    inventory.add_item(Item(ItemType.COKE, 12), 102)

    inventory.initialize(2)

    assert inventory.codes == [101, 102]
    assert inventory.get_shelf(102).item is None


def test_add_item_then_get_item():
    inventory = Inventory()
    coke = Item(ItemType.COKE, 12)

    inventory.add_item(coke, 102)

    assert inventory.get_item(102) == coke
    assert inventory.available_codes() == [102]


def test_add_item_clears_sold_out():
    """
    Given: 102 품절 처리됨
    When: 102에 재적재
    Then: sold_out = False, 다시 조회 가능
    """
    inventory = Inventory()
    inventory.add_item(Item(ItemType.COKE, 12), 102)
    inventory.mark_sold_out(102)

    inventory.add_item(Item(ItemType.PEPSI, 15), 102)

    assert inventory.get_shelf(102).sold_out is False
    assert inventory.get_item(102).type == ItemType.PEPSI


def test_add_item_unknown_code_raises():
    inventory = Inventory()

    with pytest.raises(UnknownCode) as exc_info:
        inventory.add_item(Item(ItemType.SODA, 10), 111)

    assert exc_info.value.code == 111


def test_get_item_unknown_code_raises():
    with pytest.raises(UnknownCode):
        Inventory().get_item(100)


def test_get_item_on_empty_shelf_raises_not_available():
    with pytest.raises(ItemNotAvailable) as exc_info:
        Inventory().get_item(105)

    assert exc_info.value.code == 105


def test_get_item_on_sold_out_shelf_raises_not_available():
    """sold_out 선반은 item이 남아 있어도 조회 불가"""
    inventory = Inventory()
    inventory.add_item(Item(ItemType.JUICE, 20), 103)
    inventory.mark_sold_out(103)

    with pytest.raises(ItemNotAvailable):
        inventory.get_item(103)

    # item 참조는 유지됨
    assert inventory.get_shelf(103).item == Item(ItemType.JUICE, 20)
    assert inventory.find_item(103) is None


def test_mark_sold_out_is_idempotent():
    inventory = Inventory()
    inventory.add_item(Item(ItemType.COKE, 12), 102)

    inventory.mark_sold_out(102)
    inventory.mark_sold_out(102)

    assert inventory.get_shelf(102).sold_out is True


def test_mark_sold_out_unknown_code_raises():
    with pytest.raises(UnknownCode):
        Inventory().mark_sold_out(42)


def test_shelves_snapshot_is_a_tuple():
    inventory = Inventory(capacity=2)

    shelves = inventory.shelves

    assert isinstance(shelves, tuple)
    assert [shelf.code for shelf in shelves] == [101, 102]


def test_item_rejects_negative_price():
    with pytest.raises(ValueError):
        Item(ItemType.SODA, -1)
