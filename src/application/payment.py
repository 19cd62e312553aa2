"""
src/application/payment.py
Payment — 투입 금액 합산 / 충분성 판정 / 거스름돈 계산 (순수 함수)

원칙:
- change = total_paid - price (scalar, 코인 분해 없음)
- breakdown_change()는 선택 helper: 상태 머신은 사용하지 않음
"""

from typing import Iterable, List

from domain.state import Coin

# 큰 단위부터 (greedy 분해 순서)
CANONICAL_COINS = (Coin.QUARTER, Coin.DIME, Coin.NICKEL, Coin.PENNY)


def total_paid(coins: Iterable[Coin]) -> int:
    """투입 코인 합계 (cents, 순서 무관)"""
    return sum(coin.value for coin in coins)


def is_payment_sufficient(coins: Iterable[Coin], price: int) -> bool:
    return total_paid(coins) >= price


def calculate_change(coins: Iterable[Coin], price: int) -> int:
    """
    거스름돈 계산

    Args:
        coins: 투입 코인
        price: 상품 가격 (cents)

    Returns:
        change: total_paid - price (>= 0)

    Raises:
        ValueError: 금액 부족 (호출 전에 is_payment_sufficient로 확인)
    """
    change = total_paid(coins) - price
    if change < 0:
        raise ValueError(f"Payment short by {-change} cents")
    return change


def breakdown_change(amount: int) -> List[Coin]:
    """
    거스름돈을 코인으로 분해 (greedy: QUARTER → DIME → NICKEL → PENNY)

    US 코인 체계는 canonical이므로 greedy 결과가 최소 개수.

    Example:
        >>> breakdown_change(18)
        [Coin.DIME, Coin.NICKEL, Coin.PENNY, Coin.PENNY, Coin.PENNY]

    Raises:
        ValueError: amount < 0
    """
    if amount < 0:
        raise ValueError(f"Change amount must be >= 0, got {amount}")

    coins: List[Coin] = []
    remaining = amount
    for coin in CANONICAL_COINS:
        count, remaining = divmod(remaining, coin.value)
        coins.extend([coin] * count)
    return coins
