"""
Impact Calculator — price impact сделки в basis points

Сравнение спот-цены до и после симулированной сделки:
    buy:  (new - old) · 10_000 / old, floor 0 если цена не выросла
    sell: (old - new) · 10_000 / old, floor 0 если цена не упала;
          продажа всего supply → MAX_IMPACT_BPS (100%)
"""

from typing import Final

from src.core.domain.units import BPS_DENOMINATOR
from src.core.math.checked_arithmetic import mul_div, require_uint256
from src.curve.formulas import calculate_buy, calculate_sell, calculate_spot_price

# Максимальный impact (продажа до нулевого supply)
MAX_IMPACT_BPS: Final[int] = 10_000


def calculate_buy_impact(supply: int, reserve: int, deposit: int, crr_ppm: int) -> int:
    """
    Price impact покупки в bps.

    Args:
        supply: Текущий supply (fixed-point)
        reserve: Текущий резерв
        deposit: Депозит резерва
        crr_ppm: Reserve ratio в ppm

    Returns:
        Impact в bps (>= 0); 0 для supply == 0 или reserve == 0
    """
    require_uint256(deposit, "deposit")

    if supply == 0 or reserve == 0:
        return 0

    old_price = calculate_spot_price(supply, reserve, crr_ppm)
    if old_price == 0:
        return 0

    tokens_out = calculate_buy(supply, reserve, deposit, crr_ppm)
    new_price = calculate_spot_price(supply + tokens_out, reserve + deposit, crr_ppm)

    if new_price <= old_price:
        return 0

    return mul_div(new_price - old_price, BPS_DENOMINATOR, old_price)


def calculate_sell_impact(supply: int, reserve: int, tokens: int, crr_ppm: int) -> int:
    """
    Price impact продажи в bps.

    Продажа, обнуляющая supply, возвращает MAX_IMPACT_BPS независимо от
    промежуточной математики цены.

    Returns:
        Impact в bps ∈ [0, 10_000]; 0 для supply == 0, reserve == 0
        или tokens > supply
    """
    require_uint256(tokens, "tokens")

    if supply == 0 or reserve == 0 or tokens > supply:
        return 0

    if supply - tokens == 0:
        return MAX_IMPACT_BPS

    old_price = calculate_spot_price(supply, reserve, crr_ppm)
    if old_price == 0:
        return 0

    reserve_out = calculate_sell(supply, reserve, tokens, crr_ppm)
    new_price = calculate_spot_price(supply - tokens, reserve - reserve_out, crr_ppm)

    if new_price >= old_price:
        return 0

    return mul_div(old_price - new_price, BPS_DENOMINATOR, old_price)
