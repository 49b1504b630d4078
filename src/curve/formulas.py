"""
Curve Formulas — buy / sell / spot price для bonding curve

Формулы (w = crr_ppm / 1_000_000):
    Buy:   T = S · ((1 + E/R)^w - 1)
    Sell:  F = R · (1 - (1 - T/S)^(1/w))
    Spot:  P = R / (w · S)

Политика вырожденных входов: нулевой supply/reserve (и продажа больше, чем
существует) — это no-op сделка с результатом 0, а не ошибка.

Единицы:
    supply / tokens — fixed-point 10^18
    reserve / deposit — произвольная десятичность резерва (формулы
    оперируют отношениями и не зависят от неё)
"""

from src.core.domain.units import PPM_DENOMINATOR
from src.core.math.checked_arithmetic import checked_sub, mul_div, require_uint256
from src.core.math.fixed_point import PRECISION, fixed_pow


def calculate_buy(supply: int, reserve: int, deposit: int, crr_ppm: int) -> int:
    """
    Количество токенов, выпускаемых за депозит резерва.

    ratio    = 1 + deposit / reserve
    exponent = crr_ppm / PPM_DENOMINATOR
    tokens   = supply · (ratio^exponent - 1)

    Args:
        supply: Текущий supply (fixed-point)
        reserve: Текущий резерв
        deposit: Депозит резерва
        crr_ppm: Reserve ratio в ppm

    Returns:
        tokens_out (fixed-point); 0 для supply == 0, reserve == 0 или если
        ratio^exponent <= 1
    """
    require_uint256(supply, "supply")
    require_uint256(reserve, "reserve")
    require_uint256(deposit, "deposit")
    require_uint256(crr_ppm, "crr_ppm")

    if supply == 0 or reserve == 0:
        return 0

    ratio = PRECISION + mul_div(deposit, PRECISION, reserve)
    exponent = mul_div(crr_ppm, PRECISION, PPM_DENOMINATOR)

    power = fixed_pow(ratio, exponent)
    if power <= PRECISION:
        return 0

    return mul_div(supply, checked_sub(power, PRECISION), PRECISION)


def calculate_sell(supply: int, reserve: int, tokens: int, crr_ppm: int) -> int:
    """
    Резерв, возвращаемый за сжигание токенов.

    base     = 1 - tokens / supply
    exponent = PPM_DENOMINATOR / crr_ppm
    reserve_out = reserve · (1 - base^exponent)

    Args:
        supply: Текущий supply (fixed-point)
        reserve: Текущий резерв
        tokens: Сжигаемые токены (fixed-point)
        crr_ppm: Reserve ratio в ppm

    Returns:
        reserve_out; 0 для supply == 0, reserve == 0, crr_ppm == 0,
        tokens > supply или если base^exponent >= 1
    """
    require_uint256(supply, "supply")
    require_uint256(reserve, "reserve")
    require_uint256(tokens, "tokens")
    require_uint256(crr_ppm, "crr_ppm")

    if supply == 0 or reserve == 0 or crr_ppm == 0:
        return 0

    # Нельзя продать больше, чем существует
    if tokens > supply:
        return 0

    token_ratio = mul_div(tokens, PRECISION, supply)
    base = PRECISION - token_ratio
    exponent = mul_div(PPM_DENOMINATOR, PRECISION, crr_ppm)

    power = fixed_pow(base, exponent)
    if power >= PRECISION:
        return 0

    return mul_div(reserve, PRECISION - power, PRECISION)


def calculate_spot_price(supply: int, reserve: int, crr_ppm: int) -> int:
    """
    Спот-цена P = R / (w · S): единицы резерва за 10^18 единиц supply.

    Returns 0 для supply == 0, crr_ppm == 0 и для supply, слишком малого
    относительно PRECISION (crr_ppm · supply / PRECISION == 0).
    """
    require_uint256(supply, "supply")
    require_uint256(reserve, "reserve")
    require_uint256(crr_ppm, "crr_ppm")

    if supply == 0 or crr_ppm == 0:
        return 0

    denominator = mul_div(crr_ppm, supply, PRECISION)
    if denominator == 0:
        return 0

    return mul_div(reserve, PPM_DENOMINATOR, denominator)
