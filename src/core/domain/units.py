"""
Units — Централизованный модуль конверсии единиц

Единственный допустимый способ преобразований между:
- человекочитаемыми суммами (Decimal / str) и fixed-point целыми
- ppm (reserve ratio) и fixed-point долей
- basis points и долями

ЗАПРЕЩЕНО смешивать единицы без явного конвертера из этого модуля.
Конверсии в целые всегда округляют вниз (truncation), как и ядро.
"""

from decimal import ROUND_DOWN, Decimal, localcontext
from typing import Final

from src.core.math.fixed_point import PRECISION

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Десятичность supply-токена
SUPPLY_DECIMALS: Final[int] = 18

# Знаменатель ppm
PPM_DENOMINATOR: Final[int] = 1_000_000

# Знаменатель basis points
BPS_DENOMINATOR: Final[int] = 10_000

# Точность Decimal-контекста для конверсий (достаточно для uint256)
_DECIMAL_PRECISION: Final[int] = 100


# =============================================================================
# FIXED-POINT
# =============================================================================


def to_fixed(amount: Decimal | str | int, decimals: int = SUPPLY_DECIMALS) -> int:
    """
    Конверсия: сумма → целое в единицах 10^-decimals

    Args:
        amount: Сумма (Decimal, строка или int); float запрещён
        decimals: Десятичность (18 для supply, например 6 для USDC)

    Returns:
        floor(amount · 10^decimals)

    Raises:
        ValueError: amount — float, отрицательный или decimals < 0

    Examples:
        >>> to_fixed("1.5")
        1500000000000000000
        >>> to_fixed("100", decimals=6)
        100000000
    """
    if isinstance(amount, float):
        raise ValueError("float amounts are not allowed, use Decimal or str")

    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        value = Decimal(amount)
        if value < 0:
            raise ValueError(f"amount must be non-negative, got {amount}")
        scaled = (value * (Decimal(10) ** decimals)).to_integral_value(rounding=ROUND_DOWN)

    return int(scaled)


def from_fixed(value: int, decimals: int = SUPPLY_DECIMALS) -> Decimal:
    """
    Конверсия: целое в единицах 10^-decimals → Decimal

    Examples:
        >>> from_fixed(1500000000000000000)
        Decimal('1.5')
    """
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        return (Decimal(value) / (Decimal(10) ** decimals)).normalize()


# =============================================================================
# PPM / BPS
# =============================================================================


def ppm_to_fixed(ppm: int) -> int:
    """
    Конверсия: ppm → fixed-point доля

    Examples:
        >>> ppm_to_fixed(100_000)
        100000000000000000
    """
    return ppm * PRECISION // PPM_DENOMINATOR


def bps_of(amount: int, bps: int) -> int:
    """amount · bps / 10_000 (округление вниз)."""
    return amount * bps // BPS_DENOMINATOR


def bps_to_fraction(bps: int) -> Decimal:
    """
    Конверсия basis points в дробь.

    Examples:
        >>> bps_to_fraction(30)
        Decimal('0.003')
    """
    return Decimal(bps) / Decimal(BPS_DENOMINATOR)
