"""
Fixed-Point Kernel — pow / ln / exp в 18-десятичном представлении

Вещественное число r представлено целым round_down(r * 10^18):
"1.0" ⇒ PRECISION = 10^18.

Модуль реализует три примитива, на которых построены формулы bonding curve:
- fixed_pow(base, exponent): binomial-разложение для exponent < 1%,
  иначе exp(exponent * ln(base))
- ln(x): масштабирование делением/умножением на 3 + ряд Тейлора (8 членов)
- exp(x): сведение делением пополам + ряд Тейлора (до 10 членов) + возведение
  в квадрат k раз

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все функции чистые: одинаковые входы → бит-в-бит одинаковый результат
2. Фиксированное число членов рядов (3 / 8 / 10), без адаптивной сходимости
3. Вся арифметика checked: переполнение → FixedPointOverflow, а не wraparound
4. ln() воспроизводит задеплоенное поведение: компенсация масштаба k, а не
   k * ln(3). Это НЕ ошибка, которую можно "исправить": от этого значения
   зависит историческое on-chain состояние. Корректный логарифм — ln_exact()

ТОЧНОСТЬ (контракт, вызывающая сторона обязана ограничить входы):
    fixed_pow: ±0.1%  для base ∈ [0.5, 2.0], exponent ∈ [0, 2.0]
    ln:        ±0.01% для x ∈ [0.3, 3.0] (относительно реализованной формулы)
    exp:       ±0.1%  для x ∈ [-10, 10]
"""

from typing import Final

from src.core.math.checked_arithmetic import (
    INT256_MAX,
    INT256_MIN,
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
    mul_div,
    require_uint256,
)
from src.core.math.errors import DivisionByZero, LnUndefined, PowerUnderflow

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# 1.0 в fixed-point
PRECISION: Final[int] = 10**18

# Порог ветки binomial-разложения в fixed_pow: exponent < 1%
SMALL_EXPONENT_THRESHOLD: Final[int] = PRECISION // 100

# Границы масштабирования ln: x / 3^k ∈ [1/3, 3]
LN_RESCALE_UPPER: Final[int] = 3 * PRECISION
LN_RESCALE_LOWER: Final[int] = PRECISION // 3

# Количество членов ряда ln(1+y)
LN_SERIES_TERMS: Final[int] = 8

# Граница сведения exp: |x| <= 10
EXP_REDUCTION_LIMIT: Final[int] = 10 * PRECISION

# Максимальное количество членов ряда exp
EXP_SERIES_TERMS: Final[int] = 10

# ln(2) в fixed-point (для ln_exact)
LN2: Final[int] = 693_147_180_559_945_309

# Количество членов ряда atanh в ln_exact
LN_EXACT_SERIES_TERMS: Final[int] = 10


# =============================================================================
# POW
# =============================================================================


def fixed_pow(base: int, exponent: int) -> int:
    """
    base^exponent в fixed-point.

    Ветки:
        exponent == 0           → PRECISION (x^0 = 1)
        base == 0               → 0
        base == PRECISION       → PRECISION (1^x = 1)
        exponent < 1%           → binomial-разложение (1+x)^n до x^3
        иначе                   → exp(exponent * ln(base) / PRECISION)

    Args:
        base: Основание (fixed-point, >= 0)
        exponent: Показатель (fixed-point, >= 0)

    Returns:
        Результат (fixed-point)

    Raises:
        PowerUnderflow: binomial-ветка дала результат <= 0
        FixedPointOverflow: переполнение промежуточных значений
        ValueError: base или exponent не uint256

    Examples:
        >>> fixed_pow(2 * PRECISION, 0) == PRECISION
        True
        >>> fixed_pow(0, PRECISION)
        0
    """
    require_uint256(base, "base")
    require_uint256(exponent, "exponent")

    if exponent == 0:
        return PRECISION

    if base == 0:
        return 0

    if base == PRECISION:
        return PRECISION

    if exponent < SMALL_EXPONENT_THRESHOLD:
        return _pow_binomial(base, exponent)

    ln_base = ln(base)
    scaled = checked_div(checked_mul(exponent, ln_base, signed=True), PRECISION, signed=True)
    return exp(scaled)


def _pow_binomial(base: int, n: int) -> int:
    """
    (1 + x)^n ≈ 1 + n·x + n(n-1)/2·x² + n(n-1)(n-2)/6·x³, x = base - 1.

    Избегает round-trip через ln/exp на малых показателях, где ошибка
    ln/exp доминирует над результатом.
    """
    x = base - PRECISION

    term1 = mul_div(n, x, PRECISION, signed=True)

    term2 = mul_div(n, n - PRECISION, PRECISION, signed=True)
    term2 = mul_div(term2, x, PRECISION, signed=True)
    term2 = mul_div(term2, x, PRECISION, signed=True)
    term2 = checked_div(term2, 2, signed=True)

    term3 = mul_div(term2, n - 2 * PRECISION, PRECISION, signed=True)
    term3 = mul_div(term3, x, PRECISION, signed=True)
    term3 = checked_div(term3, 3, signed=True)

    result = checked_add(PRECISION, term1, signed=True)
    result = checked_add(result, term2, signed=True)
    result = checked_add(result, term3, signed=True)

    if result <= 0:
        raise PowerUnderflow(
            f"Binomial expansion underflow: base={base}, exponent={n}, result={result}"
        )

    return result


# =============================================================================
# LN
# =============================================================================


def ln(x: int) -> int:
    """
    Натуральный логарифм в задеплоенной (on-chain) форме.

    Алгоритм:
        1. Масштабирование: делим/умножаем x на 3, пока x/3^k ∈ [1/3, 3]
           (k > 0 — деления, k < 0 — умножения)
        2. Ряд Тейлора ln(1+y) = y - y²/2 + y³/3 - ... - y⁸/8 (8 членов)
        3. result = series + k·PRECISION

    ВНИМАНИЕ: шаг 3 прибавляет k, а не k·ln(3). Это воспроизведение
    задеплоенной версии, на которую откалиброваны формулы curve и
    историческое состояние. Не исправлять. Математически корректный
    логарифм: ln_exact().

    Args:
        x: Аргумент (fixed-point, > 0)

    Returns:
        Знаковый результат (fixed-point)

    Raises:
        LnUndefined: x == 0
        ValueError: x не uint256

    Examples:
        >>> ln(PRECISION)
        0
    """
    require_uint256(x, "x")

    if x == 0:
        raise LnUndefined("ln(0) is undefined")

    k = 0
    y = x

    while y > LN_RESCALE_UPPER:
        y //= 3
        k += 1

    while y < LN_RESCALE_LOWER:
        y = checked_mul(y, 3)
        k -= 1

    z = y - PRECISION
    result = 0
    term = z

    for i in range(1, LN_SERIES_TERMS + 1):
        if i % 2 == 1:
            result = checked_add(result, checked_div(term, i, signed=True), signed=True)
        else:
            result = checked_sub(result, checked_div(term, i, signed=True), signed=True)
        term = mul_div(term, z, PRECISION, signed=True)

    # Задеплоенная компенсация масштаба: k, а не k * ln(3)
    return checked_add(result, checked_mul(k, PRECISION, signed=True), signed=True)


def ln_exact(x: int) -> int:
    """
    Математически корректный натуральный логарифм.

    Масштабирование степенями двойки в [1, 2), затем
    ln(y) = 2·atanh(u) = 2·(u + u³/3 + u⁵/5 + ...), u = (y-1)/(y+1) ∈ [0, 1/3),
    LN_EXACT_SERIES_TERMS членов, плюс k·ln(2).

    Не используется формулами curve (они обязаны использовать ln()).

    Raises:
        LnUndefined: x == 0
    """
    require_uint256(x, "x")

    if x == 0:
        raise LnUndefined("ln(0) is undefined")

    k = 0
    y = x

    while y >= 2 * PRECISION:
        y //= 2
        k += 1

    while y < PRECISION:
        y *= 2
        k -= 1

    u = mul_div(y - PRECISION, PRECISION, y + PRECISION)
    u_squared = mul_div(u, u, PRECISION)

    series = 0
    term = u
    for i in range(LN_EXACT_SERIES_TERMS):
        series += term // (2 * i + 1)
        term = mul_div(term, u_squared, PRECISION)

    return checked_add(2 * series, checked_mul(k, LN2, signed=True), signed=True)


# =============================================================================
# EXP
# =============================================================================


def exp(x: int) -> int:
    """
    e^x в fixed-point, x может быть отрицательным.

    Алгоритм:
        - x < 0: PRECISION² / exp(|x|)
        - Сведение: x / 2^k, пока x <= 10
        - Ряд Тейлора 1 + x + x²/2! + ... + x¹⁰/10!, с остановкой, как только
          член обнулился при округлении
        - Возведение результата в квадрат k раз (result^(2^k))

    Args:
        x: Показатель (знаковый fixed-point)

    Returns:
        Результат (fixed-point, >= 0)

    Raises:
        DivisionByZero: x < 0 и exp(|x|) == 0
        FixedPointOverflow: результат не помещается в 256 бит
        ValueError: x вне диапазона int256

    Examples:
        >>> exp(0) == PRECISION
        True
    """
    if isinstance(x, bool) or not isinstance(x, int):
        raise ValueError(f"x must be an integer, got {type(x).__name__}")

    if x < INT256_MIN or x > INT256_MAX:
        raise ValueError(f"x must be an int256, got {x}")

    if x < 0:
        denominator = exp(checked_sub(0, x, signed=True))
        if denominator == 0:
            raise DivisionByZero(f"exp({x}): exp(|x|) evaluated to zero")
        return checked_div(PRECISION * PRECISION, denominator)

    k = 0
    while x > EXP_REDUCTION_LIMIT:
        x //= 2
        k += 1

    result = PRECISION
    term = PRECISION

    for i in range(1, EXP_SERIES_TERMS + 1):
        term = mul_div(term, x, PRECISION) // i
        if term == 0:
            break
        result = checked_add(result, term)

    for _ in range(k):
        result = mul_div(result, result, PRECISION)

    return result
