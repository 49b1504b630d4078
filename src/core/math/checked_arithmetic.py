"""
Checked Arithmetic — 256-битная арифметика с явной проверкой переполнения

Python int не переполняется, поэтому семантика checked-арифметики
(revert при overflow) воспроизводится явно:
- Каждый результат проверяется на диапазон uint256 (или int256 для signed)
- Отрицательный результат в unsigned-операции — underflow
- Знаковое деление округляет к нулю (EVM sdiv), а не к минус бесконечности

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Выход за диапазон никогда не происходит молча (FixedPointOverflow)
2. Деление на ноль → DivisionByZero
3. Все операции детерминированы и воспроизводимы бит-в-бит
"""

from typing import Final

from src.core.math.errors import DivisionByZero, FixedPointOverflow

# =============================================================================
# ДИАПАЗОНЫ ЦЕЛЫХ
# =============================================================================

UINT256_MAX: Final[int] = 2**256 - 1

INT256_MIN: Final[int] = -(2**255)

INT256_MAX: Final[int] = 2**255 - 1


# =============================================================================
# ПРОВЕРКА ДИАПАЗОНА
# =============================================================================


def _check_range(value: int, signed: bool, op: str) -> int:
    if signed:
        if value < INT256_MIN or value > INT256_MAX:
            raise FixedPointOverflow(f"int256 overflow in {op}: {value}")
    else:
        if value < 0:
            raise FixedPointOverflow(f"uint256 underflow in {op}: {value}")
        if value > UINT256_MAX:
            raise FixedPointOverflow(f"uint256 overflow in {op}: {value}")
    return value


def require_uint256(value: int, name: str) -> int:
    """
    Валидация входного значения как uint256.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Returns:
        value без изменений

    Raises:
        ValueError: Если value не int, bool или вне [0, UINT256_MAX]
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")

    if value < 0 or value > UINT256_MAX:
        raise ValueError(f"{name} must be a uint256, got {value}")

    return value


# =============================================================================
# CHECKED ОПЕРАЦИИ
# =============================================================================


def checked_add(a: int, b: int, signed: bool = False) -> int:
    """Сложение с проверкой переполнения."""
    return _check_range(a + b, signed, "add")


def checked_sub(a: int, b: int, signed: bool = False) -> int:
    """
    Вычитание с проверкой переполнения.

    Для unsigned: a < b → FixedPointOverflow (underflow).
    """
    return _check_range(a - b, signed, "sub")


def checked_mul(a: int, b: int, signed: bool = False) -> int:
    """Умножение с проверкой переполнения."""
    return _check_range(a * b, signed, "mul")


def checked_div(a: int, b: int, signed: bool = False) -> int:
    """
    Целочисленное деление с округлением к нулю.

    Args:
        a: Делимое
        b: Делитель
        signed: Знаковая семантика (int256)

    Returns:
        trunc(a / b)

    Raises:
        DivisionByZero: Если b == 0
        FixedPointOverflow: Если результат вне диапазона (INT256_MIN / -1)

    Examples:
        >>> checked_div(7, 2)
        3
        >>> checked_div(-7, 2, signed=True)
        -3
    """
    if b == 0:
        raise DivisionByZero(f"division by zero: {a} / 0")

    quotient = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        quotient = -quotient

    return _check_range(quotient, signed, "div")


def mul_div(a: int, b: int, denominator: int, signed: bool = False) -> int:
    """
    a * b / denominator с проверкой промежуточного произведения.

    Промежуточное произведение обязано помещаться в 256 бит,
    как в исходной checked-арифметике (без full-precision mulDiv).
    """
    return checked_div(checked_mul(a, b, signed), denominator, signed)
