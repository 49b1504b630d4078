"""
Fixed-Point Errors — таксономия ошибок ядра

Все ошибки локальные и невосстановимые в точке возникновения:
повтор вызова чистой функции с теми же входами даёт ту же ошибку.
Вызывающая сторона решает, отклонить ли сделку; внутренних retry нет.

Иерархия:
    FixedPointError (ArithmeticError)
    ├── PowerUnderflow      — binomial-ветка pow дала результат <= 0
    ├── LnUndefined         — ln(0)
    ├── DivisionByZero      — деление на ноль (в т.ч. exp для x < 0)
    └── FixedPointOverflow  — выход за диапазон uint256/int256
"""


class FixedPointError(ArithmeticError):
    """Базовая ошибка fixed-point вычислений."""

    pass


class PowerUnderflow(FixedPointError):
    """
    Binomial-разложение pow() дало неположительный промежуточный результат.

    Сигнализирует, что пара (base, exponent) вне допустимого домена ветки
    малых показателей.
    """

    pass


class LnUndefined(FixedPointError):
    """ln() вызван с нулевым аргументом."""

    pass


class DivisionByZero(FixedPointError):
    """Деление на ноль в fixed-point арифметике."""

    pass


class FixedPointOverflow(FixedPointError):
    """
    Переполнение checked-арифметики.

    Аналог revert при overflow/underflow в 256-битной арифметике:
    результат никогда не "заворачивается" молча.
    """

    pass
