"""
Тесты для Fixed-Point Kernel — pow / ln / exp

Проверяет:
1. Граничные случаи pow (x^0, 0^x, 1^x)
2. Binomial-ветку pow для exponent < 1%
3. Задеплоенное поведение ln (компенсация k вместо k·ln(3))
4. ln_exact как математически корректный логарифм
5. exp: ряд Тейлора, сведение делением пополам, отрицательные аргументы
6. Round-trip exp(ln(x)) и детерминизм
"""

import pytest

from src.core.math.errors import (
    DivisionByZero,
    FixedPointError,
    FixedPointOverflow,
    LnUndefined,
    PowerUnderflow,
)
from src.core.math.fixed_point import (
    LN2,
    PRECISION,
    SMALL_EXPONENT_THRESHOLD,
    exp,
    fixed_pow,
    ln,
    ln_exact,
)

P = PRECISION


def _fixed(value: str) -> int:
    whole, _, frac = value.partition(".")
    frac = (frac + "0" * 18)[:18]
    sign = -1 if whole.startswith("-") else 1
    return sign * (abs(int(whole or "0")) * P + int(frac))


def _close(actual: int, expected: int, tolerance: int) -> bool:
    return abs(actual - expected) <= tolerance


# =============================================================================
# ТЕСТЫ POW
# =============================================================================


class TestFixedPow:
    """Тесты для fixed_pow"""

    @pytest.mark.parametrize("base", [0, 1, P // 2, P, 2 * P, 10**30])
    def test_zero_exponent_is_one(self, base: int) -> None:
        """x^0 = 1 для любого основания"""
        assert fixed_pow(base, 0) == P

    @pytest.mark.parametrize("exponent", [1, P // 1000, P, 5 * P])
    def test_zero_base_is_zero(self, exponent: int) -> None:
        """0^x = 0"""
        assert fixed_pow(0, exponent) == 0

    @pytest.mark.parametrize("exponent", [1, P // 1000, P, 5 * P])
    def test_one_base_is_one(self, exponent: int) -> None:
        """1^x = 1"""
        assert fixed_pow(P, exponent) == P

    def test_typical_crr_case(self) -> None:
        """1.1^0.1 ≈ 1.00957 (10% CRR)"""
        result = fixed_pow(_fixed("1.1"), _fixed("0.1"))
        assert _close(result, _fixed("1.00957"), _fixed("0.001"))

    def test_square_root_case(self) -> None:
        """1.5^0.5 ≈ 1.2247"""
        result = fixed_pow(_fixed("1.5"), _fixed("0.5"))
        assert _close(result, _fixed("1.2247"), _fixed("0.001"))

    def test_deployed_behavior_for_integer_powers(self) -> None:
        """2^2 через задеплоенный ln: ≈ 3.557, а не 4"""
        result = fixed_pow(2 * P, 2 * P)
        assert 3_500_000_000_000_000_000 < result < 3_600_000_000_000_000_000
        assert _close(result, 4 * P, P)

    def test_matches_exp_of_scaled_ln(self) -> None:
        """pow(x, y) == exp(y · ln(x)) вне binomial-ветки"""
        base = _fixed("1.5")
        exponent = _fixed("0.3")
        assert fixed_pow(base, exponent) == exp(exponent * ln(base) // P)

    def test_small_exponent_binomial_above_one(self) -> None:
        """Binomial-ветка: 1.1^0.005 ≈ 1.0004767"""
        exponent = 5 * 10**15
        assert exponent < SMALL_EXPONENT_THRESHOLD
        result = fixed_pow(_fixed("1.1"), exponent)
        assert _close(result, _fixed("1.000476663"), 10**13)

    def test_small_exponent_binomial_below_one(self) -> None:
        """Binomial-ветка: 0.9^0.005 ≈ 0.9994733"""
        result = fixed_pow(_fixed("0.9"), 5 * 10**15)
        assert _close(result, _fixed("0.999473333"), 10**13)
        assert result < P

    def test_branches_agree_near_threshold(self) -> None:
        """Binomial и ln/exp ветки согласованы на границе 1%"""
        base = _fixed("1.1")
        below = fixed_pow(base, SMALL_EXPONENT_THRESHOLD - 1)
        at = fixed_pow(base, SMALL_EXPONENT_THRESHOLD)
        assert _close(below, at, 10**13)

    def test_negative_input_rejected(self) -> None:
        """Отрицательные входы не являются uint256"""
        with pytest.raises(ValueError, match="uint256"):
            fixed_pow(-1, P)
        with pytest.raises(ValueError, match="uint256"):
            fixed_pow(P, -1)


# =============================================================================
# ТЕСТЫ LN
# =============================================================================


class TestLn:
    """Тесты для ln (задеплоенная форма)"""

    def test_ln_one_is_zero(self) -> None:
        assert ln(P) == 0

    def test_ln_zero_raises(self) -> None:
        with pytest.raises(LnUndefined):
            ln(0)

    def test_ln_two_is_truncated_series(self) -> None:
        """ln(2) = 1 - 1/2 + ... - 1/8 ≈ 0.6345 (8 членов, без масштабирования)"""
        assert _close(ln(2 * P), 634_523_809_523_809_523, 10**3)

    def test_ln_e_stays_bounded(self) -> None:
        """ln(e) с задеплоенной точностью остаётся в (-5, 5)"""
        result = ln(2_718_281_828_459_045_235)
        assert -5 * P < result < 5 * P

    def test_scaling_down_adds_k(self) -> None:
        """ln(10): 10/9 ≈ 1.111, k=2 → 2 + ln(1.111) ≈ 2.1054"""
        result = ln(10 * P)
        assert _close(result, 2_105_360_515_657_826_000, 10**12)
        assert _close(result, _fixed("2.3026"), _fixed("0.2"))

    def test_scaling_up_subtracts_k(self) -> None:
        """ln(0.1): 0.9, k=-2 → -2 + ln(0.9) ≈ -2.1054"""
        result = ln(P // 10)
        assert _close(result, -2_105_360_515_657_826_000, 10**12)

    def test_rescale_step_adds_exactly_one(self) -> None:
        """Каждое деление на 3 добавляет ровно 1.0, а не ln(3)"""
        assert ln(45 * P // 10) - ln(15 * P // 10) == P
        assert ln(27 * P) - ln(9 * P) == P

    def test_sign(self) -> None:
        assert ln(P // 2) < 0
        assert ln(3 * P // 2) > 0

    def test_differs_from_exact_log(self) -> None:
        """Задеплоенный ln не совпадает с ln_exact"""
        assert abs(ln(10 * P) - ln_exact(10 * P)) > _fixed("0.19")


class TestLnExact:
    """Тесты для ln_exact (корректный логарифм)"""

    def test_ln_exact_one(self) -> None:
        assert ln_exact(P) == 0

    def test_ln_exact_powers_of_two(self) -> None:
        assert ln_exact(2 * P) == LN2
        assert ln_exact(P // 2) == -LN2

    def test_ln_exact_three(self) -> None:
        assert _close(ln_exact(3 * P), 1_098_612_288_668_109_691, 10**9)

    def test_ln_exact_ten(self) -> None:
        assert _close(ln_exact(10 * P), 2_302_585_092_994_045_684, 10**9)

    def test_ln_exact_small_value(self) -> None:
        assert _close(ln_exact(P // 10), -2_302_585_092_994_045_684, 10**9)

    def test_ln_exact_zero_raises(self) -> None:
        with pytest.raises(LnUndefined):
            ln_exact(0)


# =============================================================================
# ТЕСТЫ EXP
# =============================================================================


class TestExp:
    """Тесты для exp"""

    def test_exp_zero_is_one(self) -> None:
        assert exp(0) == P

    def test_exp_one(self) -> None:
        assert _close(exp(P), _fixed("2.718"), _fixed("0.001"))

    def test_exp_minus_one(self) -> None:
        assert _close(exp(-P), _fixed("0.368"), _fixed("0.001"))

    def test_exp_five_truncated_series(self) -> None:
        """exp(5): 10 членов ряда ≈ 146.38 (истинное 148.41)"""
        result = exp(5 * P)
        assert 146 * P < result < 147 * P
        assert _close(result, _fixed("148.4"), 5 * P)

    def test_exp_minus_five(self) -> None:
        """exp(-5) = 1 / 146.38 ≈ 0.006832"""
        result = exp(-5 * P)
        assert 6_830_000_000_000_000 < result < 6_840_000_000_000_000

    def test_range_reduction_squares_result(self) -> None:
        """exp(20) сводится к exp(10) и возводится в квадрат"""
        half = exp(10 * P)
        assert exp(20 * P) == half * half // P

    def test_negative_is_reciprocal(self) -> None:
        positive = exp(2 * P)
        assert exp(-2 * P) == P * P // positive

    def test_overflow_raises(self) -> None:
        """Переполнение не заворачивается, а падает"""
        with pytest.raises(FixedPointOverflow):
            exp(1000 * P)
        with pytest.raises(FixedPointOverflow):
            exp(-1000 * P)

    def test_non_integer_rejected(self) -> None:
        with pytest.raises(ValueError):
            exp(True)
        with pytest.raises(ValueError):
            exp(1.0)


# =============================================================================
# ROUND-TRIP И ДЕТЕРМИНИЗМ
# =============================================================================


class TestRoundTrip:
    """exp(ln(x)) ≈ x"""

    @pytest.mark.parametrize(
        "x", ["0.3", "0.5", "0.75", "1", "1.25", "1.5", "2", "2.5", "3"]
    )
    def test_exp_of_ln_exact(self, x: str) -> None:
        """±0.11% на [0.3, 3] для корректного логарифма"""
        value = _fixed(x)
        result = exp(ln_exact(value))
        assert _close(result, value, value * 11 // 10_000)

    @pytest.mark.parametrize("x", ["0.9", "0.95", "1.05", "1.1"])
    def test_exp_of_deployed_ln_near_one(self, x: str) -> None:
        """Задеплоенный ln без масштабирования сходится около 1"""
        value = _fixed(x)
        result = exp(ln(value))
        assert _close(result, value, value * 11 // 10_000)


class TestDeterminism:
    """Повторные вызовы дают бит-в-бит одинаковый результат"""

    def test_repeated_calls_identical(self) -> None:
        base = _fixed("1.37")
        exponent = _fixed("0.42")
        first = (fixed_pow(base, exponent), ln(base), exp(exponent))
        for _ in range(5):
            assert (fixed_pow(base, exponent), ln(base), exp(exponent)) == first


class TestErrorTaxonomy:
    """Иерархия ошибок ядра"""

    @pytest.mark.parametrize(
        "error", [PowerUnderflow, LnUndefined, DivisionByZero, FixedPointOverflow]
    )
    def test_errors_are_arithmetic(self, error: type) -> None:
        assert issubclass(error, FixedPointError)
        assert issubclass(error, ArithmeticError)
