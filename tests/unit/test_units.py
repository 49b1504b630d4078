"""
Sanity-тест для модуля Units

Проверяет:
1. Конверсии сумма ↔ fixed-point для 18 и 6 decimals
2. Округление вниз и запрет float
3. ppm → fixed-point доля, basis points
"""

from decimal import Decimal

import pytest

from src.core.domain.units import (
    BPS_DENOMINATOR,
    PPM_DENOMINATOR,
    SUPPLY_DECIMALS,
    bps_of,
    bps_to_fraction,
    from_fixed,
    ppm_to_fixed,
    to_fixed,
)
from src.core.math.fixed_point import PRECISION


class TestToFixed:
    """Тесты для to_fixed"""

    def test_supply_decimals(self) -> None:
        assert SUPPLY_DECIMALS == 18
        assert to_fixed("1") == PRECISION
        assert to_fixed("1.5") == 1_500_000_000_000_000_000

    def test_reserve_decimals(self) -> None:
        """USDC: 6 decimals"""
        assert to_fixed("100", decimals=6) == 100_000_000
        assert to_fixed(Decimal("0.000001"), decimals=6) == 1

    def test_int_input(self) -> None:
        assert to_fixed(1_000) == 1_000 * PRECISION

    def test_rounds_down(self) -> None:
        assert to_fixed("0.0000019", decimals=6) == 1
        assert to_fixed("1.9999999", decimals=0) == 1

    def test_float_rejected(self) -> None:
        with pytest.raises(ValueError, match="float"):
            to_fixed(1.5)  # type: ignore[arg-type]

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            to_fixed("-1")

    def test_negative_decimals_rejected(self) -> None:
        with pytest.raises(ValueError, match="decimals"):
            to_fixed("1", decimals=-1)


class TestFromFixed:
    """Тесты для from_fixed"""

    def test_supply(self) -> None:
        assert from_fixed(1_500_000_000_000_000_000) == Decimal("1.5")

    def test_reserve(self) -> None:
        assert from_fixed(40_126_306, decimals=6) == Decimal("40.126306")

    def test_inverse_of_to_fixed(self) -> None:
        """Обратимость для сумм, представимых без потерь"""
        for amount in ["0", "1", "0.000000000000000001", "123456.789"]:
            assert from_fixed(to_fixed(amount)) == Decimal(amount)


class TestPpmAndBps:
    """Тесты ppm / bps конверсий"""

    def test_ppm_to_fixed(self) -> None:
        assert PPM_DENOMINATOR == 1_000_000
        assert ppm_to_fixed(100_000) == PRECISION // 10
        assert ppm_to_fixed(PPM_DENOMINATOR) == PRECISION

    def test_ppm_truncates(self) -> None:
        assert ppm_to_fixed(1) == 10**12

    def test_bps_of(self) -> None:
        assert BPS_DENOMINATOR == 10_000
        assert bps_of(1_000_000, 30) == 3_000
        assert bps_of(9_999, 1) == 0

    def test_bps_to_fraction(self) -> None:
        assert bps_to_fraction(30) == Decimal("0.003")
        assert bps_to_fraction(BPS_DENOMINATOR) == Decimal("1")


class TestSharedDenominators:
    """Знаменатели ppm / bps определены только здесь и переиспользуются curve"""

    def test_curve_modules_use_unit_constants(self) -> None:
        from src.curve import formulas, impact, quotes

        assert formulas.PPM_DENOMINATOR is PPM_DENOMINATOR
        assert impact.BPS_DENOMINATOR is BPS_DENOMINATOR
        assert quotes.BPS_DENOMINATOR is BPS_DENOMINATOR
        assert not hasattr(formulas, "PPM")
