"""
Quotes — котировки сделок пула: комиссия, лимит размера, двухфазная цена

Чистые функции поверх Curve Formulas / Impact Calculator, воспроизводящие
квотирование пула:
- Trade fee (bps) удерживается со входа при покупке и с выхода при продаже
- Лимит размера сделки: доля текущего резерва (max_trade_bps) в фазе bonding
  curve; для покупки через порог: доля порогового резерва для curve-части
- Buy-only окно: до pool.buy_only_until продажи запрещены (SellsDisabled)
- Две фазы цены:
    FLAT_PRICE     — фиксированная цена, пока reserve < flat_curve_threshold
    BONDING_CURVE  — формулы curve; после graduated пул не возвращается во
                     flat-фазу, даже если резерв упал ниже порога
- Покупка, пересекающая порог, делится: flat-часть до порога, остаток по curve
- Защита от проскальзывания: net-выход ниже минимума → SlippageExceeded

Модуль не хранит состояние: PoolState передаётся вызывающей стороной.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Final

from src.core.contracts import validate_trade_request
from src.core.domain.pool import PoolState
from src.core.domain.units import BPS_DENOMINATOR, bps_of
from src.core.math.checked_arithmetic import mul_div, require_uint256
from src.core.math.fixed_point import PRECISION
from src.curve.formulas import calculate_buy, calculate_sell, calculate_spot_price
from src.curve.impact import calculate_buy_impact, calculate_sell_impact

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Допустимый диапазон reserve ratio пула (5% .. 50%)
MIN_CRR_PPM: Final[int] = 50_000
MAX_CRR_PPM: Final[int] = 500_000

# Trade fee по умолчанию (0.30%) и максимум (10%)
DEFAULT_TRADE_FEE_BPS: Final[int] = 30
MAX_TRADE_FEE_BPS: Final[int] = 1_000

# Лимит размера сделки по умолчанию (20% резерва) и жёсткий максимум (50%)
DEFAULT_MAX_TRADE_BPS: Final[int] = 2_000
MAX_TRADE_BPS_LIMIT: Final[int] = 5_000


# =============================================================================
# EXCEPTIONS
# =============================================================================


class QuoteRejected(ValueError):
    """Сделка отклонена правилами пула (не ошибка математики)."""

    pass


class TradeSizeExceeded(QuoteRejected):
    """Размер сделки превышает max_trade_bps текущего резерва."""

    pass


class SlippageExceeded(QuoteRejected):
    """Net-выход сделки ниже минимума, заданного вызывающей стороной."""

    pass


class SellsDisabled(QuoteRejected):
    """Продажа в buy-only окне пула (now < buy_only_until)."""

    pass


# =============================================================================
# TYPES
# =============================================================================


class PricingPhase(str, Enum):
    """Фаза ценообразования пула"""

    FLAT_PRICE = "flat_price"
    BONDING_CURVE = "bonding_curve"


@dataclass(frozen=True)
class CurveConfig:
    """Конфигурация квотирования пула.

    flat_curve_threshold == 0 отключает flat-фазу.
    """

    trade_fee_bps: int = DEFAULT_TRADE_FEE_BPS
    max_trade_bps: int = DEFAULT_MAX_TRADE_BPS
    flat_curve_threshold: int = 0  # Резерв, при котором пул переходит на curve
    flat_curve_price: int = 0  # Единицы резерва за 10^18 токенов

    def __post_init__(self) -> None:
        if not 0 <= self.trade_fee_bps <= MAX_TRADE_FEE_BPS:
            raise ValueError(
                f"trade_fee_bps must be in [0, {MAX_TRADE_FEE_BPS}], got {self.trade_fee_bps}"
            )
        if self.max_trade_bps <= 0:
            raise ValueError(f"max_trade_bps must be > 0, got {self.max_trade_bps}")
        if self.max_trade_bps > MAX_TRADE_BPS_LIMIT:
            raise ValueError(
                f"max_trade_bps too high: {self.max_trade_bps} > {MAX_TRADE_BPS_LIMIT}"
            )
        if self.flat_curve_threshold < 0:
            raise ValueError(
                f"flat_curve_threshold must be non-negative, got {self.flat_curve_threshold}"
            )
        if self.flat_curve_threshold > 0 and self.flat_curve_price <= 0:
            raise ValueError("flat_curve_price must be > 0 when flat phase is enabled")

    @property
    def flat_phase_enabled(self) -> bool:
        return self.flat_curve_threshold > 0


@dataclass(frozen=True)
class PhaseInfo:
    """Прогресс пула к порогу перехода на bonding curve."""

    phase: PricingPhase
    reserve: int
    threshold_reserve: int
    flat_price: int
    percent_to_threshold: int  # 0..100


@dataclass(frozen=True)
class BuyQuote:
    """Котировка покупки."""

    amount_in: int  # Gross резерв на входе
    fee: int  # Trade fee (единицы резерва)
    amount_in_after_fee: int  # Резерв, поступающий в пул
    tokens_out: int  # Токены к выпуску (fixed-point)
    # Для покупки через порог: рост от flat_curve_price до curve-цены после сделки
    price_impact_bps: int
    phase: PricingPhase  # Фаза до сделки
    crosses_threshold: bool  # Сделка переводит пул на bonding curve


@dataclass(frozen=True)
class SellQuote:
    """Котировка продажи."""

    tokens_in: int  # Сжигаемые токены (fixed-point)
    reserve_out_gross: int  # Резерв, уходящий из пула
    fee: int  # Trade fee (единицы резерва)
    reserve_out: int  # Net резерв продавцу
    price_impact_bps: int
    phase: PricingPhase


# =============================================================================
# PARAMETERS
# =============================================================================


def validate_crr_ppm(crr_ppm: int) -> None:
    """
    Валидация reserve ratio пула.

    Raises:
        ValueError: crr_ppm вне [MIN_CRR_PPM, MAX_CRR_PPM]
    """
    if not MIN_CRR_PPM <= crr_ppm <= MAX_CRR_PPM:
        raise ValueError(
            f"crr_ppm must be in [{MIN_CRR_PPM}, {MAX_CRR_PPM}], got {crr_ppm}"
        )


def apply_trade_fee(amount: int, fee_bps: int) -> tuple[int, int]:
    """
    Удержание trade fee.

    Args:
        amount: Gross сумма
        fee_bps: Комиссия в bps

    Returns:
        (net, fee), fee = amount · fee_bps / 10_000 (округление вниз)

    Examples:
        >>> apply_trade_fee(1_000_000, 30)
        (997000, 3000)
    """
    require_uint256(amount, "amount")
    fee = bps_of(amount, fee_bps)
    return amount - fee, fee


def _check_trade_size(amount: int, reserve: int, config: CurveConfig, side: str) -> None:
    max_amount = reserve * config.max_trade_bps // BPS_DENOMINATOR
    if amount > max_amount:
        logger.warning(
            "Rejected %s: amount=%d exceeds max trade size %d (%d bps of reserve %d)",
            side,
            amount,
            max_amount,
            config.max_trade_bps,
            reserve,
        )
        raise TradeSizeExceeded(
            f"Trade exceeds max size limit: {amount} > {max_amount} "
            f"({config.max_trade_bps} bps of reserve {reserve})"
        )


def _check_sells_enabled(pool: PoolState, now: int | None) -> None:
    if pool.buy_only_until == 0:
        return
    if now is None:
        raise ValueError("now is required for a pool with a buy-only window")
    if not pool.sells_enabled(now):
        logger.warning(
            "Rejected sell: buy-only window active until %d (now=%d)", pool.buy_only_until, now
        )
        raise SellsDisabled(f"Sells not enabled until {pool.buy_only_until}, now {now}")


def _check_slippage(amount_out: int, min_amount_out: int, side: str) -> None:
    if amount_out < min_amount_out:
        logger.warning(
            "Rejected %s: output %d below minimum %d", side, amount_out, min_amount_out
        )
        raise SlippageExceeded(f"Slippage exceeded: {amount_out} < {min_amount_out}")


# =============================================================================
# PHASES
# =============================================================================


def current_phase(pool: PoolState, config: CurveConfig) -> PricingPhase:
    """
    Текущая фаза ценообразования.

    BONDING_CURVE, если пул graduated, flat-фаза отключена или
    reserve >= flat_curve_threshold; иначе FLAT_PRICE.
    """
    if pool.graduated or not config.flat_phase_enabled:
        return PricingPhase.BONDING_CURVE

    if pool.reserve >= config.flat_curve_threshold:
        return PricingPhase.BONDING_CURVE

    return PricingPhase.FLAT_PRICE


def phase_info(pool: PoolState, config: CurveConfig) -> PhaseInfo:
    """Фаза и прогресс к порогу (100% после перехода на curve)."""
    phase = current_phase(pool, config)

    if phase is PricingPhase.BONDING_CURVE:
        percent = 100
    else:
        percent = min(100, pool.reserve * 100 // config.flat_curve_threshold)

    return PhaseInfo(
        phase=phase,
        reserve=pool.reserve,
        threshold_reserve=config.flat_curve_threshold,
        flat_price=config.flat_curve_price,
        percent_to_threshold=percent,
    )


def spot_price(pool: PoolState, config: CurveConfig) -> int:
    """Спот-цена с учётом фазы: flat_curve_price во flat-фазе."""
    if current_phase(pool, config) is PricingPhase.FLAT_PRICE:
        return config.flat_curve_price
    return calculate_spot_price(pool.supply, pool.reserve, pool.crr_ppm)


def flat_buy_tokens(reserve_in: int, flat_price: int) -> int:
    """Токены за reserve_in по фиксированной цене."""
    return mul_div(reserve_in, PRECISION, flat_price)


def flat_sell_reserve(tokens: int, flat_price: int) -> int:
    """Резерв за tokens по фиксированной цене."""
    return mul_div(tokens, flat_price, PRECISION)


def _crossing_impact(
    config: CurveConfig, supply_after: int, reserve_after: int, crr_ppm: int
) -> int:
    # Покупка через порог: от flat-цены до curve-цены после сделки
    new_price = calculate_spot_price(supply_after, reserve_after, crr_ppm)
    if new_price <= config.flat_curve_price:
        return 0
    return mul_div(
        new_price - config.flat_curve_price, BPS_DENOMINATOR, config.flat_curve_price
    )


# =============================================================================
# QUOTES
# =============================================================================


def quote_buy(
    pool: PoolState,
    amount_in: int,
    config: CurveConfig | None = None,
    min_tokens_out: int = 0,
) -> BuyQuote:
    """
    Котировка покупки токенов за amount_in резерва.

    Порядок:
    1. Лимит размера (BONDING_CURVE: по gross amount_in)
    2. Удержание trade fee со входа
    3. Расчёт токенов: flat / split через порог / curve. Curve-часть
       покупки через порог ограничена max_trade_bps от flat_curve_threshold
    4. Проверка min_tokens_out

    Args:
        pool: Снимок пула
        amount_in: Gross резерв на входе
        config: Конфигурация (default: CurveConfig())
        min_tokens_out: Минимум токенов (slippage)

    Returns:
        BuyQuote

    Raises:
        TradeSizeExceeded: amount_in > reserve · max_trade_bps / 10_000, либо
            curve-часть покупки через порог > threshold · max_trade_bps / 10_000
        SlippageExceeded: tokens_out < min_tokens_out
        ValueError: crr_ppm пула вне допустимого диапазона
    """
    config = config or CurveConfig()
    validate_crr_ppm(pool.crr_ppm)
    require_uint256(amount_in, "amount_in")

    phase = current_phase(pool, config)

    if phase is PricingPhase.BONDING_CURVE:
        _check_trade_size(amount_in, pool.reserve, config, "buy")

    net, fee = apply_trade_fee(amount_in, config.trade_fee_bps)
    crosses_threshold = False

    if phase is PricingPhase.FLAT_PRICE:
        room = config.flat_curve_threshold - pool.reserve
        if net < room:
            tokens_out = flat_buy_tokens(net, config.flat_curve_price)
            impact = 0
        else:
            # Flat-часть до порога, остаток по curve на пуле после flat-части
            crosses_threshold = True
            flat_tokens = flat_buy_tokens(room, config.flat_curve_price)
            remainder = net - room
            _check_trade_size(remainder, config.flat_curve_threshold, config, "buy")

            curve_supply = pool.supply + flat_tokens
            curve_tokens = calculate_buy(
                curve_supply, config.flat_curve_threshold, remainder, pool.crr_ppm
            )
            tokens_out = flat_tokens + curve_tokens
            impact = _crossing_impact(
                config,
                curve_supply + curve_tokens,
                config.flat_curve_threshold + remainder,
                pool.crr_ppm,
            )
            logger.debug(
                "Buy crosses flat threshold: flat_reserve=%d flat_tokens=%d "
                "curve_reserve=%d curve_tokens=%d",
                room,
                flat_tokens,
                remainder,
                curve_tokens,
            )
    else:
        tokens_out = calculate_buy(pool.supply, pool.reserve, net, pool.crr_ppm)
        impact = calculate_buy_impact(pool.supply, pool.reserve, net, pool.crr_ppm)

    _check_slippage(tokens_out, min_tokens_out, "buy")

    return BuyQuote(
        amount_in=amount_in,
        fee=fee,
        amount_in_after_fee=net,
        tokens_out=tokens_out,
        price_impact_bps=impact,
        phase=phase,
        crosses_threshold=crosses_threshold,
    )


def quote_sell(
    pool: PoolState,
    tokens_in: int,
    config: CurveConfig | None = None,
    min_reserve_out: int = 0,
    now: int | None = None,
) -> SellQuote:
    """
    Котировка продажи tokens_in токенов.

    Gross резерв считается по фазе (flat-цена с ограничением резервом пула,
    либо calculate_sell), лимит размера применяется к gross резерву
    (только BONDING_CURVE), trade fee удерживается с выхода.

    now (unix-секунды) обязателен для пула с buy-only окном
    (buy_only_until > 0): до этого момента продажи запрещены.

    Raises:
        SellsDisabled: now < pool.buy_only_until
        TradeSizeExceeded: gross резерв > reserve · max_trade_bps / 10_000
        SlippageExceeded: net резерв < min_reserve_out
        ValueError: now не передан для пула с buy-only окном
    """
    config = config or CurveConfig()
    validate_crr_ppm(pool.crr_ppm)
    require_uint256(tokens_in, "tokens_in")

    _check_sells_enabled(pool, now)

    phase = current_phase(pool, config)

    if phase is PricingPhase.FLAT_PRICE:
        if tokens_in > pool.supply:
            gross = 0
        else:
            gross = min(flat_sell_reserve(tokens_in, config.flat_curve_price), pool.reserve)
        impact = 0
    else:
        gross = calculate_sell(pool.supply, pool.reserve, tokens_in, pool.crr_ppm)
        _check_trade_size(gross, pool.reserve, config, "sell")
        impact = calculate_sell_impact(pool.supply, pool.reserve, tokens_in, pool.crr_ppm)

    net, fee = apply_trade_fee(gross, config.trade_fee_bps)

    _check_slippage(net, min_reserve_out, "sell")

    return SellQuote(
        tokens_in=tokens_in,
        reserve_out_gross=gross,
        fee=fee,
        reserve_out=net,
        price_impact_bps=impact,
        phase=phase,
    )


def quote_trade(
    request: Dict[str, Any], config: CurveConfig | None = None
) -> BuyQuote | SellQuote:
    """
    Котировка по запросу внешней стороны (контракт trade_request.json).

    Raises:
        jsonschema.ValidationError: запрос не соответствует контракту
    """
    validate_trade_request(request)

    pool = PoolState(**request["pool"])
    amount = request["amount"]
    min_amount_out = request.get("min_amount_out", 0)
    now = request.get("now")

    if request["side"] == "buy":
        return quote_buy(pool, amount, config, min_tokens_out=min_amount_out)
    return quote_sell(pool, amount, config, min_reserve_out=min_amount_out, now=now)
