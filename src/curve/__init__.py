"""
Bonding curve: формулы, price impact и котировки пула.
"""

# Curve Formulas
from src.curve.formulas import (
    calculate_buy,
    calculate_sell,
    calculate_spot_price,
)

# Impact Calculator
from src.curve.impact import (
    MAX_IMPACT_BPS,
    calculate_buy_impact,
    calculate_sell_impact,
)

# Quotes
from src.curve.quotes import (
    DEFAULT_MAX_TRADE_BPS,
    DEFAULT_TRADE_FEE_BPS,
    MAX_CRR_PPM,
    MAX_TRADE_BPS_LIMIT,
    MAX_TRADE_FEE_BPS,
    MIN_CRR_PPM,
    BuyQuote,
    CurveConfig,
    PhaseInfo,
    PricingPhase,
    QuoteRejected,
    SellQuote,
    SellsDisabled,
    SlippageExceeded,
    TradeSizeExceeded,
    apply_trade_fee,
    current_phase,
    flat_buy_tokens,
    flat_sell_reserve,
    phase_info,
    quote_buy,
    quote_sell,
    quote_trade,
    spot_price,
    validate_crr_ppm,
)

__all__ = [
    # Formulas
    "calculate_buy",
    "calculate_sell",
    "calculate_spot_price",
    # Impact
    "MAX_IMPACT_BPS",
    "calculate_buy_impact",
    "calculate_sell_impact",
    # Quotes: Constants
    "MIN_CRR_PPM",
    "MAX_CRR_PPM",
    "DEFAULT_TRADE_FEE_BPS",
    "MAX_TRADE_FEE_BPS",
    "DEFAULT_MAX_TRADE_BPS",
    "MAX_TRADE_BPS_LIMIT",
    # Quotes: Exceptions
    "QuoteRejected",
    "TradeSizeExceeded",
    "SlippageExceeded",
    "SellsDisabled",
    # Quotes: Types
    "PricingPhase",
    "CurveConfig",
    "PhaseInfo",
    "BuyQuote",
    "SellQuote",
    # Quotes: Functions
    "validate_crr_ppm",
    "apply_trade_fee",
    "current_phase",
    "phase_info",
    "spot_price",
    "flat_buy_tokens",
    "flat_sell_reserve",
    "quote_buy",
    "quote_sell",
    "quote_trade",
]
