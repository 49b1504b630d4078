"""
Contract Validation Module

Модуль для валидации JSON контрактов входных данных bonding curve engine.
"""

from .validators import (
    ContractValidator,
    SchemaLoader,
    TradeRequestValidator,
    validate_trade_request,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "TradeRequestValidator",
    # Functions
    "validate_trade_request",
]
