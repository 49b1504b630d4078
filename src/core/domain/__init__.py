"""
Domain models and value objects.

Contains unit conversions and the PoolState snapshot.
"""

from src.core.domain.pool import PoolState
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

__all__ = [
    # Units module
    "SUPPLY_DECIMALS",
    "PPM_DENOMINATOR",
    "BPS_DENOMINATOR",
    "to_fixed",
    "from_fixed",
    "ppm_to_fixed",
    "bps_of",
    "bps_to_fraction",
    # Pool model
    "PoolState",
]
