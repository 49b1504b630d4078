"""
Core math modules для bonding curve engine

Fixed-point примитивы и checked-арифметика с детерминированным результатом.
"""

# Errors
from src.core.math.errors import (
    DivisionByZero,
    FixedPointError,
    FixedPointOverflow,
    LnUndefined,
    PowerUnderflow,
)

# Checked Arithmetic (uint256 / int256)
from src.core.math.checked_arithmetic import (
    INT256_MAX,
    INT256_MIN,
    UINT256_MAX,
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
    mul_div,
    require_uint256,
)

# Fixed-Point Kernel
from src.core.math.fixed_point import (
    EXP_REDUCTION_LIMIT,
    EXP_SERIES_TERMS,
    LN2,
    LN_SERIES_TERMS,
    PRECISION,
    SMALL_EXPONENT_THRESHOLD,
    exp,
    fixed_pow,
    ln,
    ln_exact,
)

__all__ = [
    # Errors
    "FixedPointError",
    "PowerUnderflow",
    "LnUndefined",
    "DivisionByZero",
    "FixedPointOverflow",
    # Checked Arithmetic: Constants
    "UINT256_MAX",
    "INT256_MIN",
    "INT256_MAX",
    # Checked Arithmetic: Functions
    "checked_add",
    "checked_sub",
    "checked_mul",
    "checked_div",
    "mul_div",
    "require_uint256",
    # Fixed-Point Kernel: Constants
    "PRECISION",
    "SMALL_EXPONENT_THRESHOLD",
    "LN_SERIES_TERMS",
    "EXP_REDUCTION_LIMIT",
    "EXP_SERIES_TERMS",
    "LN2",
    # Fixed-Point Kernel: Functions
    "fixed_pow",
    "ln",
    "ln_exact",
    "exp",
]
