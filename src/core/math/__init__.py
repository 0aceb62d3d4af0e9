"""
Core math modules

Целочисленные примитивы и fixed-point алгоритмы с гарантией отсутствия
молчаливого переполнения.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    UINT32_MAX,
    UINT256_BITS,
    UINT256_MAX,
    check_width,
    checked_add,
    checked_mul,
    checked_sub,
    floor_log2,
    is_uint256,
    mul_div,
    mul_div_rounding_up,
    require_in_range,
    require_positive,
    require_uint256,
)

# Fixed-Point Power
from src.core.math.fixed_point_power import (
    FIXED_1,
    FIXED_2,
    LN2_FIXED,
    MAX_EXP_ARRAY,
    MAX_NUM,
    MAX_PRECISION,
    MIN_PRECISION,
    POWER_RELATIVE_ERROR_BOUND,
    find_position_in_max_exp_array,
    general_exp,
    general_log,
    general_power,
    power,
)

# Bonding Curve
from src.core.math.bonding_curve import (
    LINEAR_RESERVE_RATIO_PPM,
    MAX_RESERVE_RATIO_PPM,
    MIN_RESERVE_RATIO_PPM,
    purchase_amount,
    sale_amount,
    spot_price,
    validate_curve_state,
)

__all__ = [
    # Numerical Safeguards — Constants
    "UINT32_MAX",
    "UINT256_BITS",
    "UINT256_MAX",
    # Numerical Safeguards — Checked arithmetic
    "check_width",
    "checked_add",
    "checked_mul",
    "checked_sub",
    "floor_log2",
    "mul_div",
    "mul_div_rounding_up",
    # Numerical Safeguards — Validation
    "is_uint256",
    "require_in_range",
    "require_positive",
    "require_uint256",
    # Fixed-Point Power — Constants
    "FIXED_1",
    "FIXED_2",
    "LN2_FIXED",
    "MAX_EXP_ARRAY",
    "MAX_NUM",
    "MAX_PRECISION",
    "MIN_PRECISION",
    "POWER_RELATIVE_ERROR_BOUND",
    # Fixed-Point Power — Functions
    "find_position_in_max_exp_array",
    "general_exp",
    "general_log",
    "general_power",
    "power",
    # Bonding Curve — Constants
    "LINEAR_RESERVE_RATIO_PPM",
    "MAX_RESERVE_RATIO_PPM",
    "MIN_RESERVE_RATIO_PPM",
    # Bonding Curve — Functions
    "purchase_amount",
    "sale_amount",
    "spot_price",
    "validate_curve_state",
]
