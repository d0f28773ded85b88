"""
Core math modules

Арифметика минорных денежных единиц с гарантией детерминированности.
"""

from src.core.math.numerical_safeguards import (
    # Epsilon constants
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    EPS_RATE,
    EPS_STEP,
    # Rounding
    apply_rate,
    ceil_to_step,
    round_half_up,
    to_decimal,
    # Comparisons
    is_close,
    is_positive,
    # Validation
    is_valid_float,
    is_whole_minor_units,
    validate_in_range,
    validate_non_negative,
)

__all__ = [
    # Epsilon constants
    "EPS_RATE",
    "EPS_FLOAT_COMPARE_REL",
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_STEP",
    # Rounding
    "to_decimal",
    "round_half_up",
    "apply_rate",
    "ceil_to_step",
    # Comparisons
    "is_close",
    "is_positive",
    # Validation
    "is_valid_float",
    "is_whole_minor_units",
    "validate_non_negative",
    "validate_in_range",
]
