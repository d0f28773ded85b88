"""
Domain models and value objects.

Contains the pricing value types: countries, currencies, FeeResult,
FeeBreakdown, DynamicMinimum, CreatorMinimum.
"""

from src.core.domain.countries import (
    COUNTRY_ALIASES,
    COUNTRY_NAMES,
    country_name,
    to_country_code,
)
from src.core.domain.currency import (
    CURRENCY_SYMBOLS,
    ZERO_DECIMAL_CURRENCIES,
    format_fee,
    format_rate,
    is_zero_decimal,
    minor_to_major,
    normalize_currency,
)
from src.core.domain.fee_breakdown import FeeBreakdown
from src.core.domain.fee_result import FEE_MODEL_SPLIT_V1, FeeMode, FeeResult, PurposeType
from src.core.domain.minimum import CreatorMinimum, DynamicMinimum

__all__ = [
    # Countries
    "COUNTRY_NAMES",
    "COUNTRY_ALIASES",
    "to_country_code",
    "country_name",
    # Currency
    "ZERO_DECIMAL_CURRENCIES",
    "CURRENCY_SYMBOLS",
    "normalize_currency",
    "is_zero_decimal",
    "minor_to_major",
    "format_fee",
    "format_rate",
    # Fee result
    "FEE_MODEL_SPLIT_V1",
    "FeeMode",
    "PurposeType",
    "FeeResult",
    # Breakdown
    "FeeBreakdown",
    # Minimums
    "DynamicMinimum",
    "CreatorMinimum",
]
