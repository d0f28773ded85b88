"""
Pricing engine

Split-модель комиссии платформы, разложение издержек по странам
и решатель динамических минимумов над immutable таблицей тарифов.
"""

from src.pricing.breakdown import get_fee_breakdown
from src.pricing.config_documents import (
    build_creator_minimum_document,
    build_fee_config_document,
    build_minimums_document,
)
from src.pricing.engine import PricingEngine
from src.pricing.exceptions import (
    InvalidAmount,
    PricingError,
    UnknownCountry,
    UnknownCurrency,
    UnprofitableConfiguration,
)
from src.pricing.fee_calculator import (
    FeePreview,
    calculate_fee_preview,
    calculate_legacy_service_fee,
    calculate_service_fee,
    estimate_processor_fee,
    get_fee_rate,
    get_split_rate,
)
from src.pricing.minimums import (
    calculate_dynamic_minimum_usd,
    generate_creator_minimums,
    get_creator_minimum,
    get_dynamic_minimum,
    get_supported_countries,
    is_country_supported,
    meets_minimum,
)
from src.pricing.rate_table import (
    DEFAULT_RATE_TABLE,
    CountryFeeProfile,
    ProcessorFee,
    RateTable,
    build_rate_table,
    is_cross_border_country,
    load_rate_table,
)
from src.pricing.tiered import (
    FeeDirection,
    FeeTier,
    TieredFeeCalculation,
    TieredFeeCalculator,
    TieredFeeConfig,
    calculate_tiered_fees,
    calculate_tiered_platform_fee,
    get_effective_platform_rate,
)

__all__ = [
    # Rate table
    "DEFAULT_RATE_TABLE",
    "RateTable",
    "ProcessorFee",
    "CountryFeeProfile",
    "build_rate_table",
    "load_rate_table",
    "is_cross_border_country",
    # Exceptions
    "PricingError",
    "InvalidAmount",
    "UnknownCountry",
    "UnknownCurrency",
    "UnprofitableConfiguration",
    # Fee calculator
    "FeePreview",
    "calculate_service_fee",
    "calculate_legacy_service_fee",
    "calculate_fee_preview",
    "estimate_processor_fee",
    "get_fee_rate",
    "get_split_rate",
    # Breakdown
    "get_fee_breakdown",
    # Minimums
    "get_dynamic_minimum",
    "calculate_dynamic_minimum_usd",
    "generate_creator_minimums",
    "get_creator_minimum",
    "meets_minimum",
    "get_supported_countries",
    "is_country_supported",
    # Tiered model
    "FeeTier",
    "FeeDirection",
    "TieredFeeConfig",
    "TieredFeeCalculation",
    "TieredFeeCalculator",
    "calculate_tiered_platform_fee",
    "calculate_tiered_fees",
    "get_effective_platform_rate",
    # Documents
    "build_fee_config_document",
    "build_minimums_document",
    "build_creator_minimum_document",
    # Facade
    "PricingEngine",
]
