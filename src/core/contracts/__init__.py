"""
Contract Validation Module

Модуль для валидации JSON контрактов движка ценообразования.
"""

from .validators import (
    ContractValidator,
    FeeConfigValidator,
    FeeResultValidator,
    MinimumsConfigValidator,
    RateTableValidator,
    SchemaLoader,
    ValidationError,
    validate_fee_config,
    validate_fee_result,
    validate_minimums_config,
    validate_rate_table,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "FeeResultValidator",
    "RateTableValidator",
    "FeeConfigValidator",
    "MinimumsConfigValidator",
    # Exceptions
    "ValidationError",
    # Functions
    "validate_fee_result",
    "validate_rate_table",
    "validate_fee_config",
    "validate_minimums_config",
]
