"""
Tiered Fee Model (v2)

Платформенная комиссия по ступеням:
- standard: 5% на первые $500, 2% сверх
- founding: 3% на первые $500, 1% сверх
- минимум $1.00

Комиссия процессора - pass-through (не входит в платформенную):
- percent + fixed по валюте из таблицы тарифов
- cross-border: +2% cross-border card +1% FX

Направления:
- recipient_pays: подписчик платит номинал, креатор несёт все комиссии
- payer_pays: подписчик платит сверху так, чтобы креатор получил номинал.
  Processing считается на сумму списания, поэтому gross-up:
      gross = ceil((base + platform_fee + fixed) / (1 - percent))
"""

import logging
import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Final

from src.core.domain.currency import normalize_currency
from src.core.math.numerical_safeguards import (
    apply_rate,
    round_half_up,
    to_decimal,
    validate_in_range,
    validate_non_negative,
)
from src.pricing.fee_calculator import validate_amount
from src.pricing.rate_table import RATE_PRECISION, RateTable, resolve_rate_table

logger = logging.getLogger(__name__)


# =============================================================================
# ENUMS
# =============================================================================


class FeeTier(str, Enum):
    STANDARD = "standard"
    FOUNDING = "founding"


class FeeDirection(str, Enum):
    """Кто несёт комиссии."""

    RECIPIENT_PAYS = "recipient_pays"
    PAYER_PAYS = "payer_pays"


# =============================================================================
# CONFIG
# =============================================================================

# Граница первой ступени ($500)
TIER1_LIMIT_CENTS: Final[int] = 50000

# Минимальная платформенная комиссия ($1)
MIN_PLATFORM_FEE_CENTS: Final[int] = 100

# Надбавки процессора для cross-border
CROSS_BORDER_CARD_SURCHARGE: Final[float] = 0.02
CROSS_BORDER_FX_SURCHARGE: Final[float] = 0.01


@dataclass(frozen=True)
class TierRates:
    """Ставки ступеней для одного тарифа."""

    tier1: float  # До tier1_limit_cents
    tier2: float  # Сверх tier1_limit_cents


def _default_tier_rates() -> dict[FeeTier, TierRates]:
    return {
        FeeTier.STANDARD: TierRates(tier1=0.05, tier2=0.02),
        FeeTier.FOUNDING: TierRates(tier1=0.03, tier2=0.01),
    }


@dataclass(frozen=True)
class TieredFeeConfig:
    """Конфигурация tiered-модели."""

    tier1_limit_cents: int = TIER1_LIMIT_CENTS
    min_platform_fee_cents: int = MIN_PLATFORM_FEE_CENTS
    cross_border_card_surcharge: float = CROSS_BORDER_CARD_SURCHARGE
    cross_border_fx_surcharge: float = CROSS_BORDER_FX_SURCHARGE
    tier_rates: dict[FeeTier, TierRates] = field(default_factory=_default_tier_rates)

    def __post_init__(self) -> None:
        if self.tier1_limit_cents <= 0:
            raise ValueError(f"tier1_limit_cents must be positive, got {self.tier1_limit_cents}")
        validate_non_negative(self.min_platform_fee_cents, "min_platform_fee_cents")
        validate_in_range(self.cross_border_card_surcharge, "cross_border_card_surcharge", 0, 1)
        validate_in_range(self.cross_border_fx_surcharge, "cross_border_fx_surcharge", 0, 1)
        missing = [tier.value for tier in FeeTier if tier not in self.tier_rates]
        if missing:
            raise ValueError(f"tier_rates missing tiers: {missing}")
        for tier, rates in self.tier_rates.items():
            validate_in_range(rates.tier1, f"{FeeTier(tier).value}.tier1", 0, 1)
            validate_in_range(rates.tier2, f"{FeeTier(tier).value}.tier2", 0, 1)


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class ProcessingRate:
    percent: float
    fixed: int  # Минорные единицы


@dataclass(frozen=True)
class TieredFeeCalculation:
    """Результат расчёта tiered-модели."""

    payer_pays_cents: int
    recipient_receives_cents: int
    platform_fee_cents: int
    processing_fee_cents: int
    total_fee_cents: int
    platform_fee_percent: float  # Относительно номинала, в процентах
    processing_fee_percent: float
    direction: FeeDirection
    tier: FeeTier
    currency: str


# =============================================================================
# CALCULATOR
# =============================================================================


class TieredFeeCalculator:
    """
    Калькулятор tiered-модели.

    Использует таблицу тарифов для оценок процессора по валютам.
    """

    def __init__(
        self,
        config: TieredFeeConfig | None = None,
        rate_table: RateTable | None = None,
    ):
        self.config = config or TieredFeeConfig()
        self.rate_table = resolve_rate_table(rate_table)

    def platform_fee(self, amount_cents: int, tier: FeeTier | str = FeeTier.STANDARD) -> int:
        """
        Платформенная комиссия по ступеням (не ниже минимума).

        Examples:
            >>> TieredFeeCalculator().platform_fee(10000)
            500
            >>> TieredFeeCalculator().platform_fee(100000)
            3500
            >>> TieredFeeCalculator().platform_fee(1000)
            100
        """
        amount_cents = validate_amount(amount_cents)
        if amount_cents == 0:
            return 0

        rates = self.config.tier_rates[FeeTier(tier)]
        limit = self.config.tier1_limit_cents
        amount = Decimal(amount_cents)

        if amount_cents <= limit:
            fee = amount * to_decimal(rates.tier1)
        else:
            fee = Decimal(limit) * to_decimal(rates.tier1) + (amount - limit) * to_decimal(
                rates.tier2
            )

        return max(round_half_up(fee), self.config.min_platform_fee_cents)

    def processing_rate(self, currency: str, cross_border: bool = False) -> ProcessingRate:
        """Ставка процессора для направления платежа."""
        processor = self.rate_table.get_processor_fee(currency)
        percent = processor.percent_rate
        if cross_border:
            percent = round(
                percent
                + self.config.cross_border_card_surcharge
                + self.config.cross_border_fx_surcharge,
                RATE_PRECISION,
            )
        return ProcessingRate(percent=percent, fixed=processor.fixed_minor_units)

    def processing_fee(self, amount_cents: int, currency: str, cross_border: bool = False) -> int:
        """Комиссия процессора на сумму."""
        rate = self.processing_rate(currency, cross_border)
        return apply_rate(amount_cents, rate.percent) + rate.fixed

    def calculate(
        self,
        amount_cents: int,
        currency: str,
        tier: FeeTier | str = FeeTier.STANDARD,
        direction: FeeDirection | str = FeeDirection.RECIPIENT_PAYS,
        cross_border: bool = False,
    ) -> TieredFeeCalculation:
        """
        Полный расчёт tiered-модели.

        Raises:
            InvalidAmount: Если amount_cents не неотрицательное целое
            ValueError: Неизвестный tier или direction
        """
        amount_cents = validate_amount(amount_cents)
        tier = FeeTier(tier)
        direction = FeeDirection(direction)
        currency = normalize_currency(currency)

        if amount_cents == 0:
            return TieredFeeCalculation(
                payer_pays_cents=0,
                recipient_receives_cents=0,
                platform_fee_cents=0,
                processing_fee_cents=0,
                total_fee_cents=0,
                platform_fee_percent=0.0,
                processing_fee_percent=0.0,
                direction=direction,
                tier=tier,
                currency=currency,
            )

        platform_fee = self.platform_fee(amount_cents, tier)

        if direction is FeeDirection.RECIPIENT_PAYS:
            processing_fee = self.processing_fee(amount_cents, currency, cross_border)
            payer_pays = amount_cents
            recipient_receives = amount_cents - platform_fee - processing_fee
        else:
            rate = self.processing_rate(currency, cross_border)
            if rate.percent >= 1:
                raise ValueError(f"processing rate {rate.percent} leaves nothing to gross up")
            base_with_platform = amount_cents + platform_fee
            payer_pays = math.ceil((base_with_platform + rate.fixed) / (1 - rate.percent))
            processing_fee = payer_pays - base_with_platform
            recipient_receives = amount_cents

        total_fee = platform_fee + processing_fee

        logger.debug(
            "Tiered fee: amount=%d %s tier=%s direction=%s platform=%d processing=%d",
            amount_cents,
            currency,
            tier.value,
            direction.value,
            platform_fee,
            processing_fee,
        )

        return TieredFeeCalculation(
            payer_pays_cents=payer_pays,
            recipient_receives_cents=recipient_receives,
            platform_fee_cents=platform_fee,
            processing_fee_cents=processing_fee,
            total_fee_cents=total_fee,
            platform_fee_percent=platform_fee / amount_cents * 100,
            processing_fee_percent=processing_fee / amount_cents * 100,
            direction=direction,
            tier=tier,
            currency=currency,
        )

    def effective_platform_rate(
        self, amount_cents: int, tier: FeeTier | str = FeeTier.STANDARD
    ) -> float:
        """Blended ставка платформы в процентах (для отображения)."""
        fee = self.platform_fee(amount_cents, tier)
        if amount_cents == 0:
            return 0.0
        return fee / amount_cents * 100


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def calculate_tiered_platform_fee(amount_cents: int, tier: FeeTier | str = FeeTier.STANDARD) -> int:
    return TieredFeeCalculator().platform_fee(amount_cents, tier)


def calculate_tiered_fees(
    amount_cents: int,
    currency: str,
    tier: FeeTier | str = FeeTier.STANDARD,
    direction: FeeDirection | str = FeeDirection.RECIPIENT_PAYS,
    cross_border: bool = False,
    *,
    rate_table: RateTable | None = None,
) -> TieredFeeCalculation:
    return TieredFeeCalculator(rate_table=rate_table).calculate(
        amount_cents, currency, tier, direction, cross_border
    )


def get_effective_platform_rate(amount_cents: int, tier: FeeTier | str = FeeTier.STANDARD) -> float:
    """Blended ставка платформы в процентах: 5.0 для $100 standard."""
    return TieredFeeCalculator().effective_platform_rate(amount_cents, tier)
