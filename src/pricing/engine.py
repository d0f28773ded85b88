"""
PricingEngine - фасад движка ценообразования

Связывает одну таблицу тарифов со всеми операциями. Окружающее приложение
создаёт движок один раз при старте (с таблицей из файла или по умолчанию)
и передаёт его обработчикам checkout, onboarding и admin-инструментам.
"""

from pathlib import Path
from typing import Any

from src.core.domain.fee_breakdown import FeeBreakdown
from src.core.domain.fee_result import FeeMode, FeeResult, PurposeType
from src.core.domain.minimum import CreatorMinimum, DynamicMinimum
from src.pricing.breakdown import get_fee_breakdown
from src.pricing.config_documents import (
    build_creator_minimum_document,
    build_fee_config_document,
    build_minimums_document,
)
from src.pricing.fee_calculator import (
    FeePreview,
    calculate_fee_preview,
    calculate_legacy_service_fee,
    calculate_service_fee,
)
from src.pricing.minimums import (
    generate_creator_minimums,
    get_creator_minimum,
    get_dynamic_minimum,
    is_country_supported,
    meets_minimum,
)
from src.pricing.rate_table import RateTable, load_rate_table, resolve_rate_table
from src.pricing.tiered import FeeDirection, FeeTier, TieredFeeCalculation, TieredFeeCalculator


class PricingEngine:
    """Движок ценообразования над одной immutable таблицей тарифов."""

    def __init__(self, rate_table: RateTable | None = None):
        self.rate_table = resolve_rate_table(rate_table)
        self.tiered = TieredFeeCalculator(rate_table=self.rate_table)

    @classmethod
    def from_file(cls, path: str | Path) -> "PricingEngine":
        """Движок с таблицей из JSON файла переопределений."""
        return cls(load_rate_table(path))

    # -------------------------------------------------------------------------
    # Транзакции
    # -------------------------------------------------------------------------

    def calculate_service_fee(
        self,
        base_cents: int,
        currency: str,
        purpose: str | PurposeType | None = None,
        cross_border: bool = False,
    ) -> FeeResult:
        return calculate_service_fee(
            base_cents, currency, purpose, cross_border=cross_border, rate_table=self.rate_table
        )

    def calculate_fee_for_country(
        self,
        base_cents: int,
        currency: str,
        creator_country: str,
        purpose: str | PurposeType | None = None,
    ) -> FeeResult:
        """
        Расчёт комиссии с cross-border флагом из страны креатора.

        Страна не из таблицы считается domestic (как is_cross_border_country).
        """
        cross_border = self.rate_table.is_cross_border_country(creator_country)
        return self.calculate_service_fee(base_cents, currency, purpose, cross_border)

    def calculate_legacy_service_fee(
        self,
        base_cents: int,
        currency: str,
        fee_mode: FeeMode | str,
        purpose: str | PurposeType | None = None,
        cross_border: bool = False,
    ) -> FeeResult:
        return calculate_legacy_service_fee(
            base_cents,
            currency,
            purpose,
            fee_mode,
            cross_border,
            rate_table=self.rate_table,
        )

    def fee_preview(
        self,
        base_cents: int,
        currency: str,
        purpose: str | PurposeType | None = None,
        cross_border: bool = False,
    ) -> FeePreview:
        return calculate_fee_preview(
            base_cents, currency, purpose, cross_border, rate_table=self.rate_table
        )

    def calculate_tiered_fees(
        self,
        amount_cents: int,
        currency: str,
        tier: FeeTier | str = FeeTier.STANDARD,
        direction: FeeDirection | str = FeeDirection.RECIPIENT_PAYS,
        cross_border: bool = False,
    ) -> TieredFeeCalculation:
        return self.tiered.calculate(amount_cents, currency, tier, direction, cross_border)

    # -------------------------------------------------------------------------
    # Страны и минимумы
    # -------------------------------------------------------------------------

    def get_fee_breakdown(self, country: str) -> FeeBreakdown:
        return get_fee_breakdown(country, rate_table=self.rate_table)

    def get_dynamic_minimum(self, country: str, subscriber_count: int) -> DynamicMinimum:
        return get_dynamic_minimum(country, subscriber_count, rate_table=self.rate_table)

    def creator_minimums(self) -> dict[str, CreatorMinimum]:
        return generate_creator_minimums(rate_table=self.rate_table)

    def get_creator_minimum(self, country: str) -> CreatorMinimum | None:
        return get_creator_minimum(country, rate_table=self.rate_table)

    def meets_minimum(self, country: str, amount_usd: float) -> bool:
        return meets_minimum(country, amount_usd, rate_table=self.rate_table)

    def is_country_supported(self, country: str) -> bool:
        return is_country_supported(country, rate_table=self.rate_table)

    # -------------------------------------------------------------------------
    # Документы
    # -------------------------------------------------------------------------

    def fee_config_document(self) -> dict[str, Any]:
        return build_fee_config_document(rate_table=self.rate_table)

    def minimums_document(self) -> dict[str, Any]:
        return build_minimums_document(rate_table=self.rate_table)

    def creator_minimum_document(self, country: str, subscriber_count: int) -> dict[str, Any]:
        return build_creator_minimum_document(
            country, subscriber_count, rate_table=self.rate_table
        )
