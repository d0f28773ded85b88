"""
Тесты для PricingEngine

Проверяет:
1. Все операции используют одну таблицу тарифов
2. Cross-border флаг по стране креатора
3. Загрузку таблицы из файла
"""

import json

import pytest

from src.core.domain.fee_result import FeeMode
from src.pricing.engine import PricingEngine
from src.pricing.exceptions import UnknownCountry
from src.pricing.rate_table import DEFAULT_RATE_TABLE, build_rate_table
from src.pricing.tiered import FeeDirection


@pytest.fixture
def engine() -> PricingEngine:
    return PricingEngine()


class TestPricingEngine:
    """Тесты фасада движка"""

    def test_default_rate_table(self, engine: PricingEngine) -> None:
        assert engine.rate_table is DEFAULT_RATE_TABLE
        assert engine.tiered.rate_table is DEFAULT_RATE_TABLE

    def test_service_fee(self, engine: PricingEngine) -> None:
        result = engine.calculate_service_fee(10000, "USD", "personal")
        assert result.gross_cents == 10450
        assert result.net_cents == 9550

    def test_fee_for_cross_border_country(self, engine: PricingEngine) -> None:
        """Нигерия → ставки 5.25%"""
        result = engine.calculate_fee_for_country(10000, "NGN", "Nigeria")
        assert result.is_cross_border
        assert result.fee_cents == 1050

    def test_fee_for_domestic_country(self, engine: PricingEngine) -> None:
        result = engine.calculate_fee_for_country(10000, "EUR", "DE")
        assert not result.is_cross_border
        assert result.fee_cents == 900

    def test_fee_for_unknown_country_is_domestic(self, engine: PricingEngine) -> None:
        result = engine.calculate_fee_for_country(10000, "USD", "Atlantis")
        assert not result.is_cross_border

    def test_legacy_fee(self, engine: PricingEngine) -> None:
        result = engine.calculate_legacy_service_fee(10000, "USD", FeeMode.ABSORB)
        assert result.net_cents == 9100

    def test_preview(self, engine: PricingEngine) -> None:
        preview = engine.fee_preview(10000, "USD", cross_border=True)
        assert preview.subscriber_pays == 10525
        assert preview.creator_receives == 9475

    def test_tiered(self, engine: PricingEngine) -> None:
        result = engine.calculate_tiered_fees(10000, "USD", direction=FeeDirection.PAYER_PAYS)
        assert result.recipient_receives_cents == 10000

    def test_minimums(self, engine: PricingEngine) -> None:
        assert engine.get_dynamic_minimum("US", 1).minimum_usd == 60
        assert engine.get_creator_minimum("US").usd == 15
        assert engine.meets_minimum("US", 15)
        assert engine.is_country_supported("Kenya")
        assert "KE" in engine.creator_minimums()

    def test_breakdown(self, engine: PricingEngine) -> None:
        assert engine.get_fee_breakdown("US").net_margin_rate == pytest.approx(0.0455)
        with pytest.raises(UnknownCountry):
            engine.get_fee_breakdown("Atlantis")

    def test_documents(self, engine: PricingEngine) -> None:
        assert engine.fee_config_document()["platform_fee_percent"] == 9.0
        assert engine.minimums_document()["minimums"]["US"]["usd"] == 15
        assert engine.creator_minimum_document("US", 20)["minimum"]["usd"] == 15

    def test_custom_table_flows_everywhere(self) -> None:
        """Переопределённый floor виден в минимумах и документах"""
        engine = PricingEngine(build_rate_table({"cross_border_minimum_floor_usd": 60}))
        assert engine.get_dynamic_minimum("NG", 20).minimum_usd == 60
        assert engine.minimums_document()["meta"]["cross_border_floor_usd"] == 60

    def test_from_file(self, tmp_path) -> None:
        path = tmp_path / "rates.json"
        path.write_text(json.dumps({"cross_border_countries": ["NG"]}), encoding="utf-8")
        engine = PricingEngine.from_file(path)
        assert engine.rate_table.cross_border_countries == frozenset({"NG"})
        assert not engine.calculate_fee_for_country(10000, "KES", "Kenya").is_cross_border
