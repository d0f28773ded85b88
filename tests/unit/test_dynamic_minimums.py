"""
Тесты для Dynamic Minimum Solver

Проверяет:
1. Эталонные сценарии: US 1 подписчик → $60, 20 → $15; Нигерия → $45
2. Монотонность: минимум не возрастает с ростом числа подписчиков
3. Cross-border floor при любом числе подписчиков
4. Политику нуля и отрицательных значений subscriber_count
5. UnprofitableConfiguration при net_margin_rate <= 0
6. Локальные минимумы и статические минимумы стран
"""

import logging

import pytest

from src.pricing.exceptions import UnknownCountry, UnprofitableConfiguration
from src.pricing.minimums import (
    calculate_dynamic_minimum_usd,
    effective_subscriber_count,
    generate_creator_minimums,
    get_creator_minimum,
    get_dynamic_minimum,
    get_supported_countries,
    is_country_supported,
    meets_minimum,
    to_local_minimum,
)
from src.pricing.rate_table import DEFAULT_RATE_TABLE, build_rate_table

# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def unprofitable_table():
    """US с полной долей международных карт и дорогим FX"""
    return build_rate_table({"countries": {"US": {"intl_mix": 1.0}}, "fx_rate": 0.05})


# =============================================================================
# ЭТАЛОННЫЕ СЦЕНАРИИ
# =============================================================================


class TestReferenceScenarios:
    """Эталонные значения минимумов"""

    def test_us_single_subscriber(self) -> None:
        """(30 + 25 + 200) / 0.0455 = $56.04 → $60"""
        minimum = get_dynamic_minimum("United States", 1)
        assert minimum.minimum_usd == 60
        assert minimum.minimum_local == 60
        assert minimum.currency == "USD"
        assert minimum.fixed_cents == pytest.approx(255)
        assert minimum.net_margin_rate == pytest.approx(0.0455)
        assert not minimum.is_cross_border
        assert not minimum.floor_applied

    def test_us_twenty_subscribers(self) -> None:
        """(30 + 25 + 10) / 0.0455 = $14.29 → $15"""
        minimum = get_dynamic_minimum("US", 20)
        assert minimum.minimum_usd == 15
        assert minimum.fixed_cents == pytest.approx(65)

    def test_nigeria_single_subscriber_clamped(self) -> None:
        """Расчётные $35 поднимаются до floor $45"""
        minimum = get_dynamic_minimum("Nigeria", 1)
        assert minimum.minimum_usd == 45
        assert minimum.minimum_local == 72000
        assert minimum.currency == "NGN"
        assert minimum.is_cross_border
        assert minimum.floor_applied
        assert minimum.platform_fee_rate == 0.105

    def test_nigeria_twenty_subscribers_clamped(self) -> None:
        assert get_dynamic_minimum("Nigeria", 20).minimum_usd == 45

    def test_calculate_dynamic_minimum_usd(self) -> None:
        assert calculate_dynamic_minimum_usd("US", 1) == 60
        assert calculate_dynamic_minimum_usd("NG", 5) == 45


# =============================================================================
# СВОЙСТВА
# =============================================================================


class TestProperties:
    """Монотонность и floor"""

    def test_minimum_non_increasing_in_subscribers(self) -> None:
        for code in DEFAULT_RATE_TABLE.supported_countries():
            previous = None
            for subs in (0, 1, 2, 3, 5, 10, 20, 50, 100, 1000):
                current = get_dynamic_minimum(code, subs).minimum_usd
                if previous is not None:
                    assert current <= previous, f"{code}: {subs} subs gave {current} > {previous}"
                previous = current

    def test_cross_border_floor_always_holds(self) -> None:
        floor = DEFAULT_RATE_TABLE.cross_border_minimum_floor_usd
        for code in DEFAULT_RATE_TABLE.cross_border_countries:
            for subs in (0, 1, 20, 10_000):
                assert get_dynamic_minimum(code, subs).minimum_usd >= floor

    def test_minimum_is_multiple_of_rounding_step(self) -> None:
        for code in DEFAULT_RATE_TABLE.supported_countries():
            assert get_dynamic_minimum(code, 3).minimum_usd % 5 == 0

    def test_custom_floor(self) -> None:
        table = build_rate_table({"cross_border_minimum_floor_usd": 85})
        assert get_dynamic_minimum("KE", 20, rate_table=table).minimum_usd == 85


# =============================================================================
# ГРАНИЧНЫЕ СЛУЧАИ
# =============================================================================


class TestEdgeCases:
    """Число подписчиков и убыточные конфигурации"""

    def test_zero_subscribers_treated_as_one(self) -> None:
        zero = get_dynamic_minimum("US", 0)
        one = get_dynamic_minimum("US", 1)
        assert zero.subscriber_count == 1
        assert zero.minimum_usd == one.minimum_usd

    def test_negative_subscribers_rejected(self) -> None:
        with pytest.raises(ValueError, match="cannot be negative"):
            get_dynamic_minimum("US", -1)

    def test_non_integer_subscribers_rejected(self) -> None:
        with pytest.raises(ValueError):
            effective_subscriber_count(2.5)  # type: ignore[arg-type]
        with pytest.raises(ValueError):
            effective_subscriber_count(True)

    def test_unknown_country(self) -> None:
        with pytest.raises(UnknownCountry):
            get_dynamic_minimum("Atlantis", 10)

    def test_unprofitable_configuration_raises(
        self, unprofitable_table, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Маржа <= 0 - ошибка конфигурации, залогированная на ERROR"""
        with caplog.at_level(logging.ERROR, logger="src.pricing.minimums"):
            with pytest.raises(UnprofitableConfiguration) as exc_info:
                get_dynamic_minimum("US", 10, rate_table=unprofitable_table)
        assert exc_info.value.country == "US"
        assert exc_info.value.net_margin_rate < 0
        assert "Non-viable margin for US" in caplog.text

    def test_zero_margin_raises(self) -> None:
        """Маржа ровно 0 тоже не допускается"""
        table = build_rate_table(
            {"countries": {"US": {"cross_border_transfer_rate": 0.0455}}}
        )
        with pytest.raises(UnprofitableConfiguration):
            get_dynamic_minimum("US", 1, rate_table=table)

    def test_zero_fixed_costs_give_zero_minimum(self) -> None:
        """Без фиксированных издержек минимум $0, floor cross-border сохраняется"""
        table = build_rate_table(
            {
                "processing_fixed_cents": 0,
                "countries": {
                    "US": {"payout_fixed_cents": 0, "monthly_account_fee_cents": 0},
                    "NG": {"payout_fixed_cents": 0, "monthly_account_fee_cents": 0},
                },
            }
        )
        minimum = get_dynamic_minimum("US", 1, rate_table=table)
        assert minimum.minimum_usd == 0
        assert minimum.minimum_local == 0
        assert minimum.fixed_cents == 0
        assert get_dynamic_minimum("NG", 1, rate_table=table).minimum_usd == 45
        assert generate_creator_minimums(rate_table=table)["US"].usd == 0


# =============================================================================
# ЛОКАЛЬНЫЕ МИНИМУМЫ
# =============================================================================


class TestLocalMinimum:
    """Округление локального минимума по величине курса"""

    def test_large_multiplier_rounds_to_thousand(self) -> None:
        assert to_local_minimum(45, 1600) == 72000
        assert to_local_minimum(15, 150) == 3000

    def test_medium_multiplier_rounds_to_hundred(self) -> None:
        assert to_local_minimum(15, 18.2) == 300
        assert to_local_minimum(45, 16.1) == 800

    def test_small_multiplier_rounds_to_five(self) -> None:
        assert to_local_minimum(15, 0.92) == 15
        assert to_local_minimum(15, 1.36) == 25
        assert to_local_minimum(60, 1) == 60


# =============================================================================
# СТАТИЧЕСКИЕ МИНИМУМЫ
# =============================================================================


class TestCreatorMinimums:
    """Минимумы сложившегося креатора (floor_subscriber_count)"""

    def test_generated_for_every_country(self) -> None:
        minimums = generate_creator_minimums()
        assert set(minimums) == set(DEFAULT_RATE_TABLE.supported_countries())

    def test_us_creator_minimum(self) -> None:
        minimum = get_creator_minimum("United States")
        assert minimum is not None
        assert minimum.usd == 15
        assert minimum.local == 15
        assert minimum.currency == "USD"
        assert minimum.calculated_margin == pytest.approx(0.0455)
        assert minimum.total_fee_percent == pytest.approx(0.0445)

    def test_unsupported_country_returns_none(self) -> None:
        assert get_creator_minimum("Atlantis") is None

    def test_meets_minimum(self) -> None:
        """Сравнение всегда в USD"""
        assert meets_minimum("US", 15)
        assert meets_minimum("US", 20.5)
        assert not meets_minimum("US", 14.99)
        assert not meets_minimum("Nigeria", 30)
        assert meets_minimum("Nigeria", 45)
        assert not meets_minimum("Atlantis", 1000)

    def test_supported_countries(self) -> None:
        countries = get_supported_countries()
        assert "US" in countries
        assert "NG" in countries
        assert is_country_supported("Nigeria")
        assert is_country_supported("gb")
        assert not is_country_supported("Atlantis")

    def test_unprofitable_country_fails_generation(self, unprofitable_table) -> None:
        with pytest.raises(UnprofitableConfiguration):
            generate_creator_minimums(rate_table=unprofitable_table)
