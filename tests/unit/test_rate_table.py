"""
Тесты для RateTable

Проверяет:
1. Значения по умолчанию и производные ставки (9% / 10.5%, 4.5% / 5.25%)
2. Инварианты при создании (split * 2 == platform, профили cross-border стран)
3. Нормализацию ключей стран и валют
4. Неизвестная валюта: strict → UnknownCurrency, иначе WARNING + default
5. Загрузку переопределений из JSON (jsonschema + pydantic)
"""

import json
import logging

import pytest
from jsonschema import ValidationError as SchemaValidationError
from pydantic import ValidationError

from src.pricing.exceptions import UnknownCountry, UnknownCurrency
from src.pricing.rate_table import (
    CROSS_BORDER_COUNTRIES,
    DEFAULT_RATE_TABLE,
    CountryFeeProfile,
    ProcessorFee,
    RateTable,
    build_rate_table,
    is_cross_border_country,
    load_rate_table,
)

# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def table() -> RateTable:
    return DEFAULT_RATE_TABLE


# =============================================================================
# СТАВКИ
# =============================================================================


class TestRates:
    """Тесты ставок платформы"""

    def test_defaults(self, table: RateTable) -> None:
        """9% платформа, 4.5% каждая сторона, 1.5% cross-border"""
        assert table.platform_fee_rate == 0.09
        assert table.split_rate == 0.045
        assert table.cross_border_buffer == 0.015

    def test_split_doubles_to_platform_rate(self, table: RateTable) -> None:
        """split_rate * 2 == platform_fee_rate"""
        assert table.split_rate * 2 == pytest.approx(table.platform_fee_rate)

    def test_cross_border_rates(self, table: RateTable) -> None:
        """10.5% всего, 5.25% каждая сторона"""
        assert table.cross_border_fee_rate == 0.105
        assert table.cross_border_split_rate == 0.0525
        assert table.cross_border_fee_rate == pytest.approx(
            table.platform_fee_rate + table.cross_border_buffer
        )

    def test_side_and_total_rate(self, table: RateTable) -> None:
        """Выбор ставки по cross-border флагу"""
        assert table.side_rate(False) == 0.045
        assert table.side_rate(True) == 0.0525
        assert table.total_rate(False) == 0.09
        assert table.total_rate(True) == 0.105


# =============================================================================
# СТРАНЫ
# =============================================================================


class TestCountries:
    """Тесты для cross-border списка и профилей стран"""

    def test_cross_border_by_code_and_name(self, table: RateTable) -> None:
        """Коды и названия дают одинаковый результат"""
        assert table.is_cross_border_country("NG")
        assert table.is_cross_border_country("Nigeria")
        assert table.is_cross_border_country("ke")
        assert table.is_cross_border_country("South Africa")

    def test_domestic_countries(self, table: RateTable) -> None:
        """US, GB, DE - не cross-border"""
        assert not table.is_cross_border_country("United States")
        assert not table.is_cross_border_country("GB")
        assert not table.is_cross_border_country("Germany")

    def test_unknown_country_is_not_cross_border(self, table: RateTable) -> None:
        """Нераспознанная страна просто не cross-border"""
        assert not table.is_cross_border_country("Atlantis")

    def test_module_level_helper(self) -> None:
        """is_cross_border_country по DEFAULT_RATE_TABLE"""
        assert is_cross_border_country("Ghana")
        assert not is_cross_border_country("Canada")

    def test_every_cross_border_country_has_profile(self, table: RateTable) -> None:
        for code in CROSS_BORDER_COUNTRIES:
            assert code in table.countries

    def test_country_profile(self, table: RateTable) -> None:
        """Профиль Нигерии"""
        profile = table.get_country_profile("Nigeria")
        assert profile.currency == "NGN"
        assert profile.usd_multiplier == 1600
        assert profile.payout_fixed_cents == 67
        assert profile.monthly_account_fee_cents == 60
        assert profile.cross_border_transfer_rate == 0.01
        assert profile.intl_mix == 0.0

    def test_cross_border_transfer_rates_by_region(self, table: RateTable) -> None:
        """US 0%, UK/SEPA 0.25%, прочие 1%"""
        assert table.countries["US"].cross_border_transfer_rate == 0.0
        assert table.countries["GB"].cross_border_transfer_rate == 0.0025
        assert table.countries["DE"].cross_border_transfer_rate == 0.0025
        assert table.countries["JP"].cross_border_transfer_rate == 0.01

    def test_unknown_country_profile_raises(self, table: RateTable) -> None:
        with pytest.raises(UnknownCountry) as exc_info:
            table.get_country_profile("Atlantis")
        assert exc_info.value.country == "Atlantis"

    def test_platform_fee_rate_for_country(self, table: RateTable) -> None:
        assert table.platform_fee_rate_for("US") == 0.09
        assert table.platform_fee_rate_for("NG") == 0.105

    def test_supported_countries(self, table: RateTable) -> None:
        countries = table.supported_countries()
        assert "US" in countries
        assert "NG" in countries
        assert len(countries) == len(set(countries))


# =============================================================================
# ВАЛЮТЫ
# =============================================================================


class TestProcessorFees:
    """Тесты для оценок процессора и минимальной маржи"""

    def test_known_currency(self, table: RateTable) -> None:
        """USD: 2.9% + 30¢, NGN: 1.5% + ₦100"""
        assert table.get_processor_fee("USD") == ProcessorFee(
            percent_rate=0.029, fixed_minor_units=30
        )
        assert table.get_processor_fee("ngn").fixed_minor_units == 10000

    def test_unknown_currency_strict_raises(self, table: RateTable) -> None:
        with pytest.raises(UnknownCurrency) as exc_info:
            table.get_processor_fee("XYZ", strict=True)
        assert exc_info.value.currency == "XYZ"

    def test_unknown_currency_falls_back_with_warning(
        self, table: RateTable, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Без strict - default оценка и WARNING в лог"""
        with caplog.at_level(logging.WARNING, logger="src.pricing.rate_table"):
            fee = table.get_processor_fee("XYZ")
        assert fee == table.default_processor_fee
        assert "XYZ" in caplog.text

    def test_min_margin(self, table: RateTable) -> None:
        assert table.get_min_margin("USD") == 25
        assert table.get_min_margin("NGN") == 25000
        assert table.get_min_margin("XYZ") == 25
        with pytest.raises(UnknownCurrency):
            table.get_min_margin("XYZ", strict=True)


# =============================================================================
# ИНВАРИАНТЫ
# =============================================================================


class TestInvariants:
    """Тесты инвариантов при создании таблицы"""

    def test_inconsistent_split_rejected(self) -> None:
        """split_rate * 2 != platform_fee_rate"""
        with pytest.raises(ValidationError, match="split_rate"):
            RateTable(platform_fee_rate=0.09, split_rate=0.04)

    def test_cross_border_country_without_profile_rejected(self) -> None:
        """Cross-border страна должна иметь профиль"""
        with pytest.raises(ValidationError, match="without a fee profile"):
            RateTable(
                cross_border_countries=["NG"],
                countries={"US": DEFAULT_RATE_TABLE.countries["US"]},
            )

    def test_unknown_cross_border_country_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Unknown cross-border country"):
            RateTable(cross_border_countries=["Atlantis"])

    def test_rate_out_of_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RateTable(cross_border_buffer=1.5)

    def test_intl_mix_out_of_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CountryFeeProfile(
                currency="USD",
                usd_multiplier=1,
                payout_fixed_cents=25,
                monthly_account_fee_cents=200,
                cross_border_transfer_rate=0.0,
                intl_mix=1.2,
            )

    def test_country_keys_normalized(self) -> None:
        """Названия стран в ключах приводятся к ISO кодам"""
        table = RateTable(
            countries={
                "United States": DEFAULT_RATE_TABLE.countries["US"],
                "nigeria": DEFAULT_RATE_TABLE.countries["NG"],
                "gh": DEFAULT_RATE_TABLE.countries["GH"],
                "Kenya": DEFAULT_RATE_TABLE.countries["KE"],
                "ZA": DEFAULT_RATE_TABLE.countries["ZA"],
            }
        )
        assert set(table.countries) == {"US", "NG", "GH", "KE", "ZA"}

    def test_table_is_frozen(self, table: RateTable) -> None:
        with pytest.raises(ValidationError):
            table.platform_fee_rate = 0.5  # type: ignore[misc]

    def test_mappings_are_read_only(self, table: RateTable) -> None:
        """Словари таблицы нельзя изменить на месте"""
        with pytest.raises(TypeError):
            table.processor_fees["USD"] = ProcessorFee(  # type: ignore[index]
                percent_rate=0.5, fixed_minor_units=0
            )
        with pytest.raises(TypeError):
            table.min_margin_minor_units["USD"] = 0  # type: ignore[index]
        with pytest.raises(AttributeError):
            table.countries.pop("US")  # type: ignore[attr-defined]
        assert table.get_processor_fee("USD").percent_rate == 0.029
        assert "US" in table.countries

    def test_dump_gives_plain_dicts(self, table: RateTable) -> None:
        data = table.model_dump()
        assert isinstance(data["countries"], dict)
        assert data["processor_fees"]["USD"] == {"percent_rate": 0.029, "fixed_minor_units": 30}
        assert RateTable.model_validate(data) == table

    def test_overridden_table_is_read_only(self) -> None:
        overridden = build_rate_table({"countries": {"Nigeria": {"intl_mix": 1.0}}})
        with pytest.raises(TypeError):
            overridden.countries["NG"] = DEFAULT_RATE_TABLE.countries["NG"]  # type: ignore[index]


# =============================================================================
# ЗАГРУЗКА
# =============================================================================


class TestLoadRateTable:
    """Тесты загрузки переопределений из JSON"""

    def test_empty_document_gives_defaults(self) -> None:
        table = build_rate_table({})
        assert table == DEFAULT_RATE_TABLE

    def test_scalar_override(self) -> None:
        table = build_rate_table({"cross_border_minimum_floor_usd": 50})
        assert table.cross_border_minimum_floor_usd == 50
        assert table.platform_fee_rate == 0.09

    def test_partial_country_override_merges(self) -> None:
        """Переопределение одного поля профиля сохраняет остальные"""
        table = build_rate_table({"countries": {"Nigeria": {"intl_mix": 1.0}}})
        assert table.countries["NG"].intl_mix == 1.0
        assert table.countries["NG"].payout_fixed_cents == 67
        assert table.countries["US"] == DEFAULT_RATE_TABLE.countries["US"]

    def test_processor_fee_override_merges(self) -> None:
        table = build_rate_table(
            {"processor_fees": {"jpy": {"percent_rate": 0.036, "fixed_minor_units": 0}}}
        )
        assert table.get_processor_fee("JPY", strict=True).percent_rate == 0.036
        assert table.get_processor_fee("USD", strict=True).fixed_minor_units == 30

    def test_schema_violation_rejected(self, caplog: pytest.LogCaptureFixture) -> None:
        """Неизвестный ключ отвергается схемой, все ошибки в логе"""
        with caplog.at_level(logging.ERROR, logger="src.pricing.rate_table"):
            with pytest.raises(SchemaValidationError):
                build_rate_table({"platform_fee": 0.09, "fx_rate": 2})
        assert "Rate table overrides rejected" in caplog.text
        assert "fx_rate" in caplog.text

    def test_model_invariant_violation_rejected(self) -> None:
        """Схема пропускает, модель отвергает"""
        with pytest.raises(ValidationError):
            build_rate_table({"split_rate": 0.05})

    def test_unknown_country_key_rejected(self) -> None:
        with pytest.raises(UnknownCountry):
            build_rate_table({"countries": {"Atlantis": {"intl_mix": 0.5}}})

    def test_load_from_file(self, tmp_path) -> None:
        path = tmp_path / "rates.json"
        path.write_text(
            json.dumps(
                {
                    "platform_fee_rate": 0.1,
                    "split_rate": 0.05,
                    "cross_border_countries": ["NG", "Ghana", "KE", "ZA", "EG"],
                }
            ),
            encoding="utf-8",
        )
        table = load_rate_table(path)
        assert table.platform_fee_rate == 0.1
        assert table.cross_border_fee_rate == 0.115
        assert table.is_cross_border_country("Egypt")
