"""
Тесты для справочников стран и валют

Проверяет:
1. Нормализацию стран: ISO код, название, алиас → ISO alpha-2
2. Нераспознанные значения → None (без исключений)
3. Zero-decimal валюты и форматирование сумм
"""

from decimal import Decimal

from src.core.domain.countries import COUNTRY_NAMES, country_name, to_country_code
from src.core.domain.currency import (
    format_fee,
    format_rate,
    is_zero_decimal,
    minor_to_major,
    normalize_currency,
)

# =============================================================================
# СТРАНЫ
# =============================================================================


class TestToCountryCode:
    """Тесты для to_country_code"""

    def test_iso_code_any_case(self) -> None:
        """Код принимается в любом регистре"""
        assert to_country_code("NG") == "NG"
        assert to_country_code("ng") == "NG"
        assert to_country_code(" us ") == "US"

    def test_canonical_name(self) -> None:
        """Каноническое название страны"""
        assert to_country_code("United States") == "US"
        assert to_country_code("Nigeria") == "NG"
        assert to_country_code("south africa") == "ZA"

    def test_aliases(self) -> None:
        """Известные алиасы"""
        assert to_country_code("UK") == "GB"
        assert to_country_code("USA") == "US"
        assert to_country_code("UAE") == "AE"
        assert to_country_code("Czechia") == "CZ"

    def test_unknown_returns_none(self) -> None:
        """Неизвестная страна - None"""
        assert to_country_code("Atlantis") is None
        assert to_country_code("XX") is None
        assert to_country_code("") is None
        assert to_country_code(None) is None  # type: ignore[arg-type]

    def test_all_names_round_trip(self) -> None:
        """Каждое название из справочника даёт свой код"""
        for code, name in COUNTRY_NAMES.items():
            assert to_country_code(name) == code


class TestCountryName:
    """Тесты для country_name"""

    def test_known_code(self) -> None:
        assert country_name("GB") == "United Kingdom"
        assert country_name("ke") == "Kenya"

    def test_unknown_code_returned_as_is(self) -> None:
        assert country_name("xx") == "XX"


# =============================================================================
# ВАЛЮТЫ
# =============================================================================


class TestCurrency:
    """Тесты для модуля currency"""

    def test_normalize_currency(self) -> None:
        """Код валюты приводится к верхнему регистру"""
        assert normalize_currency("usd") == "USD"
        assert normalize_currency(" ngn ") == "NGN"

    def test_zero_decimal(self) -> None:
        """JPY/KRW - zero-decimal, USD - нет"""
        assert is_zero_decimal("JPY")
        assert is_zero_decimal("krw")
        assert not is_zero_decimal("USD")

    def test_minor_to_major(self) -> None:
        """Конверсия с учётом zero-decimal"""
        assert minor_to_major(10450, "USD") == Decimal("104.5")
        assert minor_to_major(500, "JPY") == Decimal("500")

    def test_format_fee(self) -> None:
        """Форматирование с символом или кодом валюты"""
        assert format_fee(900, "USD") == "$9.00"
        assert format_fee(123456, "NGN") == "₦1,234.56"
        assert format_fee(500, "JPY") == "¥500"
        assert format_fee(1050, "CHF") == "CHF 10.50"

    def test_format_negative_fee(self) -> None:
        """Отрицательная маржа форматируется со знаком"""
        assert format_fee(-25, "USD") == "-$0.25"

    def test_format_rate(self) -> None:
        """Ставка в процентах с одним знаком"""
        assert format_rate(0.045) == "4.5%"
        assert format_rate(0.09) == "9.0%"
        assert format_rate(0.105) == "10.5%"
