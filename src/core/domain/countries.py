"""
Countries - нормализация стран к ISO 3166-1 alpha-2

Каноническим ключом страны во всех таблицах тарифов является ISO alpha-2 код
("US", "NG", "GB"). Названия стран ("United States", "Nigeria") принимаются
только на границе и сразу нормализуются этим модулем.
"""

from typing import Final

# =============================================================================
# СПРАВОЧНИК
# =============================================================================

# ISO alpha-2 → каноническое английское название
COUNTRY_NAMES: Final[dict[str, str]] = {
    "US": "United States",
    "BR": "Brazil",
    "JP": "Japan",
    "TR": "Turkey",
    "EG": "Egypt",
    "NG": "Nigeria",
    "CA": "Canada",
    "NZ": "New Zealand",
    "NO": "Norway",
    "SE": "Sweden",
    "HU": "Hungary",
    "SG": "Singapore",
    # SEPA / EUR
    "AT": "Austria",
    "BE": "Belgium",
    "HR": "Croatia",
    "CY": "Cyprus",
    "EE": "Estonia",
    "FI": "Finland",
    "FR": "France",
    "DE": "Germany",
    "GR": "Greece",
    "IE": "Ireland",
    "IT": "Italy",
    "LV": "Latvia",
    "LT": "Lithuania",
    "LU": "Luxembourg",
    "MT": "Malta",
    "NL": "Netherlands",
    "PT": "Portugal",
    "SK": "Slovakia",
    "SI": "Slovenia",
    "ES": "Spain",
    "GH": "Ghana",
    "CZ": "Czech Republic",
    "TH": "Thailand",
    "ID": "Indonesia",
    "MX": "Mexico",
    "GB": "United Kingdom",
    "GI": "Gibraltar",
    "BD": "Bangladesh",
    "ZA": "South Africa",
    "MA": "Morocco",
    "CH": "Switzerland",
    "LI": "Liechtenstein",
    "AU": "Australia",
    "PL": "Poland",
    "HK": "Hong Kong",
    "IN": "India",
    "KE": "Kenya",
    "MY": "Malaysia",
    "DK": "Denmark",
    "PK": "Pakistan",
    "RO": "Romania",
    "RW": "Rwanda",
    "KR": "South Korea",
    "PH": "Philippines",
    "TZ": "Tanzania",
    "VN": "Vietnam",
    "TW": "Taiwan",
    "JO": "Jordan",
    "BG": "Bulgaria",
    "LK": "Sri Lanka",
    "SA": "Saudi Arabia",
    "QA": "Qatar",
    "AE": "United Arab Emirates",
    "OM": "Oman",
    "BH": "Bahrain",
    "KW": "Kuwait",
}

# Альтернативные написания, встречающиеся в профилях
COUNTRY_ALIASES: Final[dict[str, str]] = {
    "usa": "US",
    "united states of america": "US",
    "uk": "GB",
    "great britain": "GB",
    "czechia": "CZ",
    "korea, republic of": "KR",
    "uae": "AE",
    "viet nam": "VN",
    "turkiye": "TR",
}

_NAME_TO_CODE: Final[dict[str, str]] = {
    name.casefold(): code for code, name in COUNTRY_NAMES.items()
}


# =============================================================================
# НОРМАЛИЗАЦИЯ
# =============================================================================


def to_country_code(country: str) -> str | None:
    """
    Нормализация страны к ISO alpha-2 коду.

    Принимает код в любом регистре ("ng", "NG"), каноническое название
    ("Nigeria") или известный алиас ("UK").

    Args:
        country: Код или название страны

    Returns:
        ISO alpha-2 код или None, если страна не распознана

    Examples:
        >>> to_country_code("Nigeria")
        'NG'
        >>> to_country_code("gb")
        'GB'
        >>> to_country_code("Atlantis") is None
        True
    """
    if not isinstance(country, str):
        return None

    value = country.strip()
    if not value:
        return None

    upper = value.upper()
    if len(upper) == 2 and upper in COUNTRY_NAMES:
        return upper

    key = value.casefold()
    return _NAME_TO_CODE.get(key) or COUNTRY_ALIASES.get(key)


def country_name(code: str) -> str:
    """Каноническое название страны по ISO коду (код, если название неизвестно)."""
    return COUNTRY_NAMES.get(code.upper(), code.upper())
