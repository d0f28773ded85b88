"""
RateTable - Таблица тарифов платформы

Единственный источник констант ценообразования:
- Ставка платформы (9% domestic / 10.5% cross-border) и split (4.5% + 4.5%)
- Список cross-border стран (ISO alpha-2)
- Оценки комиссий процессора по валютам (percent + fixed) с default fallback
- Минимальная маржа по валютам с default fallback
- Допущения по странам: валюта, курс для отображения, payout fee,
  месячная комиссия аккаунта, cross-border transfer, доля международных карт

RateTable - immutable Pydantic модель. DEFAULT_RATE_TABLE строится один раз
при импорте; функции расчёта принимают таблицу явным аргументом
(rate_table=None → DEFAULT_RATE_TABLE).

ИНВАРИАНТЫ (проверяются при создании):
1. split_rate * 2 == platform_fee_rate (с epsilon-толерантностью)
2. cross-border rate = platform_fee_rate + cross_border_buffer
3. Каждая cross-border страна имеет профиль в countries
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Final

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

from src.core.contracts import RateTableValidator
from src.core.domain.countries import to_country_code
from src.core.domain.currency import normalize_currency
from src.core.math.numerical_safeguards import is_close
from src.pricing.exceptions import UnknownCountry, UnknownCurrency

logger = logging.getLogger(__name__)


# =============================================================================
# СТАВКИ ПЛАТФОРМЫ
# =============================================================================

# Полная ставка платформы (domestic)
PLATFORM_FEE_RATE: Final[float] = 0.09

# Ставка каждой стороны: 4.5% подписчик + 4.5% креатор
SPLIT_RATE: Final[float] = 0.045

# Надбавка для cross-border (FX / surcharge процессора), делится поровну
CROSS_BORDER_BUFFER: Final[float] = 0.015

# Страны с выплатами через международные rails
CROSS_BORDER_COUNTRIES: Final[frozenset[str]] = frozenset({"NG", "GH", "KE", "ZA"})

# Знаков после запятой для производных ставок: 0.09 + 0.015 даёт 0.10499999999999999
RATE_PRECISION: Final[int] = 10


# =============================================================================
# КОМИССИИ ПРОЦЕССОРА ПО ВАЛЮТАМ
# =============================================================================

# Консервативные оценки: (percent_rate, fixed в минорных единицах валюты)
PROCESSOR_FEES: Final[dict[str, tuple[float, int]]] = {
    "USD": (0.029, 30),     # Stripe US: 2.9% + 30¢
    "EUR": (0.029, 25),     # Stripe EU: 2.9% + €0.25
    "GBP": (0.029, 20),     # Stripe UK: 2.9% + 20p
    "CAD": (0.029, 30),
    "AUD": (0.029, 30),
    "ZAR": (0.029, 500),    # ~R5.00
    "KES": (0.015, 5000),   # Paystack: 1.5% + KSh50
    "NGN": (0.015, 10000),  # Paystack: 1.5% + ₦100
    "GHS": (0.019, 0),      # Paystack Ghana: 1.9%
}

DEFAULT_PROCESSOR_FEE: Final[tuple[float, int]] = (0.029, 30)

# Минимальная маржа после комиссии процессора (минорные единицы)
MIN_MARGIN_CENTS: Final[dict[str, int]] = {
    "USD": 25,
    "EUR": 25,
    "GBP": 20,
    "CAD": 35,
    "AUD": 35,
    "ZAR": 500,
    "KES": 2500,
    "NGN": 25000,   # ₦250.00
    "GHS": 250,
}

DEFAULT_MIN_MARGIN: Final[int] = 25


# =============================================================================
# ИЗДЕРЖКИ DESTINATION CHARGES (платформа платит всё)
# =============================================================================

# Процессинг: 2.9% base + экспозиция международных карт → 3.5% blended
PROCESSING_PERCENT: Final[float] = 0.035
PROCESSING_FIXED_CENTS: Final[int] = 30

# Connect fees
BILLING_PERCENT: Final[float] = 0.007
PAYOUT_PERCENT: Final[float] = 0.0025

# Надбавки, масштабируемые долей международных карт (intl_mix)
INTL_CARD_RATE: Final[float] = 0.015
FX_RATE: Final[float] = 0.02

# Cross-border transfer по регионам
CROSS_BORDER_TRANSFER_DOMESTIC: Final[float] = 0.0
CROSS_BORDER_TRANSFER_SEPA: Final[float] = 0.0025
CROSS_BORDER_TRANSFER_STANDARD: Final[float] = 0.01

SEPA_TRANSFER_COUNTRIES: Final[frozenset[str]] = frozenset(
    {
        "AT", "BE", "HR", "CY", "EE", "FI", "FR", "DE", "GR", "IE",
        "IT", "LV", "LT", "LU", "MT", "NL", "PT", "SK", "SI", "ES",
        "NO", "SE", "DK", "PL", "CZ", "HU", "RO", "BG", "CH", "LI",
        "GB", "GI",
    }
)


# =============================================================================
# МИНИМУМЫ
# =============================================================================

# Порог для cross-border стран: маржинально при 3+ подписчиках
CROSS_BORDER_MINIMUM_FLOOR_USD: Final[int] = 45

# Шаг округления минимума вверх (USD)
MINIMUM_ROUNDING_STEP_USD: Final[int] = 5

# Число подписчиков сложившегося креатора (статические минимумы)
FLOOR_SUBSCRIBER_COUNT: Final[int] = 20


# =============================================================================
# ДОПУЩЕНИЯ ПО СТРАНАМ
# =============================================================================

# Payout fixed fee (центы USD-эквивалента)
PAYOUT_FEES_CENTS: Final[dict[str, int]] = {
    "US": 25, "BR": 25, "JP": 25, "TR": 25,
    "EG": 50, "NG": 67, "CA": 25, "NZ": 25, "NO": 25, "SE": 25, "HU": 50, "SG": 25,
    "AT": 25, "BE": 25, "HR": 25, "CY": 25, "EE": 25, "FI": 25, "FR": 25, "DE": 25,
    "GR": 25, "IE": 25, "IT": 25, "LV": 25, "LT": 25, "LU": 25, "MT": 25, "NL": 25,
    "PT": 25, "SK": 25, "SI": 25, "ES": 25,
    "GH": 67, "CZ": 50, "TH": 75, "ID": 75, "MX": 75, "GB": 25, "GI": 25, "BD": 100,
    "ZA": 75, "MA": 75, "CH": 25, "LI": 25, "AU": 25, "PL": 50, "HK": 50, "IN": 75,
    "KE": 100, "MY": 75, "DK": 25, "PK": 100, "RO": 50, "RW": 100,
    "KR": 100, "PH": 100, "TZ": 125, "VN": 100, "TW": 100, "JO": 125, "BG": 75,
    "LK": 125, "SA": 150, "QA": 150, "AE": 163, "OM": 163, "BH": 163, "KW": 163,
}

# Месячная комиссия Connect-аккаунта (центы USD-эквивалента)
MONTHLY_ACCOUNT_FEES_CENTS: Final[dict[str, int]] = {
    "US": 200,
    "GB": 250, "GI": 250,
    "AT": 220, "BE": 220, "HR": 220, "CY": 220, "EE": 220, "FI": 220, "FR": 220,
    "DE": 220, "GR": 220, "IE": 220, "IT": 220, "LV": 220, "LT": 220, "LU": 220,
    "MT": 220, "NL": 220, "PT": 220, "SK": 220, "SI": 220, "ES": 220,
    "NO": 220, "SE": 220, "DK": 220, "PL": 220, "CZ": 220, "HU": 220, "RO": 220,
    "BG": 220, "CH": 220, "LI": 220,
    # Cross-border: местные комиссии в USD (₦900 ≈ $0.60)
    "NG": 60, "GH": 95, "KE": 185, "ZA": 190,
    "CA": 200, "AU": 200, "NZ": 200, "JP": 200, "SG": 200, "HK": 200,
    "BR": 150, "MX": 150, "IN": 150, "ID": 150, "TH": 150, "MY": 150, "PH": 150,
    "VN": 150, "TW": 200, "KR": 200, "TR": 150, "EG": 150, "MA": 150, "BD": 150,
    "PK": 150, "LK": 150, "TZ": 150, "RW": 150, "JO": 150,
    "SA": 200, "AE": 200, "QA": 200, "KW": 200, "BH": 200, "OM": 200,
}

# Валюта и курс USD → local для отображения минимумов
CURRENCY_INFO: Final[dict[str, tuple[str, float]]] = {
    "US": ("USD", 1), "BR": ("BRL", 5.9), "JP": ("JPY", 150), "TR": ("TRY", 34),
    "EG": ("EGP", 50), "NG": ("NGN", 1600), "CA": ("CAD", 1.36), "NZ": ("NZD", 1.68),
    "NO": ("NOK", 11), "SE": ("SEK", 10.6), "HU": ("HUF", 370), "SG": ("SGD", 1.35),
    "AT": ("EUR", 0.92), "BE": ("EUR", 0.92), "HR": ("EUR", 0.92), "CY": ("EUR", 0.92),
    "EE": ("EUR", 0.92), "FI": ("EUR", 0.92), "FR": ("EUR", 0.92), "DE": ("EUR", 0.92),
    "GR": ("EUR", 0.92), "IE": ("EUR", 0.92), "IT": ("EUR", 0.92), "LV": ("EUR", 0.92),
    "LT": ("EUR", 0.92), "LU": ("EUR", 0.92), "MT": ("EUR", 0.92), "NL": ("EUR", 0.92),
    "PT": ("EUR", 0.92), "SK": ("EUR", 0.92), "SI": ("EUR", 0.92), "ES": ("EUR", 0.92),
    "GH": ("GHS", 16.1), "CZ": ("CZK", 23.3), "TH": ("THB", 34.5), "ID": ("IDR", 16100),
    "MX": ("MXN", 17.2), "GB": ("GBP", 0.79), "GI": ("GBP", 0.79), "BD": ("BDT", 120),
    "ZA": ("ZAR", 18.2), "MA": ("MAD", 10.1), "CH": ("CHF", 0.885), "LI": ("CHF", 0.885),
    "AU": ("AUD", 1.54), "PL": ("PLN", 4), "HK": ("HKD", 7.8), "IN": ("INR", 83.5),
    "KE": ("KES", 130), "MY": ("MYR", 4.55), "DK": ("DKK", 6.9), "PK": ("PKR", 278),
    "RO": ("RON", 4.6), "RW": ("RWF", 1370), "KR": ("KRW", 1390), "PH": ("PHP", 58.8),
    "TZ": ("TZS", 2560), "VN": ("VND", 25000), "TW": ("TWD", 32.3), "JO": ("JOD", 0.71),
    "BG": ("BGN", 1.8), "LK": ("LKR", 323), "SA": ("SAR", 3.75), "QA": ("QAR", 3.64),
    "AE": ("AED", 3.67), "OM": ("OMR", 0.385), "BH": ("BHD", 0.377), "KW": ("KWD", 0.308),
}


def _cross_border_transfer_rate(code: str) -> float:
    if code == "US":
        return CROSS_BORDER_TRANSFER_DOMESTIC
    if code in SEPA_TRANSFER_COUNTRIES:
        return CROSS_BORDER_TRANSFER_SEPA
    return CROSS_BORDER_TRANSFER_STANDARD


# =============================================================================
# МОДЕЛИ
# =============================================================================


class ProcessorFee(BaseModel):
    """Оценка комиссии процессора для валюты."""

    percent_rate: float = Field(..., ge=0, le=1)
    fixed_minor_units: int = Field(..., ge=0)

    model_config = {"frozen": True}


class CountryFeeProfile(BaseModel):
    """
    Допущения по издержкам для страны креатора.

    intl_mix - доля платежей международными картами (0 - все карты местные,
    1 - все международные). Blended processing_percent уже закладывает
    типичную экспозицию, поэтому для стран по умолчанию intl_mix = 0.
    """

    currency: str = Field(..., min_length=3, max_length=3)
    usd_multiplier: float = Field(..., gt=0, description="Курс USD → local для отображения")
    payout_fixed_cents: int = Field(..., ge=0)
    monthly_account_fee_cents: int = Field(..., ge=0)
    cross_border_transfer_rate: float = Field(..., ge=0, le=1)
    intl_mix: float = Field(default=0.0, ge=0, le=1)

    model_config = {"frozen": True}

    @field_validator("currency")
    @classmethod
    def normalize_profile_currency(cls, v: str) -> str:
        return normalize_currency(v)


class RateTable(BaseModel):
    """
    Immutable таблица тарифов.

    Создаётся один раз при старте процесса и передаётся в функции расчёта явно.
    Словари processor_fees, min_margin_minor_units и countries - MappingProxyType:
    изменение на месте даёт TypeError.
    """

    # Ставки платформы
    platform_fee_rate: float = Field(default=PLATFORM_FEE_RATE, gt=0, le=1)
    split_rate: float = Field(default=SPLIT_RATE, gt=0, le=1)
    cross_border_buffer: float = Field(default=CROSS_BORDER_BUFFER, ge=0, le=1)
    cross_border_countries: frozenset[str] = Field(default=CROSS_BORDER_COUNTRIES)

    # Процессор и маржа по валютам
    processor_fees: dict[str, ProcessorFee] = Field(
        default_factory=lambda: {
            code: ProcessorFee(percent_rate=rate, fixed_minor_units=fixed)
            for code, (rate, fixed) in PROCESSOR_FEES.items()
        },
        validate_default=True,
    )
    default_processor_fee: ProcessorFee = Field(
        default_factory=lambda: ProcessorFee(
            percent_rate=DEFAULT_PROCESSOR_FEE[0], fixed_minor_units=DEFAULT_PROCESSOR_FEE[1]
        )
    )
    min_margin_minor_units: dict[str, int] = Field(
        default_factory=lambda: dict(MIN_MARGIN_CENTS),
        validate_default=True,
    )
    default_min_margin: int = Field(default=DEFAULT_MIN_MARGIN, ge=0)

    # Издержки destination charges
    processing_percent: float = Field(default=PROCESSING_PERCENT, ge=0, le=1)
    processing_fixed_cents: int = Field(default=PROCESSING_FIXED_CENTS, ge=0)
    billing_percent: float = Field(default=BILLING_PERCENT, ge=0, le=1)
    payout_percent: float = Field(default=PAYOUT_PERCENT, ge=0, le=1)
    intl_card_rate: float = Field(default=INTL_CARD_RATE, ge=0, le=1)
    fx_rate: float = Field(default=FX_RATE, ge=0, le=1)

    # Минимумы
    cross_border_minimum_floor_usd: int = Field(default=CROSS_BORDER_MINIMUM_FLOOR_USD, ge=0)
    minimum_rounding_step_usd: int = Field(default=MINIMUM_ROUNDING_STEP_USD, gt=0)
    floor_subscriber_count: int = Field(default=FLOOR_SUBSCRIBER_COUNT, ge=1)

    # Страны (ISO alpha-2)
    countries: dict[str, CountryFeeProfile] = Field(
        default_factory=lambda: {
            code: CountryFeeProfile(
                currency=CURRENCY_INFO[code][0],
                usd_multiplier=CURRENCY_INFO[code][1],
                payout_fixed_cents=PAYOUT_FEES_CENTS[code],
                monthly_account_fee_cents=MONTHLY_ACCOUNT_FEES_CENTS[code],
                cross_border_transfer_rate=_cross_border_transfer_rate(code),
            )
            for code in CURRENCY_INFO
        },
        validate_default=True,
    )

    model_config = {"frozen": True}

    @field_validator("cross_border_countries", mode="before")
    @classmethod
    def normalize_cross_border_countries(cls, v: Any) -> frozenset[str]:
        """Коды и названия приводятся к ISO alpha-2."""
        codes = set()
        for item in v:
            code = to_country_code(item)
            if code is None:
                raise ValueError(f"Unknown cross-border country: {item!r}")
            codes.add(code)
        return frozenset(codes)

    @field_validator("countries", mode="before")
    @classmethod
    def normalize_country_keys(cls, v: Any) -> Any:
        """Ключи стран приводятся к ISO alpha-2."""
        if not isinstance(v, Mapping):
            return v
        normalized = {}
        for key, profile in v.items():
            code = to_country_code(key)
            if code is None:
                raise ValueError(f"Unknown country in rate table: {key!r}")
            normalized[code] = profile
        return normalized

    @field_validator("processor_fees", "min_margin_minor_units", mode="before")
    @classmethod
    def normalize_currency_keys(cls, v: Any) -> Any:
        """Ключи валют приводятся к верхнему регистру."""
        if not isinstance(v, Mapping):
            return v
        return {normalize_currency(key): value for key, value in v.items()}

    @field_validator("processor_fees", "min_margin_minor_units", "countries", mode="after")
    @classmethod
    def freeze_mapping(cls, v: dict[str, Any]) -> Mapping[str, Any]:
        """Словари таблицы доступны только для чтения."""
        return MappingProxyType(v)

    @field_serializer("processor_fees", "min_margin_minor_units", "countries", mode="wrap")
    def serialize_mapping(self, v: Mapping[str, Any], handler: Any) -> dict[str, Any]:
        return handler(dict(v))

    @model_validator(mode="after")
    def validate_consistency(self) -> "RateTable":
        """Проверка согласованности ставок и покрытия стран."""
        if not is_close(self.split_rate * 2, self.platform_fee_rate):
            raise ValueError(
                f"split_rate * 2 ({self.split_rate * 2}) must equal "
                f"platform_fee_rate ({self.platform_fee_rate})"
            )

        missing = sorted(self.cross_border_countries - set(self.countries))
        if missing:
            raise ValueError(f"Cross-border countries without a fee profile: {missing}")

        if self.cross_border_fee_rate > 1:
            raise ValueError(
                f"cross-border fee rate {self.cross_border_fee_rate} exceeds 100%"
            )
        return self

    # -------------------------------------------------------------------------
    # Ставки
    # -------------------------------------------------------------------------

    @property
    def cross_border_fee_rate(self) -> float:
        """Полная ставка cross-border: 9% + 1.5% = 10.5%."""
        return round(self.platform_fee_rate + self.cross_border_buffer, RATE_PRECISION)

    @property
    def cross_border_split_rate(self) -> float:
        """Ставка одной стороны cross-border: 4.5% + 0.75% = 5.25%."""
        return round(self.split_rate + self.cross_border_buffer / 2, RATE_PRECISION)

    def side_rate(self, cross_border: bool) -> float:
        """Ставка одной стороны split-модели."""
        return self.cross_border_split_rate if cross_border else self.split_rate

    def total_rate(self, cross_border: bool) -> float:
        """Полная ставка платформы (обе стороны)."""
        return self.cross_border_fee_rate if cross_border else self.platform_fee_rate

    # -------------------------------------------------------------------------
    # Страны
    # -------------------------------------------------------------------------

    def is_cross_border_country(self, country: str) -> bool:
        """
        Проверка принадлежности страны к cross-border списку.

        Принимает ISO код или название; нераспознанная страна - не cross-border.
        """
        code = to_country_code(country)
        return code is not None and code in self.cross_border_countries

    def resolve_country(self, country: str) -> str:
        """
        Нормализация страны к ISO коду, присутствующему в таблице.

        Raises:
            UnknownCountry: Если страна не распознана или не настроена
        """
        code = to_country_code(country)
        if code is None or code not in self.countries:
            raise UnknownCountry(country)
        return code

    def get_country_profile(self, country: str) -> CountryFeeProfile:
        """Профиль издержек страны (UnknownCountry, если страны нет)."""
        return self.countries[self.resolve_country(country)]

    def platform_fee_rate_for(self, country: str) -> float:
        """Полная ставка платформы для страны креатора."""
        return self.total_rate(self.is_cross_border_country(country))

    def supported_countries(self) -> list[str]:
        """ISO коды всех настроенных стран."""
        return list(self.countries)

    # -------------------------------------------------------------------------
    # Валюты
    # -------------------------------------------------------------------------

    def get_processor_fee(self, currency: str, strict: bool = False) -> ProcessorFee:
        """
        Оценка комиссии процессора для валюты.

        Args:
            currency: ISO код валюты
            strict: True - UnknownCurrency для неизвестной валюты;
                False - WARNING в лог и default_processor_fee

        Raises:
            UnknownCurrency: Если strict и валюты нет в таблице
        """
        code = normalize_currency(currency)
        fee = self.processor_fees.get(code)
        if fee is not None:
            return fee
        if strict:
            raise UnknownCurrency(currency)
        logger.warning(
            "No processor fee entry for currency %s, using default %.3f%% + %d",
            code,
            self.default_processor_fee.percent_rate * 100,
            self.default_processor_fee.fixed_minor_units,
        )
        return self.default_processor_fee

    def get_min_margin(self, currency: str, strict: bool = False) -> int:
        """Минимальная маржа для валюты (см. get_processor_fee для strict)."""
        code = normalize_currency(currency)
        margin = self.min_margin_minor_units.get(code)
        if margin is not None:
            return margin
        if strict:
            raise UnknownCurrency(currency)
        logger.warning(
            "No minimum margin entry for currency %s, using default %d",
            code,
            self.default_min_margin,
        )
        return self.default_min_margin


# =============================================================================
# ЗАГРУЗКА И DEFAULT
# =============================================================================


DEFAULT_RATE_TABLE: Final[RateTable] = RateTable()


def resolve_rate_table(rate_table: RateTable | None) -> RateTable:
    """rate_table или DEFAULT_RATE_TABLE."""
    return rate_table if rate_table is not None else DEFAULT_RATE_TABLE


def build_rate_table(overrides: dict[str, Any]) -> RateTable:
    """
    Построение таблицы из частичного документа поверх значений по умолчанию.

    Документ проверяется JSON Schema контрактом rate_table, затем моделью.
    Словари processor_fees и min_margin_minor_units сливаются по ключам;
    профили countries сливаются по полям (можно переопределить только intl_mix).
    Новая страна в countries должна содержать все поля профиля.

    Raises:
        jsonschema.ValidationError: Документ не соответствует схеме
        pydantic.ValidationError: Нарушены инварианты таблицы
        UnknownCountry: Ключ countries не распознан как страна
    """
    validator = RateTableValidator()
    errors = validator.error_messages(overrides)
    if errors:
        logger.error("Rate table overrides rejected: %s", "; ".join(errors))
        validator.validate(overrides)

    data = DEFAULT_RATE_TABLE.model_dump()

    for key, value in overrides.items():
        if key in ("processor_fees", "min_margin_minor_units"):
            merged = dict(data[key])
            merged.update({normalize_currency(code): item for code, item in value.items()})
            data[key] = merged
        elif key == "countries":
            merged = dict(data[key])
            for country, profile in value.items():
                code = to_country_code(country)
                if code is None:
                    raise UnknownCountry(country)
                merged[code] = {**merged.get(code, {}), **profile}
            data[key] = merged
        else:
            data[key] = value

    return RateTable.model_validate(data)


def load_rate_table(path: str | Path) -> RateTable:
    """
    Загрузка таблицы тарифов из JSON файла.

    Args:
        path: Путь к JSON документу с переопределениями

    Returns:
        Новая RateTable
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        overrides = json.load(f)

    table = build_rate_table(overrides)
    logger.info(
        "Loaded rate table from %s: platform_fee_rate=%s, %d countries, cross-border=%s",
        path,
        table.platform_fee_rate,
        len(table.countries),
        sorted(table.cross_border_countries),
    )
    return table


# =============================================================================
# ФУНКЦИИ-АКСЕССОРЫ
# =============================================================================


def is_cross_border_country(country: str, rate_table: RateTable | None = None) -> bool:
    """Проверка cross-border по таблице (default - DEFAULT_RATE_TABLE)."""
    return resolve_rate_table(rate_table).is_cross_border_country(country)
