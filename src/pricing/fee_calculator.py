"""
Fee Calculator - Split-модель комиссии платформы

Split Fee Model (split_v1):
- Подписчик платит +4.5% сверху цены креатора
- Креатор платит -4.5% из выплаты
- Платформа получает 9% всего

Cross-border (креатор в стране с международными выплатами):
- Каждая сторона платит 4.5% + 1.5% / 2 = 5.25%, всего 10.5%

Алгоритм (все суммы - int в минорных единицах):
    subscriber_fee = round_half_up(base * side_rate)
    creator_fee    = round_half_up(base * side_rate)
    fee            = subscriber_fee + creator_fee
    gross          = base + subscriber_fee
    net            = base - creator_fee

fee определяется как сумма сторон, а не округляется отдельно: аддитивный
инвариант выполняется точно, без коррекции дрейфа округления.

Оценка комиссии процессора и маржи - только для аудита: на fee не влияют.

Legacy режимы (подписки до split-модели):
- absorb: креатор платит всю комиссию, подписчик платит base
- pass_to_subscriber: подписчик платит всю комиссию, креатор получает base
"""

import logging
from dataclasses import dataclass
from typing import Final

from src.core.domain.currency import format_rate, normalize_currency
from src.core.domain.fee_result import FeeMode, FeeResult, PurposeType
from src.core.math.numerical_safeguards import apply_rate, is_valid_float, is_whole_minor_units
from src.pricing.exceptions import InvalidAmount
from src.pricing.rate_table import RateTable, resolve_rate_table

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Режим по умолчанию для legacy-подписок без сохранённого режима
DEFAULT_LEGACY_FEE_MODE: Final[FeeMode] = FeeMode.PASS_TO_SUBSCRIBER


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass(frozen=True)
class FeePreview:
    """Что видят обе стороны до оплаты."""

    creator_receives: int  # net_cents
    subscriber_pays: int  # gross_cents
    service_fee: int  # fee_cents (обе стороны)
    subscriber_fee: int
    creator_fee: int
    effective_rate: str  # "4.5%"
    fee_mode: FeeMode


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_amount(amount_cents: object) -> int:
    """
    Проверка суммы в минорных единицах.

    Raises:
        InvalidAmount: bool, не-int, NaN/Inf или отрицательное значение
    """
    if isinstance(amount_cents, float) and not is_valid_float(amount_cents):
        raise InvalidAmount(amount_cents, "must be finite")
    if not is_whole_minor_units(amount_cents):
        raise InvalidAmount(amount_cents, "must be an integer number of minor units")
    if amount_cents < 0:
        raise InvalidAmount(amount_cents, "cannot be negative")
    return amount_cents


def resolve_purpose(purpose: str | PurposeType | None) -> PurposeType:
    """"service" → SERVICE, всё остальное (tips, fan_club, None, ...) → PERSONAL."""
    if purpose == PurposeType.SERVICE:
        return PurposeType.SERVICE
    return PurposeType.PERSONAL


# =============================================================================
# СТАВКИ
# =============================================================================


def get_fee_rate(purpose: str | None = None, *, rate_table: RateTable | None = None) -> float:
    """Полная ставка платформы (domestic); purpose на ставку не влияет."""
    return resolve_rate_table(rate_table).platform_fee_rate


def get_split_rate(*, rate_table: RateTable | None = None) -> float:
    """Ставка каждой стороны (domestic)."""
    return resolve_rate_table(rate_table).split_rate


# =============================================================================
# ОЦЕНКА ПРОЦЕССОРА
# =============================================================================


def estimate_processor_fee(
    gross_cents: int,
    currency: str,
    *,
    rate_table: RateTable | None = None,
) -> int:
    """
    Оценка комиссии процессора на сумму списания.

    round_half_up(gross * percent_rate) + fixed_minor_units. Неизвестная
    валюта - default оценка с WARNING в лог.
    """
    processor = resolve_rate_table(rate_table).get_processor_fee(currency)
    return apply_rate(gross_cents, processor.percent_rate) + processor.fixed_minor_units


def _check_margin(
    table: RateTable,
    currency: str,
    base_cents: int,
    fee_cents: int,
    estimated_margin: int,
) -> None:
    min_margin = table.get_min_margin(currency)
    if estimated_margin < min_margin:
        logger.warning(
            "Estimated margin below minimum: base=%d %s fee=%d margin=%d min_margin=%d",
            base_cents,
            currency,
            fee_cents,
            estimated_margin,
            min_margin,
        )


# =============================================================================
# SPLIT МОДЕЛЬ
# =============================================================================


def calculate_service_fee(
    base_cents: int,
    currency: str,
    purpose: str | PurposeType | None = None,
    legacy_fee_mode: FeeMode | str | None = None,
    cross_border: bool = False,
    *,
    rate_table: RateTable | None = None,
) -> FeeResult:
    """
    Расчёт комиссии по split-модели.

    Args:
        base_cents: Цена креатора в минорных единицах
        currency: ISO код валюты (USD, NGN, ZAR, ...)
        purpose: Назначение страницы (для аналитики, на ставку не влияет)
        legacy_fee_mode: Игнорируется: новые платежи всегда split.
            Для старых подписок используйте calculate_legacy_service_fee
        cross_border: Креатор в cross-border стране
        rate_table: Таблица тарифов (default - DEFAULT_RATE_TABLE)

    Returns:
        FeeResult с разбивкой

    Raises:
        InvalidAmount: Если base_cents не неотрицательное целое

    Examples:
        >>> r = calculate_service_fee(10000, "USD", "personal")
        >>> (r.gross_cents, r.net_cents, r.fee_cents)
        (10450, 9550, 900)
    """
    base_cents = validate_amount(base_cents)
    table = resolve_rate_table(rate_table)
    currency = normalize_currency(currency)
    purpose_type = resolve_purpose(purpose)

    if base_cents == 0:
        return FeeResult(
            base_cents=0,
            gross_cents=0,
            net_cents=0,
            fee_cents=0,
            subscriber_fee_cents=0,
            creator_fee_cents=0,
            effective_rate=0.0,
            currency=currency,
            fee_mode=FeeMode.SPLIT,
            purpose_type=purpose_type,
            is_cross_border=cross_border,
        )

    side_rate = table.side_rate(cross_border)
    subscriber_fee = apply_rate(base_cents, side_rate)
    creator_fee = apply_rate(base_cents, side_rate)
    fee = subscriber_fee + creator_fee
    gross = base_cents + subscriber_fee
    net = base_cents - creator_fee

    estimated_processor_fee = estimate_processor_fee(gross, currency, rate_table=table)
    estimated_margin = fee - estimated_processor_fee
    _check_margin(table, currency, base_cents, fee, estimated_margin)

    logger.debug(
        "Split fee: base=%d %s cross_border=%s side_rate=%s fee=%d gross=%d net=%d",
        base_cents,
        currency,
        cross_border,
        side_rate,
        fee,
        gross,
        net,
    )

    return FeeResult(
        base_cents=base_cents,
        gross_cents=gross,
        net_cents=net,
        fee_cents=fee,
        subscriber_fee_cents=subscriber_fee,
        creator_fee_cents=creator_fee,
        effective_rate=subscriber_fee / base_cents,
        currency=currency,
        fee_mode=FeeMode.SPLIT,
        purpose_type=purpose_type,
        is_cross_border=cross_border,
        estimated_processor_fee_cents=estimated_processor_fee,
        estimated_margin_cents=estimated_margin,
    )


# =============================================================================
# LEGACY РЕЖИМЫ
# =============================================================================


def calculate_legacy_service_fee(
    base_cents: int,
    currency: str,
    purpose: str | PurposeType | None = None,
    fee_mode: FeeMode | str = DEFAULT_LEGACY_FEE_MODE,
    cross_border: bool = False,
    *,
    rate_table: RateTable | None = None,
) -> FeeResult:
    """
    Расчёт комиссии для подписок, созданных до split-модели.

    Полная комиссия round_half_up(base * total_rate) ложится на одну сторону.
    fee_mode="split" делегирует calculate_service_fee.

    Raises:
        InvalidAmount: Если base_cents не неотрицательное целое
        ValueError: Неизвестный fee_mode
    """
    fee_mode = FeeMode(fee_mode)
    if fee_mode is FeeMode.SPLIT:
        return calculate_service_fee(
            base_cents, currency, purpose, cross_border=cross_border, rate_table=rate_table
        )

    base_cents = validate_amount(base_cents)
    table = resolve_rate_table(rate_table)
    currency = normalize_currency(currency)
    purpose_type = resolve_purpose(purpose)

    if base_cents == 0:
        return FeeResult(
            base_cents=0,
            gross_cents=0,
            net_cents=0,
            fee_cents=0,
            subscriber_fee_cents=0,
            creator_fee_cents=0,
            effective_rate=0.0,
            currency=currency,
            fee_mode=fee_mode,
            purpose_type=purpose_type,
            is_cross_border=cross_border,
        )

    rate = table.total_rate(cross_border)
    fee = apply_rate(base_cents, rate)

    if fee_mode is FeeMode.ABSORB:
        subscriber_fee, creator_fee = 0, fee
    else:
        subscriber_fee, creator_fee = fee, 0
    gross = base_cents + subscriber_fee

    estimated_processor_fee = estimate_processor_fee(gross, currency, rate_table=table)
    estimated_margin = fee - estimated_processor_fee
    _check_margin(table, currency, base_cents, fee, estimated_margin)

    return FeeResult(
        base_cents=base_cents,
        gross_cents=gross,
        net_cents=base_cents - creator_fee,
        fee_cents=fee,
        subscriber_fee_cents=subscriber_fee,
        creator_fee_cents=creator_fee,
        effective_rate=rate,
        currency=currency,
        fee_mode=fee_mode,
        purpose_type=purpose_type,
        is_cross_border=cross_border,
        estimated_processor_fee_cents=estimated_processor_fee,
        estimated_margin_cents=estimated_margin,
    )


# =============================================================================
# PREVIEW
# =============================================================================


def calculate_fee_preview(
    base_cents: int,
    currency: str,
    purpose: str | PurposeType | None = None,
    cross_border: bool = False,
    *,
    rate_table: RateTable | None = None,
) -> FeePreview:
    """Preview для страницы оплаты: всегда split-модель."""
    result = calculate_service_fee(
        base_cents, currency, purpose, cross_border=cross_border, rate_table=rate_table
    )
    return FeePreview(
        creator_receives=result.net_cents,
        subscriber_pays=result.gross_cents,
        service_fee=result.fee_cents,
        subscriber_fee=result.subscriber_fee_cents,
        creator_fee=result.creator_fee_cents,
        effective_rate=format_rate(result.effective_rate),
        fee_mode=result.fee_mode,
    )
