"""
Dynamic Minimum Solver - минимальная цена подписки по стране

Минимум - цена, при которой комиссия платформы покрывает фиксированные
издержки транзакции после всех процентных издержек:

    fixed_cents     = processing_fixed + payout_fixed + monthly_account_fee / max(subs, 1)
    net_margin_rate = platform_fee_rate - total_percent_fees
    minimum_usd     = ceil(fixed_cents / net_margin_rate / 100 / 5) * 5

Месячная комиссия аккаунта амортизируется по подписчикам: новый креатор
видит более высокий минимум, сложившийся (floor_subscriber_count) - сходящийся.

Cross-border страны: минимум не ниже cross_border_minimum_floor_usd
(100% международных карт, chargebacks) при любом числе подписчиков.

Локальный минимум - округление вверх для отображения:
    multiplier >= 100 → шаг 1000 (NGN, JPY, KRW, ...)
    multiplier >= 10  → шаг 100 (ZAR, MXN, NOK, ...)
    иначе             → шаг 5 (EUR, GBP, CAD, ...)

ИНВАРИАНТЫ:
1. minimum_usd не возрастает с ростом subscriber_count
2. Для cross-border стран minimum_usd >= floor
3. net_margin_rate <= 0 → UnprofitableConfiguration, не clamp
"""

import logging
from typing import Final

from src.core.domain.minimum import CreatorMinimum, DynamicMinimum
from src.core.math.numerical_safeguards import ceil_to_step, is_positive
from src.pricing.breakdown import get_fee_breakdown
from src.pricing.exceptions import UnknownCountry, UnprofitableConfiguration
from src.pricing.rate_table import RateTable, resolve_rate_table

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Шаги округления локального минимума по величине курса
LOCAL_STEP_LARGE: Final[int] = 1000
LOCAL_STEP_MEDIUM: Final[int] = 100
LOCAL_STEP_SMALL: Final[int] = 5

LOCAL_MULTIPLIER_LARGE: Final[float] = 100
LOCAL_MULTIPLIER_MEDIUM: Final[float] = 10


# =============================================================================
# HELPERS
# =============================================================================


def effective_subscriber_count(subscriber_count: int) -> int:
    """
    Число подписчиков для амортизации: 0 считается как 1.

    Raises:
        ValueError: Отрицательное или нецелое значение
    """
    if not isinstance(subscriber_count, int) or isinstance(subscriber_count, bool):
        raise ValueError(f"subscriber_count must be an integer, got {subscriber_count!r}")
    if subscriber_count < 0:
        raise ValueError(f"subscriber_count cannot be negative, got {subscriber_count}")
    return max(subscriber_count, 1)


def to_local_minimum(minimum_usd: int, usd_multiplier: float) -> int:
    """
    Пересчёт USD минимума в местную валюту с округлением вверх.

    Examples:
        >>> to_local_minimum(45, 1600)
        72000
        >>> to_local_minimum(15, 18.2)
        300
        >>> to_local_minimum(15, 0.92)
        15
    """
    if usd_multiplier >= LOCAL_MULTIPLIER_LARGE:
        step = LOCAL_STEP_LARGE
    elif usd_multiplier >= LOCAL_MULTIPLIER_MEDIUM:
        step = LOCAL_STEP_MEDIUM
    else:
        step = LOCAL_STEP_SMALL
    return int(ceil_to_step(minimum_usd * usd_multiplier, step))


# =============================================================================
# DYNAMIC MINIMUM
# =============================================================================


def get_dynamic_minimum(
    country: str,
    subscriber_count: int,
    *,
    rate_table: RateTable | None = None,
) -> DynamicMinimum:
    """
    Минимум подписки для страны с учётом числа подписчиков.

    Args:
        country: ISO alpha-2 код или название страны
        subscriber_count: Активные месячные подписчики (0 → 1)
        rate_table: Таблица тарифов (default - DEFAULT_RATE_TABLE)

    Returns:
        DynamicMinimum с компонентами расчёта

    Raises:
        UnknownCountry: Страна не настроена
        UnprofitableConfiguration: net_margin_rate <= 0
        ValueError: Отрицательный subscriber_count

    Examples:
        >>> get_dynamic_minimum("United States", 1).minimum_usd
        60
        >>> get_dynamic_minimum("US", 20).minimum_usd
        15
        >>> get_dynamic_minimum("Nigeria", 20).minimum_usd
        45
    """
    table = resolve_rate_table(rate_table)
    effective_subs = effective_subscriber_count(subscriber_count)
    breakdown = get_fee_breakdown(country, rate_table=table)
    profile = table.countries[breakdown.country]

    fixed_cents = (
        breakdown.processing_fixed_cents
        + breakdown.payout_fixed_cents
        + breakdown.monthly_account_fee_cents / effective_subs
    )

    if not is_positive(breakdown.net_margin_rate):
        logger.error(
            "Non-viable margin for %s: net_margin_rate=%.4f%% (platform=%.4f%%, fees=%.4f%%)",
            breakdown.country,
            breakdown.net_margin_rate * 100,
            breakdown.platform_fee_rate * 100,
            breakdown.total_percent_fees * 100,
        )
        raise UnprofitableConfiguration(breakdown.country, breakdown.net_margin_rate)

    minimum_usd = int(
        ceil_to_step(
            fixed_cents / breakdown.net_margin_rate / 100,
            table.minimum_rounding_step_usd,
        )
    )

    is_cross_border = breakdown.country in table.cross_border_countries
    floor_applied = False
    if is_cross_border and minimum_usd < table.cross_border_minimum_floor_usd:
        minimum_usd = table.cross_border_minimum_floor_usd
        floor_applied = True

    minimum_local = to_local_minimum(minimum_usd, profile.usd_multiplier)

    logger.debug(
        "Dynamic minimum %s subs=%d: fixed=%.2f margin=%.4f usd=%d local=%d %s floor=%s",
        breakdown.country,
        effective_subs,
        fixed_cents,
        breakdown.net_margin_rate,
        minimum_usd,
        minimum_local,
        profile.currency,
        floor_applied,
    )

    return DynamicMinimum(
        country=breakdown.country,
        minimum_usd=minimum_usd,
        minimum_local=minimum_local,
        currency=profile.currency,
        subscriber_count=effective_subs,
        fixed_cents=fixed_cents,
        percent_fees=breakdown.total_percent_fees,
        platform_fee_rate=breakdown.platform_fee_rate,
        net_margin_rate=breakdown.net_margin_rate,
        is_cross_border=is_cross_border,
        floor_applied=floor_applied,
    )


def calculate_dynamic_minimum_usd(
    country: str,
    subscriber_count: int,
    *,
    rate_table: RateTable | None = None,
) -> int:
    """Только minimum_usd из get_dynamic_minimum."""
    return get_dynamic_minimum(country, subscriber_count, rate_table=rate_table).minimum_usd


# =============================================================================
# СТАТИЧЕСКИЕ МИНИМУМЫ (сложившийся креатор)
# =============================================================================


def _creator_minimum(code: str, table: RateTable) -> CreatorMinimum:
    dynamic = get_dynamic_minimum(code, table.floor_subscriber_count, rate_table=table)
    return CreatorMinimum(
        usd=dynamic.minimum_usd,
        local=dynamic.minimum_local,
        currency=dynamic.currency,
        calculated_margin=dynamic.net_margin_rate,
        total_fee_percent=dynamic.percent_fees,
    )


def generate_creator_minimums(*, rate_table: RateTable | None = None) -> dict[str, CreatorMinimum]:
    """
    Статические минимумы всех стран при floor_subscriber_count подписчиках.

    Raises:
        UnprofitableConfiguration: Если хотя бы одна страна убыточна
    """
    table = resolve_rate_table(rate_table)
    return {code: _creator_minimum(code, table) for code in table.supported_countries()}


def get_creator_minimum(
    country: str, *, rate_table: RateTable | None = None
) -> CreatorMinimum | None:
    """Статический минимум страны или None, если страна не поддерживается."""
    table = resolve_rate_table(rate_table)
    try:
        code = table.resolve_country(country)
    except UnknownCountry:
        return None
    return _creator_minimum(code, table)


def meets_minimum(
    country: str, amount_usd: float, *, rate_table: RateTable | None = None
) -> bool:
    """
    Проверка цены против статического минимума страны.

    Сравнение всегда в USD (без дрейфа курса). Неподдерживаемая страна - False.
    """
    minimum = get_creator_minimum(country, rate_table=rate_table)
    if minimum is None:
        return False
    return amount_usd >= minimum.usd


def get_supported_countries(*, rate_table: RateTable | None = None) -> list[str]:
    """ISO коды поддерживаемых стран."""
    return resolve_rate_table(rate_table).supported_countries()


def is_country_supported(country: str, *, rate_table: RateTable | None = None) -> bool:
    """Поддерживается ли страна (код или название)."""
    table = resolve_rate_table(rate_table)
    try:
        table.resolve_country(country)
    except UnknownCountry:
        return False
    return True
