"""
Country/Fee Breakdown Resolver

Собирает процентные и фиксированные издержки платформы для страны креатора
из таблицы тарифов. Результат питает решатель минимумов и admin-отчёты.

Модель destination charges: платформа платит ВСЕ комиссии процессора:
1. Processing: ~3.5% (2.9% + экспозиция международных карт)
2. Billing: 0.7%
3. Payout: 0.25%
4. Cross-border transfer: 0% (US) / 0.25% (UK, SEPA) / 1% (прочие)
5. Международные карты и FX: масштабируются долей intl_mix

Неизвестная страна - UnknownCountry: ошибочное допущение об издержках
ведёт к недооценке минимума и убыткам платформы.
"""

import logging

from src.core.domain.fee_breakdown import FeeBreakdown
from src.pricing.rate_table import RATE_PRECISION, RateTable, resolve_rate_table

logger = logging.getLogger(__name__)


def get_fee_breakdown(country: str, *, rate_table: RateTable | None = None) -> FeeBreakdown:
    """
    Разложение издержек платформы для страны.

    Args:
        country: ISO alpha-2 код или название страны ("NG", "Nigeria")
        rate_table: Таблица тарифов (default - DEFAULT_RATE_TABLE)

    Returns:
        FeeBreakdown (net_margin_rate может быть <= 0)

    Raises:
        UnknownCountry: Если страна не настроена в таблице
    """
    table = resolve_rate_table(rate_table)
    code = table.resolve_country(country)
    profile = table.countries[code]

    intl_card_percent = round(table.intl_card_rate * profile.intl_mix, RATE_PRECISION)
    fx_percent = round(table.fx_rate * profile.intl_mix, RATE_PRECISION)
    total_percent_fees = round(
        table.processing_percent
        + table.billing_percent
        + table.payout_percent
        + profile.cross_border_transfer_rate
        + intl_card_percent
        + fx_percent,
        RATE_PRECISION,
    )
    platform_fee_rate = table.total_rate(code in table.cross_border_countries)
    net_margin_rate = round(platform_fee_rate - total_percent_fees, RATE_PRECISION)

    if net_margin_rate <= 0:
        logger.warning(
            "Fee breakdown for %s has non-positive net margin: %.4f%%",
            code,
            net_margin_rate * 100,
        )

    return FeeBreakdown(
        country=code,
        processing_percent=table.processing_percent,
        billing_percent=table.billing_percent,
        payout_percent=table.payout_percent,
        cross_border_percent=profile.cross_border_transfer_rate,
        intl_card_percent=intl_card_percent,
        fx_percent=fx_percent,
        total_percent_fees=total_percent_fees,
        platform_fee_rate=platform_fee_rate,
        net_margin_rate=net_margin_rate,
        processing_fixed_cents=table.processing_fixed_cents,
        payout_fixed_cents=profile.payout_fixed_cents,
        monthly_account_fee_cents=profile.monthly_account_fee_cents,
        intl_mix=profile.intl_mix,
    )
