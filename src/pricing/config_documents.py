"""
Config / Introspection Documents

Read-only JSON документы для клиентского отображения цен:
- fee config: ставки платформы и производные проценты
- minimums: статические минимумы по странам + meta
- creator minimum: динамический минимум конкретного креатора

Документы fee config и minimums проверяются JSON Schema контрактами
(contracts/schema/fee_config.json, minimums_config.json) перед возвратом.
"""

from typing import Any

from src.core.contracts import validate_fee_config, validate_minimums_config
from src.core.domain.fee_result import FEE_MODEL_SPLIT_V1
from src.pricing.minimums import generate_creator_minimums, get_dynamic_minimum
from src.pricing.rate_table import RateTable, resolve_rate_table


def _percent(rate: float) -> float:
    # 0.0525 * 100 == 5.250000000000001
    return round(rate * 100, 4)


def _format_percent(rate: float) -> str:
    """0.0525 → "5.25%", 0.09 → "9%"."""
    return f"{_percent(rate):g}%"


def build_fee_config_document(*, rate_table: RateTable | None = None) -> dict[str, Any]:
    """
    Документ ставок платформы.

    Returns:
        dict с platform_fee_rate, split_rate, cross_border_buffer
        и производными процентами (domestic / cross-border)
    """
    table = resolve_rate_table(rate_table)
    document = {
        "fee_model": FEE_MODEL_SPLIT_V1,
        "platform_fee_rate": table.platform_fee_rate,
        "split_rate": table.split_rate,
        "cross_border_buffer": table.cross_border_buffer,
        "platform_fee_percent": _percent(table.platform_fee_rate),
        "split_percent": _percent(table.split_rate),
        "domestic_fee_percent": _percent(table.platform_fee_rate),
        "cross_border_fee_percent": _percent(table.cross_border_fee_rate),
        "domestic_split_percent": _percent(table.split_rate),
        "cross_border_split_percent": _percent(table.cross_border_split_rate),
    }
    validate_fee_config(document)
    return document


def build_minimums_document(*, rate_table: RateTable | None = None) -> dict[str, Any]:
    """
    Документ публичных минимумов по странам.

    Минимумы рассчитаны при floor_subscriber_count подписчиках; новые
    креаторы видят более высокий динамический минимум.

    Raises:
        UnprofitableConfiguration: Если хотя бы одна страна убыточна
    """
    table = resolve_rate_table(rate_table)
    minimums = generate_creator_minimums(rate_table=table)

    document = {
        "minimums": {
            code: {"usd": minimum.usd, "local": minimum.local, "currency": minimum.currency}
            for code, minimum in minimums.items()
        },
        "supported_countries": list(minimums),
        "meta": {
            "platform_fee": (
                f"{_format_percent(table.platform_fee_rate)} domestic, "
                f"{_format_percent(table.cross_border_fee_rate)} cross-border"
            ),
            "model": "Destination charges - platform absorbs all processor fees",
            "floor_subscriber_count": table.floor_subscriber_count,
            "cross_border_countries": sorted(table.cross_border_countries),
            "cross_border_floor_usd": table.cross_border_minimum_floor_usd,
            "formula": (
                "min = (processing_fixed + payout_fixed + account_fee / subs) "
                "/ (platform_rate - total_percent_fees)"
            ),
        },
    }
    validate_minimums_config(document)
    return document


def build_creator_minimum_document(
    country: str,
    subscriber_count: int,
    *,
    rate_table: RateTable | None = None,
) -> dict[str, Any]:
    """
    Динамический минимум креатора с пояснением модели комиссий.

    floor_minimum - минимум при floor_subscriber_count подписчиках
    (к чему сойдётся минимум по мере роста).
    """
    table = resolve_rate_table(rate_table)
    dynamic = get_dynamic_minimum(country, subscriber_count, rate_table=table)
    floor = get_dynamic_minimum(country, table.floor_subscriber_count, rate_table=table)

    side_rate = table.side_rate(dynamic.is_cross_border)
    return {
        "minimum": {
            "usd": dynamic.minimum_usd,
            "local": dynamic.minimum_local,
            "currency": dynamic.currency,
        },
        "subscriber_count": dynamic.subscriber_count,
        "floor_minimum": floor.minimum_usd,
        "is_cross_border": dynamic.is_cross_border,
        "fee_model": {
            "type": "destination",
            "platform_fee": _format_percent(dynamic.platform_fee_rate),
            "creator_fee": _format_percent(side_rate),
            "creator_keeps": _format_percent(1 - side_rate),
            "processor_fees_paid_by": "platform",
        },
        "audit": {
            "percent_fees": dynamic.percent_fees,
            "fixed_cents": dynamic.fixed_cents,
            "net_margin_rate": dynamic.net_margin_rate,
        },
    }
