"""
Admin CLI - аудит движка ценообразования

Команды:
- fee: комиссия одной транзакции (split, legacy или по стране креатора)
- breakdown: процентные и фиксированные издержки страны
- minimum: динамический минимум для (страна, число подписчиков)
- minimums: статические минимумы всех стран
- config: публичный документ ставок

Таблица тарифов: --rate-table, иначе переменная окружения
PRICING_RATE_TABLE_PATH, иначе встроенная. Ошибки движка печатаются
в stderr с кодом возврата 1.
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Final

from jsonschema import ValidationError as SchemaValidationError

from src.core.domain.countries import country_name
from src.core.domain.currency import format_fee, format_rate
from src.pricing.engine import PricingEngine
from src.pricing.exceptions import PricingError

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Путь к JSON с переопределениями таблицы тарифов
RATE_TABLE_ENV: Final[str] = "PRICING_RATE_TABLE_PATH"


# =============================================================================
# HELPERS
# =============================================================================


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, sort_keys=False))


def _build_engine(args: argparse.Namespace) -> PricingEngine:
    """Движок с таблицей из --rate-table, переменной окружения или встроенной."""
    path = args.rate_table or os.environ.get(RATE_TABLE_ENV)
    if path:
        return PricingEngine.from_file(path)
    return PricingEngine()


# =============================================================================
# КОМАНДЫ
# =============================================================================


def cmd_fee(args: argparse.Namespace, engine: PricingEngine) -> int:
    """
    Комиссия одной транзакции.

    --legacy-mode имеет приоритет над --country; --country определяет
    cross-border по таблице тарифов.
    """
    if args.legacy_mode:
        result = engine.calculate_legacy_service_fee(
            args.base_cents,
            args.currency,
            args.legacy_mode,
            purpose=args.purpose,
            cross_border=args.cross_border,
        )
    elif args.country:
        result = engine.calculate_fee_for_country(
            args.base_cents, args.currency, args.country, purpose=args.purpose
        )
    else:
        result = engine.calculate_service_fee(
            args.base_cents, args.currency, args.purpose, cross_border=args.cross_border
        )

    if args.json:
        _print_json(result.to_snapshot())
        return 0

    currency = result.currency
    print(f"Mode:            {result.fee_mode.value} ({result.fee_model})")
    print(f"Cross-border:    {'yes' if result.is_cross_border else 'no'}")
    print(f"Base price:      {format_fee(result.base_cents, currency)}")
    print(f"Subscriber pays: {format_fee(result.gross_cents, currency)}")
    print(f"Creator gets:    {format_fee(result.net_cents, currency)}")
    print(
        f"Platform fee:    {format_fee(result.fee_cents, currency)} "
        f"({format_fee(result.subscriber_fee_cents, currency)} subscriber + "
        f"{format_fee(result.creator_fee_cents, currency)} creator)"
    )
    print(f"Effective rate:  {format_rate(result.effective_rate)} per side")
    print(f"Est. processor:  {format_fee(result.estimated_processor_fee_cents, currency)}")
    print(f"Est. margin:     {format_fee(result.estimated_margin_cents, currency)}")
    return 0


def cmd_breakdown(args: argparse.Namespace, engine: PricingEngine) -> int:
    """Издержки страны и чистая маржа платформы."""
    breakdown = engine.get_fee_breakdown(args.country)
    if args.json:
        _print_json(breakdown.model_dump(mode="json"))
        return 0

    print(f"{country_name(breakdown.country)} ({breakdown.country})")
    print(f"  Processing:      {breakdown.processing_percent * 100:.2f}%")
    print(f"  Billing:         {breakdown.billing_percent * 100:.2f}%")
    print(f"  Payout:          {breakdown.payout_percent * 100:.2f}%")
    print(f"  Cross-border:    {breakdown.cross_border_percent * 100:.2f}%")
    print(f"  Intl cards:      {breakdown.intl_card_percent * 100:.2f}%")
    print(f"  FX:              {breakdown.fx_percent * 100:.2f}%")
    print(f"  Total percent:   {breakdown.total_percent_fees * 100:.2f}%")
    print(f"  Platform rate:   {breakdown.platform_fee_rate * 100:.2f}%")
    print(f"  Net margin:      {breakdown.net_margin_rate * 100:.2f}%")
    print(f"  Processing fix:  {breakdown.processing_fixed_cents}c")
    print(f"  Payout fix:      {breakdown.payout_fixed_cents}c")
    print(f"  Account/month:   {breakdown.monthly_account_fee_cents}c")
    if not breakdown.is_profitable:
        print("  WARNING: non-positive net margin")
    return 0


def cmd_minimum(args: argparse.Namespace, engine: PricingEngine) -> int:
    """Динамический минимум; в JSON - документ для onboarding креатора."""
    if args.json:
        _print_json(engine.creator_minimum_document(args.country, args.subscribers))
        return 0

    minimum = engine.get_dynamic_minimum(args.country, args.subscribers)
    print(
        f"{country_name(minimum.country)} ({minimum.country}), "
        f"{minimum.subscriber_count} subscriber(s)"
    )
    print(f"  Minimum:       ${minimum.minimum_usd} / {minimum.minimum_local} {minimum.currency}")
    print(f"  Fixed costs:   {minimum.fixed_cents:.2f}c per transaction")
    print(f"  Percent fees:  {minimum.percent_fees * 100:.2f}%")
    print(f"  Net margin:    {minimum.net_margin_rate * 100:.2f}%")
    if minimum.floor_applied:
        print("  Cross-border floor applied")
    return 0


def cmd_minimums(args: argparse.Namespace, engine: PricingEngine) -> int:
    """Статические минимумы всех стран при floor_subscriber_count."""
    document = engine.minimums_document()
    if args.json:
        _print_json(document)
        return 0

    for code, minimum in document["minimums"].items():
        print(f"{code}  ${minimum['usd']:>4}  {minimum['local']:>8} {minimum['currency']}")
    print(f"{len(document['minimums'])} countries")
    return 0


def cmd_config(args: argparse.Namespace, engine: PricingEngine) -> int:
    """Публичный документ ставок платформы."""
    document = engine.fee_config_document()
    if args.json:
        _print_json(document)
        return 0

    print(f"Fee model:      {document['fee_model']}")
    print(
        f"Domestic:       {document['domestic_fee_percent']}% "
        f"({document['domestic_split_percent']}% + {document['domestic_split_percent']}%)"
    )
    print(
        f"Cross-border:   {document['cross_border_fee_percent']}% "
        f"({document['cross_border_split_percent']}% + {document['cross_border_split_percent']}%)"
    )
    print(f"Cross-border countries: {', '.join(sorted(engine.rate_table.cross_border_countries))}")
    return 0


# =============================================================================
# PARSER
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Парсер: глобальные опции и подкоманды fee / breakdown / minimum / minimums / config."""
    parser = argparse.ArgumentParser(prog="pricing", description="Pricing engine audit CLI.")
    parser.add_argument(
        "--rate-table",
        help=f"JSON rate table overrides (default: ${RATE_TABLE_ENV} or built-in table).",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    fee_parser = subparsers.add_parser("fee", help="Calculate the fee for one transaction.")
    fee_parser.add_argument("base_cents", type=int, help="Creator price in minor units.")
    fee_parser.add_argument("--currency", default="USD")
    fee_parser.add_argument("--purpose", default="personal")
    fee_parser.add_argument("--cross-border", action="store_true", help="Apply cross-border rates.")
    fee_parser.add_argument("--country", help="Creator country; sets cross-border from the rate table.")
    fee_parser.add_argument(
        "--legacy-mode",
        choices=["split", "absorb", "pass_to_subscriber"],
        help="Fee mode of a subscription created before the split model.",
    )
    fee_parser.set_defaults(func=cmd_fee)

    breakdown_parser = subparsers.add_parser("breakdown", help="Show percent fees for a country.")
    breakdown_parser.add_argument("country")
    breakdown_parser.set_defaults(func=cmd_breakdown)

    minimum_parser = subparsers.add_parser("minimum", help="Dynamic minimum for a creator.")
    minimum_parser.add_argument("country")
    minimum_parser.add_argument("--subscribers", type=int, default=0)
    minimum_parser.set_defaults(func=cmd_minimum)

    minimums_parser = subparsers.add_parser("minimums", help="Static minimums for all countries.")
    minimums_parser.set_defaults(func=cmd_minimums)

    config_parser = subparsers.add_parser("config", help="Published fee configuration.")
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Точка входа CLI.

    Returns:
        Код возврата: 0 - успех, 1 - ошибка движка или таблицы тарифов
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        engine = _build_engine(args)
        return args.func(args, engine)
    except (PricingError, ValueError, SchemaValidationError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


def run(argv: list[str] | None = None) -> None:
    """main с выходом из процесса (console script)."""
    raise SystemExit(main(argv))


if __name__ == "__main__":
    run()
