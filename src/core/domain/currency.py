"""
Currency - валютные коды и форматирование сумм

Суммы хранятся в минорных единицах. Для zero-decimal валют (JPY, KRW, ...)
минорная единица совпадает с основной: 100 JPY - это 100, а не 1.00.
"""

from decimal import Decimal
from typing import Final

# Список zero-decimal валют платёжного провайдера
ZERO_DECIMAL_CURRENCIES: Final[frozenset[str]] = frozenset(
    {
        "BIF", "CLP", "DJF", "GNF", "JPY", "KMF", "KRW", "MGA",
        "PYG", "RWF", "UGX", "VND", "VUV", "XAF", "XOF", "XPF",
    }
)

# Символы для отображения; для прочих валют используется ISO код
CURRENCY_SYMBOLS: Final[dict[str, str]] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "NGN": "₦",
    "JPY": "¥",
    "KRW": "₩",
    "GHS": "GH₵",
    "ZAR": "R",
    "KES": "KSh",
}


def normalize_currency(currency: str) -> str:
    """Нормализация кода валюты: "usd " → "USD"."""
    return currency.strip().upper()


def is_zero_decimal(currency: str) -> bool:
    """Проверка, является ли валюта zero-decimal."""
    return normalize_currency(currency) in ZERO_DECIMAL_CURRENCIES


def minor_to_major(amount_minor: int, currency: str) -> Decimal:
    """
    Конверсия минорных единиц в основные.

    Examples:
        >>> minor_to_major(10450, "USD")
        Decimal('104.5')
        >>> minor_to_major(500, "JPY")
        Decimal('500')
    """
    if is_zero_decimal(currency):
        return Decimal(amount_minor)
    return Decimal(amount_minor) / Decimal(100)


def format_fee(fee_minor: int, currency: str) -> str:
    """
    Форматирование суммы для отображения.

    Examples:
        >>> format_fee(900, "USD")
        '$9.00'
        >>> format_fee(123456, "NGN")
        '₦1,234.56'
        >>> format_fee(500, "JPY")
        '¥500'
        >>> format_fee(1050, "CHF")
        'CHF 10.50'
    """
    code = normalize_currency(currency)
    amount = minor_to_major(fee_minor, code)
    sign = "-" if amount < 0 else ""
    digits = f"{abs(amount):,.0f}" if is_zero_decimal(code) else f"{abs(amount):,.2f}"

    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code} {digits}"
    return f"{sign}{symbol}{digits}"


def format_rate(rate: float) -> str:
    """
    Форматирование ставки в проценты с одним знаком.

    Examples:
        >>> format_rate(0.045)
        '4.5%'
        >>> format_rate(0.105)
        '10.5%'
    """
    return f"{rate * 100:.1f}%"
