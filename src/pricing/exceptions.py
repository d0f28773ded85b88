"""
Исключения движка ценообразования.

InvalidAmount - нарушение контракта вызывающим кодом (не восстанавливается).
UnknownCountry / UnknownCurrency - пробел в таблице тарифов; молчаливый
fallback к чужим допущениям ведёт к недооценке издержек.
UnprofitableConfiguration - процентные издержки страны съедают всю ставку
платформы; окружающая система должна оповестить операторов.
"""


class PricingError(Exception):
    """Базовое исключение движка ценообразования."""

    pass


class InvalidAmount(PricingError, ValueError):
    """Сумма не является неотрицательным целым числом минорных единиц."""

    def __init__(self, amount: object, reason: str = "must be a non-negative integer"):
        self.amount = amount
        super().__init__(f"Invalid amount {amount!r}: {reason}")


class UnknownCountry(PricingError, KeyError):
    """Страна не найдена в таблице тарифов."""

    def __init__(self, country: object):
        self.country = country
        super().__init__(country)

    def __str__(self) -> str:
        return f"Country {self.country!r} is not configured in the rate table"


class UnknownCurrency(PricingError, KeyError):
    """Валюта не найдена в таблице комиссий процессора."""

    def __init__(self, currency: object):
        self.currency = currency
        super().__init__(currency)

    def __str__(self) -> str:
        return f"Currency {self.currency!r} has no processor fee entry in the rate table"


class UnprofitableConfiguration(PricingError):
    """
    Чистая маржа страны неположительна: net_margin_rate <= 0.

    Деление fixed_cents / net_margin_rate не определено; минимум не может
    быть вычислен, платформа структурно теряет деньги в этой стране.
    """

    def __init__(self, country: str, net_margin_rate: float):
        self.country = country
        self.net_margin_rate = net_margin_rate
        super().__init__(
            f"Non-viable margin for {country}: net_margin_rate={net_margin_rate * 100:.2f}% "
            f"(percent fees exceed the platform fee rate)"
        )
