"""
FeeBreakdown - Разложение процентных издержек платформы по стране

Модель destination charges: платформа является merchant of record и платит
ВСЕ комиссии процессора сама. Разложение показывает, какая доля платформенной
комиссии остаётся после издержек (net_margin_rate).

ФОРМУЛЫ:
    intl_card_percent  = intl_card_rate * intl_mix
    fx_percent         = fx_rate * intl_mix
    total_percent_fees = processing + billing + payout + cross_border + intl_card + fx
    net_margin_rate    = platform_fee_rate - total_percent_fees

net_margin_rate может быть около нуля или отрицательным: это бизнес-риск
конфигурации, а не ошибка программы. Решатель минимумов отвергает такие страны.
"""

from pydantic import BaseModel, Field


class FeeBreakdown(BaseModel):
    """Процентные и фиксированные издержки платформы для одной страны."""

    country: str = Field(..., min_length=2, max_length=2, description="ISO alpha-2")

    # Процентные издержки (доли)
    processing_percent: float = Field(..., ge=0, description="Процессинг (blended)")
    billing_percent: float = Field(..., ge=0, description="Billing для подписок")
    payout_percent: float = Field(..., ge=0, description="Процент за выплату")
    cross_border_percent: float = Field(..., ge=0, description="Cross-border transfer")
    intl_card_percent: float = Field(..., ge=0, description="Надбавка за международные карты")
    fx_percent: float = Field(..., ge=0, description="Конвертация валюты")
    total_percent_fees: float = Field(..., ge=0, description="Сумма процентных издержек")

    # Маржа
    platform_fee_rate: float = Field(..., gt=0, description="Полная ставка платформы для страны")
    net_margin_rate: float = Field(..., description="platform_fee_rate - total_percent_fees")

    # Фиксированные издержки (центы USD)
    processing_fixed_cents: int = Field(..., ge=0)
    payout_fixed_cents: int = Field(..., ge=0)
    monthly_account_fee_cents: int = Field(..., ge=0)

    # Допущение о доле международных карт
    intl_mix: float = Field(..., ge=0, le=1)

    model_config = {"frozen": True}

    @property
    def is_profitable(self) -> bool:
        """Положительна ли маржа после процентных издержек."""
        return self.net_margin_rate > 0
