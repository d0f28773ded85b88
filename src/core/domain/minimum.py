"""
DynamicMinimum / CreatorMinimum - минимальная цена подписки

DynamicMinimum вычисляется по запросу для пары (страна, число подписчиков)
и никогда не сохраняется. CreatorMinimum - статический минимум страны при
floor_subscriber_count подписчиках (сложившийся креатор).
"""

from pydantic import BaseModel, Field


class DynamicMinimum(BaseModel):
    """Минимум подписки для страны с учётом амортизации месячной комиссии."""

    country: str = Field(..., min_length=2, max_length=2, description="ISO alpha-2")
    minimum_usd: int = Field(..., ge=0, description="Минимум в USD (целые доллары)")
    minimum_local: int = Field(..., ge=0, description="Минимум в местной валюте")
    currency: str = Field(..., min_length=3, max_length=3)

    # Компоненты расчёта (для аудита)
    subscriber_count: int = Field(..., ge=1, description="Эффективное число подписчиков")
    fixed_cents: float = Field(..., ge=0, description="Фиксированные издержки на транзакцию")
    percent_fees: float = Field(..., ge=0)
    platform_fee_rate: float = Field(..., gt=0)
    net_margin_rate: float = Field(..., gt=0)

    is_cross_border: bool = Field(default=False)
    floor_applied: bool = Field(
        default=False, description="Сработал ли минимальный порог cross-border"
    )

    model_config = {"frozen": True}


class CreatorMinimum(BaseModel):
    """Статический минимум страны (публикуется в конфигурации)."""

    usd: int = Field(..., ge=0)
    local: int = Field(..., ge=0)
    currency: str = Field(..., min_length=3, max_length=3)

    # Аудит
    calculated_margin: float = Field(..., description="Чистая маржа после всех издержек")
    total_fee_percent: float = Field(..., ge=0, description="Сумма процентных издержек")

    model_config = {"frozen": True}
