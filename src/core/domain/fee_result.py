"""
FeeResult - Результат расчёта комиссии по транзакции

Immutable Pydantic модель. Снапшот FeeResult сохраняется окружающим
приложением в запись платежа для аудита и сверки (contracts/schema/fee_result.json).

Все суммы - int в минорных единицах валюты.

ИНВАРИАНТЫ (проверяются при создании):
1. subscriber_fee_cents + creator_fee_cents == fee_cents
2. gross_cents - net_cents == fee_cents
3. base_cents + subscriber_fee_cents == gross_cents
4. base_cents - creator_fee_cents == net_cents
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class FeeMode(str, Enum):
    """
    Кто платит комиссию.

    SPLIT - текущая модель (обе стороны); ABSORB и PASS_TO_SUBSCRIBER
    сохраняются для подписок, созданных до split-модели.
    """

    SPLIT = "split"
    ABSORB = "absorb"
    PASS_TO_SUBSCRIBER = "pass_to_subscriber"


class PurposeType(str, Enum):
    """Тип использования страницы креатора (для аналитики, на ставку не влияет)"""

    PERSONAL = "personal"
    SERVICE = "service"


# Версия модели комиссий, фиксируемая в снапшоте платежа
FEE_MODEL_SPLIT_V1 = "split_v1"


# =============================================================================
# FEE RESULT
# =============================================================================


class FeeResult(BaseModel):
    """
    Разбивка комиссии по одной транзакции.

    base_cents - цена креатора; gross_cents - платит подписчик;
    net_cents - получает креатор; fee_cents - комиссия платформы.
    """

    # Суммы
    base_cents: int = Field(..., ge=0, description="Цена креатора (до комиссий)")
    gross_cents: int = Field(..., ge=0, description="Сумма, которую платит подписчик")
    net_cents: int = Field(..., description="Сумма, которую получает креатор")
    fee_cents: int = Field(..., ge=0, description="Полная комиссия платформы")
    subscriber_fee_cents: int = Field(..., ge=0, description="Часть комиссии подписчика")
    creator_fee_cents: int = Field(..., ge=0, description="Часть комиссии креатора")

    # Ставки и классификация
    effective_rate: float = Field(
        ..., ge=0, description="Фактическая ставка одной стороны (для отображения)"
    )
    currency: str = Field(..., min_length=3, max_length=3, description="ISO код валюты")
    fee_model: Literal["split_v1"] = Field(default=FEE_MODEL_SPLIT_V1)
    fee_mode: FeeMode = Field(default=FeeMode.SPLIT)
    purpose_type: PurposeType = Field(default=PurposeType.PERSONAL)
    is_cross_border: bool = Field(default=False)

    # Аудит (на комиссию не влияют)
    estimated_processor_fee_cents: int = Field(
        default=0, ge=0, description="Оценка комиссии процессора на gross"
    )
    estimated_margin_cents: int = Field(
        default=0, description="fee_cents - estimated_processor_fee_cents"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_identities(self) -> "FeeResult":
        """Проверка аддитивных инвариантов разбивки."""
        if self.subscriber_fee_cents + self.creator_fee_cents != self.fee_cents:
            raise ValueError(
                f"subscriber_fee_cents ({self.subscriber_fee_cents}) + creator_fee_cents "
                f"({self.creator_fee_cents}) != fee_cents ({self.fee_cents})"
            )
        if self.base_cents + self.subscriber_fee_cents != self.gross_cents:
            raise ValueError(
                f"base_cents ({self.base_cents}) + subscriber_fee_cents "
                f"({self.subscriber_fee_cents}) != gross_cents ({self.gross_cents})"
            )
        if self.base_cents - self.creator_fee_cents != self.net_cents:
            raise ValueError(
                f"base_cents ({self.base_cents}) - creator_fee_cents "
                f"({self.creator_fee_cents}) != net_cents ({self.net_cents})"
            )
        # Следует из трёх предыдущих
        if self.gross_cents - self.net_cents != self.fee_cents:
            raise ValueError(
                f"gross_cents - net_cents ({self.gross_cents - self.net_cents}) "
                f"!= fee_cents ({self.fee_cents})"
            )
        return self

    @property
    def platform_rate(self) -> float:
        """Полная ставка платформы относительно base_cents."""
        if self.base_cents == 0:
            return 0.0
        return self.fee_cents / self.base_cents

    def to_snapshot(self) -> dict:
        """Снапшот для записи платежа (JSON-совместимый dict)."""
        return self.model_dump(mode="json")
