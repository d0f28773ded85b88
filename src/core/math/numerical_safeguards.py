"""
Numerical Safeguards - арифметика минорных денежных единиц

Модуль обеспечивает детерминированную арифметику для сумм в минорных
единицах валюты (cents, kobo, pence):
- Округление произведения суммы на ставку (round half up) через Decimal
- Округление вверх до шага (ceil to step) с защитой от float-артефактов
- Epsilon-сравнения для ставок (0.09 vs 0.045 * 2)
- Валидация входов (NaN/Inf, отрицательные значения, диапазоны)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Суммы в минорных единицах всегда int
2. Ставки (rate) хранятся как float, но умножаются на суммы только через Decimal
3. NaN/Inf никогда не проходят валидацию
4. Все операции детерминированы и воспроизводимы
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Epsilon для сравнения ставок (доли, например 0.045)
EPS_RATE: Final[float] = 1e-12

# Epsilon для сравнения float (относительная толерантность)
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9

# Epsilon для сравнения float (абсолютная толерантность)
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12

# Допуск при округлении вверх до шага: 5604.0000000001 / 5 не должно давать лишний шаг
EPS_STEP: Final[float] = 1e-9


# =============================================================================
# ВАЛИДНОСТЬ FLOAT
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли число конечным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение конечное
    """
    return math.isfinite(value)


def is_whole_minor_units(value: object) -> bool:
    """
    Проверка, что значение - целое число минорных единиц.

    bool исключается явно: True/False не являются суммами.

    Examples:
        >>> is_whole_minor_units(10000)
        True
        >>> is_whole_minor_units(100.5)
        False
        >>> is_whole_minor_units(True)
        False
    """
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# EPSILON-СРАВНЕНИЯ
# =============================================================================


def is_close(
    a: float,
    b: float,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Сравнение float с учётом машинной точности.

    Используется для проверки согласованности ставок в таблице тарифов:
    split_rate * 2 == platform_fee_rate.

    Examples:
        >>> is_close(0.045 * 2, 0.09)
        True
        >>> is_close(0.09, 0.105)
        False
    """
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


def is_positive(value: float, tol: float = EPS_RATE) -> bool:
    """
    Проверка, является ли значение строго положительным с учётом толерантности.

    Маржа 1e-15 считается нулевой, а не положительной.
    """
    return value > tol


# =============================================================================
# ОКРУГЛЕНИЕ МИНОРНЫХ ЕДИНИЦ
# =============================================================================


def to_decimal(value: float) -> Decimal:
    """
    Конверсия float-ставки в Decimal через строковое представление.

    Decimal(0.045) даёт 0.04499999999999999833..., Decimal("0.045") - ровно 0.045.
    """
    return Decimal(str(value))


def round_half_up(value: Decimal | float) -> int:
    """
    Округление до целого по правилу round half up.

    Для неотрицательных значений совпадает с Math.round на клиенте,
    в отличие от встроенного round() (banker's rounding).

    Examples:
        >>> round_half_up(Decimal("236.25"))
        236
        >>> round_half_up(Decimal("0.5"))
        1
        >>> round_half_up(2.5)
        3
    """
    if not isinstance(value, Decimal):
        value = to_decimal(value)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def apply_rate(amount_minor: int, rate: float) -> int:
    """
    Вычисление доли суммы: round_half_up(amount_minor * rate).

    Args:
        amount_minor: Сумма в минорных единицах (int)
        rate: Ставка (доля, например 0.045)

    Returns:
        Результат в минорных единицах (int)

    Examples:
        >>> apply_rate(10000, 0.045)
        450
        >>> apply_rate(10000, 0.0525)
        525
        >>> apply_rate(4500, 0.0525)
        236
    """
    return round_half_up(Decimal(amount_minor) * to_decimal(rate))


def ceil_to_step(value: float, step: float, eps: float = EPS_STEP) -> float:
    """
    Округление вверх до ближайшего кратного step.

    Значения, отличающиеся от кратного step не более чем на eps шагов,
    считаются кратными (защита от 60.00000000001 → 65).

    Args:
        value: Исходное значение
        step: Шаг округления (> 0)
        eps: Допуск в долях шага

    Returns:
        Наименьшее кратное step, не меньшее value

    Raises:
        ValueError: Если step <= 0 или value невалиден

    Examples:
        >>> ceil_to_step(56.04, 5)
        60
        >>> ceil_to_step(14.29, 5)
        15
        >>> ceil_to_step(60.0, 5)
        60
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    if not is_valid_float(value):
        raise ValueError(f"value must be a valid float (not NaN/Inf), got {value}")

    steps = value / step
    nearest = round(steps)
    if abs(steps - nearest) <= eps:
        return nearest * step
    return math.ceil(steps) * step


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_non_negative(value: float, name: str) -> None:
    """
    Валидация, что значение неотрицательное и конечное.

    Raises:
        ValueError: Если value < 0 или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def validate_in_range(
    value: float,
    name: str,
    min_value: float | None = None,
    max_value: float | None = None,
) -> None:
    """
    Валидация, что значение в заданном диапазоне.

    Raises:
        ValueError: Если value вне диапазона или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if min_value is not None and value < min_value:
        raise ValueError(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise ValueError(f"{name} must be <= {max_value}, got {value}")
