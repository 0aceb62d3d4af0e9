"""
Bonding Curve — конверсия reserve ↔ derivative по формуле reserve ratio

Чистые функции без состояния. Цена определяется текущими supply, reserve
balance и параметром reserve ratio (ppm), а не order book.

ФОРМУЛЫ:
    purchase = supply * ((1 + deposit / reserve) ^ (ratio / 1e6) - 1)
    sale     = reserve * (1 - (1 - burn / supply) ^ (1e6 / ratio))
    spot     = reserve / (supply * ratio / 1e6)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Обе функции монотонны по amount
2. purchase → sale того же номинала возвращает <= deposit (нет арбитража)
3. Округление всегда в пользу движка (floor выплат)
4. burn >= supply отклоняется до вызова формулы (база <= 0)
"""

from fractions import Fraction
from typing import Final

from src.core.errors import InvalidAmount
from src.core.math.fixed_point_power import general_power, power
from src.core.math.numerical_safeguards import (
    checked_add,
    checked_mul,
    mul_div,
    require_in_range,
    require_positive,
)

# =============================================================================
# RESERVE RATIO
# =============================================================================

# 100% в ppm: линейная конверсия без степени
MAX_RESERVE_RATIO_PPM: Final[int] = 1_000_000

MIN_RESERVE_RATIO_PPM: Final[int] = 1

# Линейная зависимость цены от supply
LINEAR_RESERVE_RATIO_PPM: Final[int] = 500_000


def validate_curve_state(supply: int, reserve_balance: int, reserve_ratio_ppm: int) -> None:
    """
    Проверка состояния кривой перед вычислением.

    Raises:
        InvalidAmount: supply/reserve == 0 или ratio вне [1, 1_000_000]
    """
    require_positive(supply, "supply")
    require_positive(reserve_balance, "reserve_balance")
    require_in_range(
        reserve_ratio_ppm, "reserve_ratio_ppm", MIN_RESERVE_RATIO_PPM, MAX_RESERVE_RATIO_PPM
    )


def purchase_amount(
    supply: int,
    reserve_balance: int,
    reserve_ratio_ppm: int,
    deposit_amount: int,
) -> int:
    """
    Количество derivative, которое выпускается за депозит reserve.

    Args:
        supply: Текущий total supply derivative
        reserve_balance: Текущий баланс reserve движка
        reserve_ratio_ppm: Reserve ratio (1..1_000_000)
        deposit_amount: Депозит reserve (> 0)

    Returns:
        Количество derivative (floor)

    Raises:
        InvalidAmount: deposit == 0 или состояние вне домена
        ArithmeticOverflow: Переполнение fixed-point вычисления
    """
    validate_curve_state(supply, reserve_balance, reserve_ratio_ppm)
    require_positive(deposit_amount, "deposit_amount")

    if reserve_ratio_ppm == MAX_RESERVE_RATIO_PPM:
        return mul_div(supply, deposit_amount, reserve_balance)

    base_numerator = checked_add(deposit_amount, reserve_balance)
    result, precision = power(
        base_numerator, reserve_balance, reserve_ratio_ppm, MAX_RESERVE_RATIO_PPM
    )
    new_supply = checked_mul(supply, result) >> precision
    return new_supply - supply


def sale_amount(
    supply: int,
    reserve_balance: int,
    reserve_ratio_ppm: int,
    burn_amount: int,
) -> int:
    """
    Количество reserve, возвращаемое за сжигание derivative.

    Вычисляется через обратное основание supply / (supply - burn) >= 1:
        r = (supply / (supply - burn)) ^ (1e6 / ratio)
        sale = reserve * (r - 1) / r

    Args:
        supply: Текущий total supply derivative
        reserve_balance: Текущий баланс reserve движка
        reserve_ratio_ppm: Reserve ratio (1..1_000_000)
        burn_amount: Сжигаемое количество (0 < burn < supply)

    Returns:
        Количество reserve (floor), всегда < reserve_balance

    Raises:
        InvalidAmount: burn == 0, burn >= supply или состояние вне домена
        ArithmeticOverflow: Переполнение fixed-point вычисления
    """
    validate_curve_state(supply, reserve_balance, reserve_ratio_ppm)
    require_positive(burn_amount, "burn_amount")

    if burn_amount >= supply:
        raise InvalidAmount(
            f"burn_amount {burn_amount} must be < supply {supply}",
            burn_amount=burn_amount,
            supply=supply,
        )

    if reserve_ratio_ppm == MAX_RESERVE_RATIO_PPM:
        return mul_div(reserve_balance, burn_amount, supply)

    result, precision = general_power(
        supply, supply - burn_amount, MAX_RESERVE_RATIO_PPM, reserve_ratio_ppm
    )
    scaled_reserve = checked_mul(reserve_balance, result)
    reserve_at_unit = reserve_balance << precision
    return (scaled_reserve - reserve_at_unit) // result


def spot_price(supply: int, reserve_balance: int, reserve_ratio_ppm: int) -> Fraction:
    """
    Мгновенная цена derivative в единицах reserve.

    Examples:
        >>> spot_price(10, 10, 500_000)
        Fraction(2, 1)
    """
    validate_curve_state(supply, reserve_balance, reserve_ratio_ppm)
    return Fraction(
        reserve_balance * MAX_RESERVE_RATIO_PPM, supply * reserve_ratio_ppm
    )
