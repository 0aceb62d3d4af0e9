"""
Fixed-Point Power — детерминированное возведение в рациональную степень

Модуль вычисляет (baseN / baseD) ^ (expN / expD) в целочисленной fixed-point
арифметике с эмуляцией 256-битного слова:
- Натуральный логарифм основания с 127 дробными битами
  (целая часть через bit_length, дробная — повторным возведением в квадрат)
- Умножение логарифма на рациональный показатель
- Экспонента через range reduction: e^y = 2^k · e^r, r ∈ [0, ln 2),
  e^r — ряд Тейлора из 33 членов с точными коэффициентами 33!/n!
- Выбор точности результата по таблице MAX_EXP_ARRAY

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ни одно промежуточное значение не превышает 2**256 - 1 (иначе ArithmeticOverflow)
2. Точность деградирует плавно от MAX_PRECISION до MIN_PRECISION
3. Каждый шаг округляет вниз: результат никогда не превышает точное значение
4. Относительная ошибка < POWER_RELATIVE_ERROR_BOUND на всём домене

ФОРМУЛЫ:
    power(bN, bD, eN, eD) = (result, precision)
    result / 2**precision ≈ (bN / bD) ** (eN / eD)
"""

import math
from typing import Final

from loguru import logger

from src.core.errors import ArithmeticOverflow, InvalidAmount
from src.core.math.numerical_safeguards import (
    UINT32_MAX,
    check_width,
    checked_mul,
    floor_log2,
    require_in_range,
    require_positive,
    require_uint256,
)

# =============================================================================
# FIXED-POINT ПАРАМЕТРЫ
# =============================================================================

# Минимальная гарантированная точность результата (бит)
MIN_PRECISION: Final[int] = 32

# Максимальная точность (дробные биты внутреннего представления)
MAX_PRECISION: Final[int] = 127

# 1.0 и 2.0 в fixed-point с MAX_PRECISION дробными битами
FIXED_1: Final[int] = 1 << MAX_PRECISION
FIXED_2: Final[int] = 1 << (MAX_PRECISION + 1)

# Верхняя граница числителя основания: baseN * FIXED_1 < 2**256
MAX_NUM: Final[int] = 1 << (256 - MAX_PRECISION)

# Документированная граница относительной ошибки power()
POWER_RELATIVE_ERROR_BOUND: Final[float] = 2.0**-32

# Количество членов ряда Тейлора для e^r
EXP_TAYLOR_TERMS: Final[int] = 33


def _compute_ln2(precision: int, guard_bits: int = 32) -> int:
    """
    ln(2) * 2**precision (floor, с точностью до 1 ulp).

    Ряд ln 2 = Σ 1 / (k · 2^k), k >= 1, на шкале precision + guard_bits.
    """
    one = 1 << (precision + guard_bits)
    total = 0
    k = 1
    while True:
        term = one // (k << k)
        if term == 0:
            break
        total += term
        k += 1
    return total >> guard_bits


# ln(2) на шкале FIXED_1
LN2_FIXED: Final[int] = _compute_ln2(MAX_PRECISION)

# Верхняя оценка ln(2) на шкале FIXED_1 для range reduction в exp
# (r не больше точного остатка, результат не завышается)
_LN2_EXP_DIVISOR: Final[int] = LN2_FIXED + 2

# ln(2) с 119 дробными битами: res_log2 (< 2**135) * ln2 помещается в 256 бит
_LN2_LOG_SHIFT: Final[int] = 8
_LN2_FOR_LOG: Final[int] = LN2_FIXED >> _LN2_LOG_SHIFT

# Коэффициенты ряда Тейлора: 33! / n! для n = 2..33
_EXP_FACTORIAL: Final[int] = math.factorial(EXP_TAYLOR_TERMS)
_EXP_COEFFICIENTS: Final[tuple[int, ...]] = tuple(
    _EXP_FACTORIAL // math.factorial(n) for n in range(2, EXP_TAYLOR_TERMS + 1)
)

# =============================================================================
# MAX_EXP_ARRAY: границы аргумента exp по уровням точности
# =============================================================================

# MAX_EXP_ARRAY[p]: максимальный аргумент x (шкала FIXED_1), для которого
# e^(x / FIXED_1) * 2**p < 2**255. Уровни ниже MIN_PRECISION не используются.
MAX_EXP_ARRAY: Final[tuple[int, ...]] = tuple(
    (255 - precision) * LN2_FIXED if precision >= MIN_PRECISION else 0
    for precision in range(MAX_PRECISION + 1)
)


# =============================================================================
# LOG / EXP
# =============================================================================


def general_log(x: int) -> int:
    """
    Натуральный логарифм в fixed-point: ln(x / FIXED_1) * FIXED_1.

    Args:
        x: Значение на шкале FIXED_1, FIXED_1 <= x <= 2**256 - 1

    Returns:
        ln(x / FIXED_1) на шкале FIXED_1 (округление вниз)

    Raises:
        InvalidAmount: Если x < FIXED_1 (логарифм отрицателен)
        ArithmeticOverflow: Если x вне 256-битного домена
    """
    check_width(x, "log argument")
    if x < FIXED_1:
        raise InvalidAmount(f"general_log requires x >= FIXED_1, got {x}")

    res = 0

    # Целая часть log2: x = 2^count * x', x' ∈ [1, 2)
    if x >= FIXED_2:
        count = floor_log2(x // FIXED_1)
        x >>= count
        res = count * FIXED_1

    # Дробная часть log2: по одному биту на каждое возведение в квадрат
    if x > FIXED_1:
        for i in range(MAX_PRECISION, 0, -1):
            x = checked_mul(x, x) >> MAX_PRECISION
            if x >= FIXED_2:
                x >>= 1
                res += 1 << (i - 1)

    return checked_mul(res, _LN2_FOR_LOG) >> (MAX_PRECISION - _LN2_LOG_SHIFT)


def general_exp(x: int, precision: int) -> int:
    """
    Экспонента в fixed-point: e^(x / FIXED_1) * 2**precision.

    Range reduction: x = k·ln2 + r, e^x = 2^k · e^r. e^r вычисляется рядом
    Тейлора на полной точности (MAX_PRECISION), затем сдвигается на k.

    Args:
        x: Аргумент на шкале FIXED_1, x >= 0
        precision: Точность результата (MIN_PRECISION..MAX_PRECISION)

    Returns:
        e^(x / FIXED_1) * 2**precision (округление вниз)

    Raises:
        ArithmeticOverflow: Если результат не помещается в 256 бит
    """
    if x < 0:
        raise InvalidAmount(f"general_exp requires x >= 0, got {x}")
    require_in_range(precision, "precision", MIN_PRECISION, MAX_PRECISION)

    k, r = divmod(x, _LN2_EXP_DIVISOR)

    # e^r на шкале FIXED_1: 1 + r + Σ r^n / n!
    xi = r
    res = 0
    for coefficient in _EXP_COEFFICIENTS:
        xi = checked_mul(xi, r) >> MAX_PRECISION
        res += checked_mul(xi, coefficient)
    res = check_width(res, "exp series") // _EXP_FACTORIAL + r + FIXED_1

    shift = k + precision - MAX_PRECISION
    if shift >= 0:
        return check_width(res << shift, "exp result")
    return res >> -shift


def find_position_in_max_exp_array(x: int) -> int:
    """
    Наибольшая точность p, для которой x <= MAX_EXP_ARRAY[p].

    Бинарный поиск по убывающей таблице.

    Raises:
        ArithmeticOverflow: Если x превышает границу даже для MIN_PRECISION
    """
    lo = MIN_PRECISION
    hi = MAX_PRECISION

    while lo + 1 < hi:
        mid = (lo + hi) // 2
        if MAX_EXP_ARRAY[mid] >= x:
            lo = mid
        else:
            hi = mid

    if MAX_EXP_ARRAY[hi] >= x:
        return hi
    if MAX_EXP_ARRAY[lo] >= x:
        return lo

    raise ArithmeticOverflow(
        f"exp argument {x} exceeds bound {MAX_EXP_ARRAY[MIN_PRECISION]} "
        f"at minimum precision {MIN_PRECISION}",
        exp_argument=x,
    )


# =============================================================================
# POWER
# =============================================================================


def general_power(
    base_numerator: int,
    base_denominator: int,
    exponent_numerator: int,
    exponent_denominator: int,
) -> tuple[int, int]:
    """
    (baseN / baseD) ^ (expN / expD) для любого положительного рационального показателя.

    Используется стороной sale кривой, где показатель 1_000_000 / ratio >= 1.

    Args:
        base_numerator: Числитель основания (baseN >= baseD, baseN < MAX_NUM)
        base_denominator: Знаменатель основания (> 0)
        exponent_numerator: Числитель показателя (uint32, > 0)
        exponent_denominator: Знаменатель показателя (uint32, > 0)

    Returns:
        (result, precision): result / 2**precision ≈ base ** exponent

    Raises:
        InvalidAmount: Аргументы вне домена (основание < 1, нулевые параметры)
        ArithmeticOverflow: Основание >= MAX_NUM или аргумент exp вне таблицы
    """
    require_uint256(base_numerator, "base_numerator")
    require_positive(base_denominator, "base_denominator")
    require_in_range(exponent_numerator, "exponent_numerator", 1, UINT32_MAX)
    require_in_range(exponent_denominator, "exponent_denominator", 1, UINT32_MAX)

    if base_numerator < base_denominator:
        raise InvalidAmount(
            f"base must be >= 1, got {base_numerator}/{base_denominator}",
            base_numerator=base_numerator,
            base_denominator=base_denominator,
        )
    if base_numerator >= MAX_NUM:
        raise ArithmeticOverflow(
            f"base_numerator {base_numerator} >= MAX_NUM (2**{256 - MAX_PRECISION})",
            base_numerator=base_numerator,
        )

    base = base_numerator * FIXED_1 // base_denominator
    base_log = general_log(base)
    base_log_times_exp = checked_mul(base_log, exponent_numerator) // exponent_denominator

    precision = find_position_in_max_exp_array(base_log_times_exp)
    if precision < MAX_PRECISION:
        logger.debug(
            "power precision degraded to {} bits (exp argument {} bits)",
            precision,
            base_log_times_exp.bit_length(),
        )

    return general_exp(base_log_times_exp, precision), precision


def power(
    base_numerator: int,
    base_denominator: int,
    exponent_numerator: int,
    exponent_denominator: int,
) -> tuple[int, int]:
    """
    (baseN / baseD) ^ (expN / expD) для показателя в (0, 1].

    Examples:
        >>> result, precision = power(4, 1, 1, 2)
        >>> result >> precision
        1
        >>> round(result / 2**precision, 12)
        2.0

    Raises:
        InvalidAmount: expN > expD или аргументы вне домена
        ArithmeticOverflow: Переполнение на минимальной точности
    """
    if exponent_numerator > exponent_denominator:
        raise InvalidAmount(
            f"exponent must be in (0, 1], got {exponent_numerator}/{exponent_denominator}",
            exponent_numerator=exponent_numerator,
            exponent_denominator=exponent_denominator,
        )
    return general_power(
        base_numerator, base_denominator, exponent_numerator, exponent_denominator
    )
