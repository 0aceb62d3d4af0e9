"""
Тесты для модуля Fixed-Point Power

Проверяет:
1. Граница относительной ошибки против высокоточного Decimal эталона
2. Результат не превышает точное значение (округление вниз)
3. Плавную деградацию точности по MAX_EXP_ARRAY
4. ArithmeticOverflow за пределами минимальной точности
5. Доменные проверки аргументов
6. log / exp примитивы
"""

from decimal import Decimal, localcontext

import pytest

from src.core.errors import ArithmeticOverflow, InvalidAmount
from src.core.math.fixed_point_power import (
    FIXED_1,
    FIXED_2,
    LN2_FIXED,
    MAX_EXP_ARRAY,
    MAX_NUM,
    MAX_PRECISION,
    MIN_PRECISION,
    POWER_RELATIVE_ERROR_BOUND,
    find_position_in_max_exp_array,
    general_exp,
    general_log,
    general_power,
    power,
)


def _reference(base_n: int, base_d: int, exp_n: int, exp_d: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = 100
        return (Decimal(base_n) / Decimal(base_d)) ** (Decimal(exp_n) / Decimal(exp_d))


def _as_decimal(result: int, precision: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = 100
        return Decimal(result) / (Decimal(2) ** precision)


def _relative_error(actual: Decimal, expected: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = 100
        return abs(actual - expected) / expected


BOUND = Decimal(POWER_RELATIVE_ERROR_BOUND)

POWER_CASES = [
    (4, 1, 1, 2),
    (11, 1, 1, 2),
    (3, 2, 1, 3),
    (110 * 10**18, 10 * 10**18, 500_000, 1_000_000),
    (10**18 + 1, 10**18, 1, 2),
    (2**128, 1, 1, 1),
    (2**128 + 12345, 3, 999_999, 1_000_000),
    (7, 5, 1, 1_000_000),
    (1_000_001, 1_000_000, 333_333, 1_000_000),
    (5, 1, 1, 1),
]


# =============================================================================
# ТОЧНОСТЬ
# =============================================================================


class TestPowerAccuracy:
    """Относительная ошибка power() против Decimal эталона"""

    @pytest.mark.parametrize("base_n,base_d,exp_n,exp_d", POWER_CASES)
    def test_relative_error_within_bound(self, base_n, base_d, exp_n, exp_d) -> None:
        """Ошибка < 2**-32 на всём домене"""
        result, precision = power(base_n, base_d, exp_n, exp_d)
        actual = _as_decimal(result, precision)
        expected = _reference(base_n, base_d, exp_n, exp_d)

        assert _relative_error(actual, expected) < BOUND

    @pytest.mark.parametrize("base_n,base_d,exp_n,exp_d", POWER_CASES)
    def test_result_never_exceeds_exact_value(self, base_n, base_d, exp_n, exp_d) -> None:
        """Округление вниз: результат <= точного (с допуском на округление эталона)"""
        result, precision = power(base_n, base_d, exp_n, exp_d)
        actual = _as_decimal(result, precision)
        expected = _reference(base_n, base_d, exp_n, exp_d)

        with localcontext() as ctx:
            ctx.prec = 100
            assert actual <= expected * (1 + Decimal(2) ** -100)

    def test_square_root_of_four(self) -> None:
        result, precision = power(4, 1, 1, 2)
        assert precision == MAX_PRECISION
        assert result < 2 * FIXED_1
        assert result > 2 * FIXED_1 - (FIXED_1 >> 64)

    def test_unit_base_gives_exactly_one(self) -> None:
        """1^x = 1 без ошибки"""
        result, precision = power(10**18, 10**18, 1, 2)
        assert (result, precision) == (FIXED_1, MAX_PRECISION)

    def test_unit_exponent_returns_base(self) -> None:
        result, precision = power(5, 1, 1, 1)
        assert result >> precision == 4  # floor чуть ниже 5
        assert _relative_error(_as_decimal(result, precision), Decimal(5)) < BOUND

    def test_deterministic(self) -> None:
        """Одинаковые входы → одинаковые выходы"""
        first = power(110 * 10**18, 10 * 10**18, 500_000, 1_000_000)
        second = power(110 * 10**18, 10 * 10**18, 500_000, 1_000_000)
        assert first == second

    def test_monotone_in_base(self) -> None:
        results = [
            power(10**18 + delta, 10**18, 500_000, 1_000_000)
            for delta in (10**12, 10**15, 10**17, 10**18, 10**19)
        ]
        values = [_as_decimal(r, p) for r, p in results]
        assert values == sorted(values)
        assert len(set(values)) == len(values)


# =============================================================================
# ДЕГРАДАЦИЯ ТОЧНОСТИ
# =============================================================================


class TestPrecisionDegradation:
    """Выбор точности по MAX_EXP_ARRAY"""

    def test_small_result_uses_max_precision(self) -> None:
        _, precision = power(11, 1, 1, 2)
        assert precision == MAX_PRECISION

    def test_large_result_degrades_precision(self) -> None:
        """2**200 не помещается с 127 битами точности → точность 55"""
        result, precision = general_power(2**100, 1, 2, 1)

        assert MIN_PRECISION <= precision < MAX_PRECISION
        assert precision == 55
        assert result.bit_length() <= 256

        actual = _as_decimal(result, precision)
        assert _relative_error(actual, Decimal(2) ** 200) < BOUND

    def test_degraded_result_still_within_bound(self) -> None:
        result, precision = general_power(10**20, 7, 3, 1)
        assert precision < MAX_PRECISION
        actual = _as_decimal(result, precision)
        assert _relative_error(actual, _reference(10**20, 7, 3, 1)) < BOUND

    def test_overflow_beyond_min_precision(self) -> None:
        """2**256 не представимо ни на какой точности"""
        with pytest.raises(ArithmeticOverflow) as exc_info:
            general_power(2**128, 1, 2, 1)
        assert exc_info.value.reason == "arithmetic_overflow"

    def test_base_at_max_num_overflows(self) -> None:
        with pytest.raises(ArithmeticOverflow):
            power(MAX_NUM, 1, 1, 2)

    def test_base_just_below_max_num_is_accepted(self) -> None:
        result, precision = power(MAX_NUM - 1, 1, 1, 2)
        assert result > 0
        assert precision == MAX_PRECISION


# =============================================================================
# MAX_EXP_ARRAY
# =============================================================================


class TestMaxExpArray:
    def test_table_covers_all_precision_levels(self) -> None:
        assert len(MAX_EXP_ARRAY) == MAX_PRECISION + 1

    def test_levels_below_min_precision_unused(self) -> None:
        assert all(bound == 0 for bound in MAX_EXP_ARRAY[:MIN_PRECISION])

    def test_bounds_strictly_decrease_with_precision(self) -> None:
        bounds = MAX_EXP_ARRAY[MIN_PRECISION:]
        assert all(a > b for a, b in zip(bounds, bounds[1:]))

    def test_zero_argument_gets_max_precision(self) -> None:
        assert find_position_in_max_exp_array(0) == MAX_PRECISION

    def test_exact_bound_selects_that_level(self) -> None:
        assert find_position_in_max_exp_array(MAX_EXP_ARRAY[80]) == 80
        assert find_position_in_max_exp_array(MAX_EXP_ARRAY[80] + 1) == 79

    def test_argument_above_min_level_overflows(self) -> None:
        with pytest.raises(ArithmeticOverflow):
            find_position_in_max_exp_array(MAX_EXP_ARRAY[MIN_PRECISION] + 1)

    @pytest.mark.parametrize("precision", [MIN_PRECISION, 64, 100, MAX_PRECISION])
    def test_exp_at_bound_fits_256_bits(self, precision) -> None:
        result = general_exp(MAX_EXP_ARRAY[precision], precision)
        assert result.bit_length() <= 255


# =============================================================================
# LOG / EXP
# =============================================================================


class TestLogExp:
    def test_log_of_one_is_zero(self) -> None:
        assert general_log(FIXED_1) == 0

    def test_log_of_two_is_ln2(self) -> None:
        assert abs(general_log(FIXED_2) - LN2_FIXED) < 2**8

    def test_log_below_one_rejected(self) -> None:
        with pytest.raises(InvalidAmount):
            general_log(FIXED_1 - 1)

    def test_log_outside_width_overflows(self) -> None:
        with pytest.raises(ArithmeticOverflow):
            general_log(2**256)

    def test_exp_of_zero_is_one(self) -> None:
        assert general_exp(0, MAX_PRECISION) == FIXED_1

    def test_exp_of_ln2_is_two(self) -> None:
        result = general_exp(LN2_FIXED, MAX_PRECISION)
        assert abs(result - FIXED_2) < 2**16

    def test_exp_precision_out_of_range(self) -> None:
        with pytest.raises(InvalidAmount):
            general_exp(FIXED_1, MIN_PRECISION - 1)

    def test_ln2_constant(self) -> None:
        with localcontext() as ctx:
            ctx.prec = 60
            expected = Decimal(2).ln() * (Decimal(2) ** MAX_PRECISION)
            assert abs(Decimal(LN2_FIXED) - expected) < 2


# =============================================================================
# ДОМЕН
# =============================================================================


class TestPowerDomain:
    def test_exponent_above_one_rejected(self) -> None:
        with pytest.raises(InvalidAmount):
            power(2, 1, 3, 2)

    def test_general_power_accepts_exponent_above_one(self) -> None:
        result, precision = general_power(3, 2, 2, 1)
        assert _relative_error(_as_decimal(result, precision), Decimal("2.25")) < BOUND

    def test_base_below_one_rejected(self) -> None:
        with pytest.raises(InvalidAmount):
            power(1, 2, 1, 2)

    def test_zero_base_denominator_rejected(self) -> None:
        with pytest.raises(InvalidAmount):
            power(1, 0, 1, 2)

    def test_zero_exponent_rejected(self) -> None:
        with pytest.raises(InvalidAmount):
            power(2, 1, 0, 1)

    def test_exponent_outside_uint32_rejected(self) -> None:
        with pytest.raises(InvalidAmount):
            general_power(2, 1, 1, 2**32)

    def test_negative_base_rejected(self) -> None:
        with pytest.raises(InvalidAmount):
            power(-4, 1, 1, 2)
