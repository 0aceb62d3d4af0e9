"""
Тесты для модуля Bonding Curve

Проверяет:
1. purchase / sale против высокоточного эталона
2. Линейную конверсию при ratio = 1_000_000
3. Монотонность по amount
4. Отсутствие арбитража purchase → sale
5. Граничные случаи (нулевые суммы, burn >= supply, ratio вне домена)
6. Spot price
"""

from decimal import Decimal, localcontext
from fractions import Fraction

import pytest

from src.core.errors import InvalidAmount
from src.core.math.bonding_curve import (
    LINEAR_RESERVE_RATIO_PPM,
    MAX_RESERVE_RATIO_PPM,
    purchase_amount,
    sale_amount,
    spot_price,
    validate_curve_state,
)

ONE = 10**18

RATIOS = [200_000, 333_333, 500_000, 750_000, 999_999]


def _exact_purchase(supply: int, reserve: int, ratio: int, deposit: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = 100
        base = Decimal(reserve + deposit) / Decimal(reserve)
        return Decimal(supply) * (base ** (Decimal(ratio) / Decimal(MAX_RESERVE_RATIO_PPM)) - 1)


def _exact_sale(supply: int, reserve: int, ratio: int, burn: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = 100
        base = Decimal(supply - burn) / Decimal(supply)
        return Decimal(reserve) * (1 - base ** (Decimal(MAX_RESERVE_RATIO_PPM) / Decimal(ratio)))


# =============================================================================
# PURCHASE
# =============================================================================


class TestPurchaseAmount:
    def test_reference_square_root_case(self) -> None:
        """S = R = 10, ratio 50%, депозит 100 → S * (sqrt(11) - 1)"""
        supply = reserve = 10 * ONE
        minted = purchase_amount(supply, reserve, LINEAR_RESERVE_RATIO_PPM, 100 * ONE)

        with localcontext() as ctx:
            ctx.prec = 100
            expected = Decimal(supply) * (Decimal(11).sqrt() - 1)
            relative_error = abs(Decimal(minted) - expected) / expected

        assert relative_error < Decimal(2) ** -32
        assert minted <= expected
        assert 23 * ONE < minted < 24 * ONE

    @pytest.mark.parametrize("ratio", RATIOS)
    @pytest.mark.parametrize("deposit", [ONE // 100, ONE, 37 * ONE, 1_000 * ONE])
    def test_matches_reference(self, ratio, deposit) -> None:
        supply, reserve = 1_000 * ONE, 250 * ONE
        minted = purchase_amount(supply, reserve, ratio, deposit)
        expected = _exact_purchase(supply, reserve, ratio, deposit)

        with localcontext() as ctx:
            ctx.prec = 100
            assert minted <= expected
            new_supply = Decimal(supply) + expected
            assert abs(Decimal(minted) - expected) <= new_supply * Decimal(2) ** -32

    def test_linear_conversion_at_full_ratio(self) -> None:
        assert purchase_amount(1_000, 500, MAX_RESERVE_RATIO_PPM, 100) == 200

    def test_linear_conversion_floors(self) -> None:
        assert purchase_amount(1_000, 300, MAX_RESERVE_RATIO_PPM, 100) == 333

    @pytest.mark.parametrize("ratio", RATIOS)
    def test_monotone_in_deposit(self, ratio) -> None:
        deposits = [10**12, 10**15, ONE, 10 * ONE, 500 * ONE]
        minted = [purchase_amount(100 * ONE, 100 * ONE, ratio, d) for d in deposits]

        assert minted == sorted(minted)
        assert len(set(minted)) == len(minted)
        assert all(m > 0 for m in minted)

    def test_dust_deposit_may_mint_nothing(self) -> None:
        """Floor в пользу движка: 1 wei при дорогом токене → 0"""
        assert purchase_amount(10, 10**30, 500_000, 1) == 0

    def test_zero_deposit_rejected(self) -> None:
        with pytest.raises(InvalidAmount) as exc_info:
            purchase_amount(ONE, ONE, 500_000, 0)
        assert exc_info.value.reason == "invalid_amount"


# =============================================================================
# SALE
# =============================================================================


class TestSaleAmount:
    @pytest.mark.parametrize("ratio", RATIOS)
    @pytest.mark.parametrize("burn_fraction", [Fraction(1, 10**6), Fraction(1, 3), Fraction(99, 100)])
    def test_matches_reference(self, ratio, burn_fraction) -> None:
        supply, reserve = 1_000 * ONE, 250 * ONE
        burn = int(supply * burn_fraction)
        returned = sale_amount(supply, reserve, ratio, burn)
        expected = _exact_sale(supply, reserve, ratio, burn)

        with localcontext() as ctx:
            ctx.prec = 100
            assert returned <= expected
            assert abs(Decimal(returned) - expected) <= Decimal(reserve) * Decimal(2) ** -32

    def test_linear_conversion_at_full_ratio(self) -> None:
        assert sale_amount(1_000, 500, MAX_RESERVE_RATIO_PPM, 100) == 50

    def test_half_ratio_tenth_of_supply(self) -> None:
        """ratio 50%: sale = R * (1 - 0.9^2) = 0.19 R"""
        returned = sale_amount(1_000 * ONE, 100 * ONE, 500_000, 100 * ONE)
        assert 19 * ONE - 10**10 < returned <= 19 * ONE

    @pytest.mark.parametrize("ratio", RATIOS)
    def test_always_below_reserve(self, ratio) -> None:
        reserve = 250 * ONE
        returned = sale_amount(1_000 * ONE, reserve, ratio, 990 * ONE)
        assert 0 < returned < reserve

    @pytest.mark.parametrize("ratio", RATIOS)
    def test_monotone_in_burn(self, ratio) -> None:
        burns = [10**12, ONE, 10 * ONE, 100 * ONE, 900 * ONE]
        returned = [sale_amount(1_000 * ONE, 250 * ONE, ratio, b) for b in burns]

        assert returned == sorted(returned)
        assert len(set(returned)) == len(returned)

    def test_burn_equal_to_supply_rejected(self) -> None:
        with pytest.raises(InvalidAmount):
            sale_amount(ONE, ONE, 500_000, ONE)

    def test_burn_above_supply_rejected(self) -> None:
        with pytest.raises(InvalidAmount):
            sale_amount(ONE, ONE, 500_000, ONE + 1)

    def test_zero_burn_rejected(self) -> None:
        with pytest.raises(InvalidAmount):
            sale_amount(ONE, ONE, 500_000, 0)


# =============================================================================
# NO ARBITRAGE
# =============================================================================


class TestRoundTrip:
    """purchase → sale того же номинала не возвращает больше депозита"""

    @pytest.mark.parametrize("ratio", RATIOS + [MAX_RESERVE_RATIO_PPM])
    @pytest.mark.parametrize("deposit", [ONE, 25 * ONE, 400 * ONE, 10_000 * ONE])
    def test_round_trip_never_profits(self, ratio, deposit) -> None:
        supply, reserve = 1_000 * ONE, 250 * ONE

        minted = purchase_amount(supply, reserve, ratio, deposit)
        returned = sale_amount(supply + minted, reserve + deposit, ratio, minted)

        assert returned <= deposit
        assert returned >= deposit - deposit // 10**6


# =============================================================================
# STATE / SPOT PRICE
# =============================================================================


class TestCurveDomain:
    def test_spot_price(self) -> None:
        assert spot_price(10 * ONE, 10 * ONE, 500_000) == Fraction(2)

    def test_spot_price_linear(self) -> None:
        assert spot_price(1_000, 500, MAX_RESERVE_RATIO_PPM) == Fraction(1, 2)

    @pytest.mark.parametrize(
        "supply,reserve,ratio",
        [
            (0, ONE, 500_000),
            (ONE, 0, 500_000),
            (ONE, ONE, 0),
            (ONE, ONE, MAX_RESERVE_RATIO_PPM + 1),
            (-1, ONE, 500_000),
        ],
    )
    def test_invalid_state_rejected(self, supply, reserve, ratio) -> None:
        with pytest.raises(InvalidAmount):
            validate_curve_state(supply, reserve, ratio)

    def test_invalid_state_rejected_by_purchase(self) -> None:
        with pytest.raises(InvalidAmount):
            purchase_amount(ONE, 0, 500_000, ONE)
