"""
CurveState — Модель состояния bonding curve

Immutable Pydantic модель: total supply derivative, баланс reserve движка и
reserve ratio. Все изменения состояния создают новый экземпляр — это делает
коммит и откат операции атомарной заменой ссылки.
"""

from pydantic import BaseModel, Field

from src.core.math.bonding_curve import MAX_RESERVE_RATIO_PPM, MIN_RESERVE_RATIO_PPM
from src.core.math.numerical_safeguards import UINT256_MAX


class CurveState(BaseModel):
    """
    Состояние кривой, принадлежащее движку.

    Инварианты (после конструирования):
    - total_supply >= 1
    - reserve_balance >= 1
    - reserve_ratio_ppm ∈ [1, 1_000_000], не меняется
    """

    total_supply: int = Field(
        ..., ge=1, le=UINT256_MAX, description="Total supply derivative (минимальные единицы)"
    )
    reserve_balance: int = Field(
        ..., ge=1, le=UINT256_MAX, description="Баланс reserve под управлением движка"
    )
    reserve_ratio_ppm: int = Field(
        ...,
        ge=MIN_RESERVE_RATIO_PPM,
        le=MAX_RESERVE_RATIO_PPM,
        description="Reserve ratio (ppm), 500_000 = линейная цена",
    )

    model_config = {"frozen": True}

    def with_mint(self, deposit_amount: int, derivative_amount: int) -> "CurveState":
        """Новое состояние после mint: supply и reserve растут."""
        return CurveState(
            total_supply=self.total_supply + derivative_amount,
            reserve_balance=self.reserve_balance + deposit_amount,
            reserve_ratio_ppm=self.reserve_ratio_ppm,
        )

    def with_burn(self, burn_amount: int, reserve_amount: int) -> "CurveState":
        """Новое состояние после burn: supply и reserve уменьшаются."""
        return CurveState(
            total_supply=self.total_supply - burn_amount,
            reserve_balance=self.reserve_balance - reserve_amount,
            reserve_ratio_ppm=self.reserve_ratio_ppm,
        )
