"""
Ledger Records — записи cooldown и escrow

Immutable Pydantic модели. Записи не удаляются: cooldown перезаписывается
новым экземпляром, escrow помечается released новым экземпляром.
"""

from pydantic import BaseModel, Field, field_validator

from src.core.math.numerical_safeguards import UINT256_MAX


class CooldownRecord(BaseModel):
    """Время последнего mint аккаунта."""

    account: str = Field(..., min_length=1, description="Аккаунт")
    last_mint_ts: float = Field(..., ge=0, description="Время последнего mint (секунды)")

    model_config = {"frozen": True}


class EscrowRecord(BaseModel):
    """
    Time-locked escrow между депозитором и бенефициаром.
    """

    escrow_id: int = Field(..., ge=1, description="Идентификатор escrow")
    depositor: str = Field(..., min_length=1, description="Кто внёс средства")
    beneficiary: str = Field(..., min_length=1, description="Кто может забрать средства")
    asset_id: str = Field(..., min_length=1, description="Идентификатор актива")
    amount: int = Field(..., gt=0, le=UINT256_MAX, description="Заблокированная сумма")
    created_ts: float = Field(..., ge=0, description="Время создания (секунды)")
    release_after_ts: float = Field(..., ge=0, description="Самое раннее время release")
    released: bool = Field(default=False, description="Средства выплачены")

    model_config = {"frozen": True}

    @field_validator("release_after_ts")
    @classmethod
    def validate_release_after_created(cls, v: float, info) -> float:
        """Проверка, что release не раньше создания"""
        if "created_ts" in info.data and v < info.data["created_ts"]:
            raise ValueError(
                f"release_after_ts {v} must be >= created_ts {info.data['created_ts']}"
            )
        return v
