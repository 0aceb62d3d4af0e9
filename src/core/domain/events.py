"""
Audit Events — записи о mint / burn

Immutable Pydantic модели, эмитируемые движком. Никогда не изменяются.
Соответствуют JSON Schema контрактам contracts/schema/mint_event.json и
contracts/schema/burn_event.json.
"""

from enum import Enum

from pydantic import BaseModel, Field

from src.core.math.numerical_safeguards import UINT256_MAX


class EventKind(str, Enum):
    """Тип audit события"""

    MINT = "mint"
    BURN = "burn"


class MintEvent(BaseModel):
    """
    Событие выпуска derivative за депозит reserve.
    """

    kind: EventKind = Field(default=EventKind.MINT, description="Тип события")
    sequence: int = Field(..., ge=0, description="Монотонный номер события в движке")
    account: str = Field(..., min_length=1, description="Аккаунт, внёсший reserve")
    reserve_amount: int = Field(..., gt=0, le=UINT256_MAX, description="Внесённый reserve")
    derivative_amount: int = Field(
        ..., gt=0, le=UINT256_MAX, description="Выпущенный derivative"
    )
    ts: float = Field(..., ge=0, description="Время операции (секунды)")

    model_config = {"frozen": True}


class BurnEvent(BaseModel):
    """
    Событие сжигания derivative с выплатой reserve.

    reserve_amount может быть 0 для пылевых burn (floor в пользу движка).
    """

    kind: EventKind = Field(default=EventKind.BURN, description="Тип события")
    sequence: int = Field(..., ge=0, description="Монотонный номер события в движке")
    account: str = Field(..., min_length=1, description="Аккаунт, сжёгший derivative")
    reserve_amount: int = Field(..., ge=0, le=UINT256_MAX, description="Выплаченный reserve")
    derivative_amount: int = Field(
        ..., gt=0, le=UINT256_MAX, description="Сожжённый derivative"
    )
    ts: float = Field(..., ge=0, description="Время операции (секунды)")

    model_config = {"frozen": True}
