"""
Contract Validation Module

Модуль для валидации JSON контрактов audit событий и снапшотов состояния.
"""

from .validators import (
    BurnEventValidator,
    ContractValidator,
    CurveStateValidator,
    EscrowRecordValidator,
    MintEventValidator,
    SchemaLoader,
    validate_burn_event,
    validate_curve_state,
    validate_escrow_record,
    validate_mint_event,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "MintEventValidator",
    "BurnEventValidator",
    "CurveStateValidator",
    "EscrowRecordValidator",
    # Functions
    "validate_mint_event",
    "validate_burn_event",
    "validate_curve_state",
    "validate_escrow_record",
]
