"""
Domain models and value objects.

Contains fundamental domain entities like CurveState, audit events and
ledger records.
"""

from src.core.domain.curve_state import CurveState
from src.core.domain.events import BurnEvent, EventKind, MintEvent
from src.core.domain.records import CooldownRecord, EscrowRecord
from src.core.domain.units import (
    DEFAULT_DECIMALS,
    MAX_DECIMALS,
    from_base_units,
    to_base_units,
)

# Непрозрачный идентификатор аккаунта (address-equivalent)
Account = str

__all__ = [
    "Account",
    # Curve state
    "CurveState",
    # Events
    "BurnEvent",
    "EventKind",
    "MintEvent",
    # Records
    "CooldownRecord",
    "EscrowRecord",
    # Units module
    "DEFAULT_DECIMALS",
    "MAX_DECIMALS",
    "from_base_units",
    "to_base_units",
]
