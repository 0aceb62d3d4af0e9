"""Escrow — time-locked двусторонний escrow."""

from .time_locked_escrow import (
    DEFAULT_ESCROW_LOCK_DURATION_SEC,
    EscrowConfig,
    TimeLockedEscrow,
)

__all__ = [
    "DEFAULT_ESCROW_LOCK_DURATION_SEC",
    "EscrowConfig",
    "TimeLockedEscrow",
]
