"""Ledgers — состояние кривой, reserve актив, derivative актив."""

from .derivative_ledger import DerivativeTokenLedger
from .reserve_asset import (
    CustodyReserveAsset,
    InMemoryToken,
    ReserveAssetLedger,
    TransferHook,
)
from .reserve_ledger import ReserveLedger

__all__ = [
    "CustodyReserveAsset",
    "DerivativeTokenLedger",
    "InMemoryToken",
    "ReserveAssetLedger",
    "ReserveLedger",
    "TransferHook",
]
