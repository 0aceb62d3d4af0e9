"""Access control — владение, denylist, override transfer, reentrancy lock.

Независимые от движка ценообразования модули: не разделяют с ним состояние.
Все проверки полномочий выполняются при вызове по сохранённому идентификатору.
"""

from .denylist import AddressDenylist
from .override_transfer import OverrideTransferAuthority
from .ownership import OwnershipRegistry
from .reentrancy import ReentrancyGuard

__all__ = [
    "AddressDenylist",
    "OverrideTransferAuthority",
    "OwnershipRegistry",
    "ReentrancyGuard",
]
