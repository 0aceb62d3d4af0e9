"""Override Transfer Authority — единственный аккаунт с правом privileged transfer.

Авторитет хранится как идентификатор и проверяется при вызове.
Заменить авторитет может только owner.
"""

from loguru import logger

from src.access.ownership import OwnershipRegistry
from src.core.errors import Unauthorized


class OverrideTransferAuthority:
    def __init__(self, ownership: OwnershipRegistry, authority: str):
        if not authority:
            raise ValueError("authority must be a non-empty account id")
        self._ownership = ownership
        self._authority = authority

    @property
    def authority(self) -> str:
        return self._authority

    def require_authority(self, caller: str) -> None:
        if caller != self._authority:
            raise Unauthorized(
                f"{caller} is not the override transfer authority", caller=caller
            )

    def set_authority(self, caller: str, new_authority: str) -> None:
        self._ownership.require_owner(caller)
        if not new_authority:
            raise ValueError("new_authority must be a non-empty account id")
        logger.info("override authority changed: {} -> {}", self._authority, new_authority)
        self._authority = new_authority
