"""Ownership — двухшаговая передача владения.

- transfer_ownership: текущий owner назначает pending_owner
- accept_ownership: pending_owner подтверждает и становится owner
- require_owner: проверка полномочий при вызове (capability-style)

Владение не наследуется: модули, которым нужен owner, получают экземпляр
OwnershipRegistry явно и проверяют caller во время вызова.
"""

from typing import Optional

from loguru import logger

from src.core.errors import Unauthorized


class OwnershipRegistry:
    """Хранилище owner / pending_owner с двухшаговым handoff."""

    def __init__(self, owner: str):
        """
        Args:
            owner: начальный владелец (непустой идентификатор аккаунта)
        """
        if not owner:
            raise ValueError("owner must be a non-empty account id")
        self._owner = owner
        self._pending_owner: Optional[str] = None

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def pending_owner(self) -> Optional[str]:
        return self._pending_owner

    def is_owner(self, caller: str) -> bool:
        return caller == self._owner

    def require_owner(self, caller: str) -> None:
        """Raises Unauthorized если caller не owner."""
        if not self.is_owner(caller):
            raise Unauthorized(f"{caller} is not the owner", caller=caller)

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        """Шаг 1: owner назначает кандидата. Повторный вызов заменяет кандидата."""
        self.require_owner(caller)
        if not new_owner:
            raise ValueError("new_owner must be a non-empty account id")
        self._pending_owner = new_owner
        logger.info("ownership transfer started: {} -> {}", caller, new_owner)

    def accept_ownership(self, caller: str) -> None:
        """Шаг 2: кандидат подтверждает владение."""
        if self._pending_owner is None or caller != self._pending_owner:
            raise Unauthorized(f"{caller} is not the pending owner", caller=caller)
        previous = self._owner
        self._owner = caller
        self._pending_owner = None
        logger.info("ownership transferred: {} -> {}", previous, caller)
