"""Address Denylist — блокировка переводов для помеченных аккаунтов.

Изменяется только owner. Проверяется ledger'ом derivative при каждом
переводе между держателями (для отправителя и получателя).
"""

from loguru import logger

from src.access.ownership import OwnershipRegistry
from src.core.errors import AccountBanned


class AddressDenylist:
    """Множество забаненных аккаунтов под управлением owner."""

    def __init__(self, ownership: OwnershipRegistry):
        self._ownership = ownership
        self._banned: set[str] = set()

    def ban(self, caller: str, account: str) -> None:
        self._ownership.require_owner(caller)
        self._banned.add(account)
        logger.info("account banned: {}", account)

    def unban(self, caller: str, account: str) -> None:
        self._ownership.require_owner(caller)
        self._banned.discard(account)
        logger.info("account unbanned: {}", account)

    def is_banned(self, account: str) -> bool:
        return account in self._banned

    def require_not_banned(self, *accounts: str) -> None:
        """Raises AccountBanned для первого забаненного аккаунта."""
        for account in accounts:
            if account in self._banned:
                raise AccountBanned(f"{account} is banned", account=account)
