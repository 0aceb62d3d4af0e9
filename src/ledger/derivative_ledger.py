"""Derivative Ledger — балансы derivative актива.

- credit / debit: только minter (движок), при mint / burn
- transfer: произвольный перевод между держателями, заблокирован для
  аккаунтов из denylist (отправитель или получатель)
- override_transfer: privileged перевод единственным override авторитетом,
  denylist не применяется
- set_minter: делегирование mint authority, только owner
"""

from typing import Optional

from loguru import logger

from src.access.denylist import AddressDenylist
from src.access.override_transfer import OverrideTransferAuthority
from src.access.ownership import OwnershipRegistry
from src.core.errors import InsufficientBalance, Unauthorized
from src.core.math.numerical_safeguards import checked_add, require_positive


class DerivativeTokenLedger:
    """Баланс-ledger derivative актива."""

    def __init__(
        self,
        ownership: OwnershipRegistry,
        minter: Optional[str] = None,
        denylist: Optional[AddressDenylist] = None,
        override_authority: Optional[OverrideTransferAuthority] = None,
    ):
        """
        Args:
            ownership: владение (для set_minter)
            minter: аккаунт с правом credit/debit (обычно движок)
            denylist: denylist для переводов между держателями (optional)
            override_authority: авторитет privileged transfer (optional)
        """
        self._ownership = ownership
        self._minter = minter
        self._denylist = denylist
        self._override_authority = override_authority
        self._balances: dict[str, int] = {}

    @property
    def minter(self) -> Optional[str]:
        return self._minter

    @property
    def total_supply(self) -> int:
        return sum(self._balances.values())

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def set_minter(self, caller: str, minter: str) -> None:
        self._ownership.require_owner(caller)
        logger.info("minter delegated: {} -> {}", self._minter, minter)
        self._minter = minter

    def require_minter(self, caller: str) -> None:
        if self._minter is None or caller != self._minter:
            raise Unauthorized(f"{caller} is not the minter", caller=caller)

    def credit(self, caller: str, account: str, amount: int) -> None:
        self.require_minter(caller)
        require_positive(amount, "amount")
        self._balances[account] = checked_add(self.balance_of(account), amount)

    def debit(self, caller: str, account: str, amount: int) -> None:
        self.require_minter(caller)
        require_positive(amount, "amount")
        self._withdraw(account, amount)

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Перевод между держателями.

        Raises:
            AccountBanned: отправитель или получатель в denylist
            InsufficientBalance: баланс отправителя меньше amount
            ArithmeticOverflow: баланс получателя выходит за uint256
        """
        require_positive(amount, "amount")
        if self._denylist is not None:
            self._denylist.require_not_banned(sender, recipient)
        self._move(sender, recipient, amount)

    def override_transfer(self, caller: str, sender: str, recipient: str, amount: int) -> None:
        """Privileged перевод с любого аккаунта; только override авторитет."""
        if self._override_authority is None:
            raise Unauthorized("override transfer is not configured", caller=caller)
        self._override_authority.require_authority(caller)
        require_positive(amount, "amount")
        self._move(sender, recipient, amount)
        logger.info("override transfer by {}: {} -> {} ({})", caller, sender, recipient, amount)

    def _withdraw(self, account: str, amount: int) -> None:
        balance = self.balance_of(account)
        if balance < amount:
            raise InsufficientBalance(
                f"{account} balance {balance} < {amount}",
                account=account,
                balance=balance,
                amount=amount,
            )
        self._balances[account] = balance - amount

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        # Переполнение получателя проверяется до списания
        if sender != recipient:
            checked_add(self.balance_of(recipient), amount)
        self._withdraw(sender, amount)
        self._balances[recipient] = checked_add(self.balance_of(recipient), amount)
