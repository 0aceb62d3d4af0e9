"""Reserve Asset — интерфейс внешнего ledger актива и in-memory реализация.

ReserveAssetLedger — узкий интерфейс, через который движок двигает reserve:
- transfer_in(from, amount) -> bool: списать у держателя в custody движка (по allowance)
- transfer_out(to, amount) -> bool: выплатить из custody движка
- allowance(owner, spender) -> int

Результат False трактуется движком как TransferFailed.

InMemoryToken — ERC20-подобный баланс-ledger (balances + allowances) с
опциональными transfer hooks: hook вызывается после каждого перемещения
баланса и может передать управление внешнему коду (для тестов reentrancy).
Исключение из hook отменяет перемещение и списание allowance.
"""

from typing import Callable, Protocol, runtime_checkable

from src.core.math.numerical_safeguards import UINT256_MAX, require_uint256

# (sender, recipient, amount)
TransferHook = Callable[[str, str, int], None]


@runtime_checkable
class ReserveAssetLedger(Protocol):
    """Внешний ledger reserve актива, привязанный к custody аккаунту движка."""

    def transfer_in(self, from_account: str, amount: int) -> bool: ...

    def transfer_out(self, to_account: str, amount: int) -> bool: ...

    def allowance(self, owner: str, spender: str) -> int: ...


class InMemoryToken:
    """ERC20-подобный токен в памяти."""

    def __init__(self, symbol: str):
        if not symbol:
            raise ValueError("symbol must be non-empty")
        self.symbol = symbol
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self._hooks: list[TransferHook] = []

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    @property
    def total_supply(self) -> int:
        return sum(self._balances.values())

    # -------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------

    def add_transfer_hook(self, hook: TransferHook) -> None:
        self._hooks.append(hook)

    def mint_to(self, account: str, amount: int) -> None:
        """Выпуск актива (фикстуры / начальное наполнение)."""
        require_uint256(amount, "amount")
        new_balance = self.balance_of(account) + amount
        if new_balance > UINT256_MAX:
            raise OverflowError(f"balance of {account} exceeds uint256")
        self._balances[account] = new_balance

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        require_uint256(amount, "amount")
        self._allowances[(owner, spender)] = amount
        return True

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """Перевод; False при нехватке баланса."""
        if amount < 0 or self.balance_of(sender) < amount:
            return False
        self._move(sender, recipient, amount)
        return True

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool:
        """Перевод по allowance; False при нехватке allowance или баланса."""
        allowed = self.allowance(owner, spender)
        if amount < 0 or allowed < amount or self.balance_of(owner) < amount:
            return False
        self._allowances[(owner, spender)] = allowed - amount
        try:
            self._move(owner, recipient, amount)
        except Exception:
            self._allowances[(owner, spender)] = allowed
            raise
        return True

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        # Исключение из hook отменяет это перемещение обратными дельтами
        self._balances[sender] = self.balance_of(sender) - amount
        self._balances[recipient] = self.balance_of(recipient) + amount
        try:
            for hook in list(self._hooks):
                hook(sender, recipient, amount)
        except Exception:
            self._balances[recipient] = self.balance_of(recipient) - amount
            self._balances[sender] = self.balance_of(sender) + amount
            raise


class CustodyReserveAsset:
    """
    Адаптер InMemoryToken к ReserveAssetLedger для custody аккаунта движка.

    transfer_in использует allowance держателя, выданный custody аккаунту.
    """

    def __init__(self, token: InMemoryToken, custody_account: str):
        if not custody_account:
            raise ValueError("custody_account must be non-empty")
        self.token = token
        self.custody_account = custody_account

    def transfer_in(self, from_account: str, amount: int) -> bool:
        return self.token.transfer_from(
            self.custody_account, from_account, self.custody_account, amount
        )

    def transfer_out(self, to_account: str, amount: int) -> bool:
        return self.token.transfer(self.custody_account, to_account, amount)

    def allowance(self, owner: str, spender: str) -> int:
        return self.token.allowance(owner, spender)

    def custody_balance(self) -> int:
        return self.token.balance_of(self.custody_account)
