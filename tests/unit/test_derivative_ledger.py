"""
Тесты для DerivativeTokenLedger

Проверяет:
1. credit / debit только для minter
2. Переводы между держателями и denylist
3. override_transfer только для авторитета (без denylist)
4. Делегирование minter только owner
"""

import pytest

from src.access import AddressDenylist, OverrideTransferAuthority, OwnershipRegistry
from src.core.errors import (
    AccountBanned,
    ArithmeticOverflow,
    InsufficientBalance,
    InvalidAmount,
    Unauthorized,
)
from src.core.math.numerical_safeguards import UINT256_MAX
from src.ledger import DerivativeTokenLedger


@pytest.fixture
def ownership():
    return OwnershipRegistry("owner")


@pytest.fixture
def denylist(ownership):
    return AddressDenylist(ownership)


@pytest.fixture
def ledger(ownership, denylist):
    ledger = DerivativeTokenLedger(
        ownership,
        minter="engine",
        denylist=denylist,
        override_authority=OverrideTransferAuthority(ownership, "regulator"),
    )
    ledger.credit("engine", "alice", 100)
    return ledger


class TestMinterOperations:
    def test_credit_and_supply(self, ledger):
        ledger.credit("engine", "bob", 50)
        assert ledger.balance_of("bob") == 50
        assert ledger.total_supply == 150

    def test_credit_by_non_minter_rejected(self, ledger):
        with pytest.raises(Unauthorized):
            ledger.credit("alice", "alice", 1)

    def test_debit(self, ledger):
        ledger.debit("engine", "alice", 40)
        assert ledger.balance_of("alice") == 60

    def test_debit_above_balance_rejected(self, ledger):
        with pytest.raises(InsufficientBalance) as exc_info:
            ledger.debit("engine", "alice", 101)
        assert exc_info.value.context["balance"] == 100
        assert ledger.balance_of("alice") == 100

    def test_zero_credit_rejected(self, ledger):
        with pytest.raises(InvalidAmount):
            ledger.credit("engine", "alice", 0)

    def test_no_minter_configured(self, ownership):
        ledger = DerivativeTokenLedger(ownership)
        with pytest.raises(Unauthorized):
            ledger.credit("engine", "alice", 1)

    def test_set_minter_owner_only(self, ledger):
        with pytest.raises(Unauthorized):
            ledger.set_minter("alice", "alice")

        ledger.set_minter("owner", "engine2")
        assert ledger.minter == "engine2"
        with pytest.raises(Unauthorized):
            ledger.credit("engine", "alice", 1)


class TestTransfers:
    def test_transfer(self, ledger):
        ledger.transfer("alice", "bob", 30)
        assert (ledger.balance_of("alice"), ledger.balance_of("bob")) == (70, 30)
        assert ledger.total_supply == 100

    def test_transfer_above_balance_rejected(self, ledger):
        with pytest.raises(InsufficientBalance):
            ledger.transfer("alice", "bob", 101)

    def test_banned_sender_blocked(self, ledger, denylist):
        denylist.ban("owner", "alice")
        with pytest.raises(AccountBanned):
            ledger.transfer("alice", "bob", 1)

    def test_banned_recipient_blocked(self, ledger, denylist):
        denylist.ban("owner", "bob")
        with pytest.raises(AccountBanned) as exc_info:
            ledger.transfer("alice", "bob", 1)
        assert exc_info.value.context["account"] == "bob"
        assert ledger.balance_of("alice") == 100

    def test_unban_restores_transfers(self, ledger, denylist):
        denylist.ban("owner", "alice")
        denylist.unban("owner", "alice")
        ledger.transfer("alice", "bob", 1)
        assert ledger.balance_of("bob") == 1

    def test_recipient_overflow_rejected_before_debit(self, ledger):
        ledger.credit("engine", "bob", UINT256_MAX - 50)
        with pytest.raises(ArithmeticOverflow):
            ledger.transfer("alice", "bob", 100)
        assert ledger.balance_of("alice") == 100
        assert ledger.balance_of("bob") == UINT256_MAX - 50

    def test_self_transfer_keeps_balance(self, ledger):
        ledger.transfer("alice", "alice", 40)
        assert ledger.balance_of("alice") == 100


class TestOverrideTransfer:
    def test_authority_moves_banned_balance(self, ledger, denylist):
        denylist.ban("owner", "alice")
        ledger.override_transfer("regulator", "alice", "vault", 100)
        assert ledger.balance_of("vault") == 100
        assert ledger.balance_of("alice") == 0

    def test_non_authority_rejected(self, ledger):
        with pytest.raises(Unauthorized):
            ledger.override_transfer("owner", "alice", "owner", 1)

    def test_not_configured(self, ownership):
        ledger = DerivativeTokenLedger(ownership, minter="engine")
        ledger.credit("engine", "alice", 1)
        with pytest.raises(Unauthorized, match="not configured"):
            ledger.override_transfer("regulator", "alice", "bob", 1)

    def test_recipient_overflow_rejected(self, ledger):
        ledger.credit("engine", "vault", UINT256_MAX)
        with pytest.raises(ArithmeticOverflow):
            ledger.override_transfer("regulator", "alice", "vault", 1)
        assert ledger.balance_of("alice") == 100
