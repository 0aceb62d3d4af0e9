"""Time-Locked Escrow — двусторонний escrow с блокировкой по времени.

- create_escrow: депозитор переводит amount актива в custody escrow
  (по allowance), бенефициар фиксируется
- release: только бенефициар, только после lock_duration_sec с момента
  создания; защищён single-entry lock от повторного входа из transfer hook

Независим от движка ценообразования и не разделяет с ним состояние.
"""

from dataclasses import dataclass
from typing import Final

from loguru import logger

from src.access.reentrancy import ReentrancyGuard
from src.core.domain.records import EscrowRecord
from src.core.errors import (
    EscrowAlreadyReleased,
    EscrowLocked,
    EscrowNotFound,
    TransferFailed,
    Unauthorized,
)
from src.core.math.numerical_safeguards import require_positive
from src.ledger.reserve_asset import InMemoryToken

# Блокировка по умолчанию (7 дней)
DEFAULT_ESCROW_LOCK_DURATION_SEC: Final[float] = 7 * 24 * 3600.0


@dataclass(frozen=True)
class EscrowConfig:
    """Конфигурация escrow.

    - lock_duration_sec: фиксированная блокировка от создания до release
    - custody_account: аккаунт escrow в ledger'ах активов
    """

    lock_duration_sec: float = DEFAULT_ESCROW_LOCK_DURATION_SEC
    custody_account: str = "escrow"

    def __post_init__(self):
        if self.lock_duration_sec < 0:
            raise ValueError(
                f"lock_duration_sec must be non-negative, got {self.lock_duration_sec}"
            )
        if not self.custody_account:
            raise ValueError("custody_account must be non-empty")


class TimeLockedEscrow:
    """Escrow записи и custody средств до release."""

    def __init__(self, config: EscrowConfig | None = None):
        self.config = config or EscrowConfig()
        self._records: dict[int, EscrowRecord] = {}
        self._assets: dict[str, InMemoryToken] = {}
        self._next_id = 1
        self._guard = ReentrancyGuard()

    def get_escrow(self, escrow_id: int) -> EscrowRecord:
        record = self._records.get(escrow_id)
        if record is None:
            raise EscrowNotFound(f"escrow {escrow_id} not found", escrow_id=escrow_id)
        return record

    def create_escrow(
        self,
        depositor: str,
        asset: InMemoryToken,
        beneficiary: str,
        amount: int,
        now: float,
    ) -> int:
        """Создание escrow: средства депозитора переходят в custody escrow.

        Raises:
            InvalidAmount: amount == 0
            TransferFailed: недостаточный allowance или баланс депозитора
        """
        with self._guard.enter("create_escrow"):
            require_positive(amount, "amount")
            known = self._assets.get(asset.symbol)
            if known is not None and known is not asset:
                raise ValueError(f"another asset is registered as {asset.symbol}")

            record = EscrowRecord(
                escrow_id=self._next_id,
                depositor=depositor,
                beneficiary=beneficiary,
                asset_id=asset.symbol,
                amount=amount,
                created_ts=now,
                release_after_ts=now + self.config.lock_duration_sec,
            )

            custody = self.config.custody_account
            if not asset.transfer_from(custody, depositor, custody, amount):
                raise TransferFailed(
                    f"escrow deposit from {depositor} failed", account=depositor, amount=amount
                )

            self._assets[asset.symbol] = asset
            self._records[record.escrow_id] = record
            self._next_id += 1

            logger.info(
                "escrow {} created: {} -> {} amount={} {} release_after={}",
                record.escrow_id,
                depositor,
                beneficiary,
                amount,
                asset.symbol,
                record.release_after_ts,
            )
            return record.escrow_id

    def release(self, caller: str, escrow_id: int, now: float) -> EscrowRecord:
        """Выплата средств бенефициару.

        Raises:
            ReentrantCall: повторный вход во время выполнения release
            EscrowNotFound: неизвестный escrow_id
            Unauthorized: caller не бенефициар
            EscrowAlreadyReleased: средства уже выплачены
            EscrowLocked: блокировка ещё не истекла
            TransferFailed: ledger актива отклонил выплату
        """
        with self._guard.enter("release"):
            record = self.get_escrow(escrow_id)

            if caller != record.beneficiary:
                raise Unauthorized(
                    f"{caller} is not the beneficiary of escrow {escrow_id}",
                    caller=caller,
                    escrow_id=escrow_id,
                )
            if record.released:
                raise EscrowAlreadyReleased(
                    f"escrow {escrow_id} already released", escrow_id=escrow_id
                )
            if now < record.release_after_ts:
                raise EscrowLocked(
                    f"escrow {escrow_id} locked for {record.release_after_ts - now:.1f}s",
                    escrow_id=escrow_id,
                    remaining_sec=record.release_after_ts - now,
                )

            released = record.model_copy(update={"released": True})
            self._records[escrow_id] = released

            asset = self._assets[record.asset_id]
            if not asset.transfer(self.config.custody_account, record.beneficiary, record.amount):
                self._records[escrow_id] = record
                raise TransferFailed(
                    f"escrow {escrow_id} payout failed", escrow_id=escrow_id
                )

            logger.info(
                "escrow {} released to {} amount={} {}",
                escrow_id,
                record.beneficiary,
                record.amount,
                record.asset_id,
            )
            return released
