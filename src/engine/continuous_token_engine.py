"""Continuous Token Engine — mint / burn по bonding curve.

Композиция:
- ReserveLedger: CurveState (supply, reserve, ratio)
- CooldownGuard: выдержка mint → burn
- ReserveAssetLedger: внешний reserve актив (transfer in / out)
- DerivativeTokenLedger: балансы derivative (credit / debit)

mint(account, deposit, now):
1. deposit > 0, расчёт derivative по кривой, проверки minter и uint256
2. allowance + transfer_in (до любых изменений состояния)
3. ReserveLedger.apply_mint → MintEvent из фактического minted →
   CooldownGuard.record_mint → credit
4. Сбой после transfer_in: откат кривой и cooldown записи, возврат депозита

burn(account, amount, now):
1. CooldownGuard.check_burn_allowed (независимо от amount)
2. amount > 0, баланс >= amount, minter, расчёт reserve по кривой
3. debit → ReserveLedger.apply_burn → BurnEvent → transfer_out
   (decrement-then-transfer)
4. Неудачный transfer_out откатывает этот burn обратными дельтами → TransferFailed

Сериализация: каждый экземпляр владеет RLock, все операции выполняются
под ним. mint и burn дополнительно защищены ReentrancyGuard: callback из
transfer_in / transfer_out в том же потоке может читать уже закоммиченное
состояние, но вложенный mint или burn отклоняется с ReentrantCall.
"""

import threading
from fractions import Fraction
from typing import Optional

from loguru import logger

from src.access.ownership import OwnershipRegistry
from src.access.reentrancy import ReentrancyGuard
from src.core.contracts.validators import BurnEventValidator, MintEventValidator
from src.core.domain.curve_state import CurveState
from src.core.domain.events import BurnEvent, MintEvent
from src.core.errors import ExchangeError, InsufficientBalance, InvalidAmount, TransferFailed
from src.core.math.bonding_curve import spot_price
from src.core.math.numerical_safeguards import checked_add, require_positive
from src.engine.config import EngineConfig
from src.gatekeeper.cooldown_guard import CooldownGuard
from src.ledger.derivative_ledger import DerivativeTokenLedger
from src.ledger.reserve_asset import ReserveAssetLedger
from src.ledger.reserve_ledger import ReserveLedger


class ContinuousTokenEngine:
    """Движок continuous token: один reserve актив, один derivative актив."""

    def __init__(
        self,
        config: EngineConfig,
        reserve_asset: ReserveAssetLedger,
        ownership: OwnershipRegistry,
        derivative_ledger: Optional[DerivativeTokenLedger] = None,
    ):
        """
        Args:
            config: параметры движка (ratio, seed, cooldown)
            reserve_asset: ledger reserve актива; initial_reserve уже в custody
            ownership: владение (изменение параметров)
            derivative_ledger: ledger derivative; minter должен быть
                config.engine_account (default: создаётся автоматически)
        """
        self.config = config
        self._reserve_asset = reserve_asset
        self._ownership = ownership
        self._derivative = derivative_ledger or DerivativeTokenLedger(
            ownership, minter=config.engine_account
        )
        self._reserve_ledger = ReserveLedger(
            CurveState(
                total_supply=config.initial_supply,
                reserve_balance=config.initial_reserve,
                reserve_ratio_ppm=config.reserve_ratio_ppm,
            )
        )
        self._cooldown = CooldownGuard()
        self._cooldown_duration_sec = config.cooldown_duration_sec
        self._events: list[MintEvent | BurnEvent] = []
        self._lock = threading.RLock()
        self._reentrancy = ReentrancyGuard()

        self._mint_validator = MintEventValidator() if config.validate_events else None
        self._burn_validator = BurnEventValidator() if config.validate_events else None

        # Seed: начальный supply у seed_holder (pre-seeded баланс, без cooldown)
        self._derivative.credit(config.engine_account, config.seed_holder, config.initial_supply)

        logger.info(
            "engine initialized: ratio={}ppm supply={} reserve={} cooldown={}s",
            config.reserve_ratio_ppm,
            config.initial_supply,
            config.initial_reserve,
            config.cooldown_duration_sec,
        )

    # -------------------------------------------------------------------------
    # Read-only
    # -------------------------------------------------------------------------

    @property
    def state(self) -> CurveState:
        return self._reserve_ledger.state

    @property
    def events(self) -> tuple[MintEvent | BurnEvent, ...]:
        return tuple(self._events)

    @property
    def cooldown_duration_sec(self) -> float:
        return self._cooldown_duration_sec

    @property
    def cooldown(self) -> CooldownGuard:
        return self._cooldown

    @property
    def derivative_ledger(self) -> DerivativeTokenLedger:
        return self._derivative

    def balance_of(self, account: str) -> int:
        return self._derivative.balance_of(account)

    def quote_mint(self, deposit_amount: int) -> int:
        """Сколько derivative выпустит deposit_amount на текущем состоянии."""
        with self._lock:
            return self._reserve_ledger.quote_mint(deposit_amount)

    def quote_burn(self, burn_amount: int) -> int:
        """Сколько reserve вернёт burn_amount на текущем состоянии."""
        with self._lock:
            return self._reserve_ledger.quote_burn(burn_amount)

    def spot_price(self) -> Fraction:
        with self._lock:
            state = self._reserve_ledger.state
            return spot_price(state.total_supply, state.reserve_balance, state.reserve_ratio_ppm)

    # -------------------------------------------------------------------------
    # Mint / Burn
    # -------------------------------------------------------------------------

    def mint(self, account: str, deposit_amount: int, now: float) -> int:
        """Депозит reserve → выпуск derivative.

        Raises:
            InvalidAmount: deposit == 0 или слишком мал для выпуска
            Unauthorized: движок больше не minter derivative ledger
            TransferFailed: недостаточный allowance или отказ transfer_in
            ReentrantCall: вложенный mint / burn из callback transfer_in
            ArithmeticOverflow: переполнение fixed-point вычисления
        """
        with self._lock, self._reentrancy.enter("mint"):
            try:
                require_positive(deposit_amount, "deposit_amount")
                derivative_amount = self._reserve_ledger.preview_mint(deposit_amount)
                self._derivative.require_minter(self.config.engine_account)
                checked_add(self._derivative.balance_of(account), derivative_amount)

                self._pull_reserve(account, deposit_amount)
            except ExchangeError as exc:
                logger.warning("mint rejected for {}: {} ({})", account, exc.reason, exc)
                raise

            snapshot = self._reserve_ledger.snapshot()
            cooldown_record = self._cooldown.get_record(account)
            try:
                minted = self._reserve_ledger.apply_mint(deposit_amount)
                event = MintEvent(
                    sequence=len(self._events),
                    account=account,
                    reserve_amount=deposit_amount,
                    derivative_amount=minted,
                    ts=now,
                )
                if self._mint_validator is not None:
                    self._mint_validator.validate_model(event)
                self._cooldown.record_mint(account, now)
                self._derivative.credit(self.config.engine_account, account, minted)
            except Exception:
                self._reserve_ledger.restore(snapshot)
                self._cooldown.restore_record(account, cooldown_record)
                self._refund_deposit(account, deposit_amount)
                raise

            self._events.append(event)

            logger.info(
                "mint: account={} reserve_in={} derivative_out={} supply={} reserve={}",
                account,
                deposit_amount,
                minted,
                self._reserve_ledger.total_supply,
                self._reserve_ledger.reserve_balance,
            )
            return minted

    def burn(self, account: str, burn_amount: int, now: float) -> int:
        """Сжигание derivative → выплата reserve.

        Raises:
            CooldownActive: burn до истечения выдержки после последнего mint
            InvalidAmount: burn == 0 или burn >= total supply
            InsufficientBalance: баланс аккаунта меньше burn_amount
            Unauthorized: движок больше не minter derivative ledger
            TransferFailed: отказ transfer_out (состояние откатывается)
            ReentrantCall: вложенный mint / burn из callback transfer_out
        """
        with self._lock, self._reentrancy.enter("burn"):
            try:
                self._cooldown.check_burn_allowed(account, now, self._cooldown_duration_sec)
                require_positive(burn_amount, "burn_amount")

                balance = self._derivative.balance_of(account)
                if balance < burn_amount:
                    raise InsufficientBalance(
                        f"{account} balance {balance} < burn_amount {burn_amount}",
                        account=account,
                        balance=balance,
                        amount=burn_amount,
                    )
                self._derivative.require_minter(self.config.engine_account)
                self._reserve_ledger.quote_burn(burn_amount)
            except ExchangeError as exc:
                logger.warning("burn rejected for {}: {} ({})", account, exc.reason, exc)
                raise

            # Decrement-then-transfer: внутренние списания до внешнего вызова
            self._derivative.debit(self.config.engine_account, account, burn_amount)
            reserve_amount = None
            try:
                reserve_amount = self._reserve_ledger.apply_burn(burn_amount)
                event = BurnEvent(
                    sequence=len(self._events),
                    account=account,
                    reserve_amount=reserve_amount,
                    derivative_amount=burn_amount,
                    ts=now,
                )
                if self._burn_validator is not None:
                    self._burn_validator.validate_model(event)
                transferred = self._reserve_asset.transfer_out(account, reserve_amount)
            except Exception:
                self._rollback_burn(account, burn_amount, reserve_amount)
                raise

            if not transferred:
                self._rollback_burn(account, burn_amount, reserve_amount)
                logger.warning("burn rejected for {}: transfer_failed", account)
                raise TransferFailed(
                    f"reserve transfer out to {account} failed",
                    account=account,
                    amount=reserve_amount,
                )

            self._events.append(event)

            logger.info(
                "burn: account={} derivative_in={} reserve_out={} supply={} reserve={}",
                account,
                burn_amount,
                reserve_amount,
                self._reserve_ledger.total_supply,
                self._reserve_ledger.reserve_balance,
            )
            return reserve_amount

    # -------------------------------------------------------------------------
    # Owner-only parameters
    # -------------------------------------------------------------------------

    def set_cooldown_duration(self, caller: str, cooldown_duration_sec: float) -> None:
        """Изменение выдержки (только owner). Reserve ratio неизменен."""
        self._ownership.require_owner(caller)
        if cooldown_duration_sec < 0:
            raise InvalidAmount(
                f"cooldown_duration_sec must be non-negative, got {cooldown_duration_sec}"
            )
        with self._lock:
            logger.info(
                "cooldown duration changed: {}s -> {}s",
                self._cooldown_duration_sec,
                cooldown_duration_sec,
            )
            self._cooldown_duration_sec = cooldown_duration_sec

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _pull_reserve(self, account: str, amount: int) -> None:
        allowance = self._reserve_asset.allowance(account, self.config.engine_account)
        if allowance < amount:
            raise TransferFailed(
                f"allowance {allowance} < deposit {amount}",
                account=account,
                allowance=allowance,
                amount=amount,
            )
        if not self._reserve_asset.transfer_in(account, amount):
            raise TransferFailed(
                f"reserve transfer in from {account} failed", account=account, amount=amount
            )

    def _refund_deposit(self, account: str, amount: int) -> None:
        if not self._reserve_asset.transfer_out(account, amount):
            logger.error("mint rollback: refund of {} to {} failed", amount, account)

    def _rollback_burn(self, account: str, burn_amount: int, reserve_amount: Optional[int]) -> None:
        # Обратные дельты: коммиты вложенных вызовов не затираются
        if reserve_amount is not None:
            self._reserve_ledger.revert_burn(burn_amount, reserve_amount)
        self._derivative.credit(self.config.engine_account, account, burn_amount)
