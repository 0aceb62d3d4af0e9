"""Reserve Ledger — total supply и баланс reserve движка.

Владеет CurveState. Каждая операция:
1. Вычисляет сумму по bonding curve на текущем состоянии
2. Атомарно заменяет CurveState новым экземпляром
3. Проверяет инварианты reserve_balance >= 1, total_supply >= 1

apply_mint вызывается только после того, как депозит безвозвратно получен
(порядок обеспечивает движок). Баланс держателя при apply_burn проверяет
движок, не ledger.
"""

from loguru import logger

from src.core.domain.curve_state import CurveState
from src.core.errors import InvalidAmount
from src.core.math.bonding_curve import purchase_amount, sale_amount
from src.core.math.numerical_safeguards import checked_add


class ReserveLedger:
    """Состояние кривой с атомарными коммитами mint / burn."""

    def __init__(self, initial_state: CurveState):
        self._state = initial_state
        self._check_invariants(initial_state)

    @property
    def state(self) -> CurveState:
        return self._state

    @property
    def total_supply(self) -> int:
        return self._state.total_supply

    @property
    def reserve_balance(self) -> int:
        return self._state.reserve_balance

    @property
    def reserve_ratio_ppm(self) -> int:
        return self._state.reserve_ratio_ppm

    # -------------------------------------------------------------------------
    # Quotes (без изменения состояния)
    # -------------------------------------------------------------------------

    def quote_mint(self, deposit_amount: int) -> int:
        state = self._state
        return purchase_amount(
            state.total_supply, state.reserve_balance, state.reserve_ratio_ppm, deposit_amount
        )

    def quote_burn(self, burn_amount: int) -> int:
        state = self._state
        return sale_amount(
            state.total_supply, state.reserve_balance, state.reserve_ratio_ppm, burn_amount
        )

    # -------------------------------------------------------------------------
    # Commits
    # -------------------------------------------------------------------------

    def preview_mint(self, deposit_amount: int) -> int:
        """
        Выпуск по депозиту без коммита, со всеми проверками apply_mint.

        Raises:
            InvalidAmount: deposit == 0 или депозит слишком мал (minted == 0)
            ArithmeticOverflow: выход за uint256
        """
        derivative_amount = self.quote_mint(deposit_amount)
        if derivative_amount == 0:
            raise InvalidAmount(
                f"deposit {deposit_amount} too small to mint a derivative unit",
                deposit_amount=deposit_amount,
            )

        checked_add(self._state.total_supply, derivative_amount)
        checked_add(self._state.reserve_balance, deposit_amount)
        return derivative_amount

    def apply_mint(self, deposit_amount: int) -> int:
        """Выпуск по депозиту: supply += minted, reserve += deposit."""
        derivative_amount = self.preview_mint(deposit_amount)
        new_state = self._state.with_mint(deposit_amount, derivative_amount)
        self._commit(new_state)
        return derivative_amount

    def apply_burn(self, burn_amount: int) -> int:
        """
        Сжигание: supply -= burn, reserve -= reserve_amount.

        Raises:
            InvalidAmount: burn == 0 или burn >= supply
        """
        reserve_amount = self.quote_burn(burn_amount)
        new_state = self._state.with_burn(burn_amount, reserve_amount)
        self._commit(new_state)
        return reserve_amount

    # -------------------------------------------------------------------------
    # Откат (атомарность на уровне движка)
    # -------------------------------------------------------------------------

    def revert_burn(self, burn_amount: int, reserve_amount: int) -> None:
        """
        Обратные дельты одного burn: supply += burn, reserve += reserve_amount.

        Коммиты, сделанные после этого burn, сохраняются.
        """
        checked_add(self._state.total_supply, burn_amount)
        checked_add(self._state.reserve_balance, reserve_amount)
        self._commit(self._state.with_mint(reserve_amount, burn_amount))
        logger.debug(
            "burn reverted: supply={} reserve={}",
            self._state.total_supply,
            self._state.reserve_balance,
        )

    def snapshot(self) -> CurveState:
        return self._state

    def restore(self, state: CurveState) -> None:
        if state.reserve_ratio_ppm != self._state.reserve_ratio_ppm:
            raise InvalidAmount("reserve_ratio_ppm is immutable")
        self._check_invariants(state)
        logger.debug(
            "curve state restored: supply={} reserve={}",
            state.total_supply,
            state.reserve_balance,
        )
        self._state = state

    def _commit(self, new_state: CurveState) -> None:
        self._check_invariants(new_state)
        self._state = new_state

    @staticmethod
    def _check_invariants(state: CurveState) -> None:
        if state.reserve_balance < 1 or state.total_supply < 1:
            raise InvalidAmount(
                "curve state must keep reserve_balance >= 1 and total_supply >= 1",
                total_supply=state.total_supply,
                reserve_balance=state.reserve_balance,
            )
