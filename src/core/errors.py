"""
Exchange Errors — таксономия ошибок движка

Каждая ошибка несёт стабильный машинно-сопоставимый код `reason`, чтобы
вызывающий код и тесты могли проверять причину отказа без разбора текста.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Любая ошибка прерывает операцию целиком (без частичных изменений state)
2. Внутренних retry нет — повтор является ответственностью вызывающего
3. Код reason не меняется между версиями
"""

from typing import Any, Final


class ExchangeError(Exception):
    """
    Базовая ошибка движка.

    Args:
        message: Человекочитаемое описание
        **context: Диагностический контекст (account, amount, ...)
    """

    reason: str = "exchange_error"

    def __init__(self, message: str = "", **context: Any) -> None:
        self.context: dict[str, Any] = context
        super().__init__(message or self.reason)


# =============================================================================
# CORE PRICING ERRORS
# =============================================================================


class InvalidAmount(ExchangeError):
    """Нулевое или вне домена значение (amount, supply, reserve, ratio)."""

    reason = "invalid_amount"


class InsufficientBalance(ExchangeError):
    """Burn или transfer превышает баланс держателя."""

    reason = "insufficient_balance"


class CooldownActive(ExchangeError):
    """Burn до истечения периода выдержки после последнего mint аккаунта."""

    reason = "cooldown_active"


class TransferFailed(ExchangeError):
    """Внешний ledger актива не подтвердил перевод (или не хватает allowance)."""

    reason = "transfer_failed"


class ArithmeticOverflow(ExchangeError):
    """
    Fixed-point вычисление вышло за 256-битную ширину даже на минимальной точности.

    Для реалистичных величин reserve/supply недостижимо; появление означает
    нарушение конфигурации или границ входных данных, а не recoverable условие.
    """

    reason = "arithmetic_overflow"


# =============================================================================
# PERIPHERAL ERRORS (access control, escrow)
# =============================================================================


class Unauthorized(ExchangeError):
    reason = "unauthorized"


class AccountBanned(ExchangeError):
    reason = "account_banned"


class EscrowNotFound(ExchangeError):
    reason = "escrow_not_found"


class EscrowLocked(ExchangeError):
    reason = "escrow_locked"


class EscrowAlreadyReleased(ExchangeError):
    reason = "escrow_already_released"


class ReentrantCall(ExchangeError):
    """Повторный вход в вызов, защищённый single-entry lock."""

    reason = "reentrant_call"


ALL_REASONS: Final[tuple[str, ...]] = tuple(
    cls.reason
    for cls in (
        InvalidAmount,
        InsufficientBalance,
        CooldownActive,
        TransferFailed,
        ArithmeticOverflow,
        Unauthorized,
        AccountBanned,
        EscrowNotFound,
        EscrowLocked,
        EscrowAlreadyReleased,
        ReentrantCall,
    )
)
