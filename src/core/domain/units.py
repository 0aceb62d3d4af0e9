"""
TokenUnits — Централизованный модуль конверсии единиц токенов

Единственный допустимый способ преобразований между:
- base units (целые минимальные единицы, как хранятся в ledger)
- display units (Decimal, человекочитаемые, с учётом decimals)

ЗАПРЕЩЕНО смешивать единицы без явного конвертера из этого модуля.
Float не используется: суммы uint256 не представимы в double без потерь.
"""

from decimal import Decimal, InvalidOperation, localcontext
from typing import Final

from src.core.math.numerical_safeguards import UINT256_MAX


# =============================================================================
# ПАРАМЕТРЫ
# =============================================================================

# Decimals по умолчанию для reserve и derivative
DEFAULT_DECIMALS: Final[int] = 18

# Максимальные decimals (защита от ошибок ввода)
MAX_DECIMALS: Final[int] = 36

# Точность Decimal контекста: uint256 имеет 78 десятичных цифр
_DECIMAL_PRECISION: Final[int] = 100


# =============================================================================
# КОНВЕРТЕРЫ
# =============================================================================


def _validate_decimals(decimals: int) -> None:
    if not 0 <= decimals <= MAX_DECIMALS:
        raise ValueError(f"decimals must be in [0, {MAX_DECIMALS}], got {decimals}")


def to_base_units(amount: Decimal | int | str, decimals: int = DEFAULT_DECIMALS) -> int:
    """
    Конверсия: display units → base units.

    Args:
        amount: Сумма в display units (Decimal, int или строка)
        decimals: Количество знаков после запятой актива

    Returns:
        Целое количество base units

    Raises:
        ValueError: Если сумма отрицательна, дробная после масштабирования
                    или вне домена uint256

    Examples:
        >>> to_base_units("1.5", 18)
        1500000000000000000
        >>> to_base_units(100, 18)
        100000000000000000000
    """
    _validate_decimals(decimals)

    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        try:
            scaled = Decimal(amount) * (Decimal(10) ** decimals)
        except InvalidOperation as exc:
            raise ValueError(f"Invalid amount: {amount!r}") from exc

        if scaled != scaled.to_integral_value():
            raise ValueError(
                f"Amount {amount} has more than {decimals} decimal places"
            )

    base_units = int(scaled)
    if base_units < 0 or base_units > UINT256_MAX:
        raise ValueError(f"Amount {amount} outside uint256 domain")

    return base_units


def from_base_units(base_units: int, decimals: int = DEFAULT_DECIMALS) -> Decimal:
    """
    Конверсия: base units → display units.

    Examples:
        >>> from_base_units(1500000000000000000, 18)
        Decimal('1.5')
    """
    _validate_decimals(decimals)

    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        return (Decimal(base_units) / (Decimal(10) ** decimals)).normalize()
