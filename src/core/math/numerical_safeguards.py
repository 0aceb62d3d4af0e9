"""
Numerical Safeguards — Safe Integer Primitives

Модуль обеспечивает численную устойчивость целочисленной арифметики движка:
- Домен uint256 (все суммы, supply и reserve — целые в [0, 2**256 - 1])
- Checked арифметика: переполнение ширины 256 бит → ArithmeticOverflow
- mul_div с явным направлением округления (floor / ceil)
- Валидация положительных значений и диапазонов

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Переполнение никогда не происходит молча (исключение вместо wrap-around)
2. Деление на ноль никогда не происходит (InvalidAmount до деления)
3. Округление всегда явное; по умолчанию floor (в пользу движка)
4. Все операции детерминированы и воспроизводимы
"""

from typing import Final

from src.core.errors import ArithmeticOverflow, InvalidAmount

# =============================================================================
# INTEGER WIDTH
# =============================================================================

# Ширина машинного слова, которую эмулирует движок
UINT256_BITS: Final[int] = 256

# Максимальное значение uint256
UINT256_MAX: Final[int] = (1 << UINT256_BITS) - 1

# Максимальное значение uint32 (для параметров ratio / exponent)
UINT32_MAX: Final[int] = (1 << 32) - 1


# =============================================================================
# ДОМЕННЫЕ ПРОВЕРКИ
# =============================================================================


def is_uint256(value: int) -> bool:
    """
    Проверка, что значение — целое в домене uint256.

    bool исключается явно: True/False не являются суммами.
    """
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value <= UINT256_MAX
    )


def require_uint256(value: int, name: str) -> int:
    """
    Валидация, что значение в домене uint256.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Returns:
        value без изменений

    Raises:
        InvalidAmount: Если value не int, отрицательное или > UINT256_MAX
    """
    if not is_uint256(value):
        raise InvalidAmount(f"{name} must be an integer in [0, 2**256 - 1], got {value!r}", **{name: value})
    return value


def require_positive(value: int, name: str) -> int:
    """
    Валидация, что значение — положительное uint256.

    Raises:
        InvalidAmount: Если value == 0 или вне домена uint256
    """
    require_uint256(value, name)
    if value == 0:
        raise InvalidAmount(f"{name} must be positive, got 0", **{name: value})
    return value


def require_in_range(value: int, name: str, min_value: int, max_value: int) -> int:
    """
    Валидация, что целое значение в диапазоне [min_value, max_value].

    Raises:
        InvalidAmount: Если value вне диапазона
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount(f"{name} must be an integer, got {value!r}", **{name: value})
    if value < min_value or value > max_value:
        raise InvalidAmount(
            f"{name} must be in [{min_value}, {max_value}], got {value}", **{name: value}
        )
    return value


# =============================================================================
# CHECKED АРИФМЕТИКА
# =============================================================================


def check_width(value: int, what: str = "value") -> int:
    """
    Проверка, что промежуточный результат помещается в 256 бит.

    Raises:
        ArithmeticOverflow: Если value > UINT256_MAX
    """
    if value > UINT256_MAX:
        raise ArithmeticOverflow(
            f"{what} exceeds 256-bit width ({value.bit_length()} bits)",
            bits=value.bit_length(),
        )
    return value


def checked_add(a: int, b: int) -> int:
    """a + b с проверкой ширины."""
    return check_width(a + b, "addition")


def checked_sub(a: int, b: int) -> int:
    """
    a - b без ухода ниже нуля.

    Raises:
        ArithmeticOverflow: Если b > a (underflow)
    """
    if b > a:
        raise ArithmeticOverflow(f"subtraction underflow: {a} - {b}", a=a, b=b)
    return a - b


def checked_mul(a: int, b: int) -> int:
    """a * b с проверкой ширины."""
    return check_width(a * b, "multiplication")


# =============================================================================
# MUL_DIV С ЯВНЫМ ОКРУГЛЕНИЕМ
# =============================================================================


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator).

    Произведение вычисляется без усечения (полная точность Python int),
    результат округляется вниз — в пользу движка при выплатах.

    Raises:
        InvalidAmount: Если denominator == 0
    """
    if denominator == 0:
        raise InvalidAmount("mul_div: division by zero")
    return (a * b) // denominator


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """
    ceil(a * b / denominator).

    Используется там, где округление вверх работает в пользу движка
    (например, при расчёте требуемого депозита).

    Raises:
        InvalidAmount: Если denominator == 0
    """
    if denominator == 0:
        raise InvalidAmount("mul_div_rounding_up: division by zero")
    return -((-(a * b)) // denominator)


def floor_log2(value: int) -> int:
    """
    floor(log2(value)) для value >= 1.

    Examples:
        >>> floor_log2(1)
        0
        >>> floor_log2(255)
        7
        >>> floor_log2(256)
        8
    """
    if value < 1:
        raise InvalidAmount(f"floor_log2 requires value >= 1, got {value}")
    return value.bit_length() - 1
