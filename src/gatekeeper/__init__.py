"""Gatekeeper — проверки допуска операций движка.

- Cooldown между mint и burn аккаунта (anti-sandwich)
"""

from .cooldown_guard import (
    DEFAULT_COOLDOWN_DURATION_SEC,
    CooldownCheckResult,
    CooldownGuard,
)

__all__ = [
    "DEFAULT_COOLDOWN_DURATION_SEC",
    "CooldownCheckResult",
    "CooldownGuard",
]
