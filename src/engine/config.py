"""Конфигурация движка."""

from dataclasses import dataclass

from src.core.math.bonding_curve import (
    LINEAR_RESERVE_RATIO_PPM,
    MAX_RESERVE_RATIO_PPM,
    MIN_RESERVE_RATIO_PPM,
)
from src.core.math.numerical_safeguards import UINT256_MAX
from src.gatekeeper.cooldown_guard import DEFAULT_COOLDOWN_DURATION_SEC


@dataclass(frozen=True)
class EngineConfig:
    """Параметры экземпляра движка.

    - reserve_ratio_ppm: форма кривой, неизменна после конструирования
    - initial_supply / initial_reserve: seed состояния (оба >= 1)
    - seed_holder: держатель начального supply (без cooldown записи)
    - engine_account: custody аккаунт движка в reserve ledger и minter derivative
    - cooldown_duration_sec: выдержка mint → burn (эталон 15 минут)
    - validate_events: проверять audit события JSON Schema контрактами
    """

    initial_supply: int
    initial_reserve: int
    reserve_ratio_ppm: int = LINEAR_RESERVE_RATIO_PPM
    seed_holder: str = "seed"
    engine_account: str = "engine"
    cooldown_duration_sec: float = DEFAULT_COOLDOWN_DURATION_SEC
    validate_events: bool = True

    def __post_init__(self):
        if not MIN_RESERVE_RATIO_PPM <= self.reserve_ratio_ppm <= MAX_RESERVE_RATIO_PPM:
            raise ValueError(
                f"reserve_ratio_ppm must be in [{MIN_RESERVE_RATIO_PPM}, "
                f"{MAX_RESERVE_RATIO_PPM}], got {self.reserve_ratio_ppm}"
            )
        for name in ("initial_supply", "initial_reserve"):
            value = getattr(self, name)
            if not 1 <= value <= UINT256_MAX:
                raise ValueError(f"{name} must be in [1, 2**256 - 1], got {value}")
        if self.cooldown_duration_sec < 0:
            raise ValueError(
                f"cooldown_duration_sec must be non-negative, got {self.cooldown_duration_sec}"
            )
        if not self.seed_holder or not self.engine_account:
            raise ValueError("seed_holder and engine_account must be non-empty")
        if self.seed_holder == self.engine_account:
            raise ValueError("seed_holder must differ from engine_account")
