"""Engine — композиция кривой, ledger'ов и cooldown в mint / burn."""

from .config import EngineConfig
from .continuous_token_engine import ContinuousTokenEngine

__all__ = [
    "ContinuousTokenEngine",
    "EngineConfig",
]
