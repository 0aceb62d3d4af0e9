"""Cooldown Guard — выдержка между mint и burn аккаунта (anti-sandwich).

Позиция, выпущенная mint, должна «вылежаться» фиксированное время (эталон —
15 минут), прежде чем её можно сжечь. Это лишает смысла сценарий, при
котором атакующий выпускает derivative прямо перед крупным чужим mint и
сразу сжигает после него, забирая рост цены без риска.

Порядок проверок:
1. Аккаунт никогда не делал mint → burn разрешён (только pre-seeded балансы)
2. now >= last_mint_ts + cooldown_duration → burn разрешён
3. Иначе → блокировка (CooldownActive)

Известное ограничение: учитывается только собственный последний mint
аккаунта, а не объём mint всего протокола в окне. Front-run с другого,
несвязанного адреса этим guard не блокируется.
"""

from dataclasses import dataclass
from typing import Final, Optional

from src.core.domain.records import CooldownRecord
from src.core.errors import CooldownActive

# Эталонная длительность выдержки (15 минут)
DEFAULT_COOLDOWN_DURATION_SEC: Final[float] = 15 * 60.0


@dataclass(frozen=True)
class CooldownCheckResult:
    """Результат проверки cooldown."""

    burn_allowed: bool
    block_reason: str

    # Входные параметры для диагностики
    account: str
    now: float
    last_mint_ts: Optional[float]
    cooldown_duration_sec: float

    # Сколько осталось ждать (0 если разрешено)
    remaining_sec: float

    # Детали
    details: str


class CooldownGuard:
    """Per-account timestamps последнего mint.

    Записи перезаписываются, но не удаляются: cooldown аккаунта всегда
    отражает его последний mint.
    """

    def __init__(self):
        self._records: dict[str, CooldownRecord] = {}

    def record_mint(self, account: str, now: float) -> CooldownRecord:
        """Безусловная перезапись времени последнего mint."""
        record = CooldownRecord(account=account, last_mint_ts=now)
        self._records[account] = record
        return record

    def last_mint_ts(self, account: str) -> Optional[float]:
        """None означает «никогда» (минус бесконечность)."""
        record = self._records.get(account)
        return record.last_mint_ts if record is not None else None

    def get_record(self, account: str) -> Optional[CooldownRecord]:
        return self._records.get(account)

    def restore_record(self, account: str, record: Optional[CooldownRecord]) -> None:
        """Откат записи аккаунта к снапшоту (откат mint движком)."""
        if record is None:
            self._records.pop(account, None)
        else:
            self._records[account] = record

    def evaluate(
        self,
        account: str,
        now: float,
        cooldown_duration_sec: float = DEFAULT_COOLDOWN_DURATION_SEC,
    ) -> CooldownCheckResult:
        """Оценка допустимости burn без исключения.

        Args:
            account: аккаунт, пытающийся сжечь derivative
            now: текущее время (секунды, монотонно неубывающее)
            cooldown_duration_sec: длительность выдержки

        Returns:
            CooldownCheckResult с решением о допуске
        """
        last_mint_ts = self.last_mint_ts(account)

        if last_mint_ts is None:
            return CooldownCheckResult(
                burn_allowed=True,
                block_reason="",
                account=account,
                now=now,
                last_mint_ts=None,
                cooldown_duration_sec=cooldown_duration_sec,
                remaining_sec=0.0,
                details="No mint recorded for account",
            )

        unlock_ts = last_mint_ts + cooldown_duration_sec
        if now >= unlock_ts:
            return CooldownCheckResult(
                burn_allowed=True,
                block_reason="",
                account=account,
                now=now,
                last_mint_ts=last_mint_ts,
                cooldown_duration_sec=cooldown_duration_sec,
                remaining_sec=0.0,
                details=f"Cooldown elapsed {now - unlock_ts:.1f}s ago",
            )

        remaining = unlock_ts - now
        return CooldownCheckResult(
            burn_allowed=False,
            block_reason="cooldown_active",
            account=account,
            now=now,
            last_mint_ts=last_mint_ts,
            cooldown_duration_sec=cooldown_duration_sec,
            remaining_sec=remaining,
            details=f"Burn blocked: {remaining:.1f}s of cooldown remaining",
        )

    def check_burn_allowed(
        self,
        account: str,
        now: float,
        cooldown_duration_sec: float = DEFAULT_COOLDOWN_DURATION_SEC,
    ) -> CooldownCheckResult:
        """Проверка допустимости burn.

        Raises:
            CooldownActive: если now < last_mint_ts + cooldown_duration_sec
        """
        result = self.evaluate(account, now, cooldown_duration_sec)
        if not result.burn_allowed:
            raise CooldownActive(
                result.details,
                account=account,
                remaining_sec=result.remaining_sec,
            )
        return result
