"""Daily check-in and weekly fortune bonuses."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .bonuses import TimeContext
from .clock import as_utc
from .exceptions import NotEligible, TooSoon
from .ledger import PlayerLedger

if TYPE_CHECKING:
    from ..config import RewardsConfig


@dataclass(frozen=True, slots=True)
class BonusClaim:
    kind: str
    amount: int
    narration: str
    claimed_at: datetime


class RewardsCalendar:
    """Apply the cooldown and weekday rules for bonus claims."""

    def __init__(self, config: "RewardsConfig") -> None:
        self._config = config

    def daily_amount(self, context: TimeContext) -> int:
        if context.weekday == self._config.daily_big_weekday:
            return self._config.daily_base * self._config.daily_big_multiplier
        return self._config.daily_base

    def daily_remaining(self, ledger: PlayerLedger, now: datetime) -> int:
        return _remaining(ledger.last_daily_claim, now, self._config.daily_cooldown)

    def weekly_remaining(self, ledger: PlayerLedger, now: datetime) -> int:
        return _remaining(ledger.last_weekly_claim, now, self._config.weekly_cooldown)

    def claim_daily(self, ledger: PlayerLedger, now: datetime, context: TimeContext) -> BonusClaim:
        remaining = self.daily_remaining(ledger, now)
        if remaining > 0:
            raise TooSoon(remaining)
        amount = self.daily_amount(context)
        ledger.credit(amount)
        ledger.last_daily_claim = as_utc(now)
        narration = f"{context.weekday.label} reward claimed! ${amount} added to balance."
        ledger.last_event = narration
        return BonusClaim("daily", amount, narration, ledger.last_daily_claim)

    def claim_weekly(self, ledger: PlayerLedger, now: datetime, context: TimeContext) -> BonusClaim:
        weekday = self._config.weekly_weekday
        if context.weekday != weekday:
            raise NotEligible(f"The weekly fortune is only available on {weekday.label}s")
        if self.weekly_remaining(ledger, now) > 0:
            raise NotEligible("The weekly fortune was already claimed")
        amount = self._config.weekly_amount
        ledger.credit(amount)
        ledger.last_weekly_claim = as_utc(now)
        narration = f"Fortune {weekday.label}! ${amount} added to your account."
        ledger.last_event = narration
        return BonusClaim("weekly", amount, narration, ledger.last_weekly_claim)


def _remaining(last: datetime | None, now: datetime, cooldown: timedelta) -> int:
    """Seconds until a claim is allowed; a claim needs strictly more than ``cooldown``."""
    if last is None:
        return 0
    elapsed = as_utc(now) - as_utc(last)
    if elapsed > cooldown:
        return 0
    return max(1, int((cooldown - elapsed).total_seconds()))
