"""Time-of-day bonus calendar and payout composition."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_FLOOR, Decimal
from typing import TYPE_CHECKING, Mapping

from .clock import Weekday, as_utc
from .ledger import GameType

if TYPE_CHECKING:
    from ..config import BonusConfig


WEEKLY_SCHEDULE: Mapping[Weekday, str] = {
    Weekday.MONDAY: "3x Daily Bonus",
    Weekday.TUESDAY: "Blackjack Wins 2.5:1",
    Weekday.WEDNESDAY: "Roulette Numbers 45:1",
    Weekday.THURSDAY: "1.5x Slots Multiplier",
    Weekday.FRIDAY: "$500 Friday Fortune",
    Weekday.SATURDAY: "1.2x All Winnings",
    Weekday.SUNDAY: "2.5x Mini-game Wins",
}


@dataclass(frozen=True, slots=True)
class MultiplierTable:
    """A game's base multiplier with per-weekday overrides."""

    default: Decimal
    overrides: Mapping[Weekday, Decimal] = field(default_factory=dict)

    def for_day(self, weekday: Weekday) -> Decimal:
        return self.overrides.get(weekday, self.default)


GAME_MULTIPLIERS: Mapping[GameType, MultiplierTable] = {
    GameType.SLOTS: MultiplierTable(Decimal("1"), {Weekday.THURSDAY: Decimal("1.5")}),
    GameType.BLACKJACK: MultiplierTable(Decimal("2"), {Weekday.TUESDAY: Decimal("2.5")}),
    GameType.ROULETTE: MultiplierTable(Decimal("35"), {Weekday.WEDNESDAY: Decimal("45")}),
    GameType.HI_LO: MultiplierTable(Decimal("1.85"), {Weekday.SUNDAY: Decimal("2.5")}),
    GameType.COIN_FLIP: MultiplierTable(Decimal("2"), {Weekday.SUNDAY: Decimal("2.5")}),
    GameType.TEXAS_HOLDEM: MultiplierTable(Decimal("3")),
    GameType.PLINKO: MultiplierTable(Decimal("1")),
}


@dataclass(frozen=True, slots=True)
class TimeContext:
    """Snapshot of the bonus calendar at one moment. Never persisted."""

    weekday: Weekday
    hour: int
    is_golden_hour: bool
    is_graveyard: bool
    active_bonus_label: str
    payout_boosts: tuple[Decimal, ...] = ()

    def game_multiplier(self, game_type: GameType) -> Decimal:
        return GAME_MULTIPLIERS[game_type].for_day(self.weekday)


class BonusResolver:
    """Derive a :class:`TimeContext` from wall-clock time."""

    def __init__(self, config: "BonusConfig") -> None:
        self._config = config

    def resolve(self, now: datetime) -> TimeContext:
        tz = self._config.tzinfo()
        local = as_utc(now).astimezone(tz)
        weekday = Weekday(local.weekday())
        hour = local.hour
        start, end = self._config.graveyard_hours
        is_golden = hour == self._config.golden_hour

        boosts: list[Decimal] = []
        if is_golden:
            boosts.append(to_decimal(self._config.golden_multiplier))
        if weekday == self._config.global_weekday:
            boosts.append(to_decimal(self._config.global_multiplier))

        return TimeContext(
            weekday=weekday,
            hour=hour,
            is_golden_hour=is_golden,
            is_graveyard=start <= hour < end,
            active_bonus_label=WEEKLY_SCHEDULE[weekday],
            payout_boosts=tuple(boosts),
        )


def to_decimal(value: Decimal | float | int) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 1.85 as 1.85 instead of its binary expansion.
    return Decimal(str(value))


def compose_payout(
    wager: int,
    *multipliers: Decimal | float | int,
    boosts: tuple[Decimal, ...] = (),
) -> int:
    """Multiply the wager through every factor and floor once at the end.

    Boosts apply only to positive payouts that are not an exact stake
    return, so a push stays a push.
    """
    total = Decimal(wager)
    for multiplier in multipliers:
        total *= to_decimal(multiplier)
    if total > 0 and total != wager:
        for boost in boosts:
            total *= boost
    return int(total.to_integral_value(rounding=ROUND_FLOOR))
