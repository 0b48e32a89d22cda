"""Clock abstraction so cooldowns and bonus days can be tested."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import IntEnum
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall-clock time as an aware UTC datetime."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC and normalise aware ones to UTC."""
    if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class Weekday(IntEnum):
    """Day numbers matching :meth:`datetime.weekday`."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def label(self) -> str:
        return self.name.title()

    @classmethod
    def parse(cls, raw: str | int) -> "Weekday":
        if isinstance(raw, int):
            return cls(raw)
        text = raw.strip()
        if text.isdigit():
            return cls(int(text))
        try:
            return cls[text.upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown weekday '{raw}'") from exc
