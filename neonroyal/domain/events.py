"""Notifications published after the ledger has already been updated."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Awaitable, Callable, DefaultDict, Iterable

from .ledger import HistoryEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RoundSettled:
    profile_id: str
    entry: HistoryEntry
    payout: int
    balance: int
    narration: str


@dataclass(frozen=True, slots=True)
class BonusClaimed:
    profile_id: str
    kind: str
    amount: int
    balance: int
    narration: str


@dataclass(frozen=True, slots=True)
class CosmeticChanged:
    profile_id: str
    item_id: str
    purchased: bool
    balance: int
    narration: str


@dataclass(frozen=True, slots=True)
class LedgerReset:
    profile_id: str
    reason: str


Event = RoundSettled | BonusClaimed | CosmeticChanged | LedgerReset
EventListener = Callable[[Event], Awaitable[None]]


class EventBus:
    """Async pub-sub keyed by event class."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[type, list[EventListener]] = defaultdict(list)

    def subscribe(self, event_type: type, listener: EventListener) -> None:
        self._listeners[event_type].append(listener)

    async def publish(self, event: Event) -> None:
        """Deliver ``event`` to every listener; a failing listener is logged and skipped."""
        for listener in list(self._listeners.get(type(event), ())):
            try:
                await listener(event)
            except Exception:
                logger.exception(
                    "Listener %r failed on %s for profile %s",
                    listener,
                    type(event).__name__,
                    event.profile_id,
                )

    def clear(self) -> None:
        self._listeners.clear()

    def listeners(self, event_type: type) -> Iterable[EventListener]:
        return tuple(self._listeners.get(event_type, ()))
