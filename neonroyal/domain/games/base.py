"""Shared round lifecycle for every rule engine."""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from random import Random
from typing import Any, ClassVar, Mapping, Sequence, TypeVar

from ..bonuses import TimeContext, compose_payout
from ..exceptions import InvalidWager, NoRoundInProgress, RoundInProgress
from ..ledger import GameType, HistoryEntry, Outcome, PlayerLedger

ChoiceT = TypeVar("ChoiceT", bound=Enum)


class RoundPhase(str, Enum):
    IDLE = "IDLE"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"


@dataclass(frozen=True, slots=True)
class RoundReport:
    """What an engine action produced; ``entry`` is set once the round settles."""

    game_type: GameType
    phase: RoundPhase
    wager: int
    narration: str
    payout: int | None = None
    outcome: Outcome | None = None
    entry: HistoryEntry | None = None
    details: Mapping[str, Any] = field(default_factory=dict)

    @property
    def resolved(self) -> bool:
        return self.phase is RoundPhase.RESOLVED


@dataclass(frozen=True, slots=True)
class PayoutTerms:
    """Multiplier and boosts locked in when the wager is accepted."""

    multiplier: Decimal
    boosts: tuple[Decimal, ...] = ()

    @classmethod
    def for_game(cls, game_type: GameType, context: TimeContext) -> "PayoutTerms":
        return cls(context.game_multiplier(game_type), context.payout_boosts)

    def pay(self, wager: int, *extra: Decimal | int) -> int:
        return compose_payout(wager, self.multiplier, *extra, boosts=self.boosts)


class GameEngine(ABC):
    """IDLE -> IN_PROGRESS -> RESOLVED; a resolved engine may start again."""

    game_type: ClassVar[GameType]

    def __init__(self, rng: Random) -> None:
        self._rng = rng
        self.phase = RoundPhase.IDLE
        self.wager = 0
        self._terms = PayoutTerms(Decimal(1))

    @property
    def in_progress(self) -> bool:
        return self.phase is RoundPhase.IN_PROGRESS

    def _open(self, ledger: PlayerLedger, wager: int, context: TimeContext) -> None:
        if self.in_progress:
            raise RoundInProgress(f"Finish the current {self.game_type.display_name} round first")
        ledger.place_wager(wager, self.game_type)
        self.phase = RoundPhase.IN_PROGRESS
        self.wager = wager
        self._terms = PayoutTerms.for_game(self.game_type, context)

    def _require_open(self) -> None:
        if not self.in_progress:
            raise NoRoundInProgress(f"No {self.game_type.display_name} round in progress")

    def _progress(self, narration: str, **details: Any) -> RoundReport:
        return RoundReport(
            game_type=self.game_type,
            phase=self.phase,
            wager=self.wager,
            narration=narration,
            details=details,
        )

    def _settle(
        self,
        ledger: PlayerLedger,
        payout: int,
        narration: str,
        *,
        now: datetime,
        **details: Any,
    ) -> RoundReport:
        entry = ledger.settle_round(self.game_type, payout, narration, now=now)
        self.phase = RoundPhase.RESOLVED
        return RoundReport(
            game_type=self.game_type,
            phase=self.phase,
            wager=self.wager,
            narration=narration,
            payout=payout,
            outcome=entry.outcome,
            entry=entry,
            details=details,
        )


def weighted_index(rng: Random, weights: Sequence[float]) -> int:
    total = sum(weights)
    if total <= 0:
        return min(int(rng.random() * len(weights)), len(weights) - 1)
    threshold = rng.random() * total
    cumulative = 0.0
    for idx, weight in enumerate(weights):
        cumulative += weight
        if threshold < cumulative:
            return idx
    return len(weights) - 1


def parse_choice(choice_type: type[ChoiceT], raw: Any) -> ChoiceT:
    try:
        return choice_type(raw.upper() if isinstance(raw, str) else raw)
    except ValueError as exc:
        options = ", ".join(member.value for member in choice_type)
        raise InvalidWager(f"Choose one of {options}, not {raw!r}") from exc
