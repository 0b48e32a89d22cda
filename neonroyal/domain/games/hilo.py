"""Guess whether the next card ranks higher or lower (ace high)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from random import Random

from ..bonuses import TimeContext
from ..cards import Card, draw_high_card
from ..ledger import GameType, PlayerLedger
from .base import GameEngine, RoundReport, parse_choice


class Guess(str, Enum):
    HI = "HI"
    LO = "LO"


def guess_wins(guess: Guess, base: Card, nxt: Card) -> bool:
    """Ties go to the player in both directions."""
    if guess is Guess.HI:
        return nxt.rank >= base.rank
    return nxt.rank <= base.rank


class HiLoEngine(GameEngine):
    game_type = GameType.HI_LO

    def __init__(self, rng: Random) -> None:
        super().__init__(rng)
        self.base_card: Card | None = None

    def start(
        self, ledger: PlayerLedger, wager: int, *, context: TimeContext, now: datetime
    ) -> RoundReport:
        self._open(ledger, wager, context)
        self.base_card = draw_high_card(self._rng)
        return self._progress(
            f"Base card is the {self.base_card.describe()}. HI or LO?",
            base_card=str(self.base_card),
        )

    def guess(self, ledger: PlayerLedger, guess: Guess, *, now: datetime) -> RoundReport:
        self._require_open()
        guess = parse_choice(Guess, guess)
        base = self.base_card
        nxt = draw_high_card(self._rng)

        if guess_wins(guess, base, nxt):
            payout = self._terms.pay(self.wager)
            narration = f"Correct! The {nxt.describe()} was {guess.value}. You won ${payout}!"
        else:
            payout = 0
            narration = f"Wrong! The {nxt.describe()} wasn't {guess.value}."
        return self._settle(
            ledger,
            payout,
            narration,
            now=now,
            base_card=str(base),
            next_card=str(nxt),
            guess=guess.value,
        )
