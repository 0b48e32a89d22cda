"""Single-number roulette on a European wheel."""

from __future__ import annotations

from datetime import datetime

from ..bonuses import TimeContext
from ..cards import uniform_index
from ..exceptions import InvalidWager
from ..ledger import GameType, PlayerLedger
from .base import GameEngine, RoundReport

# Wheel order, not numeric order; the index drives the wheel animation.
WHEEL: tuple[int, ...] = (
    0, 32, 15, 19, 4, 21, 2, 25, 17, 34, 6, 27, 13, 36, 11, 30, 8, 23, 10,
    5, 24, 16, 33, 1, 20, 14, 31, 9, 22, 18, 29, 7, 28, 12, 35, 3, 26,
)

RED_NUMBERS = frozenset({32, 19, 21, 25, 34, 27, 36, 30, 23, 5, 16, 1, 14, 9, 18, 7, 12, 3})


def pocket_colour(number: int) -> str:
    if number == 0:
        return "green"
    return "red" if number in RED_NUMBERS else "black"


class RouletteEngine(GameEngine):
    game_type = GameType.ROULETTE

    def spin(
        self,
        ledger: PlayerLedger,
        wager: int,
        number: int,
        *,
        context: TimeContext,
        now: datetime,
    ) -> RoundReport:
        if number not in WHEEL:
            raise InvalidWager(f"Pick a number between 0 and 36, not {number}")
        self._open(ledger, wager, context)
        index = uniform_index(self._rng, len(WHEEL))
        winning = WHEEL[index]
        colour = pocket_colour(winning)

        if winning == number:
            payout = self._terms.pay(wager)
            narration = f"UNBELIEVABLE! Number {winning} hit! You won ${payout}!"
        else:
            payout = 0
            narration = f"The ball landed on {winning} ({colour}). Hard luck."
        return self._settle(
            ledger,
            payout,
            narration,
            now=now,
            pick=number,
            winning_number=winning,
            winning_index=index,
            colour=colour,
        )
