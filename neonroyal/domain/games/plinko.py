"""Peg-drop game: a discrete random walk bucketed into multiplier slots."""

from __future__ import annotations

import math
from datetime import datetime
from decimal import Decimal

from ..bonuses import TimeContext
from ..ledger import GameType, PlayerLedger
from .base import GameEngine, RoundReport

ROWS = 8
START_X = 50
STEP = 5
MULTIPLIERS: tuple[Decimal, ...] = tuple(
    Decimal(m) for m in ("5", "2", "0.5", "0.2", "0.2", "0.5", "2", "5")
)


def bucket_index(final_x: float, slots: int = len(MULTIPLIERS)) -> int:
    normalized = (final_x - 30) / 40
    return max(0, min(slots - 1, math.floor(normalized * slots)))


class PlinkoEngine(GameEngine):
    game_type = GameType.PLINKO

    def drop(
        self, ledger: PlayerLedger, wager: int, *, context: TimeContext, now: datetime
    ) -> RoundReport:
        self._open(ledger, wager, context)
        x = START_X
        path = [(x, 0.0)]
        for row in range(1, ROWS + 1):
            x += STEP if self._rng.random() > 0.5 else -STEP
            path.append((x, row * 100 / (ROWS + 1)))

        index = bucket_index(x)
        multiplier = MULTIPLIERS[index]
        payout = self._terms.pay(wager, multiplier)
        narration = f"Ball landed in {multiplier}x slot! Won ${payout}."
        return self._settle(
            ledger,
            payout,
            narration,
            now=now,
            path=path,
            slot=index,
            multiplier=str(multiplier),
        )
