"""Call heads or tails."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from ..bonuses import TimeContext
from ..ledger import GameType, PlayerLedger
from .base import GameEngine, RoundReport, parse_choice


class CoinSide(str, Enum):
    HEADS = "HEADS"
    TAILS = "TAILS"


class CoinFlipEngine(GameEngine):
    game_type = GameType.COIN_FLIP

    def flip(
        self,
        ledger: PlayerLedger,
        wager: int,
        call: CoinSide,
        *,
        context: TimeContext,
        now: datetime,
    ) -> RoundReport:
        call = parse_choice(CoinSide, call)
        self._open(ledger, wager, context)
        landed = CoinSide.HEADS if self._rng.random() > 0.5 else CoinSide.TAILS

        if landed is call:
            payout = self._terms.pay(wager)
            narration = f"It's {landed.value}! You won ${payout}!"
        else:
            payout = 0
            narration = f"Hard luck. It landed on {landed.value}."
        return self._settle(
            ledger, payout, narration, now=now, call=call.value, landed=landed.value
        )
