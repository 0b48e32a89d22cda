"""Three-reel slot machine with a weighted symbol table."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from random import Random
from typing import Sequence

from ..bonuses import TimeContext
from ..ledger import GameType, PlayerLedger
from .base import GameEngine, RoundReport, weighted_index


@dataclass(frozen=True, slots=True)
class SlotSymbol:
    char: str
    multiplier: int
    weight: float


SLOT_SYMBOLS: tuple[SlotSymbol, ...] = (
    SlotSymbol("🍒", 2, 30),
    SlotSymbol("🍋", 5, 25),
    SlotSymbol("🍇", 10, 20),
    SlotSymbol("🔔", 20, 12),
    SlotSymbol("💎", 50, 8),
    SlotSymbol("7️⃣", 100, 5),
)

PAIR_MULTIPLIER = Decimal("1.5")


class SlotsEngine(GameEngine):
    game_type = GameType.SLOTS

    def __init__(self, rng: Random, *, symbols: Sequence[SlotSymbol] = SLOT_SYMBOLS) -> None:
        super().__init__(rng)
        self._symbols = tuple(symbols)
        self._weights = [symbol.weight for symbol in self._symbols]

    def spin(
        self, ledger: PlayerLedger, wager: int, *, context: TimeContext, now: datetime
    ) -> RoundReport:
        self._open(ledger, wager, context)
        reels = tuple(self._symbols[weighted_index(self._rng, self._weights)] for _ in range(3))
        chars = [symbol.char for symbol in reels]
        first, second, third = reels

        if first == second == third:
            payout = self._terms.pay(wager, first.multiplier)
            narration = f"JACKPOT! Three {first.char} in a row for ${payout}!"
        elif first == second or second == third or first == third:
            payout = self._terms.pay(wager, PAIR_MULTIPLIER)
            narration = f"Matched two! Won ${payout}."
        else:
            payout = 0
            narration = "No luck this time."
        return self._settle(ledger, payout, narration, now=now, reels=chars)
