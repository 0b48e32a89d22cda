"""Simplified hold'em: high card only, revealed street by street."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from random import Random

from ..bonuses import TimeContext
from ..cards import Card, draw_high_card, format_hand, max_rank
from ..ledger import GameType, PlayerLedger
from .base import GameEngine, RoundReport


class Street(str, Enum):
    HOLE = "HOLE"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"


# Cards revealed when leaving each street.
_REVEALS = {
    Street.HOLE: (3, Street.FLOP),
    Street.FLOP: (1, Street.TURN),
    Street.TURN: (1, Street.RIVER),
}


class HoldemEngine(GameEngine):
    game_type = GameType.TEXAS_HOLDEM

    def __init__(self, rng: Random) -> None:
        super().__init__(rng)
        self.street: Street | None = None
        self.player_hand: list[Card] = []
        self.dealer_hand: list[Card] = []
        self.community: list[Card] = []

    def deal(
        self, ledger: PlayerLedger, wager: int, *, context: TimeContext, now: datetime
    ) -> RoundReport:
        self._open(ledger, wager, context)
        self.player_hand = [self._draw(), self._draw()]
        self.dealer_hand = [self._draw(), self._draw()]
        self.community = []
        self.street = Street.HOLE
        return self._progress("Hole cards are out. Reveal the flop?", **self._table())

    def advance(self, ledger: PlayerLedger, *, now: datetime) -> RoundReport:
        self._require_open()
        if self.street is Street.RIVER:
            return self._showdown(ledger, now=now)
        count, nxt = _REVEALS[self.street]
        self.community.extend(self._draw() for _ in range(count))
        self.street = nxt
        prompt = "Go to showdown?" if nxt is Street.RIVER else "Next card?"
        narration = f"{nxt.value.title()}: {format_hand(self.community)}. {prompt}"
        return self._progress(narration, **self._table())

    def _showdown(self, ledger: PlayerLedger, *, now: datetime) -> RoundReport:
        self.street = Street.SHOWDOWN
        player = max_rank(self.player_hand + self.community)
        dealer = max_rank(self.dealer_hand + self.community)
        if player > dealer:
            payout = self._terms.pay(self.wager)
            narration = f"Player wins with High Card {player}! Payout: ${payout}"
        elif player < dealer:
            payout = 0
            narration = f"Dealer wins with High Card {dealer}. Better luck next time."
        else:
            payout = self.wager
            narration = "It's a push! Tie on high card."
        return self._settle(
            ledger,
            payout,
            narration,
            now=now,
            player_high=player,
            dealer_high=dealer,
            **self._table(reveal=True),
        )

    def _draw(self) -> Card:
        return draw_high_card(self._rng)

    def _table(self, *, reveal: bool = False) -> dict:
        return {
            "street": self.street.value,
            "player_hand": format_hand(self.player_hand),
            "dealer_hand": format_hand(self.dealer_hand) if reveal else "🂠 🂠",
            "community": format_hand(self.community),
        }
