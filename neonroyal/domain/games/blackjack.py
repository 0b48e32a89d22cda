"""Blackjack against a dealer who stands on 17."""

from __future__ import annotations

from datetime import datetime
from random import Random
from typing import Any, Callable

from ..bonuses import TimeContext
from ..cards import Card, blackjack_deck, format_hand, hand_score
from ..ledger import GameType, PlayerLedger
from .base import GameEngine, RoundReport

DEALER_STANDS_ON = 17
BLACKJACK = 21

DeckFactory = Callable[[Random], list[Card]]


class BlackjackEngine(GameEngine):
    game_type = GameType.BLACKJACK

    def __init__(self, rng: Random, *, deck_factory: DeckFactory = blackjack_deck) -> None:
        super().__init__(rng)
        self._deck_factory = deck_factory
        self.deck: list[Card] = []
        self.player_hand: list[Card] = []
        self.dealer_hand: list[Card] = []

    def deal(
        self, ledger: PlayerLedger, wager: int, *, context: TimeContext, now: datetime
    ) -> RoundReport:
        self._open(ledger, wager, context)
        self.deck = self._deck_factory(self._rng)
        p1, d1, p2, d2 = (self.deck.pop() for _ in range(4))
        self.player_hand = [p1, p2]
        self.dealer_hand = [d1, d2]
        return self._progress("Hit or Stand?", **self._table())

    def hit(self, ledger: PlayerLedger, *, now: datetime) -> RoundReport:
        self._require_open()
        self.player_hand.append(self.deck.pop())
        if hand_score(self.player_hand) > BLACKJACK:
            return self._settle(
                ledger, 0, "Bust! Dealer takes the pot.", now=now, **self._table(reveal=True)
            )
        return self._progress("Hit or Stand?", **self._table())

    def stand(self, ledger: PlayerLedger, *, now: datetime) -> RoundReport:
        self._require_open()
        while hand_score(self.dealer_hand) < DEALER_STANDS_ON:
            self.dealer_hand.append(self.deck.pop())

        player = hand_score(self.player_hand)
        dealer = hand_score(self.dealer_hand)
        if dealer > BLACKJACK:
            payout, narration = self._terms.pay(self.wager), "Dealer busts! You win."
        elif player > dealer:
            payout, narration = self._terms.pay(self.wager), f"Win! {player} beats {dealer}."
        elif player < dealer:
            payout, narration = 0, f"Dealer wins with {dealer}."
        else:
            payout, narration = self.wager, "Draw. Bet returned."
        return self._settle(ledger, payout, narration, now=now, **self._table(reveal=True))

    def _table(self, *, reveal: bool = False) -> dict[str, Any]:
        hidden = self.in_progress and not reveal
        dealer_cards = self.dealer_hand[:1] if hidden else self.dealer_hand
        return {
            "player_hand": format_hand(self.player_hand),
            "player_score": hand_score(self.player_hand),
            "dealer_hand": format_hand(dealer_cards) + (" 🂠" if hidden else ""),
            "dealer_score": None if hidden else hand_score(self.dealer_hand),
        }
