"""Playing cards and the two rank conventions used by the card games."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Iterable, Sequence


class Suit(str, Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    @property
    def symbol(self) -> str:
        return _SUIT_SYMBOLS[self]

    @property
    def is_red(self) -> bool:
        return self in (Suit.HEARTS, Suit.DIAMONDS)


_SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}

LABELS: tuple[str, ...] = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")

_HIGH_FACES = {"J": 11, "Q": 12, "K": 13, "A": 14}


@dataclass(frozen=True, slots=True)
class Card:
    """A card with a ruleset-dependent numeric rank."""

    suit: Suit
    label: str
    rank: int

    @property
    def is_ace(self) -> bool:
        return self.label == "A"

    def __str__(self) -> str:
        return f"{self.label}{self.suit.symbol}"

    def describe(self) -> str:
        return f"{self.label} of {self.suit.value}"


def blackjack_rank(label: str) -> int:
    """Ace counts 11 (reduced later), faces count 10."""
    if label == "A":
        return 11
    if label in ("J", "Q", "K"):
        return 10
    return int(label)


def high_rank(label: str) -> int:
    """Ace high: 2..10 face value, J=11, Q=12, K=13, A=14."""
    return _HIGH_FACES.get(label) or int(label)


def blackjack_card(suit: Suit, label: str) -> Card:
    return Card(suit=suit, label=label, rank=blackjack_rank(label))


def high_card(suit: Suit, label: str) -> Card:
    return Card(suit=suit, label=label, rank=high_rank(label))


def uniform_index(rng: Random, size: int) -> int:
    return min(int(rng.random() * size), size - 1)


def shuffle_in_place(cards: list[Card], rng: Random) -> None:
    """Fisher-Yates driven only by ``rng.random()`` so scripted sources work."""
    for idx in range(len(cards) - 1, 0, -1):
        swap = uniform_index(rng, idx + 1)
        cards[idx], cards[swap] = cards[swap], cards[idx]


def blackjack_deck(rng: Random) -> list[Card]:
    """Return a shuffled 52-card deck; cards are dealt with ``pop()``."""
    deck = [blackjack_card(suit, label) for suit in Suit for label in LABELS]
    shuffle_in_place(deck, rng)
    return deck


def draw_high_card(rng: Random) -> Card:
    """Draw suit and label independently, as from an endless shoe."""
    suits = list(Suit)
    suit = suits[uniform_index(rng, len(suits))]
    label = LABELS[uniform_index(rng, len(LABELS))]
    return high_card(suit, label)


def hand_score(hand: Iterable[Card]) -> int:
    """Blackjack total with soft-ace reduction."""
    cards = list(hand)
    score = sum(card.rank for card in cards)
    aces = sum(1 for card in cards if card.is_ace)
    while score > 21 and aces > 0:
        score -= 10
        aces -= 1
    return score


def max_rank(cards: Sequence[Card]) -> int:
    return max(card.rank for card in cards)


def format_hand(cards: Iterable[Card]) -> str:
    return " ".join(str(card) for card in cards)
