"""Domain models and rules."""

from .bonuses import BonusResolver, TimeContext, compose_payout
from .cards import Card, Suit
from .clock import Clock, SystemClock, Weekday
from .events import EventBus
from .ledger import GameType, HistoryEntry, Outcome, PlayerLedger
from .rewards import BonusClaim, RewardsCalendar
from .shop import ItemKind, ShopCatalog, ShopItem, default_catalog
from .exceptions import (
    AlreadyOwned,
    CorruptPersistedState,
    InsufficientFunds,
    InvalidWager,
    NeonRoyalError,
    NoRoundInProgress,
    NotEligible,
    NotOwned,
    RoundInProgress,
    TooSoon,
    UnknownItem,
)

__all__ = [
    "BonusResolver",
    "TimeContext",
    "compose_payout",
    "Card",
    "Suit",
    "Clock",
    "SystemClock",
    "Weekday",
    "EventBus",
    "GameType",
    "HistoryEntry",
    "Outcome",
    "PlayerLedger",
    "BonusClaim",
    "RewardsCalendar",
    "ItemKind",
    "ShopCatalog",
    "ShopItem",
    "default_catalog",
    "AlreadyOwned",
    "CorruptPersistedState",
    "InsufficientFunds",
    "InvalidWager",
    "NeonRoyalError",
    "NoRoundInProgress",
    "NotEligible",
    "NotOwned",
    "RoundInProgress",
    "TooSoon",
    "UnknownItem",
]
