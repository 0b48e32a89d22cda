"""Player ledger: balance, open wager, bounded history and cosmetics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping
from uuid import uuid4

from .clock import as_utc
from .exceptions import (
    CorruptPersistedState,
    InsufficientFunds,
    InvalidWager,
    NoRoundInProgress,
    RoundInProgress,
)

if TYPE_CHECKING:
    from ..config import LedgerConfig


DEFAULT_THEME_ID = "theme_default"
SNAPSHOT_VERSION = 1


class GameType(str, Enum):
    SLOTS = "SLOTS"
    BLACKJACK = "BLACKJACK"
    ROULETTE = "ROULETTE"
    HI_LO = "HI_LO"
    COIN_FLIP = "COIN_FLIP"
    TEXAS_HOLDEM = "TEXAS_HOLDEM"
    PLINKO = "PLINKO"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class Outcome(str, Enum):
    WIN = "WIN"
    LOSS = "LOSS"
    PUSH = "PUSH"


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One resolved round. ``amount`` is the magnitude of the net change."""

    entry_id: str
    game_type: GameType
    amount: int
    outcome: Outcome
    timestamp: datetime

    @property
    def signed_amount(self) -> int:
        if self.outcome is Outcome.WIN:
            return self.amount
        if self.outcome is Outcome.LOSS:
            return -self.amount
        return 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.entry_id,
            "game": self.game_type.value,
            "amount": self.amount,
            "result": self.outcome.value,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HistoryEntry":
        amount = data["amount"]
        if not _is_int(amount) or amount < 0:
            raise ValueError(f"History amount must be a non-negative integer, got {amount!r}")
        return cls(
            entry_id=str(data["id"]),
            game_type=GameType(data["game"]),
            amount=amount,
            outcome=Outcome(data["result"]),
            timestamp=as_utc(datetime.fromisoformat(data["timestamp"])),
        )


def classify(wager: int, payout: int) -> Outcome:
    if payout > wager:
        return Outcome.WIN
    if payout == wager:
        return Outcome.PUSH
    return Outcome.LOSS


@dataclass(slots=True)
class PlayerLedger:
    """Mutable ledger owned by one session.

    ``open_stake`` and ``open_game`` are persisted so a stake debited for a
    round that never finished can be forfeited on the next load.
    ``last_event`` is transient.
    """

    balance: int
    current_bet: int
    history: list[HistoryEntry] = field(default_factory=list)
    owned_cosmetics: set[str] = field(default_factory=lambda: {DEFAULT_THEME_ID})
    equipped_theme: str = DEFAULT_THEME_ID
    equipped_accessory: str = ""
    last_daily_claim: datetime | None = None
    last_weekly_claim: datetime | None = None
    history_limit: int = 50
    open_stake: int | None = None
    open_game: GameType | None = None
    last_event: str = ""

    @classmethod
    def new(cls, config: "LedgerConfig") -> "PlayerLedger":
        return cls(
            balance=config.initial_balance,
            current_bet=config.default_bet,
            history_limit=config.history_limit,
        )

    @property
    def has_open_round(self) -> bool:
        return self.open_stake is not None

    def set_bet(self, amount: int) -> None:
        if amount <= 0:
            raise InvalidWager("Bet must be positive")
        if amount > self.balance:
            raise InsufficientFunds(amount, self.balance)
        self.current_bet = amount

    def place_wager(self, amount: int, game_type: GameType) -> None:
        """Debit the stake immediately; it stays at risk until settled."""
        if self.open_stake is not None:
            raise RoundInProgress(f"A {self.open_game.display_name} round is still open")
        if amount <= 0:
            raise InvalidWager("Wager must be positive")
        if amount > self.balance:
            raise InsufficientFunds(amount, self.balance)
        self.balance -= amount
        self.open_stake = amount
        self.open_game = game_type

    def settle_round(
        self,
        game_type: GameType,
        payout: int,
        narration: str,
        *,
        now: datetime,
    ) -> HistoryEntry:
        if self.open_stake is None or self.open_game is not game_type:
            raise NoRoundInProgress(f"No open {game_type.display_name} wager to settle")
        if payout < 0:
            raise ValueError("Payout cannot be negative")
        wager = self.open_stake
        self.balance += payout
        entry = HistoryEntry(
            entry_id=uuid4().hex[:12],
            game_type=game_type,
            amount=abs(payout - wager),
            outcome=classify(wager, payout),
            timestamp=as_utc(now),
        )
        self.history.insert(0, entry)
        del self.history[self.history_limit:]
        self.open_stake = None
        self.open_game = None
        self.last_event = narration
        return entry

    def forfeit_open_round(self, *, now: datetime) -> HistoryEntry | None:
        """Settle a round left open by a previous session as a loss."""
        if self.open_game is None:
            return None
        game_type = self.open_game
        return self.settle_round(
            game_type,
            0,
            f"Your unfinished {game_type.display_name} round was forfeited.",
            now=now,
        )

    def credit(self, amount: int) -> None:
        if amount < 0:
            raise ValueError("Cannot credit negative amount")
        self.balance += amount

    def debit(self, amount: int) -> None:
        if amount < 0:
            raise ValueError("Cannot debit negative amount")
        if amount > self.balance:
            raise InsufficientFunds(amount, self.balance)
        self.balance -= amount

    def to_snapshot(self) -> dict[str, Any]:
        return {
            "version": SNAPSHOT_VERSION,
            "balance": self.balance,
            "bet": self.current_bet,
            "history": [entry.to_dict() for entry in self.history],
            "owned_items": sorted(self.owned_cosmetics),
            "active_theme": self.equipped_theme,
            "active_accessory": self.equipped_accessory,
            "last_daily_claim": _iso(self.last_daily_claim),
            "last_weekly_claim": _iso(self.last_weekly_claim),
            "open_stake": self.open_stake,
            "open_game": self.open_game.value if self.open_game else None,
        }

    @classmethod
    def from_snapshot(cls, data: Any, *, history_limit: int = 50) -> "PlayerLedger":
        if not isinstance(data, Mapping):
            raise CorruptPersistedState("Ledger snapshot must be an object")
        try:
            balance = data["balance"]
            bet = data["bet"]
            if not _is_int(balance):
                raise ValueError(f"balance must be an integer, got {balance!r}")
            if not _is_int(bet) or bet <= 0:
                raise ValueError(f"bet must be a positive integer, got {bet!r}")
            raw_history = data.get("history", [])
            if not isinstance(raw_history, list):
                raise ValueError("history must be a list")
            history = [HistoryEntry.from_dict(item) for item in raw_history][:history_limit]
            owned_raw = data.get("owned_items", [])
            if not isinstance(owned_raw, list) or not all(isinstance(i, str) for i in owned_raw):
                raise ValueError("owned_items must be a list of strings")
            owned = set(owned_raw) | {DEFAULT_THEME_ID}
            theme = data.get("active_theme") or DEFAULT_THEME_ID
            accessory = data.get("active_accessory") or ""
            if theme not in owned:
                raise ValueError(f"Equipped theme '{theme}' is not owned")
            if accessory and accessory not in owned:
                raise ValueError(f"Equipped accessory '{accessory}' is not owned")
            open_stake = data.get("open_stake")
            open_game = data.get("open_game")
            if (open_stake is None) != (open_game is None):
                raise ValueError("open_stake and open_game must be set together")
            if open_stake is not None and (not _is_int(open_stake) or open_stake <= 0):
                raise ValueError(f"open_stake must be a positive integer, got {open_stake!r}")
            return cls(
                balance=balance,
                current_bet=bet,
                history=history,
                owned_cosmetics=owned,
                equipped_theme=str(theme),
                equipped_accessory=str(accessory),
                last_daily_claim=_parse_ts(data.get("last_daily_claim")),
                last_weekly_claim=_parse_ts(data.get("last_weekly_claim")),
                history_limit=history_limit,
                open_stake=open_stake,
                open_game=GameType(open_game) if open_game is not None else None,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise CorruptPersistedState(f"Invalid ledger snapshot: {exc}") from exc


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _iso(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment else None


def _parse_ts(raw: Any) -> datetime | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ValueError(f"timestamp must be an ISO string, got {raw!r}")
    return as_utc(datetime.fromisoformat(raw))
