"""Exceptions raised by Neon Royal domain services."""


class NeonRoyalError(RuntimeError):
    """Base class for domain exceptions."""


class InsufficientFunds(NeonRoyalError):
    """Raised when a wager or purchase exceeds the balance."""

    def __init__(self, needed: int, balance: int) -> None:
        super().__init__(f"Insufficient funds: need {needed}, have {balance}")
        self.needed = needed
        self.balance = balance


class InvalidWager(NeonRoyalError):
    """Raised for non-positive wagers and picks outside the table."""


class RoundInProgress(NeonRoyalError):
    """Raised when a new round is requested before the open one resolves."""


class NoRoundInProgress(NeonRoyalError):
    """Raised when a mid-round action arrives without an open round."""


class TooSoon(NeonRoyalError):
    """Raised when a bonus is claimed before its cooldown expires."""

    def __init__(self, seconds_remaining: int) -> None:
        super().__init__(f"Cooldown active for {seconds_remaining} seconds")
        self.seconds_remaining = seconds_remaining


class NotEligible(NeonRoyalError):
    """Raised when a day-gated bonus is claimed on the wrong day or twice."""


class AlreadyOwned(NeonRoyalError):
    """Raised when purchasing a cosmetic the player already owns."""


class NotOwned(NeonRoyalError):
    """Raised when equipping a cosmetic the player does not own."""


class CorruptPersistedState(NeonRoyalError):
    """Raised when a stored ledger snapshot cannot be decoded."""


class UnknownItem(NeonRoyalError, KeyError):
    """Raised when a shop item id is not in the catalog."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Unknown item"
