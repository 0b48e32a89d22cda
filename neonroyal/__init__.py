"""Neon Royal: virtual-credit casino ledger and rules engine."""

from .app import CasinoApp
from .config import NeonRoyalConfig
from .domain.ledger import GameType, PlayerLedger
from .service import CasinoService

__all__ = [
    "CasinoApp",
    "CasinoService",
    "GameType",
    "NeonRoyalConfig",
    "PlayerLedger",
]
