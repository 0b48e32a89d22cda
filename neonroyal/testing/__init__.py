"""Testing utilities for Neon Royal."""

from .doubles import FixedClock, ScriptedRandom, bj_cards, draw_values, hi_cards, stacked_deck
from .factory import HistoryFactory, LedgerFactory
from .fixtures import QUIET_MONDAY, app_fixture, memory_app
from .test_client import TestClient

__all__ = [
    "FixedClock",
    "ScriptedRandom",
    "bj_cards",
    "draw_values",
    "hi_cards",
    "stacked_deck",
    "HistoryFactory",
    "LedgerFactory",
    "QUIET_MONDAY",
    "app_fixture",
    "memory_app",
    "TestClient",
]
