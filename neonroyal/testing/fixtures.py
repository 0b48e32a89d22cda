"""Pytest fixtures for Neon Royal."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ..app import CasinoApp
from ..config import BonusConfig, NeonRoyalConfig
from .doubles import FixedClock, ScriptedRandom

# A Monday at noon: no golden hour, no global multiplier, base tables.
QUIET_MONDAY = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def memory_app() -> CasinoApp:
    return app_fixture()


def app_fixture(
    *,
    now: datetime = QUIET_MONDAY,
    rng: ScriptedRandom | None = None,
    **kwargs,
) -> CasinoApp:
    """Helper for ad-hoc tests where pytest is not available."""
    kwargs.setdefault("bonus", BonusConfig(timezone="UTC"))
    config = NeonRoyalConfig(bot_token="test", **kwargs)
    return CasinoApp(config, clock=FixedClock(now), rng=rng or ScriptedRandom())
