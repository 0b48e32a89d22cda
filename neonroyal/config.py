"""Configuration models for Neon Royal."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta, timezone as dt_timezone, tzinfo as TzInfo
from typing import Literal, Sequence
from zoneinfo import ZoneInfo

from .domain.clock import Weekday


StorageBackend = Literal["memory", "json", "sqlalchemy"]


@dataclass(slots=True)
class StorageConfig:
    """Configure where the player ledger snapshot is persisted."""

    backend: StorageBackend = "memory"
    path: str | None = None
    dsn: str | None = None
    echo_sql: bool = False

    def resolve_path(self) -> str:
        return self.path or "./neonroyal_profile.json"

    def resolve_dsn(self) -> str | None:
        if self.dsn:
            return self.dsn
        if self.backend == "sqlalchemy":
            return "sqlite+aiosqlite:///./neonroyal.db"
        return None


@dataclass(slots=True)
class LedgerConfig:
    """Defaults for a freshly created ledger."""

    initial_balance: int = 1000
    default_bet: int = 10
    history_limit: int = 50
    bet_options: Sequence[int] = (1, 10, 25, 50, 100, 500)


@dataclass(slots=True)
class RewardsConfig:
    """Daily and weekly bonus rules."""

    daily_base: int = 100
    daily_big_weekday: Weekday = Weekday.MONDAY
    daily_big_multiplier: int = 3
    daily_cooldown: timedelta = timedelta(hours=24)
    weekly_weekday: Weekday = Weekday.FRIDAY
    weekly_amount: int = 500
    weekly_cooldown: timedelta = timedelta(days=7)


@dataclass(slots=True)
class BonusConfig:
    """Time-of-day and cross-game payout modifiers."""

    golden_hour: int = 17
    golden_multiplier: float = 1.5
    graveyard_hours: tuple[int, int] = (0, 3)
    global_weekday: Weekday = Weekday.SATURDAY
    global_multiplier: float = 1.2
    timezone: str | None = None

    def tzinfo(self) -> TzInfo | None:
        """``None`` means the host's local time zone."""
        if not self.timezone:
            return None
        if self.timezone.upper() == "UTC":
            return dt_timezone.utc
        return ZoneInfo(self.timezone)


@dataclass(slots=True)
class NeonRoyalConfig:
    """Top-level configuration container."""

    bot_token: str = ""
    profile_id: str = "local"
    storage: StorageConfig = field(default_factory=StorageConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    rewards: RewardsConfig = field(default_factory=RewardsConfig)
    bonus: BonusConfig = field(default_factory=BonusConfig)
    rng_seed: int | None = None

    @classmethod
    def from_env(cls) -> "NeonRoyalConfig":
        """Create config from environment variables prefixed with NEONROYAL_."""
        prefix = "NEONROYAL_"
        storage = StorageConfig(
            backend=os.getenv(f"{prefix}STORAGE_BACKEND", "memory"),
            path=os.getenv(f"{prefix}STORAGE_PATH"),
            dsn=os.getenv(f"{prefix}STORAGE_DSN"),
            echo_sql=_flag(os.getenv(f"{prefix}STORAGE_ECHO_SQL", "false")),
        )
        if storage.backend not in ("memory", "json", "sqlalchemy"):
            raise ValueError(f"Unsupported NEONROYAL_STORAGE_BACKEND '{storage.backend}'")

        ledger = LedgerConfig(
            initial_balance=_int(prefix, "INITIAL_BALANCE", 1000),
            default_bet=_int(prefix, "DEFAULT_BET", 10),
            history_limit=_int(prefix, "HISTORY_LIMIT", 50),
        )

        rewards = RewardsConfig(
            daily_base=_int(prefix, "DAILY_BASE", 100),
            daily_big_weekday=Weekday.parse(os.getenv(f"{prefix}DAILY_BIG_WEEKDAY", "monday")),
            daily_big_multiplier=_int(prefix, "DAILY_BIG_MULTIPLIER", 3),
            weekly_weekday=Weekday.parse(os.getenv(f"{prefix}WEEKLY_WEEKDAY", "friday")),
            weekly_amount=_int(prefix, "WEEKLY_AMOUNT", 500),
        )

        bonus = BonusConfig(
            golden_hour=_int(prefix, "GOLDEN_HOUR", 17),
            golden_multiplier=float(os.getenv(f"{prefix}GOLDEN_MULTIPLIER", "1.5")),
            global_weekday=Weekday.parse(os.getenv(f"{prefix}GLOBAL_WEEKDAY", "saturday")),
            global_multiplier=float(os.getenv(f"{prefix}GLOBAL_MULTIPLIER", "1.2")),
            timezone=os.getenv(f"{prefix}TIMEZONE") or None,
        )

        return cls(
            bot_token=os.getenv(f"{prefix}BOT_TOKEN", ""),
            profile_id=os.getenv(f"{prefix}PROFILE_ID", "local") or "local",
            storage=storage,
            ledger=ledger,
            rewards=rewards,
            bonus=bonus,
            rng_seed=(
                int(os.getenv(f"{prefix}RNG_SEED")) if os.getenv(f"{prefix}RNG_SEED") else None
            ),
        )


def _flag(raw: str) -> bool:
    return raw.lower() in {"1", "true", "yes"}


def _int(prefix: str, name: str, default: int) -> int:
    raw = os.getenv(f"{prefix}{name}")
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{prefix}{name} must be an integer, got '{raw}'") from exc
