"""Top level application object for Neon Royal."""

from __future__ import annotations

from random import Random
from typing import Any

from .config import NeonRoyalConfig
from .domain.bonuses import BonusResolver
from .domain.clock import Clock, SystemClock
from .domain.events import EventBus
from .domain.rewards import RewardsCalendar
from .domain.shop import ShopCatalog, default_catalog
from .service import CasinoService, EngineFactory, default_engines
from .storage.base import LedgerStore
from .storage.json_file import JsonFileLedgerStore
from .storage.memory import InMemoryLedgerStore
from .storage.sqlalchemy import AsyncSQLAlchemyStorage


class CasinoApp:
    """Central dependency container used by the bot, the CLI and tests."""

    def __init__(
        self,
        config: NeonRoyalConfig,
        *,
        store: LedgerStore | None = None,
        event_bus: EventBus | None = None,
        catalog: ShopCatalog | None = None,
        clock: Clock | None = None,
        rng: Random | None = None,
        engine_factory: EngineFactory = default_engines,
    ) -> None:
        self.config = config
        self.event_bus = event_bus or EventBus()
        self.catalog = catalog or default_catalog()
        self.clock = clock or SystemClock()
        self._rng = rng or (Random(config.rng_seed) if config.rng_seed is not None else Random())

        self._sqlalchemy_storage: AsyncSQLAlchemyStorage | None = None
        self.store = store or self._wire_storage()

        self.resolver = BonusResolver(config.bonus)
        self.rewards = RewardsCalendar(config.rewards)
        self.casino = CasinoService(
            self.store,
            ledger_config=config.ledger,
            resolver=self.resolver,
            rewards=self.rewards,
            catalog=self.catalog,
            event_bus=self.event_bus,
            clock=self.clock,
            rng=self._rng,
            engine_factory=engine_factory,
            default_profile=config.profile_id,
        )

    def _wire_storage(self) -> LedgerStore:
        backend = self.config.storage.backend
        if backend == "memory":
            return InMemoryLedgerStore()
        if backend == "json":
            return JsonFileLedgerStore(self.config.storage.resolve_path())
        if backend == "sqlalchemy":
            dsn = self.config.storage.resolve_dsn()
            if not dsn:
                raise ValueError("SQLAlchemy backend requires a DSN")
            storage = AsyncSQLAlchemyStorage(dsn, echo=self.config.storage.echo_sql)
            self._sqlalchemy_storage = storage
            return storage.ledger_store()
        raise ValueError(f"Unsupported storage backend {backend}")

    def snapshot(self) -> dict[str, Any]:
        """Export current configuration for debugging."""
        return {
            "storage": self.config.storage.backend,
            "profile": self.config.profile_id,
            "initial_balance": self.config.ledger.initial_balance,
            "history_limit": self.config.ledger.history_limit,
            "shop": [item.item_id for item in self.catalog.iter_items()],
            "golden_hour": self.config.bonus.golden_hour,
        }

    async def init_backend(self) -> None:
        """Initialize storage backend resources (e.g., database tables)."""
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.init_models()

    async def close(self) -> None:
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.dispose()
