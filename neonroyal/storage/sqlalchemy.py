"""SQLAlchemy storage backend for Neon Royal."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .base import LedgerStore


class Base(DeclarativeBase):
    pass


class LedgerTable(Base):
    __tablename__ = "neonroyal_ledgers"

    profile_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    snapshot: Mapped[dict] = mapped_column(JSON)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class AsyncSQLAlchemyStorage:
    """Owns the async engine and hands out ledger stores."""

    def __init__(self, dsn: str, *, echo: bool = False) -> None:
        self._engine = create_async_engine(dsn, echo=echo, future=True)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)

    async def init_models(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    def ledger_store(self) -> "AsyncSQLAlchemyLedgerStore":
        return AsyncSQLAlchemyLedgerStore(self._session_factory)


class AsyncSQLAlchemyLedgerStore(LedgerStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def load(self, profile_id: str) -> Mapping[str, Any] | None:
        async with self._session_factory() as session:
            row = await session.get(LedgerTable, profile_id)
            if row is None:
                return None
            return row.snapshot

    async def save(self, profile_id: str, snapshot: Mapping[str, Any]) -> None:
        async with self._session_factory() as session:
            row = await session.get(LedgerTable, profile_id)
            now = datetime.now(timezone.utc)
            if row is None:
                session.add(
                    LedgerTable(profile_id=profile_id, snapshot=dict(snapshot), updated_at=now)
                )
            else:
                row.snapshot = dict(snapshot)
                row.updated_at = now
            await session.commit()
