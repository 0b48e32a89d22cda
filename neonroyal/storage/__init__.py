"""Storage backends for Neon Royal."""

from .base import LedgerStore
from .json_file import JsonFileLedgerStore
from .memory import InMemoryLedgerStore
from .sqlalchemy import AsyncSQLAlchemyLedgerStore, AsyncSQLAlchemyStorage

__all__ = [
    "LedgerStore",
    "JsonFileLedgerStore",
    "InMemoryLedgerStore",
    "AsyncSQLAlchemyLedgerStore",
    "AsyncSQLAlchemyStorage",
]
