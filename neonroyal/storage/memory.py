"""In-memory storage backend for Neon Royal."""

from __future__ import annotations

import copy
from typing import Any, Mapping

from .base import LedgerStore


class InMemoryLedgerStore(LedgerStore):
    def __init__(self) -> None:
        self._snapshots: dict[str, Any] = {}

    async def load(self, profile_id: str) -> Mapping[str, Any] | None:
        snapshot = self._snapshots.get(profile_id)
        return copy.deepcopy(snapshot) if snapshot is not None else None

    async def save(self, profile_id: str, snapshot: Mapping[str, Any]) -> None:
        self._snapshots[profile_id] = copy.deepcopy(dict(snapshot))

    def put_raw(self, profile_id: str, payload: Any) -> None:
        """Store an arbitrary payload, e.g. to simulate a damaged profile."""
        self._snapshots[profile_id] = payload
