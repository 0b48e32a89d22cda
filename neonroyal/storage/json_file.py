"""Single-file JSON backend: the local device profile."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping

from ..domain.exceptions import CorruptPersistedState
from .base import LedgerStore

logger = logging.getLogger(__name__)


class JsonFileLedgerStore(LedgerStore):
    """Keeps every profile snapshot in one JSON document keyed by profile id."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def load(self, profile_id: str) -> Mapping[str, Any] | None:
        async with self._lock:
            document = await asyncio.to_thread(self._read)
        return document.get(profile_id)

    async def save(self, profile_id: str, snapshot: Mapping[str, Any]) -> None:
        async with self._lock:
            try:
                document = await asyncio.to_thread(self._read)
            except CorruptPersistedState:
                logger.warning("Overwriting unreadable profile file %s", self._path)
                document = {}
            document[profile_id] = dict(snapshot)
            await asyncio.to_thread(self._write, document)

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CorruptPersistedState(f"Cannot read {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise CorruptPersistedState(f"{self._path} must contain a JSON object")
        return data

    def _write(self, document: Mapping[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)
