"""Storage abstractions for the player ledger snapshot."""

from __future__ import annotations

from typing import Any, Mapping, Protocol


class LedgerStore(Protocol):
    """Persistence gateway: whole-snapshot get/set per profile.

    ``load`` returns ``None`` when nothing was saved yet and may raise
    :class:`~neonroyal.domain.exceptions.CorruptPersistedState` when the
    stored bytes cannot be decoded.
    """

    async def load(self, profile_id: str) -> Mapping[str, Any] | None:
        ...

    async def save(self, profile_id: str, snapshot: Mapping[str, Any]) -> None:
        ...
