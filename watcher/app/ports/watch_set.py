"""Abstract interface for the durable watch set (port)."""
from __future__ import annotations

from typing import Protocol


class WatchSet(Protocol):
    """Port: records which job keys are being watched. Implementations live in infrastructure.

    All three operations raise PersistenceError on storage failures, except that
    clear_watching() tolerates a marker that is already gone and list_watching()
    returns an empty set when nothing was ever marked.
    """

    async def mark_watching(self, key: str) -> None: ...

    async def clear_watching(self, key: str) -> None: ...

    async def list_watching(self) -> set[str]: ...
