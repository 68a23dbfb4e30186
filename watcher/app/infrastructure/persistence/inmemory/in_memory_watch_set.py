"""In-memory watch set for tests and local mode.
Nothing survives a restart, so recovery finds no markers with this backend.
"""
from __future__ import annotations


class InMemoryWatchSet:
    def __init__(self, keys: set[str] | None = None) -> None:
        self.keys: set[str] = set(keys or ())

    async def mark_watching(self, key: str) -> None:
        self.keys.add(key)

    async def clear_watching(self, key: str) -> None:
        self.keys.discard(key)

    async def list_watching(self) -> set[str]:
        return set(self.keys)
