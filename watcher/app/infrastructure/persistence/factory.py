"""Watch set factory: selects the persistence adapter from configuration."""
from __future__ import annotations

from watcher.app.config.settings import Settings
from watcher.app.constants import WatchSetBackend
from watcher.app.infrastructure.persistence.filesystem.directory_watch_set import DirectoryWatchSet
from watcher.app.infrastructure.persistence.inmemory.in_memory_watch_set import InMemoryWatchSet
from watcher.app.ports.watch_set import WatchSet


def create_watch_set(settings: Settings) -> WatchSet:
    backend = settings.watch_set_backend.strip().lower()

    if backend == WatchSetBackend.FILESYSTEM:
        return DirectoryWatchSet(settings.pending_dir)

    if backend == WatchSetBackend.INMEMORY:
        return InMemoryWatchSet()

    raise ValueError(f"Unsupported watch set backend: {backend}")
