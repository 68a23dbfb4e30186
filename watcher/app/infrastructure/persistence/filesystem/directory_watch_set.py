"""Filesystem watch set: one zero-byte marker file per watched key.

Layout: <directory>/<key>. Each operation touches a single file (or lists the
directory once) and relies on the filesystem for atomicity; no locks are taken.
Blocking calls run in a worker thread so the event loop keeps serving.
"""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from loguru import logger

from watcher.app.core import SERVICE_NAME
from watcher.app.errors import PersistenceError


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class DirectoryWatchSet:
    """WatchSet implementation backed by a directory of marker files."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def marker_path(self, key: str) -> Path:
        return self._directory / key

    async def mark_watching(self, key: str) -> None:
        await asyncio.to_thread(self._mark, key)

    async def clear_watching(self, key: str) -> None:
        await asyncio.to_thread(self._clear, key)

    async def list_watching(self) -> set[str]:
        return await asyncio.to_thread(self._list)

    def _mark(self, key: str) -> None:
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"cannot create watch directory {self._directory}: {exc}") from exc
        path = self.marker_path(key)
        try:
            path.touch(exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"cannot create marker {path}: {exc}") from exc

    def _clear(self, key: str) -> None:
        path = self.marker_path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            _log("marker_already_absent", key=key, path=str(path))
        except OSError as exc:
            raise PersistenceError(f"cannot delete marker {path}: {exc}") from exc

    def _list(self) -> set[str]:
        try:
            entries = list(self._directory.iterdir())
        except FileNotFoundError:
            return set()
        except OSError as exc:
            raise PersistenceError(f"cannot list watch directory {self._directory}: {exc}") from exc
        return {entry.name for entry in entries if entry.is_file()}
