"""Registry of running watch tasks.

Each started WatchTask gets an asyncio.Task handle recorded under its key and
removed again when the task finishes. Whether a second watch for a key that is
already being watched is started is an explicit policy (allow_duplicates).
"""
from __future__ import annotations

import asyncio
from typing import Any, Callable

from loguru import logger

from watcher.app.application.watch_task import WatchTask
from watcher.app.core import SERVICE_NAME

WatchTaskFactory = Callable[[str], WatchTask]


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class WatchSupervisor:
    def __init__(self, task_factory: WatchTaskFactory, *, allow_duplicates: bool = True) -> None:
        self._task_factory = task_factory
        self._allow_duplicates = allow_duplicates
        self._handles: dict[str, list[asyncio.Task[Any]]] = {}
        self._watches: dict[asyncio.Task[Any], WatchTask] = {}
        self._closing = False

    @property
    def allow_duplicates(self) -> bool:
        return self._allow_duplicates

    def start(self, key: str) -> asyncio.Task[Any]:
        """Start watching key and return the task handle.

        With allow_duplicates=False an existing handle for the key is returned
        instead of starting a second watch. Must be called from a running loop.
        """
        if self._closing:
            raise RuntimeError("supervisor is closed")

        existing = self._handles.get(key)
        if existing and not self._allow_duplicates:
            _log("watch_already_active", key=key)
            return existing[0]

        watch = self._task_factory(key)
        handle = asyncio.create_task(watch.run(), name=f"watch:{key}")
        self._handles.setdefault(key, []).append(handle)
        self._watches[handle] = watch
        handle.add_done_callback(lambda t: self._on_done(key, t))
        _log("watch_scheduled", key=key, active_for_key=len(self._handles[key]))
        return handle

    def _on_done(self, key: str, handle: asyncio.Task[Any]) -> None:
        self._watches.pop(handle, None)
        handles = self._handles.get(key)
        if handles is not None:
            if handle in handles:
                handles.remove(handle)
            if not handles:
                del self._handles[key]

        if handle.cancelled():
            _log("watch_cancelled", key=key)
            return
        exc = handle.exception()
        if exc is not None:
            logger.opt(exception=exc).bind(
                service_name=SERVICE_NAME, event="watch_crashed", key=key
            ).error("watch task for {} crashed", key)

    def is_watching(self, key: str) -> bool:
        return bool(self._handles.get(key))

    def active_keys(self) -> list[str]:
        return sorted(self._handles)

    def handles(self, key: str) -> list[asyncio.Task[Any]]:
        return list(self._handles.get(key, ()))

    def watches(self, key: str) -> list[WatchTask]:
        return [self._watches[h] for h in self._handles.get(key, ()) if h in self._watches]

    @property
    def active_count(self) -> int:
        return sum(len(handles) for handles in self._handles.values())

    async def close(self) -> None:
        """Cancel every running watch. Markers stay in place for the next start."""
        self._closing = True
        pending = [h for handles in self._handles.values() for h in handles]
        for handle in pending:
            handle.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        _log("supervisor_closed", cancelled=len(pending))
