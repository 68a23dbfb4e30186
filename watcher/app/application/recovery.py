"""Startup recovery: resume watching every key that still has a marker."""
from __future__ import annotations

from typing import Any

from loguru import logger

from watcher.app.application.supervisor import WatchSupervisor
from watcher.app.core import SERVICE_NAME
from watcher.app.domain.job_key import is_valid_job_key
from watcher.app.errors import PersistenceError
from watcher.app.ports.watch_set import WatchSet


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


async def recover_watches(watch_set: WatchSet, supervisor: WatchSupervisor) -> list[str]:
    """Start one watch per existing marker and return the recovered keys.

    Markers are not rewritten. A listing failure is logged and nothing is
    recovered; the service still starts.
    """
    try:
        keys = await watch_set.list_watching()
    except PersistenceError as e:
        logger.bind(service_name=SERVICE_NAME, event="recovery_failed", error=str(e)).error("")
        return []

    recovered: list[str] = []
    for key in sorted(keys):
        if not is_valid_job_key(key):
            _log("recovery_skipped_invalid_key", key=key)
            continue
        supervisor.start(key)
        recovered.append(key)

    _log("recovery_complete", recovered=recovered, count=len(recovered))
    return recovered
