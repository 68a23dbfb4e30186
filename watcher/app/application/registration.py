"""
Accepts a job key plus the WatchSet and supervisor; returns an outcome.
Router translates outcome to HTTP status codes and content.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger

from watcher.app.application.supervisor import WatchSupervisor
from watcher.app.core import SERVICE_NAME
from watcher.app.domain.job_key import validate_job_key
from watcher.app.errors import InvalidJobKeyError, PersistenceError
from watcher.app.ports.watch_set import WatchSet


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


@dataclass(frozen=True)
class RegistrationOutcome:
    """Result of register_watch.
    success=True => marker written and a watch task started.
    success=False => error set; invalid_key tells a bad key apart from a storage failure.
    """
    success: bool
    key: str
    error: str | None = None
    invalid_key: bool = False


async def register_watch(
    key: str,
    watch_set: WatchSet,
    supervisor: WatchSupervisor,
) -> RegistrationOutcome:
    """
    Persist a marker for key, then start watching it in the background.
    No task is started when the marker cannot be written.
    """
    try:
        validate_job_key(key)
    except InvalidJobKeyError as e:
        return RegistrationOutcome(success=False, key=key, error=str(e), invalid_key=True)

    _log("registering_key", key=key)
    try:
        await watch_set.mark_watching(key)
    except PersistenceError as e:
        return RegistrationOutcome(success=False, key=key, error=str(e))

    supervisor.start(key)
    return RegistrationOutcome(success=True, key=key)
