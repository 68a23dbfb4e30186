from __future__ import annotations

import asyncio
from typing import Any, Protocol

from loguru import logger

from watcher.app.constants import WatchState
from watcher.app.core import SERVICE_NAME
from watcher.app.core.retry import Sleep, fixed_interval
from watcher.app.domain.models import TaskStatus
from watcher.app.errors import DeliveryError, PersistenceError, PollError
from watcher.app.ports.watch_set import WatchSet


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _warn(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


class Poller(Protocol):
    async def fetch_status(self, key: str) -> TaskStatus: ...


class Notifier(Protocol):
    def serialize(self, status: TaskStatus) -> bytes: ...

    async def deliver(self, body: bytes) -> None: ...


class WatchTask:
    """
    Watches one job key: POLLING -> COMPLETED -> NOTIFYING -> DONE.

    Every poll is preceded by a sleep of poll_interval_seconds. Poll errors and
    incomplete statuses keep the task in POLLING forever. Once a status with
    code > 20 is seen, the snapshot is serialized exactly once and delivered
    until the webhook accepts it, sleeping the same interval between attempts
    and never polling again. Finally the key's marker is cleared; a failure to
    clear is logged and the task ends regardless (the stray marker is picked up
    again on the next start).
    """

    def __init__(
        self,
        key: str,
        *,
        poller: Poller,
        notifier: Notifier,
        watch_set: WatchSet,
        poll_interval_seconds: float,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._key = key
        self._poller = poller
        self._notifier = notifier
        self._watch_set = watch_set
        self._interval = float(poll_interval_seconds)
        self._sleep = sleep

        self.state = WatchState.POLLING
        self.poll_attempts = 0
        self.delivery_attempts = 0
        self.final_status: TaskStatus | None = None

    @property
    def key(self) -> str:
        return self._key

    async def run(self) -> TaskStatus:
        _log("watch_started", key=self._key)
        status = await self._poll_until_complete()

        self.final_status = status
        self.state = WatchState.COMPLETED
        _log("job_completed", key=self._key, code=status.code, processing_time=status.processing_time)

        body = self._notifier.serialize(status)
        self.state = WatchState.NOTIFYING
        await self._deliver_until_accepted(body)

        self.state = WatchState.DONE
        await self._clear_marker()
        _log("watch_done", key=self._key, polls=self.poll_attempts, deliveries=self.delivery_attempts)
        return status

    async def _poll_until_complete(self) -> TaskStatus:
        async for attempt in fixed_interval(self._interval, sleep=self._sleep):
            self.poll_attempts = attempt
            try:
                status = await self._poller.fetch_status(self._key)
            except PollError as exc:
                _warn("poll_failed", key=self._key, attempt=attempt, error=str(exc))
                continue
            if status.is_complete:
                return status
            logger.debug(f"Job {self._key} still running (code {status.code}, attempt {attempt})")
        # unreachable: fixed_interval yields forever
        raise RuntimeError("poll loop ended without a completed status")

    async def _deliver_until_accepted(self, body: bytes) -> None:
        async for attempt in fixed_interval(self._interval, sleep=self._sleep, delay_first=False):
            self.delivery_attempts = attempt
            try:
                await self._notifier.deliver(body)
            except DeliveryError as exc:
                _warn("webhook_delivery_failed", key=self._key, attempt=attempt, error=str(exc))
                continue
            _log("webhook_delivered", key=self._key, attempt=attempt)
            return

    async def _clear_marker(self) -> None:
        try:
            await self._watch_set.clear_watching(self._key)
        except PersistenceError as exc:
            _warn("marker_clear_failed", key=self._key, error=str(exc))
