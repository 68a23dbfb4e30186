"""Watcher composition root: build and lifecycle-manage concrete dependencies.

Composition may: import concrete classes, call factories, store interface types,
manage high-level lifecycle.
"""
from __future__ import annotations

from typing import Any

from loguru import logger

from watcher.app.application.recovery import recover_watches
from watcher.app.application.supervisor import WatchSupervisor
from watcher.app.application.watch_task import WatchTask
from watcher.app.config.settings import Settings
from watcher.app.core import SERVICE_NAME
from watcher.app.domain.status_poller import StatusPoller
from watcher.app.domain.webhook_notifier import WebhookNotifier
from watcher.app.infrastructure.http.factory import create_http_client
from watcher.app.infrastructure.persistence.factory import create_watch_set
from watcher.app.ports.http_client import AbstractHttpClient
from watcher.app.ports.watch_set import WatchSet


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class WatcherDependencies:
    """Holds wired watcher dependencies and their lifecycle."""

    def __init__(
        self,
        *,
        settings: Settings,
        http_client: AbstractHttpClient | None = None,
        watch_set: WatchSet | None = None,
    ) -> None:
        self._settings = settings
        self._http_client = http_client
        self._watch_set = watch_set
        self._poller: StatusPoller | None = None
        self._notifier: WebhookNotifier | None = None
        self._supervisor: WatchSupervisor | None = None
        self._recovered: list[str] | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def watch_set(self) -> WatchSet:
        if self._watch_set is None:
            raise RuntimeError("watch_set is not initialized")
        return self._watch_set

    @property
    def supervisor(self) -> WatchSupervisor:
        if self._supervisor is None:
            raise RuntimeError("supervisor is not initialized")
        return self._supervisor

    @property
    def recovered(self) -> bool:
        return self._recovered is not None

    def build_watch_task(self, key: str) -> WatchTask:
        if self._poller is None or self._notifier is None:
            raise RuntimeError("watcher dependencies are not connected")
        return WatchTask(
            key,
            poller=self._poller,
            notifier=self._notifier,
            watch_set=self.watch_set,
            poll_interval_seconds=self._settings.poll_interval_seconds,
        )

    async def connect(self) -> None:
        if self._http_client is None:
            self._http_client = create_http_client(self._settings)
        if self._watch_set is None:
            self._watch_set = create_watch_set(self._settings)

        self._poller = StatusPoller(
            self._http_client,
            self._settings.remote_url,
            connect_timeout_seconds=self._settings.http_connect_timeout_seconds,
            read_timeout_seconds=self._settings.http_read_timeout_seconds,
        )
        self._notifier = WebhookNotifier(
            self._http_client,
            self._settings.webhook_url,
            connect_timeout_seconds=self._settings.http_connect_timeout_seconds,
            read_timeout_seconds=self._settings.http_read_timeout_seconds,
        )
        self._supervisor = WatchSupervisor(
            self.build_watch_task,
            allow_duplicates=self._settings.allow_duplicate_watches,
        )
        _log("dependencies_connected", pending_dir=self._settings.pending_dir)

    async def recover(self) -> list[str]:
        self._recovered = await recover_watches(self.watch_set, self.supervisor)
        return list(self._recovered)

    async def close(self) -> None:
        if self._supervisor is not None:
            try:
                await self._supervisor.close()
            except Exception as exc:
                logger.warning("supervisor close failed: {}", exc)
            self._supervisor = None

        if self._http_client is not None:
            try:
                await self._http_client.close()
            except Exception as exc:
                logger.warning("http client close failed: {}", exc)
            self._http_client = None

        self._poller = None
        self._notifier = None
        self._recovered = None


def create_watcher_dependencies(settings: Settings) -> WatcherDependencies:
    return WatcherDependencies(settings=settings)
