"""Status poller: one GET against the remote job-info endpoint per call.

Uses the HTTP port (AbstractHttpClient); the client is built in the composition
root. Any failure (transport, timeout, non-2xx, unparsable body) is a PollError.
Retrying is the caller's job.
"""
from __future__ import annotations

from loguru import logger

from watcher.app.domain.models import TaskStatus
from watcher.app.errors import PollError
from watcher.app.ports.http_client import (
    AbstractHttpClient,
    HttpClientError,
    HttpClientTimeoutError,
    RequestTimeout,
)


def build_status_url(template: str, key: str) -> str:
    if "{key}" in template:
        return template.replace("{key}", key)
    return template.replace("%s", key, 1)


class StatusPoller:
    def __init__(
        self,
        client: AbstractHttpClient,
        url_template: str,
        connect_timeout_seconds: float,
        read_timeout_seconds: float,
    ) -> None:
        self._client = client
        self._url_template = url_template
        self._timeout = RequestTimeout(
            connect_seconds=connect_timeout_seconds,
            read_seconds=read_timeout_seconds,
        )

    def status_url(self, key: str) -> str:
        return build_status_url(self._url_template, key)

    async def fetch_status(self, key: str) -> TaskStatus:
        url = self.status_url(key)
        try:
            response = await self._client.get(url, timeout=self._timeout)
            response.raise_for_status()
        except HttpClientTimeoutError as exc:
            raise PollError(f"timeout polling {url}") from exc
        except HttpClientError as exc:
            raise PollError(str(exc)) from exc

        try:
            status = TaskStatus.from_payload(response.json())
        except ValueError as exc:
            # json.JSONDecodeError is a ValueError too
            raise PollError(f"malformed task info from {url}: {exc}") from exc

        logger.debug(f"Polled {url}: status code {status.code}, processing time {status.processing_time}")
        return status
