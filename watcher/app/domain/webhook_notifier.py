"""Webhook notifier: delivers a completed job's status to the downstream URL."""
from __future__ import annotations

import json

from watcher.app.domain.models import TaskStatus
from watcher.app.errors import DeliveryError
from watcher.app.ports.http_client import (
    AbstractHttpClient,
    HttpClientError,
    HttpClientTimeoutError,
    RequestTimeout,
)

JSON_HEADERS = {"Content-Type": "application/json"}


def serialize_status(status: TaskStatus) -> bytes:
    return json.dumps(status.to_payload(), separators=(",", ":")).encode()


class WebhookNotifier:
    """Serializes a TaskStatus once and POSTs the resulting body.

    serialize() is split from deliver() so a caller can retry delivery with the
    exact same bytes. A serialization failure is a bug and is not wrapped.
    """

    def __init__(
        self,
        client: AbstractHttpClient,
        webhook_url: str,
        connect_timeout_seconds: float,
        read_timeout_seconds: float,
    ) -> None:
        self._client = client
        self._webhook_url = webhook_url
        self._timeout = RequestTimeout(
            connect_seconds=connect_timeout_seconds,
            read_seconds=read_timeout_seconds,
        )

    @property
    def webhook_url(self) -> str:
        return self._webhook_url

    def serialize(self, status: TaskStatus) -> bytes:
        return serialize_status(status)

    async def deliver(self, body: bytes) -> None:
        try:
            response = await self._client.post(
                self._webhook_url,
                content=body,
                timeout=self._timeout,
                headers=dict(JSON_HEADERS),
            )
            response.raise_for_status()
        except HttpClientTimeoutError as exc:
            raise DeliveryError(f"timeout delivering webhook to {self._webhook_url}") from exc
        except HttpClientError as exc:
            raise DeliveryError(str(exc)) from exc
