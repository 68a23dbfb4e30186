"""Domain models."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from watcher.app.constants import COMPLETION_THRESHOLD


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


@dataclass(frozen=True)
class TaskStatus:
    """Snapshot of one remote job as reported by its info endpoint (value object)."""

    code: int
    uuid: str = ""
    processing_time: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.code, int) or isinstance(self.code, bool):
            raise TypeError("status.code must be an int")
        if not isinstance(self.uuid, str):
            raise TypeError("uuid must be a str")
        if not isinstance(self.processing_time, int):
            raise TypeError("processingTime must be an int")

    @property
    def is_complete(self) -> bool:
        return self.code > COMPLETION_THRESHOLD

    @staticmethod
    def from_payload(payload: Any) -> "TaskStatus":
        """Parse a job-info body.

        Only `status.code` is required; `uuid` and `processingTime` fall back to
        empty values. Unknown fields are dropped.
        """
        if not isinstance(payload, dict):
            raise ValueError("task info must be a JSON object")
        status = payload.get("status")
        code = _as_int(status.get("code")) if isinstance(status, dict) else None
        if code is None:
            raise ValueError("task info missing numeric status.code")

        uuid = payload.get("uuid")
        processing_time = _as_int(payload.get("processingTime"))
        return TaskStatus(
            code=code,
            uuid=uuid if isinstance(uuid, str) else "",
            processing_time=processing_time if processing_time is not None else 0,
        )

    def to_payload(self) -> dict[str, Any]:
        """Webhook body, in the same shape the job-info endpoint uses."""
        return {
            "status": {"code": int(self.code)},
            "uuid": self.uuid,
            "processingTime": int(self.processing_time),
        }
