"""Watcher-level constants shared across modules."""
from __future__ import annotations

from enum import Enum

# Remote jobs report status codes above this value once they are finished.
COMPLETION_THRESHOLD = 20

DEFAULT_PENDING_DIR = "pending"
MAX_JOB_KEY_LENGTH = 255


class WatchState(str, Enum):
    POLLING = "POLLING"
    COMPLETED = "COMPLETED"
    NOTIFYING = "NOTIFYING"
    DONE = "DONE"


class WatchSetBackend:
    FILESYSTEM = "filesystem"
    INMEMORY = "inmemory"
