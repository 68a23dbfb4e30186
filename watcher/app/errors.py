"""Error kinds raised across the watcher.

Adapters translate library errors (httpx, OSError, pydantic) into these so the
application layer never imports infrastructure exceptions.
"""
from __future__ import annotations


class WatcherError(Exception):
    """Base for all watcher errors."""


class ConfigurationError(WatcherError):
    """Required configuration is missing or invalid; the process must not start."""


class PersistenceError(WatcherError):
    """A watch marker could not be created, deleted or listed."""


class PollError(WatcherError):
    """A status poll failed (transport, timeout, bad status, malformed body)."""


class DeliveryError(WatcherError):
    """A webhook delivery attempt failed."""


class InvalidJobKeyError(WatcherError):
    """A job key cannot be used as a marker name."""
