"""Loguru sink configuration for the watcher process."""
from __future__ import annotations

import sys
from typing import Any

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "{extra[event]} {message} | {extra}"
)


def setup_logging(level: str = "INFO", fmt: str = "console", *, sink: Any = None) -> int:
    """Replace loguru's default handler with a single sink (stderr unless given).

    fmt="json" emits one serialized record per line (bound fields under
    record.extra); anything else renders the event name and bound fields.
    Returns the loguru handler id.
    """
    logger.remove()
    logger.configure(extra={"event": "-"})
    target = sink if sink is not None else sys.stderr
    if fmt.strip().lower() == "json":
        return logger.add(target, level=level.upper(), serialize=True)
    return logger.add(target, level=level.upper(), format=CONSOLE_FORMAT)
