"""Job key validation.

Keys become marker file names, so anything that could escape the pending
directory or is not a valid single path component is refused.
"""
from __future__ import annotations

from watcher.app.constants import MAX_JOB_KEY_LENGTH
from watcher.app.errors import InvalidJobKeyError

_FORBIDDEN_CHARACTERS = ("/", "\\", "\x00")
_RESERVED_NAMES = (".", "..")


def validate_job_key(key: str) -> str:
    if not isinstance(key, str) or not key:
        raise InvalidJobKeyError("job key must be a non-empty string")
    if len(key) > MAX_JOB_KEY_LENGTH:
        raise InvalidJobKeyError(f"job key longer than {MAX_JOB_KEY_LENGTH} characters")
    if key in _RESERVED_NAMES:
        raise InvalidJobKeyError(f"job key {key!r} is reserved")
    if any(ch in key for ch in _FORBIDDEN_CHARACTERS):
        raise InvalidJobKeyError(f"job key {key!r} contains a path separator or NUL")
    if not key.isprintable():
        raise InvalidJobKeyError(f"job key {key!r} contains a control character")
    return key


def is_valid_job_key(key: str) -> bool:
    try:
        validate_job_key(key)
    except InvalidJobKeyError:
        return False
    return True
