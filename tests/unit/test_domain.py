import pytest

from watcher.app.domain.job_key import is_valid_job_key, validate_job_key
from watcher.app.domain.models import TaskStatus
from watcher.app.errors import InvalidJobKeyError


def test_completion_threshold():
    assert TaskStatus(code=20).is_complete is False
    assert TaskStatus(code=21).is_complete is True
    assert TaskStatus(code=40).is_complete is True


def test_from_payload_defaults_optional_fields():
    status = TaskStatus.from_payload({"status": {"code": 30}})
    assert status == TaskStatus(code=30, uuid="", processing_time=0)
    assert status.to_payload() == {"status": {"code": 30}, "uuid": "", "processingTime": 0}


def test_from_payload_drops_unknown_fields():
    status = TaskStatus.from_payload(
        {"status": {"code": 40}, "uuid": "u", "processingTime": 7.0, "progress": 100, "options": []}
    )
    assert status.to_payload() == {"status": {"code": 40}, "uuid": "u", "processingTime": 7}


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {},
        {"status": 25},
        {"status": {"code": "25"}},
        {"status": {"code": True}},
        {"status": {"code": 2.5}},
    ],
)
def test_from_payload_rejects_missing_or_non_numeric_code(payload):
    with pytest.raises(ValueError):
        TaskStatus.from_payload(payload)


@pytest.mark.parametrize("key", ["abc", "a17d795b-2829-4e67-ad82-1143e4262dfa", "job.1", "x" * 255])
def test_valid_job_keys(key):
    assert validate_job_key(key) == key
    assert is_valid_job_key(key)


@pytest.mark.parametrize("key", ["", ".", "..", "a/b", "a\\b", "a\x00b", "a\x01b", "tab\there", "x" * 256])
def test_invalid_job_keys(key):
    with pytest.raises(InvalidJobKeyError):
        validate_job_key(key)
    assert not is_valid_job_key(key)
