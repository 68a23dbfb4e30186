from __future__ import annotations

import pytest

from watcher.app.config.settings import load_settings
from watcher.app.errors import ConfigurationError

REQUIRED = {
    "REMOTE_URL": "http://localhost:3000/task/%s/info",
    "WEBHOOK_URL": "http://localhost:5000/webhook",
    "POLL_INTERVAL": "5",
}


@pytest.fixture()
def env(monkeypatch):
    for name in (
        "PORT",
        "HOST",
        "PENDING_DIR",
        "WATCH_SET_BACKEND",
        "ALLOW_DUPLICATE_WATCHES",
        "LOG_LEVEL",
        "LOG_FORMAT",
        *REQUIRED,
    ):
        monkeypatch.delenv(name, raising=False)
    for name, value in REQUIRED.items():
        monkeypatch.setenv(name, value)
    return monkeypatch


def test_reads_required_values_and_defaults(env):
    settings = load_settings()
    assert settings.remote_url == REQUIRED["REMOTE_URL"]
    assert settings.webhook_url == REQUIRED["WEBHOOK_URL"]
    assert settings.poll_interval_seconds == 5
    assert settings.port == 8080
    assert settings.pending_dir == "pending"
    assert settings.allow_duplicate_watches is True
    assert settings.http_connect_timeout_seconds > 0
    assert settings.http_read_timeout_seconds > 0


def test_port_override(env):
    env.setenv("PORT", "9090")
    assert load_settings().port == 9090


@pytest.mark.parametrize("missing", sorted(REQUIRED))
def test_missing_required_value_is_configuration_error(env, missing):
    env.delenv(missing)
    with pytest.raises(ConfigurationError, match=missing):
        load_settings()


def test_non_numeric_poll_interval_is_configuration_error(env):
    env.setenv("POLL_INTERVAL", "soon")
    with pytest.raises(ConfigurationError, match="POLL_INTERVAL"):
        load_settings()


def test_fractional_poll_interval_is_configuration_error(env):
    env.setenv("POLL_INTERVAL", "2.5")
    with pytest.raises(ConfigurationError):
        load_settings()


def test_remote_url_without_placeholder_is_configuration_error(env):
    env.setenv("REMOTE_URL", "http://localhost:3000/task/info")
    with pytest.raises(ConfigurationError, match="placeholder"):
        load_settings()


def test_settings_are_immutable(env):
    settings = load_settings()
    with pytest.raises(Exception):
        settings.poll_interval_seconds = 10


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("WATCH_SET_BACKEND", "mongo"),
        ("LOG_LEVEL", "loud"),
        ("LOG_FORMAT", "xml"),
    ],
)
def test_unknown_choice_is_configuration_error(env, name, value):
    env.setenv(name, value)
    with pytest.raises(ConfigurationError, match=name):
        load_settings()


def test_choices_are_case_insensitive(env):
    env.setenv("WATCH_SET_BACKEND", " InMemory ")
    env.setenv("LOG_LEVEL", "debug")
    env.setenv("LOG_FORMAT", "JSON")
    settings = load_settings()
    assert settings.watch_set_backend == "inmemory"
    assert settings.log_level == "DEBUG"
    assert settings.log_format == "json"
