import pytest
from fastapi.testclient import TestClient

from tests.fakes import CapturingWatchSet, FakeSupervisor


def test_register_writes_marker_starts_watch_and_returns_ok(test_app):
    client = TestClient(test_app)
    r = client.post("/register/abc")
    assert r.status_code == 200
    assert r.text == "OK"
    assert test_app.state.watch_set.keys == {"abc"}
    assert test_app.state.supervisor.started == ["abc"]


@pytest.mark.parametrize("method", ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
def test_register_accepts_any_method(test_app, method):
    client = TestClient(test_app)
    r = client.request(method, "/register/abc")
    assert r.status_code == 200
    if method != "HEAD":
        assert r.text == "OK"
    assert test_app.state.watch_set.mark_calls == ["abc"]
    assert test_app.state.supervisor.started == ["abc"]


def test_register_persistence_failure_returns_500_and_starts_nothing(test_app):
    test_app.state.watch_set = CapturingWatchSet(fail_mark=True)
    client = TestClient(test_app)
    r = client.post("/register/abc")
    assert r.status_code == 500
    assert r.text == "ERROR"
    assert test_app.state.supervisor.started == []


def test_register_same_key_twice_starts_two_watches(test_app):
    client = TestClient(test_app)
    assert client.post("/register/abc").status_code == 200
    assert client.post("/register/abc").status_code == 200
    assert test_app.state.watch_set.mark_calls == ["abc", "abc"]
    assert test_app.state.supervisor.started == ["abc", "abc"]


def test_register_key_with_control_character_returns_400(test_app):
    client = TestClient(test_app)
    r = client.post("/register/a%01b")
    assert r.status_code == 400
    assert r.text == "ERROR"
    assert test_app.state.watch_set.mark_calls == []
    assert test_app.state.supervisor.started == []


def test_register_key_with_backslash_returns_400(test_app):
    client = TestClient(test_app)
    r = client.post("/register/a%5Cb")
    assert r.status_code == 400
    assert r.text == "ERROR"
    assert test_app.state.supervisor.started == []


def test_register_without_dependencies_returns_500(test_app):
    test_app.state.supervisor = None
    client = TestClient(test_app)
    r = client.post("/register/abc")
    assert r.status_code == 500


def test_register_nested_path_is_not_a_key(test_app):
    client = TestClient(test_app)
    r = client.post("/register/a/b")
    assert r.status_code == 404
    assert test_app.state.supervisor.started == []


def test_active_watches_lists_supervisor_keys(test_app):
    supervisor = FakeSupervisor()
    supervisor.started = ["b", "a", "a"]
    test_app.state.supervisor = supervisor
    client = TestClient(test_app)
    r = client.get("/watches")
    assert r.status_code == 200
    assert r.json() == {"count": 3, "keys": ["a", "b"], "allow_duplicates": True}
