from __future__ import annotations

import asyncio

import pytest

from tests.fakes import CapturingWatchSet, FakeNotifier, FakePoller, FakeSupervisor, RecordingSleep
from watcher.app.application.recovery import recover_watches
from watcher.app.application.supervisor import WatchSupervisor
from watcher.app.application.watch_task import WatchTask
from watcher.app.domain.models import TaskStatus


@pytest.mark.asyncio
async def test_recovery_starts_one_watch_per_marker_without_new_markers():
    watch_set = CapturingWatchSet({"a", "b", "c"})
    supervisor = FakeSupervisor()

    recovered = await recover_watches(watch_set, supervisor)  # type: ignore[arg-type]

    assert recovered == ["a", "b", "c"]
    assert supervisor.started == ["a", "b", "c"]
    assert watch_set.mark_calls == []
    assert watch_set.keys == {"a", "b", "c"}


@pytest.mark.asyncio
async def test_recovery_with_no_markers_starts_nothing():
    supervisor = FakeSupervisor()

    recovered = await recover_watches(CapturingWatchSet(), supervisor)  # type: ignore[arg-type]

    assert recovered == []
    assert supervisor.started == []


@pytest.mark.asyncio
async def test_recovery_listing_failure_is_not_fatal():
    supervisor = FakeSupervisor()

    recovered = await recover_watches(CapturingWatchSet({"a"}, fail_list=True), supervisor)  # type: ignore[arg-type]

    assert recovered == []
    assert supervisor.started == []


@pytest.mark.asyncio
async def test_recovery_skips_unusable_marker_names():
    supervisor = FakeSupervisor()

    recovered = await recover_watches(CapturingWatchSet({"ok", ".."}), supervisor)  # type: ignore[arg-type]

    assert recovered == ["ok"]
    assert supervisor.started == ["ok"]


@pytest.mark.asyncio
async def test_recovered_marker_is_polled_and_notified_without_reregistration():
    watch_set = CapturingWatchSet({"xyz"})
    poller = FakePoller([TaskStatus(code=10), TaskStatus(code=30, uuid="xyz")])
    notifier = FakeNotifier()

    def build(key: str) -> WatchTask:
        return WatchTask(
            key,
            poller=poller,
            notifier=notifier,
            watch_set=watch_set,
            poll_interval_seconds=1,
            sleep=RecordingSleep(),
        )

    supervisor = WatchSupervisor(build)
    await recover_watches(watch_set, supervisor)
    handles = supervisor.handles("xyz")
    assert len(handles) == 1

    await asyncio.wait_for(handles[0], timeout=5)

    assert poller.calls == ["xyz", "xyz"]
    assert len(notifier.delivered) == 1
    assert watch_set.mark_calls == []
    assert watch_set.keys == set()
