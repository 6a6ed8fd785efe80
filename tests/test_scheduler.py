"""
Tests for automatic updates.

Most tests use long retentions so armed jobs never fire while the test runs;
the scheduled jobs are inspected through the APScheduler instance instead.
"""
import threading
from datetime import timedelta

import pytest

from simrail_api.cache import CacheKind, CacheOptions, CachePolicy, TimetableCachePolicy
from simrail_api.events import EventType, UpdateFailed
from simrail_api.exceptions import MissingAutoUpdateServerError


def _auto_update_flags(received):
    return [event.auto_update for event in received if event.type is EventType.AUTO_UPDATE_CHANGED]


@pytest.fixture
def slow_api(make_api, slow_options):
    api = make_api(slow_options)
    received = []
    api.events.subscribe(received.append)
    api.received = received
    return api


def test_start_without_server_raises(slow_api):
    with pytest.raises(MissingAutoUpdateServerError):
        slow_api.start_auto_updates()

    assert slow_api.auto_update is False
    assert slow_api.auto_updates.scheduler.get_jobs() == []
    assert slow_api.received == []


def test_start_arms_one_job_per_enabled_kind(slow_api):
    slow_api.start_auto_updates("en1")

    jobs = slow_api.auto_updates.scheduler.get_jobs()
    assert len(jobs) == 4
    assert all(job.trigger.interval == timedelta(seconds=600) for job in jobs)
    assert sorted(slow_api.auto_updates.active_kinds, key=lambda k: k.value) == sorted(
        CacheKind, key=lambda k: k.value
    )
    assert slow_api.auto_update is True
    assert slow_api.auto_update_server == "en1"
    assert _auto_update_flags(slow_api.received) == [True]


def test_job_interval_is_kind_retention(make_api):
    api = make_api(CacheOptions(
        active_servers=CachePolicy(retention=120),
        active_stations=CachePolicy(enabled=False),
        active_trains=CachePolicy(retention=300),
        timetable=TimetableCachePolicy(enabled=False),
    ))
    api.start_auto_updates("en1")

    intervals = sorted(job.trigger.interval for job in api.auto_updates.scheduler.get_jobs())
    assert intervals == [timedelta(seconds=120), timedelta(seconds=300)]
    assert sorted(k.value for k in api.auto_updates.active_kinds) == ["active_servers", "active_trains"]


def test_start_is_idempotent(slow_api):
    slow_api.start_auto_updates("en1")
    slow_api.start_auto_updates("en1")
    slow_api.auto_update = True

    assert len(slow_api.auto_updates.scheduler.get_jobs()) == 4
    assert _auto_update_flags(slow_api.received) == [True]


def test_start_with_every_kind_disabled_does_nothing(make_api):
    api = make_api(CacheOptions(
        active_servers=CachePolicy(enabled=False),
        active_stations=CachePolicy(enabled=False),
        active_trains=CachePolicy(enabled=False),
        timetable=TimetableCachePolicy(enabled=False),
    ))
    received = []
    api.events.subscribe(received.append)

    api.start_auto_updates("en1")

    assert api.auto_update is False
    assert received == []


def test_stop_removes_jobs_and_publishes_once(slow_api):
    slow_api.start_auto_updates("en1")
    slow_api.stop_auto_updates()
    slow_api.stop_auto_updates()

    assert slow_api.auto_update is False
    assert slow_api.auto_updates.scheduler.get_jobs() == []
    assert _auto_update_flags(slow_api.received) == [True, False]


def test_stop_when_stopped_is_silent(slow_api):
    slow_api.stop_auto_updates()
    slow_api.auto_update = False
    assert slow_api.received == []


def test_auto_update_property_uses_configured_server(slow_api):
    slow_api.auto_update_server = "de1"
    slow_api.auto_update = True

    assert slow_api.auto_update is True
    assert slow_api.auto_updates.server_code == "de1"

    slow_api.auto_update = False
    assert _auto_update_flags(slow_api.received) == [True, False]


def test_restart_after_stop(slow_api):
    slow_api.start_auto_updates("en1")
    slow_api.stop_auto_updates()
    slow_api.start_auto_updates()

    assert len(slow_api.auto_updates.scheduler.get_jobs()) == 4
    assert _auto_update_flags(slow_api.received) == [True, False, True]


def test_run_now_refreshes_through_accessor(slow_api, client):
    slow_api.auto_update_server = "en1"
    slow_api.get_active_trains("en1")

    assert slow_api.auto_updates.run_now(CacheKind.ACTIVE_TRAINS) is True

    assert client.count("get_active_trains") == 2
    trains_events = [e for e in slow_api.received if e.type is EventType.ACTIVE_TRAINS_UPDATED]
    assert len(trains_events) == 2


def test_run_now_servers_needs_no_server(slow_api, client):
    assert slow_api.auto_updates.run_now(CacheKind.ACTIVE_SERVERS) is True
    assert client.count("get_active_servers") == 1


def test_run_now_failure_publishes_update_failed(slow_api, client):
    slow_api.auto_update_server = "en1"
    cached = slow_api.get_timetable("en1")
    client.error = ConnectionError("down")

    assert slow_api.auto_updates.run_now(CacheKind.TIMETABLE) is False

    failed = [e for e in slow_api.received if isinstance(e, UpdateFailed)]
    assert len(failed) == 1
    assert failed[0].kind is CacheKind.TIMETABLE
    assert failed[0].error is client.error

    client.error = None
    assert slow_api.get_timetable("en1") == cached
    assert client.count("get_timetable") == 2


def test_run_now_without_server_publishes_update_failed(slow_api, client):
    assert slow_api.auto_updates.run_now(CacheKind.ACTIVE_STATIONS) is False

    failed = [e for e in slow_api.received if isinstance(e, UpdateFailed)]
    assert isinstance(failed[0].error, MissingAutoUpdateServerError)
    assert client.count("get_active_stations") == 0


def test_scheduled_tick_refreshes_cache(make_api, client):
    api = make_api(CacheOptions(
        active_servers=CachePolicy(enabled=False),
        active_stations=CachePolicy(enabled=False),
        active_trains=CachePolicy(retention=0.05),
        timetable=TimetableCachePolicy(enabled=False),
    ))
    ticked = threading.Event()
    api.events.subscribe(lambda event: ticked.set(), EventType.ACTIVE_TRAINS_UPDATED)

    api.start_auto_updates("en1")
    assert ticked.wait(timeout=5)
    api.stop_auto_updates()

    assert client.count("get_active_trains") >= 1
    assert all(call[0] == "get_active_trains" for call in client.calls)


def test_close_stops_auto_updates(slow_api):
    slow_api.start_auto_updates("en1")
    slow_api.close()

    assert slow_api.auto_update is False
    assert _auto_update_flags(slow_api.received) == [True, False]
