"""
Tests for the command line watcher.
"""
import pytest

from simrail_api.__main__ import describe_event, main
from simrail_api.cache import CacheKind
from simrail_api.events import ActiveStationsUpdated, AutoUpdateChanged, UpdateFailed


def test_describe_event():
    assert describe_event(AutoUpdateChanged(api=None, auto_update=True)) == "auto-update started"
    assert describe_event(AutoUpdateChanged(api=None, auto_update=False)) == "auto-update stopped"
    assert describe_event(ActiveStationsUpdated(api=None, active_stations=[1, 2])) == "2 active stations"

    failed = UpdateFailed(api=None, kind=CacheKind.ACTIVE_TRAINS, error=ConnectionError("down"))
    assert describe_event(failed) == "update of active_trains failed: down"


def test_main_requires_server(monkeypatch):
    monkeypatch.setattr("simrail_api.__main__.settings.auto_update_server", None)
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 2
