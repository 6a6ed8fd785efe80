"""
Shared fixtures: an in-memory SimRail client and a controllable clock.
"""
import pytest

from simrail_api.api import SimRailApi, WithClient
from simrail_api.cache import CacheOptions, CachePolicy, TimetableCachePolicy
from simrail_api.models import Server, Station, TimetableEntry, Train


class FakeClock:
    """Clock returning a settable time in seconds."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeClient:
    """Client double that serves fixed records and records every call."""

    def __init__(self):
        self.servers = [
            Server(id="s1", server_code="en1", server_name="EN1 (English)", server_region="Europe"),
            Server(id="s2", server_code="de1", server_name="DE1 (Deutsch)", server_region="Europe"),
        ]
        self.stations = {
            "en1": [
                Station(id="st1", prefix="ŁA", name="Łazy"),
                Station(id="st2", prefix="KO", name="Katowice"),
            ],
            "de1": [
                Station(id="st3", prefix="KZ", name="Kozłów"),
            ],
        }
        self.trains = {
            "en1": [
                Train(id="t1", train_no_local="446004", train_name="PWJ", server_code="en1"),
                Train(id="t2", train_no_local="14100", train_name="EIJ", server_code="en1"),
            ],
            "de1": [
                Train(id="t3", train_no_local="40134", train_name="ROJ", server_code="de1"),
            ],
        }
        self.timetables = {
            "en1": [
                TimetableEntry(train_no_local="446004", train_name="PWJ", start_station="Jaworzno Szczakowa"),
                TimetableEntry(train_no_local="14100", train_name="EIJ", start_station="Warszawa Wschodnia"),
            ],
            "de1": [
                TimetableEntry(train_no_local="40134", train_name="ROJ", start_station="Katowice"),
            ],
        }
        self.calls = []
        self.error = None

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if self.error is not None:
            raise self.error

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    def get_active_servers(self):
        self._record("get_active_servers")
        return list(self.servers)

    def get_active_stations(self, server_code):
        self._record("get_active_stations", server_code)
        return list(self.stations.get(server_code, []))

    def get_active_trains(self, server_code):
        self._record("get_active_trains", server_code)
        return list(self.trains.get(server_code, []))

    def get_timetable(self, server_code):
        self._record("get_timetable", server_code)
        return list(self.timetables.get(server_code, []))

    def get_train_timetable(self, server_code, train_no_local):
        self._record("get_train_timetable", server_code, train_no_local)
        for entry in self.timetables.get(server_code, []):
            if entry.train_no_local == train_no_local:
                return entry
        raise LookupError(train_no_local)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def make_api(client, clock):
    """Factory for APIs over the fake client; closes them after the test."""
    created = []

    def _make(cache=None):
        api = SimRailApi(WithClient(client=client, cache=cache or CacheOptions()), clock=clock)
        created.append(api)
        return api

    yield _make
    for api in created:
        api.close()


@pytest.fixture
def api(make_api):
    return make_api()


@pytest.fixture
def slow_options():
    """Cache options with long retentions so scheduled jobs never fire mid-test."""
    return CacheOptions(
        active_servers=CachePolicy(retention=600),
        active_stations=CachePolicy(retention=600),
        active_trains=CachePolicy(retention=600),
        timetable=TimetableCachePolicy(retention=600),
    )


@pytest.fixture
def events(api):
    """Every event published by the default api fixture."""
    received = []
    api.events.subscribe(received.append)
    return received
