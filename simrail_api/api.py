"""
Cached access to SimRail live data and timetables.

Each accessor consults its kind's cache policy, falls back to the remote
client on a miss, stale entry or bypass, and on a successful remote fetch
replaces the cache entry and publishes an update event.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from apscheduler.schedulers.base import BaseScheduler

from .api_client import Endpoints, SimRailClient, SimRailClientProtocol
from .cache import CacheKind, CacheManager, CacheOptions
from .events import (
    ActiveServersUpdated,
    ActiveStationsUpdated,
    ActiveTrainsUpdated,
    EventChannel,
    TimetableUpdated,
)
from .exceptions import (
    ServerNotFoundError,
    StationNotFoundError,
    TimetableTrainNotFoundError,
    TrainNotFoundError,
)
from .models import Server, Station, TimetableEntry, Train
from .scheduler import AutoUpdateScheduler
from .utils.helpers import station_code

logger = logging.getLogger("simrail.api")


# ===== CONFIGURATION =====

@dataclass
class WithEndpoints:
    """Build a SimRailClient for these endpoints."""
    endpoints: Endpoints = field(default_factory=Endpoints.from_settings)
    cache: CacheOptions = field(default_factory=CacheOptions)


@dataclass
class WithClient:
    """Use an existing (possibly shared) client."""
    client: SimRailClientProtocol
    cache: CacheOptions = field(default_factory=CacheOptions)


ApiConfig = Union[WithEndpoints, WithClient]


class SimRailApi:
    """
    Caching front for a SimRail client with optional automatic updates.

    Usage:
        api = SimRailApi()
        servers = api.get_active_servers()
        subscription = api.events.subscribe(print)
        api.start_auto_updates("en1")
    """

    def __init__(
        self,
        config: Optional[ApiConfig] = None,
        clock: Callable[[], float] = time.time,
        scheduler: Optional[BaseScheduler] = None,
    ):
        """
        Initialize the API.

        Args:
            config: Endpoints or client plus cache options; defaults to the
                endpoints from settings
            clock: Returns the current time in seconds (cache timestamps)
            scheduler: APScheduler instance for auto-update jobs
        """
        self.config = config if config is not None else WithEndpoints()
        self._owns_client = not isinstance(self.config, WithClient)
        if self._owns_client:
            self.client = SimRailClient(self.config.endpoints)
        else:
            self.client = self.config.client

        self.events = EventChannel()
        self._cache = CacheManager(
            clock=clock,
            legacy_freshness=self.cache_options.legacy_freshness,
        )
        self._auto_updates = AutoUpdateScheduler(self, scheduler=scheduler)

    @property
    def cache_options(self) -> CacheOptions:
        return self.config.cache

    # ===== FLUSHING =====

    def flush_active_server_cache(self) -> "SimRailApi":
        self._cache.flush(CacheKind.ACTIVE_SERVERS)
        return self

    def flush_active_station_cache(self) -> "SimRailApi":
        self._cache.flush(CacheKind.ACTIVE_STATIONS)
        return self

    def flush_active_train_cache(self) -> "SimRailApi":
        self._cache.flush(CacheKind.ACTIVE_TRAINS)
        return self

    def flush_timetable_cache(self) -> "SimRailApi":
        self._cache.flush(CacheKind.TIMETABLE)
        return self

    def flush_cache(self) -> "SimRailApi":
        """Flush cached records of every kind."""
        self._cache.flush()
        return self

    def cache_stats(self) -> Dict[str, Any]:
        return self._cache.get_stats()

    # ===== ACTIVE SERVERS =====

    def get_active_servers(self, no_cache: bool = False) -> List[Server]:
        """
        Get active multiplayer servers.

        Args:
            no_cache: Bypass the cache and fetch fresh data

        Returns:
            List of servers
        """
        cached = self._cached(CacheKind.ACTIVE_SERVERS, no_cache)
        if cached is not None:
            return cached

        active_servers = self.client.get_active_servers()
        if self.cache_options.is_enabled(CacheKind.ACTIVE_SERVERS):
            self._cache.store(
                CacheKind.ACTIVE_SERVERS,
                {server.server_code: server for server in active_servers},
            )
            self.events.publish(ActiveServersUpdated(api=self, active_servers=active_servers))
        return active_servers

    def get_active_server(self, server_code: str, no_cache: bool = False) -> Server:
        """
        Get a single active server.

        Raises:
            ServerNotFoundError: No active server has this code
        """
        for server in self.get_active_servers(no_cache):
            if server.server_code == server_code:
                return server
        raise ServerNotFoundError(server_code)

    # ===== ACTIVE STATIONS =====

    def get_active_stations(self, server_code: str, no_cache: bool = False) -> List[Station]:
        """
        Get active dispatch stations of a server.

        Each returned station carries ``code``: its prefix without diacritics.

        Args:
            server_code: The multiplayer server
            no_cache: Bypass the cache and fetch fresh data

        Returns:
            List of stations
        """
        cached = self._cached(CacheKind.ACTIVE_STATIONS, no_cache, server_code)
        if cached is not None:
            return cached

        active_stations = [
            station.model_copy(update={"code": station_code(station.prefix)})
            for station in self.client.get_active_stations(server_code)
        ]
        if self.cache_options.is_enabled(CacheKind.ACTIVE_STATIONS):
            self._cache.store(
                CacheKind.ACTIVE_STATIONS,
                {station.code: station for station in active_stations},
                server_code=server_code,
            )
            self.events.publish(ActiveStationsUpdated(api=self, active_stations=active_stations))
        return active_stations

    def get_active_station(self, server_code: str, code: str, no_cache: bool = False) -> Station:
        """
        Get a single active dispatch station.

        ``code`` may be either the station prefix or its diacritic-free code,
        e.g. prefix "ŁA" and code "LA" find the same station.

        Raises:
            StationNotFoundError: No active station matches
        """
        wanted = station_code(code)
        for station in self.get_active_stations(server_code, no_cache):
            if station_code(station.prefix) == wanted:
                return station
        raise StationNotFoundError(code)

    # ===== ACTIVE TRAINS =====

    def get_active_trains(self, server_code: str, no_cache: bool = False) -> List[Train]:
        """
        Get active trains of a server.

        Args:
            server_code: The multiplayer server
            no_cache: Bypass the cache and fetch fresh data

        Returns:
            List of trains
        """
        cached = self._cached(CacheKind.ACTIVE_TRAINS, no_cache, server_code)
        if cached is not None:
            return cached

        active_trains = self.client.get_active_trains(server_code)
        if self.cache_options.is_enabled(CacheKind.ACTIVE_TRAINS):
            self._cache.store(
                CacheKind.ACTIVE_TRAINS,
                {train.train_no_local: train for train in active_trains},
                server_code=server_code,
            )
            self.events.publish(ActiveTrainsUpdated(api=self, active_trains=active_trains))
        return active_trains

    def get_active_train(self, server_code: str, train_no_local: str, no_cache: bool = False) -> Train:
        """
        Get a single active train by its national number.

        Raises:
            TrainNotFoundError: No active train has this number
        """
        for train in self.get_active_trains(server_code, no_cache):
            if train.train_no_local == train_no_local:
                return train
        raise TrainNotFoundError(train_no_local)

    # ===== TIMETABLE =====

    def get_timetable(self, server_code: str, no_cache: bool = False) -> List[TimetableEntry]:
        """
        Get the timetables of every train on a server.

        With ``single_record_only`` (the default) caching a server's timetable
        evicts any other server's cached timetable.
        """
        cached = self._cached(CacheKind.TIMETABLE, no_cache, server_code)
        if cached is not None:
            return cached

        timetable = self.client.get_timetable(server_code)
        policy = self.cache_options.timetable
        if policy.enabled:
            self._cache.store(
                CacheKind.TIMETABLE,
                {entry.train_no_local: entry for entry in timetable},
                server_code=server_code,
                single_record_only=policy.single_record_only,
            )
            self.events.publish(TimetableUpdated(api=self, timetable=timetable))
        return timetable

    def get_train_timetable(
        self,
        server_code: str,
        train_no_local: str,
        no_cache: bool = False,
    ) -> TimetableEntry:
        """
        Get the timetable of a single train.

        A fresh cached server timetable answers directly, and a train missing
        from it is reported without a remote call. Otherwise only this train's
        timetable is fetched; the cache is left untouched.

        Raises:
            TimetableTrainNotFoundError: The fresh cached timetable has no such train
        """
        entry = self._fresh_entry(CacheKind.TIMETABLE, no_cache, server_code)
        if entry is not None:
            timetable = entry.records.get(train_no_local)
            if timetable is None:
                raise TimetableTrainNotFoundError(train_no_local)
            return timetable
        return self.client.get_train_timetable(server_code, train_no_local)

    # ===== AUTO UPDATES =====

    @property
    def auto_update_server(self) -> Optional[str]:
        """Server code used by auto-updates for per-server kinds."""
        return self._auto_updates.server_code

    @auto_update_server.setter
    def auto_update_server(self, server_code: Optional[str]) -> None:
        self._auto_updates.server_code = server_code

    @property
    def auto_update(self) -> bool:
        """True while cached data is updated automatically."""
        return self._auto_updates.running

    @auto_update.setter
    def auto_update(self, value: bool) -> None:
        if self.auto_update != value:
            if value:
                self.start_auto_updates()
            else:
                self.stop_auto_updates()

    @property
    def auto_updates(self) -> AutoUpdateScheduler:
        return self._auto_updates

    def start_auto_updates(self, server_code: Optional[str] = None) -> "SimRailApi":
        """
        Start updating cached data automatically.

        Only kinds with caching enabled are updated; each kind's retention is
        its polling interval.

        Raises:
            MissingAutoUpdateServerError: No server code was ever supplied
        """
        self._auto_updates.start(server_code)
        return self

    def stop_auto_updates(self) -> "SimRailApi":
        self._auto_updates.stop()
        return self

    def close(self) -> None:
        """Stop auto-updates and release the scheduler and an owned client."""
        self._auto_updates.shutdown()
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "SimRailApi":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ===== INTERNAL =====

    def _fresh_entry(self, kind: CacheKind, no_cache: bool, server_code: Optional[str] = None):
        if no_cache or not self.cache_options.is_enabled(kind):
            return None
        return self._cache.get_fresh(
            kind,
            self.cache_options.retention_for(kind),
            server_code=server_code,
        )

    def _cached(self, kind: CacheKind, no_cache: bool, server_code: Optional[str] = None) -> Optional[list]:
        """Cached records of a kind, or None when a remote fetch is needed."""
        entry = self._fresh_entry(kind, no_cache, server_code)
        if entry is None:
            return None
        return entry.values()
