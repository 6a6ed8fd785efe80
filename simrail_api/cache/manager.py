"""
Cache root for live data and timetables.
"""
import threading
import logging
import time
from typing import Any, Callable, Dict, List, Optional

from .core import CacheEntry, CacheKind

logger = logging.getLogger("simrail.cache.manager")


class CacheManager:
    """
    Owns every cached entry of an API instance:
    - One global entry for active servers
    - Per-server entries for stations, trains and timetables
    - Freshness checks against a caller-supplied retention
    - Hit/miss statistics
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        legacy_freshness: bool = False,
    ):
        """
        Initialize the cache manager.

        Args:
            clock: Returns the current time in seconds
            legacy_freshness: Use the historic always-fresh comparison
        """
        self._clock = clock
        self._legacy_freshness = legacy_freshness
        self._active_servers: Optional[CacheEntry] = None
        self._partitions: Dict[CacheKind, Dict[str, CacheEntry]] = {
            kind: {} for kind in CacheKind if kind.per_server
        }
        self._cache_lock = threading.RLock()

        # Stats tracking
        self._stats = {
            "hits": 0,
            "misses": 0,
            "stores": 0,
        }

    def now(self) -> float:
        return self._clock()

    def lookup(self, kind: CacheKind, server_code: Optional[str] = None) -> Optional[CacheEntry]:
        """Get the entry for a kind (and server) regardless of freshness."""
        with self._cache_lock:
            if kind is CacheKind.ACTIVE_SERVERS:
                return self._active_servers
            return self._partitions[kind].get(server_code)

    def get_fresh(
        self,
        kind: CacheKind,
        retention: float,
        server_code: Optional[str] = None,
    ) -> Optional[CacheEntry]:
        """
        Get an entry only if it is still fresh.

        Args:
            kind: The cache kind
            retention: Retention window in seconds
            server_code: Server partition for per-server kinds

        Returns:
            The fresh entry, or None on a miss or stale entry
        """
        entry = self.lookup(kind, server_code)
        label = self._label(kind, server_code)

        if entry is None:
            logger.debug(f"CACHE MISS: {label}")
            self._stats["misses"] += 1
            return None

        now = self.now()
        if entry.is_fresh(retention, now, legacy=self._legacy_freshness):
            logger.debug(f"CACHE HIT: {label} [age={entry.age_seconds(now):.1f}s]")
            self._stats["hits"] += 1
            return entry

        logger.debug(f"CACHE EXPIRED: {label} [age={entry.age_seconds(now):.1f}s]")
        self._stats["misses"] += 1
        return None

    def store(
        self,
        kind: CacheKind,
        records: Dict[str, Any],
        server_code: Optional[str] = None,
        single_record_only: bool = False,
    ) -> CacheEntry:
        """
        Replace the entry for a kind (and server) with new records.

        Args:
            kind: The cache kind
            records: Records keyed by their identity
            server_code: Server partition for per-server kinds
            single_record_only: Drop every other server's entry of this kind first

        Returns:
            The newly written entry
        """
        if kind.per_server and server_code is None:
            raise ValueError(f"{kind.value} entries require a server code")

        entry = CacheEntry(records=dict(records), timestamp=self.now())
        with self._cache_lock:
            if kind is CacheKind.ACTIVE_SERVERS:
                self._active_servers = entry
            else:
                partition = self._partitions[kind]
                if single_record_only:
                    partition.clear()
                partition[server_code] = entry
            self._stats["stores"] += 1

        logger.debug(f"CACHE STORE: {self._label(kind, server_code)} [{len(entry)} records]")
        return entry

    def flush(self, kind: Optional[CacheKind] = None) -> int:
        """
        Clear cached entries.

        Args:
            kind: Kind to clear; None clears every kind

        Returns:
            Number of entries cleared
        """
        kinds = [kind] if kind is not None else list(CacheKind)
        count = 0
        with self._cache_lock:
            for k in kinds:
                if k is CacheKind.ACTIVE_SERVERS:
                    if self._active_servers is not None:
                        count += 1
                    self._active_servers = None
                else:
                    count += len(self._partitions[k])
                    self._partitions[k] = {}
        if count:
            logger.info(f"Flushed {count} cache entries ({kind.value if kind else 'all'})")
        return count

    def cached_servers(self, kind: CacheKind) -> List[str]:
        """Server codes that currently hold an entry of a per-server kind."""
        with self._cache_lock:
            return list(self._partitions[kind])

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._cache_lock:
            total_requests = self._stats["hits"] + self._stats["misses"]
            hit_rate = (self._stats["hits"] / total_requests * 100) if total_requests > 0 else 0

            entries = {
                kind.value: len(partition) for kind, partition in self._partitions.items()
            }
            entries[CacheKind.ACTIVE_SERVERS.value] = 0 if self._active_servers is None else 1

            return {
                "entries": entries,
                "hits": self._stats["hits"],
                "misses": self._stats["misses"],
                "stores": self._stats["stores"],
                "hit_rate_percent": round(hit_rate, 1),
            }

    @staticmethod
    def _label(kind: CacheKind, server_code: Optional[str]) -> str:
        if server_code is None:
            return kind.value
        return f"{kind.value}:{server_code}"
