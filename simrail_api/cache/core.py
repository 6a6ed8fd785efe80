"""
Core cache data structures.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List
from enum import Enum


class CacheKind(Enum):
    """Entity kinds with independent caching behaviors."""
    ACTIVE_SERVERS = "active_servers"     # global, keyed by server code
    ACTIVE_STATIONS = "active_stations"   # per server, keyed by station code
    ACTIVE_TRAINS = "active_trains"       # per server, keyed by train number
    TIMETABLE = "timetable"               # per server, keyed by train number

    @property
    def per_server(self) -> bool:
        """True if entries of this kind are partitioned by server code."""
        return self is not CacheKind.ACTIVE_SERVERS


@dataclass
class CacheEntry:
    """
    A cached collection of records plus the time it was written.

    The timestamp belongs to the entry, not to individual records: every
    successful remote fetch replaces the whole entry.
    """
    records: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = 0.0

    def age_seconds(self, now: float) -> float:
        """Seconds since the entry was written."""
        return now - self.timestamp

    def is_fresh(self, retention: float, now: float, legacy: bool = False) -> bool:
        """
        Check if the entry is within its retention window.

        Args:
            retention: Retention window in seconds
            now: Current clock value in seconds
            legacy: Use the historic ``timestamp < now + retention`` comparison,
                which treats any entry as fresh for a positive retention

        Returns:
            True if the records may be served from cache
        """
        if legacy:
            return self.timestamp < now + retention
        return self.age_seconds(now) < retention

    def values(self) -> List[Any]:
        """Cached records in insertion order."""
        return list(self.records.values())

    def __len__(self) -> int:
        return len(self.records)
