"""
Retention configuration and per-kind cache policies.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional

from .core import CacheKind


# Default retention by kind (in seconds). Retention doubles as the
# auto-update polling interval.
DEFAULT_ACTIVE_SERVER_RETENTION = 30
DEFAULT_ACTIVE_STATION_RETENTION = 30
DEFAULT_ACTIVE_TRAIN_RETENTION = 5
DEFAULT_TIMETABLE_RETENTION = 1440

TTL_CONFIG: Dict[CacheKind, int] = {
    CacheKind.ACTIVE_SERVERS: DEFAULT_ACTIVE_SERVER_RETENTION,
    CacheKind.ACTIVE_STATIONS: DEFAULT_ACTIVE_STATION_RETENTION,
    CacheKind.ACTIVE_TRAINS: DEFAULT_ACTIVE_TRAIN_RETENTION,
    CacheKind.TIMETABLE: DEFAULT_TIMETABLE_RETENTION,
}


def get_default_retention(kind: CacheKind) -> int:
    """Get the default retention for a kind."""
    return TTL_CONFIG[kind]


@dataclass
class CachePolicy:
    """
    Caching options for one kind of record.

    Attributes:
        enabled: Cache results and allow auto-updates for this kind
        retention: Seconds a cached result stays fresh; None uses the kind default
    """
    enabled: bool = True
    retention: Optional[float] = None

    def __post_init__(self):
        if self.retention is not None and self.retention <= 0:
            raise ValueError(f"retention must be positive, got {self.retention}")


@dataclass
class TimetableCachePolicy(CachePolicy):
    """
    Caching options for timetables.

    When ``single_record_only`` is set, only the most recently fetched
    server's timetable is kept. Disable it when actively querying several
    servers.
    """
    single_record_only: bool = True


@dataclass
class CacheOptions:
    """Cache configuration for all four kinds."""
    active_servers: CachePolicy = field(default_factory=CachePolicy)
    active_stations: CachePolicy = field(default_factory=CachePolicy)
    active_trains: CachePolicy = field(default_factory=CachePolicy)
    timetable: TimetableCachePolicy = field(default_factory=TimetableCachePolicy)
    legacy_freshness: bool = False

    def policy_for(self, kind: CacheKind) -> CachePolicy:
        """Get the policy configured for a kind."""
        return {
            CacheKind.ACTIVE_SERVERS: self.active_servers,
            CacheKind.ACTIVE_STATIONS: self.active_stations,
            CacheKind.ACTIVE_TRAINS: self.active_trains,
            CacheKind.TIMETABLE: self.timetable,
        }[kind]

    def is_enabled(self, kind: CacheKind) -> bool:
        return self.policy_for(kind).enabled

    def retention_for(self, kind: CacheKind) -> float:
        """
        Get the effective retention for a kind.

        Args:
            kind: The cache kind

        Returns:
            Configured retention, or the kind's default when not set
        """
        retention = self.policy_for(kind).retention
        if retention is None:
            return get_default_retention(kind)
        return retention
