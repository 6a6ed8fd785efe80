"""
Per-kind TTL caching for live data and timetables.
"""
from .core import CacheEntry, CacheKind
from .ttl_policies import (
    TTL_CONFIG,
    DEFAULT_ACTIVE_SERVER_RETENTION,
    DEFAULT_ACTIVE_STATION_RETENTION,
    DEFAULT_ACTIVE_TRAIN_RETENTION,
    DEFAULT_TIMETABLE_RETENTION,
    CacheOptions,
    CachePolicy,
    TimetableCachePolicy,
    get_default_retention,
)
from .manager import CacheManager

__all__ = [
    # Core types
    "CacheEntry",
    "CacheKind",
    # Retention policies
    "TTL_CONFIG",
    "DEFAULT_ACTIVE_SERVER_RETENTION",
    "DEFAULT_ACTIVE_STATION_RETENTION",
    "DEFAULT_ACTIVE_TRAIN_RETENTION",
    "DEFAULT_TIMETABLE_RETENTION",
    "CacheOptions",
    "CachePolicy",
    "TimetableCachePolicy",
    "get_default_retention",
    # Manager
    "CacheManager",
]
