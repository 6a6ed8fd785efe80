"""
Cached SimRail API with automatic updates and change events.
"""
from .api import ApiConfig, SimRailApi, WithClient, WithEndpoints
from .api_client import Endpoints, SimRailClient, SimRailClientProtocol
from .cache import CacheKind, CacheOptions, CachePolicy, TimetableCachePolicy
from .events import (
    ActiveServersUpdated,
    ActiveStationsUpdated,
    ActiveTrainsUpdated,
    ApiEvent,
    AutoUpdateChanged,
    EventChannel,
    EventType,
    Subscription,
    TimetableUpdated,
    UpdateFailed,
)
from .exceptions import (
    ApiResponseError,
    EntityNotFoundError,
    MissingAutoUpdateServerError,
    ServerNotFoundError,
    SimRailError,
    StationNotFoundError,
    TimetableTrainNotFoundError,
    TrainNotFoundError,
)
from .models import Server, Station, TimetableEntry, TimetablePoint, Train, TrainData

__version__ = "0.1.1"

__all__ = [
    "__version__",
    # API
    "ApiConfig",
    "SimRailApi",
    "WithClient",
    "WithEndpoints",
    # Client
    "Endpoints",
    "SimRailClient",
    "SimRailClientProtocol",
    # Cache configuration
    "CacheKind",
    "CacheOptions",
    "CachePolicy",
    "TimetableCachePolicy",
    # Events
    "ActiveServersUpdated",
    "ActiveStationsUpdated",
    "ActiveTrainsUpdated",
    "ApiEvent",
    "AutoUpdateChanged",
    "EventChannel",
    "EventType",
    "Subscription",
    "TimetableUpdated",
    "UpdateFailed",
    # Errors
    "ApiResponseError",
    "EntityNotFoundError",
    "MissingAutoUpdateServerError",
    "ServerNotFoundError",
    "SimRailError",
    "StationNotFoundError",
    "TimetableTrainNotFoundError",
    "TrainNotFoundError",
    # Models
    "Server",
    "Station",
    "TimetableEntry",
    "TimetablePoint",
    "Train",
    "TrainData",
]
