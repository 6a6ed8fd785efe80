"""
API events and the multicast channel they are published on.

Every subscriber receives every event published after it subscribed, in
subscription order, on the publishing thread. Past events are not replayed.
"""
import itertools
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, FrozenSet, List

from .cache.core import CacheKind

logger = logging.getLogger("simrail.events")


class EventType(Enum):
    """Types of API events."""
    AUTO_UPDATE_CHANGED = "autoUpdateChanged"
    ACTIVE_SERVERS_UPDATED = "activeServersUpdated"
    ACTIVE_STATIONS_UPDATED = "activeStationsUpdated"
    ACTIVE_TRAINS_UPDATED = "activeTrainsUpdated"
    TIMETABLE_UPDATED = "timetableUpdated"
    UPDATE_FAILED = "updateFailed"


@dataclass(frozen=True)
class ApiEvent:
    """Base event; ``api`` is the instance that published it."""
    api: Any
    type: ClassVar[EventType]


@dataclass(frozen=True)
class AutoUpdateChanged(ApiEvent):
    """Fires when auto-updates start or stop."""
    auto_update: bool
    type: ClassVar[EventType] = EventType.AUTO_UPDATE_CHANGED


@dataclass(frozen=True)
class ActiveServersUpdated(ApiEvent):
    """Fires when cached active servers were refreshed."""
    active_servers: List[Any]
    type: ClassVar[EventType] = EventType.ACTIVE_SERVERS_UPDATED


@dataclass(frozen=True)
class ActiveStationsUpdated(ApiEvent):
    """Fires when cached active dispatch stations were refreshed."""
    active_stations: List[Any]
    type: ClassVar[EventType] = EventType.ACTIVE_STATIONS_UPDATED


@dataclass(frozen=True)
class ActiveTrainsUpdated(ApiEvent):
    """Fires when cached active trains were refreshed."""
    active_trains: List[Any]
    type: ClassVar[EventType] = EventType.ACTIVE_TRAINS_UPDATED


@dataclass(frozen=True)
class TimetableUpdated(ApiEvent):
    """Fires when cached timetable data was refreshed."""
    timetable: List[Any]
    type: ClassVar[EventType] = EventType.TIMETABLE_UPDATED


@dataclass(frozen=True)
class UpdateFailed(ApiEvent):
    """Fires when a scheduled auto-update could not refresh its kind."""
    kind: CacheKind
    error: BaseException
    type: ClassVar[EventType] = EventType.UPDATE_FAILED


EventHandler = Callable[[ApiEvent], None]


@dataclass
class Subscription:
    """Handle returned by ``EventChannel.subscribe``."""
    channel: "EventChannel"
    id: int
    handler: EventHandler
    types: FrozenSet[EventType] = field(default_factory=frozenset)

    @property
    def active(self) -> bool:
        return self.channel.is_subscribed(self)

    def accepts(self, event: ApiEvent) -> bool:
        return not self.types or event.type in self.types

    def unsubscribe(self) -> bool:
        """Stop delivery to this subscriber. Returns False if already unsubscribed."""
        return self.channel.unsubscribe(self)


class EventChannel:
    """
    Multicast event stream with independent subscribers.

    Usage:
        subscription = api.events.subscribe(print, EventType.ACTIVE_TRAINS_UPDATED)
        ...
        subscription.unsubscribe()
    """

    def __init__(self):
        self._subscriptions: Dict[int, Subscription] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(self, handler: EventHandler, *types: EventType) -> Subscription:
        """
        Subscribe a handler to future events.

        Args:
            handler: Called with each event
            types: Only deliver these event types; none means all

        Returns:
            A Subscription that can be used to unsubscribe
        """
        with self._lock:
            subscription = Subscription(
                channel=self,
                id=next(self._ids),
                handler=handler,
                types=frozenset(types),
            )
            self._subscriptions[subscription.id] = subscription
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        with self._lock:
            return self._subscriptions.pop(subscription.id, None) is not None

    def is_subscribed(self, subscription: Subscription) -> bool:
        with self._lock:
            return subscription.id in self._subscriptions

    def publish(self, event: ApiEvent) -> int:
        """
        Deliver an event to every current subscriber.

        A failing handler is logged and does not affect the others.

        Returns:
            Number of subscribers the event was delivered to
        """
        with self._lock:
            subscriptions = list(self._subscriptions.values())

        delivered = 0
        for subscription in subscriptions:
            if not subscription.accepts(event):
                continue
            try:
                subscription.handler(event)
                delivered += 1
            except Exception:
                logger.exception(f"Error in event handler for {event.type.value}")
        return delivered

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def clear(self) -> None:
        """Remove all subscribers."""
        with self._lock:
            self._subscriptions.clear()
