"""
AutoUpdateScheduler - keeps cached data warm by polling on an interval.

One recurring job per cache kind with caching enabled; each job's interval
is the kind's retention. A tick forces a cache-bypassing fetch through the
normal accessor, which refreshes the cache and publishes the update event.

Usage:
    api.start_auto_updates("en1")   # arms the jobs
    api.stop_auto_updates()         # removes them
"""
import logging
import threading
from typing import TYPE_CHECKING, Dict, List, Optional

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import STATE_STOPPED, BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .cache.core import CacheKind
from .events import AutoUpdateChanged, UpdateFailed
from .exceptions import MissingAutoUpdateServerError

if TYPE_CHECKING:
    from .api import SimRailApi

logger = logging.getLogger("simrail.scheduler")


class AutoUpdateScheduler:
    """
    Owns the four auto-update job slots of an API instance.

    Setting a slot always removes the job it held before, so jobs are never
    leaked. Auto-updating is "running" while at least one slot is set.
    """

    def __init__(self, api: "SimRailApi", scheduler: Optional[BaseScheduler] = None):
        """
        Initialize the scheduler.

        Args:
            api: API instance whose accessors are polled
            scheduler: APScheduler instance to use; a daemon BackgroundScheduler
                is created and owned when omitted
        """
        self._api = api
        self._scheduler = scheduler or BackgroundScheduler(daemon=True)
        self._owns_scheduler = scheduler is None
        self._jobs: Dict[CacheKind, Optional[Job]] = {kind: None for kind in CacheKind}
        self._lock = threading.RLock()
        self.server_code: Optional[str] = None

    @property
    def running(self) -> bool:
        """True while at least one auto-update job is armed."""
        with self._lock:
            return any(job is not None for job in self._jobs.values())

    @property
    def active_kinds(self) -> List[CacheKind]:
        with self._lock:
            return [kind for kind, job in self._jobs.items() if job is not None]

    @property
    def scheduler(self) -> BaseScheduler:
        return self._scheduler

    def require_server(self) -> str:
        """Return the auto-update server code or raise if none was supplied."""
        if self.server_code is None:
            raise MissingAutoUpdateServerError()
        return self.server_code

    def start(self, server_code: Optional[str] = None) -> bool:
        """
        Start auto-updating every kind that has caching enabled.

        Calling this while already running does nothing: job phases are kept
        and kinds enabled since the last start are not added.

        Args:
            server_code: Server to poll per-server kinds from; defaults to the
                previously supplied one

        Returns:
            True if any job was armed by this call
        """
        with self._lock:
            if server_code is not None:
                self.server_code = server_code
            self.require_server()

            if self.running:
                logger.debug("Auto-updates already running")
                return False

            options = self._api.cache_options
            armed = []
            for kind in CacheKind:
                if not options.is_enabled(kind):
                    continue
                interval = options.retention_for(kind)
                job = self._scheduler.add_job(
                    self.run_now,
                    trigger=IntervalTrigger(seconds=interval),
                    args=[kind],
                    id=f"simrail-auto-update-{id(self)}-{kind.value}",
                    name=f"Auto-update {kind.value}",
                    max_instances=1,
                    coalesce=True,
                    replace_existing=True,
                )
                self._set_job(kind, job)
                armed.append(kind)

            if armed and self._scheduler.state == STATE_STOPPED:
                self._scheduler.start()

        if not armed:
            logger.info("Auto-updates not started: caching is disabled for every kind")
            return False

        logger.info(
            f"Auto-updates started for server {self.server_code}: "
            f"{', '.join(kind.value for kind in armed)}"
        )
        self._api.events.publish(AutoUpdateChanged(api=self._api, auto_update=True))
        return True

    def stop(self) -> bool:
        """
        Stop auto-updating. Fetches already in progress still complete.

        Returns:
            True if any job was removed by this call
        """
        with self._lock:
            changed = False
            for kind in CacheKind:
                if self._jobs[kind] is not None:
                    self._set_job(kind, None)
                    changed = True

        if changed:
            logger.info("Auto-updates stopped")
            self._api.events.publish(AutoUpdateChanged(api=self._api, auto_update=False))
        return changed

    def run_now(self, kind: CacheKind) -> bool:
        """
        Refresh one kind immediately, as a scheduled tick does.

        Failures never propagate: they are logged and published as an
        UpdateFailed event.

        Returns:
            True if the refresh succeeded
        """
        try:
            self._refresh(kind)
            return True
        except Exception as e:
            logger.warning(f"Auto-update of {kind.value} failed: {e}")
            self._api.events.publish(UpdateFailed(api=self._api, kind=kind, error=e))
            return False

    def shutdown(self) -> None:
        """Stop auto-updates and shut down an owned APScheduler instance."""
        self.stop()
        if self._owns_scheduler and self._scheduler.state != STATE_STOPPED:
            self._scheduler.shutdown(wait=False)

    def _refresh(self, kind: CacheKind) -> None:
        if kind is CacheKind.ACTIVE_SERVERS:
            self._api.get_active_servers(no_cache=True)
            return

        server_code = self.require_server()
        if kind is CacheKind.ACTIVE_STATIONS:
            self._api.get_active_stations(server_code, no_cache=True)
        elif kind is CacheKind.ACTIVE_TRAINS:
            self._api.get_active_trains(server_code, no_cache=True)
        else:
            self._api.get_timetable(server_code, no_cache=True)

    def _set_job(self, kind: CacheKind, job: Optional[Job]) -> None:
        """Replace the job in a slot, removing the previous one first."""
        previous = self._jobs[kind]
        if previous is not None:
            try:
                previous.remove()
            except JobLookupError:
                logger.debug(f"Auto-update job for {kind.value} was already removed")
        self._jobs[kind] = job
