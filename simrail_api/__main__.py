"""
Watch a SimRail server and log every update.

Usage:
    python -m simrail_api en1
    python -m simrail_api en1 --duration 120 --log-level DEBUG

This script:
1. Starts automatic updates for the given server
2. Logs each event (servers, stations, trains, timetable, failures)
3. Stops auto-updates after --duration seconds or on Ctrl+C
"""

import argparse
import logging
import threading
from typing import List, Optional

from config.settings import settings
from simrail_api.api import SimRailApi
from simrail_api.events import (
    ActiveServersUpdated,
    ActiveStationsUpdated,
    ActiveTrainsUpdated,
    ApiEvent,
    AutoUpdateChanged,
    TimetableUpdated,
    UpdateFailed,
)

logger = logging.getLogger("simrail.watch")


def describe_event(event: ApiEvent) -> str:
    """One-line summary of an event."""
    if isinstance(event, AutoUpdateChanged):
        return f"auto-update {'started' if event.auto_update else 'stopped'}"
    if isinstance(event, ActiveServersUpdated):
        return f"{len(event.active_servers)} active servers"
    if isinstance(event, ActiveStationsUpdated):
        return f"{len(event.active_stations)} active stations"
    if isinstance(event, ActiveTrainsUpdated):
        return f"{len(event.active_trains)} active trains"
    if isinstance(event, TimetableUpdated):
        return f"{len(event.timetable)} timetable entries"
    if isinstance(event, UpdateFailed):
        return f"update of {event.kind.value} failed: {event.error}"
    return event.type.value


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Log live SimRail updates for a server")
    parser.add_argument(
        "server",
        nargs="?",
        default=settings.auto_update_server,
        help="Server code, e.g. en1 (default: SIMRAIL_AUTO_UPDATE_SERVER)",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=60.0,
        help="Seconds to watch before stopping (default: 60)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.log_level,
        help="Logging level (default: SIMRAIL_LOG_LEVEL or INFO)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not args.server:
        parser.error("a server code is required")

    done = threading.Event()
    with SimRailApi() as api:
        subscription = api.events.subscribe(lambda event: logger.info(describe_event(event)))
        api.start_auto_updates(args.server)
        try:
            done.wait(args.duration)
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            api.stop_auto_updates()
            subscription.unsubscribe()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
