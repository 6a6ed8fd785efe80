"""
Remote client for the SimRail live data and timetable endpoints.

The caching layer only depends on ``SimRailClientProtocol``; ``SimRailClient``
is the default requests-based implementation.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import requests

from config.settings import settings
from .exceptions import ApiResponseError, TimetableTrainNotFoundError
from .models import Server, Station, TimetableEntry, Train, parse_records

logger = logging.getLogger("simrail.api_client")


class SimRailClientProtocol(Protocol):
    """
    Interface for remote SimRail data clients.

    Implementations:
    - SimRailClient: HTTP requests against the public endpoints
    - Any object with these methods (e.g. a test double or a shared client)
    """

    def get_active_servers(self) -> List[Server]:
        ...

    def get_active_stations(self, server_code: str) -> List[Station]:
        ...

    def get_active_trains(self, server_code: str) -> List[Train]:
        ...

    def get_timetable(self, server_code: str) -> List[TimetableEntry]:
        """Get timetables of every train on a server."""
        ...

    def get_train_timetable(self, server_code: str, train_no_local: str) -> TimetableEntry:
        """Get the timetable of a single train."""
        ...


@dataclass(frozen=True)
class Endpoints:
    """Base URLs of the remote SimRail endpoints."""
    live_data: str
    timetable: str

    @classmethod
    def from_settings(cls) -> "Endpoints":
        return cls(live_data=settings.live_data_url, timetable=settings.timetable_url)


class SimRailClient:
    """
    Fetches and parses SimRail data over HTTP.

    Errors are not retried: HTTP failures raise ``requests.HTTPError`` and an
    unsuccessful live data envelope raises ``ApiResponseError``.
    """

    def __init__(
        self,
        endpoints: Optional[Endpoints] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.endpoints = endpoints or Endpoints.from_settings()
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._session = session or requests.Session()

    def _make_request(self, base_url: str, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Make a GET request and decode the JSON body.

        Args:
            base_url: Endpoint base URL
            endpoint: Path below the base URL
            params: Query parameters

        Returns:
            Decoded response data
        """
        url = f"{base_url.rstrip('/')}/{endpoint}"
        logger.info(f"UPSTREAM: {endpoint} {params or {}}")
        response = self._session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _live_data(self, endpoint: str, server_code: Optional[str] = None) -> List[Dict[str, Any]]:
        """Unwrap a live data envelope: {"result", "data", "count", "description"}."""
        params = {"serverCode": server_code} if server_code is not None else None
        payload = self._make_request(self.endpoints.live_data, endpoint, params)
        if not payload.get("result", False):
            raise ApiResponseError(endpoint, payload.get("description", ""))
        return payload.get("data") or []

    # ===== LIVE DATA =====

    def get_active_servers(self) -> List[Server]:
        return parse_records(Server, self._live_data("servers-open"))

    def get_active_stations(self, server_code: str) -> List[Station]:
        return parse_records(Station, self._live_data("stations-open", server_code))

    def get_active_trains(self, server_code: str) -> List[Train]:
        return parse_records(Train, self._live_data("trains-open", server_code))

    # ===== TIMETABLE =====

    def get_timetable(self, server_code: str) -> List[TimetableEntry]:
        rows = self._make_request(
            self.endpoints.timetable,
            "getAllTimetables",
            {"serverCode": server_code},
        )
        return parse_records(TimetableEntry, rows)

    def get_train_timetable(self, server_code: str, train_no_local: str) -> TimetableEntry:
        rows = self._make_request(
            self.endpoints.timetable,
            "getAllTimetables",
            {"serverCode": server_code, "train": train_no_local},
        )
        entries = parse_records(TimetableEntry, rows)
        if not entries:
            raise TimetableTrainNotFoundError(train_no_local)
        return entries[0]

    def close(self) -> None:
        self._session.close()
