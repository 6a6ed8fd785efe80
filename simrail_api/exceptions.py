"""
Exceptions raised by the SimRail API.

Not-found errors name the requested identity so callers can report it;
transport errors from the underlying client are not wrapped.
"""


class SimRailError(Exception):
    """Base class for errors raised by this package."""


class EntityNotFoundError(SimRailError):
    """Raised when a single-record lookup finds no matching record.

    Attributes:
        kind: Human-readable name of the entity kind.
        identity: The requested server code, station code or train number.
    """

    kind = "record"

    def __init__(self, identity: str, message: str = ""):
        self.identity = identity
        super().__init__(message or f"Can't find {self.kind} \"{identity}\"!")


class ServerNotFoundError(EntityNotFoundError):
    kind = "server"

    def __init__(self, server_code: str):
        super().__init__(server_code, f"Can't find server with code \"{server_code}\"!")


class StationNotFoundError(EntityNotFoundError):
    kind = "dispatch station"

    def __init__(self, station_code: str):
        super().__init__(
            station_code,
            f"Can't find dispatch station with code or prefix \"{station_code}\"!",
        )


class TrainNotFoundError(EntityNotFoundError):
    kind = "train"

    def __init__(self, train_no_local: str):
        super().__init__(train_no_local, f"Can't find train with number \"{train_no_local}\"!")


class TimetableTrainNotFoundError(EntityNotFoundError):
    kind = "timetable"

    def __init__(self, train_no_local: str):
        super().__init__(
            train_no_local,
            f"Can't find timetable for train with number \"{train_no_local}\"!",
        )


class MissingAutoUpdateServerError(SimRailError):
    """Raised when auto-updates need a server code and none was supplied."""

    def __init__(self):
        super().__init__("Server for retrieving automatic updates isn't specified!")


class ApiResponseError(SimRailError):
    """Raised when the live data endpoint reports an unsuccessful result.

    Attributes:
        endpoint: The endpoint path that was queried.
        description: The description returned by the endpoint, if any.
    """

    def __init__(self, endpoint: str, description: str = ""):
        self.endpoint = endpoint
        self.description = description
        super().__init__(
            f"Request to \"{endpoint}\" was not successful"
            + (f": {description}" if description else "")
        )
