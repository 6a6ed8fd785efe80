"""
Pydantic models for SimRail live data and timetable records.

Live data arrives with PascalCase keys (including the endpoint's own
"Latititude" spelling); timetable data arrives in camelCase. Models accept
either the raw key or the field name.
"""
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field


class SimRailModel(BaseModel):
    """Base record: accepts field names and raw keys, keeps unknown keys."""

    class Config:
        populate_by_name = True
        extra = "allow"


# ===== LIVE DATA =====

class Server(SimRailModel):
    """A multiplayer server."""
    id: str = ""
    server_code: str = Field(alias="ServerCode")
    server_name: str = Field("", alias="ServerName")
    server_region: str = Field("", alias="ServerRegion")
    is_active: bool = Field(True, alias="IsActive")


class DispatchedBy(SimRailModel):
    """A player dispatching a station."""
    server_code: str = Field("", alias="ServerCode")
    steam_id: str = Field("", alias="SteamId")


class Station(SimRailModel):
    """An active dispatch station; ``code`` is the prefix without diacritics."""
    id: str = ""
    name: str = Field("", alias="Name")
    prefix: str = Field(alias="Prefix")
    code: str = ""
    difficulty_level: int = Field(0, alias="DifficultyLevel")
    latitude: Optional[float] = Field(
        None, validation_alias=AliasChoices("latitude", "Latititude", "Latitude")
    )
    longitude: Optional[float] = Field(
        None, validation_alias=AliasChoices("longitude", "Longitude", "Longititude")
    )
    main_image_url: Optional[str] = Field(None, alias="MainImageURL")
    additional_image1_url: Optional[str] = Field(None, alias="AdditionalImage1URL")
    additional_image2_url: Optional[str] = Field(None, alias="AdditionalImage2URL")
    dispatched_by: List[DispatchedBy] = Field(default_factory=list, alias="DispatchedBy")


class TrainData(SimRailModel):
    """Live position and signalling state of a train."""
    controlled_by_steam_id: Optional[str] = Field(None, alias="ControlledBySteamID")
    in_border_station_area: bool = Field(False, alias="InBorderStationArea")
    latitude: Optional[float] = Field(
        None, validation_alias=AliasChoices("latitude", "Latititute", "Latitude")
    )
    longitude: Optional[float] = Field(
        None, validation_alias=AliasChoices("longitude", "Longitute", "Longitude")
    )
    velocity: float = Field(0.0, alias="Velocity")
    signal_in_front: Optional[str] = Field(None, alias="SignalInFront")
    distance_to_signal_in_front: Optional[float] = Field(None, alias="DistanceToSignalInFront")
    signal_in_front_speed: Optional[float] = Field(None, alias="SignalInFrontSpeed")
    vd_delayed_timetable_index: Optional[int] = Field(None, alias="VDDelayedTimetableIndex")


class Train(SimRailModel):
    """An active train."""
    id: str = ""
    train_no_local: str = Field(alias="TrainNoLocal")
    train_name: str = Field("", alias="TrainName")
    start_station: str = Field("", alias="StartStation")
    end_station: str = Field("", alias="EndStation")
    server_code: str = Field("", alias="ServerCode")
    run_id: str = Field("", alias="RunId")
    type: str = Field("", alias="Type")
    vehicles: List[str] = Field(default_factory=list, alias="Vehicles")
    train_data: Optional[TrainData] = Field(None, alias="TrainData")


# ===== TIMETABLE =====

class TimetablePoint(SimRailModel):
    """A single point on a train's route."""
    name_of_point: str = Field("", alias="nameOfPoint")
    name_for_person: str = Field("", alias="nameForPerson")
    point_id: str = Field("", alias="pointId")
    supervised_by: Optional[str] = Field(None, alias="supervisedBy")
    displayed_train_number: Optional[str] = Field(None, alias="displayedTrainNumber")
    arrival_time: Optional[str] = Field(None, alias="arrivalTime")
    departure_time: Optional[str] = Field(None, alias="departureTime")
    stop_type: Optional[str] = Field(None, alias="stopType")
    line: Optional[int] = None
    platform: Optional[str] = None
    track: Optional[int] = None
    train_type: Optional[str] = Field(None, alias="trainType")
    mileage: Optional[float] = None
    max_speed: Optional[int] = Field(None, alias="maxSpeed")


class TimetableEntry(SimRailModel):
    """The timetable of one train."""
    train_no_local: str = Field(alias="trainNoLocal")
    train_no_international: Optional[str] = Field(None, alias="trainNoInternational")
    train_name: str = Field("", alias="trainName")
    start_station: str = Field("", alias="startStation")
    starts_at: Optional[str] = Field(None, alias="startsAt")
    end_station: str = Field("", alias="endStation")
    ends_at: Optional[str] = Field(None, alias="endsAt")
    loco_type: Optional[str] = Field(None, alias="locoType")
    train_length: Optional[int] = Field(None, alias="trainLength")
    train_weight: Optional[int] = Field(None, alias="trainWeight")
    continues_as: Optional[str] = Field(None, alias="continuesAs")
    run_id: str = Field("", alias="runId")
    timetable: List[TimetablePoint] = Field(default_factory=list)


def parse_records(model: type, rows: Any) -> list:
    """Validate a list of raw rows into model instances."""
    return [model.model_validate(row) for row in rows or []]
