"""Pydantic request and response models for the trip planner backend."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

# Upper bound on a waypoint's day_index; the daily plan has one entry per day.
MAX_TRIP_DAYS: int = 366


class WaypointType(str, Enum):
    """What a rider stops for at a waypoint."""

    FUEL = "FUEL"
    LODGING = "LODGING"
    CAMPGROUND = "CAMPGROUND"
    DINING = "DINING"
    POI = "POI"
    CHECKPOINT = "CHECKPOINT"
    OTHER = "OTHER"


class FuelRisk(str, Enum):
    """How close a fuel leg runs to the bike's range."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class LatLng(BaseModel):
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float


# ---------------------------------------------------------------------------
# Trip payload models
# ---------------------------------------------------------------------------


class Waypoint(BaseModel):
    """A single point on a trip's route, in riding order."""

    id: str | None = None
    lat: float
    lng: float
    name: str | None = None
    type: WaypointType = WaypointType.CHECKPOINT
    notes: str | None = None

    day_index: int | None = Field(default=None, le=MAX_TRIP_DAYS)
    """1-based riding day this waypoint starts; later waypoints inherit it."""

    google_place_id: str | None = None


class RouteSegment(BaseModel):
    """A calculated stretch of road between two waypoints."""

    id: str | None = None
    start_waypoint_id: str | None = None
    end_waypoint_id: str | None = None
    distance_meters: float | None = None
    duration_seconds: float | None = None
    polyline: str | None = None


class Motorcycle(BaseModel):
    """The fuel-related subset of a rider's motorcycle profile."""

    name: str | None = None
    estimated_range_km: float | None = None
    preferred_range_km: float | None = None
    preferred_reserve_km: float | None = None


class SegmentNote(BaseModel):
    """Rider note and risk rating for the segment wp[index] -> wp[index+1]."""

    index: int
    risk: str | None = None
    note: str = ""


class Trip(BaseModel):
    """A complete trip as posted by the planner frontend."""

    id: str | None = None
    name: str = Field(min_length=1)
    description: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    total_distance_meters: float | None = None
    total_duration_seconds: float | None = None
    fuel_range_km: float | None = None
    fuel_reserve_km: float | None = None
    planned_daily_ride_hours: float | None = None
    earliest_departure_hour: float | None = None
    latest_arrival_hour: float | None = None
    waypoints: list[Waypoint] = Field(default_factory=list)
    route_segments: list[RouteSegment] = Field(default_factory=list)
    segment_notes: list[dict[str, Any]] = Field(default_factory=list)
    motorcycle: Motorcycle | None = None


# ---------------------------------------------------------------------------
# Plan models
# ---------------------------------------------------------------------------


class TripTotals(BaseModel):
    """Routed distance and duration summed over a trip."""

    total_distance_meters: float
    total_duration_seconds: float


class DailyPlanEntry(BaseModel):
    """Distance and riding time allocated to one day of the trip."""

    day: int
    distance_km: float
    duration_hours: float


class DailyScheduleEntry(BaseModel):
    """A day's departure/arrival window checked against the rider's limits."""

    day: int
    ride_hours: float
    depart: str
    """Departure clock time, HH:MM."""

    arrive: str
    """Arrival clock time, HH:MM."""

    is_late: bool
    over_target: bool
    heavy: bool


class FuelLeg(BaseModel):
    """The ride between two consecutive fuel stops."""

    label: str
    distance_km: float
    risk: FuelRisk


class FuelPlan(BaseModel):
    """Distances between consecutive fuel stops and their risk levels."""

    longest_leg_km: float | None = None
    legs: list[FuelLeg] = Field(default_factory=list)


class FuelSettings(BaseModel):
    """Range and reserve a trip plans against, in whole kilometres."""

    fuel_range_km: int | None = None
    fuel_reserve_km: int | None = None


class DailyPlanRequest(BaseModel):
    """Request body for the /daily-plan endpoint."""

    waypoints: list[Waypoint]
    total_distance_meters: float | None = None
    total_duration_seconds: float | None = None


class FuelPlanRequest(BaseModel):
    """Request body for the /fuel-plan endpoint.

    Explicit range/reserve values win over those derived from ``motorcycle``.
    """

    waypoints: list[Waypoint]
    fuel_range_km: float | None = None
    fuel_reserve_km: float | None = None
    motorcycle: Motorcycle | None = None


class FuelPlanResponse(BaseModel):
    """Response body for the /fuel-plan endpoint."""

    settings: FuelSettings
    plan: FuelPlan | None = None


class TripPlanResponse(BaseModel):
    """Everything the trip detail screen derives from a trip."""

    totals: TripTotals
    daily_plan: list[DailyPlanEntry]
    schedule: list[DailyScheduleEntry]
    fuel_settings: FuelSettings
    fuel_plan: FuelPlan | None = None
    segment_notes: list[SegmentNote] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Polyline and elevation models
# ---------------------------------------------------------------------------


class PolylineRequest(BaseModel):
    """Request body for the /decode-polyline endpoint."""

    encoded: str


class PolylineResponse(BaseModel):
    """Response body for the /decode-polyline endpoint."""

    points: list[LatLng]


class ElevationSamplesRequest(BaseModel):
    """Request body for the /elevation-samples endpoint."""

    encoded: str
    max_samples: int = Field(default=128, ge=1, le=512)


class ElevationResult(BaseModel):
    """One result entry as returned by the Google Elevation API."""

    location: LatLng
    elevation: float


class ElevationProfileRequest(BaseModel):
    """Request body for the /elevation-profile endpoint."""

    results: list[ElevationResult]


class ElevationPoint(BaseModel):
    """One profile sample: distance along the route and its elevation."""

    distance_meters: float
    elevation_meters: float


class Climb(BaseModel):
    """A stretch of road with a notable cumulative gain."""

    start_km: float
    end_km: float
    gain_meters: float


class ElevationProfileResponse(BaseModel):
    """Response body for the /elevation-profile endpoint."""

    elevation_profile: list[ElevationPoint]
    total_ascent_meters: int
    total_descent_meters: int
    max_elevation_meters: int
    climbs: list[Climb] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Directions route models
# ---------------------------------------------------------------------------


class DirectionsValue(BaseModel):
    """A Directions API ``{value, text}`` pair (metres or seconds)."""

    value: float | None = None
    text: str | None = None


class DirectionsPolyline(BaseModel):
    """A Directions API ``{points}`` wrapper around an encoded polyline."""

    points: str = ""


class DirectionsStep(BaseModel):
    """One turn-by-turn step; only its geometry is used."""

    polyline: DirectionsPolyline | None = None


class DirectionsLeg(BaseModel):
    """The stretch of a Directions route between two consecutive waypoints."""

    distance: DirectionsValue | None = None
    duration: DirectionsValue | None = None
    steps: list[DirectionsStep] = Field(default_factory=list)


class DirectionsRoute(BaseModel):
    """The subset of a Directions API route that a route segment needs.

    Unknown keys in the API payload are ignored.
    """

    legs: list[DirectionsLeg] = Field(default_factory=list)
    overview_polyline: DirectionsPolyline | None = None


class RouteSegmentRequest(BaseModel):
    """Request body for the /route-segment endpoint.

    ``route`` is ``routes[0]`` of a Directions API response the caller fetched.
    """

    route: DirectionsRoute
    start_waypoint_id: str | None = None
    end_waypoint_id: str | None = None


# ---------------------------------------------------------------------------
# Checklist models
# ---------------------------------------------------------------------------


class ChecklistItem(BaseModel):
    """One packing or preparation task."""

    label: str
    is_done: bool = False


class ChecklistTemplate(BaseModel):
    """A named starter checklist for a style of trip."""

    id: str
    label: str
    items: list[ChecklistItem]


class ChecklistRequest(BaseModel):
    """Request body for the /checklist endpoint."""

    items: list[dict[str, Any]] = Field(default_factory=list)
    use_default_when_empty: bool = False
