"""Trip-level derivations: totals, daily plan, riding schedule and fuel legs.

Everything here is a pure function over the waypoints a rider has placed.
Distances between waypoints are straight-line (haversine) estimates; the
routed totals from the Directions API are only used to turn distance shares
into riding time.
"""

import logging
import math
from typing import Any, Iterable

import geo
from models import (
    DailyPlanEntry,
    DailyScheduleEntry,
    DirectionsRoute,
    DirectionsValue,
    FuelLeg,
    FuelPlan,
    FuelRisk,
    FuelSettings,
    Motorcycle,
    RouteSegment,
    SegmentNote,
    TripTotals,
    Waypoint,
    WaypointType,
)

logger = logging.getLogger(__name__)

# -- Fuel -----------------------------------------------------------------
# When no reserve is configured, warn once a leg passes this share of range.
DEFAULT_RESERVE_RATIO: float = 0.8

# -- Schedule -------------------------------------------------------------
DEFAULT_EARLIEST_DEPARTURE_HOUR: float = 8
DEFAULT_LATEST_ARRIVAL_HOUR: float = 20

# -- Segment notes --------------------------------------------------------
SEGMENT_RISK_LEVELS: frozenset = frozenset({"low", "medium", "high", "extreme"})


def round_half_up(value: float) -> int:
    """Rounds halves toward +infinity (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def _is_finite_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------


def compute_trip_totals(segments: Iterable[RouteSegment]) -> TripTotals:
    """Sums distance and duration over route segments; gaps count as zero."""
    total_distance = 0.0
    total_duration = 0.0
    for segment in segments:
        total_distance += segment.distance_meters or 0
        total_duration += segment.duration_seconds or 0
    return TripTotals(
        total_distance_meters=total_distance,
        total_duration_seconds=total_duration,
    )


def _leg_value(value: DirectionsValue | None) -> float:
    if value is None or value.value is None:
        return 0.0
    return value.value


def route_segment_from_directions(
    route: DirectionsRoute,
    start_waypoint_id: str | None = None,
    end_waypoint_id: str | None = None,
) -> RouteSegment:
    """Shapes one Directions API route into a single trip-wide segment.

    Leg totals are summed, skipping legs without a value. The polyline is
    stitched from the step polylines because the overview polyline is heavily
    simplified; the overview is only used when no step geometry is present.

    Raises:
        ValueError: If the route has no legs, or a step polyline is corrupt.
    """
    if not route.legs:
        raise ValueError("Directions route has no legs.")

    distance_m = 0.0
    duration_s = 0.0
    for leg in route.legs:
        distance_m += _leg_value(leg.distance)
        duration_s += _leg_value(leg.duration)

    polyline = _build_detailed_polyline(route) or None
    logger.info(
        "Route segment shaped: %d legs, %.0fm, %.0fs",
        len(route.legs),
        distance_m,
        duration_s,
    )
    return RouteSegment(
        start_waypoint_id=start_waypoint_id,
        end_waypoint_id=end_waypoint_id,
        distance_meters=distance_m,
        duration_seconds=duration_s,
        polyline=polyline,
    )


def _build_detailed_polyline(route: DirectionsRoute) -> str:
    """Concatenates step polylines, dropping points shared at step boundaries."""
    all_points: list[tuple[float, float]] = []
    for leg in route.legs:
        for step in leg.steps:
            if step.polyline is None or not step.polyline.points:
                continue
            step_encoded = step.polyline.points
            step_points = geo.decode_polyline(step_encoded)
            if all_points and step_points and step_points[0] == all_points[-1]:
                step_points = step_points[1:]
            all_points.extend(step_points)

    if all_points:
        return geo.encode_polyline(all_points)

    if route.overview_polyline is None:
        return ""
    return route.overview_polyline.points


# ---------------------------------------------------------------------------
# Daily plan
# ---------------------------------------------------------------------------


def effective_days(waypoints: list[Waypoint]) -> list[int]:
    """Assigns a riding day to every waypoint.

    Walks forward carrying the last explicit ``day_index`` (>= 1), starting
    from day 1, so trips with partial or no day assignments still produce a
    contiguous range of days.
    """
    days: list[int] = []
    current_day = 1
    for wp in waypoints:
        if wp.day_index is not None and wp.day_index >= 1:
            current_day = wp.day_index
        days.append(current_day)
    return days


def _segment_distances_km(waypoints: list[Waypoint]) -> list[float]:
    return [
        geo.haversine_km(a.lat, a.lng, b.lat, b.lng)
        for a, b in zip(waypoints, waypoints[1:])
    ]


def compute_daily_plan(
    waypoints: list[Waypoint],
    total_distance_meters: float | None = None,
    total_duration_seconds: float | None = None,
) -> list[DailyPlanEntry]:
    """Splits the trip into per-day distance and riding time.

    Each segment wp[i] -> wp[i+1] counts toward the day of wp[i]. Riding time
    is the routed total duration shared out in proportion to each day's
    distance; it stays zero until the route has been calculated.
    """
    if len(waypoints) < 2:
        return []

    total_km = (total_distance_meters or 0) / 1000
    total_hours = (total_duration_seconds or 0) / 3600

    days = effective_days(waypoints)
    per_day_km: dict[int, float] = {}
    for i, distance_km in enumerate(_segment_distances_km(waypoints)):
        per_day_km[days[i]] = per_day_km.get(days[i], 0.0) + distance_km

    entries: list[DailyPlanEntry] = []
    for day in range(1, max(max(days), 1) + 1):
        distance_km = per_day_km.get(day, 0.0)
        hours = 0.0
        if total_km > 0 and total_hours > 0:
            hours = total_hours * distance_km / total_km
        entries.append(
            DailyPlanEntry(day=day, distance_km=distance_km, duration_hours=hours)
        )
    return entries


def format_clock(hours: float) -> str:
    """Formats fractional hours since midnight as a 24-hour HH:MM string."""
    total_minutes = round_half_up(hours * 60)
    h, m = divmod(total_minutes, 60)
    return f"{h % 24:02d}:{m:02d}"


def compute_daily_schedule(
    plan: list[DailyPlanEntry],
    earliest_departure_hour: float | None = None,
    latest_arrival_hour: float | None = None,
    planned_daily_ride_hours: float | None = None,
) -> list[DailyScheduleEntry]:
    """Lays each planned day out from the earliest departure hour.

    A day is ``heavy`` when it arrives after the latest arrival hour or rides
    longer than the rider's planned daily hours.
    """
    depart = (
        earliest_departure_hour
        if earliest_departure_hour is not None
        else DEFAULT_EARLIEST_DEPARTURE_HOUR
    )
    latest = (
        latest_arrival_hour
        if latest_arrival_hour is not None
        else DEFAULT_LATEST_ARRIVAL_HOUR
    )

    schedule: list[DailyScheduleEntry] = []
    for entry in plan:
        ride = entry.duration_hours
        arrive = depart + ride
        is_late = arrive > latest
        over_target = (
            planned_daily_ride_hours is not None and ride > planned_daily_ride_hours
        )
        schedule.append(
            DailyScheduleEntry(
                day=entry.day,
                ride_hours=ride,
                depart=format_clock(depart),
                arrive=format_clock(arrive),
                is_late=is_late,
                over_target=over_target,
                heavy=is_late or over_target,
            )
        )
    return schedule


# ---------------------------------------------------------------------------
# Fuel
# ---------------------------------------------------------------------------


def resolve_fuel_settings(
    fuel_range_km: float | None = None,
    fuel_reserve_km: float | None = None,
    motorcycle: Motorcycle | None = None,
) -> FuelSettings:
    """Chooses the fuel range and reserve a trip plans against.

    Explicit trip values win. Otherwise the range comes from the motorcycle's
    preferred range, then its estimated range, and the reserve from its
    preferred reserve, then 80% of that range. Values are whole kilometres.
    """
    derived_range: int | None = None
    derived_reserve: int | None = None
    if motorcycle is not None:
        if _is_finite_number(motorcycle.preferred_range_km):
            base_range = motorcycle.preferred_range_km
        elif _is_finite_number(motorcycle.estimated_range_km):
            base_range = motorcycle.estimated_range_km
        else:
            base_range = None
        if base_range is not None:
            derived_range = round_half_up(base_range)
            if _is_finite_number(motorcycle.preferred_reserve_km):
                base_reserve = motorcycle.preferred_reserve_km
            else:
                base_reserve = round_half_up(base_range * DEFAULT_RESERVE_RATIO)
            derived_reserve = round_half_up(base_reserve)

    return FuelSettings(
        fuel_range_km=(
            round_half_up(fuel_range_km)
            if _is_finite_number(fuel_range_km)
            else derived_range
        ),
        fuel_reserve_km=(
            round_half_up(fuel_reserve_km)
            if _is_finite_number(fuel_reserve_km)
            else derived_reserve
        ),
    )


def _classify_fuel_leg(
    distance_km: float,
    fuel_range_km: float | None,
    reserve_km: float | None,
) -> FuelRisk:
    if fuel_range_km and distance_km > fuel_range_km:
        return FuelRisk.HIGH
    if reserve_km and distance_km > reserve_km:
        return FuelRisk.MEDIUM
    return FuelRisk.LOW


def compute_fuel_plan(
    waypoints: list[Waypoint],
    fuel_range_km: float | None = None,
    fuel_reserve_km: float | None = None,
) -> FuelPlan | None:
    """Measures every leg between consecutive fuel stops.

    Returns None when the trip has fewer than two fuel waypoints. A leg is
    ``high`` risk beyond the bike's range and ``medium`` beyond the reserve
    (80% of range when no reserve is set).
    """
    fuel_stops = [
        (index, wp)
        for index, wp in enumerate(waypoints)
        if wp.type == WaypointType.FUEL
    ]
    if len(fuel_stops) < 2:
        return None

    segment_km = _segment_distances_km(waypoints)
    if fuel_reserve_km is not None:
        reserve = fuel_reserve_km
    elif fuel_range_km:
        reserve = round_half_up(fuel_range_km * DEFAULT_RESERVE_RATIO)
    else:
        reserve = None

    legs: list[FuelLeg] = []
    longest_leg_km: float | None = None
    for n, ((start_idx, start), (end_idx, end)) in enumerate(
        zip(fuel_stops, fuel_stops[1:]), start=1
    ):
        distance_km = sum(segment_km[start_idx:end_idx])
        if longest_leg_km is None or distance_km > longest_leg_km:
            longest_leg_km = distance_km

        start_label = start.name or f"Fuel {n}"
        end_label = end.name or f"Fuel {n + 1}"
        legs.append(
            FuelLeg(
                label=f"{start_label} → {end_label}",
                distance_km=distance_km,
                risk=_classify_fuel_leg(distance_km, fuel_range_km, reserve),
            )
        )

    high_risk = sum(1 for leg in legs if leg.risk == FuelRisk.HIGH)
    if high_risk:
        logger.info("Fuel plan has %d leg(s) beyond range", high_risk)
    return FuelPlan(longest_leg_km=longest_leg_km, legs=legs)


# ---------------------------------------------------------------------------
# Segment notes
# ---------------------------------------------------------------------------


def normalize_segment_notes(raw: Iterable[Any]) -> list[SegmentNote]:
    """Coerces loosely-typed saved segment notes into ``SegmentNote`` models.

    Unknown risk levels become None. Integral floats such as ``2.0`` (as a
    JSON round trip may produce) are accepted as indexes; any other missing or
    non-integer index falls back to the note's position in the list.
    """
    notes: list[SegmentNote] = []
    for position, item in enumerate(raw):
        if not isinstance(item, dict):
            item = {}
        index = item.get("index")
        risk = item.get("risk")
        note = item.get("note")
        if isinstance(index, float) and index.is_integer():
            index = int(index)
        elif not isinstance(index, int) or isinstance(index, bool):
            index = position
        notes.append(
            SegmentNote(
                index=index,
                risk=risk if isinstance(risk, str) and risk in SEGMENT_RISK_LEVELS else None,
                note=note if isinstance(note, str) else "",
            )
        )
    return notes
