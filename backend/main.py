"""World Moto Trip Planner backend service.

Exposes endpoints that derive a trip's daily plan, riding schedule, fuel legs,
elevation profile and GPX export from trip data posted by the planner
frontend. The service is stateless: trips are stored and routed elsewhere.
"""

import logging
import os

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

import checklists
import elevation
import geo
import gpx_export
import trip_metrics
from models import (
    ChecklistItem,
    ChecklistRequest,
    ChecklistTemplate,
    DailyPlanEntry,
    DailyPlanRequest,
    ElevationProfileRequest,
    ElevationProfileResponse,
    ElevationSamplesRequest,
    FuelPlanRequest,
    FuelPlanResponse,
    LatLng,
    PolylineRequest,
    PolylineResponse,
    RouteSegment,
    RouteSegmentRequest,
    Trip,
    TripPlanResponse,
)

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())

app = FastAPI(
    title="World Moto Trip Planner Backend",
    description="Daily plans, fuel legs, elevation and GPX for motorcycle trips.",
    version="0.4.0",
)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint used to verify the service is live."""
    return {"status": "ok"}


@app.post("/trip-plan", response_model=TripPlanResponse)
async def trip_plan(trip: Trip) -> TripPlanResponse:
    """Derives everything the trip detail screen shows from one trip.

    Totals come from the trip's route segments when it has any, otherwise
    from the totals stored on the trip. Fuel settings fall back to the
    attached motorcycle when the trip sets none.

    Args:
        trip: The full trip with waypoints, segments and rider settings.

    Returns:
        ``TripPlanResponse`` with totals, daily plan, schedule, fuel settings,
        fuel plan (None with fewer than two fuel stops) and segment notes.

    Raises:
        HTTPException 500: On an unexpected failure.
    """
    try:
        if trip.route_segments:
            totals = trip_metrics.compute_trip_totals(trip.route_segments)
        else:
            totals = trip_metrics.compute_trip_totals([
                RouteSegment(
                    distance_meters=trip.total_distance_meters,
                    duration_seconds=trip.total_duration_seconds,
                )
            ])
        daily_plan = trip_metrics.compute_daily_plan(
            trip.waypoints,
            totals.total_distance_meters,
            totals.total_duration_seconds,
        )
        schedule = trip_metrics.compute_daily_schedule(
            daily_plan,
            earliest_departure_hour=trip.earliest_departure_hour,
            latest_arrival_hour=trip.latest_arrival_hour,
            planned_daily_ride_hours=trip.planned_daily_ride_hours,
        )
        settings = trip_metrics.resolve_fuel_settings(
            trip.fuel_range_km, trip.fuel_reserve_km, trip.motorcycle
        )
        fuel_plan = trip_metrics.compute_fuel_plan(
            trip.waypoints, settings.fuel_range_km, settings.fuel_reserve_km
        )
        return TripPlanResponse(
            totals=totals,
            daily_plan=daily_plan,
            schedule=schedule,
            fuel_settings=settings,
            fuel_plan=fuel_plan,
            segment_notes=trip_metrics.normalize_segment_notes(trip.segment_notes),
        )
    except Exception as exc:  # noqa: BLE001
        logging.exception("trip_plan failed")
        raise HTTPException(
            status_code=500,
            detail="Failed to build the trip plan.",
        ) from exc


@app.post("/daily-plan", response_model=list[DailyPlanEntry])
async def daily_plan(request: DailyPlanRequest) -> list[DailyPlanEntry]:
    """Splits waypoints into per-day distance and riding time.

    Returns an empty list when fewer than two waypoints are given.
    """
    return trip_metrics.compute_daily_plan(
        request.waypoints,
        request.total_distance_meters,
        request.total_duration_seconds,
    )


@app.post("/fuel-plan", response_model=FuelPlanResponse)
async def fuel_plan(request: FuelPlanRequest) -> FuelPlanResponse:
    """Measures the legs between fuel stops against the bike's range.

    Args:
        request: Waypoints plus explicit range/reserve, or a motorcycle to
            derive them from.

    Returns:
        ``FuelPlanResponse`` with the resolved settings and the plan, which
        is None when fewer than two waypoints are fuel stops.
    """
    settings = trip_metrics.resolve_fuel_settings(
        request.fuel_range_km, request.fuel_reserve_km, request.motorcycle
    )
    plan = trip_metrics.compute_fuel_plan(
        request.waypoints, settings.fuel_range_km, settings.fuel_reserve_km
    )
    return FuelPlanResponse(settings=settings, plan=plan)


@app.post("/decode-polyline", response_model=PolylineResponse)
async def decode_polyline(request: PolylineRequest) -> PolylineResponse:
    """Decodes a Google encoded polyline into lat/lng points.

    Raises:
        HTTPException 400: If the polyline is truncated.
    """
    try:
        points = geo.decode_polyline(request.encoded)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return PolylineResponse(points=[LatLng(lat=lat, lng=lng) for lat, lng in points])


@app.post("/elevation-samples", response_model=PolylineResponse)
async def elevation_samples(request: ElevationSamplesRequest) -> PolylineResponse:
    """Picks the route points to send to the Elevation API.

    Raises:
        HTTPException 400: If the polyline is truncated or decodes to fewer
            than two points.
    """
    try:
        path = geo.decode_polyline(request.encoded)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if len(path) < 2:
        raise HTTPException(
            status_code=400,
            detail="Decoded route path is too short for elevation profile",
        )
    samples = geo.sample_path(path, request.max_samples)
    return PolylineResponse(points=[LatLng(lat=lat, lng=lng) for lat, lng in samples])


@app.post("/elevation-profile", response_model=ElevationProfileResponse)
async def elevation_profile(
    request: ElevationProfileRequest,
) -> ElevationProfileResponse:
    """Builds the elevation profile, ascent totals and notable climbs.

    Args:
        request: Contains ``results``, the Elevation API results for the
            sampled route points, in route order.

    Raises:
        HTTPException 400: If no results are supplied.
        HTTPException 500: On an unexpected failure.
    """
    try:
        return elevation.analyze(request.results)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        logging.exception("elevation.analyze failed")
        raise HTTPException(
            status_code=500,
            detail="Failed to calculate elevation profile.",
        ) from exc


@app.post("/route-segment", response_model=RouteSegment)
async def route_segment(request: RouteSegmentRequest) -> RouteSegment:
    """Shapes a Directions API route into the trip's single route segment.

    Raises:
        HTTPException 400: If the route has no legs or a bad step polyline.
    """
    try:
        return trip_metrics.route_segment_from_directions(
            request.route,
            start_waypoint_id=request.start_waypoint_id,
            end_waypoint_id=request.end_waypoint_id,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        logging.exception("route_segment_from_directions failed")
        raise HTTPException(
            status_code=500,
            detail="Failed to calculate route.",
        ) from exc


@app.post("/export-gpx")
async def export_gpx(trip: Trip) -> Response:
    """Exports the trip as a GPX download with one track per riding day.

    Raises:
        HTTPException 400: If the trip has fewer than two waypoints.
        HTTPException 500: On an unexpected failure.
    """
    try:
        document = gpx_export.build_trip_gpx(trip)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        logging.exception("gpx_export.build_trip_gpx failed")
        raise HTTPException(
            status_code=500,
            detail="Failed to export GPX.",
        ) from exc

    filename = gpx_export.gpx_filename(trip.name)
    return Response(
        content=document,
        media_type=gpx_export.GPX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/checklist-templates", response_model=list[ChecklistTemplate])
async def checklist_templates() -> list[ChecklistTemplate]:
    """Lists the starter checklists a rider can apply to a trip."""
    return checklists.list_templates()


@app.post("/checklist", response_model=list[ChecklistItem])
async def checklist(request: ChecklistRequest) -> list[ChecklistItem]:
    """Cleans up a checklist before it is saved.

    Blank items are dropped. When nothing is left and
    ``use_default_when_empty`` is set, the default ADV checklist is returned.
    """
    items = checklists.sanitize_checklist(request.items)
    if not items and request.use_default_when_empty:
        return checklists.default_checklist()
    return items
