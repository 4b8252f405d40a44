"""GPX export of a trip's waypoints, one track per riding day."""

import logging
import os
import re
from datetime import datetime, timezone

import gpxpy
import gpxpy.gpx

import trip_metrics
from models import Trip

logger = logging.getLogger(__name__)

DEFAULT_GPX_CREATOR: str = "World Moto Trip Planner"
GPX_MEDIA_TYPE: str = "application/gpx+xml; charset=utf-8"

# Track point coordinates are written with this many decimals (~0.1 m).
COORDINATE_DECIMALS: int = 6


def build_trip_gpx(trip: Trip, *, now: datetime | None = None) -> str:
    """Renders ``trip`` as a GPX 1.1 document.

    Waypoints are grouped by their effective riding day; each day with at
    least one waypoint becomes a ``<trk>`` named "<trip> - Day <n>".

    Args:
        trip: The trip to export. Needs at least two waypoints.
        now: Metadata timestamp used when the trip has no start date.

    Raises:
        ValueError: If the trip has fewer than two waypoints.
    """
    if len(trip.waypoints) < 2:
        raise ValueError("At least two waypoints are required to export GPX")

    trip_name = trip.name or "Trip"
    gpx = gpxpy.gpx.GPX()
    gpx.creator = os.environ.get("GPX_CREATOR", DEFAULT_GPX_CREATOR)
    gpx.name = trip_name
    if trip.description:
        gpx.description = trip.description
    gpx.time = trip.start_date or now or datetime.now(timezone.utc)

    days = trip_metrics.effective_days(trip.waypoints)
    for day in range(1, max(days) + 1):
        day_waypoints = [
            wp for wp, wp_day in zip(trip.waypoints, days) if wp_day == day
        ]
        if not day_waypoints:
            continue

        track = gpxpy.gpx.GPXTrack(name=f"{trip_name} - Day {day}")
        segment = gpxpy.gpx.GPXTrackSegment()
        track.segments.append(segment)
        for wp in day_waypoints:
            segment.points.append(
                gpxpy.gpx.GPXTrackPoint(
                    latitude=round(wp.lat, COORDINATE_DECIMALS),
                    longitude=round(wp.lng, COORDINATE_DECIMALS),
                    name=wp.name or None,
                )
            )
        gpx.tracks.append(track)

    logger.info(
        "Exported GPX for %r: %d waypoints in %d tracks",
        trip_name,
        len(trip.waypoints),
        len(gpx.tracks),
    )
    return gpx.to_xml(version="1.1")


def gpx_filename(trip_name: str | None) -> str:
    """Returns a download-safe ``<slug>.gpx`` filename for a trip name."""
    slug = re.sub(r"[^a-z0-9]+", "-", (trip_name or "").lower()).strip("-")
    return f"{slug or 'trip'}.gpx"
