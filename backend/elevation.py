"""Elevation profile and climb detection for a calculated route.

The caller samples the route polyline (see ``geo.sample_path``), sends the
samples to the Elevation API, and posts the results here. This module turns
those results into a distance/elevation profile, ascent and descent totals,
and a list of notable climbs.
"""

import logging

import geo
import trip_metrics
from models import Climb, ElevationPoint, ElevationProfileResponse, ElevationResult

logger = logging.getLogger(__name__)

# A climb must gain at least this much...
CLIMB_GAIN_THRESHOLD_M: float = 300
# ...over at least this much road.
CLIMB_MIN_LENGTH_M: float = 5000


def build_elevation_profile(results: list[ElevationResult]) -> list[ElevationPoint]:
    """Converts Elevation API results into cumulative-distance profile points.

    Raises:
        ValueError: If no results were supplied.
    """
    if not results:
        raise ValueError("No elevation data returned.")

    profile: list[ElevationPoint] = []
    distance_m = 0.0
    previous = results[0].location
    for i, result in enumerate(results):
        current = result.location
        if i > 0:
            distance_m += geo.haversine_m(
                previous.lat, previous.lng, current.lat, current.lng
            )
        profile.append(
            ElevationPoint(distance_meters=distance_m, elevation_meters=result.elevation)
        )
        previous = current
    return profile


def summarize_profile(points: list[ElevationPoint]) -> tuple[int, int, int]:
    """Returns (total ascent, total descent, max elevation) in whole metres.

    Halves round up, so a 102.5 m summit reports as 103 m.
    """
    if not points:
        return 0, 0, 0

    ascent = 0.0
    descent = 0.0
    max_elevation = points[0].elevation_meters
    for cur, nxt in zip(points, points[1:]):
        diff = nxt.elevation_meters - cur.elevation_meters
        if diff > 0:
            ascent += diff
        elif diff < 0:
            descent -= diff
        max_elevation = max(max_elevation, nxt.elevation_meters)
    return (
        trip_metrics.round_half_up(ascent),
        trip_metrics.round_half_up(descent),
        trip_metrics.round_half_up(max_elevation),
    )


def detect_climbs(
    points: list[ElevationPoint],
    gain_threshold_m: float = CLIMB_GAIN_THRESHOLD_M,
    min_length_m: float = CLIMB_MIN_LENGTH_M,
) -> list[Climb]:
    """Finds stretches that gain enough height over enough distance.

    Uphill gain accumulates from the start of a window. As soon as it clears
    ``gain_threshold_m`` over at least ``min_length_m`` the window is emitted
    as a climb and a new window opens at the following sample. Downhill
    samples do not reset the window. Scanning stops when a window reaches the
    end of the profile without qualifying.
    """
    climbs: list[Climb] = []
    window_start = 0
    last = len(points) - 1

    while window_start < last:
        gain = 0.0
        start_distance = points[window_start].distance_meters
        found = False
        for i in range(window_start, last):
            diff = points[i + 1].elevation_meters - points[i].elevation_meters
            if diff > 0:
                gain += diff
            end_distance = points[i + 1].distance_meters
            if gain >= gain_threshold_m and end_distance - start_distance >= min_length_m:
                climbs.append(
                    Climb(
                        start_km=start_distance / 1000,
                        end_km=end_distance / 1000,
                        gain_meters=gain,
                    )
                )
                window_start = i + 1
                found = True
                break
        if not found:
            break

    return climbs


def analyze(results: list[ElevationResult]) -> ElevationProfileResponse:
    """Builds the full elevation response for a sampled route."""
    profile = build_elevation_profile(results)
    ascent, descent, max_elevation = summarize_profile(profile)
    climbs = detect_climbs(profile)
    logger.info(
        "Elevation profile: %d samples, +%dm/-%dm, max %dm, %d climbs",
        len(profile),
        ascent,
        descent,
        max_elevation,
        len(climbs),
    )
    return ElevationProfileResponse(
        elevation_profile=profile,
        total_ascent_meters=ascent,
        total_descent_meters=descent,
        max_elevation_meters=max_elevation,
        climbs=climbs,
    )
