"""Tests for elevation.py."""

import pytest

import elevation
from models import ElevationPoint, ElevationResult, LatLng

# Longitude step that is ~1 km along the equator.
_KM_IN_DEGREES = 1 / 111.19492664455873


def _points(*pairs):
    """Builds a profile from (distance_m, elevation_m) pairs."""
    return [ElevationPoint(distance_meters=d, elevation_meters=e) for d, e in pairs]


def _results(elevations):
    return [
        ElevationResult(location=LatLng(lat=0.0, lng=i * _KM_IN_DEGREES), elevation=e)
        for i, e in enumerate(elevations)
    ]


# ---------------------------------------------------------------------------
# Unit tests: build_elevation_profile
# ---------------------------------------------------------------------------


def test_build_profile_accumulates_distance():
    profile = elevation.build_elevation_profile(_results([10, 20, 15]))

    assert [p.elevation_meters for p in profile] == [10, 20, 15]
    assert profile[0].distance_meters == 0
    assert profile[1].distance_meters == pytest.approx(1000)
    assert profile[2].distance_meters == pytest.approx(2000)


def test_build_profile_single_result():
    profile = elevation.build_elevation_profile(_results([512]))
    assert len(profile) == 1
    assert profile[0].distance_meters == 0


def test_build_profile_raises_on_empty_results():
    with pytest.raises(ValueError, match="No elevation data"):
        elevation.build_elevation_profile([])


# ---------------------------------------------------------------------------
# Unit tests: summarize_profile
# ---------------------------------------------------------------------------


def test_summarize_profile():
    profile = _points((0, 100), (1000, 150), (2000, 120), (3000, 180.4))
    ascent, descent, max_elevation = elevation.summarize_profile(profile)
    assert ascent == 110
    assert descent == 30
    assert max_elevation == 180


def test_summarize_profile_max_can_be_first_point():
    profile = _points((0, 900), (1000, 400))
    assert elevation.summarize_profile(profile) == (0, 500, 900)


def test_summarize_profile_rounds_halves_up():
    profile = _points((0, 100.0), (10, 102.5))
    assert elevation.summarize_profile(profile) == (3, 0, 103)


def test_summarize_profile_rounds_half_metre_descent_up():
    profile = _points((0, 200.5), (10, 150.0))
    assert elevation.summarize_profile(profile) == (0, 51, 201)


def test_summarize_profile_empty():
    assert elevation.summarize_profile([]) == (0, 0, 0)


# ---------------------------------------------------------------------------
# Unit tests: detect_climbs
# ---------------------------------------------------------------------------


def test_detect_climbs_requires_gain_and_length():
    # 100 m per km: the 300 m gain is reached at 3 km, but the climb is only
    # emitted once it is also 5 km long.
    profile = _points(*[(i * 1000, i * 100) for i in range(8)])
    climbs = elevation.detect_climbs(profile)

    assert len(climbs) == 1
    assert climbs[0].start_km == 0
    assert climbs[0].end_km == 5
    assert climbs[0].gain_meters == 500


def test_detect_climbs_descents_do_not_reset_window():
    profile = _points((0, 0), (1000, 200), (2000, 100), (3000, 250), (6000, 260))
    climbs = elevation.detect_climbs(profile)

    assert len(climbs) == 1
    assert climbs[0].end_km == 6
    assert climbs[0].gain_meters == 360


def test_detect_climbs_restarts_after_each_climb():
    profile = _points((0, 0), (5000, 400), (10000, 800))
    climbs = elevation.detect_climbs(profile)

    assert [(c.start_km, c.end_km, c.gain_meters) for c in climbs] == [
        (0, 5, 400),
        (5, 10, 400),
    ]


def test_detect_climbs_flat_profile():
    profile = _points(*[(i * 1000, 250) for i in range(20)])
    assert elevation.detect_climbs(profile) == []


def test_detect_climbs_short_profiles():
    assert elevation.detect_climbs([]) == []
    assert elevation.detect_climbs(_points((0, 0))) == []


def test_detect_climbs_custom_thresholds():
    profile = _points((0, 0), (1000, 60), (2000, 120))
    climbs = elevation.detect_climbs(profile, gain_threshold_m=100, min_length_m=1500)
    assert [(c.start_km, c.end_km) for c in climbs] == [(0, 2)]


# ---------------------------------------------------------------------------
# Integration test: analyze()
# ---------------------------------------------------------------------------


def test_analyze_builds_full_response():
    result = elevation.analyze(_results([100, 400, 350, 900, 900, 1000, 950]))

    assert len(result.elevation_profile) == 7
    assert result.total_ascent_meters == 950
    assert result.total_descent_meters == 100
    assert result.max_elevation_meters == 1000
    # ~5 km reached at the sixth sample with 950 m of gain.
    assert len(result.climbs) == 1
    assert result.climbs[0].gain_meters == 950
