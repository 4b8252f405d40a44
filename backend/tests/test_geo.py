"""Tests for geo.py."""

import pytest

import geo

# Google's reference example from the polyline algorithm documentation.
_REFERENCE_ENCODED = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"
_REFERENCE_POINTS = [(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)]

# One degree of longitude along the equator.
_KM_PER_DEGREE = 111.19492664455873


# ---------------------------------------------------------------------------
# Unit tests: distances
# ---------------------------------------------------------------------------


def test_haversine_km_one_degree_on_equator():
    assert geo.haversine_km(0, 0, 0, 1) == pytest.approx(_KM_PER_DEGREE)


def test_haversine_m_matches_km():
    km = geo.haversine_km(51.5, -0.12, 48.85, 2.35)
    assert geo.haversine_m(51.5, -0.12, 48.85, 2.35) == pytest.approx(km * 1000)


def test_haversine_same_point_is_zero():
    assert geo.haversine_km(45.0, 7.0, 45.0, 7.0) == 0


# ---------------------------------------------------------------------------
# Unit tests: polyline
# ---------------------------------------------------------------------------


def test_decode_polyline_reference_string():
    points = geo.decode_polyline(_REFERENCE_ENCODED)
    assert len(points) == 3
    for (lat, lng), (exp_lat, exp_lng) in zip(points, _REFERENCE_POINTS):
        assert lat == pytest.approx(exp_lat)
        assert lng == pytest.approx(exp_lng)


def test_decode_polyline_empty_string():
    assert geo.decode_polyline("") == []


def test_decode_polyline_raises_on_truncated_input():
    # Latitude only, longitude missing.
    with pytest.raises(ValueError, match="truncated"):
        geo.decode_polyline("_p~iF")


def test_encode_polyline_reference_points():
    assert geo.encode_polyline(_REFERENCE_POINTS) == _REFERENCE_ENCODED


def test_encode_polyline_empty():
    assert geo.encode_polyline([]) == ""


# ---------------------------------------------------------------------------
# Unit tests: sample_path
# ---------------------------------------------------------------------------


def test_sample_path_short_path_is_unchanged():
    path = [(0.0, float(i)) for i in range(10)]
    assert geo.sample_path(path) == path


def test_sample_path_strides_and_keeps_last_point():
    path = [(0.0, float(i)) for i in range(300)]
    samples = geo.sample_path(path, max_samples=128)
    # step = 300 // 128 = 2 -> indexes 0..298, then the final point.
    assert samples[0] == path[0]
    assert samples[1] == path[2]
    assert samples[-1] == path[-1]
    assert len(samples) == 151


def test_sample_path_does_not_duplicate_final_point():
    path = [(0.0, float(i)) for i in range(257)]
    samples = geo.sample_path(path, max_samples=128)
    # step = 2 lands exactly on index 256.
    assert samples[-1] == path[-1]
    assert samples.count(path[-1]) == 1
    assert len(samples) == 129


def test_sample_path_empty():
    assert geo.sample_path([]) == []


def test_sample_path_rejects_zero_samples():
    with pytest.raises(ValueError):
        geo.sample_path([(0.0, 0.0)], max_samples=0)
