"""Tests for gpx_export.py.

Generated documents are parsed back with gpxpy rather than compared as text.
"""

from datetime import datetime, timezone

import gpxpy
import pytest

import gpx_export
from models import Trip, Waypoint


def _trip(**overrides):
    fields = dict(
        name="Trans-Alps Loop",
        description="Four passes in two days",
        start_date=datetime(2026, 6, 1, 7, 30, tzinfo=timezone.utc),
        waypoints=[
            Waypoint(lat=46.1234567, lng=7.1234567, name="Martigny", day_index=1),
            Waypoint(lat=46.2, lng=7.5),
            Waypoint(lat=46.5, lng=8.0, name="Andermatt", day_index=2),
            Waypoint(lat=46.6, lng=8.4),
        ],
    )
    fields.update(overrides)
    return Trip(**fields)


def test_build_trip_gpx_one_track_per_day():
    gpx = gpxpy.parse(gpx_export.build_trip_gpx(_trip()))

    assert [t.name for t in gpx.tracks] == [
        "Trans-Alps Loop - Day 1",
        "Trans-Alps Loop - Day 2",
    ]
    assert [len(t.segments[0].points) for t in gpx.tracks] == [2, 2]


def test_build_trip_gpx_is_gpx_1_1():
    xml = gpx_export.build_trip_gpx(_trip())
    assert 'version="1.1"' in xml
    assert "http://www.topografix.com/GPX/1/1" in xml


def test_build_trip_gpx_metadata():
    gpx = gpxpy.parse(gpx_export.build_trip_gpx(_trip()))

    assert gpx.creator == "World Moto Trip Planner"
    assert gpx.name == "Trans-Alps Loop"
    assert gpx.description == "Four passes in two days"
    assert gpx.time.year == 2026


def test_build_trip_gpx_point_names_and_precision():
    gpx = gpxpy.parse(gpx_export.build_trip_gpx(_trip()))
    first, second = gpx.tracks[0].segments[0].points

    assert first.name == "Martigny"
    assert first.latitude == pytest.approx(46.123457)
    assert first.longitude == pytest.approx(7.123457)
    assert second.name is None


def test_build_trip_gpx_skips_days_without_waypoints():
    trip = _trip(
        waypoints=[
            Waypoint(lat=46.0, lng=7.0, day_index=1),
            Waypoint(lat=46.1, lng=7.1, day_index=3),
        ]
    )
    gpx = gpxpy.parse(gpx_export.build_trip_gpx(trip))
    assert [t.name for t in gpx.tracks] == [
        "Trans-Alps Loop - Day 1",
        "Trans-Alps Loop - Day 3",
    ]


def test_build_trip_gpx_escapes_names():
    trip = _trip(name="Rock & Roll <Tour>")
    xml = gpx_export.build_trip_gpx(trip)
    assert "Rock & Roll <Tour>" not in xml
    assert gpxpy.parse(xml).name == "Rock & Roll <Tour>"


def test_build_trip_gpx_uses_now_without_start_date():
    now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
    gpx = gpxpy.parse(gpx_export.build_trip_gpx(_trip(start_date=None), now=now))
    assert gpx.time.month == 10
    assert gpx.time.day == 19


def test_build_trip_gpx_creator_from_environment(monkeypatch):
    monkeypatch.setenv("GPX_CREATOR", "Pass Bagger")
    gpx = gpxpy.parse(gpx_export.build_trip_gpx(_trip()))
    assert gpx.creator == "Pass Bagger"


def test_build_trip_gpx_requires_two_waypoints():
    trip = _trip(waypoints=[Waypoint(lat=46.0, lng=7.0)])
    with pytest.raises(ValueError, match="At least two waypoints"):
        gpx_export.build_trip_gpx(trip)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Trans-Alps Loop", "trans-alps-loop.gpx"),
        ("  Baja Divide 2026! ", "baja-divide-2026.gpx"),
        ("***", "trip.gpx"),
        ("", "trip.gpx"),
        (None, "trip.gpx"),
    ],
)
def test_gpx_filename(name, expected):
    assert gpx_export.gpx_filename(name) == expected
