"""Geometry helpers shared by the trip planning modules.

Great-circle distances and the Google encoded polyline format used by
Directions API route segments.
"""

import math

# Mean Earth radius used for all great-circle distances.
EARTH_RADIUS_KM: float = 6371.0
EARTH_RADIUS_M: float = 6_371_000.0

# Number of points sent to the Elevation API for one route.
ELEVATION_MAX_SAMPLES: int = 128

# Encoded polylines store coordinates as integers of 1e-5 degrees.
_POLYLINE_PRECISION: float = 1e5


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Returns the great-circle distance in metres between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = lat2_r - lat1_r
    dlng = math.radians(lng2 - lng1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Returns the great-circle distance in kilometres between two points."""
    return haversine_m(lat1, lng1, lat2, lng2) / 1000


def _read_varint(encoded: str, index: int) -> tuple[int, int]:
    """Reads one zig-zag varint starting at ``index``.

    Returns the signed delta and the index just past it.
    """
    shift = 0
    value = 0
    while True:
        if index >= len(encoded):
            raise ValueError("Encoded polyline is truncated.")
        b = ord(encoded[index]) - 63
        index += 1
        value |= (b & 0x1F) << shift
        shift += 5
        if b < 0x20:
            break
    delta = ~(value >> 1) if (value & 1) else (value >> 1)
    return delta, index


def decode_polyline(encoded: str) -> list[tuple[float, float]]:
    """Decodes a Google-encoded polyline string to a list of (lat, lng) points.

    Implements the standard Google polyline encoding algorithm.
    See: https://developers.google.com/maps/documentation/utilities/polylinealgorithm

    Raises:
        ValueError: If the string ends in the middle of a coordinate pair.
    """
    result: list[tuple[float, float]] = []
    index = 0
    lat = 0
    lng = 0

    while index < len(encoded):
        dlat, index = _read_varint(encoded, index)
        lat += dlat
        dlng, index = _read_varint(encoded, index)
        lng += dlng
        result.append((lat / _POLYLINE_PRECISION, lng / _POLYLINE_PRECISION))

    return result


def encode_polyline(coordinates: list[tuple[float, float]]) -> str:
    """Encodes a list of (lat, lng) tuples into a Google-encoded polyline."""
    encoded: list[str] = []
    prev_lat = 0
    prev_lng = 0

    for lat, lng in coordinates:
        lat_e5 = round(lat * _POLYLINE_PRECISION)
        lng_e5 = round(lng * _POLYLINE_PRECISION)

        for delta in (lat_e5 - prev_lat, lng_e5 - prev_lng):
            value = ~(delta << 1) if delta < 0 else (delta << 1)
            while value >= 0x20:
                encoded.append(chr((0x20 | (value & 0x1F)) + 63))
                value >>= 5
            encoded.append(chr(value + 63))

        prev_lat = lat_e5
        prev_lng = lng_e5

    return "".join(encoded)


def sample_path(
    path: list[tuple[float, float]],
    max_samples: int = ELEVATION_MAX_SAMPLES,
) -> list[tuple[float, float]]:
    """Thins a decoded route path to roughly ``max_samples`` points.

    Takes every n-th point with a fixed stride and always keeps the final
    point, so the sampled path still ends at the destination.
    """
    if not path:
        return []
    if max_samples < 1:
        raise ValueError("max_samples must be at least 1.")

    step = max(1, len(path) // max_samples)
    samples = path[::step]
    if (len(path) - 1) % step != 0:
        samples.append(path[-1])
    return samples
