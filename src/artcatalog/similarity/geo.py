# ABOUTME: Great-circle distance and distance-to-score mapping for artwork coordinates.
# ABOUTME: Also provides bounding boxes for coarse spatial prefilters in storage queries.

import math
from dataclasses import dataclass

from artcatalog.similarity.types import Coordinate

EARTH_RADIUS_METERS = 6_371_000.0

# One degree of latitude is roughly 111 km everywhere.
_METERS_PER_DEGREE_LAT = 111_000.0

COORDINATE_PRECISION = 5  # ~1 m


@dataclass(frozen=True)
class BoundingBox:
    north: float
    south: float
    east: float
    west: float


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two points in meters.

    No range validation is done: out-of-range input yields a number, not an error.
    Rounding can push h just past 1 for near-antipodal points, so it is clamped.
    """
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.lon - a.lon)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def distance_score(distance_meters: float, cutoff_meters: float) -> float:
    """Map a distance to [0, 1]: 1.0 at zero, linear down to 0.0 at the cutoff."""
    if not math.isfinite(distance_meters):
        return 0.0
    return max(0.0, min(1.0, 1.0 - distance_meters / cutoff_meters))


def bounding_box(center: Coordinate, radius_meters: float) -> BoundingBox:
    """Approximate box enclosing a circle, for index-friendly prefiltering."""
    lat_offset = radius_meters / _METERS_PER_DEGREE_LAT
    cos_lat = math.cos(math.radians(center.lat))
    # Near the poles the longitude span degenerates; take the whole range.
    if cos_lat < 1e-9:
        lon_offset = 180.0
    else:
        lon_offset = radius_meters / (_METERS_PER_DEGREE_LAT * cos_lat)
    return BoundingBox(
        north=center.lat + lat_offset,
        south=center.lat - lat_offset,
        east=center.lon + lon_offset,
        west=center.lon - lon_offset,
    )


def is_valid_coordinate(point: Coordinate) -> bool:
    """Whether lat is within [-90, 90] and lon within [-180, 180]."""
    return (
        math.isfinite(point.lat)
        and math.isfinite(point.lon)
        and -90.0 <= point.lat <= 90.0
        and -180.0 <= point.lon <= 180.0
    )


def normalize_coordinate(point: Coordinate, precision: int = COORDINATE_PRECISION) -> Coordinate:
    """Round a coordinate to the storage precision."""
    return Coordinate(round(point.lat, precision), round(point.lon, precision))
