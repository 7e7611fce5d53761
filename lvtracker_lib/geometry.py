# -*- coding: utf-8 -*-
"""Geometry utilities for table outlines and label placement.

Coordinates are GeoJSON ``(longitude, latitude)`` pairs in degrees.

- Ring handling (extraction, closing, point-in-ring) is planar and works
  directly on degrees: site outlines are building-scale, so the
  distortion is irrelevant for containment tests.
- Distances are reported in meters and bearings in degrees from north,
  both from the WGS84 geodesic (``pyproj.Geod``).
- Nearest-segment selection uses a local equirectangular frame centred on
  the query point, which is accurate to well under a centimeter at the
  scale of a solar site.
"""

from __future__ import annotations

import copy
import logging
import math
from collections.abc import Mapping
from collections.abc import Sequence
from typing import Any
from typing import NamedTuple

from geojson import Feature
from geojson import LineString
from geojson import MultiLineString
from geojson import MultiPoint
from geojson import MultiPolygon
from geojson import Point
from geojson import Polygon
from pyproj import Geod
from shapely.geometry import Polygon as ShapelyPolygon

from lvtracker_lib.constants import EARTH_RADIUS_METERS
from lvtracker_lib.constants import GEOD_ELLIPSOID
from lvtracker_lib.constants import MIN_RING_VERTICES
from lvtracker_lib.constants import RING_CLOSE_EPSILON

logger = logging.getLogger(__name__)

Coordinate = tuple[float, float]
Ring = list[Coordinate]

GEOD = Geod(ellps=GEOD_ELLIPSOID)

GEOMETRY_FACTORIES = {
    "Point": Point,
    "MultiPoint": MultiPoint,
    "LineString": LineString,
    "MultiLineString": MultiLineString,
    "Polygon": Polygon,
    "MultiPolygon": MultiPolygon,
}


class NearestPoint(NamedTuple):
    """Projection of a point onto a line."""

    distance_meters: float
    segment_index: int
    location: Coordinate | None


# -----------------------------------------------------------------------------
# GeoJSON helpers
# -----------------------------------------------------------------------------


def make_geometry(geometry_type: str, coordinates: Any) -> Any:
    """Build a ``geojson`` geometry object holding ``coordinates`` as given.

    The ``geojson`` constructors round every position and reject anything
    that is not a number, so positions are assigned after construction.
    """
    geometry = GEOMETRY_FACTORIES[geometry_type]()
    geometry["coordinates"] = coordinates
    return geometry


def copy_feature(
    feature: Mapping[str, Any],
    *,
    geometry: Any = None,
    properties: Mapping[str, Any] | None = None,
) -> Feature:
    """Return a new feature, optionally replacing geometry or properties.

    The input feature is never modified. A kept geometry is deep-copied
    with its positions untouched; properties are shallow-copied.
    """
    if geometry is None:
        source = feature.get("geometry")
        if source and source.get("type") in GEOMETRY_FACTORIES:
            geometry = make_geometry(
                source["type"], copy.deepcopy(source.get("coordinates"))
            )
        else:
            geometry = copy.deepcopy(source)
    if properties is None:
        properties = feature.get("properties") or {}
    copied = Feature(id=feature.get("id"), properties=dict(properties))
    copied["geometry"] = geometry
    return copied


# -----------------------------------------------------------------------------
# Rings
# -----------------------------------------------------------------------------


def extract_coordinates(position: Any) -> Coordinate | None:
    """Read a ``[lng, lat, ...]`` position as a float pair.

    Returns:
        ``(lng, lat)`` or None if the position is not a usable sequence
    """
    if not isinstance(position, (list, tuple)) or len(position) < 2:
        return None
    try:
        return (float(position[0]), float(position[1]))
    except (TypeError, ValueError):
        return None


def _to_ring(positions: Any) -> Ring:
    if not isinstance(positions, (list, tuple)):
        return []
    return [c for c in map(extract_coordinates, positions) if c is not None]


def point_in_ring(point: Sequence[float], ring: Sequence[Sequence[float]]) -> bool:
    """Even-odd ray casting containment test.

    Points exactly on the boundary get a deterministic but unspecified
    answer.

    Args:
        point: ``(lng, lat)``
        ring: Ring vertices, closed or open

    Returns:
        True if the point lies inside the ring
    """
    if not point or len(ring) < MIN_RING_VERTICES:
        return False
    px, py = point[0], point[1]
    inside = False
    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]
        if (yi > py) != (yj > py):
            denominator = yj - yi
            if denominator != 0:
                x_cross = (xj - xi) * (py - yi) / denominator + xi
                if px < x_cross:
                    inside = not inside
        j = i
    return inside


def extract_rings(geometry: Mapping[str, Any] | None) -> list[Ring]:
    """Return every boundary / path of a geometry as coordinate rings.

    - Polygon: its rings
    - MultiPolygon: the rings of all member polygons, flattened
    - LineString: a single (possibly open) ring
    - MultiLineString: one ring per member line
    - anything else: no rings
    """
    if not geometry:
        return []
    coordinates = geometry.get("coordinates") or []

    match geometry.get("type"):
        case "Polygon" | "MultiLineString":
            return [_to_ring(ring) for ring in coordinates]
        case "MultiPolygon":
            return [_to_ring(ring) for polygon in coordinates for ring in polygon]
        case "LineString":
            return [_to_ring(coordinates)]
        case _:
            return []


def close_ring(ring: Ring) -> Ring:
    """Append the first vertex when the ring is open.

    A ring counts as closed when its first and last vertices differ by at
    most ``RING_CLOSE_EPSILON`` on both axes. Closing is idempotent.
    """
    if not ring:
        return ring
    first_x, first_y = ring[0][0], ring[0][1]
    last_x, last_y = ring[-1][0], ring[-1][1]
    if (
        abs(first_x - last_x) <= RING_CLOSE_EPSILON
        and abs(first_y - last_y) <= RING_CLOSE_EPSILON
    ):
        return ring
    return [*ring, (first_x, first_y)]


def _polygon_ring(positions: Any) -> list[list[float]] | None:
    ring = _to_ring(positions)
    if len(set(ring)) < MIN_RING_VERTICES:
        return None
    return [list(position) for position in close_ring(ring)]


def line_to_polygon(feature: Mapping[str, Any]) -> Feature | None:
    """Convert a LineString outline into a Polygon feature.

    Returns:
        New feature, or None if the line has fewer than 3 distinct vertices
    """
    geometry = feature.get("geometry") or {}
    ring = _polygon_ring(geometry.get("coordinates"))
    if ring is None:
        return None
    return copy_feature(feature, geometry=make_geometry("Polygon", [ring]))


def multi_line_to_polygon(feature: Mapping[str, Any]) -> Feature | None:
    """Convert a MultiLineString outline into a MultiPolygon feature.

    Member lines with fewer than 3 distinct vertices are dropped.

    Returns:
        New feature, or None if no member line survives
    """
    geometry = feature.get("geometry") or {}
    lines = geometry.get("coordinates")
    if not isinstance(lines, (list, tuple)):
        return None

    polygons = [[ring] for line in lines if (ring := _polygon_ring(line)) is not None]
    if not polygons:
        return None
    return copy_feature(feature, geometry=make_geometry("MultiPolygon", polygons))


# -----------------------------------------------------------------------------
# Lines
# -----------------------------------------------------------------------------


def _line_coordinates(line: Mapping[str, Any] | Sequence[Any]) -> Ring:
    """Accept a LineString feature, a LineString geometry or raw positions."""
    if isinstance(line, Mapping):
        if "geometry" in line:
            line = line.get("geometry") or {}
        line = line.get("coordinates") or []
    return _to_ring(line)


def _local_xy(origin: Coordinate, position: Coordinate) -> tuple[float, float]:
    """Project ``position`` to meters in a frame centred on ``origin``."""
    scale = math.cos(math.radians(origin[1]))
    x = math.radians(position[0] - origin[0]) * scale * EARTH_RADIUS_METERS
    y = math.radians(position[1] - origin[1]) * EARTH_RADIUS_METERS
    return x, y


def _project_on_segment(
    origin: Coordinate, start: Coordinate, end: Coordinate
) -> tuple[float, Coordinate]:
    """Closest point of segment ``start -> end`` to ``origin``.

    Returns:
        Tuple of (planar distance in meters, closest position)
    """
    ax, ay = _local_xy(origin, start)
    bx, by = _local_xy(origin, end)
    dx, dy = bx - ax, by - ay
    length_sq = dx * dx + dy * dy
    t = 0.0 if length_sq == 0 else max(0.0, min(1.0, -(ax * dx + ay * dy) / length_sq))
    location = (
        start[0] + t * (end[0] - start[0]),
        start[1] + t * (end[1] - start[1]),
    )
    return math.hypot(ax + t * dx, ay + t * dy), location


def geodesic_distance(start: Sequence[float], end: Sequence[float]) -> float:
    """Distance in meters between two ``(lng, lat)`` positions."""
    _, _, distance = GEOD.inv(start[0], start[1], end[0], end[1])
    return distance


def nearest_point_on_line(
    line: Mapping[str, Any] | Sequence[Any],
    point: Sequence[float],
) -> NearestPoint:
    """Project a point onto the closest segment of a line.

    Ties between segments keep the first one.

    Args:
        line: LineString feature / geometry, or its positions
        point: ``(lng, lat)``

    Returns:
        NearestPoint with the distance in meters, the index of the segment
        hit and the projected position. An empty line yields an infinite
        distance and no location.
    """
    coords = _line_coordinates(line)
    origin = (float(point[0]), float(point[1]))
    if not coords:
        return NearestPoint(math.inf, 0, None)
    if len(coords) == 1:
        return NearestPoint(geodesic_distance(origin, coords[0]), 0, coords[0])

    best_index = 0
    best_distance = math.inf
    best_location = coords[0]
    for index in range(len(coords) - 1):
        distance, location = _project_on_segment(
            origin, coords[index], coords[index + 1]
        )
        if distance < best_distance:
            best_distance = distance
            best_index = index
            best_location = location

    return NearestPoint(
        geodesic_distance(origin, best_location), best_index, best_location
    )


def segment_bearing(
    line: Mapping[str, Any] | Sequence[Any],
    segment_index: int,
) -> float:
    """Bearing of one segment of a line.

    Args:
        line: LineString feature / geometry, or its positions
        segment_index: Segment index, clamped to the valid range

    Returns:
        Forward azimuth in degrees from north, in ``[-180, 180]``;
        0.0 when the line has fewer than 2 vertices
    """
    coords = _line_coordinates(line)
    if len(coords) < 2:
        return 0.0
    index = min(max(segment_index, 0), len(coords) - 2)
    start, end = coords[index], coords[index + 1]
    azimuth, _, _ = GEOD.inv(start[0], start[1], end[0], end[1])
    return azimuth


def center_of_mass(ring: Ring) -> Coordinate:
    """Area-weighted centroid of a closed ring.

    Raises:
        ValueError: If the ring is self-intersecting or has no area
    """
    polygon = ShapelyPolygon(ring)
    if not polygon.is_valid or polygon.area == 0:
        raise ValueError(f"Degenerate ring with {len(ring)} vertices")
    centroid = polygon.centroid
    return (centroid.x, centroid.y)


def bbox_center(coords: Ring) -> Coordinate:
    """Midpoint of the bounding box of a set of positions."""
    xs = [c[0] for c in coords]
    ys = [c[1] for c in coords]
    return ((min(xs) + max(xs)) / 2, (min(ys) + max(ys)) / 2)


def line_center(line: Mapping[str, Any] | Sequence[Any]) -> Coordinate | None:
    """Display anchor of a line.

    Closed lines with at least 4 vertices use the polygon center of mass;
    other lines, and closed lines whose ring is degenerate, use the
    bounding-box midpoint.

    Returns:
        ``(lng, lat)`` or None for an empty line
    """
    coords = _line_coordinates(line)
    if not coords:
        return None
    if coords[0] == coords[-1] and len(coords) >= 4:
        try:
            return center_of_mass(coords)
        except ValueError as e:
            logger.warning("Failed to compute polygon center: %s", e)
    return bbox_center(coords)
