"""Great-circle and polygon primitives shared by every planner component.

Distances are whole yards, bearings are degrees clockwise from north in
``[0, 360)``. Inputs that cannot be measured (missing points, rings with fewer
than three vertices) produce safe defaults instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from math import asin, atan2, cos, degrees, radians, sin, sqrt
from typing import Iterable, Optional, Sequence, Union

from ..courses.schemas import GeoPoint, Polygon, PolygonType


EARTH_RADIUS_M = 6_371_000.0
YARDS_PER_METRE = 1.09361
METRES_PER_YARD = 0.9144
EDGE_EPSILON = 1e-12

Ring = Union[Polygon, Sequence[GeoPoint]]


class LieType(str, Enum):
    GREEN = "green"
    BUNKER = "bunker"
    WATER = "water"
    FAIRWAY = "fairway"
    FRINGE = "fringe"
    ROUGH = "rough"


_LIE_BY_POLYGON = {
    PolygonType.GREEN: LieType.GREEN,
    PolygonType.BUNKER: LieType.BUNKER,
    PolygonType.WATER: LieType.WATER,
    PolygonType.FAIRWAY: LieType.FAIRWAY,
    PolygonType.FRINGE: LieType.FRINGE,
}


@dataclass(frozen=True)
class HazardExtent:
    front_distance: int
    back_distance: int
    front_point: GeoPoint
    back_point: GeoPoint
    center: GeoPoint


def _ring(polygon: Optional[Ring]) -> Sequence[GeoPoint]:
    if polygon is None:
        return ()
    if isinstance(polygon, Polygon):
        return polygon.coordinates
    return polygon


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in metres."""

    lat1 = radians(a.latitude)
    lat2 = radians(b.latitude)
    dlat = lat2 - lat1
    dlon = radians(b.longitude - a.longitude)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(h), sqrt(1 - h))
    return EARTH_RADIUS_M * c


def distance(a: GeoPoint, b: GeoPoint) -> int:
    """Distance in whole yards."""

    return int(round(haversine_m(a, b) * YARDS_PER_METRE))


def bearing(start: GeoPoint, end: GeoPoint) -> float:
    lat1 = radians(start.latitude)
    lat2 = radians(end.latitude)
    dlon = radians(end.longitude - start.longitude)

    x = sin(dlon) * cos(lat2)
    y = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlon)
    value = (degrees(atan2(x, y)) + 360.0) % 360.0
    # tiny negative angles wrap to exactly 360.0 in float arithmetic
    if value >= 360.0:
        return 0.0
    return value


def project_point(origin: GeoPoint, yards: float, bearing_deg: float) -> GeoPoint:
    """Move ``yards`` from ``origin`` along ``bearing_deg``."""

    if yards == 0:
        return GeoPoint(latitude=origin.latitude, longitude=origin.longitude)

    lat1 = radians(origin.latitude)
    lon1 = radians(origin.longitude)
    theta = radians(bearing_deg)
    dr = yards * METRES_PER_YARD / EARTH_RADIUS_M

    lat2 = asin(sin(lat1) * cos(dr) + cos(lat1) * sin(dr) * cos(theta))
    lon2 = lon1 + atan2(sin(theta) * sin(dr) * cos(lat1), cos(dr) - sin(lat1) * sin(lat2))
    return GeoPoint(latitude=degrees(lat2), longitude=degrees(lon2))


def offset_laterally(point: GeoPoint, yards: float, shot_bearing: float) -> GeoPoint:
    """Offset perpendicular to the shot line; positive yards move right."""

    if yards >= 0:
        perpendicular = (shot_bearing + 90.0) % 360.0
    else:
        perpendicular = (shot_bearing - 90.0 + 360.0) % 360.0
    return project_point(point, abs(yards), perpendicular)


def centroid(points: Iterable[GeoPoint]) -> Optional[GeoPoint]:
    """Unweighted vertex mean."""

    pts = list(points)
    if not pts:
        return None
    lat = sum(p.latitude for p in pts) / len(pts)
    lon = sum(p.longitude for p in pts) / len(pts)
    return GeoPoint(latitude=lat, longitude=lon)


def _on_segment(point: GeoPoint, a: GeoPoint, b: GeoPoint) -> bool:
    py, px = point.latitude, point.longitude
    ay, ax = a.latitude, a.longitude
    by, bx = b.latitude, b.longitude
    cross = (by - ay) * (px - ax) - (bx - ax) * (py - ay)
    if abs(cross) > EDGE_EPSILON:
        return False
    return (
        min(ax, bx) - EDGE_EPSILON <= px <= max(ax, bx) + EDGE_EPSILON
        and min(ay, by) - EDGE_EPSILON <= py <= max(ay, by) + EDGE_EPSILON
    )


def point_in_polygon(point: Optional[GeoPoint], polygon: Optional[Ring]) -> bool:
    """Ray casting over an open or closed ring; edges and vertices count as inside."""

    coords = _ring(polygon)
    if point is None or len(coords) < 3:
        return False

    count = len(coords)
    for i in range(count):
        if _on_segment(point, coords[i - 1], coords[i]):
            return True

    y, x = point.latitude, point.longitude
    inside = False
    j = count - 1
    for i in range(count):
        yi, xi = coords[i].latitude, coords[i].longitude
        yj, xj = coords[j].latitude, coords[j].longitude
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def hazard_front_back(
    polygon: Optional[Ring], reference: Optional[GeoPoint]
) -> Optional[HazardExtent]:
    coords = _ring(polygon)
    if reference is None or len(coords) < 3:
        return None

    front = back = None
    front_dist = math.inf
    back_dist = -math.inf
    for vertex in coords:
        d = distance(reference, vertex)
        if d < front_dist:
            front_dist, front = d, vertex
        if d > back_dist:
            back_dist, back = d, vertex

    center = centroid(coords)
    if front is None or back is None or center is None:
        return None
    return HazardExtent(
        front_distance=int(front_dist),
        back_distance=int(back_dist),
        front_point=front,
        back_point=back,
        center=center,
    )


def determine_lie(
    point: Optional[GeoPoint], polygons: Optional[Iterable[Polygon]]
) -> LieType:
    """First containing polygon with a lie mapping wins; otherwise rough."""

    if point is None or not polygons:
        return LieType.ROUGH
    for polygon in polygons:
        lie = _LIE_BY_POLYGON.get(polygon.type)
        if lie is not None and point_in_polygon(point, polygon):
            return lie
    return LieType.ROUGH


def _distance_to_segment(point: GeoPoint, a: GeoPoint, b: GeoPoint) -> int:
    # planar projection in degree space; adequate at hole scale
    dy = point.latitude - a.latitude
    dx = point.longitude - a.longitude
    sy = b.latitude - a.latitude
    sx = b.longitude - a.longitude
    length_sq = sy * sy + sx * sx
    t = (dy * sy + dx * sx) / length_sq if length_sq else -1.0
    if t < 0:
        nearest = a
    elif t > 1:
        nearest = b
    else:
        nearest = GeoPoint(latitude=a.latitude + t * sy, longitude=a.longitude + t * sx)
    return distance(point, nearest)


def min_distance_to_polygon(point: GeoPoint, polygon: Optional[Ring]) -> float:
    """Shortest distance in yards to any vertex or edge; ``inf`` for an empty ring."""

    coords = _ring(polygon)
    if not coords:
        return math.inf
    best: float = min(distance(point, vertex) for vertex in coords)
    count = len(coords)
    for i in range(count):
        best = min(best, _distance_to_segment(point, coords[i], coords[(i + 1) % count]))
    return best


__all__ = [
    "EARTH_RADIUS_M",
    "HazardExtent",
    "LieType",
    "bearing",
    "centroid",
    "determine_lie",
    "distance",
    "haversine_m",
    "hazard_front_back",
    "min_distance_to_polygon",
    "offset_laterally",
    "point_in_polygon",
    "project_point",
]
