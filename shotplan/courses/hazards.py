"""Hazard and fairway geometry relative to a shot."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from ..config.scoring_config import DEFAULT_SCORING_CONFIG, ScoringConfig
from ..geo.primitives import (
    bearing,
    centroid,
    distance,
    min_distance_to_polygon,
    point_in_polygon,
)
from .schemas import (
    HAZARD_TYPES,
    GeoPoint,
    HazardConflict,
    HazardRange,
    Polygon,
    PolygonType,
)

CONFLICT_TYPES = frozenset(
    {
        PolygonType.BUNKER,
        PolygonType.WATER,
        PolygonType.OUT_OF_BOUNDS,
        PolygonType.HAZARD,
        PolygonType.WASTE_AREA,
    }
)
DEFAULT_CORRIDOR_YARDS = 40.0
FAIRWAY_WINDOW_YARDS = 25.0
FAIRWAY_SIDE_FALLBACK_YARDS = 20.0


def _usable(polygons: Optional[Iterable[Polygon]], types: Iterable[PolygonType]) -> List[Polygon]:
    wanted = frozenset(types)
    return [p for p in polygons or () if p.type in wanted and len(p.coordinates) >= 3]


def hazard_conflicts(
    landing: Optional[GeoPoint],
    dispersion_radius: float,
    polygons: Optional[Sequence[Polygon]],
) -> List[HazardConflict]:
    """Hazards the dispersion circle around ``landing`` touches.

    Landing inside a hazard is a 100% overlap; otherwise the overlap falls
    linearly from 100% at the edge to 0% at one radius away.
    """

    if landing is None:
        return []
    conflicts: List[HazardConflict] = []
    for hazard in _usable(polygons, CONFLICT_TYPES):
        if point_in_polygon(landing, hazard):
            conflicts.append(
                HazardConflict(
                    type=hazard.type, name=hazard.name, overlap_percentage=100.0, distance_to_edge=0
                )
            )
            continue
        if dispersion_radius <= 0:
            continue
        edge = min_distance_to_polygon(landing, hazard)
        if edge < dispersion_radius:
            overlap = round((1 - edge / dispersion_radius) * 100)
            if overlap > 0:
                conflicts.append(
                    HazardConflict(
                        type=hazard.type,
                        name=hazard.name,
                        overlap_percentage=float(overlap),
                        distance_to_edge=int(round(edge)),
                    )
                )
    return conflicts


def hazards_within(
    point: Optional[GeoPoint], radius: float, polygons: Optional[Sequence[Polygon]]
) -> List[Polygon]:
    """Hazard polygons whose nearest edge is within ``radius`` yards of ``point``."""

    if point is None:
        return []
    return [
        hazard
        for hazard in _usable(polygons, HAZARD_TYPES)
        if point_in_polygon(point, hazard) or min_distance_to_polygon(point, hazard) <= radius
    ]


def _project(start: GeoPoint, vertex: GeoPoint, shot_bearing: float) -> tuple[float, float]:
    """Along-line and lateral components of ``vertex`` relative to the shot line."""

    d = distance(start, vertex)
    diff = math.radians((bearing(start, vertex) - shot_bearing + 540.0) % 360.0 - 180.0)
    return d * math.cos(diff), d * math.sin(diff)


def hazard_ranges(
    start: Optional[GeoPoint],
    target: Optional[GeoPoint],
    polygons: Optional[Sequence[Polygon]],
    corridor: float = DEFAULT_CORRIDOR_YARDS,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> List[HazardRange]:
    """Project hazards inside the shot corridor onto the distance axis from ``start``.

    Vertices level with or behind ``start`` are ignored. Sorted by front
    distance, nearest first.
    """

    if start is None or target is None:
        return []
    shot_bearing = bearing(start, target)
    ranges: List[HazardRange] = []
    for hazard in _usable(polygons, HAZARD_TYPES):
        distances: List[int] = []
        laterals: List[float] = []
        for vertex in hazard.coordinates:
            ahead, lateral = _project(start, vertex, shot_bearing)
            if ahead > 0 and abs(lateral) <= corridor:
                distances.append(int(round(ahead)))
                laterals.append(abs(lateral))
        if not distances:
            continue
        ranges.append(
            HazardRange(
                name=hazard.name,
                type=hazard.type,
                front_distance=min(distances),
                back_distance=max(distances),
                is_penalty=hazard.is_penalty,
                severity=config.severity_for(hazard.type.value),
                lateral_offset=int(round(min(laterals))),
            )
        )
    ranges.sort(key=lambda r: r.front_distance)
    return ranges


def is_in_fairway(point: Optional[GeoPoint], polygons: Optional[Sequence[Polygon]]) -> bool:
    if point is None:
        return False
    return any(point_in_polygon(point, p) for p in _usable(polygons, (PolygonType.FAIRWAY,)))


def estimate_fairway_width(
    coordinates: Sequence[GeoPoint], center: GeoPoint, hole_bearing: float
) -> float:
    """Nearest fairway edge on each side of ``center``, perpendicular to the hole."""

    perpendicular = (hole_bearing + 90.0) % 360.0
    right = left = math.inf
    for vertex in coordinates:
        d = distance(center, vertex)
        relative = (bearing(center, vertex) - perpendicular + 540.0) % 360.0 - 180.0
        if -45 < relative < 45:
            right = min(right, d)
        elif relative > 135 or relative < -135:
            left = min(left, d)
    left_width = FAIRWAY_SIDE_FALLBACK_YARDS if math.isinf(left) else left
    right_width = FAIRWAY_SIDE_FALLBACK_YARDS if math.isinf(right) else right
    return float(left_width + right_width)


def fairway_width_at(
    start: Optional[GeoPoint],
    yards: float,
    target: Optional[GeoPoint],
    polygons: Optional[Sequence[Polygon]],
    window: float = FAIRWAY_WINDOW_YARDS,
) -> float:
    """Widest fairway section about ``yards`` from ``start``; 0 without a fairway."""

    if start is None or target is None:
        return 0.0
    hole_bearing = bearing(start, target)
    widest = 0.0
    for fairway in _usable(polygons, (PolygonType.FAIRWAY,)):
        nearby = [v for v in fairway.coordinates if abs(distance(start, v) - yards) < window]
        if len(nearby) < 2:
            continue
        center = centroid(nearby)
        if center is None:
            continue
        widest = max(widest, estimate_fairway_width(fairway.coordinates, center, hole_bearing))
    return widest


__all__ = [
    "CONFLICT_TYPES",
    "DEFAULT_CORRIDOR_YARDS",
    "estimate_fairway_width",
    "fairway_width_at",
    "hazard_conflicts",
    "hazard_ranges",
    "hazards_within",
    "is_in_fairway",
]
