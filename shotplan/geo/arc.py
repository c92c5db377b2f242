"""Visual ball-flight arc between two map points.

This is a drawing aid only; no flight physics are modelled.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from ..caddie.clubs import is_wedge
from ..courses.schemas import GeoPoint


def bezier_arc(
    start: GeoPoint,
    end: GeoPoint,
    num_points: int = 50,
    arc_height: float = 0.0005,
    side: str = "left",
) -> List[GeoPoint]:
    """Quadratic bezier with a control point offset perpendicular to the midpoint.

    Returns ``num_points + 1`` points from ``start`` to ``end`` inclusive, or a
    single point when both ends coincide.
    """

    if num_points < 1:
        raise ValueError("num_points must be >= 1")
    if side not in ("left", "right"):
        raise ValueError("side must be 'left' or 'right'")

    p0 = np.array([start.latitude, start.longitude], dtype=float)
    p2 = np.array([end.latitude, end.longitude], dtype=float)
    d_lat, d_lon = p2 - p0
    perp = np.array([d_lon, -d_lat]) if side == "left" else np.array([-d_lon, d_lat])
    length = float(np.hypot(*perp))
    if length == 0.0:
        return [GeoPoint(latitude=start.latitude, longitude=start.longitude)]

    control = (p0 + p2) / 2.0 + perp / length * arc_height
    t = np.linspace(0.0, 1.0, num_points + 1)[:, None]
    curve = (1 - t) ** 2 * p0 + 2 * (1 - t) * t * control + t**2 * p2
    return [GeoPoint(latitude=float(lat), longitude=float(lon)) for lat, lon in curve]


def ease_out_cubic(t: float) -> float:
    return 1.0 - (1.0 - t) ** 3


def arc_height_for(distance_yards: float, club: Optional[str] = None) -> float:
    """Arc height in degrees; flat for chips and putts, tallest for long clubs."""

    name = (club or "").lower()
    if "putter" in name or distance_yards < 30:
        return distance_yards * 2e-7
    if is_wedge(club) or "wedge" in name:
        return distance_yards * 8e-7
    if distance_yards < 180:
        return distance_yards * 1e-6
    return distance_yards * 1.3e-6


__all__ = ["arc_height_for", "bezier_arc", "ease_out_cubic"]
