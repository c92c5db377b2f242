"""Geodesic and polygon helpers."""

from .primitives import (
    bearing,
    determine_lie,
    distance,
    hazard_front_back,
    point_in_polygon,
)

__all__ = [
    "bearing",
    "determine_lie",
    "distance",
    "hazard_front_back",
    "point_in_polygon",
]
