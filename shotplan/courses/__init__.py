"""Hole geometry models."""

from .schemas import GeoPoint, HoleData, Polygon, PolygonType

__all__ = ["GeoPoint", "HoleData", "Polygon", "PolygonType"]
