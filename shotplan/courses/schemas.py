from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class GeoPoint(BaseModel):
    """WGS84 coordinate; elevation in feet when known."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    latitude: float = Field(validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(validation_alias=AliasChoices("longitude", "lon", "lng"))
    elevation: Optional[float] = None


class PolygonType(str, Enum):
    FAIRWAY = "fairway"
    GREEN = "green"
    FRINGE = "fringe"
    TEE = "tee"
    BUNKER = "bunker"
    WATER = "water"
    OUT_OF_BOUNDS = "out_of_bounds"
    TREES = "trees"
    HAZARD = "hazard"
    WASTE_AREA = "waste_area"


_TYPE_ALIASES = {
    "ob": PolygonType.OUT_OF_BOUNDS,
    "oob": PolygonType.OUT_OF_BOUNDS,
    "penalty": PolygonType.HAZARD,
    "woods": PolygonType.TREES,
    "tree": PolygonType.TREES,
    "sand": PolygonType.BUNKER,
}

PENALTY_TYPES = frozenset(
    {PolygonType.WATER, PolygonType.OUT_OF_BOUNDS, PolygonType.HAZARD}
)
HAZARD_TYPES = frozenset(
    {
        PolygonType.WATER,
        PolygonType.OUT_OF_BOUNDS,
        PolygonType.HAZARD,
        PolygonType.BUNKER,
        PolygonType.WASTE_AREA,
        PolygonType.TREES,
    }
)


def parse_polygon_type(value: object) -> PolygonType:
    if isinstance(value, PolygonType):
        return value
    key = str(value).strip().lower()
    if key in _TYPE_ALIASES:
        return _TYPE_ALIASES[key]
    return PolygonType(key)


class Polygon(BaseModel):
    """Hole geometry ring; need not be closed."""

    model_config = ConfigDict(frozen=True)

    type: PolygonType
    label: str = ""
    coordinates: List[GeoPoint] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def _alias_type(cls, value: object) -> PolygonType:
        return parse_polygon_type(value)

    @property
    def is_penalty(self) -> bool:
        return self.type in PENALTY_TYPES

    @property
    def name(self) -> str:
        return self.label or self.type.value


class HoleData(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    par: int = Field(..., ge=3, le=6)
    tee_box: GeoPoint = Field(validation_alias=AliasChoices("tee_box", "teeBox"))
    green: GeoPoint
    polygons: List[Polygon] = Field(default_factory=list)
    green_depth: float = Field(
        30.0, gt=0, validation_alias=AliasChoices("green_depth", "greenDepth")
    )

    def polygons_of(self, *types: PolygonType) -> List[Polygon]:
        wanted = set(types)
        return [polygon for polygon in self.polygons if polygon.type in wanted]


class HazardRange(BaseModel):
    """A hazard projected onto the distance axis from a reference point."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: PolygonType
    front_distance: int
    back_distance: int
    is_penalty: bool
    severity: float = 0.0
    lateral_offset: Optional[int] = None


class HazardConflict(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: PolygonType
    name: str
    overlap_percentage: float = Field(..., ge=0, le=100)
    distance_to_edge: Optional[int] = None


__all__ = [
    "GeoPoint",
    "HAZARD_TYPES",
    "HazardConflict",
    "HazardRange",
    "HoleData",
    "PENALTY_TYPES",
    "Polygon",
    "PolygonType",
    "parse_polygon_type",
]
