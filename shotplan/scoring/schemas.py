"""Pydantic schemas for shot candidates and their scores."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from ..courses.schemas import GeoPoint, HazardConflict, HazardRange, HoleData


class ScoreItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    value: float
    reason: str


def score_total(penalties: Sequence[ScoreItem], bonuses: Sequence[ScoreItem]) -> float:
    return sum(item.value for item in penalties) + sum(item.value for item in bonuses)


class ScoreBreakdown(BaseModel):
    """Signed score for one shot; always the sum of its items."""

    model_config = ConfigDict(frozen=True)

    score: float
    penalties: List[ScoreItem] = Field(default_factory=list)
    bonuses: List[ScoreItem] = Field(default_factory=list)

    @model_validator(mode="after")
    def _consistent(self) -> "ScoreBreakdown":
        for item in self.penalties:
            if item.value > 0:
                raise ValueError(f"penalty '{item.type}' has positive value {item.value}")
        for item in self.bonuses:
            if item.value < 0:
                raise ValueError(f"bonus '{item.type}' has negative value {item.value}")
        if self.score != score_total(self.penalties, self.bonuses):
            raise ValueError("score must equal the sum of penalties and bonuses")
        return self

    @classmethod
    def from_items(cls, items: Sequence[ScoreItem]) -> "ScoreBreakdown":
        penalties = [item for item in items if item.value < 0]
        bonuses = [item for item in items if item.value > 0]
        return cls(score=score_total(penalties, bonuses), penalties=penalties, bonuses=bonuses)


class ShotOption(BaseModel):
    """One shot of a candidate plan. Mutated in place while a marker is dragged."""

    model_config = ConfigDict(validate_assignment=True, populate_by_name=True)

    shot_number: int = Field(..., ge=1, validation_alias=AliasChoices("shot_number", "shotNumber"))
    club: str
    club_distance: float = Field(
        ..., ge=0, validation_alias=AliasChoices("club_distance", "clubDistance")
    )
    effective_distance: float = Field(
        ..., validation_alias=AliasChoices("effective_distance", "effectiveDistance")
    )
    raw_distance: float = Field(..., ge=0, validation_alias=AliasChoices("raw_distance", "rawDistance"))
    distance_remaining: float = Field(
        0.0, ge=0, validation_alias=AliasChoices("distance_remaining", "distanceRemaining")
    )
    landing_zone: GeoPoint = Field(validation_alias=AliasChoices("landing_zone", "landingZone"))
    dispersion_radius: Optional[float] = Field(
        default=None, ge=0, validation_alias=AliasChoices("dispersion_radius", "dispersionRadius")
    )
    hazard_conflicts: List[HazardConflict] = Field(
        default_factory=list, validation_alias=AliasChoices("hazard_conflicts", "hazardConflicts")
    )
    hazard_ranges: List[HazardRange] = Field(
        default_factory=list, validation_alias=AliasChoices("hazard_ranges", "hazardRanges")
    )
    next_shot_hazard_ranges: List[HazardRange] = Field(
        default_factory=list,
        validation_alias=AliasChoices("next_shot_hazard_ranges", "nextShotHazardRanges"),
    )
    fairway_width: Optional[float] = Field(
        default=None, ge=0, validation_alias=AliasChoices("fairway_width", "fairwayWidth")
    )
    is_approach: bool = Field(False, validation_alias=AliasChoices("is_approach", "isApproach"))
    safe_zone: bool = Field(False, validation_alias=AliasChoices("safe_zone", "safeZone"))


class PlayerContext(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    club_distances: Dict[str, float] = Field(
        default_factory=dict, validation_alias=AliasChoices("club_distances", "clubDistances")
    )
    handicap: Optional[float] = Field(default=None, ge=-10, le=54)
    best_area: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("best_area", "bestArea")
    )
    worst_area: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("worst_area", "worstArea")
    )
    dispersion_radii: Dict[str, float] = Field(
        default_factory=dict, validation_alias=AliasChoices("dispersion_radii", "dispersionRadii")
    )
    ideal_wedge_min: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("ideal_wedge_min", "idealWedgeMin")
    )
    ideal_wedge_max: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("ideal_wedge_max", "idealWedgeMax")
    )


class SequenceScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: float
    shots: List[ScoreBreakdown]


class RankedPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    total: float
    shots: List[ScoreBreakdown]


class ScoreShotRequest(BaseModel):
    shot: ShotOption
    player: PlayerContext = Field(default_factory=PlayerContext)
    hole: HoleData


class ScoreSequenceRequest(BaseModel):
    shots: List[ShotOption] = Field(..., min_length=1)
    player: PlayerContext = Field(default_factory=PlayerContext)
    hole: HoleData


__all__ = [
    "PlayerContext",
    "RankedPlan",
    "ScoreBreakdown",
    "ScoreItem",
    "ScoreSequenceRequest",
    "ScoreShotRequest",
    "SequenceScore",
    "ShotOption",
    "score_total",
]
