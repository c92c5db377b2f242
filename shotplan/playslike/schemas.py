"""Pydantic schemas for plays-like distance inputs and breakdowns."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class Weather(BaseModel):
    """Conditions for a shot; any field may be missing."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    wind_speed: Optional[float] = Field(
        default=None, ge=0, validation_alias=AliasChoices("wind_speed", "windSpeed")
    )  # mph
    # compass point ("NW") or degrees the wind blows FROM
    wind_direction: Optional[Union[float, str]] = Field(
        default=None, validation_alias=AliasChoices("wind_direction", "windDirection")
    )
    temperature: Optional[float] = None  # °F
    course_elevation: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("course_elevation", "courseElevation"),
    )  # ft


class WindAdjustment(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance_effect: float
    aim_offset_yards: float = 0.0
    aim_direction: Optional[str] = None
    headwind_mph: float = 0.0
    crosswind_mph: float = 0.0
    description: str = ""


class TemperatureAdjustment(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance_effect: float
    description: str = ""


class ElevationAdjustment(BaseModel):
    model_config = ConfigDict(frozen=True)

    elevation_delta: Optional[float] = None
    slope_effect: float = 0.0
    altitude_effect: float = Field(default=0.0, le=0)
    description: str = ""


class Adjustments(BaseModel):
    model_config = ConfigDict(frozen=True)

    wind: Optional[WindAdjustment] = None
    temperature: Optional[TemperatureAdjustment] = None
    elevation: Optional[ElevationAdjustment] = None


def apply_adjustments(base_distance: float, adjustments: Adjustments) -> float:
    """Base plus every effect, always summed in the same order."""

    total = float(base_distance)
    if adjustments.wind is not None:
        total += adjustments.wind.distance_effect
    if adjustments.temperature is not None:
        total += adjustments.temperature.distance_effect
    if adjustments.elevation is not None:
        total += adjustments.elevation.slope_effect
        total += adjustments.elevation.altitude_effect
    return total


class EffectiveDistanceContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_distance: float
    effective_distance: float
    adjustments: Adjustments = Field(default_factory=Adjustments)

    @model_validator(mode="after")
    def _effects_add_up(self) -> "EffectiveDistanceContext":
        expected = apply_adjustments(self.base_distance, self.adjustments)
        if self.effective_distance != expected:
            raise ValueError(
                f"effective_distance {self.effective_distance} != base plus effects {expected}"
            )
        return self

    @property
    def total_adjustment(self) -> float:
        return self.effective_distance - self.base_distance


class PlaysLikeRequest(BaseModel):
    """HTTP body for a plays-like lookup."""

    model_config = ConfigDict(populate_by_name=True)

    distance: float = Field(..., gt=0)
    shot_bearing: float = Field(
        0.0, ge=0, lt=360, validation_alias=AliasChoices("shot_bearing", "shotBearing")
    )
    weather: Weather = Field(default_factory=Weather)
    player_elevation: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("player_elevation", "playerElevation"),
    )
    target_elevation: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("target_elevation", "targetElevation"),
    )


__all__ = [
    "Adjustments",
    "EffectiveDistanceContext",
    "ElevationAdjustment",
    "PlaysLikeRequest",
    "TemperatureAdjustment",
    "Weather",
    "WindAdjustment",
    "apply_adjustments",
]
