"""Weights and thresholds for the shot scorer.

Penalties are non-positive, bonuses non-negative. A config is validated once
when it is built so that a broken override surfaces at session setup rather
than halfway through a drag.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from . import SCORING_CONFIG_ENV


class ScoringConfigError(ValueError):
    """Raised when a scoring configuration is incomplete or inconsistent."""


class PenaltyWeights(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    half_swing: float
    awkward_distance: float
    partial_swing_severe: float
    partial_swing_mild: float
    fairway_miss: float
    over_the_green: float
    player_weakness: float
    narrow_fairway: float
    trees_in_flight_path: float
    carry_over_water: float
    carry_over_hazard: float
    next_shot_over_water: float
    next_shot_over_trees: float
    next_shot_over_bunker: float
    near_miss_penalty_hazard: float
    near_miss_hazard: float

    @model_validator(mode="after")
    def _non_positive(self) -> "PenaltyWeights":
        for name, value in self.model_dump().items():
            if value > 0:
                raise ValueError(f"penalty '{name}' must be <= 0, got {value}")
        return self


class BonusWeights(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    full_swing: float
    full_wedge_approach: float
    fairway_landing: float
    safe_miss_zone: float
    player_strength: float
    wide_fairway: float

    @model_validator(mode="after")
    def _non_negative(self) -> "BonusWeights":
        for name, value in self.model_dump().items():
            if value < 0:
                raise ValueError(f"bonus '{name}' must be >= 0, got {value}")
        return self


class Thresholds(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    awkward_min: float
    awkward_max: float
    secondary_awkward_min: float
    secondary_awkward_max: float
    full_wedge_min: float
    full_wedge_max: float
    utilization_sweet_spot_min: float
    utilization_sweet_spot_max: float
    utilization_partial: float
    utilization_severe_partial: float
    over_green_ratio: float
    distance_dispersion_factor: float
    default_dispersion_radius: float
    near_miss_buffer: float
    carry_buffer: float
    wide_fairway_ratio: float
    narrow_fairway_ratio: float
    safe_miss_radius_factor: float
    penalty_hazard_multiplier: float

    @model_validator(mode="after")
    def _ordered(self) -> "Thresholds":
        pairs = (
            ("awkward_min", "awkward_max"),
            ("secondary_awkward_min", "secondary_awkward_max"),
            ("full_wedge_min", "full_wedge_max"),
            ("utilization_sweet_spot_min", "utilization_sweet_spot_max"),
            ("utilization_severe_partial", "utilization_partial"),
            ("narrow_fairway_ratio", "wide_fairway_ratio"),
        )
        for low, high in pairs:
            if getattr(self, low) > getattr(self, high):
                raise ValueError(f"threshold '{low}' must not exceed '{high}'")
        if self.default_dispersion_radius <= 0:
            raise ValueError("default_dispersion_radius must be positive")
        return self


class ScoringConfig(BaseModel):
    """Complete scorer configuration; every section is required."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    penalties: PenaltyWeights
    bonuses: BonusWeights
    thresholds: Thresholds
    hazard_severity: Dict[str, float]
    default_hazard_severity: float

    def severity_for(self, hazard_type: str) -> float:
        return self.hazard_severity.get(str(hazard_type), self.default_hazard_severity)


_DEFAULTS: Dict[str, Any] = {
    "penalties": {
        "half_swing": -30,
        "awkward_distance": -10,
        "partial_swing_severe": -25,
        "partial_swing_mild": -10,
        "fairway_miss": -15,
        "over_the_green": -20,
        "player_weakness": -15,
        "narrow_fairway": -15,
        "trees_in_flight_path": -100,
        "carry_over_water": -25,
        "carry_over_hazard": -5,
        "next_shot_over_water": -30,
        "next_shot_over_trees": -50,
        "next_shot_over_bunker": -10,
        "near_miss_penalty_hazard": -8,
        "near_miss_hazard": -3,
    },
    "bonuses": {
        "full_swing": 10,
        "full_wedge_approach": 20,
        "fairway_landing": 15,
        "safe_miss_zone": 10,
        "player_strength": 10,
        "wide_fairway": 12,
    },
    "thresholds": {
        "awkward_min": 30,
        "awkward_max": 60,
        "secondary_awkward_min": 61,
        "secondary_awkward_max": 74,
        "full_wedge_min": 75,
        "full_wedge_max": 130,
        "utilization_sweet_spot_min": 0.90,
        "utilization_sweet_spot_max": 1.00,
        "utilization_partial": 0.85,
        "utilization_severe_partial": 0.75,
        "over_green_ratio": 1.10,
        "distance_dispersion_factor": 0.8,
        "default_dispersion_radius": 15,
        "near_miss_buffer": 15,
        "carry_buffer": 10,
        "wide_fairway_ratio": 2.0,
        "narrow_fairway_ratio": 1.0,
        "safe_miss_radius_factor": 2.0,
        "penalty_hazard_multiplier": 2.0,
    },
    "hazard_severity": {
        "water": 40,
        "out_of_bounds": 50,
        "hazard": 40,
        "bunker": 15,
        "waste_area": 8,
        "trees": 15,
    },
    "default_hazard_severity": 10,
}

# Maps a player's self-reported strength/weakness area to normalised club ids.
AREA_TO_CLUBS: Dict[str, tuple[str, ...]] = {
    "driver": ("driver",),
    "long_irons": (
        "3_iron",
        "4_iron",
        "5_iron",
        "3_wood",
        "5_wood",
        "7_wood",
        "3_hybrid",
        "4_hybrid",
        "5_hybrid",
    ),
    "short_irons": ("6_iron", "7_iron", "8_iron", "9_iron"),
    "wedges": (
        "pw",
        "gw",
        "sw",
        "lw",
        "w_46",
        "w_48",
        "w_50",
        "w_52",
        "w_54",
        "w_56",
        "w_58",
        "w_60",
    ),
    "chipping": ("sw", "lw", "w_54", "w_56", "w_58", "w_60"),
    "putting": (),
}


def clubs_for_area(area: Optional[str]) -> tuple[str, ...]:
    if not area:
        return ()
    return AREA_TO_CLUBS.get(area, ())


def _deep_merge(
    target: MutableMapping[str, Any], overrides: Optional[Mapping[str, Any]]
) -> None:
    if not overrides:
        return
    for key, value in overrides.items():
        current = target.get(key)
        if isinstance(current, MutableMapping) and isinstance(value, Mapping):
            _deep_merge(current, value)
        else:
            target[key] = value


def build_scoring_config(overrides: Optional[Mapping[str, Any]] = None) -> ScoringConfig:
    """Merge *overrides* onto the defaults and validate the result."""

    raw = copy.deepcopy(_DEFAULTS)
    _deep_merge(raw, overrides)
    try:
        return ScoringConfig.model_validate(raw)
    except ValidationError as exc:
        raise ScoringConfigError(f"invalid scoring config: {exc}") from exc


def _load_file(path: str) -> Mapping[str, Any]:
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ScoringConfigError(f"cannot read scoring config {path}: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise ScoringConfigError(f"scoring config {path} must be a JSON object")
    return payload


def resolve_scoring_config(
    overrides: Optional[Mapping[str, Any]] = None,
) -> ScoringConfig:
    """Resolve defaults, then the file named by the env var, then *overrides*."""

    layered: Dict[str, Any] = {}
    path = os.getenv(SCORING_CONFIG_ENV)
    if path:
        _deep_merge(layered, copy.deepcopy(dict(_load_file(path))))
    _deep_merge(layered, copy.deepcopy(dict(overrides or {})))
    return build_scoring_config(layered)


DEFAULT_SCORING_CONFIG: ScoringConfig = build_scoring_config()


__all__ = [
    "AREA_TO_CLUBS",
    "BonusWeights",
    "DEFAULT_SCORING_CONFIG",
    "PenaltyWeights",
    "ScoringConfig",
    "ScoringConfigError",
    "Thresholds",
    "build_scoring_config",
    "clubs_for_area",
    "resolve_scoring_config",
]
