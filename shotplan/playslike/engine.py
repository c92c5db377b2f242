"""Deterministic plays-like distance engine.

Every effect is computed from the raw distance (effects are not chained) and
the effective distance is the raw distance plus the sum of the effects.
Missing inputs drop the matching adjustment instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Tuple, Union

from ..config import NEGLIGIBLE_YARDS, REFERENCE_TEMP_F, coerce_boolish, env_bool
from .schemas import (
    Adjustments,
    EffectiveDistanceContext,
    ElevationAdjustment,
    TemperatureAdjustment,
    Weather,
    WindAdjustment,
    apply_adjustments,
)

WIND_DIRECTION_TO_BEARING = {
    "N": 0.0,
    "NNE": 22.5,
    "NE": 45.0,
    "ENE": 67.5,
    "E": 90.0,
    "ESE": 112.5,
    "SE": 135.0,
    "SSE": 157.5,
    "S": 180.0,
    "SSW": 202.5,
    "SW": 225.0,
    "WSW": 247.5,
    "W": 270.0,
    "WNW": 292.5,
    "NW": 315.0,
    "NNW": 337.5,
}


@dataclass(frozen=True)
class PlaysLikeConfig:
    reference_temp_f: float = REFERENCE_TEMP_F
    negligible_yards: float = NEGLIGIBLE_YARDS
    headwind_pct_per_mph: float = 0.01
    tailwind_pct_per_mph: float = 0.005
    temp_pct_per_degree: float = 0.002
    feet_per_yard_of_slope: float = 3.0
    altitude_pct_per_1000ft: float = 0.02
    enable_elevation: bool = env_bool("SHOTPLAN_PLAYSLIKE_ELEVATION", True)

    def with_overrides(self, mapping: Optional[Mapping[str, Any]]) -> "PlaysLikeConfig":
        if not mapping:
            return self
        changes: dict[str, Any] = {}
        for key in (
            "reference_temp_f",
            "negligible_yards",
            "headwind_pct_per_mph",
            "tailwind_pct_per_mph",
            "temp_pct_per_degree",
            "feet_per_yard_of_slope",
            "altitude_pct_per_1000ft",
        ):
            value = mapping.get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                changes[key] = float(value)
        enabled = coerce_boolish(mapping.get("enable_elevation"))
        if enabled is not None:
            changes["enable_elevation"] = enabled
        if changes.get("feet_per_yard_of_slope", 1.0) <= 0:
            raise ValueError("feet_per_yard_of_slope must be positive")
        return replace(self, **changes)


DEFAULT_CONFIG = PlaysLikeConfig()


def wind_bearing(direction: Optional[Union[float, str]]) -> Optional[float]:
    """Bearing the wind blows FROM, or None when it cannot be resolved."""

    if direction is None or isinstance(direction, bool):
        return None
    if isinstance(direction, (int, float)):
        value = float(direction)
    else:
        key = direction.strip().upper()
        if key in WIND_DIRECTION_TO_BEARING:
            return WIND_DIRECTION_TO_BEARING[key]
        try:
            value = float(key)
        except ValueError:
            return None
    if not math.isfinite(value):
        return None
    return value % 360.0


def wind_components(
    wind_mph: float, wind_from_deg: float, shot_bearing_deg: float
) -> Tuple[float, float]:
    """Return (headwind, crosswind). Positive crosswind means aim left."""
    rel = (shot_bearing_deg - wind_from_deg + 540.0) % 360.0 - 180.0
    head = wind_mph * math.cos(math.radians(rel))  # + = headwind, - = tailwind
    cross = wind_mph * math.sin(math.radians(rel))
    return head, cross


def _crosswind_factor(base_distance: float) -> float:
    if base_distance > 180:
        return 2.5
    if base_distance > 140:
        return 2.0
    return 1.5


def wind_adjustment(
    base_distance: float,
    weather: Optional[Weather],
    shot_bearing: float,
    config: PlaysLikeConfig = DEFAULT_CONFIG,
) -> Optional[WindAdjustment]:
    if weather is None or not weather.wind_speed:
        return None
    wind_from = wind_bearing(weather.wind_direction)
    if wind_from is None:
        return None

    head, cross = wind_components(weather.wind_speed, wind_from, shot_bearing)
    if head > 0:
        effect = base_distance * head * config.headwind_pct_per_mph
    else:
        effect = base_distance * head * config.tailwind_pct_per_mph
    aim_offset = abs(cross) * _crosswind_factor(base_distance)
    if cross > 0:
        aim_direction: Optional[str] = "left"
    elif cross < 0:
        aim_direction = "right"
    else:
        aim_direction = None

    if abs(effect) < config.negligible_yards and aim_offset < config.negligible_yards:
        return None

    parts = []
    if abs(effect) >= config.negligible_yards:
        kind = "into the wind" if effect > 0 else "downwind"
        parts.append(f"{effect:+.0f} yds {kind}")
    if aim_offset >= config.negligible_yards and aim_direction:
        parts.append(f"aim {aim_offset:.0f} yds {aim_direction}")
    return WindAdjustment(
        distance_effect=effect,
        aim_offset_yards=aim_offset,
        aim_direction=aim_direction,
        headwind_mph=round(head, 2),
        crosswind_mph=round(cross, 2),
        description=", ".join(parts),
    )


def temperature_adjustment(
    base_distance: float,
    temperature_f: Optional[float],
    config: PlaysLikeConfig = DEFAULT_CONFIG,
) -> Optional[TemperatureAdjustment]:
    if temperature_f is None:
        return None
    effect = base_distance * (config.reference_temp_f - temperature_f) * config.temp_pct_per_degree
    if abs(effect) < config.negligible_yards:
        return None
    feel = "cold" if effect > 0 else "warm"
    return TemperatureAdjustment(
        distance_effect=effect,
        description=f"{temperature_f:.0f}°F {feel}, {effect:+.0f} yds",
    )


def elevation_adjustment(
    base_distance: float,
    player_elevation: Optional[float],
    target_elevation: Optional[float],
    course_elevation: Optional[float] = None,
    config: PlaysLikeConfig = DEFAULT_CONFIG,
) -> Optional[ElevationAdjustment]:
    """Slope from the point pair plus thin-air carry from altitude (feet)."""

    delta: Optional[float] = None
    slope = 0.0
    if player_elevation is not None and target_elevation is not None:
        delta = target_elevation - player_elevation
        slope = delta / config.feet_per_yard_of_slope

    altitude_ft = course_elevation if course_elevation is not None else player_elevation
    altitude = 0.0
    if altitude_ft is not None and altitude_ft > 0:
        altitude = -base_distance * altitude_ft / 1000.0 * config.altitude_pct_per_1000ft

    if abs(slope) < config.negligible_yards and abs(altitude) < config.negligible_yards:
        return None

    parts = []
    if delta is not None and abs(slope) >= config.negligible_yards:
        direction = "uphill" if delta > 0 else "downhill"
        parts.append(f"{direction} {abs(delta):.0f}ft ({slope:+.0f} yds)")
    if abs(altitude) >= config.negligible_yards:
        parts.append(f"altitude {altitude:+.0f} yds")
    return ElevationAdjustment(
        elevation_delta=delta,
        slope_effect=slope,
        altitude_effect=altitude,
        description=", ".join(parts),
    )


def compute_effective_distance(
    base_distance: float,
    weather: Optional[Weather] = None,
    shot_bearing: float = 0.0,
    player_elevation: Optional[float] = None,
    target_elevation: Optional[float] = None,
    config: PlaysLikeConfig = DEFAULT_CONFIG,
    include_elevation: bool = True,
) -> EffectiveDistanceContext:
    """Plays-like distance for ``base_distance`` with its per-factor breakdown."""

    base = float(base_distance)
    if base <= 0:
        return EffectiveDistanceContext(base_distance=base, effective_distance=base)

    elevation = None
    if include_elevation and config.enable_elevation:
        elevation = elevation_adjustment(
            base,
            player_elevation,
            target_elevation,
            weather.course_elevation if weather is not None else None,
            config,
        )
    adjustments = Adjustments(
        wind=wind_adjustment(base, weather, shot_bearing, config),
        temperature=temperature_adjustment(
            base, weather.temperature if weather is not None else None, config
        ),
        elevation=elevation,
    )
    return EffectiveDistanceContext(
        base_distance=base,
        effective_distance=apply_adjustments(base, adjustments),
        adjustments=adjustments,
    )


def adjusted_carry(
    club_distance: float,
    weather: Optional[Weather],
    shot_bearing: float,
    config: PlaysLikeConfig = DEFAULT_CONFIG,
) -> float:
    """Where a full swing with this club lands after wind and temperature.

    Inverse of the plays-like effect: a headwind that makes a shot play longer
    makes the same club land shorter.
    """

    if club_distance <= 0:
        return 0.0
    carry = float(club_distance)
    wind = wind_adjustment(carry, weather, shot_bearing, config)
    temp = temperature_adjustment(
        carry, weather.temperature if weather is not None else None, config
    )
    if wind is not None:
        carry -= wind.distance_effect
    if temp is not None:
        carry -= temp.distance_effect
    return carry


__all__ = [
    "DEFAULT_CONFIG",
    "PlaysLikeConfig",
    "WIND_DIRECTION_TO_BEARING",
    "adjusted_carry",
    "compute_effective_distance",
    "elevation_adjustment",
    "temperature_adjustment",
    "wind_adjustment",
    "wind_bearing",
    "wind_components",
]
