from __future__ import annotations

import pytest
from pydantic import ValidationError

from shotplan.playslike.engine import (
    DEFAULT_CONFIG,
    PlaysLikeConfig,
    adjusted_carry,
    compute_effective_distance,
    elevation_adjustment,
    temperature_adjustment,
    wind_bearing,
    wind_components,
)
from shotplan.playslike.schemas import Adjustments, EffectiveDistanceContext, Weather


def _effects(context: EffectiveDistanceContext) -> float:
    adj = context.adjustments
    total = 0.0
    if adj.wind:
        total += adj.wind.distance_effect
    if adj.temperature:
        total += adj.temperature.distance_effect
    if adj.elevation:
        total += adj.elevation.slope_effect + adj.elevation.altitude_effect
    return total


def test_effective_distance_is_base_plus_listed_effects() -> None:
    weather = Weather(wind_speed=12, wind_direction="NNE", temperature=48, course_elevation=5200)
    for base in (95.0, 148.0, 212.0, 263.0):
        context = compute_effective_distance(base, weather, 10.0, 120.0, 150.0)
        assert context.adjustments.wind is not None
        assert context.adjustments.temperature is not None
        assert context.adjustments.elevation is not None
        assert context.effective_distance == pytest.approx(base + _effects(context))
        assert context.total_adjustment == pytest.approx(_effects(context))


def test_headwind_lengthens_and_tailwind_shortens_a_250_yard_shot() -> None:
    headwind = compute_effective_distance(250, Weather(wind_speed=10, wind_direction="N"), 0.0)
    tailwind = compute_effective_distance(250, Weather(wind_speed=10, wind_direction="S"), 0.0)
    assert headwind.effective_distance == pytest.approx(275.0)
    assert tailwind.effective_distance == pytest.approx(237.5)
    assert headwind.adjustments.wind.distance_effect > 0
    assert tailwind.adjustments.wind.distance_effect < 0


def test_crosswind_produces_aim_offset_not_distance() -> None:
    context = compute_effective_distance(250, Weather(wind_speed=10, wind_direction="E"), 0.0)
    wind = context.adjustments.wind
    assert wind is not None
    assert wind.distance_effect == pytest.approx(0.0, abs=1e-9)
    assert wind.aim_offset_yards == pytest.approx(25.0)
    assert wind.aim_direction == "right"

    short = compute_effective_distance(120, Weather(wind_speed=10, wind_direction="W"), 0.0)
    assert short.adjustments.wind.aim_offset_yards == pytest.approx(15.0)
    assert short.adjustments.wind.aim_direction == "left"


def test_wind_direction_resolution() -> None:
    assert wind_bearing("nw") == 315.0
    assert wind_bearing("225") == 225.0
    assert wind_bearing(370) == 10.0
    assert wind_bearing("sideways") is None
    assert wind_bearing(None) is None
    head, cross = wind_components(10, 0.0, 0.0)
    assert head == pytest.approx(10.0)
    assert cross == pytest.approx(0.0, abs=1e-9)


def test_unresolvable_or_missing_inputs_omit_adjustments() -> None:
    context = compute_effective_distance(180, Weather(wind_speed=15, wind_direction="??"), 0.0)
    assert context.adjustments == Adjustments()
    assert context.effective_distance == 180.0
    assert compute_effective_distance(180).effective_distance == 180.0


def test_negligible_effects_are_omitted() -> None:
    context = compute_effective_distance(50, Weather(wind_speed=1, wind_direction="N", temperature=69), 0.0)
    assert context.adjustments.wind is None
    assert context.adjustments.temperature is None


def test_colder_plays_longer_and_is_monotonic() -> None:
    effects = [
        temperature_adjustment(200, temp).distance_effect for temp in (30.0, 40.0, 50.0)
    ]
    assert effects == sorted(effects, reverse=True)
    assert effects[2] == pytest.approx(200 * 20 * 0.002)
    assert temperature_adjustment(200, 90.0).distance_effect < 0


def test_elevation_slope_and_altitude() -> None:
    uphill = elevation_adjustment(200, 100.0, 130.0)
    assert uphill.slope_effect == pytest.approx(10.0)
    assert uphill.elevation_delta == pytest.approx(30.0)

    altitude = elevation_adjustment(200, None, None, course_elevation=5000)
    assert altitude.slope_effect == 0.0
    assert altitude.altitude_effect == pytest.approx(-20.0)

    # altitude falls back to the player's elevation
    fallback = elevation_adjustment(200, 5000.0, None)
    assert fallback.altitude_effect == pytest.approx(-20.0)
    assert elevation_adjustment(200, None, 40.0) is None


def test_elevation_can_be_excluded() -> None:
    context = compute_effective_distance(200, None, 0.0, 0.0, 60.0, include_elevation=False)
    assert context.adjustments.elevation is None
    assert context.effective_distance == 200.0


def test_context_rejects_effective_distance_that_does_not_add_up() -> None:
    with pytest.raises(ValidationError):
        EffectiveDistanceContext(base_distance=150, effective_distance=151)


def test_adjusted_carry_inverts_wind() -> None:
    into = Weather(wind_speed=10, wind_direction="N")
    assert adjusted_carry(200, into, 0.0) == pytest.approx(180.0)
    assert adjusted_carry(200, into, 180.0) == pytest.approx(210.0)
    assert adjusted_carry(0, into, 0.0) == 0.0


def test_config_overrides_coerce_flags() -> None:
    config = DEFAULT_CONFIG.with_overrides({"enable_elevation": "off", "headwind_pct_per_mph": 0.02})
    assert isinstance(config, PlaysLikeConfig)
    assert config.enable_elevation is False
    assert config.headwind_pct_per_mph == 0.02
    context = compute_effective_distance(100, None, 0.0, 0.0, 90.0, config=config)
    assert context.adjustments.elevation is None
    with pytest.raises(ValueError):
        DEFAULT_CONFIG.with_overrides({"feet_per_yard_of_slope": 0})
