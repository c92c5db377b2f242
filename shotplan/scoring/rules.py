"""Scoring rules.

Each rule inspects one shot and returns a single signed ``ScoreItem`` or
``None`` when it does not apply. Rules never look at each other's output, so
the registry order only decides the order items appear in a breakdown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

from ..caddie.clubs import normalize_club
from ..config.scoring_config import ScoringConfig, clubs_for_area
from ..courses.hazards import hazards_within, is_in_fairway
from ..courses.schemas import HoleData, PolygonType
from .schemas import PlayerContext, ScoreItem, ShotOption

_TREES = frozenset({PolygonType.TREES})
_PENALTY = frozenset({PolygonType.WATER, PolygonType.OUT_OF_BOUNDS, PolygonType.HAZARD})
_BUNKER = frozenset({PolygonType.BUNKER})


@dataclass(frozen=True)
class ScoringContext:
    player: PlayerContext
    hole: HoleData
    config: ScoringConfig

    def radius(self, shot: ShotOption) -> float:
        if shot.dispersion_radius:
            return shot.dispersion_radius
        return self.config.thresholds.default_dispersion_radius


class ScoringRule(Protocol):
    name: str

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        ...


def _item(kind: str, value: float, reason: str) -> Optional[ScoreItem]:
    if value == 0:
        return None
    return ScoreItem(type=kind, value=value, reason=reason)


def _utilization(shot: ShotOption) -> Optional[float]:
    if shot.club_distance <= 0:
        return None
    return shot.effective_distance / shot.club_distance


class AwkwardDistanceRule:
    name = "awkward_distance"

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        t = context.config.thresholds
        p = context.config.penalties
        left = shot.distance_remaining
        if t.awkward_min <= left <= t.awkward_max:
            return _item(
                "half_swing",
                p.half_swing,
                f"{left:.0f} yards left is a half swing, too long to chip and too short for a full swing",
            )
        if t.secondary_awkward_min <= left <= t.secondary_awkward_max:
            return _item("awkward_distance", p.awkward_distance, f"{left:.0f} yards left needs a partial wedge")
        return None


class PartialSwingRule:
    name = "partial_swing"

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        used = _utilization(shot)
        if used is None:
            return None
        t = context.config.thresholds
        if used < t.utilization_severe_partial:
            return _item(
                "partial_swing",
                context.config.penalties.partial_swing_severe,
                f"only {used:.0%} of the club, heavy deceleration",
            )
        if used < t.utilization_partial:
            return _item(
                "partial_swing",
                context.config.penalties.partial_swing_mild,
                f"only {used:.0%} of the club, partial swing",
            )
        return None


class FullSwingRule:
    name = "full_swing"

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        used = _utilization(shot)
        t = context.config.thresholds
        if used is None or not t.utilization_sweet_spot_min <= used <= t.utilization_sweet_spot_max:
            return None
        return _item("full_swing", context.config.bonuses.full_swing, "full comfortable swing")


class FullWedgeApproachRule:
    name = "full_wedge_approach"

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        if shot.is_approach:
            return None
        t = context.config.thresholds
        low = context.player.ideal_wedge_min
        high = context.player.ideal_wedge_max
        low = t.full_wedge_min if low is None else low
        high = t.full_wedge_max if high is None else high
        left = shot.distance_remaining
        if not low <= left <= high:
            return None
        return _item(
            "full_wedge_approach",
            context.config.bonuses.full_wedge_approach,
            f"leaves {left:.0f} yards, a full wedge",
        )


class HazardProximityRule:
    """Dispersion circle overlapping hazards, scaled by overlap."""

    name = "hazard_proximity"

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        total = 0.0
        names: List[str] = []
        for conflict in shot.hazard_conflicts:
            severity = context.config.severity_for(conflict.type.value)
            total -= round(severity * conflict.overlap_percentage / 100.0)
            names.append(conflict.name)
        return _item("hazard", total, "dispersion overlaps " + ", ".join(names))


class DistanceHazardRule:
    """Landing distance window against hazard distance ranges."""

    name = "distance_hazard"

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        if shot.is_approach or not shot.hazard_ranges or not shot.raw_distance:
            return None
        t = context.config.thresholds
        p = context.config.penalties
        spread = context.radius(shot) * t.distance_dispersion_factor
        low = shot.raw_distance - spread
        high = shot.raw_distance + spread
        window = high - low

        total = 0.0
        reasons: List[str] = []
        for hazard in shot.hazard_ranges:
            if high >= hazard.front_distance and low <= hazard.back_distance:
                overlap = min(high, hazard.back_distance) - max(low, hazard.front_distance)
                fraction = overlap / window if window > 0 else 1.0
                penalty = hazard.severity * fraction
                if hazard.is_penalty:
                    penalty *= t.penalty_hazard_multiplier
                total -= round(penalty)
                reasons.append(
                    f"landing overlaps {hazard.name} ({hazard.front_distance}-{hazard.back_distance} yds)"
                )
                continue
            margin = max(hazard.front_distance - high, low - hazard.back_distance)
            if 0 < margin < t.near_miss_buffer:
                total += p.near_miss_penalty_hazard if hazard.is_penalty else p.near_miss_hazard
                reasons.append(f"lands {margin:.0f} yds from {hazard.name}, tight margin")
        return _item("distance_hazard", total, "; ".join(reasons))


def _carry_penalty(
    hazard_type: PolygonType, weights: Tuple[float, float, float]
) -> Optional[float]:
    trees, penalty, bunker = weights
    if hazard_type in _TREES:
        return trees
    if hazard_type in _PENALTY:
        return penalty
    if hazard_type in _BUNKER:
        return bunker
    return None


class FlightPathRule:
    """Hazards the ball must fly over before the landing zone."""

    name = "flight_path"

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        if not shot.hazard_ranges or not shot.raw_distance:
            return None
        p = context.config.penalties
        buffer = context.config.thresholds.carry_buffer
        weights = (p.trees_in_flight_path, p.carry_over_water, p.carry_over_hazard)
        total = 0.0
        reasons: List[str] = []
        for hazard in shot.hazard_ranges:
            if hazard.back_distance < shot.raw_distance - buffer and hazard.front_distance > 0:
                value = _carry_penalty(hazard.type, weights)
                if value is None:
                    continue
                total += value
                reasons.append(
                    f"carries {hazard.name} ({hazard.front_distance}-{hazard.back_distance} yds)"
                )
        return _item("flight_path", total, "; ".join(reasons))


class NextShotHazardRule:
    """Hazards left between the landing zone and the green."""

    name = "next_shot_hazard"

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        if shot.is_approach or not shot.next_shot_hazard_ranges or not shot.distance_remaining:
            return None
        p = context.config.penalties
        buffer = context.config.thresholds.carry_buffer
        weights = (p.next_shot_over_trees, p.next_shot_over_water, p.next_shot_over_bunker)
        total = 0.0
        reasons: List[str] = []
        for hazard in shot.next_shot_hazard_ranges:
            if hazard.front_distance > 0 and hazard.back_distance < shot.distance_remaining - buffer:
                value = _carry_penalty(hazard.type, weights)
                if value is None:
                    continue
                total += value
                reasons.append(f"next shot must carry {hazard.name}")
        return _item("next_shot_hazard", total, "; ".join(reasons))


class FairwayLandingRule:
    name = "fairway_landing"

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        if shot.is_approach:
            return None
        fairways = context.hole.polygons_of(PolygonType.FAIRWAY)
        if not fairways:
            return None
        if is_in_fairway(shot.landing_zone, fairways):
            return _item("fairway_landing", context.config.bonuses.fairway_landing, "lands in the fairway")
        return _item("fairway_miss", context.config.penalties.fairway_miss, "lands in the rough")


class SafeMissRule:
    name = "safe_miss"

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        if shot.hazard_conflicts:
            return None
        bonus = context.config.bonuses.safe_miss_zone
        if shot.safe_zone:
            return _item("safe_miss", bonus, "safe miss zone available")
        reach = context.radius(shot) * context.config.thresholds.safe_miss_radius_factor
        if not hazards_within(shot.landing_zone, reach, context.hole.polygons):
            return _item("safe_miss", bonus, "no hazards in play")
        return None


class PlayerStrengthRule:
    name = "player_strength"

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        area = context.player.best_area
        if normalize_club(shot.club) not in clubs_for_area(area):
            return None
        return _item(
            "strength",
            context.config.bonuses.player_strength,
            f"{shot.club} is a strength ({area})",
        )


class PlayerWeaknessRule:
    name = "player_weakness"

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        area = context.player.worst_area
        if normalize_club(shot.club) not in clubs_for_area(area):
            return None
        return _item(
            "weakness",
            context.config.penalties.player_weakness,
            f"{shot.club} is a weak area ({area})",
        )


class FairwayWidthRule:
    name = "fairway_width"

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        if shot.is_approach or not shot.fairway_width:
            return None
        t = context.config.thresholds
        ratio = shot.fairway_width / (context.radius(shot) * 2)
        if ratio >= t.wide_fairway_ratio:
            return _item(
                "fairway_width",
                context.config.bonuses.wide_fairway,
                f"wide fairway ({shot.fairway_width:.0f} yds) at the landing zone",
            )
        if ratio < t.narrow_fairway_ratio:
            return _item(
                "fairway_width",
                context.config.penalties.narrow_fairway,
                f"narrow fairway ({shot.fairway_width:.0f} yds) at the landing zone",
            )
        return None


class OverGreenRule:
    name = "over_green"

    def evaluate(self, shot: ShotOption, context: ScoringContext) -> Optional[ScoreItem]:
        if not shot.is_approach or shot.effective_distance <= 0:
            return None
        ratio = shot.club_distance / shot.effective_distance
        if ratio <= context.config.thresholds.over_green_ratio:
            return None
        return _item(
            "over_green",
            context.config.penalties.over_the_green,
            f"club flies {ratio - 1:.0%} past the target",
        )


DEFAULT_RULES: Sequence[ScoringRule] = (
    AwkwardDistanceRule(),
    PartialSwingRule(),
    HazardProximityRule(),
    FairwayLandingRule(),
    OverGreenRule(),
    DistanceHazardRule(),
    FlightPathRule(),
    NextShotHazardRule(),
    FullSwingRule(),
    FullWedgeApproachRule(),
    SafeMissRule(),
    PlayerWeaknessRule(),
    PlayerStrengthRule(),
    FairwayWidthRule(),
)


__all__ = [
    "AwkwardDistanceRule",
    "DEFAULT_RULES",
    "DistanceHazardRule",
    "FairwayLandingRule",
    "FairwayWidthRule",
    "FlightPathRule",
    "FullSwingRule",
    "FullWedgeApproachRule",
    "HazardProximityRule",
    "NextShotHazardRule",
    "OverGreenRule",
    "PartialSwingRule",
    "PlayerStrengthRule",
    "PlayerWeaknessRule",
    "SafeMissRule",
    "ScoringContext",
    "ScoringRule",
]
