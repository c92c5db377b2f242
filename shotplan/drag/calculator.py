"""Pure recompute steps behind the drag pipeline.

Tier 1 touches only distances, the reach index and wind/temperature. Tier 2
adds polygon containment and centroid proximity for a traffic-light colour.
Tier 3 rebuilds full shot options, scores them and colours every shot.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ..courses.hazards import fairway_width_at, hazard_conflicts, hazard_ranges, is_in_fairway
from ..courses.schemas import PENALTY_TYPES, GeoPoint, PolygonType
from ..geo.primitives import bearing, distance, point_in_polygon
from ..playslike.engine import compute_effective_distance
from ..scoring.schemas import ScoreBreakdown, SequenceScore, ShotOption
from ..session import PlanningSession

MAX_REACH_GAP_YARDS = 20
AWKWARD_ZONE = (30, 60)
PENALTY_CENTROID_YARDS = 15
BUNKER_CENTROID_YARDS = 8
CRITICAL_HAZARD_PENALTY = -30
CRITICAL_FLIGHT_PATH_PENALTY = -50
RED_SCORE_BELOW = -20


class ShotColor(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


@dataclass(frozen=True)
class ShotUpdate:
    index: int
    distance: int
    club: Optional[str]
    display_name: str
    effective_distance: Optional[float]
    distance_to_green: Optional[int]
    gap: Optional[float]
    color: Optional[ShotColor] = None


@dataclass(frozen=True)
class FullUpdate:
    shots: Tuple[ShotOption, ...]
    updates: Tuple[ShotUpdate, ...]
    sequence: Optional[SequenceScore]


def start_of(shots: Sequence[ShotOption], index: int, tee: GeoPoint) -> GeoPoint:
    return tee if index == 0 else shots[index - 1].landing_zone


def frame_update(
    session: PlanningSession, index: int, position: GeoPoint, previous: GeoPoint
) -> ShotUpdate:
    """Tier 1: distance, nearest club and wind/temperature plays-like."""

    yards = distance(previous, position)
    match = session.reach_index.nearest_club(yards)
    plays = compute_effective_distance(
        yards,
        session.weather,
        bearing(previous, position),
        config=session.playslike_config,
        include_elevation=False,
    )
    return ShotUpdate(
        index=index,
        distance=yards,
        club=match.entry.club_id if match else None,
        display_name=match.entry.display_name if match else "No club",
        effective_distance=round(plays.effective_distance),
        distance_to_green=distance(position, session.hole.green),
        gap=round(match.gap) if match else None,
    )


def next_shot_distance(index: int, position: GeoPoint, landing: GeoPoint) -> ShotUpdate:
    """Tier 1 for the following shot: only its start point moved."""

    return ShotUpdate(
        index=index,
        distance=distance(position, landing),
        club=None,
        display_name="",
        effective_distance=None,
        distance_to_green=None,
        gap=None,
    )


def lightweight_color(
    session: PlanningSession, position: GeoPoint, previous: GeoPoint, is_approach: bool
) -> ShotColor:
    """Tier 2 colour; first matching rule wins."""

    polygons = session.hole.polygons
    for polygon in polygons:
        if polygon.type in PENALTY_TYPES and point_in_polygon(position, polygon):
            return ShotColor.RED
    for polygon in polygons:
        if polygon.type == PolygonType.BUNKER and point_in_polygon(position, polygon):
            return ShotColor.YELLOW

    match = session.reach_index.nearest_club(distance(previous, position))
    if match is None or match.gap > MAX_REACH_GAP_YARDS:
        return ShotColor.RED

    if not is_approach:
        to_green = distance(position, session.hole.green)
        if AWKWARD_ZONE[0] <= to_green <= AWKWARD_ZONE[1]:
            return ShotColor.YELLOW

    for hazard in session.hazard_centroids:
        gap = distance(position, hazard.center)
        if hazard.is_penalty and gap < PENALTY_CENTROID_YARDS:
            return ShotColor.YELLOW
        if hazard.type == PolygonType.BUNKER and gap < BUNKER_CENTROID_YARDS:
            return ShotColor.YELLOW

    if not is_approach and not is_in_fairway(position, polygons):
        return ShotColor.YELLOW
    return ShotColor.GREEN


def color_for_breakdown(breakdown: ScoreBreakdown) -> ShotColor:
    for item in breakdown.penalties:
        if item.type == "hazard" and item.value <= CRITICAL_HAZARD_PENALTY:
            return ShotColor.RED
        if item.type == "flight_path" and item.value <= CRITICAL_FLIGHT_PATH_PENALTY:
            return ShotColor.RED
    if breakdown.score < RED_SCORE_BELOW:
        return ShotColor.RED
    if breakdown.score < 0:
        return ShotColor.YELLOW
    return ShotColor.GREEN


def build_shot_option(
    session: PlanningSession,
    shot_number: int,
    start: GeoPoint,
    landing: GeoPoint,
    is_approach: bool,
) -> ShotOption:
    """Full geometry for one shot from ``start`` to ``landing``."""

    hole = session.hole
    yards = distance(start, landing)
    match = session.reach_index.nearest_club(yards)
    club_id = match.entry.club_id if match else "unknown"
    plays = compute_effective_distance(
        yards,
        session.weather,
        bearing(start, landing),
        start.elevation,
        landing.elevation,
        session.playslike_config,
    )
    radius = session.dispersion_radius(match.entry.club_id if match else None)
    return ShotOption(
        shot_number=shot_number,
        club=club_id,
        club_distance=match.entry.club_distance if match else 0.0,
        effective_distance=plays.effective_distance,
        raw_distance=yards,
        distance_remaining=distance(landing, hole.green),
        landing_zone=landing,
        dispersion_radius=radius,
        hazard_conflicts=hazard_conflicts(landing, radius, hole.polygons),
        hazard_ranges=hazard_ranges(start, landing, hole.polygons, config=session.scoring_config),
        next_shot_hazard_ranges=hazard_ranges(
            landing, hole.green, hole.polygons, config=session.scoring_config
        ),
        fairway_width=fairway_width_at(start, yards, hole.green, hole.polygons),
        is_approach=is_approach,
    )


def recalculate_chain(
    session: PlanningSession, shots: Sequence[ShotOption], from_index: int
) -> List[ShotOption]:
    """Rebuild shot ``from_index`` and everything after it; earlier shots are reused.

    Landing zones stay where they are; only the start of each downstream shot
    moves, which changes its distance, club and geometry.
    """

    rebuilt: List[ShotOption] = list(shots[:from_index])
    last = len(shots) - 1
    for index in range(from_index, len(shots)):
        start = start_of(rebuilt, index, session.hole.tee_box)
        rebuilt.append(
            build_shot_option(
                session,
                shots[index].shot_number,
                start,
                shots[index].landing_zone,
                index == last,
            )
        )
    return rebuilt


def full_update(
    session: PlanningSession, shots: Sequence[ShotOption], dragged_index: int
) -> FullUpdate:
    """Tier 3: chain recalculation, per-shot scores, sequence total and colours."""

    rebuilt = recalculate_chain(session, shots, dragged_index)
    sequence = session.scorer.score_sequence(rebuilt, session.player, session.hole)
    updates = []
    for index, (shot, breakdown) in enumerate(zip(rebuilt, sequence.shots)):
        entry = session.reach_index.get(shot.club)
        updates.append(
            ShotUpdate(
                index=index,
                distance=int(shot.raw_distance),
                club=shot.club if entry else None,
                display_name=entry.display_name if entry else "No club",
                effective_distance=round(shot.effective_distance),
                distance_to_green=int(shot.distance_remaining),
                gap=round(abs(entry.adjusted_distance - shot.raw_distance)) if entry else None,
                color=color_for_breakdown(breakdown),
            )
        )
    return FullUpdate(shots=tuple(rebuilt), updates=tuple(updates), sequence=sequence)


def position_only_update(
    shots: Sequence[ShotOption], index: int, position: GeoPoint, tee: GeoPoint
) -> FullUpdate:
    """Fallback when a full rescore fails: keep the dragged coordinate, nothing else."""

    updated = list(shots)
    moved = updated[index].model_copy(update={"landing_zone": position})
    updated[index] = moved
    start = start_of(updated, index, tee)
    update = ShotUpdate(
        index=index,
        distance=distance(start, position),
        club=moved.club,
        display_name=moved.club,
        effective_distance=None,
        distance_to_green=None,
        gap=None,
        color=ShotColor.YELLOW,
    )
    return FullUpdate(shots=tuple(updated), updates=(update,), sequence=None)


__all__ = [
    "FullUpdate",
    "ShotColor",
    "ShotUpdate",
    "build_shot_option",
    "color_for_breakdown",
    "frame_update",
    "full_update",
    "lightweight_color",
    "next_shot_distance",
    "position_only_update",
    "recalculate_chain",
    "start_of",
]
