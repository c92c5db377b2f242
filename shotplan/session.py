"""Per-hole planning session owning the derived lookup caches.

The club reach index and hazard centroids are rebuilt lazily whenever the
session version changes. Every input setter bumps the version.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple

from .caddie.clubs import normalize_club
from .caddie.dispersion import MeasuredDispersion, dispersion_for
from .config.scoring_config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .courses.schemas import HAZARD_TYPES, PENALTY_TYPES, GeoPoint, HoleData, PolygonType
from .geo.primitives import bearing, centroid
from .playslike.engine import DEFAULT_CONFIG, PlaysLikeConfig
from .playslike.schemas import Weather
from .reach.index import ClubReachIndex
from .scoring.rules import ScoringRule
from .scoring.scorer import ShotScorer
from .scoring.schemas import PlayerContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HazardCentroid:
    type: PolygonType
    name: str
    center: GeoPoint
    is_penalty: bool


def hazard_centroids(hole: HoleData) -> Tuple[HazardCentroid, ...]:
    centroids = []
    for polygon in hole.polygons:
        if polygon.type not in HAZARD_TYPES or len(polygon.coordinates) < 3:
            continue
        center = centroid(polygon.coordinates)
        if center is None:
            continue
        centroids.append(
            HazardCentroid(
                type=polygon.type,
                name=polygon.name,
                center=center,
                is_penalty=polygon.type in PENALTY_TYPES,
            )
        )
    return tuple(centroids)


class PlanningSession:
    def __init__(
        self,
        hole: HoleData,
        player: PlayerContext,
        weather: Optional[Weather] = None,
        scoring_config: ScoringConfig = DEFAULT_SCORING_CONFIG,
        playslike_config: PlaysLikeConfig = DEFAULT_CONFIG,
        rules: Optional[Sequence[ScoringRule]] = None,
        measured_dispersion: Optional[Mapping[str, MeasuredDispersion]] = None,
    ) -> None:
        self._hole = hole
        self._player = player
        self._weather = weather
        self._bearing_override: Optional[float] = None
        self._measured: Dict[str, MeasuredDispersion] = {
            normalize_club(club): measured for club, measured in (measured_dispersion or {}).items()
        }
        self.scoring_config = scoring_config
        self.playslike_config = playslike_config
        self.scorer = ShotScorer(rules, scoring_config)
        self._version = 0
        self._reach: Optional[Tuple[int, ClubReachIndex]] = None
        self._centroids: Optional[Tuple[int, Tuple[HazardCentroid, ...]]] = None

    @property
    def version(self) -> int:
        return self._version

    @property
    def hole(self) -> HoleData:
        return self._hole

    @property
    def player(self) -> PlayerContext:
        return self._player

    @property
    def weather(self) -> Optional[Weather]:
        return self._weather

    @property
    def hole_bearing(self) -> float:
        if self._bearing_override is not None:
            return self._bearing_override
        return bearing(self._hole.tee_box, self._hole.green)

    def _bump(self, reason: str) -> None:
        self._version += 1
        logger.debug("planning session invalidated", extra={"reason": reason, "version": self._version})

    def update_weather(self, weather: Optional[Weather]) -> None:
        self._weather = weather
        self._bump("weather")

    def update_clubs(self, club_distances: Mapping[str, float]) -> None:
        self._player = self._player.model_copy(update={"club_distances": dict(club_distances)})
        self._bump("clubs")

    def update_player(self, player: PlayerContext) -> None:
        self._player = player
        self._bump("player")

    def update_hole(self, hole: HoleData) -> None:
        self._hole = hole
        self._bump("hole")

    def set_hole_bearing(self, value: Optional[float]) -> None:
        self._bearing_override = None if value is None else value % 360.0
        self._bump("bearing")

    def update_measured_dispersion(self, club: str, measured: Optional[MeasuredDispersion]) -> None:
        club_id = normalize_club(club)
        if measured is None:
            self._measured.pop(club_id, None)
        else:
            self._measured[club_id] = measured
        self._bump("dispersion")

    @property
    def reach_index(self) -> ClubReachIndex:
        if self._reach is None or self._reach[0] != self._version:
            index = ClubReachIndex.build(
                self._player.club_distances,
                self._weather,
                self.hole_bearing,
                self.playslike_config,
            )
            self._reach = (self._version, index)
        return self._reach[1]

    @property
    def hazard_centroids(self) -> Tuple[HazardCentroid, ...]:
        if self._centroids is None or self._centroids[0] != self._version:
            self._centroids = (self._version, hazard_centroids(self._hole))
        return self._centroids[1]

    def dispersion_override(self, club_id: str) -> Optional[float]:
        wanted = normalize_club(club_id)
        for club, radius in self._player.dispersion_radii.items():
            if normalize_club(club) == wanted:
                return radius
        return None

    def dispersion_radius(self, club_id: Optional[str]) -> float:
        """Landing radius for ``club_id``: player override, then the blended model."""

        default = self.scoring_config.thresholds.default_dispersion_radius
        if not club_id:
            return default
        override = self.dispersion_override(club_id)
        if override:
            return override
        dispersion = dispersion_for(
            club_id,
            self._player.club_distances,
            self._player.handicap,
            self._measured.get(normalize_club(club_id)),
        )
        return dispersion.radius or default


__all__ = ["HazardCentroid", "PlanningSession", "hazard_centroids"]
