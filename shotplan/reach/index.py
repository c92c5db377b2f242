"""Per-club landing carries sorted for nearest-club lookup."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from ..caddie.clubs import display_name, normalize_club
from ..playslike.engine import DEFAULT_CONFIG, PlaysLikeConfig, adjusted_carry
from ..playslike.schemas import Weather


@dataclass(frozen=True)
class ClubReachEntry:
    club_id: str
    display_name: str
    club_distance: float
    adjusted_distance: float
    adjustments: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ClubMatch:
    entry: ClubReachEntry
    delta: float  # adjusted_distance - target

    @property
    def gap(self) -> float:
        return abs(self.delta)


class ClubReachIndex:
    """Immutable, ascending by adjusted distance. Rebuild when inputs change."""

    def __init__(self, entries: List[ClubReachEntry]) -> None:
        ordered = sorted(entries, key=lambda e: (e.adjusted_distance, e.club_distance))
        self._entries: Tuple[ClubReachEntry, ...] = tuple(ordered)
        self._keys: Tuple[float, ...] = tuple(e.adjusted_distance for e in ordered)

    @classmethod
    def build(
        cls,
        club_distances: Mapping[str, float],
        weather: Optional[Weather] = None,
        bearing: float = 0.0,
        config: PlaysLikeConfig = DEFAULT_CONFIG,
    ) -> "ClubReachIndex":
        entries = []
        for club, club_distance in club_distances.items():
            if club_distance is None or club_distance <= 0:
                continue
            carry = adjusted_carry(club_distance, weather, bearing, config)
            entries.append(
                ClubReachEntry(
                    club_id=normalize_club(club),
                    display_name=display_name(club),
                    club_distance=float(club_distance),
                    adjusted_distance=carry,
                    adjustments={"total": carry - float(club_distance)},
                )
            )
        return cls(entries)

    @property
    def entries(self) -> Tuple[ClubReachEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def get(self, club_id: str) -> Optional[ClubReachEntry]:
        wanted = normalize_club(club_id)
        for entry in self._entries:
            if entry.club_id == wanted:
                return entry
        return None

    def nearest_club(self, target: float) -> Optional[ClubMatch]:
        """Club whose adjusted carry is closest to ``target``; ties go to the shorter club."""

        if not self._entries or target is None or target <= 0:
            return None
        pos = bisect_left(self._keys, target)
        candidates = [i for i in (pos - 1, pos) if 0 <= i < len(self._entries)]
        best = min(candidates, key=lambda i: (abs(self._keys[i] - target), i))
        entry = self._entries[best]
        return ClubMatch(entry=entry, delta=entry.adjusted_distance - target)


__all__ = ["ClubMatch", "ClubReachEntry", "ClubReachIndex"]
