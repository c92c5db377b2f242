"""Shot dispersion estimates per club and handicap."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .clubs import normalize_club

BASE_DISPERSION_PCT = 0.08
LATERAL_SHARE = 0.6
DISTANCE_SHARE = 0.8
MIN_MEASURED_SHOTS = 5

CLUB_DISPERSION_FACTORS: Mapping[str, float] = {
    "driver": 1.4,
    "3_wood": 1.25,
    "5_wood": 1.2,
    "4_hybrid": 1.15,
    "5_hybrid": 1.1,
    "3_iron": 1.15,
    "4_iron": 1.1,
    "5_iron": 1.05,
    "6_iron": 1.0,
    "7_iron": 0.95,
    "8_iron": 0.9,
    "9_iron": 0.85,
    "pw": 0.75,
    "w_46": 0.7,
    "w_48": 0.7,
    "w_50": 0.7,
    "gw": 0.7,
    "w_52": 0.7,
    "w_54": 0.65,
    "sw": 0.65,
    "w_56": 0.65,
    "w_58": 0.6,
    "w_60": 0.6,
    "lw": 0.6,
}

DEFAULT_CLUB_DISTANCES: Mapping[str, float] = {
    "driver": 230,
    "3_wood": 210,
    "5_wood": 195,
    "4_hybrid": 185,
    "5_hybrid": 175,
    "3_iron": 185,
    "4_iron": 175,
    "5_iron": 165,
    "6_iron": 155,
    "7_iron": 145,
    "8_iron": 135,
    "9_iron": 125,
    "pw": 115,
    "gw": 100,
    "sw": 85,
    "lw": 70,
}
FALLBACK_CLUB_DISTANCE = 150.0


@dataclass(frozen=True)
class Dispersion:
    radius: int
    lateral: int
    distance: int
    carry: float
    handicap_factor: float
    club_factor: float
    source: str = "formula"
    confidence: float = 0.0


@dataclass(frozen=True)
class MeasuredDispersion:
    """Observed spread for one club from recorded shots."""

    total_shots: int
    radius: float
    lateral: Optional[float] = None
    distance: Optional[float] = None


def club_factor(club: Optional[str]) -> float:
    club_id = normalize_club(club)
    if not club_id:
        return 1.0
    if club_id in CLUB_DISPERSION_FACTORS:
        return CLUB_DISPERSION_FACTORS[club_id]
    if "driver" in club_id:
        return 1.4
    if "wood" in club_id:
        return 1.2
    if "hybrid" in club_id:
        return 1.1
    if club_id.startswith("w_") or "wedge" in club_id:
        return 0.7
    return 1.0


def handicap_factor(handicap: Optional[float]) -> float:
    """0.7 for scratch, 1.0 at ten, rising 0.03 per stroke up to 36."""

    if handicap is None:
        return 1.0
    clamped = max(0.0, min(36.0, float(handicap)))
    return 0.7 + clamped * 0.03


def measured_confidence(sample_size: int) -> float:
    if sample_size < 5:
        return 0.0
    if sample_size < 10:
        return 0.4
    if sample_size < 20:
        return 0.65
    if sample_size < 30:
        return 0.8
    if sample_size < 50:
        return 0.9
    return 0.95


def _formula(
    club_id: str, club_distances: Optional[Mapping[str, float]], handicap: Optional[float]
) -> Dispersion:
    known = {normalize_club(name): value for name, value in (club_distances or {}).items()}
    carry = known.get(club_id) or DEFAULT_CLUB_DISTANCES.get(club_id, FALLBACK_CLUB_DISTANCE)
    h_factor = handicap_factor(handicap)
    c_factor = club_factor(club_id)
    radius = int(round(carry * BASE_DISPERSION_PCT * h_factor * c_factor))
    return Dispersion(
        radius=radius,
        lateral=int(round(radius * LATERAL_SHARE)),
        distance=int(round(radius * DISTANCE_SHARE)),
        carry=float(carry),
        handicap_factor=round(h_factor, 2),
        club_factor=round(c_factor, 2),
    )


def dispersion_for(
    club: str,
    club_distances: Optional[Mapping[str, float]] = None,
    handicap: Optional[float] = 15,
    measured: Optional[MeasuredDispersion] = None,
) -> Dispersion:
    """Dispersion for ``club``, blending in measured data once enough shots exist."""

    club_id = normalize_club(club)
    formula = _formula(club_id, club_distances, handicap)
    if measured is None or measured.total_shots < MIN_MEASURED_SHOTS:
        return formula

    weight = measured_confidence(measured.total_shots)

    def blend(observed: Optional[float], fallback: int) -> int:
        if observed is None:
            return fallback
        return int(round(observed * weight + fallback * (1 - weight)))

    return Dispersion(
        radius=blend(measured.radius, formula.radius),
        lateral=blend(measured.lateral, formula.lateral),
        distance=blend(measured.distance, formula.distance),
        carry=formula.carry,
        handicap_factor=formula.handicap_factor,
        club_factor=formula.club_factor,
        source="measured",
        confidence=weight,
    )


__all__ = [
    "CLUB_DISPERSION_FACTORS",
    "DEFAULT_CLUB_DISTANCES",
    "Dispersion",
    "MeasuredDispersion",
    "club_factor",
    "dispersion_for",
    "handicap_factor",
    "measured_confidence",
]
