"""Club identifiers and display names.

Canonical ids are lower snake case: ``driver``, ``3_wood``, ``4_hybrid``,
``7_iron``, ``pw``/``gw``/``sw``/``lw`` and loft wedges ``w_52``.
"""

from __future__ import annotations

import re
from typing import Optional

_SHORT_FORM = re.compile(r"^(\d{1,2})\s*([iwh])$")
_SHORT_KIND = {"i": "iron", "w": "wood", "h": "hybrid"}
_LOFT_WEDGE = re.compile(r"^(\d{2})(?:_?deg|°)?(?:_wedge)?$")

_NAMED_WEDGES = {
    "pw": "Pitching Wedge",
    "gw": "Gap Wedge",
    "sw": "Sand Wedge",
    "lw": "Lob Wedge",
}

_ALIASES = {
    "dr": "driver",
    "d": "driver",
    "pitching_wedge": "pw",
    "gap_wedge": "gw",
    "approach_wedge": "gw",
    "aw": "gw",
    "sand_wedge": "sw",
    "lob_wedge": "lw",
}


def normalize_club(club: Optional[str]) -> str:
    """Canonical club id for ``club``; unknown names pass through lower-cased."""

    if not club:
        return ""
    key = re.sub(r"[-\s]+", "_", club.strip().lower())
    if key in _ALIASES:
        return _ALIASES[key]
    short = _SHORT_FORM.match(key.replace("_", ""))
    if short:
        return f"{short.group(1)}_{_SHORT_KIND[short.group(2)]}"
    loft = _LOFT_WEDGE.match(key)
    if loft and 40 <= int(loft.group(1)) <= 64:
        return f"w_{loft.group(1)}"
    return key


def display_name(club: Optional[str]) -> str:
    """Human readable club label, e.g. ``w_52`` -> ``52° Wedge``."""

    club_id = normalize_club(club)
    if not club_id:
        return ""
    if club_id.startswith("w_"):
        return f"{club_id[2:]}° Wedge"
    if club_id in _NAMED_WEDGES:
        return _NAMED_WEDGES[club_id]
    return " ".join(part.capitalize() for part in club_id.split("_"))


def is_wedge(club: Optional[str]) -> bool:
    club_id = normalize_club(club)
    return club_id in _NAMED_WEDGES or club_id.startswith("w_")


__all__ = ["display_name", "is_wedge", "normalize_club"]
