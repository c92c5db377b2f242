from __future__ import annotations

import pytest

from shotplan.playslike.schemas import Weather
from shotplan.reach.index import ClubReachEntry, ClubReachIndex

CLUBS = {"Driver": 250, "3w": 230, "5i": 180, "7i": 160, "9i": 140, "PW": 125, "SW": 100}


def test_entries_are_sorted_by_adjusted_distance() -> None:
    weather = Weather(wind_speed=8, wind_direction="NE", temperature=55)
    index = ClubReachIndex.build(CLUBS, weather, bearing=20.0)
    carries = [entry.adjusted_distance for entry in index.entries]
    assert carries == sorted(carries)
    assert len(index) == len(CLUBS)


def test_non_positive_distances_are_skipped() -> None:
    index = ClubReachIndex.build({"driver": 250, "putter": 0, "4i": -10})
    assert [entry.club_id for entry in index] == ["driver"]


def test_nearest_club_is_optimal() -> None:
    index = ClubReachIndex.build(CLUBS)
    for target in range(1, 320, 3):
        match = index.nearest_club(target)
        assert match is not None
        best = min(abs(entry.adjusted_distance - target) for entry in index.entries)
        assert match.gap == pytest.approx(best)
        assert match.delta == pytest.approx(match.entry.adjusted_distance - target)


def test_ties_resolve_to_the_shorter_club() -> None:
    index = ClubReachIndex.build(CLUBS)
    match = index.nearest_club(150)
    assert match.entry.club_id == "9_iron"
    assert match.gap == pytest.approx(10)


def test_nearest_club_edge_cases() -> None:
    index = ClubReachIndex.build(CLUBS)
    assert index.nearest_club(0) is None
    assert index.nearest_club(-25) is None
    assert ClubReachIndex([]).nearest_club(150) is None
    assert index.nearest_club(400).entry.club_id == "driver"
    assert index.nearest_club(10).entry.club_id == "sw"


def test_headwind_shortens_every_carry() -> None:
    calm = ClubReachIndex.build(CLUBS)
    into = ClubReachIndex.build(CLUBS, Weather(wind_speed=10, wind_direction="N"), bearing=0.0)
    for club in ("driver", "7_iron", "sw"):
        assert into.get(club).adjusted_distance < calm.get(club).adjusted_distance
    assert into.get("Driver").adjusted_distance == pytest.approx(225.0)


def test_entries_carry_display_names() -> None:
    index = ClubReachIndex.build({"52": 105, "7i": 160})
    assert index.get("w_52") == ClubReachEntry(
        club_id="w_52",
        display_name="52° Wedge",
        club_distance=105.0,
        adjusted_distance=105.0,
        adjustments={"total": 0.0},
    )
    assert index.get("7_iron").display_name == "7 Iron"
    assert index.get("lw") is None
