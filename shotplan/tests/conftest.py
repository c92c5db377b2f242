"""Shared fixtures: a straight par 4 running due north from the tee."""

from __future__ import annotations

from typing import List

import pytest

from shotplan.courses.schemas import HoleData, PolygonType
from shotplan.playslike.schemas import Weather
from shotplan.scoring.schemas import PlayerContext, ShotOption
from shotplan.session import PlanningSession
from shotplan.tests.course_builders import TEE, along, build_plan, rectangle, strip


@pytest.fixture()
def hole() -> HoleData:
    return HoleData(
        par=4,
        tee_box=TEE,
        green=along(400),
        polygons=[
            strip(PolygonType.FAIRWAY, 150, 320, 25, "main fairway"),
            rectangle(PolygonType.WATER, 200, 235, 45, 90, "right pond"),
            rectangle(PolygonType.BUNKER, 265, 280, -45, -30, "left bunker"),
            rectangle(PolygonType.GREEN, 390, 410, -12, 12),
        ],
    )


@pytest.fixture()
def player() -> PlayerContext:
    return PlayerContext(
        club_distances={
            "driver": 250,
            "3w": 230,
            "5i": 180,
            "7i": 160,
            "9i": 140,
            "pw": 125,
            "sw": 100,
        },
        handicap=12,
    )


@pytest.fixture()
def weather() -> Weather:
    return Weather(wind_speed=10, wind_direction="N", temperature=60)


@pytest.fixture()
def session(hole: HoleData, player: PlayerContext) -> PlanningSession:
    return PlanningSession(hole, player)


@pytest.fixture()
def plan(session: PlanningSession) -> List[ShotOption]:
    """Driver to the middle of the fairway, then a 150 yard approach."""

    return build_plan(session, along(250), session.hole.green)
