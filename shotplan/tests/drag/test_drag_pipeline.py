from __future__ import annotations

import logging
from typing import Callable, List, Tuple

import pytest

from shotplan.drag.calculator import ShotColor
from shotplan.drag.pipeline import DragPhase, DragRecomputePipeline
from shotplan.drag.timing import ManualScheduler
from shotplan.geo.primitives import distance
from shotplan.metrics import REGISTRY
from shotplan.scoring.schemas import ShotOption
from shotplan.session import PlanningSession
from shotplan.tests.course_builders import along


def _counter(name: str) -> float:
    return REGISTRY.get_sample_value(name) or 0.0


class _IgnoredHandle:
    def cancel(self) -> None:
        pass


class LeakyScheduler(ManualScheduler):
    """Cancellation arrives too late, as with a timer thread already firing."""

    def call_later(self, delay: float, fn: Callable[[], None]):
        super().call_later(delay, fn)
        return _IgnoredHandle()


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def events() -> List[Tuple[str, int]]:
    return []


@pytest.fixture()
def pipeline(
    session: PlanningSession,
    plan: List[ShotOption],
    scheduler: ManualScheduler,
    events: List[Tuple[str, int]],
) -> DragRecomputePipeline:
    return DragRecomputePipeline(
        session,
        plan,
        scheduler=scheduler,
        throttle_seconds=0.1,
        defer_seconds=0.0,
        listener=lambda tier, updates: events.append((tier, len(updates))),
    )


def test_constructor_validates_arguments(session: PlanningSession, plan: List[ShotOption]) -> None:
    with pytest.raises(ValueError):
        DragRecomputePipeline(session, [], scheduler=ManualScheduler())
    with pytest.raises(ValueError):
        DragRecomputePipeline(session, plan, scheduler=ManualScheduler(), throttle_seconds=-1)
    with pytest.raises(ValueError):
        DragRecomputePipeline(session, plan, scheduler=ManualScheduler(), defer_seconds=-0.5)


def test_moves_are_ignored_outside_a_gesture(pipeline: DragRecomputePipeline) -> None:
    assert pipeline.on_drag_move(0, along(240)) == []
    assert pipeline.on_drag_end(0) is None
    with pytest.raises(ValueError):
        pipeline.on_drag_start(5)


def test_tier_one_reports_dragged_and_next_shot(pipeline: DragRecomputePipeline) -> None:
    pipeline.on_drag_start(0)
    updates = pipeline.on_drag_move(0, along(245))
    assert [u.index for u in updates] == [0, 1]
    assert updates[0].club == "driver"
    assert updates[0].gap == 5
    assert updates[1].distance == pytest.approx(155, abs=1)
    assert pipeline.on_drag_move(0, along(245)) == updates


def test_tier_one_tie_goes_to_the_shorter_club(pipeline: DragRecomputePipeline) -> None:
    pipeline.on_drag_start(0)
    (dragged, _) = pipeline.on_drag_move(0, along(240))
    assert dragged.club == "3_wood"
    assert dragged.gap == 10


def test_tier_two_is_coalesced_to_one_timer(
    pipeline: DragRecomputePipeline, scheduler: ManualScheduler, events
) -> None:
    pipeline.on_drag_start(0)
    for yards in (238, 244, 250):
        pipeline.on_drag_move(0, along(yards))
    assert scheduler.pending == 1

    assert scheduler.advance(0.1) == 1
    assert pipeline.colors == {0: ShotColor.GREEN}
    assert [tier for tier, _ in events] == ["tier1", "tier1", "tier1", "tier2"]

    # the next move after a fired timer schedules a fresh one
    pipeline.on_drag_move(0, along(215, 60))
    assert scheduler.pending == 1
    scheduler.advance(0.1)
    assert pipeline.colors[0] is ShotColor.RED


def test_drag_end_cancels_pending_colour_pass(
    pipeline: DragRecomputePipeline, scheduler: ManualScheduler, events
) -> None:
    discards = _counter("shotplan_drag_tier2_discards_total")
    pipeline.on_drag_start(0)
    pipeline.on_drag_move(0, along(250))
    result = pipeline.on_drag_end(0)

    assert scheduler.pending == 0
    assert scheduler.advance(1.0) == 0
    assert _counter("shotplan_drag_tier2_discards_total") == discards + 1
    assert "tier2" not in [tier for tier, _ in events]
    assert result is not None and result.sequence is not None
    assert pipeline.phase is DragPhase.IDLE
    assert pipeline.shots[0].landing_zone == along(250)
    assert pipeline.sequence == result.sequence


def test_late_colour_pass_after_release_is_discarded(
    session: PlanningSession, plan: List[ShotOption], events
) -> None:
    leaky = LeakyScheduler()
    pipeline = DragRecomputePipeline(
        session,
        plan,
        scheduler=leaky,
        throttle_seconds=0.1,
        defer_seconds=0.0,
        listener=lambda tier, updates: events.append((tier, len(updates))),
    )
    pipeline.on_drag_start(0)
    pipeline.on_drag_move(0, along(215, 60))
    pipeline.on_drag_end(0)
    colours = pipeline.colors

    assert leaky.advance(0.1) == 1
    assert pipeline.colors == colours
    assert "tier2" not in [tier for tier, _ in events]


def test_full_rescore_failure_keeps_dragged_position(
    pipeline: DragRecomputePipeline, monkeypatch
) -> None:
    def boom(*_args, **_kwargs):
        raise RuntimeError("hazard geometry unavailable")

    monkeypatch.setattr("shotplan.drag.pipeline.full_update", boom)
    fallbacks = _counter("shotplan_drag_tier3_fallbacks_total")

    pipeline.on_drag_start(0)
    result = pipeline.on_drag_end(0, along(262, 8))

    assert result is not None
    assert result.sequence is None
    assert pipeline.shots[0].landing_zone == along(262, 8)
    assert pipeline.colors[0] is ShotColor.YELLOW
    assert pipeline.phase is DragPhase.IDLE
    assert _counter("shotplan_drag_tier3_fallbacks_total") == fallbacks + 1


def test_deferred_rescore_completes_before_next_gesture(
    session: PlanningSession, plan: List[ShotOption], scheduler: ManualScheduler
) -> None:
    pipeline = DragRecomputePipeline(
        session, plan, scheduler=scheduler, throttle_seconds=0.1, defer_seconds=0.05
    )
    pipeline.on_drag_start(0)
    pipeline.on_drag_move(0, along(245))
    assert pipeline.on_drag_end(0) is None
    assert pipeline.phase is DragPhase.RELEASED
    assert pipeline.snapshot().tier3_pending

    snapshot = pipeline.on_drag_start(1)
    assert pipeline.sequence is not None
    assert not snapshot.tier3_pending
    assert snapshot.phase is DragPhase.DRAGGING
    assert snapshot.shot_index == 1
    assert scheduler.advance(1.0) == 0


def test_deferred_rescore_runs_on_its_own_timer(
    session: PlanningSession, plan: List[ShotOption], scheduler: ManualScheduler
) -> None:
    pipeline = DragRecomputePipeline(
        session, plan, scheduler=scheduler, throttle_seconds=0.1, defer_seconds=0.05
    )
    pipeline.on_drag_start(0)
    pipeline.on_drag_end(0, along(245))
    assert scheduler.advance(0.05) == 1
    assert pipeline.phase is DragPhase.IDLE
    assert pipeline.sequence is not None


def test_reset_restores_the_recommended_plan(
    pipeline: DragRecomputePipeline, plan: List[ShotOption], scheduler: ManualScheduler
) -> None:
    pipeline.on_drag_start(0)
    pipeline.on_drag_move(0, along(215, 60))
    pipeline.on_drag_end(0)
    assert pipeline.shots[0].landing_zone != plan[0].landing_zone

    snapshot = pipeline.reset()
    assert snapshot.phase is DragPhase.IDLE
    assert not snapshot.edited
    assert pipeline.shots == tuple(plan)
    assert pipeline.colors == {}
    assert pipeline.sequence is None
    assert pipeline.original == tuple(plan)


def test_listener_errors_do_not_break_the_drag(
    session: PlanningSession, plan: List[ShotOption], scheduler: ManualScheduler
) -> None:
    def broken(tier, updates):
        raise RuntimeError("ui went away")

    pipeline = DragRecomputePipeline(session, plan, scheduler=scheduler, listener=broken)
    pipeline.on_drag_start(0)
    assert pipeline.on_drag_move(0, along(250))
    assert pipeline.on_drag_end(0) is not None


def test_events_for_another_shot_are_ignored(
    pipeline: DragRecomputePipeline, plan: List[ShotOption], scheduler: ManualScheduler
) -> None:
    pipeline.on_drag_start(0)
    assert pipeline.on_drag_move(1, along(380)) == []
    assert pipeline.on_drag_end(1, along(380)) is None
    assert pipeline.phase is DragPhase.DRAGGING
    assert pipeline.shots[1].landing_zone == plan[1].landing_zone
    assert scheduler.pending == 0


def test_starting_another_shot_mid_drag_rescores_the_first(
    pipeline: DragRecomputePipeline, session: PlanningSession, events
) -> None:
    pipeline.on_drag_start(0)
    pipeline.on_drag_move(0, along(200))
    snapshot = pipeline.on_drag_start(1)

    first, second = pipeline.shots
    assert first.landing_zone == along(200)
    assert first.raw_distance == distance(session.hole.tee_box, along(200))
    assert first.club == "5_iron"
    assert second.raw_distance == distance(along(200), second.landing_zone)
    assert pipeline.sequence is not None
    assert snapshot.phase is DragPhase.DRAGGING
    assert snapshot.shot_index == 1
    assert not snapshot.tier2_pending
    assert [tier for tier, _ in events] == ["tier1", "tier3"]

    # the released gesture no longer accepts events
    assert pipeline.on_drag_move(0, along(220)) == []


def test_moves_after_reset_are_ignored(pipeline: DragRecomputePipeline, plan: List[ShotOption]) -> None:
    pipeline.on_drag_start(0)
    pipeline.reset()
    assert pipeline.on_drag_move(0, along(230)) == []
    assert pipeline.on_drag_end(0, along(230)) is None
    assert pipeline.shots == tuple(plan)


def test_rescore_failure_is_logged_with_structured_fields(
    pipeline: DragRecomputePipeline, monkeypatch, caplog
) -> None:
    def boom(*_args, **_kwargs):
        raise RuntimeError("hazard geometry unavailable")

    monkeypatch.setattr("shotplan.drag.pipeline.full_update", boom)
    caplog.set_level(logging.WARNING, logger="shotplan.drag")

    pipeline.on_drag_start(0)
    pipeline.on_drag_end(0, along(262, 8))

    (record,) = [r for r in caplog.records if r.name == "shotplan.drag"]
    assert record.levelno == logging.WARNING
    assert record.event == "drag.fallback"
    assert record.shot_index == 0
    assert record.build_version
    assert record.exc_info is not None
