"""Tiered recompute state machine driven by map drag gestures."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..config import DRAG_END_DEFER_MS, DRAG_THROTTLE_MS
from ..courses.schemas import GeoPoint
from ..geo.primitives import distance
from ..metrics import DRAG_TIER2_DISCARDS_TOTAL, DRAG_TIER3_FALLBACKS_TOTAL, observe_tier
from ..scoring.schemas import SequenceScore, ShotOption
from ..session import PlanningSession
from ..telemetry import build_structured_log_payload, record_drag_fallback, record_drag_tier
from .calculator import (
    FullUpdate,
    ShotColor,
    ShotUpdate,
    frame_update,
    full_update,
    lightweight_color,
    next_shot_distance,
    position_only_update,
    start_of,
)
from .timing import Handle, Scheduler, Stopwatch, ThreadingScheduler

logger = logging.getLogger("shotplan.drag")

UpdateListener = Callable[[str, Sequence[ShotUpdate]], None]


class DragPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RELEASED = "released"


@dataclass
class DragSnapshot:
    phase: DragPhase
    gesture: int
    shot_index: Optional[int]
    shots: Tuple[ShotOption, ...]
    colors: Dict[int, ShotColor]
    tier2_pending: bool
    tier3_pending: bool
    edited: bool


class DragRecomputePipeline:
    """Owns the editable plan while a landing-zone marker is dragged.

    Tier 1 runs synchronously on every move. Tier 2 is throttled to one
    pending timer per gesture and reads the latest position when it fires.
    Tier 3 runs on drag end, immediately or after ``defer_seconds``, and is
    always completed before the next gesture begins. A gesture that is still
    dragging when another starts is released where it stands and rescored.
    Move and end events for any shot other than the active one are ignored.
    """

    def __init__(
        self,
        session: PlanningSession,
        plan: Sequence[ShotOption],
        *,
        scheduler: Optional[Scheduler] = None,
        throttle_seconds: float = DRAG_THROTTLE_MS / 1000.0,
        defer_seconds: float = DRAG_END_DEFER_MS / 1000.0,
        listener: Optional[UpdateListener] = None,
    ) -> None:
        if not plan:
            raise ValueError("plan must contain at least one shot")
        if throttle_seconds < 0:
            raise ValueError("throttle_seconds must be non-negative")
        if defer_seconds < 0:
            raise ValueError("defer_seconds must be non-negative")
        self.session = session
        self.throttle_seconds = throttle_seconds
        self.defer_seconds = defer_seconds
        self._scheduler: Scheduler = scheduler or ThreadingScheduler()
        self._listener = listener
        self._lock = threading.RLock()
        self._original: Tuple[ShotOption, ...] = tuple(plan)
        self._working: Optional[List[ShotOption]] = None
        self._colors: Dict[int, ShotColor] = {}
        self._phase = DragPhase.IDLE
        self._gesture = 0
        self._index: Optional[int] = None
        self._tier2: Optional[Handle] = None
        self._tier3: Optional[Handle] = None
        self._sequence: Optional[SequenceScore] = None

    @property
    def phase(self) -> DragPhase:
        return self._phase

    @property
    def shots(self) -> Tuple[ShotOption, ...]:
        with self._lock:
            return tuple(self._working) if self._working is not None else self._original

    @property
    def original(self) -> Tuple[ShotOption, ...]:
        return self._original

    @property
    def colors(self) -> Dict[int, ShotColor]:
        with self._lock:
            return dict(self._colors)

    @property
    def sequence(self) -> Optional[SequenceScore]:
        return self._sequence

    def on_drag_start(self, shot_index: int) -> DragSnapshot:
        with self._lock:
            if not 0 <= shot_index < len(self._original):
                raise ValueError(f"shot_index {shot_index} out of range")
            self._flush_deferred()
            if self._phase == DragPhase.DRAGGING:
                logger.debug(
                    "drag superseded before release",
                    extra={"shot_index": self._index, "gesture": self._gesture},
                )
                self._release(None)
                self._run_tier3(self._gesture)
            self._cancel_tier2()
            if self._working is None:
                self._working = list(self._original)
            self._gesture += 1
            self._index = shot_index
            self._phase = DragPhase.DRAGGING
            logger.debug("drag started", extra={"shot_index": shot_index, "gesture": self._gesture})
            return self.snapshot()

    def on_drag_move(self, shot_index: int, position: GeoPoint) -> List[ShotUpdate]:
        with self._lock:
            if not self._is_active(shot_index) or self._working is None:
                return []
            watch = Stopwatch()
            index = shot_index
            previous = start_of(self._working, index, self.session.hole.tee_box)
            self._move_marker(index, position)
            updates = [frame_update(self.session, index, position, previous)]
            if index + 1 < len(self._working):
                updates.append(
                    next_shot_distance(index + 1, position, self._working[index + 1].landing_zone)
                )
            self._schedule_tier2()
            self._finish_tier("tier1", index, watch, updates)
            return updates

    def on_drag_end(
        self, shot_index: int, position: Optional[GeoPoint] = None
    ) -> Optional[FullUpdate]:
        """Cancel the pending colour pass and run (or schedule) the full rescore."""

        with self._lock:
            if not self._is_active(shot_index):
                return None
            self._release(position)
            token = self._gesture
            if self.defer_seconds > 0:
                self._tier3 = self._scheduler.call_later(
                    self.defer_seconds, lambda: self._run_tier3(token)
                )
                return None
            return self._run_tier3(token)

    def reset(self) -> DragSnapshot:
        with self._lock:
            self._cancel_tier2()
            if self._tier3 is not None:
                self._tier3.cancel()
                self._tier3 = None
            self._gesture += 1
            self._working = None
            self._colors.clear()
            self._index = None
            self._sequence = None
            self._phase = DragPhase.IDLE
            return self.snapshot()

    def snapshot(self) -> DragSnapshot:
        with self._lock:
            return DragSnapshot(
                phase=self._phase,
                gesture=self._gesture,
                shot_index=self._index,
                shots=self.shots,
                colors=dict(self._colors),
                tier2_pending=self._tier2 is not None,
                tier3_pending=self._tier3 is not None,
                edited=self._working is not None,
            )

    def _is_active(self, shot_index: int) -> bool:
        return self._phase == DragPhase.DRAGGING and self._index == shot_index

    def _release(self, position: Optional[GeoPoint]) -> None:
        self._cancel_tier2()
        if position is not None and self._index is not None:
            self._move_marker(self._index, position)
        self._phase = DragPhase.RELEASED

    def _move_marker(self, index: int, position: GeoPoint) -> None:
        if self._working is None:
            raise RuntimeError("no editable plan outside a drag gesture")
        self._working[index] = self._working[index].model_copy(update={"landing_zone": position})

    def _schedule_tier2(self) -> None:
        if self._tier2 is not None:
            return
        token = self._gesture
        self._tier2 = self._scheduler.call_later(self.throttle_seconds, lambda: self._run_tier2(token))

    def _cancel_tier2(self) -> None:
        if self._tier2 is not None:
            self._tier2.cancel()
            self._tier2 = None
            DRAG_TIER2_DISCARDS_TOTAL.inc()

    def _run_tier2(self, token: int) -> Optional[ShotUpdate]:
        with self._lock:
            if token != self._gesture or self._phase != DragPhase.DRAGGING:
                DRAG_TIER2_DISCARDS_TOTAL.inc()
                logger.debug("stale colour pass discarded", extra={"gesture": token})
                return None
            self._tier2 = None
            if self._working is None or self._index is None:
                return None
            watch = Stopwatch()
            index = self._index
            position = self._working[index].landing_zone
            previous = start_of(self._working, index, self.session.hole.tee_box)
            is_approach = index == len(self._working) - 1
            color = lightweight_color(self.session, position, previous, is_approach)
            self._colors[index] = color
            update = ShotUpdate(
                index=index,
                distance=distance(previous, position),
                club=None,
                display_name="",
                effective_distance=None,
                distance_to_green=None,
                gap=None,
                color=color,
            )
            self._finish_tier("tier2", index, watch, [update])
            return update

    def _flush_deferred(self) -> None:
        if self._tier3 is None:
            return
        self._tier3.cancel()
        self._run_tier3(self._gesture)

    def _run_tier3(self, token: int) -> Optional[FullUpdate]:
        with self._lock:
            if token != self._gesture or self._phase != DragPhase.RELEASED:
                return None
            self._tier3 = None
            if self._working is None or self._index is None:
                self._phase = DragPhase.IDLE
                return None
            watch = Stopwatch()
            index = self._index
            try:
                result = full_update(self.session, self._working, index)
            except Exception as exc:
                logger.warning(
                    "full rescore failed, keeping dragged position",
                    extra=build_structured_log_payload(
                        event="drag.fallback", fields={"shot_index": index, "gesture": token}
                    ),
                    exc_info=True,
                )
                DRAG_TIER3_FALLBACKS_TOTAL.inc()
                record_drag_fallback(index, str(exc))
                result = position_only_update(
                    self._working, index, self._working[index].landing_zone, self.session.hole.tee_box
                )
            self._working = list(result.shots)
            for update in result.updates:
                if update.color is not None:
                    self._colors[update.index] = update.color
            if result.sequence is not None:
                self._sequence = result.sequence
            self._phase = DragPhase.IDLE
            self._finish_tier("tier3", index, watch, list(result.updates))
            return result

    def _finish_tier(
        self, tier: str, index: int, watch: Stopwatch, updates: Sequence[ShotUpdate]
    ) -> None:
        duration_ms = watch.elapsed_ms()
        observe_tier(tier, duration_ms)
        color = updates[0].color.value if updates and updates[0].color else None
        record_drag_tier(tier, index, duration_ms, color=color)
        logger.debug(
            "drag tier complete",
            extra=build_structured_log_payload(
                event="drag.tier", fields={"tier": tier, "shot_index": index}, duration_ms=duration_ms
            ),
        )
        if self._listener is None:
            return
        try:
            self._listener(tier, list(updates))
        except Exception:
            logger.exception("drag update listener failed for %s", tier)


__all__ = ["DragPhase", "DragRecomputePipeline", "DragSnapshot", "UpdateListener"]
