"""Structured telemetry for planning and drag events."""

from __future__ import annotations

import logging
import os
from typing import Callable, Dict, Mapping, MutableMapping, Optional

TelemetryEmitter = Callable[[str, Mapping[str, object]], None]

_emitter: Optional[TelemetryEmitter] = None
_logger = logging.getLogger("shotplan.telemetry")


def set_telemetry_emitter(candidate: TelemetryEmitter | None) -> None:
    """Register a sink for drag and scoring events; ``None`` disables it."""

    global _emitter
    _emitter = candidate if callable(candidate) else None


def _safe_emit(event: str, payload: MutableMapping[str, object]) -> None:
    if not _emitter:
        _logger.debug("telemetry emitter not configured for event %s", event)
        return
    try:
        _emitter(event, dict(payload))
    except Exception:  # pragma: no cover - sink failures must not break a drag
        _logger.exception("failed to emit telemetry event %s", event)


def build_structured_log_payload(
    *,
    event: str,
    fields: Mapping[str, object],
    duration_ms: float | None = None,
) -> dict:
    payload: Dict[str, object] = {
        "event": event,
        **fields,
        "build_version": os.getenv("BUILD_VERSION", "unknown"),
        "git_sha": os.getenv("GIT_SHA", "unknown"),
    }
    if duration_ms is not None:
        payload["duration_ms"] = round(duration_ms, 3)
    return payload


def record_drag_tier(
    tier: str, shot_index: int, duration_ms: float, *, color: str | None = None
) -> None:
    payload: Dict[str, object] = {
        "tier": tier,
        "shotIndex": shot_index,
        "durationMs": round(max(0.0, duration_ms), 3),
    }
    if color:
        payload["color"] = color
    _safe_emit("drag.tier", payload)


def record_drag_fallback(shot_index: int, error: str) -> None:
    _safe_emit("drag.fallback", {"shotIndex": shot_index, "error": error})


def record_plan_scored(total: float, shots: int) -> None:
    _safe_emit("plan.scored", {"total": total, "shots": shots})


__all__ = [
    "TelemetryEmitter",
    "build_structured_log_payload",
    "record_drag_fallback",
    "record_drag_tier",
    "record_plan_scored",
    "set_telemetry_emitter",
]
