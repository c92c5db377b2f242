from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

DRAG_TIER_LATENCY_MS = Histogram(
    "shotplan_drag_tier_latency_ms",
    "Latency of drag recompute tiers in milliseconds",
    labelnames=("tier",),
    buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 16.0, 33.0, 50.0, 100.0, 250.0),
    registry=REGISTRY,
)

DRAG_TIER3_FALLBACKS_TOTAL = Counter(
    "shotplan_drag_tier3_fallbacks_total",
    "Drag-end rescores that failed and fell back to a position-only update",
    registry=REGISTRY,
)

DRAG_TIER2_DISCARDS_TOTAL = Counter(
    "shotplan_drag_tier2_discards_total",
    "Throttled colour assessments dropped because the gesture ended or was superseded",
    registry=REGISTRY,
)

SHOTS_SCORED_TOTAL = Counter(
    "shotplan_shots_scored_total",
    "Shots scored by the rule engine",
    labelnames=("approach",),
    registry=REGISTRY,
)

SHOT_SCORE = Histogram(
    "shotplan_shot_score",
    "Distribution of per-shot scores",
    buckets=(-150, -100, -60, -30, -15, 0, 15, 30, 60),
    registry=REGISTRY,
)

def observe_tier(tier: str, duration_ms: float) -> None:
    DRAG_TIER_LATENCY_MS.labels(tier=tier).observe(duration_ms)


def observe_shot_score(score: float, is_approach: bool) -> None:
    SHOTS_SCORED_TOTAL.labels(approach="true" if is_approach else "false").inc()
    SHOT_SCORE.observe(score)


def render_latest() -> tuple[bytes, str]:
    """Exposition payload and content type for a /metrics endpoint."""

    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST


__all__ = [
    "DRAG_TIER2_DISCARDS_TOTAL",
    "DRAG_TIER3_FALLBACKS_TOTAL",
    "DRAG_TIER_LATENCY_MS",
    "REGISTRY",
    "SHOTS_SCORED_TOTAL",
    "SHOT_SCORE",
    "observe_shot_score",
    "observe_tier",
    "render_latest",
]
