"""HTTP routes exposing plays-like and scoring to remote clients."""

from __future__ import annotations

import logging
import time
from functools import lru_cache

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from .config.scoring_config import resolve_scoring_config
from .playslike.engine import compute_effective_distance
from .playslike.schemas import EffectiveDistanceContext, PlaysLikeRequest
from .scoring.schemas import (
    ScoreBreakdown,
    ScoreSequenceRequest,
    ScoreShotRequest,
    SequenceScore,
)
from .scoring.scorer import ShotScorer

logger = logging.getLogger("shotplan.api")

router = APIRouter(prefix="/api/plan", tags=["plan"])


class ErrorEnvelope(BaseModel):
    error_code: str
    message: str
    details: dict | None = None


@lru_cache(maxsize=1)
def get_scorer() -> ShotScorer:
    return ShotScorer(config=resolve_scoring_config())


def _validation_error(exc: Exception) -> JSONResponse:
    details = None
    if isinstance(exc, ValidationError):
        details = {
            "error_count": exc.error_count(),
            "fields": [".".join(str(p) for p in err["loc"]) for err in exc.errors()],
        }
    return JSONResponse(
        status_code=422,
        content=ErrorEnvelope(
            error_code="validation_error", message=str(exc), details=details
        ).model_dump(),
    )


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


@router.post("/plays-like", response_model=EffectiveDistanceContext)
def post_plays_like(payload: dict):
    start = time.perf_counter()
    try:
        request = PlaysLikeRequest.model_validate(payload)
        result = compute_effective_distance(
            request.distance,
            request.weather,
            request.shot_bearing,
            request.player_elevation,
            request.target_elevation,
        )
    except (ValueError, TypeError) as exc:
        return _validation_error(exc)

    logger.info(
        "plays_like",
        extra={
            "plays_like": {
                "distance": request.distance,
                "effective_distance": result.effective_distance,
                "duration_ms": _elapsed_ms(start),
            }
        },
    )
    return result


@router.post("/score-shot", response_model=ScoreBreakdown)
def post_score_shot(payload: dict):
    start = time.perf_counter()
    try:
        request = ScoreShotRequest.model_validate(payload)
        breakdown = get_scorer().score_shot(request.shot, request.player, request.hole)
    except (ValueError, TypeError) as exc:
        return _validation_error(exc)

    logger.info(
        "score_shot",
        extra={
            "score_shot": {
                "club": request.shot.club,
                "score": breakdown.score,
                "duration_ms": _elapsed_ms(start),
            }
        },
    )
    return breakdown


@router.post("/score-sequence", response_model=SequenceScore)
def post_score_sequence(payload: dict):
    start = time.perf_counter()
    try:
        request = ScoreSequenceRequest.model_validate(payload)
        scored = get_scorer().score_sequence(request.shots, request.player, request.hole)
    except (ValueError, TypeError) as exc:
        return _validation_error(exc)

    logger.info(
        "score_sequence",
        extra={
            "score_sequence": {
                "shots": len(request.shots),
                "total": scored.total,
                "duration_ms": _elapsed_ms(start),
            }
        },
    )
    return scored


__all__ = ["ErrorEnvelope", "get_scorer", "router"]
