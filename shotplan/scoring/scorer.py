"""Shot and sequence scoring on top of the rule registry."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..config.scoring_config import DEFAULT_SCORING_CONFIG, ScoringConfig
from ..courses.schemas import HoleData
from ..metrics import observe_shot_score
from ..telemetry import record_plan_scored
from .rules import DEFAULT_RULES, ScoringContext, ScoringRule
from .schemas import (
    PlayerContext,
    RankedPlan,
    ScoreBreakdown,
    ScoreItem,
    SequenceScore,
    ShotOption,
)

logger = logging.getLogger(__name__)


class ShotScorer:
    """Runs an ordered list of independent rules over a shot."""

    def __init__(
        self,
        rules: Optional[Sequence[ScoringRule]] = None,
        config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    ) -> None:
        self._rules: List[ScoringRule] = list(DEFAULT_RULES if rules is None else rules)
        self.config = config

    @property
    def rules(self) -> List[ScoringRule]:
        return list(self._rules)

    def with_rule(self, rule: ScoringRule, index: Optional[int] = None) -> "ShotScorer":
        rules = list(self._rules)
        if index is None:
            rules.append(rule)
        else:
            rules.insert(index, rule)
        return ShotScorer(rules, self.config)

    def without_rule(self, name: str) -> "ShotScorer":
        return ShotScorer([r for r in self._rules if r.name != name], self.config)

    def score_shot(
        self, shot: ShotOption, player: PlayerContext, hole: HoleData
    ) -> ScoreBreakdown:
        context = ScoringContext(player=player, hole=hole, config=self.config)
        items: List[ScoreItem] = []
        for rule in self._rules:
            item = rule.evaluate(shot, context)
            if item is not None:
                items.append(item)
        breakdown = ScoreBreakdown.from_items(items)
        observe_shot_score(breakdown.score, shot.is_approach)
        logger.debug(
            "shot scored",
            extra={
                "shot_number": shot.shot_number,
                "club": shot.club,
                "score": breakdown.score,
            },
        )
        return breakdown

    def score_sequence(
        self, shots: Sequence[ShotOption], player: PlayerContext, hole: HoleData
    ) -> SequenceScore:
        """Sum shot scores; only the last shot is treated as the approach."""

        last = len(shots) - 1
        results: List[ScoreBreakdown] = []
        for index, shot in enumerate(shots):
            flagged = shot.model_copy(update={"is_approach": index == last})
            results.append(self.score_shot(flagged, player, hole))
        total = sum(result.score for result in results)
        record_plan_scored(total, len(results))
        return SequenceScore(total=total, shots=results)

    def rank_plans(
        self,
        plans: Sequence[Sequence[ShotOption]],
        player: PlayerContext,
        hole: HoleData,
    ) -> List[RankedPlan]:
        """Best total first; equal totals keep their input order."""

        ranked = []
        for index, plan in enumerate(plans):
            scored = self.score_sequence(plan, player, hole)
            ranked.append(RankedPlan(index=index, total=scored.total, shots=scored.shots))
        ranked.sort(key=lambda plan: plan.total, reverse=True)
        return ranked


def score_shot(
    shot: ShotOption,
    player: PlayerContext,
    hole: HoleData,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> ScoreBreakdown:
    return ShotScorer(config=config).score_shot(shot, player, hole)


def score_sequence(
    shots: Sequence[ShotOption],
    player: PlayerContext,
    hole: HoleData,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> SequenceScore:
    return ShotScorer(config=config).score_sequence(shots, player, hole)


def rank_plans(
    plans: Sequence[Sequence[ShotOption]],
    player: PlayerContext,
    hole: HoleData,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> List[RankedPlan]:
    return ShotScorer(config=config).rank_plans(plans, player, hole)


__all__ = ["ShotScorer", "rank_plans", "score_sequence", "score_shot"]
