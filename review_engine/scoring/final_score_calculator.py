"""
scoring/final_score_calculator.py

Builds or refreshes a FinalScore from a submitted manager evaluation.

The pillar scores are taken from the evaluation as-is (including any
calibration adjustments) and weighted with the employee's level.
Peer averages are carried along for display only; they do not enter
the weighted score.
"""

from datetime import datetime
from typing import Optional

import structlog

from review_engine.models.enumerations import EngineerLevel
from review_engine.models.final_score import FinalScore
from review_engine.models.identifiers import FinalScoreId
from review_engine.models.manager_evaluation import ManagerEvaluation
from review_engine.models.scores import PillarScores
from review_engine.scoring.score_calculator import ScoreCalculationService

logger = structlog.get_logger(__name__)


class FinalScoreCalculationService:
    """Assemble FinalScore entities using a ScoreCalculationService."""

    def __init__(self, score_calculator: Optional[ScoreCalculationService] = None):
        self.score_calculator = score_calculator or ScoreCalculationService()

    def build(
        self,
        final_score_id: FinalScoreId,
        evaluation: ManagerEvaluation,
        level: EngineerLevel,
        at: datetime,
        peer_average_scores: Optional[PillarScores] = None,
        peer_feedback_count: int = 0,
    ) -> FinalScore:
        """Create a new, unlocked FinalScore for the evaluated employee."""
        weighted = self.score_calculator.calculate_weighted_score(evaluation.scores, level)

        logger.debug(
            "final_score_built",
            final_score_id=final_score_id.value,
            employee_id=evaluation.employee_id.value,
            weighted_score=float(weighted.value),
            peer_feedback_count=peer_feedback_count,
        )
        return FinalScore(
            id=final_score_id,
            cycle_id=evaluation.cycle_id,
            user_id=evaluation.employee_id,
            pillar_scores=evaluation.scores,
            weighted_score=weighted,
            final_level=level,
            peer_average_scores=peer_average_scores,
            peer_feedback_count=peer_feedback_count,
            calculated_at=at,
        )

    def refresh(
        self,
        final_score: FinalScore,
        scores: PillarScores,
        level: EngineerLevel,
        at: datetime,
        peer_average_scores: Optional[PillarScores] = None,
        peer_feedback_count: Optional[int] = None,
    ) -> FinalScore:
        """
        Recompute an existing score in place.

        Peer data is replaced only when peer_feedback_count is given;
        otherwise the stored peer average is kept.

        Raises FinalScoreLockedException when the score is locked.
        """
        weighted = self.score_calculator.calculate_weighted_score(scores, level)
        final_score.update_scores(scores, weighted, at, final_level=level)
        if peer_feedback_count is not None:
            final_score.peer_average_scores = peer_average_scores
            final_score.peer_feedback_count = peer_feedback_count

        logger.debug(
            "final_score_refreshed",
            final_score_id=final_score.id.value,
            weighted_score=float(weighted.value),
        )
        return final_score
