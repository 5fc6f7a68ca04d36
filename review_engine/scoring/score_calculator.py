"""
scoring/score_calculator.py

Calculates the level-weighted score of a pillar score vector.

Formula:
    weighted = Σ(score_p × w_level,p)   for p in the five pillars

Where:
    - score_p = integer pillar score in [0, 4]
    - w_level,p = configured weight of pillar p for the engineer level
      (each level's weights sum to 1.0)

The result stays in [0, 4]; its percentage (weighted / 4 × 100) selects
the bonus tier.
"""

from decimal import Decimal
from typing import Dict, Optional

import structlog

from review_engine.config import settings
from review_engine.models.enumerations import EngineerLevel, Pillar
from review_engine.models.scores import MAX_WEIGHTED_SCORE, PillarScores, WeightedScore

logger = structlog.get_logger(__name__)


class ScoreCalculationService:
    """
    Pure, deterministic weighted-score calculator.

    Identical (scores, level) input always yields an identical
    WeightedScore, which is what makes before/after comparisons during
    calibration meaningful.
    """

    def __init__(self, level_weights: Optional[Dict[str, Dict[str, float]]] = None):
        source = level_weights if level_weights is not None else settings.LEVEL_WEIGHTS
        self.weights: Dict[EngineerLevel, Dict[Pillar, Decimal]] = {
            EngineerLevel(level): {Pillar(p): Decimal(str(w)) for p, w in row.items()}
            for level, row in source.items()
        }

    def calculate_weighted_score(
        self,
        scores: PillarScores,
        level: EngineerLevel,
    ) -> WeightedScore:
        """
        Calculate the weighted score for one employee.

        Args:
            scores: The five pillar scores
            level: Engineer level selecting the weighting profile

        Returns:
            WeightedScore carrying the derived percentage and bonus tier

        Examples:
            >>> calc = ScoreCalculationService()
            >>> calc.calculate_weighted_score(PillarScores(
            ...     project_impact=4, direction=4, engineering_excellence=4,
            ...     operational_ownership=4, people_impact=4), EngineerLevel.LEAD).value
            Decimal('4.0000')
        """
        row = self.get_weights(level)
        weighted = sum(Decimal(scores.get(p)) * row[p] for p in Pillar)

        # Weight rows may sum to 1.0 +/- 0.001
        result = WeightedScore(value=min(weighted, MAX_WEIGHTED_SCORE))

        logger.debug(
            "weighted_score_calculated",
            level=level.value,
            scores=scores.as_dict(),
            weighted_score=float(result.value),
            bonus_tier=result.bonus_tier.value,
        )
        return result

    def get_weights(self, level: EngineerLevel) -> Dict[Pillar, Decimal]:
        """Get the pillar weights for a level."""
        row = self.weights.get(level)
        if row is None:
            raise KeyError(f"No pillar weights configured for level {level.value}")
        return row

    def get_all_weights(self) -> Dict[str, Dict[str, float]]:
        """All weighting profiles as plain floats, keyed by level then pillar."""
        return {
            level.value: {p.value: float(w) for p, w in row.items()}
            for level, row in self.weights.items()
        }
