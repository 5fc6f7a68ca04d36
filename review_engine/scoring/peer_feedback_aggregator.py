"""
scoring/peer_feedback_aggregator.py

Averages peer feedback into one pillar score vector.

Formula:
    average_p = round_half_up(Σ score_p / n)   for p in the five pillars

The result is an ordinary PillarScores, shown to the reviewee beside
the final score. It never enters the weighted score.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

import structlog

from review_engine.core.exceptions import NoPeerFeedbackException
from review_engine.models.enumerations import Pillar
from review_engine.models.peer_feedback import PeerFeedback
from review_engine.models.scores import PillarScores

logger = structlog.get_logger(__name__)


class PeerFeedbackAggregationService:
    """Reduce a reviewee's peer feedback to per-pillar integer averages."""

    def aggregate_scores(self, feedbacks: Sequence[PeerFeedback]) -> PillarScores:
        """
        Averages round half up: peers scoring 1 and 2 on a pillar give 2.

        Raises NoPeerFeedbackException when there is nothing to average.
        """
        if not feedbacks:
            raise NoPeerFeedbackException()

        count = Decimal(len(feedbacks))
        averages = {
            p.value: int(
                (sum(Decimal(f.scores.get(p)) for f in feedbacks) / count)
                .quantize(Decimal("1"), rounding=ROUND_HALF_UP)
            )
            for p in Pillar
        }
        result = PillarScores(**averages)

        logger.debug(
            "peer_feedback_aggregated",
            reviewee_id=feedbacks[0].reviewee_id.value,
            feedback_count=len(feedbacks),
            average_scores=result.as_dict(),
        )
        return result
