"""
FinalScore Entity
review_engine/models/final_score.py

The cycle's ground-truth result for one employee: pillar scores
(manager evaluation, possibly calibration-adjusted), their weighted
score and bonus tier, plus lock and feedback-delivery state.

Locking is one-way. Once locked the numeric content cannot change and
feedback delivery is refused.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from review_engine.core.exceptions import FinalScoreLockedException
from review_engine.models.enumerations import BonusTier, EngineerLevel
from review_engine.models.identifiers import FinalScoreId, ReviewCycleId, UserId
from review_engine.models.scores import PillarScores, WeightedScore

# Fields frozen once the score is locked
_LOCKED_FIELDS = frozenset(
    {"pillar_scores", "weighted_score", "final_level", "is_locked", "locked_at"}
)


class FinalScore(BaseModel):
    id: FinalScoreId
    cycle_id: ReviewCycleId
    user_id: UserId
    pillar_scores: PillarScores
    weighted_score: WeightedScore
    final_level: EngineerLevel
    peer_average_scores: Optional[PillarScores] = None
    peer_feedback_count: int = Field(default=0, ge=0)
    is_locked: bool = False
    locked_at: Optional[datetime] = None
    feedback_delivered: bool = False
    feedback_delivered_at: Optional[datetime] = None
    feedback_notes: Optional[str] = None
    delivered_by: Optional[UserId] = None
    calculated_at: datetime

    @model_validator(mode="after")
    def validate_lock_state(self):
        if self.is_locked != (self.locked_at is not None):
            raise ValueError("locked_at must be set exactly when the score is locked")
        return self

    def __setattr__(self, name, value):
        if name in _LOCKED_FIELDS and self.__dict__.get("is_locked"):
            raise FinalScoreLockedException(
                f"Cannot modify {name} of locked final score {self.id.value}"
            )
        super().__setattr__(name, value)

    @property
    def employee_id(self) -> UserId:
        return self.user_id

    @property
    def percentage_score(self) -> Decimal:
        return self.weighted_score.percentage

    @property
    def bonus_tier(self) -> BonusTier:
        return self.weighted_score.bonus_tier

    def lock(self, at: datetime) -> bool:
        """Lock the score. Returns False when it was already locked."""
        if self.is_locked:
            return False
        self.locked_at = at
        self.is_locked = True
        return True

    def update_scores(
        self,
        pillar_scores: PillarScores,
        weighted_score: WeightedScore,
        at: datetime,
        final_level: Optional[EngineerLevel] = None,
    ) -> None:
        if self.is_locked:
            raise FinalScoreLockedException("Cannot update scores when final score is locked")
        self.pillar_scores = pillar_scores
        self.weighted_score = weighted_score
        if final_level is not None:
            self.final_level = final_level
        self.calculated_at = at

    def mark_feedback_delivered(
        self,
        delivered_by: UserId,
        at: datetime,
        feedback_notes: Optional[str] = None,
    ) -> None:
        """
        Record that results were communicated to the employee.

        Repeat calls overwrite the previous delivery metadata.
        """
        if self.is_locked:
            raise FinalScoreLockedException("Cannot deliver feedback on a locked final score")
        self.feedback_delivered = True
        self.feedback_delivered_at = at
        self.delivered_by = delivered_by
        self.feedback_notes = feedback_notes
