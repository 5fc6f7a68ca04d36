"""
ScoreAdjustmentRequest Entity
review_engine/models/score_adjustment.py

A manager's request to change an already-locked final score.
PENDING moves exactly once to APPROVED or REJECTED.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from review_engine.core.exceptions import (
    AdjustmentAlreadyReviewedException,
    RejectionReasonRequiredException,
)
from review_engine.models.enumerations import AdjustmentStatus, ReviewAction
from review_engine.models.identifiers import ReviewCycleId, ScoreAdjustmentRequestId, UserId
from review_engine.models.scores import PillarScores


class ScoreAdjustmentRequest(BaseModel):
    id: ScoreAdjustmentRequestId
    cycle_id: ReviewCycleId
    employee_id: UserId
    requester_id: UserId
    approver_id: Optional[UserId] = None
    reason: str = Field(..., min_length=1)
    status: AdjustmentStatus = AdjustmentStatus.PENDING
    proposed_scores: PillarScores
    requested_at: datetime
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    @model_validator(mode="after")
    def validate_review_state(self):
        if self.status == AdjustmentStatus.PENDING and self.reviewed_at is not None:
            raise ValueError("Pending requests cannot carry a review timestamp")
        if self.status == AdjustmentStatus.REJECTED and not (self.rejection_reason or "").strip():
            raise ValueError("Rejected requests must carry a rejection reason")
        return self

    @property
    def is_pending(self) -> bool:
        return self.status == AdjustmentStatus.PENDING

    def ensure_pending(self) -> None:
        if not self.is_pending:
            raise AdjustmentAlreadyReviewedException(self.id.value, self.status.value)

    def approve(self, approver_id: UserId, at: datetime) -> None:
        self.ensure_pending()
        self.status = AdjustmentStatus.APPROVED
        self.approver_id = approver_id
        self.reviewed_at = at

    def reject(self, approver_id: UserId, rejection_reason: Optional[str], at: datetime) -> None:
        self.ensure_pending()
        if not rejection_reason or not rejection_reason.strip():
            raise RejectionReasonRequiredException()
        self.status = AdjustmentStatus.REJECTED
        self.approver_id = approver_id
        self.reviewed_at = at
        self.rejection_reason = rejection_reason

    def review(
        self,
        action: ReviewAction,
        approver_id: UserId,
        at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> None:
        if action == ReviewAction.APPROVED:
            self.approve(approver_id, at)
        else:
            self.reject(approver_id, rejection_reason, at)
