"""
ManagerEvaluation Entity
review_engine/models/manager_evaluation.py

A manager's scoring of one employee for one cycle.

States:
    DRAFT  --submit()-->  SUBMITTED

After submission the scores only change through
apply_calibration_adjustment(), which appends an audit record and
leaves the status untouched.
"""

from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from review_engine.core.exceptions import (
    ManagerEvaluationAlreadySubmittedException,
    ManagerEvaluationNotSubmittedException,
    ValidationException,
)
from review_engine.models.enumerations import EvaluationStatus
from review_engine.models.identifiers import ManagerEvaluationId, ReviewCycleId, UserId
from review_engine.models.scores import PillarScores


class CalibrationAdjustment(BaseModel):
    """Audit record for one post-submission score change."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    previous_scores: PillarScores
    new_scores: PillarScores
    justification: str = Field(..., min_length=1)
    adjusted_at: datetime


class ManagerEvaluation(BaseModel):
    id: ManagerEvaluationId
    cycle_id: ReviewCycleId
    employee_id: UserId
    manager_id: UserId
    scores: PillarScores
    narrative: str = ""
    strengths: str = ""
    growth_areas: str = ""
    development_plan: str = ""
    status: EvaluationStatus = EvaluationStatus.DRAFT
    submitted_at: Optional[datetime] = None
    calibration_adjustments: Tuple[CalibrationAdjustment, ...] = ()
    created_at: datetime
    updated_at: datetime

    @property
    def is_submitted(self) -> bool:
        return self.status == EvaluationStatus.SUBMITTED

    @property
    def is_calibrated(self) -> bool:
        return len(self.calibration_adjustments) > 0

    def find_calibration_adjustment(self, adjustment_id: str) -> Optional[CalibrationAdjustment]:
        for record in self.calibration_adjustments:
            if record.id == adjustment_id:
                return record
        return None

    def update_scores(self, scores: PillarScores, at: datetime) -> None:
        if self.is_submitted:
            raise ManagerEvaluationAlreadySubmittedException("Cannot update scores after submission")
        self.scores = scores
        self.updated_at = at

    def update_narrative(
        self,
        at: datetime,
        narrative: Optional[str] = None,
        strengths: Optional[str] = None,
        growth_areas: Optional[str] = None,
        development_plan: Optional[str] = None,
    ) -> None:
        """Replace any of the free-text sections that are given."""
        if self.is_submitted:
            raise ManagerEvaluationAlreadySubmittedException("Cannot update narrative after submission")
        if narrative is not None:
            self.narrative = narrative
        if strengths is not None:
            self.strengths = strengths
        if growth_areas is not None:
            self.growth_areas = growth_areas
        if development_plan is not None:
            self.development_plan = development_plan
        self.updated_at = at

    def submit(self, at: datetime) -> None:
        if self.is_submitted:
            raise ManagerEvaluationAlreadySubmittedException()
        self.status = EvaluationStatus.SUBMITTED
        self.submitted_at = at
        self.updated_at = at

    def apply_calibration_adjustment(
        self,
        new_scores: PillarScores,
        justification: str,
        at: datetime,
        adjustment_id: Optional[str] = None,
    ) -> CalibrationAdjustment:
        """
        Replace the submitted scores and record why.

        Minimum justification length is a calibration policy enforced by
        the caller; here it only has to be non-blank.
        """
        if not self.is_submitted:
            raise ManagerEvaluationNotSubmittedException(
                "Cannot apply calibration to unsubmitted evaluation"
            )
        if not justification or not justification.strip():
            raise ValidationException("Calibration adjustment requires a justification")

        record = CalibrationAdjustment(
            id=adjustment_id,
            previous_scores=self.scores,
            new_scores=new_scores,
            justification=justification,
            adjusted_at=at,
        )
        self.calibration_adjustments = self.calibration_adjustments + (record,)
        self.scores = new_scores
        self.updated_at = at
        return record
