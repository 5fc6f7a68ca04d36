"""
Review Engine Response Models
review_engine/models/responses.py

Plain data returned by the services and serialized by the routers.
Identifiers are flattened to strings and decimals to floats.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from review_engine.models.calibration_session import CalibrationSession
from review_engine.models.final_score import FinalScore
from review_engine.models.manager_evaluation import ManagerEvaluation
from review_engine.models.score_adjustment import ScoreAdjustmentRequest

UNKNOWN_LEVEL = "Unknown"
UNKNOWN_NAME = "Unknown"
UNKNOWN_DEPARTMENT = "Unknown"


# Base Models for Reuse


class EmployeeInfoMixin(BaseModel):
    """Mixin for the employee a result belongs to."""
    employee_id: str


class ScoreSummaryMixin(BaseModel):
    """Mixin for weighted score, percentage and bonus tier."""
    weighted_score: float = Field(default=0.0, ge=0, le=4)
    percentage_score: float = Field(default=0.0, ge=0, le=100)
    bonus_tier: str = "BELOW"


def _score_summary(final_score: FinalScore) -> Dict[str, Any]:
    return {
        "weighted_score": float(final_score.weighted_score.value),
        "percentage_score": float(final_score.percentage_score),
        "bonus_tier": final_score.bonus_tier.value,
    }


# Manager Evaluations


class EvaluationSummary(EmployeeInfoMixin):
    """Manager evaluation as exposed to callers."""
    id: str
    cycle_id: str
    manager_id: str
    scores: Dict[str, int]
    narrative: str = ""
    strengths: str = ""
    growth_areas: str = ""
    development_plan: str = ""
    status: str
    submitted_at: Optional[datetime] = None
    is_calibrated: bool = False
    calibration_adjustment_count: int = 0
    updated_at: datetime

    @classmethod
    def from_evaluation(cls, evaluation: ManagerEvaluation) -> "EvaluationSummary":
        return cls(
            id=evaluation.id.value,
            cycle_id=evaluation.cycle_id.value,
            employee_id=evaluation.employee_id.value,
            manager_id=evaluation.manager_id.value,
            scores=evaluation.scores.as_dict(),
            narrative=evaluation.narrative,
            strengths=evaluation.strengths,
            growth_areas=evaluation.growth_areas,
            development_plan=evaluation.development_plan,
            status=evaluation.status.value,
            submitted_at=evaluation.submitted_at,
            is_calibrated=evaluation.is_calibrated,
            calibration_adjustment_count=len(evaluation.calibration_adjustments),
            updated_at=evaluation.updated_at,
        )


# Calibration


class CalibrationSessionCreated(BaseModel):
    id: str
    name: str
    status: str
    scheduled_at: datetime
    participant_count: int


class ParticipantView(BaseModel):
    """Roster entry; name and role are resolved by the presentation layer."""
    user_id: str
    user_name: str = ""
    role: str = ""


class CalibrationSessionView(BaseModel):
    """
    Read projection of a calibration session.

    Missing department and notes are rendered as empty strings here and
    nowhere else.
    """
    id: str
    cycle_id: str
    name: str
    department: str = ""
    status: str
    notes: str = ""
    locked_at: Optional[datetime] = None
    locked_by: str
    participants: List[ParticipantView] = Field(default_factory=list)
    evaluations: List[Dict[str, Any]] = Field(default_factory=list)
    created_at: datetime

    @classmethod
    def from_session(cls, session: CalibrationSession) -> "CalibrationSessionView":
        return cls(
            id=session.id.value,
            cycle_id=session.cycle_id.value,
            name=session.name,
            department=session.department or "",
            status=session.status.value,
            notes=session.notes or "",
            locked_at=session.completed_at,
            locked_by=session.facilitator_id.value,
            participants=[ParticipantView(user_id=p.value) for p in session.participant_ids],
            evaluations=[],
            created_at=session.scheduled_at,
        )


class DashboardSummary(BaseModel):
    total_evaluations: int = 0
    by_bonus_tier: Dict[str, int] = Field(default_factory=dict)
    by_department: Dict[str, Dict[str, int]] = Field(default_factory=dict)


class DashboardEvaluation(EmployeeInfoMixin, ScoreSummaryMixin):
    """One evaluation as shown on the calibration dashboard."""
    evaluation_id: str
    employee_name: str = UNKNOWN_NAME
    level: str = UNKNOWN_LEVEL
    department: str = UNKNOWN_DEPARTMENT
    manager_id: str
    manager_name: str = UNKNOWN_NAME
    scores: Dict[str, int]
    calibration_status: str


class CalibrationDashboard(BaseModel):
    cycle_id: str
    department: Optional[str] = None
    summary: DashboardSummary
    evaluations: List[DashboardEvaluation] = Field(default_factory=list)


class CalibrationAdjustmentResult(BaseModel):
    """Before/after view of one calibration adjustment."""
    id: str
    adjustment_id: str
    evaluation_id: str
    original_scores: Dict[str, int]
    adjusted_scores: Dict[str, int]
    old_weighted_score: float
    new_weighted_score: float
    old_bonus_tier: str
    new_bonus_tier: str
    adjusted_at: datetime


# Score Adjustments


class ScoreAdjustmentSummary(EmployeeInfoMixin):
    id: str
    cycle_id: str
    requester_id: str
    status: str
    reason: str
    proposed_scores: Dict[str, int]
    requested_at: datetime
    approver_id: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    @classmethod
    def from_request(cls, request: ScoreAdjustmentRequest) -> "ScoreAdjustmentSummary":
        return cls(
            id=request.id.value,
            cycle_id=request.cycle_id.value,
            employee_id=request.employee_id.value,
            requester_id=request.requester_id.value,
            status=request.status.value,
            reason=request.reason,
            proposed_scores=request.proposed_scores.as_dict(),
            requested_at=request.requested_at,
            approver_id=request.approver_id.value if request.approver_id else None,
            reviewed_at=request.reviewed_at,
            rejection_reason=request.rejection_reason,
        )


class ReviewAdjustmentResult(BaseModel):
    id: str
    status: str
    reviewed_at: datetime
    approved_by: str


# Final Scores


class CalculateFinalScoresResult(BaseModel):
    cycle_id: str
    evaluations_considered: int = 0
    scores_created: int = 0
    scores_updated: int = 0
    locked_skipped: int = 0
    calculated_at: datetime


class LockFinalScoresResult(BaseModel):
    cycle_id: str
    total_scores_locked: int
    locked_at: datetime


class DeliverFeedbackResult(EmployeeInfoMixin, ScoreSummaryMixin):
    id: str
    cycle_id: str
    feedback_delivered: bool
    feedback_notes: Optional[str] = None
    delivered_at: datetime
    delivered_by: str

    @classmethod
    def from_final_score(cls, final_score: FinalScore) -> "DeliverFeedbackResult":
        return cls(
            id=final_score.id.value,
            employee_id=final_score.user_id.value,
            cycle_id=final_score.cycle_id.value,
            feedback_delivered=final_score.feedback_delivered,
            feedback_notes=final_score.feedback_notes,
            delivered_at=final_score.feedback_delivered_at,
            delivered_by=final_score.delivered_by.value,
            **_score_summary(final_score),
        )


class FeedbackDeliveredResult(EmployeeInfoMixin):
    feedback_delivered: bool
    feedback_delivered_at: datetime


class EmployeeInfo(BaseModel):
    id: str
    name: str
    level: str = UNKNOWN_LEVEL


class CycleInfo(BaseModel):
    id: str
    name: str
    year: int


class PeerFeedbackSummary(BaseModel):
    average_scores: Dict[str, int]
    count: int


class MyFinalScoreView(ScoreSummaryMixin):
    employee: EmployeeInfo
    cycle: CycleInfo
    scores: Dict[str, int]
    peer_feedback_summary: Optional[PeerFeedbackSummary] = None
    is_locked: bool
    feedback_delivered: bool
    feedback_delivered_at: Optional[datetime] = None


class TeamMemberScore(EmployeeInfoMixin, ScoreSummaryMixin):
    employee_name: str
    level: str = UNKNOWN_LEVEL
    feedback_delivered: bool = False

    @classmethod
    def placeholder(cls, employee_id: str, employee_name: str, level: str) -> "TeamMemberScore":
        """Row for a direct report with no final score yet."""
        return cls(
            employee_id=employee_id,
            employee_name=employee_name,
            level=level,
        )


class TeamFinalScoresView(BaseModel):
    team_scores: List[TeamMemberScore] = Field(default_factory=list)


class FinalScoreSummary(EmployeeInfoMixin, ScoreSummaryMixin):
    id: str
    cycle_id: str
    final_level: str
    is_locked: bool
    locked_at: Optional[datetime] = None
    feedback_delivered: bool = False

    @classmethod
    def from_final_score(cls, final_score: FinalScore) -> "FinalScoreSummary":
        return cls(
            id=final_score.id.value,
            employee_id=final_score.user_id.value,
            cycle_id=final_score.cycle_id.value,
            final_level=final_score.final_level.value,
            is_locked=final_score.is_locked,
            locked_at=final_score.locked_at,
            feedback_delivered=final_score.feedback_delivered,
            **_score_summary(final_score),
        )


class ErrorResponse(BaseModel):
    """
    Standard error response model.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(default=None, description="Additional error details")
    timestamp: datetime = Field(..., description="Error occurrence timestamp")
