from datetime import datetime
from typing import Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

from review_engine.models.enumerations import CyclePhase, CycleStatus
from review_engine.models.identifiers import ReviewCycleId


class CycleDeadlines(BaseModel):
    """
    Deadlines for the five review phases.

    Phases must close in order: self review, peer feedback, manager
    evaluation, calibration, feedback delivery. Deadlines carry a
    timezone so they compare against the clock.
    """

    model_config = ConfigDict(frozen=True)

    self_review: AwareDatetime
    peer_feedback: AwareDatetime
    manager_evaluation: AwareDatetime
    calibration: AwareDatetime
    feedback_delivery: AwareDatetime

    @model_validator(mode="after")
    def validate_deadline_order(self):
        ordered = [self.deadline_for(phase) for phase in CyclePhase]
        for earlier, later in zip(ordered, ordered[1:]):
            if later < earlier:
                raise ValueError("Cycle deadlines must be in phase order")
        return self

    def deadline_for(self, phase: CyclePhase) -> datetime:
        return getattr(self, phase.value)

    def has_passed(self, phase: CyclePhase, now: datetime) -> bool:
        return now > self.deadline_for(phase)


class ReviewCycle(BaseModel):
    """
    Annual review cycle. Owns the FinalScores and ManagerEvaluations
    recorded against it.
    """

    id: ReviewCycleId
    name: str = Field(..., min_length=1, max_length=255)
    year: int = Field(..., ge=2000, le=2100)
    status: CycleStatus = CycleStatus.DRAFT
    deadlines: CycleDeadlines
    start_date: Optional[datetime] = None

    def has_deadline_passed(self, phase: CyclePhase, now: datetime) -> bool:
        return self.deadlines.has_passed(phase, now)
