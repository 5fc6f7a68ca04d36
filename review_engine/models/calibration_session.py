"""
CalibrationSession
review_engine/models/calibration_session.py

Immutable value; every update returns a new, re-validated session.

States:
    SCHEDULED --started()--> IN_PROGRESS --locked()--> COMPLETED

locked() is accepted from any state, including COMPLETED, where it
refreshes completed_at.
"""

from datetime import datetime
from typing import Optional, Tuple

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

from review_engine.core.exceptions import CalibrationSessionStateException
from review_engine.models.enumerations import CalibrationStatus
from review_engine.models.identifiers import CalibrationSessionId, ReviewCycleId, UserId


class CalibrationSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: CalibrationSessionId
    cycle_id: ReviewCycleId
    name: str = Field(..., min_length=1, max_length=255)
    department: Optional[str] = None
    facilitator_id: UserId
    participant_ids: Tuple[UserId, ...] = ()
    scheduled_at: AwareDatetime
    completed_at: Optional[datetime] = None
    status: CalibrationStatus = CalibrationStatus.SCHEDULED
    notes: Optional[str] = None

    @model_validator(mode="after")
    def validate_completion(self):
        if (self.status == CalibrationStatus.COMPLETED) != (self.completed_at is not None):
            raise ValueError("completed_at must be set if and only if status is COMPLETED")
        return self

    @property
    def is_locked(self) -> bool:
        return self.status == CalibrationStatus.COMPLETED

    def _evolve(self, **changes) -> "CalibrationSession":
        return type(self)(**{**dict(self), **changes})

    def with_notes(self, notes: str) -> "CalibrationSession":
        return self._evolve(notes=notes)

    def started(self) -> "CalibrationSession":
        if self.status != CalibrationStatus.SCHEDULED:
            raise CalibrationSessionStateException(
                f"Cannot start calibration session {self.id.value} from {self.status.value}"
            )
        return self._evolve(status=CalibrationStatus.IN_PROGRESS)

    def locked(self, at: datetime) -> "CalibrationSession":
        return self._evolve(status=CalibrationStatus.COMPLETED, completed_at=at)
