"""
Typed Identifiers
review_engine/models/identifiers.py

Strongly-typed, hashable wrappers around entity id strings so a
UserId can never be passed where a ReviewCycleId is expected.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EntityId(BaseModel):
    """Base identifier: a non-blank string without surrounding whitespace."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(..., min_length=1, max_length=64)

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        if v != v.strip() or not v.strip():
            raise ValueError("Identifier must be non-blank and must not have surrounding whitespace")
        return v

    @classmethod
    def from_string(cls, value: str):
        return cls(value=value)

    def __str__(self) -> str:
        return self.value


class UserId(EntityId):
    pass


class ReviewCycleId(EntityId):
    pass


class FinalScoreId(EntityId):
    pass


class ManagerEvaluationId(EntityId):
    pass


class CalibrationSessionId(EntityId):
    pass


class ScoreAdjustmentRequestId(EntityId):
    pass


class PeerFeedbackId(EntityId):
    pass
