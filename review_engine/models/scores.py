"""
Score Value Objects
review_engine/models/scores.py

PillarScores    - immutable 5-pillar vector, each an integer in [0, 4]
WeightedScore   - level-weighted aggregate in [0, 4] with its derived bonus tier
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, StrictInt, computed_field, field_validator

from review_engine.config import settings
from review_engine.models.enumerations import BonusTier, Pillar

PILLAR_SCORE_MIN = 0
PILLAR_SCORE_MAX = 4
MAX_WEIGHTED_SCORE = Decimal("4")


class PillarScores(BaseModel):
    """
    Immutable scoring of the five performance pillars.

    Construction fails with pydantic.ValidationError when any pillar is
    missing, non-integer, or outside [0, 4].
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    project_impact: StrictInt = Field(..., ge=PILLAR_SCORE_MIN, le=PILLAR_SCORE_MAX)
    direction: StrictInt = Field(..., ge=PILLAR_SCORE_MIN, le=PILLAR_SCORE_MAX)
    engineering_excellence: StrictInt = Field(..., ge=PILLAR_SCORE_MIN, le=PILLAR_SCORE_MAX)
    operational_ownership: StrictInt = Field(..., ge=PILLAR_SCORE_MIN, le=PILLAR_SCORE_MAX)
    people_impact: StrictInt = Field(..., ge=PILLAR_SCORE_MIN, le=PILLAR_SCORE_MAX)

    @classmethod
    def from_dict(cls, data: Dict[str, int]) -> "PillarScores":
        return cls(**data)

    def get(self, pillar: Pillar) -> int:
        return getattr(self, pillar.value)

    def values(self) -> List[int]:
        """Scores in canonical pillar order."""
        return [self.get(p) for p in Pillar]

    def as_dict(self) -> Dict[str, int]:
        return {p.value: self.get(p) for p in Pillar}

    def delta(self, other: "PillarScores") -> Dict[str, int]:
        """Per-pillar change going from self to other."""
        return {p.value: other.get(p) - self.get(p) for p in Pillar}


def bonus_tier_for(percentage: Decimal) -> BonusTier:
    """Classify a percentage score (0-100) into a bonus tier."""
    if percentage >= Decimal(str(settings.EXCEEDS_THRESHOLD_PCT)):
        return BonusTier.EXCEEDS
    if percentage >= Decimal(str(settings.MEETS_THRESHOLD_PCT)):
        return BonusTier.MEETS
    return BonusTier.BELOW


class WeightedScore(BaseModel):
    """
    Weighted aggregate of pillar scores.

    The bonus tier and percentage are derived from the value on every
    access, so they can never drift from it.
    """

    model_config = ConfigDict(frozen=True)

    value: Decimal = Field(..., ge=Decimal("0"), le=MAX_WEIGHTED_SCORE)

    @field_validator("value")
    @classmethod
    def quantize_value(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("Weighted score must be a finite number")
        return v.quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)

    @classmethod
    def from_value(cls, value) -> "WeightedScore":
        return cls(value=value)

    @computed_field
    @property
    def percentage(self) -> Decimal:
        return self.value / MAX_WEIGHTED_SCORE * Decimal("100")

    @computed_field
    @property
    def bonus_tier(self) -> BonusTier:
        return bonus_tier_for(self.percentage)

    def __str__(self) -> str:
        return str(self.value)
