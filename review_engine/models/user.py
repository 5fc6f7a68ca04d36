from typing import Optional

from pydantic import BaseModel, Field

from review_engine.config import settings
from review_engine.models.enumerations import EngineerLevel
from review_engine.models.identifiers import UserId


class User(BaseModel):
    """Employee record as seen by the review engine."""

    id: UserId
    name: str = Field(..., min_length=1, max_length=255)
    level: Optional[EngineerLevel] = Field(
        default=None,
        description="Seniority tier used to select the pillar weighting profile"
    )
    manager_id: Optional[UserId] = Field(
        default=None,
        description="Direct manager; None for top-level users"
    )
    department: Optional[str] = None

    def is_managed_by(self, manager_id: UserId) -> bool:
        return self.manager_id is not None and self.manager_id == manager_id


def resolve_level(user: Optional[User]) -> EngineerLevel:
    """Level used for weighting; falls back to DEFAULT_ENGINEER_LEVEL."""
    if user is not None and user.level is not None:
        return user.level
    return EngineerLevel(settings.DEFAULT_ENGINEER_LEVEL)
