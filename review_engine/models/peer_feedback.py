"""
PeerFeedback Entity
review_engine/models/peer_feedback.py

One colleague's scoring of a reviewee during the peer feedback phase.
Written by the peer feedback workflow; the review engine only reads it
to show the reviewee an anonymized average next to the final score.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from review_engine.models.identifiers import PeerFeedbackId, ReviewCycleId, UserId
from review_engine.models.scores import PillarScores


class PeerFeedback(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: PeerFeedbackId
    cycle_id: ReviewCycleId
    reviewee_id: UserId
    reviewer_id: UserId
    scores: PillarScores
    strengths: str = ""
    growth_areas: str = ""
    general_comments: str = ""
    submitted_at: datetime
