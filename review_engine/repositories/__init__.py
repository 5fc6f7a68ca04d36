"""
Repositories Package - Performance Review Scoring Engine
review_engine/repositories/__init__.py

Async repository interfaces and their in-memory adapters.
"""

from review_engine.repositories.base import InMemoryStore
from review_engine.repositories.calibration_session_repository import (
    CalibrationSessionRepository,
    InMemoryCalibrationSessionRepository,
)
from review_engine.repositories.final_score_repository import (
    FinalScoreRepository,
    InMemoryFinalScoreRepository,
)
from review_engine.repositories.manager_evaluation_repository import (
    InMemoryManagerEvaluationRepository,
    ManagerEvaluationRepository,
)
from review_engine.repositories.peer_feedback_repository import (
    InMemoryPeerFeedbackRepository,
    PeerFeedbackRepository,
)
from review_engine.repositories.review_cycle_repository import (
    InMemoryReviewCycleRepository,
    ReviewCycleRepository,
)
from review_engine.repositories.score_adjustment_repository import (
    InMemoryScoreAdjustmentRequestRepository,
    ScoreAdjustmentRequestRepository,
)
from review_engine.repositories.user_repository import InMemoryUserRepository, UserRepository

__all__ = [
    "InMemoryStore",
    "CalibrationSessionRepository",
    "InMemoryCalibrationSessionRepository",
    "FinalScoreRepository",
    "InMemoryFinalScoreRepository",
    "ManagerEvaluationRepository",
    "InMemoryManagerEvaluationRepository",
    "PeerFeedbackRepository",
    "InMemoryPeerFeedbackRepository",
    "ReviewCycleRepository",
    "InMemoryReviewCycleRepository",
    "ScoreAdjustmentRequestRepository",
    "InMemoryScoreAdjustmentRequestRepository",
    "UserRepository",
    "InMemoryUserRepository",
]
