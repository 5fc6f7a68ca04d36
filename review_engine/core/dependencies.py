"""
Dependencies - Performance Review Scoring Engine
review_engine/core/dependencies.py

Composition root. Repositories and ports are process-wide singletons;
services are built from them and handed to the routers through
FastAPI Depends.
"""

from functools import lru_cache

from review_engine.core.ports import Clock, IdGenerator, SystemClock, UUIDGenerator
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
from review_engine.scoring.final_score_calculator import FinalScoreCalculationService
from review_engine.scoring.peer_feedback_aggregator import PeerFeedbackAggregationService
from review_engine.scoring.score_calculator import ScoreCalculationService
from review_engine.services.calibration_service import CalibrationService
from review_engine.services.final_score_service import FinalScoreService
from review_engine.services.manager_evaluation_service import ManagerEvaluationService
from review_engine.services.score_adjustment_service import ScoreAdjustmentService


# Ports


@lru_cache()
def get_id_generator() -> IdGenerator:
    return UUIDGenerator()


@lru_cache()
def get_clock() -> Clock:
    return SystemClock()


# Repositories


@lru_cache()
def get_review_cycle_repository() -> ReviewCycleRepository:
    """Get cached ReviewCycleRepository instance."""
    return InMemoryReviewCycleRepository()


@lru_cache()
def get_user_repository() -> UserRepository:
    """Get cached UserRepository instance."""
    return InMemoryUserRepository()


@lru_cache()
def get_manager_evaluation_repository() -> ManagerEvaluationRepository:
    """Get cached ManagerEvaluationRepository instance."""
    return InMemoryManagerEvaluationRepository()


@lru_cache()
def get_final_score_repository() -> FinalScoreRepository:
    """Get cached FinalScoreRepository instance."""
    return InMemoryFinalScoreRepository()


@lru_cache()
def get_peer_feedback_repository() -> PeerFeedbackRepository:
    """Get cached PeerFeedbackRepository instance."""
    return InMemoryPeerFeedbackRepository()


@lru_cache()
def get_calibration_session_repository() -> CalibrationSessionRepository:
    """Get cached CalibrationSessionRepository instance."""
    return InMemoryCalibrationSessionRepository()


@lru_cache()
def get_score_adjustment_repository() -> ScoreAdjustmentRequestRepository:
    """Get cached ScoreAdjustmentRequestRepository instance."""
    return InMemoryScoreAdjustmentRequestRepository()


# Calculators


@lru_cache()
def get_score_calculator() -> ScoreCalculationService:
    return ScoreCalculationService()


@lru_cache()
def get_final_score_calculator() -> FinalScoreCalculationService:
    return FinalScoreCalculationService(get_score_calculator())


@lru_cache()
def get_peer_feedback_aggregator() -> PeerFeedbackAggregationService:
    return PeerFeedbackAggregationService()


# Services


def get_manager_evaluation_service() -> ManagerEvaluationService:
    return ManagerEvaluationService(
        evaluation_repo=get_manager_evaluation_repository(),
        cycle_repo=get_review_cycle_repository(),
        user_repo=get_user_repository(),
        id_generator=get_id_generator(),
        clock=get_clock(),
    )


def get_calibration_service() -> CalibrationService:
    return CalibrationService(
        session_repo=get_calibration_session_repository(),
        cycle_repo=get_review_cycle_repository(),
        evaluation_repo=get_manager_evaluation_repository(),
        final_score_repo=get_final_score_repository(),
        user_repo=get_user_repository(),
        id_generator=get_id_generator(),
        clock=get_clock(),
        score_calculator=get_score_calculator(),
        final_score_calculator=get_final_score_calculator(),
    )


def get_score_adjustment_service() -> ScoreAdjustmentService:
    return ScoreAdjustmentService(
        request_repo=get_score_adjustment_repository(),
        final_score_repo=get_final_score_repository(),
        evaluation_repo=get_manager_evaluation_repository(),
        cycle_repo=get_review_cycle_repository(),
        user_repo=get_user_repository(),
        id_generator=get_id_generator(),
        clock=get_clock(),
    )


def get_final_score_service() -> FinalScoreService:
    return FinalScoreService(
        final_score_repo=get_final_score_repository(),
        evaluation_repo=get_manager_evaluation_repository(),
        cycle_repo=get_review_cycle_repository(),
        user_repo=get_user_repository(),
        id_generator=get_id_generator(),
        clock=get_clock(),
        calculator=get_final_score_calculator(),
        peer_feedback_repo=get_peer_feedback_repository(),
        peer_aggregator=get_peer_feedback_aggregator(),
    )
