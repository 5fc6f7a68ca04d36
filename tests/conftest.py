# tests/conftest.py

"""
Pytest Fixtures - Shared ports, entities, seeded repositories and services

SEED DATA REFERENCE:
- Cycle:      cycle-2025 (manager evaluation deadline 2025-09-30)
- Manager:    mgr-1 (MANAGER)
- Reports:    emp-lead (LEAD, Platform), emp-junior (JUNIOR, Mobile),
              emp-nolevel (no level, no department)
- Others:     mgr-2 (manages nobody seeded), hr-1 (approver / facilitator)
- Clock:      starts 2025-06-01T12:00:00Z, one second per reading
- Ids:        id-1, id-2, ... in creation order
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from review_engine.core import dependencies
from review_engine.core.ports import Clock, IdGenerator
from review_engine.models.enumerations import CycleStatus, EngineerLevel
from review_engine.models.final_score import FinalScore
from review_engine.models.identifiers import (
    FinalScoreId,
    ManagerEvaluationId,
    PeerFeedbackId,
    ReviewCycleId,
    UserId,
)
from review_engine.models.manager_evaluation import ManagerEvaluation
from review_engine.models.peer_feedback import PeerFeedback
from review_engine.models.review_cycle import CycleDeadlines, ReviewCycle
from review_engine.models.scores import PillarScores
from review_engine.models.user import User
from review_engine.repositories.calibration_session_repository import (
    InMemoryCalibrationSessionRepository,
)
from review_engine.repositories.final_score_repository import InMemoryFinalScoreRepository
from review_engine.repositories.manager_evaluation_repository import (
    InMemoryManagerEvaluationRepository,
)
from review_engine.repositories.peer_feedback_repository import InMemoryPeerFeedbackRepository
from review_engine.repositories.review_cycle_repository import InMemoryReviewCycleRepository
from review_engine.repositories.score_adjustment_repository import (
    InMemoryScoreAdjustmentRequestRepository,
)
from review_engine.repositories.user_repository import InMemoryUserRepository
from review_engine.scoring.score_calculator import ScoreCalculationService
from review_engine.services.calibration_service import CalibrationService
from review_engine.services.final_score_service import FinalScoreService
from review_engine.services.manager_evaluation_service import ManagerEvaluationService
from review_engine.services.score_adjustment_service import ScoreAdjustmentService

CLOCK_START = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# DETERMINISTIC PORTS
# =============================================================================

class SequentialIdGenerator(IdGenerator):
    """Yields id-1, id-2, ..."""

    def __init__(self, prefix: str = "id"):
        self.prefix = prefix
        self.count = 0

    def new_id(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count}"


class SteppingClock(Clock):
    """Every reading is one step later than the previous one."""

    def __init__(self, start: datetime = CLOCK_START, step: timedelta = timedelta(seconds=1)):
        self.current = start - step
        self.step = step

    def now(self) -> datetime:
        self.current = self.current + self.step
        return self.current


@pytest.fixture
def id_generator():
    return SequentialIdGenerator()


@pytest.fixture
def clock():
    return SteppingClock()


# =============================================================================
# SCORE HELPERS
# =============================================================================

def make_scores(pi: int, d: int, ee: int, oo: int, pe: int) -> PillarScores:
    return PillarScores(
        project_impact=pi,
        direction=d,
        engineering_excellence=ee,
        operational_ownership=oo,
        people_impact=pe,
    )


def scores_payload(pi: int, d: int, ee: int, oo: int, pe: int) -> dict:
    return make_scores(pi, d, ee, oo, pe).as_dict()


@pytest.fixture
def calculator():
    return ScoreCalculationService()


# =============================================================================
# ENTITY FIXTURES - MATCHING SEED DATA
# =============================================================================

@pytest.fixture
def cycle_id():
    return ReviewCycleId(value="cycle-2025")


@pytest.fixture
def manager_id():
    return UserId(value="mgr-1")


@pytest.fixture
def other_manager_id():
    return UserId(value="mgr-2")


@pytest.fixture
def hr_id():
    return UserId(value="hr-1")


@pytest.fixture
def lead_id():
    return UserId(value="emp-lead")


@pytest.fixture
def junior_id():
    return UserId(value="emp-junior")


@pytest.fixture
def nolevel_id():
    return UserId(value="emp-nolevel")


@pytest.fixture
def deadlines():
    return CycleDeadlines(
        self_review=datetime(2025, 3, 31, tzinfo=timezone.utc),
        peer_feedback=datetime(2025, 4, 30, tzinfo=timezone.utc),
        manager_evaluation=datetime(2025, 9, 30, tzinfo=timezone.utc),
        calibration=datetime(2025, 10, 31, tzinfo=timezone.utc),
        feedback_delivery=datetime(2025, 12, 15, tzinfo=timezone.utc),
    )


@pytest.fixture
def cycle(cycle_id, deadlines):
    return ReviewCycle(
        id=cycle_id,
        name="2025 Annual Review",
        year=2025,
        status=CycleStatus.ACTIVE,
        deadlines=deadlines,
    )


@pytest.fixture
def users(manager_id, other_manager_id, hr_id, lead_id, junior_id, nolevel_id):
    return [
        User(id=manager_id, name="Morgan Manager", level=EngineerLevel.MANAGER),
        User(id=other_manager_id, name="Sam Other", level=EngineerLevel.MANAGER),
        User(id=hr_id, name="Harper HR"),
        User(id=lead_id, name="Lee Lead", level=EngineerLevel.LEAD, manager_id=manager_id, department="Platform"),
        User(id=junior_id, name="Jo Junior", level=EngineerLevel.JUNIOR, manager_id=manager_id, department="Mobile"),
        User(id=nolevel_id, name="Nat Nolevel", manager_id=manager_id),
    ]


def make_evaluation(
    evaluation_id: str,
    cycle_id: ReviewCycleId,
    employee_id: UserId,
    manager_id: UserId,
    scores: PillarScores,
    submitted: bool = True,
) -> ManagerEvaluation:
    evaluation = ManagerEvaluation(
        id=ManagerEvaluationId(value=evaluation_id),
        cycle_id=cycle_id,
        employee_id=employee_id,
        manager_id=manager_id,
        scores=scores,
        created_at=CLOCK_START - timedelta(days=1),
        updated_at=CLOCK_START - timedelta(days=1),
    )
    if submitted:
        evaluation.submit(CLOCK_START - timedelta(hours=1))
    return evaluation


def make_peer_feedback(
    feedback_id: str,
    cycle_id: ReviewCycleId,
    reviewee_id: UserId,
    reviewer_id: UserId,
    scores: PillarScores,
) -> PeerFeedback:
    return PeerFeedback(
        id=PeerFeedbackId(value=feedback_id),
        cycle_id=cycle_id,
        reviewee_id=reviewee_id,
        reviewer_id=reviewer_id,
        scores=scores,
        submitted_at=CLOCK_START - timedelta(days=30),
    )


def make_final_score(
    final_score_id: str,
    cycle_id: ReviewCycleId,
    user_id: UserId,
    scores: PillarScores,
    level: EngineerLevel,
    locked: bool = False,
) -> FinalScore:
    weighted = ScoreCalculationService().calculate_weighted_score(scores, level)
    final_score = FinalScore(
        id=FinalScoreId(value=final_score_id),
        cycle_id=cycle_id,
        user_id=user_id,
        pillar_scores=scores,
        weighted_score=weighted,
        final_level=level,
        calculated_at=CLOCK_START - timedelta(hours=2),
    )
    if locked:
        final_score.lock(CLOCK_START - timedelta(hours=1))
    return final_score


# =============================================================================
# REPOSITORY + SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def repos(cycle, users):
    """Fresh in-memory repositories seeded with the cycle and users."""
    return SimpleNamespace(
        cycles=InMemoryReviewCycleRepository([cycle]),
        users=InMemoryUserRepository(users),
        evaluations=InMemoryManagerEvaluationRepository(),
        final_scores=InMemoryFinalScoreRepository(),
        sessions=InMemoryCalibrationSessionRepository(),
        adjustments=InMemoryScoreAdjustmentRequestRepository(),
        peer_feedback=InMemoryPeerFeedbackRepository(),
    )


@pytest.fixture
def evaluation_service(repos, id_generator, clock):
    return ManagerEvaluationService(
        evaluation_repo=repos.evaluations,
        cycle_repo=repos.cycles,
        user_repo=repos.users,
        id_generator=id_generator,
        clock=clock,
    )


@pytest.fixture
def calibration_service(repos, id_generator, clock):
    return CalibrationService(
        session_repo=repos.sessions,
        cycle_repo=repos.cycles,
        evaluation_repo=repos.evaluations,
        final_score_repo=repos.final_scores,
        user_repo=repos.users,
        id_generator=id_generator,
        clock=clock,
    )


@pytest.fixture
def adjustment_service(repos, id_generator, clock):
    return ScoreAdjustmentService(
        request_repo=repos.adjustments,
        final_score_repo=repos.final_scores,
        evaluation_repo=repos.evaluations,
        cycle_repo=repos.cycles,
        user_repo=repos.users,
        id_generator=id_generator,
        clock=clock,
    )


@pytest.fixture
def final_score_service(repos, id_generator, clock):
    return FinalScoreService(
        final_score_repo=repos.final_scores,
        evaluation_repo=repos.evaluations,
        cycle_repo=repos.cycles,
        user_repo=repos.users,
        id_generator=id_generator,
        clock=clock,
        peer_feedback_repo=repos.peer_feedback,
    )


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture
def client(evaluation_service, calibration_service, adjustment_service, final_score_service):
    """TestClient whose services share the seeded in-memory repositories."""
    from review_engine.main import app

    app.dependency_overrides[dependencies.get_manager_evaluation_service] = lambda: evaluation_service
    app.dependency_overrides[dependencies.get_calibration_service] = lambda: calibration_service
    app.dependency_overrides[dependencies.get_score_adjustment_service] = lambda: adjustment_service
    app.dependency_overrides[dependencies.get_final_score_service] = lambda: final_score_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
