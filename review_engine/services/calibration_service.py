"""
Calibration Service
review_engine/services/calibration_service.py

Calibration sessions and the score changes agreed in them.

Session lifecycle:
    create_session -> SCHEDULED
    start_session  -> IN_PROGRESS (from SCHEDULED only)
    lock_session   -> COMPLETED (from any state; re-locking refreshes completed_at)
    record_note    -> allowed in every state

apply_calibration_adjustment changes a submitted evaluation's scores
and reports the weighted score and bonus tier before and after.

get_dashboard summarizes the cycle's bonus-tier distribution for the
calibration committee.
"""

import asyncio
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from review_engine.config import settings
from review_engine.core.exceptions import (
    CalibrationSessionStateException,
    JustificationTooShortException,
    NotFoundException,
)
from review_engine.core.ports import Clock, IdGenerator
from review_engine.models.calibration_session import CalibrationSession
from review_engine.models.enumerations import BonusTier, CalibrationProgress
from review_engine.models.identifiers import (
    CalibrationSessionId,
    ManagerEvaluationId,
    ReviewCycleId,
    UserId,
)
from review_engine.models.responses import (
    UNKNOWN_DEPARTMENT,
    UNKNOWN_LEVEL,
    UNKNOWN_NAME,
    CalibrationAdjustmentResult,
    CalibrationDashboard,
    CalibrationSessionCreated,
    CalibrationSessionView,
    DashboardEvaluation,
    DashboardSummary,
)
from review_engine.models.scores import PillarScores
from review_engine.models.user import User, resolve_level
from review_engine.repositories.calibration_session_repository import CalibrationSessionRepository
from review_engine.repositories.final_score_repository import FinalScoreRepository
from review_engine.repositories.manager_evaluation_repository import ManagerEvaluationRepository
from review_engine.repositories.review_cycle_repository import ReviewCycleRepository
from review_engine.repositories.user_repository import UserRepository
from review_engine.scoring.final_score_calculator import FinalScoreCalculationService
from review_engine.scoring.score_calculator import ScoreCalculationService

logger = logging.getLogger(__name__)


class CalibrationService:

    def __init__(
        self,
        session_repo: CalibrationSessionRepository,
        cycle_repo: ReviewCycleRepository,
        evaluation_repo: ManagerEvaluationRepository,
        final_score_repo: FinalScoreRepository,
        user_repo: UserRepository,
        id_generator: IdGenerator,
        clock: Clock,
        score_calculator: Optional[ScoreCalculationService] = None,
        final_score_calculator: Optional[FinalScoreCalculationService] = None,
    ):
        self.session_repo = session_repo
        self.cycle_repo = cycle_repo
        self.evaluation_repo = evaluation_repo
        self.final_score_repo = final_score_repo
        self.user_repo = user_repo
        self.id_generator = id_generator
        self.clock = clock
        self.score_calculator = score_calculator or ScoreCalculationService()
        self.final_score_calculator = final_score_calculator or FinalScoreCalculationService(
            self.score_calculator
        )

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    async def create_session(
        self,
        cycle_id: ReviewCycleId,
        name: str,
        facilitator_id: UserId,
        scheduled_at: datetime,
        participant_ids: Iterable[UserId] = (),
        department: Optional[str] = None,
    ) -> CalibrationSessionCreated:
        cycle = await self.cycle_repo.find_by_id(cycle_id)
        if cycle is None:
            raise NotFoundException("ReviewCycle", cycle_id.value)

        session = CalibrationSession(
            id=CalibrationSessionId(value=self.id_generator.new_id()),
            cycle_id=cycle_id,
            name=name,
            department=department,
            facilitator_id=facilitator_id,
            participant_ids=tuple(participant_ids),
            scheduled_at=scheduled_at,
        )
        saved = await self.session_repo.save(session)

        logger.info(f"Calibration session {saved.id.value} scheduled for cycle {cycle_id.value}")
        return CalibrationSessionCreated(
            id=saved.id.value,
            name=saved.name,
            status=saved.status.value,
            scheduled_at=saved.scheduled_at,
            participant_count=len(saved.participant_ids),
        )

    async def start_session(self, session_id: CalibrationSessionId) -> CalibrationSessionView:
        session = await self._get_session_or_raise(session_id)
        saved = await self.session_repo.save(session.started())
        logger.info(f"Calibration session {session_id.value} started")
        return CalibrationSessionView.from_session(saved)

    async def record_note(
        self, session_id: CalibrationSessionId, notes: str
    ) -> CalibrationSessionView:
        """Replace the session notes. Allowed in every status."""
        session = await self._get_session_or_raise(session_id)
        saved = await self.session_repo.save(session.with_notes(notes))
        logger.info(f"Notes recorded on calibration session {session_id.value}")
        return CalibrationSessionView.from_session(saved)

    async def lock_session(
        self, session_id: CalibrationSessionId, locked_by: UserId
    ) -> CalibrationSessionView:
        """
        Mark the session COMPLETED as of now.

        Locking an already COMPLETED session is not an error; it moves
        completed_at forward.
        """
        session = await self._get_session_or_raise(session_id)
        saved = await self.session_repo.save(session.locked(self.clock.now()))
        logger.info(
            f"Calibration session {session_id.value} locked by {locked_by.value} "
            f"(previous status {session.status.value})"
        )
        return CalibrationSessionView.from_session(saved)

    async def get_session(
        self, session_id: CalibrationSessionId
    ) -> Optional[CalibrationSessionView]:
        """Read projection, or None when the session does not exist."""
        session = await self.session_repo.find_by_id(session_id)
        if session is None:
            return None
        return CalibrationSessionView.from_session(session)

    async def list_sessions(
        self,
        cycle_id: ReviewCycleId,
        department: Optional[str] = None,
    ) -> List[CalibrationSessionView]:
        if department is not None:
            sessions = [
                s for s in await self.session_repo.find_by_department(department)
                if s.cycle_id == cycle_id
            ]
        else:
            sessions = await self.session_repo.find_by_cycle(cycle_id)
        return [CalibrationSessionView.from_session(s) for s in sessions]

    async def _get_session_or_raise(self, session_id: CalibrationSessionId) -> CalibrationSession:
        session = await self.session_repo.find_by_id(session_id)
        if session is None:
            raise NotFoundException("CalibrationSession", session_id.value)
        return session

    # -------------------------------------------------------------------------
    # Adjustments
    # -------------------------------------------------------------------------

    async def apply_calibration_adjustment(
        self,
        evaluation_id: ManagerEvaluationId,
        session_id: CalibrationSessionId,
        adjusted_scores: PillarScores,
        justification: str,
    ) -> CalibrationAdjustmentResult:
        # 1. Evaluation and session
        evaluation = await self.evaluation_repo.find_by_id(evaluation_id)
        if evaluation is None:
            raise NotFoundException("ManagerEvaluation", evaluation_id.value)

        session = await self._get_session_or_raise(session_id)
        if session.is_locked:
            logger.warning(
                f"Rejected calibration adjustment on completed session {session_id.value}"
            )
            raise CalibrationSessionStateException(
                f"Calibration session {session_id.value} is completed"
            )

        # 2. Justification
        min_length = settings.MIN_JUSTIFICATION_LENGTH
        if not justification or len(justification.strip()) < min_length:
            raise JustificationTooShortException(min_length)

        # 3. Apply to evaluation (requires SUBMITTED)
        now = self.clock.now()
        adjustment_id = self.id_generator.new_id()
        original_scores = evaluation.scores
        evaluation.apply_calibration_adjustment(
            adjusted_scores, justification, now, adjustment_id=adjustment_id
        )

        # 4. Before/after with the employee's level
        employee = await self.user_repo.find_by_id(evaluation.employee_id)
        level = resolve_level(employee)
        old_weighted = self.score_calculator.calculate_weighted_score(original_scores, level)
        new_weighted = self.score_calculator.calculate_weighted_score(adjusted_scores, level)

        # 5. Persist evaluation, then the final score when one exists
        await self.evaluation_repo.save(evaluation)

        final_score = await self.final_score_repo.find_by_user_and_cycle(
            evaluation.employee_id, evaluation.cycle_id
        )
        if final_score is not None:
            if not final_score.is_locked:
                self.final_score_calculator.refresh(final_score, adjusted_scores, level, now)
            await self.final_score_repo.save(final_score)

        logger.info(
            f"Calibration adjustment {adjustment_id} applied to evaluation {evaluation_id.value}: "
            f"{old_weighted.value} ({old_weighted.bonus_tier.value}) -> "
            f"{new_weighted.value} ({new_weighted.bonus_tier.value})"
        )
        return CalibrationAdjustmentResult(
            id=adjustment_id,
            adjustment_id=adjustment_id,
            evaluation_id=evaluation_id.value,
            original_scores=original_scores.as_dict(),
            adjusted_scores=adjusted_scores.as_dict(),
            old_weighted_score=float(old_weighted.value),
            new_weighted_score=float(new_weighted.value),
            old_bonus_tier=old_weighted.bonus_tier.value,
            new_bonus_tier=new_weighted.bonus_tier.value,
            adjusted_at=now,
        )

    # -------------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------------

    async def get_dashboard(
        self,
        cycle_id: ReviewCycleId,
        department: Optional[str] = None,
    ) -> CalibrationDashboard:
        """
        Bonus-tier distribution of the cycle's evaluations, overall and
        per employee department, plus one row per evaluation.

        Tiers come from each evaluation's current scores and the
        employee's level. Employees without a department are counted
        under "Unknown". An empty department means no filter.
        """
        cycle = await self.cycle_repo.find_by_id(cycle_id)
        if cycle is None:
            raise NotFoundException("ReviewCycle", cycle_id.value)

        evaluations = await self.evaluation_repo.find_by_cycle(cycle_id)

        user_ids = {e.employee_id for e in evaluations} | {e.manager_id for e in evaluations}
        users = await asyncio.gather(*(self.user_repo.find_by_id(u) for u in user_ids))
        users_by_id: Dict[UserId, User] = {u.id: u for u in users if u is not None}

        by_tier = _empty_tier_counts()
        by_department: Dict[str, Dict[str, int]] = {}
        rows: List[DashboardEvaluation] = []

        for evaluation in evaluations:
            employee = users_by_id.get(evaluation.employee_id)
            employee_department = employee.department if employee is not None else None
            if department and employee_department != department:
                continue

            weighted = self.score_calculator.calculate_weighted_score(
                evaluation.scores, resolve_level(employee)
            )
            tier = weighted.bonus_tier.value
            department_label = employee_department or UNKNOWN_DEPARTMENT

            by_tier[tier] += 1
            by_department.setdefault(department_label, _empty_tier_counts())[tier] += 1

            manager = users_by_id.get(evaluation.manager_id)
            rows.append(DashboardEvaluation(
                evaluation_id=evaluation.id.value,
                employee_id=evaluation.employee_id.value,
                employee_name=employee.name if employee is not None else UNKNOWN_NAME,
                level=employee.level.value if employee is not None and employee.level else UNKNOWN_LEVEL,
                department=department_label,
                manager_id=evaluation.manager_id.value,
                manager_name=manager.name if manager is not None else UNKNOWN_NAME,
                scores=evaluation.scores.as_dict(),
                weighted_score=float(weighted.value),
                percentage_score=float(weighted.percentage),
                bonus_tier=tier,
                calibration_status=(
                    CalibrationProgress.CALIBRATED if evaluation.is_calibrated
                    else CalibrationProgress.PENDING
                ).value,
            ))

        logger.info(
            f"Calibration dashboard for cycle {cycle_id.value}: {len(rows)} evaluations "
            f"(department={department or 'all'})"
        )
        return CalibrationDashboard(
            cycle_id=cycle_id.value,
            department=department or None,
            summary=DashboardSummary(
                total_evaluations=len(rows),
                by_bonus_tier=by_tier,
                by_department=by_department,
            ),
            evaluations=rows,
        )


def _empty_tier_counts() -> Dict[str, int]:
    return {tier.value: 0 for tier in BonusTier}
