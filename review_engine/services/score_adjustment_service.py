"""
Score Adjustment Service
review_engine/services/score_adjustment_service.py

Two-phase change to an already-locked final score.

request_adjustment:
  1. Cycle must exist
  2. The employee's final score must exist and be locked
  3. The caller must be the employee's direct manager
  4. Persist a PENDING request

review_adjustment:
  1. Request must exist
  2. Request must still be PENDING (checked before anything else)
  3. REJECTED needs a non-blank rejection reason
  4. APPROVED cascades into the evaluation and final score, each only
     when present
  5. Record the decision and persist
"""

import logging
from typing import List, Optional

from review_engine.core.exceptions import (
    FinalScoreNotLockedException,
    NotDirectReportException,
    NotFoundException,
    RejectionReasonRequiredException,
    ValidationException,
)
from review_engine.core.ports import Clock, IdGenerator
from review_engine.models.enumerations import ReviewAction
from review_engine.models.identifiers import (
    ReviewCycleId,
    ScoreAdjustmentRequestId,
    UserId,
)
from review_engine.models.responses import ReviewAdjustmentResult, ScoreAdjustmentSummary
from review_engine.models.score_adjustment import ScoreAdjustmentRequest
from review_engine.models.scores import PillarScores
from review_engine.repositories.final_score_repository import FinalScoreRepository
from review_engine.repositories.manager_evaluation_repository import ManagerEvaluationRepository
from review_engine.repositories.review_cycle_repository import ReviewCycleRepository
from review_engine.repositories.score_adjustment_repository import ScoreAdjustmentRequestRepository
from review_engine.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

APPROVAL_JUSTIFICATION_PREFIX = "Score adjustment approved: "


class ScoreAdjustmentService:

    def __init__(
        self,
        request_repo: ScoreAdjustmentRequestRepository,
        final_score_repo: FinalScoreRepository,
        evaluation_repo: ManagerEvaluationRepository,
        cycle_repo: ReviewCycleRepository,
        user_repo: UserRepository,
        id_generator: IdGenerator,
        clock: Clock,
    ):
        self.request_repo = request_repo
        self.final_score_repo = final_score_repo
        self.evaluation_repo = evaluation_repo
        self.cycle_repo = cycle_repo
        self.user_repo = user_repo
        self.id_generator = id_generator
        self.clock = clock

    async def request_adjustment(
        self,
        cycle_id: ReviewCycleId,
        employee_id: UserId,
        manager_id: UserId,
        proposed_scores: PillarScores,
        reason: str,
    ) -> ScoreAdjustmentSummary:
        if not reason or not reason.strip():
            raise ValidationException("A reason is required for a score adjustment request")

        # 1. Validate cycle
        cycle = await self.cycle_repo.find_by_id(cycle_id)
        if cycle is None:
            raise NotFoundException("ReviewCycle", cycle_id.value)

        # 2. Final score must be locked
        final_score = await self.final_score_repo.find_by_user_and_cycle(employee_id, cycle_id)
        if final_score is None:
            raise NotFoundException("FinalScore", f"{employee_id.value}/{cycle_id.value}")
        if not final_score.is_locked:
            logger.warning(
                f"Adjustment requested for unlocked final score {final_score.id.value}"
            )
            raise FinalScoreNotLockedException()

        # 3. Manager-employee relationship
        employee = await self.user_repo.find_by_id(employee_id)
        if employee is None:
            raise NotFoundException("User", employee_id.value)
        if not employee.is_managed_by(manager_id):
            logger.warning(
                f"User {manager_id.value} requested adjustment for non-report {employee_id.value}"
            )
            raise NotDirectReportException(manager_id.value, employee_id.value)

        # 4. Create and persist
        request = ScoreAdjustmentRequest(
            id=ScoreAdjustmentRequestId(value=self.id_generator.new_id()),
            cycle_id=cycle_id,
            employee_id=employee_id,
            requester_id=manager_id,
            reason=reason,
            proposed_scores=proposed_scores,
            requested_at=self.clock.now(),
        )
        saved = await self.request_repo.save(request)

        logger.info(
            f"Score adjustment {saved.id.value} requested by {manager_id.value} "
            f"for employee {employee_id.value}"
        )
        return ScoreAdjustmentSummary.from_request(saved)

    async def review_adjustment(
        self,
        request_id: ScoreAdjustmentRequestId,
        approver_id: UserId,
        action: ReviewAction,
        rejection_reason: Optional[str] = None,
    ) -> ReviewAdjustmentResult:
        # 1. Request must exist
        request = await self.request_repo.find_by_id(request_id)
        if request is None:
            raise NotFoundException("ScoreAdjustmentRequest", request_id.value)

        # 2. One-shot transition
        request.ensure_pending()

        # 3. Rejection reason before any cascade
        if action == ReviewAction.REJECTED and (
            not rejection_reason or not rejection_reason.strip()
        ):
            raise RejectionReasonRequiredException()

        now = self.clock.now()

        # 4. Cascade on approval; each side is optional
        if action == ReviewAction.APPROVED:
            evaluation = await self.evaluation_repo.find_by_employee_and_cycle(
                request.employee_id, request.cycle_id
            )
            if evaluation is not None:
                evaluation.apply_calibration_adjustment(
                    request.proposed_scores,
                    APPROVAL_JUSTIFICATION_PREFIX + request.reason,
                    now,
                    adjustment_id=request.id.value,
                )
                await self.evaluation_repo.save(evaluation)

            final_score = await self.final_score_repo.find_by_user_and_cycle(
                request.employee_id, request.cycle_id
            )
            if final_score is not None:
                await self.final_score_repo.save(final_score)

        # 5. Decision
        request.review(action, approver_id, now, rejection_reason)
        saved = await self.request_repo.save(request)

        logger.info(
            f"Score adjustment {request_id.value} {saved.status.value.lower()} "
            f"by {approver_id.value}"
        )
        return ReviewAdjustmentResult(
            id=saved.id.value,
            status=saved.status.value,
            reviewed_at=saved.reviewed_at,
            approved_by=approver_id.value,
        )

    async def list_pending(
        self, cycle_id: Optional[ReviewCycleId] = None
    ) -> List[ScoreAdjustmentSummary]:
        requests = await self.request_repo.find_pending(cycle_id)
        return [ScoreAdjustmentSummary.from_request(r) for r in requests]

    async def list_for_employee(
        self, employee_id: UserId, cycle_id: Optional[ReviewCycleId] = None
    ) -> List[ScoreAdjustmentSummary]:
        requests = await self.request_repo.find_by_employee(employee_id, cycle_id)
        return [ScoreAdjustmentSummary.from_request(r) for r in requests]
