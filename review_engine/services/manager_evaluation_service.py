"""
Manager Evaluation Service
review_engine/services/manager_evaluation_service.py

Submission flow for a manager scoring a direct report:

  1. Cycle must exist
  2. The cycle's manager-evaluation deadline must not have passed
  3. The caller must be the employee's direct manager
  4. Find the (employee, cycle) evaluation or create a DRAFT one
  5. Apply scores and narrative, submit (one-shot), persist
"""

import logging
from typing import Optional

from review_engine.core.exceptions import (
    DeadlinePassedException,
    NotDirectReportException,
    NotFoundException,
)
from review_engine.core.ports import Clock, IdGenerator
from review_engine.models.enumerations import CyclePhase
from review_engine.models.identifiers import (
    ManagerEvaluationId,
    ReviewCycleId,
    UserId,
)
from review_engine.models.manager_evaluation import ManagerEvaluation
from review_engine.models.responses import EvaluationSummary
from review_engine.models.scores import PillarScores
from review_engine.repositories.manager_evaluation_repository import ManagerEvaluationRepository
from review_engine.repositories.review_cycle_repository import ReviewCycleRepository
from review_engine.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class ManagerEvaluationService:

    def __init__(
        self,
        evaluation_repo: ManagerEvaluationRepository,
        cycle_repo: ReviewCycleRepository,
        user_repo: UserRepository,
        id_generator: IdGenerator,
        clock: Clock,
    ):
        self.evaluation_repo = evaluation_repo
        self.cycle_repo = cycle_repo
        self.user_repo = user_repo
        self.id_generator = id_generator
        self.clock = clock

    async def submit_evaluation(
        self,
        cycle_id: ReviewCycleId,
        employee_id: UserId,
        manager_id: UserId,
        scores: PillarScores,
        narrative: Optional[str] = None,
        strengths: Optional[str] = None,
        growth_areas: Optional[str] = None,
        development_plan: Optional[str] = None,
    ) -> EvaluationSummary:
        # 1. Validate cycle
        cycle = await self.cycle_repo.find_by_id(cycle_id)
        if cycle is None:
            raise NotFoundException("ReviewCycle", cycle_id.value)

        # 2. Deadline
        now = self.clock.now()
        if cycle.has_deadline_passed(CyclePhase.MANAGER_EVALUATION, now):
            logger.warning(
                f"Rejected manager evaluation for {employee_id.value}: "
                f"deadline passed in cycle {cycle_id.value}"
            )
            raise DeadlinePassedException(CyclePhase.MANAGER_EVALUATION.value)

        # 3. Manager-employee relationship
        employee = await self.user_repo.find_by_id(employee_id)
        if employee is None:
            raise NotFoundException("User", employee_id.value)
        if not employee.is_managed_by(manager_id):
            logger.warning(
                f"User {manager_id.value} tried to evaluate non-report {employee_id.value}"
            )
            raise NotDirectReportException(manager_id.value, employee_id.value)

        # 4. Find or create
        evaluation = await self.evaluation_repo.find_by_employee_and_cycle(employee_id, cycle_id)
        if evaluation is None:
            evaluation = ManagerEvaluation(
                id=ManagerEvaluationId(value=self.id_generator.new_id()),
                cycle_id=cycle_id,
                employee_id=employee_id,
                manager_id=manager_id,
                scores=scores,
                created_at=now,
                updated_at=now,
            )
        else:
            evaluation.update_scores(scores, now)

        evaluation.update_narrative(
            now,
            narrative=narrative,
            strengths=strengths,
            growth_areas=growth_areas,
            development_plan=development_plan,
        )

        # 5. Submit and persist
        evaluation.submit(now)
        saved = await self.evaluation_repo.save(evaluation)

        logger.info(
            f"Manager evaluation {saved.id.value} submitted for employee "
            f"{employee_id.value} in cycle {cycle_id.value}"
        )
        return EvaluationSummary.from_evaluation(saved)

    async def update_evaluation(
        self,
        evaluation_id: ManagerEvaluationId,
        manager_id: UserId,
        scores: Optional[PillarScores] = None,
        narrative: Optional[str] = None,
        strengths: Optional[str] = None,
        growth_areas: Optional[str] = None,
        development_plan: Optional[str] = None,
    ) -> EvaluationSummary:
        """Edit a DRAFT evaluation. Submitted evaluations are rejected."""
        evaluation = await self.evaluation_repo.find_by_id(evaluation_id)
        if evaluation is None:
            raise NotFoundException("ManagerEvaluation", evaluation_id.value)
        if evaluation.manager_id != manager_id:
            raise NotDirectReportException(manager_id.value, evaluation.employee_id.value)

        now = self.clock.now()
        if scores is not None:
            evaluation.update_scores(scores, now)
        evaluation.update_narrative(
            now,
            narrative=narrative,
            strengths=strengths,
            growth_areas=growth_areas,
            development_plan=development_plan,
        )

        saved = await self.evaluation_repo.save(evaluation)
        logger.info(f"Manager evaluation {saved.id.value} updated")
        return EvaluationSummary.from_evaluation(saved)

    async def get_evaluation(self, evaluation_id: ManagerEvaluationId) -> EvaluationSummary:
        evaluation = await self.evaluation_repo.find_by_id(evaluation_id)
        if evaluation is None:
            raise NotFoundException("ManagerEvaluation", evaluation_id.value)
        return EvaluationSummary.from_evaluation(evaluation)
