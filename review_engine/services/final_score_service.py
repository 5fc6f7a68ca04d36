"""
Final Score Service
review_engine/services/final_score_service.py

Calculation, lock and feedback delivery of final scores, plus the
employee and manager read views.

Lock rules:
  - lock_final_scores only saves scores that were unlocked when read
  - delivery is refused on a locked score, in both delivery variants
  - repeat delivery overwrites the previous delivery metadata
"""

import asyncio
import logging
from typing import List, Optional, Tuple

from review_engine.core.exceptions import (
    FinalScoreLockedException,
    NotDirectReportException,
    NotFoundException,
)
from review_engine.core.ports import Clock, IdGenerator
from review_engine.models.enumerations import BonusTier, EvaluationStatus
from review_engine.models.final_score import FinalScore
from review_engine.models.identifiers import FinalScoreId, ReviewCycleId, UserId
from review_engine.models.responses import (
    UNKNOWN_LEVEL,
    CalculateFinalScoresResult,
    CycleInfo,
    DeliverFeedbackResult,
    EmployeeInfo,
    FeedbackDeliveredResult,
    FinalScoreSummary,
    LockFinalScoresResult,
    MyFinalScoreView,
    PeerFeedbackSummary,
    TeamFinalScoresView,
    TeamMemberScore,
)
from review_engine.models.review_cycle import ReviewCycle
from review_engine.models.scores import PillarScores
from review_engine.models.user import User, resolve_level
from review_engine.repositories.final_score_repository import FinalScoreRepository
from review_engine.repositories.manager_evaluation_repository import ManagerEvaluationRepository
from review_engine.repositories.peer_feedback_repository import PeerFeedbackRepository
from review_engine.repositories.review_cycle_repository import ReviewCycleRepository
from review_engine.repositories.user_repository import UserRepository
from review_engine.scoring.final_score_calculator import FinalScoreCalculationService
from review_engine.scoring.peer_feedback_aggregator import PeerFeedbackAggregationService

logger = logging.getLogger(__name__)


def _level_label(user: User) -> str:
    return user.level.value if user.level is not None else UNKNOWN_LEVEL


class FinalScoreService:

    def __init__(
        self,
        final_score_repo: FinalScoreRepository,
        evaluation_repo: ManagerEvaluationRepository,
        cycle_repo: ReviewCycleRepository,
        user_repo: UserRepository,
        id_generator: IdGenerator,
        clock: Clock,
        calculator: Optional[FinalScoreCalculationService] = None,
        peer_feedback_repo: Optional[PeerFeedbackRepository] = None,
        peer_aggregator: Optional[PeerFeedbackAggregationService] = None,
    ):
        self.final_score_repo = final_score_repo
        self.evaluation_repo = evaluation_repo
        self.cycle_repo = cycle_repo
        self.user_repo = user_repo
        self.id_generator = id_generator
        self.clock = clock
        self.calculator = calculator or FinalScoreCalculationService()
        self.peer_feedback_repo = peer_feedback_repo
        self.peer_aggregator = peer_aggregator or PeerFeedbackAggregationService()

    async def _get_cycle_or_raise(self, cycle_id: ReviewCycleId) -> ReviewCycle:
        cycle = await self.cycle_repo.find_by_id(cycle_id)
        if cycle is None:
            raise NotFoundException("ReviewCycle", cycle_id.value)
        return cycle

    async def _peer_feedback(
        self, employee_id: UserId, cycle_id: ReviewCycleId
    ) -> Tuple[Optional[PillarScores], int]:
        """Averaged peer scores and their count, or (None, 0) without feedback."""
        if self.peer_feedback_repo is None:
            return None, 0
        feedbacks = await self.peer_feedback_repo.find_by_reviewee_and_cycle(employee_id, cycle_id)
        if not feedbacks:
            return None, 0
        return self.peer_aggregator.aggregate_scores(feedbacks), len(feedbacks)

    # -------------------------------------------------------------------------
    # Calculation and lock
    # -------------------------------------------------------------------------

    async def calculate_final_scores(self, cycle_id: ReviewCycleId) -> CalculateFinalScoresResult:
        """
        Build or refresh the final score of every submitted evaluation in
        the cycle, with the employee's averaged peer feedback attached.
        Locked scores are left untouched.
        """
        await self._get_cycle_or_raise(cycle_id)
        now = self.clock.now()

        evaluations = [
            e for e in await self.evaluation_repo.find_by_cycle(cycle_id)
            if e.status == EvaluationStatus.SUBMITTED
        ]

        created = updated = skipped = 0
        for evaluation in evaluations:
            employee = await self.user_repo.find_by_id(evaluation.employee_id)
            level = resolve_level(employee)

            existing = await self.final_score_repo.find_by_user_and_cycle(
                evaluation.employee_id, cycle_id
            )
            if existing is not None and existing.is_locked:
                skipped += 1
                continue

            peer_average, peer_count = await self._peer_feedback(evaluation.employee_id, cycle_id)
            if existing is None:
                final_score = self.calculator.build(
                    FinalScoreId(value=self.id_generator.new_id()), evaluation, level, now,
                    peer_average_scores=peer_average, peer_feedback_count=peer_count,
                )
                created += 1
            else:
                final_score = self.calculator.refresh(
                    existing, evaluation.scores, level, now,
                    peer_average_scores=peer_average, peer_feedback_count=peer_count,
                )
                updated += 1

            await self.final_score_repo.save(final_score)

        logger.info(
            f"Final scores calculated for cycle {cycle_id.value}: "
            f"created={created}, updated={updated}, locked_skipped={skipped}"
        )
        return CalculateFinalScoresResult(
            cycle_id=cycle_id.value,
            evaluations_considered=len(evaluations),
            scores_created=created,
            scores_updated=updated,
            locked_skipped=skipped,
            calculated_at=now,
        )

    async def lock_final_scores(self, cycle_id: ReviewCycleId) -> LockFinalScoresResult:
        """
        Lock every unlocked final score of the cycle.

        Saves run concurrently; the first failing save aborts the batch
        and already persisted saves are not rolled back. The reported
        total counts every score of the cycle, locked before or now.
        """
        await self._get_cycle_or_raise(cycle_id)

        final_scores = await self.final_score_repo.find_by_cycle(cycle_id)
        locked_at = self.clock.now()

        to_save = [s for s in final_scores if s.lock(locked_at)]
        await asyncio.gather(*(self.final_score_repo.save(s) for s in to_save))

        logger.info(
            f"Locked {len(to_save)} of {len(final_scores)} final scores in cycle {cycle_id.value}"
        )
        return LockFinalScoresResult(
            cycle_id=cycle_id.value,
            total_scores_locked=len(final_scores),
            locked_at=locked_at,
        )

    # -------------------------------------------------------------------------
    # Feedback delivery
    # -------------------------------------------------------------------------

    async def deliver_feedback(
        self,
        final_score_id: FinalScoreId,
        delivered_by: UserId,
        feedback_notes: Optional[str] = None,
    ) -> DeliverFeedbackResult:
        final_score = await self.final_score_repo.find_by_id(final_score_id)
        if final_score is None:
            raise NotFoundException("FinalScore", final_score_id.value)

        self._mark_delivered(final_score, delivered_by, feedback_notes)
        saved = await self.final_score_repo.save(final_score)

        logger.info(
            f"Feedback delivered on final score {final_score_id.value} by {delivered_by.value}"
        )
        return DeliverFeedbackResult.from_final_score(saved)

    async def mark_feedback_delivered(
        self,
        cycle_id: ReviewCycleId,
        employee_id: UserId,
        manager_id: UserId,
        feedback_notes: Optional[str] = None,
    ) -> FeedbackDeliveredResult:
        """Manager-initiated delivery, addressed by employee and cycle."""
        await self._get_cycle_or_raise(cycle_id)

        employee = await self.user_repo.find_by_id(employee_id)
        if employee is None:
            raise NotFoundException("User", employee_id.value)
        if not employee.is_managed_by(manager_id):
            logger.warning(
                f"User {manager_id.value} tried to deliver feedback to non-report {employee_id.value}"
            )
            raise NotDirectReportException(manager_id.value, employee_id.value)

        final_score = await self.final_score_repo.find_by_user_and_cycle(employee_id, cycle_id)
        if final_score is None:
            raise NotFoundException("FinalScore", f"{employee_id.value}/{cycle_id.value}")

        self._mark_delivered(final_score, manager_id, feedback_notes)
        saved = await self.final_score_repo.save(final_score)

        logger.info(
            f"Feedback delivered to employee {employee_id.value} by manager {manager_id.value}"
        )
        return FeedbackDeliveredResult(
            employee_id=saved.user_id.value,
            feedback_delivered=saved.feedback_delivered,
            feedback_delivered_at=saved.feedback_delivered_at,
        )

    def _mark_delivered(self, final_score: FinalScore, by: UserId, notes: Optional[str]) -> None:
        if final_score.is_locked:
            logger.warning(f"Rejected feedback delivery on locked final score {final_score.id.value}")
            raise FinalScoreLockedException("Cannot deliver feedback on a locked final score")
        final_score.mark_feedback_delivered(by, self.clock.now(), notes)

    # -------------------------------------------------------------------------
    # Read views
    # -------------------------------------------------------------------------

    async def get_my_final_score(self, cycle_id: ReviewCycleId, user_id: UserId) -> MyFinalScoreView:
        cycle = await self._get_cycle_or_raise(cycle_id)

        user = await self.user_repo.find_by_id(user_id)
        if user is None:
            raise NotFoundException("User", user_id.value)

        final_score = await self.final_score_repo.find_by_user_and_cycle(user_id, cycle_id)
        if final_score is None:
            raise NotFoundException("FinalScore", f"{user_id.value}/{cycle_id.value}")

        peer_summary = None
        if final_score.peer_average_scores is not None and final_score.peer_feedback_count > 0:
            peer_summary = PeerFeedbackSummary(
                average_scores=final_score.peer_average_scores.as_dict(),
                count=final_score.peer_feedback_count,
            )

        return MyFinalScoreView(
            employee=EmployeeInfo(id=user.id.value, name=user.name, level=_level_label(user)),
            cycle=CycleInfo(id=cycle.id.value, name=cycle.name, year=cycle.year),
            scores=final_score.pillar_scores.as_dict(),
            peer_feedback_summary=peer_summary,
            weighted_score=float(final_score.weighted_score.value),
            percentage_score=float(final_score.percentage_score),
            bonus_tier=final_score.bonus_tier.value,
            is_locked=final_score.is_locked,
            feedback_delivered=final_score.feedback_delivered,
            feedback_delivered_at=final_score.feedback_delivered_at,
        )

    async def get_team_final_scores(
        self, cycle_id: ReviewCycleId, manager_id: UserId
    ) -> TeamFinalScoresView:
        """Every direct report, with a zero BELOW placeholder when unscored."""
        await self._get_cycle_or_raise(cycle_id)

        reports = await self.user_repo.find_by_manager(manager_id)
        scores = await asyncio.gather(
            *(self.final_score_repo.find_by_user_and_cycle(r.id, cycle_id) for r in reports)
        )

        team: List[TeamMemberScore] = []
        for employee, final_score in zip(reports, scores):
            if final_score is None:
                team.append(TeamMemberScore.placeholder(
                    employee.id.value, employee.name, _level_label(employee)
                ))
                continue
            team.append(TeamMemberScore(
                employee_id=employee.id.value,
                employee_name=employee.name,
                level=_level_label(employee),
                weighted_score=float(final_score.weighted_score.value),
                percentage_score=float(final_score.percentage_score),
                bonus_tier=final_score.bonus_tier.value,
                feedback_delivered=final_score.feedback_delivered,
            ))
        return TeamFinalScoresView(team_scores=team)

    async def get_scores_by_bonus_tier(
        self, cycle_id: ReviewCycleId, bonus_tier: BonusTier
    ) -> List[FinalScoreSummary]:
        await self._get_cycle_or_raise(cycle_id)
        scores = await self.final_score_repo.find_by_bonus_tier(cycle_id, bonus_tier)
        return [FinalScoreSummary.from_final_score(s) for s in scores]
