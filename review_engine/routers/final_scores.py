"""
Final Scores Router - Performance Review Scoring Engine
review_engine/routers/final_scores.py

Calculate, lock and deliver final scores; employee and team views.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from review_engine.config import settings
from review_engine.core.dependencies import get_final_score_service
from review_engine.models.enumerations import BonusTier
from review_engine.models.identifiers import FinalScoreId, ReviewCycleId, UserId
from review_engine.models.responses import (
    CalculateFinalScoresResult,
    DeliverFeedbackResult,
    FeedbackDeliveredResult,
    FinalScoreSummary,
    LockFinalScoresResult,
    MyFinalScoreView,
    TeamFinalScoresView,
)
from review_engine.routers.errors import ERROR_RESPONSES
from review_engine.services.final_score_service import FinalScoreService

router = APIRouter(
    prefix=f"{settings.API_V1_PREFIX}/final-scores",
    tags=["Final Scores"],
)


#  Schemas


class DeliverFeedbackRequest(BaseModel):
    delivered_by: str = Field(..., min_length=1)
    feedback_notes: Optional[str] = None


class MarkFeedbackDeliveredRequest(BaseModel):
    manager_id: str = Field(..., min_length=1)
    feedback_notes: Optional[str] = None


#  Routes


@router.post(
    "/cycles/{cycle_id}/calculate",
    response_model=CalculateFinalScoresResult,
    responses=ERROR_RESPONSES,
    summary="Calculate final scores for a cycle",
    description="Builds or refreshes the final score of every submitted evaluation. "
                "Locked scores are skipped.",
)
async def calculate_final_scores(
    cycle_id: str,
    service: FinalScoreService = Depends(get_final_score_service),
) -> CalculateFinalScoresResult:
    return await service.calculate_final_scores(ReviewCycleId(value=cycle_id))


@router.post(
    "/cycles/{cycle_id}/lock",
    response_model=LockFinalScoresResult,
    responses=ERROR_RESPONSES,
    summary="Lock all final scores of a cycle",
)
async def lock_final_scores(
    cycle_id: str,
    service: FinalScoreService = Depends(get_final_score_service),
) -> LockFinalScoresResult:
    return await service.lock_final_scores(ReviewCycleId(value=cycle_id))


@router.post(
    "/{final_score_id}/deliver",
    response_model=DeliverFeedbackResult,
    responses=ERROR_RESPONSES,
    summary="Record feedback delivery",
    description="Refused on locked scores. Repeat calls overwrite the delivery record.",
)
async def deliver_feedback(
    final_score_id: str,
    payload: DeliverFeedbackRequest,
    service: FinalScoreService = Depends(get_final_score_service),
) -> DeliverFeedbackResult:
    return await service.deliver_feedback(
        FinalScoreId(value=final_score_id),
        UserId(value=payload.delivered_by),
        payload.feedback_notes,
    )


@router.post(
    "/cycles/{cycle_id}/employees/{employee_id}/feedback-delivered",
    response_model=FeedbackDeliveredResult,
    responses=ERROR_RESPONSES,
    summary="Mark feedback delivered to a direct report",
)
async def mark_feedback_delivered(
    cycle_id: str,
    employee_id: str,
    payload: MarkFeedbackDeliveredRequest,
    service: FinalScoreService = Depends(get_final_score_service),
) -> FeedbackDeliveredResult:
    return await service.mark_feedback_delivered(
        cycle_id=ReviewCycleId(value=cycle_id),
        employee_id=UserId(value=employee_id),
        manager_id=UserId(value=payload.manager_id),
        feedback_notes=payload.feedback_notes,
    )


@router.get(
    "/cycles/{cycle_id}/me",
    response_model=MyFinalScoreView,
    responses=ERROR_RESPONSES,
    summary="Get an employee's own final score",
)
async def get_my_final_score(
    cycle_id: str,
    user_id: str = Query(..., min_length=1),
    service: FinalScoreService = Depends(get_final_score_service),
) -> MyFinalScoreView:
    return await service.get_my_final_score(ReviewCycleId(value=cycle_id), UserId(value=user_id))


@router.get(
    "/cycles/{cycle_id}/team",
    response_model=TeamFinalScoresView,
    responses=ERROR_RESPONSES,
    summary="Get final scores of a manager's direct reports",
)
async def get_team_final_scores(
    cycle_id: str,
    manager_id: str = Query(..., min_length=1),
    service: FinalScoreService = Depends(get_final_score_service),
) -> TeamFinalScoresView:
    return await service.get_team_final_scores(
        ReviewCycleId(value=cycle_id), UserId(value=manager_id)
    )


@router.get(
    "/cycles/{cycle_id}/tiers/{bonus_tier}",
    response_model=List[FinalScoreSummary],
    responses=ERROR_RESPONSES,
    summary="List final scores in a bonus tier",
)
async def get_scores_by_bonus_tier(
    cycle_id: str,
    bonus_tier: BonusTier,
    service: FinalScoreService = Depends(get_final_score_service),
) -> List[FinalScoreSummary]:
    return await service.get_scores_by_bonus_tier(ReviewCycleId(value=cycle_id), bonus_tier)
