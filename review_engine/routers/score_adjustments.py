"""
Score Adjustments Router - Performance Review Scoring Engine
review_engine/routers/score_adjustments.py

Request and review changes to locked final scores.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from review_engine.config import settings
from review_engine.core.dependencies import get_score_adjustment_service
from review_engine.models.enumerations import ReviewAction
from review_engine.models.identifiers import ReviewCycleId, ScoreAdjustmentRequestId, UserId
from review_engine.models.responses import ReviewAdjustmentResult, ScoreAdjustmentSummary
from review_engine.models.scores import PillarScores
from review_engine.routers.errors import ERROR_RESPONSES
from review_engine.services.score_adjustment_service import ScoreAdjustmentService

router = APIRouter(
    prefix=f"{settings.API_V1_PREFIX}/score-adjustments",
    tags=["Score Adjustments"],
)


#  Schemas


class RequestAdjustmentRequest(BaseModel):
    cycle_id: str = Field(..., min_length=1)
    employee_id: str = Field(..., min_length=1)
    manager_id: str = Field(..., min_length=1)
    proposed_scores: PillarScores
    reason: str


class ReviewAdjustmentRequest(BaseModel):
    approver_id: str = Field(..., min_length=1)
    action: ReviewAction
    rejection_reason: Optional[str] = None


def _optional_cycle(cycle_id: Optional[str]) -> Optional[ReviewCycleId]:
    return ReviewCycleId(value=cycle_id) if cycle_id is not None else None


#  Routes


@router.post(
    "",
    response_model=ScoreAdjustmentSummary,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Request a score adjustment",
    description="Only allowed once the employee's final score is locked, "
                "and only by the employee's direct manager.",
)
async def request_adjustment(
    payload: RequestAdjustmentRequest,
    service: ScoreAdjustmentService = Depends(get_score_adjustment_service),
) -> ScoreAdjustmentSummary:
    return await service.request_adjustment(
        cycle_id=ReviewCycleId(value=payload.cycle_id),
        employee_id=UserId(value=payload.employee_id),
        manager_id=UserId(value=payload.manager_id),
        proposed_scores=payload.proposed_scores,
        reason=payload.reason,
    )


@router.post(
    "/{request_id}/review",
    response_model=ReviewAdjustmentResult,
    responses=ERROR_RESPONSES,
    summary="Approve or reject a pending request",
)
async def review_adjustment(
    request_id: str,
    payload: ReviewAdjustmentRequest,
    service: ScoreAdjustmentService = Depends(get_score_adjustment_service),
) -> ReviewAdjustmentResult:
    return await service.review_adjustment(
        request_id=ScoreAdjustmentRequestId(value=request_id),
        approver_id=UserId(value=payload.approver_id),
        action=payload.action,
        rejection_reason=payload.rejection_reason,
    )


@router.get(
    "/pending",
    response_model=List[ScoreAdjustmentSummary],
    summary="List pending requests",
)
async def list_pending(
    cycle_id: Optional[str] = Query(default=None),
    service: ScoreAdjustmentService = Depends(get_score_adjustment_service),
) -> List[ScoreAdjustmentSummary]:
    return await service.list_pending(_optional_cycle(cycle_id))


@router.get(
    "/employees/{employee_id}",
    response_model=List[ScoreAdjustmentSummary],
    summary="List requests for an employee",
)
async def list_for_employee(
    employee_id: str,
    cycle_id: Optional[str] = Query(default=None),
    service: ScoreAdjustmentService = Depends(get_score_adjustment_service),
) -> List[ScoreAdjustmentSummary]:
    return await service.list_for_employee(UserId(value=employee_id), _optional_cycle(cycle_id))
