"""
Manager Evaluations Router - Performance Review Scoring Engine
review_engine/routers/manager_evaluations.py

Submit, edit and read manager evaluations.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from review_engine.config import settings
from review_engine.core.dependencies import get_manager_evaluation_service
from review_engine.models.identifiers import ManagerEvaluationId, ReviewCycleId, UserId
from review_engine.models.responses import EvaluationSummary
from review_engine.models.scores import PillarScores
from review_engine.routers.errors import ERROR_RESPONSES
from review_engine.services.manager_evaluation_service import ManagerEvaluationService

router = APIRouter(
    prefix=f"{settings.API_V1_PREFIX}/manager-evaluations",
    tags=["Manager Evaluations"],
)


#  Schemas


class NarrativeFields(BaseModel):
    narrative: Optional[str] = None
    strengths: Optional[str] = None
    growth_areas: Optional[str] = None
    development_plan: Optional[str] = None


class SubmitEvaluationRequest(NarrativeFields):
    cycle_id: str = Field(..., min_length=1)
    employee_id: str = Field(..., min_length=1)
    manager_id: str = Field(..., min_length=1)
    scores: PillarScores


class UpdateEvaluationRequest(NarrativeFields):
    manager_id: str = Field(..., min_length=1)
    scores: Optional[PillarScores] = None


#  Routes


@router.post(
    "",
    response_model=EvaluationSummary,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Submit a manager evaluation",
    description="Creates or completes the evaluation of a direct report and submits it. "
                "Rejected after the cycle's manager-evaluation deadline.",
)
async def submit_evaluation(
    payload: SubmitEvaluationRequest,
    service: ManagerEvaluationService = Depends(get_manager_evaluation_service),
) -> EvaluationSummary:
    return await service.submit_evaluation(
        cycle_id=ReviewCycleId(value=payload.cycle_id),
        employee_id=UserId(value=payload.employee_id),
        manager_id=UserId(value=payload.manager_id),
        scores=payload.scores,
        narrative=payload.narrative,
        strengths=payload.strengths,
        growth_areas=payload.growth_areas,
        development_plan=payload.development_plan,
    )


@router.patch(
    "/{evaluation_id}",
    response_model=EvaluationSummary,
    responses=ERROR_RESPONSES,
    summary="Edit a draft evaluation",
)
async def update_evaluation(
    evaluation_id: str,
    payload: UpdateEvaluationRequest,
    service: ManagerEvaluationService = Depends(get_manager_evaluation_service),
) -> EvaluationSummary:
    return await service.update_evaluation(
        evaluation_id=ManagerEvaluationId(value=evaluation_id),
        manager_id=UserId(value=payload.manager_id),
        scores=payload.scores,
        narrative=payload.narrative,
        strengths=payload.strengths,
        growth_areas=payload.growth_areas,
        development_plan=payload.development_plan,
    )


@router.get(
    "/{evaluation_id}",
    response_model=EvaluationSummary,
    responses=ERROR_RESPONSES,
    summary="Get a manager evaluation",
)
async def get_evaluation(
    evaluation_id: str,
    service: ManagerEvaluationService = Depends(get_manager_evaluation_service),
) -> EvaluationSummary:
    return await service.get_evaluation(ManagerEvaluationId(value=evaluation_id))
