"""
Calibration Router - Performance Review Scoring Engine
review_engine/routers/calibration.py

Calibration sessions and the adjustments applied during them.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import AwareDatetime, BaseModel, Field

from review_engine.config import settings
from review_engine.core.dependencies import get_calibration_service
from review_engine.core.exceptions import NotFoundException
from review_engine.models.identifiers import (
    CalibrationSessionId,
    ManagerEvaluationId,
    ReviewCycleId,
    UserId,
)
from review_engine.models.responses import (
    CalibrationAdjustmentResult,
    CalibrationDashboard,
    CalibrationSessionCreated,
    CalibrationSessionView,
)
from review_engine.models.scores import PillarScores
from review_engine.routers.errors import ERROR_RESPONSES
from review_engine.services.calibration_service import CalibrationService

router = APIRouter(
    prefix=f"{settings.API_V1_PREFIX}/calibration-sessions",
    tags=["Calibration"],
)


#  Schemas


class CreateSessionRequest(BaseModel):
    cycle_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    facilitator_id: str = Field(..., min_length=1)
    scheduled_at: AwareDatetime
    participant_ids: List[str] = Field(default_factory=list)
    department: Optional[str] = None


class RecordNoteRequest(BaseModel):
    notes: str


class LockSessionRequest(BaseModel):
    locked_by: str = Field(..., min_length=1)


class ApplyAdjustmentRequest(BaseModel):
    evaluation_id: str = Field(..., min_length=1)
    adjusted_scores: PillarScores
    justification: str


#  Routes


@router.post(
    "",
    response_model=CalibrationSessionCreated,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Schedule a calibration session",
)
async def create_session(
    payload: CreateSessionRequest,
    service: CalibrationService = Depends(get_calibration_service),
) -> CalibrationSessionCreated:
    return await service.create_session(
        cycle_id=ReviewCycleId(value=payload.cycle_id),
        name=payload.name,
        facilitator_id=UserId(value=payload.facilitator_id),
        scheduled_at=payload.scheduled_at,
        participant_ids=[UserId(value=p) for p in payload.participant_ids],
        department=payload.department,
    )


@router.get(
    "",
    response_model=List[CalibrationSessionView],
    responses=ERROR_RESPONSES,
    summary="List calibration sessions of a cycle",
)
async def list_sessions(
    cycle_id: str = Query(..., min_length=1),
    department: Optional[str] = Query(default=None),
    service: CalibrationService = Depends(get_calibration_service),
) -> List[CalibrationSessionView]:
    return await service.list_sessions(ReviewCycleId(value=cycle_id), department)


@router.get(
    "/dashboard",
    response_model=CalibrationDashboard,
    responses=ERROR_RESPONSES,
    summary="Calibration dashboard of a cycle",
    description="Bonus-tier counts overall and per department, with each evaluation's calibration status.",
)
async def get_dashboard(
    cycle_id: str = Query(..., min_length=1),
    department: Optional[str] = Query(default=None),
    service: CalibrationService = Depends(get_calibration_service),
) -> CalibrationDashboard:
    return await service.get_dashboard(ReviewCycleId(value=cycle_id), department)


@router.get(
    "/{session_id}",
    response_model=CalibrationSessionView,
    responses=ERROR_RESPONSES,
    summary="Get a calibration session",
)
async def get_session(
    session_id: str,
    service: CalibrationService = Depends(get_calibration_service),
) -> CalibrationSessionView:
    view = await service.get_session(CalibrationSessionId(value=session_id))
    if view is None:
        raise NotFoundException("CalibrationSession", session_id)
    return view


@router.post(
    "/{session_id}/start",
    response_model=CalibrationSessionView,
    responses=ERROR_RESPONSES,
    summary="Start a scheduled session",
)
async def start_session(
    session_id: str,
    service: CalibrationService = Depends(get_calibration_service),
) -> CalibrationSessionView:
    return await service.start_session(CalibrationSessionId(value=session_id))


@router.put(
    "/{session_id}/notes",
    response_model=CalibrationSessionView,
    responses=ERROR_RESPONSES,
    summary="Record session notes",
    description="Replaces the session notes. Allowed in every session status.",
)
async def record_note(
    session_id: str,
    payload: RecordNoteRequest,
    service: CalibrationService = Depends(get_calibration_service),
) -> CalibrationSessionView:
    return await service.record_note(CalibrationSessionId(value=session_id), payload.notes)


@router.post(
    "/{session_id}/lock",
    response_model=CalibrationSessionView,
    responses=ERROR_RESPONSES,
    summary="Lock a calibration session",
    description="Marks the session COMPLETED. Re-locking refreshes the completion time.",
)
async def lock_session(
    session_id: str,
    payload: LockSessionRequest,
    service: CalibrationService = Depends(get_calibration_service),
) -> CalibrationSessionView:
    return await service.lock_session(
        CalibrationSessionId(value=session_id), UserId(value=payload.locked_by)
    )


@router.post(
    "/{session_id}/adjustments",
    response_model=CalibrationAdjustmentResult,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Apply a calibration adjustment",
)
async def apply_adjustment(
    session_id: str,
    payload: ApplyAdjustmentRequest,
    service: CalibrationService = Depends(get_calibration_service),
) -> CalibrationAdjustmentResult:
    return await service.apply_calibration_adjustment(
        evaluation_id=ManagerEvaluationId(value=payload.evaluation_id),
        session_id=CalibrationSessionId(value=session_id),
        adjusted_scores=payload.adjusted_scores,
        justification=payload.justification,
    )
