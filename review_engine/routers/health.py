"""
Health Check Router - Performance Review Scoring Engine
review_engine/routers/health.py
"""
from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter
from pydantic import BaseModel

from review_engine.config import settings
from review_engine.core.dependencies import get_score_calculator

router = APIRouter(tags=["Health"])


#  Schemas


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    environment: str
    dependencies: Dict[str, str]


#  Routes


@router.get("/health", response_model=HealthResponse, summary="Service health")
async def health_check() -> HealthResponse:
    levels = get_score_calculator().get_all_weights()
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        environment=settings.APP_ENV,
        dependencies={
            "repositories": "in-memory",
            "weighting_profiles": f"{len(levels)} levels",
        },
    )
