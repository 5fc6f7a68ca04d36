"""
Error Handlers - Performance Review Scoring Engine
review_engine/routers/errors.py

Maps review engine exceptions to HTTP responses:

    NotFoundException                    -> 404
    ValidationException, ValidationError -> 400
    StateConflictException               -> 409
    AuthorizationException               -> 403

Every error body is an ErrorResponse.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from review_engine.core.exceptions import (
    AuthorizationException,
    NotFoundException,
    ReviewEngineException,
    StateConflictException,
    ValidationException,
)
from review_engine.models.responses import ErrorResponse

logger = logging.getLogger(__name__)

STATUS_BY_EXCEPTION = [
    (NotFoundException, status.HTTP_404_NOT_FOUND),
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (StateConflictException, status.HTTP_409_CONFLICT),
    (AuthorizationException, status.HTTP_403_FORBIDDEN),
]


def _error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Optional[dict] = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        details=details,
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def status_for(exc: ReviewEngineException) -> int:
    for exc_type, status_code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def review_engine_exception_handler(request: Request, exc: ReviewEngineException):
    status_code = status_for(exc)
    details = None
    if isinstance(exc, NotFoundException):
        details = {"entity_type": exc.entity_type, "entity_id": exc.entity_id}
    logger.info(f"{request.method} {request.url.path} -> {status_code} {exc.error_code}")
    return _error_response(status_code, exc.error_code, exc.message, details)


async def pydantic_validation_handler(request: Request, exc: ValidationError):
    errors = exc.errors()
    err = errors[0] if errors else {}
    field = ".".join(str(l) for l in err.get("loc", ()))
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        err.get("msg", "Invalid value"),
        {"field": field, "type": err.get("type", "")} if field else None,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return _error_response(
            status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", "Request validation failed"
        )

    err = errors[0]
    error_type = err.get("type", "")
    if "json_invalid" in error_type:
        return _error_response(
            status.HTTP_400_BAD_REQUEST, "INVALID_REQUEST", "Malformed JSON request body"
        )

    field = ".".join(str(l) for l in err.get("loc", ()) if l != "body")
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        err.get("msg", f"Invalid value for field '{field}'"),
        {"field": field, "type": error_type} if field else None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReviewEngineException, review_engine_exception_handler)
    app.add_exception_handler(ValidationError, pydantic_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation error"},
    403: {"model": ErrorResponse, "description": "Not the employee's direct manager"},
    404: {"model": ErrorResponse, "description": "Entity not found"},
    409: {"model": ErrorResponse, "description": "Operation not allowed in the current state"},
}
