"""
Custom Exceptions - Performance Review Scoring Engine
review_engine/core/exceptions.py

Typed exceptions raised at the point a review rule is violated.
The HTTP layer maps each family to a status code:

    NotFoundException       -> 404
    ValidationException     -> 400
    StateConflictException  -> 409
    AuthorizationException  -> 403
"""


class ReviewEngineException(Exception):
    """Base exception for review engine rule violations."""

    error_code = "REVIEW_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# =============================================================================
# NOT FOUND
# =============================================================================


class NotFoundException(ReviewEngineException):
    """Entity not found."""

    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with ID {entity_id} not found")


# =============================================================================
# VALIDATION
# =============================================================================


class ValidationException(ReviewEngineException):
    """Malformed or incomplete input."""

    error_code = "VALIDATION_ERROR"


class JustificationTooShortException(ValidationException):
    def __init__(self, min_length: int):
        self.min_length = min_length
        super().__init__(f"Justification must be at least {min_length} characters")


class RejectionReasonRequiredException(ValidationException):
    def __init__(self):
        super().__init__("Rejection reason is required when rejecting a request")


class NoPeerFeedbackException(ValidationException):
    def __init__(self):
        super().__init__("No peer feedback to aggregate")


# =============================================================================
# STATE CONFLICT
# =============================================================================


class StateConflictException(ReviewEngineException):
    """Operation not allowed in the entity's current state."""

    error_code = "STATE_CONFLICT"


class AdjustmentAlreadyReviewedException(StateConflictException):
    def __init__(self, request_id: str, status: str):
        self.request_id = request_id
        self.status = status
        super().__init__(
            f"Score adjustment request {request_id} has already been reviewed ({status})"
        )


class FinalScoreLockedException(StateConflictException):
    error_code = "FINAL_SCORE_LOCKED"


class FinalScoreNotLockedException(StateConflictException):
    def __init__(self):
        super().__init__("Cannot request score adjustment until final scores are locked")


class ManagerEvaluationAlreadySubmittedException(StateConflictException):
    def __init__(self, message: str = "Manager evaluation has already been submitted"):
        super().__init__(message)


class ManagerEvaluationNotSubmittedException(StateConflictException):
    def __init__(self, message: str = "Manager evaluation has not been submitted"):
        super().__init__(message)


class DeadlinePassedException(StateConflictException):
    error_code = "DEADLINE_PASSED"

    def __init__(self, phase: str):
        self.phase = phase
        super().__init__(f"The {phase} deadline has passed")


class CalibrationSessionStateException(StateConflictException):
    pass


# =============================================================================
# AUTHORIZATION
# =============================================================================


class AuthorizationException(ReviewEngineException):
    """Actor is not allowed to act on the target entity."""

    error_code = "FORBIDDEN"


class NotDirectReportException(AuthorizationException):
    def __init__(self, manager_id: str, employee_id: str):
        self.manager_id = manager_id
        self.employee_id = employee_id
        super().__init__(
            f"User {manager_id} is not the direct manager of employee {employee_id}"
        )
