"""
Core Package - Performance Review Scoring Engine
review_engine/core/__init__.py

Core infrastructure: exceptions and ports. The composition root lives in
review_engine.core.dependencies and is imported explicitly.
"""

from review_engine.core.exceptions import (
    AuthorizationException,
    NotFoundException,
    ReviewEngineException,
    StateConflictException,
    ValidationException,
)
from review_engine.core.ports import Clock, IdGenerator, SystemClock, UUIDGenerator

__all__ = [
    # Exceptions
    "AuthorizationException",
    "NotFoundException",
    "ReviewEngineException",
    "StateConflictException",
    "ValidationException",
    # Ports
    "Clock",
    "IdGenerator",
    "SystemClock",
    "UUIDGenerator",
]
