"""
Ports - Performance Review Scoring Engine
review_engine/core/ports.py

Identity and time sources injected into the services, so tests can
supply deterministic ids and timestamps.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from uuid import uuid4


class IdGenerator(ABC):
    """Produces fresh entity identifiers."""

    @abstractmethod
    def new_id(self) -> str:
        ...


class UUIDGenerator(IdGenerator):
    def new_id(self) -> str:
        return str(uuid4())


class Clock(ABC):
    """Source of tz-aware UTC timestamps."""

    @abstractmethod
    def now(self) -> datetime:
        ...


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)
