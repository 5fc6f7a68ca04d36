"""
Review Cycle Repository - Performance Review Scoring Engine
review_engine/repositories/review_cycle_repository.py
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from review_engine.models.identifiers import ReviewCycleId
from review_engine.models.review_cycle import ReviewCycle
from review_engine.repositories.base import InMemoryStore


class ReviewCycleRepository(ABC):
    """Read access to review cycles."""

    @abstractmethod
    async def find_by_id(self, cycle_id: ReviewCycleId) -> Optional[ReviewCycle]:
        ...

    @abstractmethod
    async def save(self, cycle: ReviewCycle) -> ReviewCycle:
        ...


class InMemoryReviewCycleRepository(ReviewCycleRepository):
    def __init__(self, items: Iterable[ReviewCycle] = ()):
        self._store: InMemoryStore[ReviewCycle] = InMemoryStore(items)

    async def find_by_id(self, cycle_id: ReviewCycleId) -> Optional[ReviewCycle]:
        return self._store.get(cycle_id.value)

    async def save(self, cycle: ReviewCycle) -> ReviewCycle:
        return self._store.put(cycle)
