"""
Score Adjustment Request Repository - Performance Review Scoring Engine
review_engine/repositories/score_adjustment_repository.py
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from review_engine.models.enumerations import AdjustmentStatus
from review_engine.models.identifiers import ReviewCycleId, ScoreAdjustmentRequestId, UserId
from review_engine.models.score_adjustment import ScoreAdjustmentRequest
from review_engine.repositories.base import InMemoryStore


class ScoreAdjustmentRequestRepository(ABC):
    @abstractmethod
    async def find_by_id(
        self, request_id: ScoreAdjustmentRequestId
    ) -> Optional[ScoreAdjustmentRequest]:
        ...

    @abstractmethod
    async def find_pending(
        self, cycle_id: Optional[ReviewCycleId] = None
    ) -> List[ScoreAdjustmentRequest]:
        """Pending requests, optionally restricted to one cycle."""
        ...

    @abstractmethod
    async def find_by_employee(
        self, employee_id: UserId, cycle_id: Optional[ReviewCycleId] = None
    ) -> List[ScoreAdjustmentRequest]:
        ...

    @abstractmethod
    async def save(self, request: ScoreAdjustmentRequest) -> ScoreAdjustmentRequest:
        ...

    @abstractmethod
    async def delete(self, request_id: ScoreAdjustmentRequestId) -> bool:
        ...


class InMemoryScoreAdjustmentRequestRepository(ScoreAdjustmentRequestRepository):
    def __init__(self, items: Iterable[ScoreAdjustmentRequest] = ()):
        self._store: InMemoryStore[ScoreAdjustmentRequest] = InMemoryStore(items)

    async def find_by_id(
        self, request_id: ScoreAdjustmentRequestId
    ) -> Optional[ScoreAdjustmentRequest]:
        return self._store.get(request_id.value)

    async def find_pending(
        self, cycle_id: Optional[ReviewCycleId] = None
    ) -> List[ScoreAdjustmentRequest]:
        return self._store.filter(
            lambda r: r.status == AdjustmentStatus.PENDING
            and (cycle_id is None or r.cycle_id == cycle_id)
        )

    async def find_by_employee(
        self, employee_id: UserId, cycle_id: Optional[ReviewCycleId] = None
    ) -> List[ScoreAdjustmentRequest]:
        return self._store.filter(
            lambda r: r.employee_id == employee_id
            and (cycle_id is None or r.cycle_id == cycle_id)
        )

    async def save(self, request: ScoreAdjustmentRequest) -> ScoreAdjustmentRequest:
        return self._store.put(request)

    async def delete(self, request_id: ScoreAdjustmentRequestId) -> bool:
        return self._store.remove(request_id.value)
