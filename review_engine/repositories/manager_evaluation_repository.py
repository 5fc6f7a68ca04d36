"""
Manager Evaluation Repository - Performance Review Scoring Engine
review_engine/repositories/manager_evaluation_repository.py
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from review_engine.models.identifiers import ManagerEvaluationId, ReviewCycleId, UserId
from review_engine.models.manager_evaluation import ManagerEvaluation
from review_engine.repositories.base import InMemoryStore


class ManagerEvaluationRepository(ABC):
    """Persistence for manager evaluations, at most one per (employee, cycle)."""

    @abstractmethod
    async def find_by_id(self, evaluation_id: ManagerEvaluationId) -> Optional[ManagerEvaluation]:
        ...

    @abstractmethod
    async def find_by_employee_and_cycle(
        self, employee_id: UserId, cycle_id: ReviewCycleId
    ) -> Optional[ManagerEvaluation]:
        ...

    @abstractmethod
    async def find_by_manager_and_cycle(
        self, manager_id: UserId, cycle_id: ReviewCycleId
    ) -> List[ManagerEvaluation]:
        ...

    @abstractmethod
    async def find_by_cycle(self, cycle_id: ReviewCycleId) -> List[ManagerEvaluation]:
        ...

    @abstractmethod
    async def save(self, evaluation: ManagerEvaluation) -> ManagerEvaluation:
        ...

    @abstractmethod
    async def delete(self, evaluation_id: ManagerEvaluationId) -> bool:
        ...


class InMemoryManagerEvaluationRepository(ManagerEvaluationRepository):
    def __init__(self, items: Iterable[ManagerEvaluation] = ()):
        self._store: InMemoryStore[ManagerEvaluation] = InMemoryStore(items)

    async def find_by_id(self, evaluation_id: ManagerEvaluationId) -> Optional[ManagerEvaluation]:
        return self._store.get(evaluation_id.value)

    async def find_by_employee_and_cycle(
        self, employee_id: UserId, cycle_id: ReviewCycleId
    ) -> Optional[ManagerEvaluation]:
        return self._store.first(
            lambda e: e.employee_id == employee_id and e.cycle_id == cycle_id
        )

    async def find_by_manager_and_cycle(
        self, manager_id: UserId, cycle_id: ReviewCycleId
    ) -> List[ManagerEvaluation]:
        return self._store.filter(
            lambda e: e.manager_id == manager_id and e.cycle_id == cycle_id
        )

    async def find_by_cycle(self, cycle_id: ReviewCycleId) -> List[ManagerEvaluation]:
        return self._store.filter(lambda e: e.cycle_id == cycle_id)

    async def save(self, evaluation: ManagerEvaluation) -> ManagerEvaluation:
        return self._store.put(evaluation)

    async def delete(self, evaluation_id: ManagerEvaluationId) -> bool:
        return self._store.remove(evaluation_id.value)
