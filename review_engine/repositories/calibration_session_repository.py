"""
Calibration Session Repository - Performance Review Scoring Engine
review_engine/repositories/calibration_session_repository.py
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from review_engine.models.calibration_session import CalibrationSession
from review_engine.models.identifiers import CalibrationSessionId, ReviewCycleId
from review_engine.repositories.base import InMemoryStore


class CalibrationSessionRepository(ABC):
    @abstractmethod
    async def find_by_id(self, session_id: CalibrationSessionId) -> Optional[CalibrationSession]:
        ...

    @abstractmethod
    async def find_by_cycle(self, cycle_id: ReviewCycleId) -> List[CalibrationSession]:
        ...

    @abstractmethod
    async def find_by_department(self, department: str) -> List[CalibrationSession]:
        ...

    @abstractmethod
    async def save(self, session: CalibrationSession) -> CalibrationSession:
        ...

    @abstractmethod
    async def delete(self, session_id: CalibrationSessionId) -> bool:
        ...


class InMemoryCalibrationSessionRepository(CalibrationSessionRepository):
    def __init__(self, items: Iterable[CalibrationSession] = ()):
        self._store: InMemoryStore[CalibrationSession] = InMemoryStore(items)

    async def find_by_id(self, session_id: CalibrationSessionId) -> Optional[CalibrationSession]:
        return self._store.get(session_id.value)

    async def find_by_cycle(self, cycle_id: ReviewCycleId) -> List[CalibrationSession]:
        return self._store.filter(lambda s: s.cycle_id == cycle_id)

    async def find_by_department(self, department: str) -> List[CalibrationSession]:
        return self._store.filter(lambda s: s.department == department)

    async def save(self, session: CalibrationSession) -> CalibrationSession:
        return self._store.put(session)

    async def delete(self, session_id: CalibrationSessionId) -> bool:
        return self._store.remove(session_id.value)
