"""
Final Score Repository - Performance Review Scoring Engine
review_engine/repositories/final_score_repository.py
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from review_engine.models.enumerations import BonusTier
from review_engine.models.final_score import FinalScore
from review_engine.models.identifiers import FinalScoreId, ReviewCycleId, UserId
from review_engine.repositories.base import InMemoryStore


class FinalScoreRepository(ABC):
    """Persistence for final scores, at most one per (user, cycle)."""

    @abstractmethod
    async def find_by_id(self, final_score_id: FinalScoreId) -> Optional[FinalScore]:
        ...

    @abstractmethod
    async def find_by_user_and_cycle(
        self, user_id: UserId, cycle_id: ReviewCycleId
    ) -> Optional[FinalScore]:
        ...

    @abstractmethod
    async def find_by_cycle(self, cycle_id: ReviewCycleId) -> List[FinalScore]:
        ...

    @abstractmethod
    async def find_by_bonus_tier(
        self, cycle_id: ReviewCycleId, bonus_tier: BonusTier
    ) -> List[FinalScore]:
        ...

    @abstractmethod
    async def save(self, final_score: FinalScore) -> FinalScore:
        ...

    @abstractmethod
    async def delete(self, final_score_id: FinalScoreId) -> bool:
        ...


class InMemoryFinalScoreRepository(FinalScoreRepository):
    def __init__(self, items: Iterable[FinalScore] = ()):
        self._store: InMemoryStore[FinalScore] = InMemoryStore(items)

    async def find_by_id(self, final_score_id: FinalScoreId) -> Optional[FinalScore]:
        return self._store.get(final_score_id.value)

    async def find_by_user_and_cycle(
        self, user_id: UserId, cycle_id: ReviewCycleId
    ) -> Optional[FinalScore]:
        return self._store.first(lambda s: s.user_id == user_id and s.cycle_id == cycle_id)

    async def find_by_cycle(self, cycle_id: ReviewCycleId) -> List[FinalScore]:
        return self._store.filter(lambda s: s.cycle_id == cycle_id)

    async def find_by_bonus_tier(
        self, cycle_id: ReviewCycleId, bonus_tier: BonusTier
    ) -> List[FinalScore]:
        return self._store.filter(
            lambda s: s.cycle_id == cycle_id and s.bonus_tier == bonus_tier
        )

    async def save(self, final_score: FinalScore) -> FinalScore:
        return self._store.put(final_score)

    async def delete(self, final_score_id: FinalScoreId) -> bool:
        return self._store.remove(final_score_id.value)
