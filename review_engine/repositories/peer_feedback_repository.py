"""
Peer Feedback Repository - Performance Review Scoring Engine
review_engine/repositories/peer_feedback_repository.py

Peer feedback is owned by the peer feedback workflow. save() exists to
seed adapters.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List

from review_engine.models.identifiers import ReviewCycleId, UserId
from review_engine.models.peer_feedback import PeerFeedback
from review_engine.repositories.base import InMemoryStore


class PeerFeedbackRepository(ABC):
    @abstractmethod
    async def find_by_reviewee_and_cycle(
        self, reviewee_id: UserId, cycle_id: ReviewCycleId
    ) -> List[PeerFeedback]:
        ...

    @abstractmethod
    async def save(self, feedback: PeerFeedback) -> PeerFeedback:
        ...


class InMemoryPeerFeedbackRepository(PeerFeedbackRepository):
    def __init__(self, items: Iterable[PeerFeedback] = ()):
        self._store: InMemoryStore[PeerFeedback] = InMemoryStore(items)

    async def find_by_reviewee_and_cycle(
        self, reviewee_id: UserId, cycle_id: ReviewCycleId
    ) -> List[PeerFeedback]:
        return self._store.filter(
            lambda f: f.reviewee_id == reviewee_id and f.cycle_id == cycle_id
        )

    async def save(self, feedback: PeerFeedback) -> PeerFeedback:
        return self._store.put(feedback)
