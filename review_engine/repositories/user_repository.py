"""
User Repository - Performance Review Scoring Engine
review_engine/repositories/user_repository.py

Users are owned by the identity system; the review engine only reads
them. save() exists to seed adapters.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from review_engine.models.identifiers import UserId
from review_engine.models.user import User
from review_engine.repositories.base import InMemoryStore


class UserRepository(ABC):
    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        ...

    @abstractmethod
    async def find_by_manager(self, manager_id: UserId) -> List[User]:
        """Direct reports of a manager."""
        ...

    @abstractmethod
    async def save(self, user: User) -> User:
        ...


class InMemoryUserRepository(UserRepository):
    def __init__(self, items: Iterable[User] = ()):
        self._store: InMemoryStore[User] = InMemoryStore(items)

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        return self._store.get(user_id.value)

    async def find_by_manager(self, manager_id: UserId) -> List[User]:
        return self._store.filter(lambda u: u.is_managed_by(manager_id))

    async def save(self, user: User) -> User:
        return self._store.put(user)
