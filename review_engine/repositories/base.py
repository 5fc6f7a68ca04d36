"""
Base Repository - Performance Review Scoring Engine
review_engine/repositories/base.py

Keyed in-memory storage shared by the in-memory repository adapters.
Entities are deep-copied on the way in and on the way out, so callers
never hold a reference to the stored instance and every change must go
through an explicit save.
"""

from typing import Callable, Dict, Generic, Iterable, List, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class InMemoryStore(Generic[T]):
    """Insertion-ordered entity store keyed by the entity's id value."""

    def __init__(self, items: Iterable[T] = ()):
        self._items: Dict[str, T] = {}
        for item in items:
            self.put(item)

    def get(self, key: str) -> Optional[T]:
        item = self._items.get(key)
        return item.model_copy(deep=True) if item is not None else None

    def put(self, entity: T) -> T:
        self._items[entity.id.value] = entity.model_copy(deep=True)
        return entity.model_copy(deep=True)

    def remove(self, key: str) -> bool:
        return self._items.pop(key, None) is not None

    def filter(self, predicate: Callable[[T], bool]) -> List[T]:
        return [item.model_copy(deep=True) for item in self._items.values() if predicate(item)]

    def first(self, predicate: Callable[[T], bool]) -> Optional[T]:
        for item in self._items.values():
            if predicate(item):
                return item.model_copy(deep=True)
        return None

    def __len__(self) -> int:
        return len(self._items)
