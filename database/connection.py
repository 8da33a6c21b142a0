from datetime import datetime
from typing import Dict, Iterator, Optional, TypeVar

from models.base import BaseGolfModel

T = TypeVar("T", bound=BaseGolfModel)


class MemoryStore:
    """Process-local keyed storage shared by the repositories.

    One table (dict of id -> model) per entity type, each with its own
    auto-incrementing id. Nothing survives the process.
    """

    def __init__(self):
        self._tables: Dict[str, Dict[int, BaseGolfModel]] = {}
        self._counters: Dict[str, int] = {}

    def table(self, name: str) -> Dict[int, BaseGolfModel]:
        return self._tables.setdefault(name, {})

    def next_id(self, name: str) -> int:
        self._counters[name] = self._counters.get(name, 0) + 1
        return self._counters[name]

    # ================================================================
    # Row helpers
    # ================================================================

    def get(self, name: str, entity_id: int) -> Optional[T]:
        row = self.table(name).get(entity_id)
        return row.model_copy(deep=True) if row is not None else None

    def rows(self, name: str) -> Iterator[T]:
        for row in self.table(name).values():
            yield row.model_copy(deep=True)

    def insert(self, name: str, model: T) -> T:
        """Assign an id and creation time, then store the model."""
        stored = model.merged(
            id=self.next_id(name),
            created_at=model.created_at or datetime.now(),
        )
        self.table(name)[stored.id] = stored
        return stored.model_copy(deep=True)

    def replace(self, name: str, model: T) -> T:
        self.table(name)[model.id] = model
        return model.model_copy(deep=True)

    def remove(self, name: str, entity_id: int) -> bool:
        return self.table(name).pop(entity_id, None) is not None

    def count(self, name: str) -> int:
        return len(self.table(name))
