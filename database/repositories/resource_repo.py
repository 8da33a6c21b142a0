"""CRUD operations for practice resources."""

from typing import Any, Dict, List, Optional

from models import Resource
from database.connection import MemoryStore
from database.exceptions import NotFoundError

TABLE = "resources"


class ResourceRepository:
    """Async CRUD for facilities and equipment. The only entity that can be deleted."""

    def __init__(self, store: MemoryStore):
        self._store = store

    async def get_resource(self, resource_id: int) -> Optional[Resource]:
        return self._store.get(TABLE, resource_id)

    async def get_resources(self, user_id: int) -> List[Resource]:
        """All resources for a user, by name (case-insensitive)."""
        resources = [r for r in self._store.rows(TABLE) if r.user_id == user_id]
        return sorted(resources, key=lambda r: (r.name.lower(), r.id))

    async def get_resources_by_ids(self, user_id: int, resource_ids: List[int]) -> List[Resource]:
        """Resources owned by `user_id` among `resource_ids`; unknown ids are skipped."""
        wanted = set(resource_ids)
        return [r for r in await self.get_resources(user_id) if r.id in wanted]

    async def create_resource(self, user_id: int, data: Dict[str, Any]) -> Resource:
        fields = {k: v for k, v in data.items() if k not in {"id", "created_at"}}
        fields["user_id"] = user_id
        return self._store.insert(TABLE, Resource(**fields))

    async def update_resource(self, resource_id: int, **fields) -> Resource:
        current = self._store.get(TABLE, resource_id)
        if current is None:
            raise NotFoundError("Resource", resource_id)

        updates = {k: v for k, v in fields.items() if k not in {"id", "user_id", "created_at"}}
        if not updates:
            return current
        return self._store.replace(TABLE, current.merged(**updates))

    async def delete_resource(self, resource_id: int) -> bool:
        """Remove a resource. Returns False if it did not exist (not an error)."""
        return self._store.remove(TABLE, resource_id)
