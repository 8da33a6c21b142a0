"""CRUD operations for activities."""

from typing import Any, Dict, List, Optional

from models import Activity
from database.connection import MemoryStore
from database.exceptions import NotFoundError

TABLE = "activities"


class ActivityRepository:
    """Async CRUD for the activity log."""

    def __init__(self, store: MemoryStore):
        self._store = store

    async def get_activity(self, activity_id: int) -> Optional[Activity]:
        return self._store.get(TABLE, activity_id)

    async def get_activities(self, user_id: int) -> List[Activity]:
        """All activities for a user, most recent first."""
        activities = [a for a in self._store.rows(TABLE) if a.user_id == user_id]
        return sorted(activities, key=lambda a: (a.date, a.id), reverse=True)

    async def get_recent_activities(self, user_id: int, limit: int) -> List[Activity]:
        return (await self.get_activities(user_id))[:limit]

    async def create_activity(self, user_id: int, data: Dict[str, Any]) -> Activity:
        """Create an activity, deriving duration from start/end times when missing."""
        fields = {k: v for k, v in data.items() if k not in {"id", "created_at"}}
        fields["user_id"] = user_id
        return self._store.insert(TABLE, Activity(**Activity.derive_duration(fields)))

    async def update_activity(self, activity_id: int, **fields) -> Activity:
        current = self._store.get(TABLE, activity_id)
        if current is None:
            raise NotFoundError("Activity", activity_id)

        updates = {k: v for k, v in fields.items() if k not in {"id", "user_id", "created_at"}}
        if not updates:
            return current

        # New times without an explicit duration: recompute it
        if {"start_time", "end_time"} & updates.keys() and "duration" not in updates:
            derived = Activity.derive_duration({
                "start_time": updates.get("start_time", current.start_time),
                "end_time": updates.get("end_time", current.end_time),
                "duration": None,
            })
            if derived["duration"] is not None:
                updates["duration"] = derived["duration"]

        return self._store.replace(TABLE, current.merged(**updates))
