from typing import Optional

from database.connection import MemoryStore
from database.repositories import (
    ActivityRepository,
    PracticePlanRepository,
    ResourceRepository,
    RoundRepository,
    UserRepository,
)


class DatabaseManager:
    """Single entry point to all repositories.

    Constructed once at application start and handed to request handlers
    through a FastAPI dependency. Tests build a fresh one per test.

    Usage:
        db = DatabaseManager()
        user = await db.users.get_user(1)
        rounds = await db.rounds.get_recent_rounds(user.id, 10)
    """

    def __init__(self, store: Optional[MemoryStore] = None):
        self.store = store or MemoryStore()
        self.users = UserRepository(self.store)
        self.rounds = RoundRepository(self.store)
        self.activities = ActivityRepository(self.store)
        self.resources = ResourceRepository(self.store)
        self.practice_plans = PracticePlanRepository(self.store)

    def health_check(self) -> dict:
        """Row counts per table."""
        return {
            name: self.store.count(name)
            for name in ("users", "rounds", "activities", "resources", "practice_plans")
        }
