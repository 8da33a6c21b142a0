"""CRUD operations for practice plans."""

from typing import List, Optional

from models import PracticePlan
from database.connection import MemoryStore

TABLE = "practice_plans"


class PracticePlanRepository:
    """Async CRUD for practice plans.

    At most one plan per user is active. `activate_plan` deactivates every
    existing plan for the user before storing the new one.
    """

    def __init__(self, store: MemoryStore):
        self._store = store

    async def get_practice_plan(self, plan_id: int) -> Optional[PracticePlan]:
        return self._store.get(TABLE, plan_id)

    async def get_practice_plans(self, user_id: int) -> List[PracticePlan]:
        """All plans for a user, newest first."""
        plans = [p for p in self._store.rows(TABLE) if p.user_id == user_id]
        return sorted(plans, key=lambda p: p.id, reverse=True)

    async def get_active_plan(self, user_id: int) -> Optional[PracticePlan]:
        for plan in await self.get_practice_plans(user_id):
            if plan.active:
                return plan
        return None

    async def create_practice_plan(self, plan: PracticePlan) -> PracticePlan:
        return self._store.insert(TABLE, plan)

    async def deactivate_all(self, user_id: int) -> int:
        """Mark every plan for the user inactive. Returns how many were changed."""
        changed = 0
        for plan in await self.get_practice_plans(user_id):
            if plan.active:
                self._store.replace(TABLE, plan.merged(active=False))
                changed += 1
        return changed

    async def activate_plan(self, plan: PracticePlan) -> PracticePlan:
        """Store `plan` as the user's only active plan."""
        await self.deactivate_all(plan.user_id)
        return await self.create_practice_plan(plan.merged(active=True))
