"""CRUD operations for rounds."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from analytics.handicap import calculate_differential
from models import Round
from database.connection import MemoryStore
from database.exceptions import NotFoundError

TABLE = "rounds"

# Fields that feed the differential; changing any of them recomputes it.
DIFFERENTIAL_INPUTS = {"total_score", "course_rating", "slope_rating"}


class RoundRepository:
    """Async CRUD for rounds. Owns the differential calculation."""

    def __init__(self, store: MemoryStore):
        self._store = store

    # ================================================================
    # Read
    # ================================================================

    async def get_round(self, round_id: int) -> Optional[Round]:
        return self._store.get(TABLE, round_id)

    async def get_rounds_for_user(self, user_id: int) -> List[Round]:
        """All rounds for a user, most recent first."""
        rounds = [r for r in self._store.rows(TABLE) if r.user_id == user_id]
        return sorted(rounds, key=lambda r: (r.date, r.id), reverse=True)

    async def get_recent_rounds(self, user_id: int, limit: int) -> List[Round]:
        return (await self.get_rounds_for_user(user_id))[:limit]

    async def find_duplicate(
        self, user_id: int, date: datetime, course_name: str, total_score: int,
    ) -> Optional[Round]:
        """Find a round with the same day, course and score (used for GHIN imports)."""
        for r in self._store.rows(TABLE):
            if (r.user_id == user_id
                    and r.date.date() == date.date()
                    and r.course_name.lower() == course_name.lower()
                    and r.total_score == total_score):
                return r
        return None

    # ================================================================
    # Create
    # ================================================================

    async def create_round(self, user_id: int, data: Dict[str, Any]) -> Round:
        """Create a round. Any client-supplied differential is ignored."""
        fields = {k: v for k, v in data.items() if k not in {"id", "differential", "created_at"}}
        fields["user_id"] = user_id
        round_ = Round(**fields)
        round_ = round_.merged(differential=calculate_differential(
            round_.total_score, round_.course_rating, round_.slope_rating,
        ))
        return self._store.insert(TABLE, round_)

    # ================================================================
    # Update
    # ================================================================

    async def update_round(self, round_id: int, **fields) -> Round:
        """Shallow-merge fields; recompute the differential when its inputs change."""
        current = self._store.get(TABLE, round_id)
        if current is None:
            raise NotFoundError("Round", round_id)

        updates = {k: v for k, v in fields.items() if k not in {"id", "user_id", "differential", "created_at"}}
        if not updates:
            return current

        updated = current.merged(**updates)
        if DIFFERENTIAL_INPUTS & updates.keys():
            updated = updated.merged(differential=calculate_differential(
                updated.total_score, updated.course_rating, updated.slope_rating,
            ))
        return self._store.replace(TABLE, updated)
