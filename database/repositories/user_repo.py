"""CRUD operations for users."""

from decimal import Decimal
from typing import Optional

from models import User
from database.connection import MemoryStore
from database.exceptions import DuplicateError, NotFoundError

TABLE = "users"

GHIN_FIELDS = {
    "ghin_number",
    "ghin_connected",
    "ghin_access_token",
    "ghin_refresh_token",
    "last_ghin_sync",
}


class UserRepository:
    """Async CRUD for users."""

    def __init__(self, store: MemoryStore):
        self._store = store

    # ================================================================
    # Read
    # ================================================================

    async def get_user(self, user_id: int) -> Optional[User]:
        return self._store.get(TABLE, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self._store.rows(TABLE):
            if user.username == username:
                return user
        return None

    # ================================================================
    # Create
    # ================================================================

    async def create_user(self, user: User) -> User:
        """Create a new user. Returns the stored User with its assigned id."""
        if await self.get_user_by_username(user.username):
            raise DuplicateError(f"Username already in use: {user.username}")
        return self._store.insert(TABLE, user)

    # ================================================================
    # Update
    # ================================================================

    async def update_user(self, user_id: int, **fields) -> User:
        """Shallow-merge profile fields (name, handicap)."""
        allowed = {"name", "handicap"}
        updates = {k: v for k, v in fields.items() if k in allowed}
        return self._merge(user_id, updates)

    async def update_handicap(self, user_id: int, handicap: Decimal) -> User:
        return self._merge(user_id, {"handicap": handicap})

    async def update_ghin_connection(self, user_id: int, **fields) -> User:
        """Update any of the GHIN link fields (number, flag, tokens, last sync)."""
        updates = {k: v for k, v in fields.items() if k in GHIN_FIELDS}
        return self._merge(user_id, updates)

    async def clear_ghin_connection(self, user_id: int) -> User:
        """Unlink the GHIN account and drop stored tokens."""
        return self._merge(user_id, {
            "ghin_number": None,
            "ghin_connected": False,
            "ghin_access_token": None,
            "ghin_refresh_token": None,
            "last_ghin_sync": None,
        })

    def _merge(self, user_id: int, updates: dict) -> User:
        current = self._store.get(TABLE, user_id)
        if current is None:
            raise NotFoundError("User", user_id)
        if not updates:
            return current
        return self._store.replace(TABLE, current.merged(**updates))
