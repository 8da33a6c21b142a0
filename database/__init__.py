from database.connection import MemoryStore
from database.db_manager import DatabaseManager
from database.repositories import (
    ActivityRepository,
    PracticePlanRepository,
    ResourceRepository,
    RoundRepository,
    UserRepository,
)
from database.exceptions import DatabaseError, NotFoundError, DuplicateError
from database.seed import DEMO_USER_ID, seed_demo_data

__all__ = [
    "MemoryStore",
    "DatabaseManager",
    "UserRepository",
    "RoundRepository",
    "ActivityRepository",
    "ResourceRepository",
    "PracticePlanRepository",
    "DatabaseError",
    "NotFoundError",
    "DuplicateError",
    "DEMO_USER_ID",
    "seed_demo_data",
]
