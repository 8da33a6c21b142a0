from .user_repo import UserRepository
from .round_repo import RoundRepository
from .activity_repo import ActivityRepository
from .resource_repo import ResourceRepository
from .practice_plan_repo import PracticePlanRepository

__all__ = [
    "UserRepository",
    "RoundRepository",
    "ActivityRepository",
    "ResourceRepository",
    "PracticePlanRepository",
]
