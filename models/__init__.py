from .base import BaseGolfModel
from .activity import ACTIVITY_SUB_TYPES, Activity, ActivityType
from .practice_plan import (
    PlanSource,
    PracticePlan,
    PreferredTime,
    ScheduleActivity,
    ScheduleDay,
)
from .resource import Resource, ResourceType
from .round import Round, RoundSource
from .user import GhinCredentials, User

__all__ = [
    "BaseGolfModel",
    "ACTIVITY_SUB_TYPES",
    "Activity",
    "ActivityType",
    "GhinCredentials",
    "PlanSource",
    "PracticePlan",
    "PreferredTime",
    "Resource",
    "ResourceType",
    "Round",
    "RoundSource",
    "ScheduleActivity",
    "ScheduleDay",
    "User",
]
