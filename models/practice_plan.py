from datetime import datetime
from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from .base import BaseGolfModel, to_one_place


class PreferredTime(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    FLEXIBLE = "flexible"


class PlanSource(str, Enum):
    """Whether a plan came from the model or the built-in fallback."""
    AI = "ai"
    FALLBACK = "fallback"


class ScheduleActivity(BaseModel):
    """One drill inside a practice day."""
    name: str
    duration: Optional[str] = None       # free text, e.g. "45 minutes"
    description: Optional[str] = None
    location: Optional[str] = None
    focus: Optional[str] = None


class ScheduleDay(BaseModel):
    """One practice day in a weekly schedule."""
    day: str
    title: Optional[str] = None
    duration: Optional[str] = None
    activities: List[ScheduleActivity] = Field(default_factory=list)


class PracticePlan(BaseGolfModel):
    """A weekly practice plan. At most one plan per user is active."""
    id: Optional[int] = None
    user_id: int
    name: str = Field(..., min_length=1)
    days_per_week: int = Field(..., ge=1, le=7)
    hours_per_session: Decimal = Field(..., ge=Decimal("0.5"), le=8)
    preferred_time: PreferredTime = PreferredTime.FLEXIBLE
    focus_areas: List[str] = Field(default_factory=list)
    available_resources: List[int] = Field(default_factory=list)  # resource ids
    weekly_schedule: List[ScheduleDay] = Field(default_factory=list)
    ai_recommendations: Optional[str] = None
    active: bool = True
    generated_by: PlanSource = PlanSource.AI
    created_at: Optional[datetime] = None

    @field_validator('hours_per_session', mode='before')
    @classmethod
    def round_hours(cls, v):
        return to_one_place(v)
