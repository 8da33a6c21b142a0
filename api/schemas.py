"""API request models and response models for list views and aggregated data."""

from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from models import ActivityType, PreferredTime, ResourceType, RoundSource


# ================================================================
# Requests
# ================================================================

class UpdateUserRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    handicap: Optional[Decimal] = Field(None, ge=-10, le=54)


class CreateRoundRequest(BaseModel):
    """Fields a client may set on a new round. Differential is computed server-side."""
    date: datetime
    course_name: str = Field(..., min_length=1)
    total_score: int = Field(..., ge=18, le=200)
    course_rating: Optional[Decimal] = Field(None, ge=55, le=85)
    slope_rating: Optional[int] = Field(None, ge=55, le=155)
    fairways_hit: Optional[int] = Field(None, ge=0, le=14)
    greens_in_regulation: Optional[int] = Field(None, ge=0, le=18)
    total_putts: Optional[int] = Field(None, ge=0, le=100)
    penalties: Optional[int] = Field(None, ge=0, le=50)
    screenshot_url: Optional[str] = None
    source: RoundSource = RoundSource.MANUAL


class UpdateRoundRequest(BaseModel):
    date: Optional[datetime] = None
    course_name: Optional[str] = Field(None, min_length=1)
    total_score: Optional[int] = Field(None, ge=18, le=200)
    course_rating: Optional[Decimal] = Field(None, ge=55, le=85)
    slope_rating: Optional[int] = Field(None, ge=55, le=155)
    fairways_hit: Optional[int] = Field(None, ge=0, le=14)
    greens_in_regulation: Optional[int] = Field(None, ge=0, le=18)
    total_putts: Optional[int] = Field(None, ge=0, le=100)
    penalties: Optional[int] = Field(None, ge=0, le=50)
    screenshot_url: Optional[str] = None


class CreateActivityRequest(BaseModel):
    date: datetime
    activity_type: ActivityType
    sub_type: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=0, le=24 * 60)
    comment: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class UpdateActivityRequest(BaseModel):
    date: Optional[datetime] = None
    activity_type: Optional[ActivityType] = None
    sub_type: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=0, le=24 * 60)
    comment: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class CreateResourceRequest(BaseModel):
    type: ResourceType
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    location: Optional[str] = None
    hours: Optional[str] = None
    cost: Optional[str] = None
    available: bool = True


class UpdateResourceRequest(BaseModel):
    type: Optional[ResourceType] = None
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    location: Optional[str] = None
    hours: Optional[str] = None
    cost: Optional[str] = None
    available: Optional[bool] = None


class GeneratePlanRequest(BaseModel):
    name: Optional[str] = None
    days_per_week: int = Field(..., ge=1, le=7)
    hours_per_session: Decimal = Field(..., ge=Decimal("0.5"), le=8)
    preferred_time: PreferredTime = PreferredTime.FLEXIBLE
    practice_goal: Optional[str] = None
    available_resources: List[int] = Field(default_factory=list)


# ================================================================
# Responses
# ================================================================

class HealthResponse(BaseModel):
    status: str
    users: int
    tables: Dict[str, int]


class RoundSummaryResponse(BaseModel):
    """Lightweight round for list views."""
    id: int
    date: date
    course_name: str
    total_score: int
    differential: Decimal
    course_rating: Optional[Decimal] = None
    slope_rating: Optional[int] = None
    fairways_hit: Optional[int] = None
    greens_in_regulation: Optional[int] = None
    total_putts: Optional[int] = None
    penalties: Optional[int] = None
    source: Optional[RoundSource] = None


class ActivitySummaryResponse(BaseModel):
    """Lightweight activity for list views."""
    id: int
    date: date
    activity_type: ActivityType
    sub_type: Optional[str] = None
    duration: Optional[int] = None
    comment: Optional[str] = None


class DashboardResponse(BaseModel):
    """Aggregated stats for the dashboard page."""
    total_activities: int
    this_week_activities: int
    total_hours: float
    activity_breakdown: Dict[str, int]
    total_rounds: int
    rounds_this_week: int
    average_score: Optional[float] = None
    best_score: Optional[int] = None
    average_differential: Optional[Decimal] = None
    handicap_estimate: Optional[Decimal] = None
    current_handicap: Optional[Decimal] = None
    recent_activities: List[ActivitySummaryResponse]
    recent_rounds: List[RoundSummaryResponse]


class MetricResponse(BaseModel):
    percentage: float
    rating: str
    color: str
    detail: str


class PerformanceResponse(BaseModel):
    driving_accuracy: MetricResponse
    short_game: MetricResponse
    putting: MetricResponse
    recommendation: str
    rounds_analyzed: int


class ActivityPerformanceResponse(BaseModel):
    activity_frequency: MetricResponse
    practice_balance: MetricResponse
    consistency: MetricResponse
    recommendation: str


class ExtractRoundResponse(BaseModel):
    """Round fields read from a screenshot, for the client to review before saving."""
    extracted: Dict[str, Any]
    fields: List[str]


class GhinAuthUrlResponse(BaseModel):
    auth_url: str
    state: str


class GhinSyncResponse(BaseModel):
    imported: int
    skipped: int
    handicap: Optional[Decimal] = None
    last_sync: datetime


class GhinDisconnectResponse(BaseModel):
    connected: bool
