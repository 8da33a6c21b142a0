from datetime import datetime
from enum import Enum
from pydantic import Field, field_validator, model_validator
from typing import Any, Dict, Optional

from .base import BaseGolfModel, to_naive


class ActivityType(str, Enum):
    """Top-level activity category."""
    ON_COURSE = "on-course"
    PRACTICE_AREA = "practice-area"
    OFF_COURSE = "off-course"


ACTIVITY_SUB_TYPES: Dict[ActivityType, tuple] = {
    ActivityType.ON_COURSE: (
        "playing-9-holes-walking",
        "playing-9-holes-riding",
        "playing-18-holes-walking",
        "playing-18-holes-riding",
    ),
    ActivityType.PRACTICE_AREA: (
        "driving-range",
        "putting-practice",
        "chipping-practice",
        "wedge-work",
        "short-game-all-around",
    ),
    ActivityType.OFF_COURSE: (
        "golf-strength-training",
        "cardio-workout",
        "flexibility-stretching",
        "hitting-balls-at-home",
    ),
}


def duration_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two timestamps."""
    return int((end - start).total_seconds() // 60)


class Activity(BaseGolfModel):
    """A logged golf activity: a round, a practice session or a workout.

    `metadata` is category specific, e.g. course/score for on-course play,
    ballsHit/bucketSize for practice, workoutType for fitness.
    """
    id: Optional[int] = None
    user_id: int
    date: datetime
    activity_type: ActivityType
    sub_type: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=0, le=24 * 60)  # minutes
    comment: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    @field_validator('date', 'start_time', 'end_time', mode='after')
    @classmethod
    def strip_timezone(cls, v):
        return to_naive(v)

    @model_validator(mode='after')
    def validate_activity(self):
        if self.sub_type is not None and self.sub_type not in ACTIVITY_SUB_TYPES[self.activity_type]:
            raise ValueError(
                f"Sub-type '{self.sub_type}' is not valid for {self.activity_type.value} activities"
            )

        if self.start_time and self.end_time and self.end_time < self.start_time:
            raise ValueError("End time cannot be before start time")

        return self

    @classmethod
    def derive_duration(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Fill `duration` from start/end times when both are present and duration is not."""
        start, end = to_naive(data.get("start_time")), to_naive(data.get("end_time"))
        if data.get("duration") is None and start and end and end >= start:
            data = {**data, "duration": duration_minutes(start, end)}
        return data
