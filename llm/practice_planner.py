"""Weekly practice plan generation with Gemini, degrading to a static plan."""

import logging
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from google import genai
from google.genai import types

from analytics import summarize_rounds_for_prompt
from config import Settings
from models import (
    PlanSource,
    PreferredTime,
    Resource,
    Round,
    ScheduleActivity,
    ScheduleDay,
    User,
)
from llm.prompts import (
    PRACTICE_PLAN_SYSTEM,
    RawPracticePlan,
    build_practice_plan_prompt,
)

logger = logging.getLogger(__name__)

RECENT_ROUNDS_FOR_PROMPT = 10

FALLBACK_RECOMMENDATIONS = (
    "Focus on putting fundamentals to improve your scoring. Consistent practice "
    "should reduce your handicap by 2-3 strokes over 6-8 weeks."
)


class PlanPreferences(BaseModel):
    """What the golfer asked for when requesting a plan."""
    days_per_week: int = Field(..., ge=1, le=7)
    hours_per_session: Decimal = Field(..., ge=Decimal("0.5"), le=8)
    preferred_time: PreferredTime = PreferredTime.FLEXIBLE
    practice_goal: Optional[str] = None
    resources: List[Resource] = Field(default_factory=list)


class GeneratedPlan(BaseModel):
    focus_areas: List[str]
    weekly_schedule: List[ScheduleDay]
    recommendations: str
    generated_by: PlanSource


def _format_hours(hours: Decimal) -> str:
    return f"{hours.normalize():f}"


def fallback_plan(preferences: PlanPreferences) -> GeneratedPlan:
    """The built-in plan used whenever the model cannot produce one."""
    return GeneratedPlan(
        focus_areas=["putting", "short game", "course management"],
        weekly_schedule=[
            ScheduleDay(
                day="Monday",
                title="Putting Focus",
                duration=f"{_format_hours(preferences.hours_per_session)} hours",
                activities=[
                    ScheduleActivity(
                        name="Distance Control Putting",
                        duration="45 minutes",
                        description=(
                            "Practice lag putting from 20, 30, and 40 feet. "
                            "Focus on getting within 3 feet of the hole."
                        ),
                        location="Putting Green",
                        focus="putting",
                    ),
                    ScheduleActivity(
                        name="Short Putting Precision",
                        duration="30 minutes",
                        description=(
                            "Make 50 putts from 3 feet, then 25 from 6 feet. "
                            "Focus on consistent stroke tempo."
                        ),
                        location="Putting Green",
                        focus="putting",
                    ),
                ],
            ),
        ],
        recommendations=FALLBACK_RECOMMENDATIONS,
        generated_by=PlanSource.FALLBACK,
    )


class PracticePlanGenerator:
    """Builds the prompt, calls Gemini and validates the JSON it returns."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def _create_client(self) -> genai.Client:
        if not self._settings.google_api_key:
            raise EnvironmentError(
                "GOOGLE_API_KEY environment variable is not set. "
                "Get an API key at https://aistudio.google.com/apikey"
            )
        return genai.Client(api_key=self._settings.google_api_key)

    def _call_gemini(self, prompt: str) -> RawPracticePlan:
        client = self._create_client()
        response = client.models.generate_content(
            model=self._settings.gemini_model,
            contents=[prompt],
            config=types.GenerateContentConfig(
                system_instruction=PRACTICE_PLAN_SYSTEM,
                response_mime_type="application/json",
                response_json_schema=RawPracticePlan.model_json_schema(),
            ),
        )
        return RawPracticePlan.model_validate_json(response.text)

    def generate_practice_plan(
        self,
        profile: User,
        recent_rounds: List[Round],
        preferences: PlanPreferences,
    ) -> GeneratedPlan:
        """Generate a plan. Never raises; any failure yields the fallback plan."""
        prompt = build_practice_plan_prompt(
            handicap=str(profile.handicap) if profile.handicap is not None else None,
            days_per_week=preferences.days_per_week,
            hours_per_session=_format_hours(preferences.hours_per_session),
            preferred_time=preferences.preferred_time.value,
            practice_goal=preferences.practice_goal,
            resource_names=[r.name for r in preferences.resources],
            performance_summary=summarize_rounds_for_prompt(
                recent_rounds[:RECENT_ROUNDS_FOR_PROMPT]
            ),
        )

        try:
            raw = self._call_gemini(prompt)
        except Exception as e:
            logger.warning("Practice plan generation failed, using fallback plan: %s", e)
            return fallback_plan(preferences)

        if not raw.weekly_schedule:
            logger.warning("Practice plan response had an empty schedule, using fallback plan")
            return fallback_plan(preferences)

        return GeneratedPlan(
            focus_areas=raw.focus_areas,
            weekly_schedule=raw.weekly_schedule,
            recommendations=raw.recommendations or "",
            generated_by=PlanSource.AI,
        )
