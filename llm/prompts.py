from pydantic import BaseModel, Field
from typing import List, Optional

from models import ScheduleDay


# ================================================================
# Practice plan prompt
# ================================================================

PRACTICE_PLAN_SYSTEM = (
    "You are an expert golf instructor and practice plan designer. Create detailed, "
    "practical practice plans that target specific weaknesses and provide measurable "
    "improvement goals."
)

_PLAN_JSON_SCHEMA = """
{
  "focus_areas": ["primary_weakness", "secondary_focus", "maintenance_area"],
  "weekly_schedule": [
    {
      "day": "Monday",
      "title": "Session Title",
      "duration": "%(hours)s hours",
      "activities": [
        {
          "name": "Activity Name",
          "duration": "X minutes",
          "description": "Detailed description",
          "location": "Required facility/resource",
          "focus": "skill_area"
        }
      ]
    }
  ],
  "recommendations": "Specific advice for improvement and expected results"
}"""


def build_practice_plan_prompt(
    handicap: Optional[str],
    days_per_week: int,
    hours_per_session: str,
    preferred_time: str,
    practice_goal: Optional[str],
    resource_names: List[str],
    performance_summary: str,
) -> str:
    """Build the user prompt for weekly practice plan generation."""
    resources = ", ".join(resource_names) if resource_names else "None listed"
    return (
        "Generate a personalized golf practice plan based on the following information:\n\n"
        "Player Profile:\n"
        f"- Handicap: {handicap if handicap is not None else 'Unknown'}\n"
        f"- Practice availability: {days_per_week} days per week, "
        f"{hours_per_session} hours per session\n"
        f"- Preferred time: {preferred_time}\n"
        f"- Practice goal: {practice_goal or 'Lower my handicap'}\n"
        f"- Available resources: {resources}\n\n"
        "Recent Performance Analysis:\n"
        f"{performance_summary}\n\n"
        f"Schedule exactly {days_per_week} practice days. "
        "Return a JSON object with this structure:"
        + _PLAN_JSON_SCHEMA % {"hours": hours_per_session}
        + "\n\nFocus on the player's biggest weaknesses while maintaining strengths. "
        "Provide specific, actionable practice drills."
    )


class RawPracticePlan(BaseModel):
    """Practice plan as returned by the LLM, before it is stored."""
    focus_areas: List[str] = Field(default_factory=list)
    weekly_schedule: List[ScheduleDay] = Field(default_factory=list)
    recommendations: Optional[str] = None


# ================================================================
# Screenshot extraction prompt
# ================================================================

_SCREENSHOT_PREAMBLE = (
    "You are an expert at reading golf apps and scorecards. Analyze this screenshot "
    "(usually from a handicap app) and extract the data for a single 18-hole round."
)

_CONFIDENCE_INSTRUCTIONS = """
CONFIDENCE:
For EVERY field you extract, provide both the value and your confidence (0.0 to 1.0) that you read it correctly.
- 1.0 = absolutely certain, clearly printed
- 0.7-0.9 = fairly confident, minor ambiguity
- 0.4-0.6 = uncertain, partially obscured or cropped
- 0.0-0.3 = guessing, very hard to read"""

_SCREENSHOT_JSON_SCHEMA = """
Return a JSON object with this exact structure. Use null for any field you cannot see.
Do NOT guess values you cannot see -- use null instead.
{
  "course_name": {"value": "string or null", "confidence": 0.0},
  "date": {"value": "YYYY-MM-DD or null", "confidence": 0.0},
  "total_score": {"value": "int or null", "confidence": 0.0},
  "course_rating": {"value": "float or null", "confidence": 0.0},
  "slope_rating": {"value": "int or null", "confidence": 0.0},
  "fairways_hit": {"value": "int or null", "confidence": 0.0},
  "greens_in_regulation": {"value": "int or null", "confidence": 0.0},
  "total_putts": {"value": "int or null", "confidence": 0.0},
  "penalties": {"value": "int or null", "confidence": 0.0}
}"""

_SCREENSHOT_RULES = """
Important rules:
1. total_score is the gross score for the round, not score to par.
2. fairways_hit is out of 14, greens_in_regulation out of 18.
3. course_rating usually looks like 72.1 and slope_rating like 131; do not swap them."""


def build_screenshot_prompt() -> str:
    return (
        _SCREENSHOT_PREAMBLE
        + _CONFIDENCE_INSTRUCTIONS
        + _SCREENSHOT_JSON_SCHEMA
        + _SCREENSHOT_RULES
    )


# ================================================================
# Pydantic models for parsing raw LLM JSON responses
# ================================================================

# --- Annotated field wrappers ---

class AnnotatedStringField(BaseModel):
    value: Optional[str] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)


class AnnotatedIntField(BaseModel):
    value: Optional[int] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)


class AnnotatedFloatField(BaseModel):
    value: Optional[float] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)


class RawRoundScreenshot(BaseModel):
    """Raw round fields read from a screenshot, each with a confidence."""
    course_name: AnnotatedStringField = AnnotatedStringField()
    date: AnnotatedStringField = AnnotatedStringField()
    total_score: AnnotatedIntField = AnnotatedIntField()
    course_rating: AnnotatedFloatField = AnnotatedFloatField()
    slope_rating: AnnotatedIntField = AnnotatedIntField()
    fairways_hit: AnnotatedIntField = AnnotatedIntField()
    greens_in_regulation: AnnotatedIntField = AnnotatedIntField()
    total_putts: AnnotatedIntField = AnnotatedIntField()
    penalties: AnnotatedIntField = AnnotatedIntField()
