from .practice_planner import (
    GeneratedPlan,
    PlanPreferences,
    PracticePlanGenerator,
    fallback_plan,
)
from .screenshot_extractor import ExtractedRound, ScreenshotExtractor

__all__ = [
    "GeneratedPlan",
    "PlanPreferences",
    "PracticePlanGenerator",
    "fallback_plan",
    "ExtractedRound",
    "ScreenshotExtractor",
]
