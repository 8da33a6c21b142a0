from .handicap import calculate_differential, handicap_index
from .stats import (
    activity_performance,
    activity_stats,
    dashboard_stats,
    performance_analysis,
    round_stats,
    summarize_rounds_for_prompt,
)

__all__ = [
    "calculate_differential",
    "handicap_index",
    "activity_stats",
    "round_stats",
    "dashboard_stats",
    "performance_analysis",
    "activity_performance",
    "summarize_rounds_for_prompt",
]
