from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from analytics.handicap import calculate_differential, handicap_index
from analytics.stats import (
    RECOMMEND_APPROACH,
    RECOMMEND_DRIVING,
    RECOMMEND_MAINTAIN,
    RECOMMEND_NO_ROUNDS,
    RECOMMEND_PUTTING,
    DRIVING_TIERS,
    PUTTING_TIERS,
    activity_performance,
    activity_stats,
    choose_recommendation,
    dashboard_stats,
    performance_analysis,
    rate_at_least,
    rate_at_most,
    round_stats,
    summarize_rounds_for_prompt,
)
from models import Activity, ActivityType, Round, User

NOW = datetime(2024, 12, 16, 12, 0)


def _round(day: int, **overrides) -> Round:
    fields = dict(
        id=day, user_id=1, date=NOW - timedelta(days=day), course_name="Riverside",
        total_score=84, course_rating=Decimal("72.1"), slope_rating=131,
        differential=Decimal("10.3"),
    )
    fields.update(overrides)
    return Round(**fields)


def _activity(day: int, activity_type=ActivityType.PRACTICE_AREA, duration=60) -> Activity:
    return Activity(
        id=day, user_id=1, date=NOW - timedelta(days=day),
        activity_type=activity_type, duration=duration,
    )


# ================================================================
# Differential / handicap index
# ================================================================

def test_differential_pinned_examples():
    assert calculate_differential(84, Decimal("72.1"), 131) == Decimal("10.3")
    assert calculate_differential(84, Decimal("72.1"), 105) == Decimal("12.8")
    assert calculate_differential(72, None, 130) == Decimal("0.0")


def test_differential_zero_slope_and_float_rating():
    assert calculate_differential(90, 72.0, 0) == Decimal("0.0")
    assert calculate_differential(90, 72.0, 113) == Decimal("18.0")


def test_differential_rounds_half_up():
    # (80 - 71.5) * 113 / 128 = 7.50390625
    assert calculate_differential(80, Decimal("71.5"), 128) == Decimal("7.5")
    # (81 - 72.5) * 113 / 113 = 8.5 exactly; half-up stays 8.5, one place
    assert calculate_differential(81, Decimal("72.5"), 113) == Decimal("8.5")


def test_handicap_index_needs_three_scores():
    assert handicap_index([Decimal("10.0"), Decimal("12.0")]) is None


def test_handicap_index_three_scores_uses_lowest_with_adjustment():
    assert handicap_index([Decimal("14.0"), Decimal("10.0"), Decimal("12.0")]) == Decimal("8.0")


def test_handicap_index_rounds_half_up():
    # 10.05 - 2.0 = 8.05 rounds up to 8.1
    assert handicap_index([Decimal("10.05"), Decimal("12.0"), Decimal("14.0")]) == Decimal("8.1")


def test_handicap_index_best_eight_of_last_twenty():
    diffs = [Decimal(n) for n in range(1, 21)] + [Decimal("0.0")] * 5
    # Only the first 20 (most recent) count: best eight are 1..8
    assert handicap_index(diffs) == Decimal("4.5")


# ================================================================
# Dashboard stats
# ================================================================

def test_activity_stats_counts_week_hours_and_breakdown():
    activities = [
        _activity(1, ActivityType.ON_COURSE, 270),
        _activity(2),
        _activity(3, ActivityType.PRACTICE_AREA, None),
        _activity(30, ActivityType.ON_COURSE, 60),
    ]
    stats = activity_stats(activities, NOW)
    assert stats["total_activities"] == 4
    assert stats["this_week_activities"] == 3
    assert stats["total_hours"] == 6.5
    assert stats["activity_breakdown"] == {
        "on-course": 2,
        "practice-area": 2,
        "off-course": 0,
    }


def test_activity_stats_empty():
    stats = activity_stats([], NOW)
    assert stats["total_activities"] == 0
    assert stats["total_hours"] == 0
    assert set(stats["activity_breakdown"]) == {"on-course", "practice-area", "off-course"}


def test_round_stats():
    rounds = [_round(1, total_score=82), _round(10, total_score=88), _round(20, total_score=86)]
    stats = round_stats(rounds, NOW)
    assert stats["total_rounds"] == 3
    assert stats["rounds_this_week"] == 1
    assert stats["best_score"] == 82
    assert stats["average_score"] == 85.3
    assert stats["average_differential"] == Decimal("10.3")
    assert stats["handicap_estimate"] == Decimal("8.3")


def test_round_stats_without_rounds():
    stats = round_stats([], NOW)
    assert stats["total_rounds"] == 0
    assert stats["average_score"] is None
    assert stats["handicap_estimate"] is None


def test_dashboard_stats_limits_recent_items_and_uses_iso_dates():
    user = User(id=1, username="mike", password="pw", name="Mike", handicap=Decimal("12.4"))
    rounds = [_round(d) for d in range(1, 8)]
    activities = [_activity(d) for d in range(1, 8)]
    stats = dashboard_stats(user, rounds, activities, NOW)

    assert stats["current_handicap"] == Decimal("12.4")
    assert len(stats["recent_rounds"]) == 5
    assert len(stats["recent_activities"]) == 5
    assert stats["recent_rounds"][0]["date"] == "2024-12-15"
    assert stats["recent_activities"][0]["activity_type"] == "practice-area"
    assert stats["total_rounds"] == 7


# ================================================================
# Performance analysis
# ================================================================

def test_performance_no_rounds_is_no_data():
    result = performance_analysis([])
    for key in ("driving_accuracy", "short_game", "putting"):
        assert result[key] == {
            "percentage": 0,
            "rating": "No Data",
            "color": "gray",
            "detail": "No rounds logged",
        }
    assert result["recommendation"] == RECOMMEND_NO_ROUNDS
    assert result["rounds_analyzed"] == 0


def test_performance_ratings():
    r = _round(1, fairways_hit=10, greens_in_regulation=12, total_putts=29)
    result = performance_analysis([r])

    assert result["driving_accuracy"]["rating"] == "Strong"
    assert result["driving_accuracy"]["color"] == "success"
    assert result["short_game"]["rating"] == "Strong"
    # 29 / 12 = 2.42 putts per GIR
    assert result["putting"]["rating"] == "Needs Work"
    assert result["putting"]["color"] == "error"
    assert result["putting"]["detail"] == "2.4 putts per GIR"
    assert result["recommendation"] == RECOMMEND_PUTTING


def test_performance_zero_greens_reports_no_data_putting():
    r = _round(1, fairways_hit=7, greens_in_regulation=0, total_putts=36)
    result = performance_analysis([r])
    assert result["putting"]["rating"] == "No Data"
    assert result["putting"]["detail"] == "0.0 putts per GIR"
    assert result["short_game"]["rating"] == "Needs Work"
    assert result["recommendation"] == RECOMMEND_APPROACH


def test_performance_zero_putts_with_greens_is_rated():
    r = _round(1, fairways_hit=7, greens_in_regulation=10, total_putts=0)
    putting = performance_analysis([r])["putting"]
    assert putting["rating"] == "Strong"
    assert putting["detail"] == "0.0 putts per GIR"
    assert putting["percentage"] == 100.0


def test_performance_uses_ten_most_recent_rounds():
    rounds = [_round(d, fairways_hit=7) for d in range(1, 13)]
    assert performance_analysis(rounds)["rounds_analyzed"] == 10


def test_performance_percentages_clamped():
    r = _round(1, fairways_hit=14, greens_in_regulation=18, total_putts=18)
    result = performance_analysis([r])
    assert result["driving_accuracy"]["percentage"] == 100.0
    assert 0 <= result["putting"]["percentage"] <= 100


@pytest.mark.parametrize("fairway,gir,ppg,expected", [
    (40.0, 40.0, 2.0, RECOMMEND_PUTTING),
    (40.0, 40.0, 1.5, RECOMMEND_APPROACH),
    (40.0, 60.0, 1.5, RECOMMEND_DRIVING),
    (70.0, 60.0, 1.8, RECOMMEND_MAINTAIN),
    (70.0, 60.0, 1.9, RECOMMEND_MAINTAIN),
])
def test_recommendation_priority(fairway, gir, ppg, expected):
    assert choose_recommendation(fairway, gir, ppg) == expected


def test_tier_boundaries():
    assert rate_at_least(60, DRIVING_TIERS) == ("Strong", "success")
    assert rate_at_least(45, DRIVING_TIERS) == ("Good", "warning")
    assert rate_at_least(44.9, DRIVING_TIERS) == ("Needs Work", "error")
    assert rate_at_most(1.8, PUTTING_TIERS) == ("Strong", "success")
    assert rate_at_most(1.9, PUTTING_TIERS) == ("Good", "warning")
    assert rate_at_most(1.91, PUTTING_TIERS) == ("Needs Work", "error")


# ================================================================
# Activity performance / prompt summary
# ================================================================

def test_activity_performance_no_data():
    result = activity_performance([])
    assert result["activity_frequency"]["rating"] == "No Data"
    assert result["recommendation"] == "Start logging activities to get performance analysis."


def test_activity_performance_balance():
    activities = [_activity(d) for d in range(1, 7)] + [_activity(7, ActivityType.ON_COURSE)]
    result = activity_performance(activities)
    assert result["practice_balance"]["rating"] == "Well Balanced"
    assert result["consistency"]["detail"] == "Active 7 days recently"
    assert result["recommendation"] == "Great activity pattern! Keep up the consistent routine."


def test_summarize_rounds_for_prompt():
    assert summarize_rounds_for_prompt([]) == "No recent rounds available for analysis."
    text = summarize_rounds_for_prompt([_round(1, fairways_hit=5, greens_in_regulation=6, total_putts=34)])
    assert "Recent Performance (1 rounds):" in text
    assert "Putts per GIR: 5.7" in text
    assert "Putting is the biggest weakness" in text


def test_activity_performance_low_tier_labels():
    # Three on-course activities on one day: low frequency, no practice, one active day
    activities = [_activity(1, ActivityType.ON_COURSE) for _ in range(3)]
    result = activity_performance(activities)
    assert result["activity_frequency"]["rating"] == "Needs Work"
    assert result["practice_balance"]["rating"] == "More Practice Needed"
    assert result["consistency"]["rating"] == "Sporadic"
    for key in ("activity_frequency", "practice_balance", "consistency"):
        assert result[key]["color"] == "error"
