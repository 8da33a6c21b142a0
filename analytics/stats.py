from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from analytics.handicap import handicap_index
from models import Activity, ActivityType, Round, User

THIS_WEEK_DAYS = 7
PERFORMANCE_SAMPLE = 10
RECENT_ITEMS = 5

NO_DATA = "No Data"
NO_DATA_COLOR = "gray"

# (threshold, rating, color) - checked top to bottom, first match wins
DRIVING_TIERS = [(60, "Strong", "success"), (45, "Good", "warning")]
APPROACH_TIERS = [(50, "Strong", "success"), (35, "Good", "warning")]
PUTTING_TIERS = [(1.8, "Strong", "success"), (1.9, "Good", "warning")]
NEEDS_WORK = ("Needs Work", "error")

FREQUENCY_TIERS = [(4, "Excellent", "success"), (2, "Good", "warning")]
BALANCE_TIERS = [(60, "Well Balanced", "success"), (40, "Good Mix", "warning")]
BALANCE_FLOOR = ("More Practice Needed", "error")
CONSISTENCY_TIERS = [(70, "Very Consistent", "success"), (50, "Consistent", "warning")]
CONSISTENCY_FLOOR = ("Sporadic", "error")

RECOMMEND_PUTTING = (
    "Putting is costing you the most strokes. Spend most of your practice time on "
    "lag putting and holing out from 3-6 feet."
)
RECOMMEND_APPROACH = (
    "Focus on approach shots and iron play to hit more greens in regulation."
)
RECOMMEND_DRIVING = "Work on driving accuracy to find more fairways off the tee."
RECOMMEND_MAINTAIN = (
    "Solid all-around game. Keep your routine and sharpen your scoring from inside 100 yards."
)
RECOMMEND_NO_ROUNDS = "Start logging rounds to get performance analysis."
RECOMMEND_NO_ACTIVITIES = "Start logging activities to get performance analysis."


def _average(values: List[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


def _clamp(value: float) -> float:
    return round(max(0.0, min(100.0, value)), 1)


def no_data_metric(detail: str) -> Dict[str, Any]:
    return {"percentage": 0, "rating": NO_DATA, "color": NO_DATA_COLOR, "detail": detail}


def rate_at_least(value: float, tiers, floor: tuple = NEEDS_WORK) -> tuple:
    """Tier lookup where higher is better."""
    for threshold, rating, color in tiers:
        if value >= threshold:
            return rating, color
    return floor


def rate_at_most(value: float, tiers, floor: tuple = NEEDS_WORK) -> tuple:
    """Tier lookup where lower is better."""
    for threshold, rating, color in tiers:
        if value <= threshold:
            return rating, color
    return floor


def _metric(percentage: float, rating_color: tuple, detail: str) -> Dict[str, Any]:
    rating, color = rating_color
    return {"percentage": _clamp(percentage), "rating": rating, "color": color, "detail": detail}


# ================================================================
# Dashboard stats
# ================================================================

def activity_stats(activities: Iterable[Activity], now: datetime) -> Dict[str, Any]:
    """Volume stats over the user's activity log."""
    activities = list(activities)
    week_ago = now - timedelta(days=THIS_WEEK_DAYS)
    minutes = sum(a.duration or 0 for a in activities)

    breakdown = {t.value: 0 for t in ActivityType}
    for a in activities:
        breakdown[a.activity_type.value] += 1

    return {
        "total_activities": len(activities),
        "this_week_activities": sum(1 for a in activities if a.date >= week_ago),
        "total_hours": round(minutes / 60, 1),
        "activity_breakdown": breakdown,
    }


def round_stats(rounds: Iterable[Round], now: datetime) -> Dict[str, Any]:
    """Scoring stats over rounds ordered most recent first."""
    rounds = list(rounds)
    week_ago = now - timedelta(days=THIS_WEEK_DAYS)
    scores = [r.total_score for r in rounds]
    rated = [r.differential for r in rounds if r.course_rating is not None and r.slope_rating]

    average_differential: Optional[Decimal] = None
    if rated:
        average_differential = round(sum(rated) / len(rated), 1)

    return {
        "total_rounds": len(rounds),
        "rounds_this_week": sum(1 for r in rounds if r.date >= week_ago),
        "average_score": round(sum(scores) / len(scores), 1) if scores else None,
        "best_score": min(scores) if scores else None,
        "average_differential": average_differential,
        "handicap_estimate": handicap_index(rated),
    }


def _activity_summary(activity: Activity) -> Dict[str, Any]:
    return {
        "id": activity.id,
        "date": activity.date.date().isoformat(),
        "activity_type": activity.activity_type.value,
        "sub_type": activity.sub_type,
        "duration": activity.duration,
        "comment": activity.comment,
    }


def _round_summary(round_: Round) -> Dict[str, Any]:
    return {
        "id": round_.id,
        "date": round_.date.date().isoformat(),
        "course_name": round_.course_name,
        "total_score": round_.total_score,
        "differential": round_.differential,
    }


def dashboard_stats(
    user: User,
    rounds: Iterable[Round],
    activities: Iterable[Activity],
    now: datetime,
) -> Dict[str, Any]:
    """Everything the dashboard shows. Both iterables must be most recent first."""
    rounds = list(rounds)
    activities = list(activities)
    return {
        **activity_stats(activities, now),
        **round_stats(rounds, now),
        "current_handicap": user.handicap,
        "recent_activities": [_activity_summary(a) for a in activities[:RECENT_ITEMS]],
        "recent_rounds": [_round_summary(r) for r in rounds[:RECENT_ITEMS]],
    }


# ================================================================
# Round-based performance analysis
# ================================================================

def performance_analysis(rounds: Iterable[Round]) -> Dict[str, Any]:
    """Rate driving, approach play and putting over the most recent rounds.

    `rounds` must be ordered most recent first; only the first 10 are used.
    Each metric averages over the rounds that recorded the underlying stat.
    """
    sample = list(rounds)[:PERFORMANCE_SAMPLE]
    if not sample:
        detail = "No rounds logged"
        return {
            "driving_accuracy": no_data_metric(detail),
            "short_game": no_data_metric(detail),
            "putting": no_data_metric(detail),
            "recommendation": RECOMMEND_NO_ROUNDS,
            "rounds_analyzed": 0,
        }

    fairway_pct = _average([r.fairway_percentage() for r in sample if r.fairways_hit is not None])
    gir_pct = _average([r.gir_percentage() for r in sample if r.greens_in_regulation is not None])

    putting_rounds = [
        r for r in sample if r.total_putts is not None and r.greens_in_regulation is not None
    ]
    putts_per_gir: Optional[float] = None
    total_gir = 0
    if putting_rounds:
        total_gir = sum(r.greens_in_regulation for r in putting_rounds)
        total_putts = sum(r.total_putts for r in putting_rounds)
        putts_per_gir = total_putts / total_gir if total_gir else 0.0

    if fairway_pct is None:
        driving = no_data_metric("No fairway stats recorded")
    else:
        driving = _metric(
            fairway_pct,
            rate_at_least(fairway_pct, DRIVING_TIERS),
            f"{fairway_pct / 100 * 14:.1f}/14 fairways ({fairway_pct:.0f}%)",
        )

    if gir_pct is None:
        short_game = no_data_metric("No GIR stats recorded")
    else:
        short_game = _metric(
            gir_pct,
            rate_at_least(gir_pct, APPROACH_TIERS),
            f"{gir_pct / 100 * 18:.1f}/18 greens in regulation ({gir_pct:.0f}%)",
        )

    if putts_per_gir is None:
        putting = no_data_metric("No putting stats recorded")
    elif total_gir == 0:
        # No greens hit: putts per GIR is undefined, reported as 0.0
        putting = no_data_metric("0.0 putts per GIR")
    else:
        putting = _metric(
            (2.5 - putts_per_gir) * 100,
            rate_at_most(putts_per_gir, PUTTING_TIERS),
            f"{putts_per_gir:.1f} putts per GIR",
        )

    return {
        "driving_accuracy": driving,
        "short_game": short_game,
        "putting": putting,
        "recommendation": choose_recommendation(fairway_pct, gir_pct, putts_per_gir),
        "rounds_analyzed": len(sample),
    }


def choose_recommendation(
    fairway_pct: Optional[float],
    gir_pct: Optional[float],
    putts_per_gir: Optional[float],
) -> str:
    """Pick the single recommendation. Order: putting, approach, driving, maintain."""
    if putts_per_gir is not None and putts_per_gir > 1.9:
        return RECOMMEND_PUTTING
    if gir_pct is not None and gir_pct < 50:
        return RECOMMEND_APPROACH
    if fairway_pct is not None and fairway_pct < 50:
        return RECOMMEND_DRIVING
    return RECOMMEND_MAINTAIN


# ================================================================
# Activity-based performance analysis
# ================================================================

def activity_performance(activities: Iterable[Activity]) -> Dict[str, Any]:
    """Rate frequency, practice balance and consistency over recent activities.

    Assumes the sample spans roughly two weeks.
    """
    sample = list(activities)[:PERFORMANCE_SAMPLE]
    if not sample:
        detail = "No activities logged"
        return {
            "activity_frequency": no_data_metric(detail),
            "practice_balance": no_data_metric(detail),
            "consistency": no_data_metric(detail),
            "recommendation": RECOMMEND_NO_ACTIVITIES,
        }

    weekly_frequency = len(sample) / 2
    practice = sum(1 for a in sample if a.activity_type != ActivityType.ON_COURSE)
    practice_ratio = practice / len(sample) * 100
    unique_days = len({a.date.date() for a in sample})
    consistency = min(100.0, unique_days / 7 * 100)

    if practice_ratio < 50:
        recommendation = "Add more practice sessions to balance your on-course play."
    elif weekly_frequency < 2:
        recommendation = "Try to increase activity frequency to 3-4 times per week."
    else:
        recommendation = "Great activity pattern! Keep up the consistent routine."

    return {
        "activity_frequency": _metric(
            weekly_frequency * 25,
            rate_at_least(weekly_frequency, FREQUENCY_TIERS),
            f"{weekly_frequency:.1f} activities per week",
        ),
        "practice_balance": _metric(
            practice_ratio,
            rate_at_least(practice_ratio, BALANCE_TIERS, BALANCE_FLOOR),
            f"{round(practice_ratio)}% practice activities",
        ),
        "consistency": _metric(
            consistency,
            rate_at_least(consistency, CONSISTENCY_TIERS, CONSISTENCY_FLOOR),
            f"Active {unique_days} days recently",
        ),
        "recommendation": recommendation,
    }


def summarize_rounds_for_prompt(rounds: Iterable[Round]) -> str:
    """Plain-text performance summary fed to the practice plan prompt."""
    rounds = list(rounds)
    if not rounds:
        return "No recent rounds available for analysis."

    n = len(rounds)
    avg_score = sum(r.total_score for r in rounds) / n
    avg_fairways = sum(r.fairways_hit or 0 for r in rounds) / n
    avg_gir = sum(r.greens_in_regulation or 0 for r in rounds) / n
    avg_putts = sum(r.total_putts or 0 for r in rounds) / n
    putts_per_gir = f"{avg_putts / avg_gir:.1f}" if avg_gir > 0 else "N/A"

    lines = [
        f"Recent Performance ({n} rounds):",
        f"- Average Score: {avg_score:.1f}",
        f"- Average Fairways Hit: {avg_fairways:.1f}/14 ({avg_fairways / 14 * 100:.1f}%)",
        f"- Average Greens in Regulation: {avg_gir:.1f}/18 ({avg_gir / 18 * 100:.1f}%)",
        f"- Average Total Putts: {avg_putts:.1f}",
        f"- Putts per GIR: {putts_per_gir}",
    ]

    areas = []
    if avg_fairways < 7:
        areas.append("- Driving accuracy needs work (below 50%)")
    if avg_gir < 9:
        areas.append("- Iron play and approach shots need attention")
    if avg_gir > 0 and avg_putts / avg_gir > 2.0:
        areas.append("- Putting is the biggest weakness - focus here first")
    if 0 < avg_putts < 30:
        areas.append("- Putting is a strength, maintain with light practice")
    if areas:
        lines.append("")
        lines.append("Key Areas for Improvement:")
        lines.extend(areas)

    return "\n".join(lines)
