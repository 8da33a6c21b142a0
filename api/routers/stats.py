"""Stats and performance API endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends

from analytics import activity_performance, dashboard_stats, performance_analysis
from analytics.stats import PERFORMANCE_SAMPLE
from database.db_manager import DatabaseManager
from api.dependencies import get_current_user, get_db
from api.schemas import ActivityPerformanceResponse, DashboardResponse, PerformanceResponse
from models import User

router = APIRouter()


@router.get("/stats", response_model=DashboardResponse)
async def get_stats(
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    rounds = await db.rounds.get_rounds_for_user(user.id)
    activities = await db.activities.get_activities(user.id)
    return dashboard_stats(user, rounds, activities, now=datetime.now())


@router.get("/performance", response_model=PerformanceResponse)
async def get_performance(
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    """Driving, approach and putting ratings over the 10 most recent rounds."""
    rounds = await db.rounds.get_recent_rounds(user.id, PERFORMANCE_SAMPLE)
    return performance_analysis(rounds)


@router.get("/performance/activities", response_model=ActivityPerformanceResponse)
async def get_activity_performance(
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    activities = await db.activities.get_recent_activities(user.id, PERFORMANCE_SAMPLE)
    return activity_performance(activities)
