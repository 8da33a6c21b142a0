"""Practice plan API endpoints."""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from database.db_manager import DatabaseManager
from api.dependencies import ensure_owned, get_current_user, get_db, get_plan_generator
from api.schemas import GeneratePlanRequest
from llm import PlanPreferences, PracticePlanGenerator
from llm.practice_planner import RECENT_ROUNDS_FOR_PROMPT
from models import PracticePlan, User

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[PracticePlan])
async def get_practice_plans(
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    return await db.practice_plans.get_practice_plans(user.id)


@router.get("/active", response_model=PracticePlan)
async def get_active_plan(
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    plan = await db.practice_plans.get_active_plan(user.id)
    if not plan:
        raise HTTPException(404, "No active practice plan")
    return plan


@router.get("/{plan_id}", response_model=PracticePlan)
async def get_practice_plan(
    plan_id: int,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    return ensure_owned(await db.practice_plans.get_practice_plan(plan_id), user, "Practice plan", plan_id)


@router.post("/generate", response_model=PracticePlan, status_code=201)
async def generate_practice_plan(
    req: GeneratePlanRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
    generator: PracticePlanGenerator = Depends(get_plan_generator),
):
    """Generate a new plan and make it the user's only active plan.

    Model failures never surface here; the generator falls back to a static plan.
    """
    resources = await db.resources.get_resources_by_ids(user.id, req.available_resources)
    recent_rounds = await db.rounds.get_recent_rounds(user.id, RECENT_ROUNDS_FOR_PROMPT)
    preferences = PlanPreferences(
        days_per_week=req.days_per_week,
        hours_per_session=req.hours_per_session,
        preferred_time=req.preferred_time,
        practice_goal=req.practice_goal,
        resources=resources,
    )

    # Run sync generation in thread pool to avoid blocking
    loop = asyncio.get_event_loop()
    generated = await loop.run_in_executor(
        None,
        lambda: generator.generate_practice_plan(user, recent_rounds, preferences),
    )

    plan = PracticePlan(
        user_id=user.id,
        name=req.name or f"{req.days_per_week}-Day Practice Plan",
        days_per_week=req.days_per_week,
        hours_per_session=req.hours_per_session,
        preferred_time=req.preferred_time,
        focus_areas=generated.focus_areas,
        available_resources=[r.id for r in resources],
        weekly_schedule=generated.weekly_schedule,
        ai_recommendations=generated.recommendations,
        generated_by=generated.generated_by,
    )
    saved = await db.practice_plans.activate_plan(plan)
    logger.info("Activated practice plan %s for user %s (%s)", saved.id, user.id, saved.generated_by.value)
    return saved
