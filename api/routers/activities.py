"""Activity log API endpoints."""

from typing import List

from fastapi import APIRouter, Depends

from database.db_manager import DatabaseManager
from api.dependencies import ensure_owned, get_current_user, get_db
from api.schemas import CreateActivityRequest, UpdateActivityRequest
from models import Activity, User

router = APIRouter()


@router.get("", response_model=List[Activity])
async def get_activities(
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    return await db.activities.get_activities(user.id)


@router.post("", response_model=Activity, status_code=201)
async def create_activity(
    req: CreateActivityRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    return await db.activities.create_activity(user.id, req.model_dump())


@router.get("/{activity_id}", response_model=Activity)
async def get_activity(
    activity_id: int,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    return ensure_owned(await db.activities.get_activity(activity_id), user, "Activity", activity_id)


@router.patch("/{activity_id}", response_model=Activity)
async def update_activity(
    activity_id: int,
    req: UpdateActivityRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    ensure_owned(await db.activities.get_activity(activity_id), user, "Activity", activity_id)
    return await db.activities.update_activity(activity_id, **req.model_dump(exclude_unset=True))
