"""User profile API endpoints."""

from fastapi import APIRouter, Depends

from database.db_manager import DatabaseManager
from api.dependencies import get_current_user, get_db
from api.schemas import UpdateUserRequest
from models import User

router = APIRouter()


@router.get("", response_model=User)
async def get_user(user: User = Depends(get_current_user)):
    return user


@router.patch("", response_model=User)
async def update_user(
    req: UpdateUserRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    return await db.users.update_user(user.id, **req.model_dump(exclude_unset=True))
