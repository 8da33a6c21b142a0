from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request

from config import Settings
from database import DEMO_USER_ID, NotFoundError
from database.db_manager import DatabaseManager
from integrations import GhinClient
from llm import PracticePlanGenerator, ScreenshotExtractor
from models import GhinCredentials, User

GhinClientFactory = Callable[[Optional[GhinCredentials]], GhinClient]


def get_db(request: Request) -> DatabaseManager:
    """FastAPI dependency that provides the DatabaseManager."""
    return request.app.state.db_manager


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_user(db: DatabaseManager = Depends(get_db)) -> User:
    """The single demo golfer every request acts as."""
    user = await db.users.get_user(DEMO_USER_ID)
    if not user:
        raise HTTPException(404, "User not found")
    return user


def get_plan_generator(settings: Settings = Depends(get_settings)) -> PracticePlanGenerator:
    return PracticePlanGenerator(settings)


def get_screenshot_extractor(settings: Settings = Depends(get_settings)) -> ScreenshotExtractor:
    return ScreenshotExtractor(settings)


def get_ghin_client_factory(settings: Settings = Depends(get_settings)) -> GhinClientFactory:
    """Builds GHIN clients bound to a user's stored credentials."""
    def factory(credentials: Optional[GhinCredentials] = None) -> GhinClient:
        return GhinClient(settings, credentials)
    return factory


def ensure_owned(entity, user: User, entity_name: str, entity_id: int):
    """Return `entity` if it exists and belongs to `user`; otherwise raise NotFoundError."""
    if entity is None or entity.user_id != user.id:
        raise NotFoundError(entity_name, entity_id)
    return entity
