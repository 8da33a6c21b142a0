"""Round API endpoints, including screenshot extraction."""

import asyncio
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from database.db_manager import DatabaseManager
from api.dependencies import (
    ensure_owned,
    get_current_user,
    get_db,
    get_screenshot_extractor,
    get_settings,
)
from api.schemas import (
    CreateRoundRequest,
    ExtractRoundResponse,
    RoundSummaryResponse,
    UpdateRoundRequest,
)
from config import Settings
from llm import ScreenshotExtractor
from models import Round, User

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_CONTENT_TYPES = {"image/jpeg": ".jpg", "image/png": ".png"}

# Multipart boundaries and part headers on top of the file itself
MULTIPART_OVERHEAD_BYTES = 16 * 1024


def upload_limit_detail(max_bytes: int) -> str:
    if max_bytes >= 1024 * 1024:
        size = f"{max_bytes / (1024 * 1024):g} MB"
    elif max_bytes >= 1024:
        size = f"{max_bytes / 1024:g} KB"
    else:
        size = f"{max_bytes} bytes"
    return f"File too large. Maximum size is {size}"


def summarize_round(r: Round) -> RoundSummaryResponse:
    """Project a full Round model into a lightweight summary."""
    return RoundSummaryResponse(
        id=r.id,
        date=r.date.date(),
        course_name=r.course_name,
        total_score=r.total_score,
        differential=r.differential,
        course_rating=r.course_rating,
        slope_rating=r.slope_rating,
        fairways_hit=r.fairways_hit,
        greens_in_regulation=r.greens_in_regulation,
        total_putts=r.total_putts,
        penalties=r.penalties,
        source=r.source,
    )


def _upload_size(file: UploadFile) -> int:
    """Size of the spooled upload in bytes, without reading it into memory."""
    if file.size is not None:
        return file.size
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    return size


@router.get("", response_model=List[RoundSummaryResponse])
async def get_rounds(
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    rounds = await db.rounds.get_rounds_for_user(user.id)
    return [summarize_round(r) for r in rounds]


@router.post("", response_model=Round, status_code=201)
async def create_round(
    req: CreateRoundRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    return await db.rounds.create_round(user.id, req.model_dump())


@router.post("/extract", response_model=ExtractRoundResponse)
async def extract_round(
    file: UploadFile = File(...),
    extractor: ScreenshotExtractor = Depends(get_screenshot_extractor),
    settings: Settings = Depends(get_settings),
):
    """Upload a round screenshot, run LLM extraction, return fields for review."""
    suffix = ALLOWED_CONTENT_TYPES.get(file.content_type)
    if suffix is None:
        raise HTTPException(
            400, f"Unsupported file type: {file.content_type}. Allowed: image/jpeg, image/png"
        )
    if _upload_size(file) > settings.max_upload_bytes:
        raise HTTPException(413, upload_limit_detail(settings.max_upload_bytes))

    # Save upload to temp file
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        shutil.copyfileobj(file.file, tmp)
        tmp_path = tmp.name

    try:
        # Run sync extraction in thread pool to avoid blocking
        loop = asyncio.get_event_loop()
        extracted = await loop.run_in_executor(
            None,
            lambda: extractor.extract_round_from_image(tmp_path, file.content_type),
        )
    finally:
        Path(tmp_path).unlink(missing_ok=True)

    if extracted is None:
        raise HTTPException(422, "Could not read round data from the screenshot")

    data = extracted.model_dump(mode="json", exclude_none=True)
    return ExtractRoundResponse(extracted=data, fields=sorted(data))


@router.get("/{round_id}", response_model=Round)
async def get_round(
    round_id: int,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    return ensure_owned(await db.rounds.get_round(round_id), user, "Round", round_id)


@router.patch("/{round_id}", response_model=Round)
async def update_round(
    round_id: int,
    req: UpdateRoundRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    """Partially update a round. The differential follows score/rating/slope changes."""
    ensure_owned(await db.rounds.get_round(round_id), user, "Round", round_id)
    return await db.rounds.update_round(round_id, **req.model_dump(exclude_unset=True))
