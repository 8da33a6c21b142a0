"""GHIN account connection and score sync endpoints."""

import logging
import secrets
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from config import Settings
from database.db_manager import DatabaseManager
from api.dependencies import (
    GhinClientFactory,
    get_current_user,
    get_db,
    get_ghin_client_factory,
    get_settings,
)
from api.schemas import GhinAuthUrlResponse, GhinDisconnectResponse, GhinSyncResponse
from integrations import GhinAuthenticationError, GhinError
from models import User

logger = logging.getLogger(__name__)

router = APIRouter()

OAUTH_STATE_TTL = timedelta(minutes=10)


def _onboarding_redirect(settings: Settings, status: str) -> RedirectResponse:
    return RedirectResponse(f"{settings.onboarding_path}?status={status}", status_code=302)


def _remember_state(pending: Dict[str, datetime], state: str, now: datetime) -> None:
    """Record a freshly issued OAuth state, dropping expired ones."""
    for stale in [s for s, issued in pending.items() if now - issued > OAUTH_STATE_TTL]:
        del pending[stale]
    pending[state] = now


def _consume_state(pending: Dict[str, datetime], state: Optional[str], now: datetime) -> bool:
    """Remove `state` from the pending set; True if it was issued and is still fresh."""
    issued = pending.pop(state, None) if state else None
    return issued is not None and now - issued <= OAUTH_STATE_TTL


def _handicap(value: Optional[float]) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


@router.get("/auth-url", response_model=GhinAuthUrlResponse)
async def get_auth_url(
    request: Request,
    client_factory: GhinClientFactory = Depends(get_ghin_client_factory),
):
    """URL for the GHIN consent screen. Fails with setup_required when unconfigured."""
    state = secrets.token_urlsafe(16)
    auth_url = client_factory(None).get_authorization_url(
        str(request.url_for("ghin_callback")), state=state,
    )
    _remember_state(request.app.state.ghin_oauth_states, state, datetime.now())
    return GhinAuthUrlResponse(auth_url=auth_url, state=state)


@router.get("/callback", name="ghin_callback")
async def ghin_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
    settings: Settings = Depends(get_settings),
    client_factory: GhinClientFactory = Depends(get_ghin_client_factory),
):
    """OAuth redirect target. Always answers with a redirect back to onboarding."""
    known_state = _consume_state(request.app.state.ghin_oauth_states, state, datetime.now())
    if error or not code or not known_state:
        logger.warning("GHIN authorization rejected (error=%s, known_state=%s)", error, known_state)
        return _onboarding_redirect(settings, "error")

    client = client_factory(None)
    try:
        credentials = await client.exchange_code_for_tokens(
            code, str(request.url_for("ghin_callback")),
        )
        player = await client.get_player_profile()
    except GhinError as e:
        logger.warning("GHIN connection failed: %s", e)
        return _onboarding_redirect(settings, "error")

    credentials = client.credentials or credentials
    await db.users.update_ghin_connection(
        user.id,
        ghin_number=player.ghin_number,
        ghin_connected=True,
        ghin_access_token=credentials.access_token,
        ghin_refresh_token=credentials.refresh_token,
    )
    if player.handicap_index is not None:
        await db.users.update_handicap(user.id, _handicap(player.handicap_index))

    logger.info("Connected GHIN %s for user %s", player.ghin_number, user.id)
    return _onboarding_redirect(settings, "connected")


@router.post("/sync", response_model=GhinSyncResponse)
async def sync_ghin(
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
    client_factory: GhinClientFactory = Depends(get_ghin_client_factory),
):
    """Import new GHIN scores as rounds and refresh the official handicap."""
    stored = user.ghin_credentials()
    if not user.ghin_connected or stored is None:
        raise GhinAuthenticationError("GHIN account not connected. Please connect your GHIN account.")

    client = client_factory(stored)
    try:
        scores = await client.sync_latest_scores(since=user.last_ghin_sync)
        player = await client.get_player_profile()
    finally:
        # Keep rotated tokens even if a later call failed
        if client.credentials is not None and client.credentials != stored:
            await db.users.update_ghin_connection(
                user.id,
                ghin_access_token=client.credentials.access_token,
                ghin_refresh_token=client.credentials.refresh_token,
            )

    imported = skipped = 0
    for score in scores:
        fields = score.to_round_fields()
        duplicate = await db.rounds.find_duplicate(
            user.id, fields["date"], fields["course_name"], fields["total_score"],
        )
        if duplicate:
            skipped += 1
            continue
        try:
            await db.rounds.create_round(user.id, fields)
        except ValidationError as e:
            logger.warning("Skipping GHIN score on %s: %s", score.score_date, e)
            skipped += 1
            continue
        imported += 1

    synced_at = datetime.now()
    handicap = _handicap(player.handicap_index)
    if handicap is not None:
        await db.users.update_handicap(user.id, handicap)
    await db.users.update_ghin_connection(user.id, last_ghin_sync=synced_at)

    logger.info("GHIN sync for user %s: %d imported, %d skipped", user.id, imported, skipped)
    return GhinSyncResponse(
        imported=imported,
        skipped=skipped,
        handicap=handicap,
        last_sync=synced_at,
    )


@router.post("/disconnect", response_model=GhinDisconnectResponse)
async def disconnect_ghin(
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    await db.users.clear_ghin_connection(user.id)
    logger.info("Disconnected GHIN for user %s", user.id)
    return GhinDisconnectResponse(connected=False)
