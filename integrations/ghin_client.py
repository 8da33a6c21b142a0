"""GHIN handicap service client: OAuth2 authorization-code flow plus REST reads."""

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ValidationError

from config import Settings
from integrations.exceptions import (
    GhinApiError,
    GhinAuthenticationError,
    GhinConfigurationError,
    GhinError,
)
from models import GhinCredentials, RoundSource

logger = logging.getLogger(__name__)

OAUTH_SCOPE = "profile scores"
DEFAULT_SCORE_LIMIT = 20
SYNC_SCORE_LIMIT = 50
SYNC_LOOKBACK_DAYS = 90


# --- Response models ---

class GhinTokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "Bearer"


class GhinPlayer(BaseModel):
    ghin_number: str
    first_name: str
    last_name: str
    handicap_index: Optional[float] = None
    club_name: Optional[str] = None
    state: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class GhinScore(BaseModel):
    score_date: date
    course_name: str
    gross_score: int
    adjusted_gross_score: Optional[int] = None
    course_rating: float
    slope_rating: int
    playing_conditions_calculation: Optional[float] = None
    differential: Optional[float] = None
    tee_name: Optional[str] = None

    def to_round_fields(self) -> Dict[str, Any]:
        """Round-create fields for this score. The differential is recomputed on save."""
        return {
            "date": datetime.combine(self.score_date, datetime.min.time()),
            "course_name": self.course_name,
            "total_score": self.gross_score,
            "course_rating": Decimal(str(self.course_rating)),
            "slope_rating": self.slope_rating,
            "processed": True,
            "source": RoundSource.GHIN,
        }


# --- Client ---

class GhinClient:
    """Async GHIN API client.

    Holds an immutable GhinCredentials pair; a refresh swaps in a new pair
    rather than mutating the old one. Authenticated calls that get a 401
    refresh once and retry once.

    `transport` is passed through to httpx (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        settings: Settings,
        credentials: Optional[GhinCredentials] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings
        self._credentials = credentials
        self._transport = transport

    @property
    def credentials(self) -> Optional[GhinCredentials]:
        return self._credentials

    @property
    def base_url(self) -> str:
        return self._settings.ghin_api_base_url.rstrip("/")

    def _require_config(self) -> None:
        if not self._settings.ghin_configured:
            raise GhinConfigurationError(
                "GHIN OAuth credentials not configured. "
                "Set GHIN_CLIENT_ID and GHIN_CLIENT_SECRET."
            )

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._settings.ghin_timeout_seconds,
            transport=self._transport,
            headers={"Accept": "application/json"},
        )

    # ================================================================
    # OAuth
    # ================================================================

    def get_authorization_url(self, redirect_uri: str, state: Optional[str] = None) -> str:
        """URL to send the browser to for the GHIN consent screen."""
        self._require_config()
        params = {
            "response_type": "code",
            "client_id": self._settings.ghin_client_id,
            "redirect_uri": redirect_uri,
            "scope": OAUTH_SCOPE,
        }
        if state:
            params["state"] = state
        return str(httpx.URL(f"{self.base_url}/oauth/authorize", params=params))

    async def exchange_code_for_tokens(self, code: str, redirect_uri: str) -> GhinCredentials:
        """Trade an authorization code for an access/refresh token pair."""
        self._require_config()
        self._credentials = await self._token_request({
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
        })
        return self._credentials

    async def refresh_access_token(self) -> GhinCredentials:
        """Swap the refresh token for a new credential pair."""
        self._require_config()
        if self._credentials is None or not self._credentials.refresh_token:
            raise GhinAuthenticationError("No refresh token available. Please reconnect your GHIN account.")

        previous = self._credentials
        fresh = await self._token_request({
            "grant_type": "refresh_token",
            "refresh_token": previous.refresh_token,
        })
        if fresh.refresh_token is None:
            fresh = fresh.merged(refresh_token=previous.refresh_token)
        self._credentials = fresh
        return fresh

    async def _token_request(self, form: Dict[str, str]) -> GhinCredentials:
        data = {
            **form,
            "client_id": self._settings.ghin_client_id,
            "client_secret": self._settings.ghin_client_secret,
        }
        try:
            async with self._http() as client:
                response = await client.post(f"{self.base_url}/oauth/token", data=data)
        except httpx.HTTPError as e:
            raise GhinApiError(f"GHIN token endpoint unreachable: {e}") from e

        if response.status_code in (400, 401):
            raise GhinAuthenticationError(
                f"GHIN rejected the {form['grant_type']} grant: {response.text}"
            )
        if response.is_error:
            raise GhinApiError(
                f"GHIN token request failed ({response.status_code}): {response.text}",
                status_code=response.status_code,
            )

        try:
            tokens = GhinTokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise GhinApiError(f"Unexpected GHIN token response: {e}") from e

        return GhinCredentials(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            expires_in=tokens.expires_in,
            token_type=tokens.token_type,
        )

    # ================================================================
    # Authenticated requests
    # ================================================================

    async def _get(self, path: str, params: Optional[Dict[str, Any]]) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self._credentials.access_token}"}
        try:
            async with self._http() as client:
                return await client.get(f"{self.base_url}{path}", params=params, headers=headers)
        except httpx.HTTPError as e:
            raise GhinApiError(f"GHIN API unreachable: {e}") from e

    async def _authenticated_get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        if self._credentials is None:
            raise GhinAuthenticationError("No access token available. Please authenticate first.")

        response = await self._get(path, params)

        if response.status_code == 401:
            logger.info("GHIN access token rejected, refreshing once")
            try:
                await self.refresh_access_token()
            except GhinConfigurationError:
                raise
            except GhinError as e:
                raise GhinAuthenticationError(
                    "Authentication failed. Please reconnect your GHIN account."
                ) from e

            response = await self._get(path, params)
            if response.status_code == 401:
                raise GhinAuthenticationError(
                    "Authentication failed. Please reconnect your GHIN account."
                )

        if response.is_error:
            raise GhinApiError(
                f"GHIN API request failed ({response.status_code}): {response.text}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise GhinApiError(f"GHIN API returned invalid JSON for {path}") from e

    # ================================================================
    # Player data
    # ================================================================

    async def get_player_profile(self) -> GhinPlayer:
        payload = await self._authenticated_get("/player/profile")
        try:
            return GhinPlayer.model_validate(payload)
        except ValidationError as e:
            raise GhinApiError(f"Unexpected GHIN profile response: {e}") from e

    async def get_player_scores(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = DEFAULT_SCORE_LIMIT,
    ) -> List[GhinScore]:
        params: Dict[str, Any] = {"limit": limit}
        if start_date:
            params["start_date"] = start_date.isoformat()
        if end_date:
            params["end_date"] = end_date.isoformat()

        payload = await self._authenticated_get("/player/scores", params)
        if isinstance(payload, dict):
            payload = payload.get("scores", [])
        if not isinstance(payload, list):
            return []

        try:
            return [GhinScore.model_validate(item) for item in payload]
        except ValidationError as e:
            raise GhinApiError(f"Unexpected GHIN score record: {e}") from e

    async def sync_latest_scores(
        self, since: Optional[datetime] = None, today: Optional[date] = None,
    ) -> List[GhinScore]:
        """Scores since the last sync, or the last 90 days when never synced."""
        if since is not None:
            start = since.date()
        else:
            start = (today or date.today()) - timedelta(days=SYNC_LOOKBACK_DAYS)
        return await self.get_player_scores(start_date=start, limit=SYNC_SCORE_LIMIT)
