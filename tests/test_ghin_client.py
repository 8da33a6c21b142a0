from datetime import date, datetime
from decimal import Decimal
from urllib.parse import parse_qs

import httpx
import pytest

from config import Settings
from integrations import (
    GhinApiError,
    GhinAuthenticationError,
    GhinClient,
    GhinConfigurationError,
    GhinScore,
)
from models import GhinCredentials, RoundSource

BASE = "https://ghin.test/api/v1"

PROFILE = {
    "ghin_number": "1234567",
    "first_name": "Mike",
    "last_name": "Johnson",
    "handicap_index": 11.8,
    "club_name": "Riverside GC",
    "state": "CA",
}

SCORE = {
    "score_date": "2024-12-15",
    "course_name": "Pebble Beach Golf Links",
    "gross_score": 82,
    "adjusted_gross_score": 81,
    "course_rating": 72.1,
    "slope_rating": 131,
    "differential": 8.1,
    "tee_name": "Blue",
}


@pytest.fixture
def settings():
    return Settings(ghin_api_base_url=BASE, ghin_client_id="client", ghin_client_secret="secret")


class FakeGhin:
    """Records requests and answers them from a queue of (status, payload) per path."""

    def __init__(self, responses):
        self.responses = {path: list(queue) for path, queue in responses.items()}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, payload = self.responses[request.url.path].pop(0)
        return httpx.Response(status, json=payload)

    def paths(self):
        return [r.url.path for r in self.requests]


def _client(settings, fake, credentials=None):
    return GhinClient(settings, credentials=credentials, transport=httpx.MockTransport(fake))


CREDS = GhinCredentials(access_token="old-access", refresh_token="old-refresh")
TOKENS = {"access_token": "new-access", "refresh_token": "new-refresh", "expires_in": 3600}


# ================================================================
# Configuration
# ================================================================

@pytest.mark.asyncio
async def test_missing_config_fails_before_network():
    fake = FakeGhin({})
    client = _client(Settings(ghin_api_base_url=BASE), fake, CREDS)

    with pytest.raises(GhinConfigurationError):
        client.get_authorization_url("http://app/callback")
    with pytest.raises(GhinConfigurationError):
        await client.exchange_code_for_tokens("code", "http://app/callback")
    with pytest.raises(GhinConfigurationError):
        await client.refresh_access_token()
    assert fake.requests == []


def test_authorization_url(settings):
    url = httpx.URL(GhinClient(settings).get_authorization_url("http://app/cb", state="xyz"))
    assert str(url).startswith(f"{BASE}/oauth/authorize?")
    params = dict(url.params)
    assert params == {
        "response_type": "code",
        "client_id": "client",
        "redirect_uri": "http://app/cb",
        "scope": "profile scores",
        "state": "xyz",
    }


# ================================================================
# OAuth
# ================================================================

@pytest.mark.asyncio
async def test_exchange_code_for_tokens(settings):
    fake = FakeGhin({"/api/v1/oauth/token": [(200, TOKENS)]})
    client = _client(settings, fake)

    creds = await client.exchange_code_for_tokens("abc", "http://app/cb")

    assert creds.access_token == "new-access"
    assert client.credentials is creds
    form = parse_qs(fake.requests[0].content.decode())
    assert form["grant_type"] == ["authorization_code"]
    assert form["code"] == ["abc"]
    assert form["client_secret"] == ["secret"]


@pytest.mark.asyncio
async def test_exchange_rejected_code_is_auth_error(settings):
    fake = FakeGhin({"/api/v1/oauth/token": [(400, {"error": "invalid_grant"})]})
    with pytest.raises(GhinAuthenticationError):
        await _client(settings, fake).exchange_code_for_tokens("bad", "http://app/cb")


@pytest.mark.asyncio
async def test_refresh_replaces_credentials_without_mutating(settings):
    fake = FakeGhin({"/api/v1/oauth/token": [(200, {"access_token": "new-access"})]})
    client = _client(settings, fake, CREDS)

    fresh = await client.refresh_access_token()

    assert fresh is not CREDS
    assert CREDS.access_token == "old-access"
    assert fresh.access_token == "new-access"
    # Refresh token carried over when the response omits it
    assert fresh.refresh_token == "old-refresh"


# ================================================================
# Authenticated calls
# ================================================================

@pytest.mark.asyncio
async def test_profile_sends_bearer_token(settings):
    fake = FakeGhin({"/api/v1/player/profile": [(200, PROFILE)]})
    player = await _client(settings, fake, CREDS).get_player_profile()

    assert player.ghin_number == "1234567"
    assert player.full_name == "Mike Johnson"
    assert fake.requests[0].headers["Authorization"] == "Bearer old-access"


@pytest.mark.asyncio
async def test_401_refreshes_once_and_retries(settings):
    fake = FakeGhin({
        "/api/v1/player/profile": [(401, {}), (200, PROFILE)],
        "/api/v1/oauth/token": [(200, TOKENS)],
    })
    client = _client(settings, fake, CREDS)

    player = await client.get_player_profile()

    assert player.handicap_index == 11.8
    assert fake.paths() == ["/api/v1/player/profile", "/api/v1/oauth/token", "/api/v1/player/profile"]
    assert fake.requests[2].headers["Authorization"] == "Bearer new-access"
    assert client.credentials.refresh_token == "new-refresh"


@pytest.mark.asyncio
async def test_second_401_raises_auth_error(settings):
    fake = FakeGhin({
        "/api/v1/player/profile": [(401, {}), (401, {})],
        "/api/v1/oauth/token": [(200, TOKENS)],
    })
    with pytest.raises(GhinAuthenticationError):
        await _client(settings, fake, CREDS).get_player_profile()
    assert len(fake.requests) == 3


@pytest.mark.asyncio
async def test_failed_refresh_raises_auth_error(settings):
    fake = FakeGhin({
        "/api/v1/player/profile": [(401, {})],
        "/api/v1/oauth/token": [(500, {"error": "server"})],
    })
    with pytest.raises(GhinAuthenticationError):
        await _client(settings, fake, CREDS).get_player_profile()


@pytest.mark.asyncio
async def test_no_credentials_is_auth_error(settings):
    with pytest.raises(GhinAuthenticationError):
        await _client(settings, FakeGhin({})).get_player_profile()


@pytest.mark.asyncio
async def test_server_error_is_api_error(settings):
    fake = FakeGhin({"/api/v1/player/profile": [(503, {"error": "down"})]})
    with pytest.raises(GhinApiError) as exc_info:
        await _client(settings, fake, CREDS).get_player_profile()
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_unexpected_shape_is_api_error(settings):
    fake = FakeGhin({"/api/v1/player/profile": [(200, {"unexpected": True})]})
    with pytest.raises(GhinApiError):
        await _client(settings, fake, CREDS).get_player_profile()


@pytest.mark.asyncio
async def test_network_failure_is_api_error(settings):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = GhinClient(settings, CREDS, transport=httpx.MockTransport(handler))
    with pytest.raises(GhinApiError):
        await client.get_player_profile()


# ================================================================
# Scores
# ================================================================

@pytest.mark.asyncio
async def test_get_player_scores_accepts_list_or_wrapped(settings):
    fake = FakeGhin({"/api/v1/player/scores": [(200, [SCORE]), (200, {"scores": [SCORE]})]})
    client = _client(settings, fake, CREDS)

    assert len(await client.get_player_scores(limit=5)) == 1
    assert len(await client.get_player_scores()) == 1
    assert fake.requests[0].url.params["limit"] == "5"


@pytest.mark.asyncio
async def test_sync_latest_scores_default_lookback(settings):
    fake = FakeGhin({"/api/v1/player/scores": [(200, [SCORE])]})
    await _client(settings, fake, CREDS).sync_latest_scores(today=date(2024, 12, 31))

    params = fake.requests[0].url.params
    assert params["start_date"] == "2024-10-02"
    assert params["limit"] == "50"


@pytest.mark.asyncio
async def test_sync_latest_scores_since_last_sync(settings):
    fake = FakeGhin({"/api/v1/player/scores": [(200, [])]})
    scores = await _client(settings, fake, CREDS).sync_latest_scores(since=datetime(2024, 12, 1, 9, 30))

    assert scores == []
    assert fake.requests[0].url.params["start_date"] == "2024-12-01"


def test_score_to_round_fields():
    fields = GhinScore.model_validate(SCORE).to_round_fields()
    assert fields["date"] == datetime(2024, 12, 15)
    assert fields["total_score"] == 82
    assert fields["course_rating"] == Decimal("72.1")
    assert fields["source"] == RoundSource.GHIN
    assert "differential" not in fields
