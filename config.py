"""Runtime configuration read from the environment (and a local .env file)."""

import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_GHIN_API_BASE_URL = "https://api.ghin.com/api/v1"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Application settings. Built once at startup and stored on app.state."""
    ghin_api_base_url: str = DEFAULT_GHIN_API_BASE_URL
    ghin_client_id: Optional[str] = None
    ghin_client_secret: Optional[str] = None
    ghin_timeout_seconds: float = 15.0

    google_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL

    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    onboarding_path: str = "/onboarding"
    log_level: str = "INFO"
    seed_demo_data: bool = True

    @property
    def ghin_configured(self) -> bool:
        """True when both OAuth client credentials are present."""
        return bool(self.ghin_client_id and self.ghin_client_secret)

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        origins = os.environ.get("CORS_ORIGINS")
        return cls(
            ghin_api_base_url=os.environ.get("GHIN_API_BASE_URL", DEFAULT_GHIN_API_BASE_URL).rstrip("/"),
            ghin_client_id=os.environ.get("GHIN_CLIENT_ID") or None,
            ghin_client_secret=os.environ.get("GHIN_CLIENT_SECRET") or None,
            google_api_key=os.environ.get("GOOGLE_API_KEY") or None,
            gemini_model=os.environ.get("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            cors_origins=(
                [o.strip() for o in origins.split(",") if o.strip()]
                if origins else ["http://localhost:5173"]
            ),
            max_upload_bytes=int(os.environ.get("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            seed_demo_data=_env_bool("SEED_DEMO_DATA", True),
        )
