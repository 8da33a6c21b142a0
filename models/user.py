from datetime import datetime
from decimal import Decimal
from pydantic import ConfigDict, Field, field_validator
from typing import Optional

from .base import BaseGolfModel, to_one_place


class GhinCredentials(BaseGolfModel):
    """OAuth token pair for the GHIN API. Replaced wholesale on refresh."""
    model_config = ConfigDict(frozen=True)

    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "Bearer"


class User(BaseGolfModel):
    """The golfer using the application, with an optional GHIN link."""
    id: Optional[int] = None
    username: str
    password: str = Field(exclude=True)
    name: str
    handicap: Optional[Decimal] = Field(None, ge=-10, le=54)

    ghin_number: Optional[str] = None
    ghin_connected: bool = False
    ghin_access_token: Optional[str] = Field(None, exclude=True)
    ghin_refresh_token: Optional[str] = Field(None, exclude=True)
    last_ghin_sync: Optional[datetime] = None

    created_at: Optional[datetime] = None

    @field_validator('handicap', mode='before')
    @classmethod
    def round_handicap(cls, v):
        return to_one_place(v)

    def ghin_credentials(self) -> Optional[GhinCredentials]:
        """Stored GHIN tokens, or None when the account was never linked."""
        if not self.ghin_access_token:
            return None
        return GhinCredentials(
            access_token=self.ghin_access_token,
            refresh_token=self.ghin_refresh_token,
        )
