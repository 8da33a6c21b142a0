from datetime import datetime
from decimal import Decimal
from enum import Enum
from pydantic import Field, field_validator
from typing import Optional

from .base import BaseGolfModel, to_one_place, to_naive

FAIRWAY_HOLES = 14
REGULATION_HOLES = 18


class RoundSource(str, Enum):
    """Where a round came from."""
    MANUAL = "manual"
    GHIN = "ghin"
    SCREENSHOT = "screenshot"


class Round(BaseGolfModel):
    """An 18-hole round as recorded by the user or imported from GHIN.

    `differential` is always set by the rounds repository from the score and
    ratings; it is never taken from client input.
    """
    id: Optional[int] = None
    user_id: int
    date: datetime
    course_name: str = Field(..., min_length=1)
    total_score: int = Field(..., ge=18, le=200)
    course_rating: Optional[Decimal] = Field(None, ge=55, le=85)
    slope_rating: Optional[int] = Field(None, ge=55, le=155)
    differential: Decimal = Decimal("0.0")

    # Optional summary stats
    fairways_hit: Optional[int] = Field(None, ge=0, le=FAIRWAY_HOLES)
    greens_in_regulation: Optional[int] = Field(None, ge=0, le=REGULATION_HOLES)
    total_putts: Optional[int] = Field(None, ge=0, le=100)
    penalties: Optional[int] = Field(None, ge=0, le=50)

    screenshot_url: Optional[str] = None
    processed: bool = False
    source: RoundSource = RoundSource.MANUAL
    created_at: Optional[datetime] = None

    @field_validator('course_rating', mode='before')
    @classmethod
    def round_course_rating(cls, v):
        return to_one_place(v)

    @field_validator('date', mode='after')
    @classmethod
    def strip_timezone(cls, v):
        return to_naive(v)

    def fairway_percentage(self) -> Optional[float]:
        """Fairways hit as a percentage of the 14 driving holes."""
        if self.fairways_hit is None:
            return None
        return self.fairways_hit / FAIRWAY_HOLES * 100

    def gir_percentage(self) -> Optional[float]:
        """Greens in regulation as a percentage of 18 holes."""
        if self.greens_in_regulation is None:
            return None
        return self.greens_in_regulation / REGULATION_HOLES * 100

    def putts_per_gir(self) -> Optional[float]:
        """Putts divided by greens hit; 0.0 when no greens were hit."""
        if self.total_putts is None or self.greens_in_regulation is None:
            return None
        if self.greens_in_regulation == 0:
            return 0.0
        return self.total_putts / self.greens_in_regulation
