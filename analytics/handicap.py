"""USGA / World Handicap System calculations."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from models.base import to_one_place

STANDARD_SLOPE = 113
MAX_HANDICAP_INDEX = Decimal("54.0")
ZERO_DIFFERENTIAL = Decimal("0.0")

# Number of most-recent scores on record -> (lowest N differentials used, adjustment)
_WHS_TABLE = {
    3: (1, Decimal("-2.0")),
    4: (1, Decimal("-1.0")),
    5: (1, Decimal("0")),
    6: (2, Decimal("-1.0")),
    7: (2, Decimal("0")),
    8: (2, Decimal("0")),
    9: (3, Decimal("0")),
    10: (3, Decimal("0")),
    11: (3, Decimal("0")),
    12: (4, Decimal("0")),
    13: (4, Decimal("0")),
    14: (4, Decimal("0")),
    15: (5, Decimal("0")),
    16: (5, Decimal("0")),
    17: (6, Decimal("0")),
    18: (6, Decimal("0")),
    19: (7, Decimal("0")),
    20: (8, Decimal("0")),
}


def calculate_differential(
    total_score: int,
    course_rating: Optional[Decimal | float],
    slope_rating: Optional[int],
) -> Decimal:
    """Score differential: ((score - course rating) * 113) / slope rating.

    Computed in Decimal and rounded half-up to one place. A missing course
    rating or slope rating yields 0.0.
    """
    if course_rating is None or not slope_rating:
        return ZERO_DIFFERENTIAL
    rating = Decimal(str(course_rating))
    raw = (Decimal(total_score) - rating) * STANDARD_SLOPE / Decimal(slope_rating)
    return to_one_place(raw)


def handicap_index(differentials: Iterable[Decimal]) -> Optional[Decimal]:
    """Estimate a handicap index from differentials ordered most recent first.

    Uses the WHS table over the 20 most recent scores. Returns None with fewer
    than 3 scores.
    """
    recent = [Decimal(str(d)) for d in differentials][:20]
    if len(recent) < 3:
        return None

    count, adjustment = _WHS_TABLE[len(recent)]
    lowest = sorted(recent)[:count]
    average = sum(lowest) / Decimal(count)
    return min(to_one_place(average + adjustment), MAX_HANDICAP_INDEX)
