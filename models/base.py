from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from pydantic import BaseModel, ConfigDict
from typing import Any, Optional

ONE_PLACE = Decimal("0.1")


def to_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise an aware datetime to naive UTC so stored dates stay comparable."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_one_place(value: Any) -> Optional[Decimal]:
    """Coerce a number to a Decimal with one fractional digit (None passes through)."""
    if value is None:
        return None
    return Decimal(str(value)).quantize(ONE_PLACE, rounding=ROUND_HALF_UP)


class BaseGolfModel(BaseModel):
    """Shared configuration and helpers for stored entities."""
    model_config = ConfigDict(validate_assignment=True)

    def merged(self, **fields: Any):
        """Return a validated copy with `fields` shallow-merged over the current values.

        Built from attributes rather than model_dump() so that fields excluded
        from serialisation (passwords, tokens) survive the merge.
        """
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data.update(fields)
        return type(self).model_validate(data)
