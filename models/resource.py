from datetime import datetime
from enum import Enum
from pydantic import Field
from typing import Optional

from .base import BaseGolfModel


class ResourceType(str, Enum):
    FACILITY = "facility"
    EQUIPMENT = "equipment"


class Resource(BaseGolfModel):
    """A practice facility or piece of equipment the user has access to."""
    id: Optional[int] = None
    user_id: int
    type: ResourceType
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    location: Optional[str] = None
    hours: Optional[str] = None
    cost: Optional[str] = None
    available: bool = True
    created_at: Optional[datetime] = None
