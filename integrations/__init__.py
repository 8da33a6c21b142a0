from .exceptions import (
    GhinApiError,
    GhinAuthenticationError,
    GhinConfigurationError,
    GhinError,
)
from .ghin_client import GhinClient, GhinPlayer, GhinScore

__all__ = [
    "GhinClient",
    "GhinPlayer",
    "GhinScore",
    "GhinError",
    "GhinConfigurationError",
    "GhinAuthenticationError",
    "GhinApiError",
]
