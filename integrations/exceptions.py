class GhinError(Exception):
    """Base for all GHIN integration errors."""


class GhinConfigurationError(GhinError):
    """OAuth client id/secret are not configured. The integration needs setup."""


class GhinAuthenticationError(GhinError):
    """Tokens are missing, expired or rejected. The user needs to reconnect."""


class GhinApiError(GhinError):
    """GHIN was unreachable or returned an error / unexpected payload."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code
