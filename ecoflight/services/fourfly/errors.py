class FourFlyError(Exception):
    """Base error for calls to the 4Fly (Supabase) backend."""


class AuthenticationError(FourFlyError):
    """Invalid/expired JWT or wrong credentials."""


class AuthorizationError(FourFlyError):
    """Upstream refused a read for this user (RLS / 401 / 403)."""


class NoClubError(FourFlyError):
    """User has no active club membership."""


class FourFlyRequestError(FourFlyError):
    """Network failure or unexpected upstream response."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
