class RunlogError(Exception):
    """Base class for errors raised by the goals client."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationRequired(RunlogError):
    """Raised before any network call when no bearer token is available."""

    def __init__(self, message: str = "No authentication token available"):
        super().__init__(message)


class ApiError(RunlogError):
    """A request failed in transport or came back with a non-2xx status.

    `status_code` is None for transport failures.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GoalParseError(RunlogError):
    """An API payload did not match the Goal / GoalProgress shape."""


class GoalValidationError(RunlogError):
    """Client-side input for a goal was rejected before being sent."""
