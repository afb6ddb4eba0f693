"""Domain errors raised by services and converted to the JSON envelope at the request boundary."""


class AppError(Exception):
    """Base for expected failures; carries the HTTP status the boundary should use."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = 400


class ConflictError(AppError):
    """A unique field (e.g. email) is already taken."""

    status_code = 409


class AuthError(AppError):
    """Bad credentials."""

    status_code = 401


class InvalidTokenError(AppError):
    """Bearer token missing, malformed, badly signed, or expired."""

    status_code = 401


class BlockedError(AppError):
    """Account is blocked or inactive; reason is the administrator's block reason when set."""

    status_code = 401

    def __init__(self, message: str, reason: str = "") -> None:
        self.reason = reason
        super().__init__(message)


class ForbiddenError(AppError):
    """Authenticated, but not allowed to act on this resource."""

    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class InternalError(AppError):
    status_code = 500
