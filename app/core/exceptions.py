"""
Application Error Taxonomy

Every failure a caller can observe maps to one of these errors. Services
raise them; the exception handlers in app.main render them as
``{"success": false, "error": <message>}`` with the matching HTTP status.
"""


class AppError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(AppError):
    """Malformed or missing input."""
    status_code = 400
    default_message = "Bad Request"


class Unauthorized(AppError):
    """Missing, invalid or expired credential."""
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(AppError):
    """Valid credential, insufficient role or ownership."""
    status_code = 403
    default_message = "Forbidden"


class NotFound(AppError):
    """Referenced entity is absent."""
    status_code = 404
    default_message = "Not Found"


class Conflict(AppError):
    """Unique constraint violation."""
    status_code = 409
    default_message = "Conflict"


class InternalError(AppError):
    """Unexpected failure, e.g. a downstream dependency is unreachable."""
    status_code = 500
    default_message = "An internal error occurred."
