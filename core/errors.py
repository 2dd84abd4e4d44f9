# core/errors.py

# ============================================================
# Application error taxonomy
# ============================================================
class AppError(Exception):
    """
    Base for domain errors raised below the router layer.
    `detail` is what the client sees; the constructor message is
    only ever logged.
    """

    status_code = 500
    detail = "Internal server error"

    def __init__(self, message: str = None, detail: str = None):
        super().__init__(message or detail or self.detail)
        if detail is not None:
            self.detail = detail


class Unauthorized(AppError):
    status_code = 401
    detail = "unauthorized access"


class InvalidToken(Unauthorized):
    """Missing, malformed, expired or badly signed token."""


class Forbidden(AppError):
    status_code = 403
    detail = "forbidden access"


class NotFound(AppError):
    status_code = 404
    detail = "Resource not found"


class InvalidTransition(AppError):
    status_code = 409
    detail = "Invalid status transition"


class Conflict(AppError):
    """Insert rejected by a unique index."""

    status_code = 409
    detail = "Record already exists"


class StoreUnavailable(AppError):
    status_code = 500
    detail = "Internal server error"


def extract_store_error(error: Exception) -> str:
    """
    Readable details from Supabase / PostgREST errors.
    """
    message = getattr(error, "message", None)
    if message:
        return str(message)
    if error.args:
        return str(error.args[0])
    return str(error) or "Unknown store error"


def is_unique_violation(error: Exception) -> bool:
    """Postgres 23505 or a PostgREST duplicate-key message."""
    if str(getattr(error, "code", "")) == "23505":
        return True
    detail = extract_store_error(error).lower()
    return "duplicate" in detail or "unique" in detail
