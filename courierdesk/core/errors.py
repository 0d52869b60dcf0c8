"""
Domain errors and their HTTP mapping.

Services raise these; routers never build error bodies themselves.
Every error response has the shape {"error": <code>, "detail": <message>}.
No stack traces or internal details are exposed to clients.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CourierDeskError(Exception):
    """Base class for all domain errors."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class RequestValidationFailed(CourierDeskError):
    """A required field is missing or malformed."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class AuthenticationRequired(CourierDeskError):
    """No usable credentials were supplied."""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"


class PermissionDenied(CourierDeskError):
    """The caller's role may not perform the operation."""
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class NotFoundError(CourierDeskError):
    """A referenced customer, package or record does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ConflictError(CourierDeskError):
    """The request collides with existing state (e.g. a taken tracking number)."""
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register domain error handlers on the FastAPI application."""

    @app.exception_handler(CourierDeskError)
    async def handle_domain_error(request: Request, exc: CourierDeskError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        else:
            logger.info(
                "%s %s -> %s (%s)", request.method, request.url.path, exc.status_code, exc.code
            )
        return _error_response(exc.status_code, exc.code, exc.detail)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "internal_error",
            "An unexpected error occurred",
        )
