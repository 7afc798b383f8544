"""
Service-layer exceptions and the FastAPI handlers that map them to responses.

Services raise these instead of HTTPException so they stay usable outside a
request (scripts, websocket handlers, tests). Anything else that escapes a
route becomes a generic 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from mentorhub.config import settings

logger = logging.getLogger(__name__)


class MentorHubError(Exception):
    """Base class for expected, client-facing errors."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BadRequestError(MentorHubError):
    """Malformed or missing fields, out-of-range values, invalid state."""
    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenError(MentorHubError):
    """Caller is identified but not allowed to touch this record."""
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(MentorHubError):
    """Referenced record does not exist."""
    status_code = status.HTTP_404_NOT_FOUND


async def mentorhub_error_handler(request: Request, exc: MentorHubError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info(
            "%s %s rejected (%s): %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    payload = {"detail": "Server error"}
    if not settings.is_production:
        payload["error"] = f"{type(exc).__name__}: {exc}"
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MentorHubError, mentorhub_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
