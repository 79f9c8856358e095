"""
Errors Module

Domain exceptions raised by the service layer. Each carries the HTTP status
the API responds with; routers let them through untouched and the app-level
handler renders them as ``{"detail": message}``.

Author: Timekeeper Development Team
"""

from fastapi import Request
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


class TimekeeperError(Exception):
    """Base class for errors surfaced verbatim to the caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthorizedError(TimekeeperError):
    """No user identity could be resolved from the request."""

    status_code = 401


class NotFoundError(TimekeeperError):
    """Referenced client, project or time entry does not exist."""

    status_code = 404


class ForbiddenError(TimekeeperError):
    """Entity exists but belongs to a different user."""

    status_code = 403


class InvalidStateError(TimekeeperError):
    """Operation not allowed in the entity's current state."""

    status_code = 409


class ConflictError(TimekeeperError):
    """Concurrent writers kept winning a compare-and-swap."""

    status_code = 409


class BadRequestError(TimekeeperError):
    status_code = 400


async def timekeeper_error_handler(request: Request, exc: TimekeeperError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
