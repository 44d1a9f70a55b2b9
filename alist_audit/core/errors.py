"""
Custom exception hierarchy for A-List Audit.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class AuditException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class MovieNotFoundError(AuditException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "MOVIE_NOT_FOUND"

    def __init__(self, movie_id: str):
        super().__init__(
            message=f"Movie {movie_id!r} does not exist.",
            details={"id": movie_id},
        )


class DuplicateMovieError(AuditException):
    http_status = status.HTTP_409_CONFLICT
    code = "DUPLICATE_MOVIE"

    def __init__(self, movie_id: str):
        super().__init__(
            message=f"Movie {movie_id!r} already exists.",
            details={"id": movie_id},
        )


class EmptySelectionError(AuditException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "EMPTY_SELECTION"

    def __init__(self):
        super().__init__(message="Select at least one movie.")


# --- feed fetch -------------------------------------------------------------

class FeedError(AuditException):
    """Recoverable failure of the Letterboxd fetch. Stored data is untouched."""


class UsernameMissingError(FeedError):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "USERNAME_MISSING"

    def __init__(self):
        super().__init__(message="Add your Letterboxd username to sync.")


class FeedUpstreamError(FeedError):
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "FEED_UPSTREAM_ERROR"

    def __init__(self, status_code: int, url: str):
        self.status_code = status_code
        super().__init__(
            message=(
                f"Letterboxd responded with {status_code}. "
                "Check the username or RSS URL."
            ),
            details={"status_code": status_code, "url": url},
        )


class FeedUnreachableError(FeedError):
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "FEED_UNREACHABLE"

    def __init__(self, url: str):
        super().__init__(
            message="Unable to reach Letterboxd right now.",
            details={"url": url},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def audit_exception_handler(request: Request, exc: AuditException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
