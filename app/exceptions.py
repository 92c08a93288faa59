# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error is rendered as the standard envelope:
#   {"code": <http status>, "message": "<what went wrong>", "data": null}
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.models.envelope import envelope
from lib.database import DatabaseConnectionError

logger = logging.getLogger(__name__)


class ArticleApiException(Exception):
    """
    Base exception for the article API.

    All custom exceptions inherit from this class. Each carries the HTTP
    status it maps to and a machine-readable error_code for logs.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "ARTICLE_API_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the response envelope."""
        return envelope(self.status_code, self.message)


# =============================================================================
# Request Exceptions
# =============================================================================

class ValidationError(ArticleApiException):
    """Raised when a required field is missing or empty."""

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details={"fields": fields or []},
        )


class MalformedIdentifierError(ArticleApiException):
    """Raised when a path identifier is not an integer."""

    def __init__(self, raw_id: str):
        super().__init__(
            message="Invalid article ID format",
            error_code="MALFORMED_ID",
            status_code=400,
            details={"id": raw_id},
        )


class NotFoundError(ArticleApiException):
    """Raised when no article exists for the given ID."""

    def __init__(self, article_id: int):
        super().__init__(
            message="Article not found",
            error_code="NOT_FOUND",
            status_code=404,
            details={"id": article_id},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def article_api_exception_handler(
    request: Request,
    exc: ArticleApiException
) -> JSONResponse:
    """Convert ArticleApiException to an envelope response."""
    logger.info(
        f"{request.method} {request.url.path} -> {exc.status_code} {exc.error_code}: {exc.message}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request body parsing errors (malformed JSON, wrong types).

    These are client errors like a missing field, so they get 400 rather
    than FastAPI's default 422.
    """
    logger.info(f"{request.method} {request.url.path} -> 400 invalid body: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content=envelope(400, "Invalid request body")
    )


async def database_exception_handler(
    request: Request,
    exc: DatabaseConnectionError
) -> JSONResponse:
    """Database unavailable while serving a request."""
    logger.error(f"Database unavailable: {exc}")
    return JSONResponse(
        status_code=503,
        content=envelope(503, "Database unavailable")
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content=envelope(500, "An unexpected error occurred")
    )
