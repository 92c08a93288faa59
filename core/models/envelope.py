# =============================================================================
# core/models/envelope.py - Response Envelope
# =============================================================================
# Every endpoint wraps its payload as {code, message, data}, where code
# mirrors the HTTP status.
# =============================================================================

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """
    Uniform response wrapper.

    Example:
        {
            "code": 200,
            "message": "Article created",
            "data": {"id": 1, "title": "Hello", "content": "First post"}
        }
    """
    code: int
    message: str
    data: T | None = None


def envelope(code: int, message: str, data: Any = None) -> dict[str, Any]:
    """Build an envelope as a plain dict (for JSONResponse content)."""
    return {"code": code, "message": message, "data": data}
