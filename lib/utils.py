# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Base error type for infrastructure code in lib/ that must not depend on
# the FastAPI layer.
# =============================================================================

from typing import Any


class ApplicationError(Exception):
    """
    Base error class for infrastructure errors.

    Errors carry a code, a human-readable message, a suggestion for fixing
    the problem, and extra details for debugging.

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: What to check or change to fix the error
        details: Additional context for debugging

    Example:
        class CacheError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="CACHE_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logs and diagnostics."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
