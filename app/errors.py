# app/errors.py
"""
Closed error taxonomy for ingestion and dispatch.

Every failure the service reports is one of the classes below. Callers
branch on `kind` (or the class), never on message text.
"""

from typing import Any, Dict, Optional


class DocumentQAError(Exception):
    """Structured error with a stable kind and optional upstream details."""

    kind = "unknown"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        upstream_message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.upstream_message = upstream_message
        self.details = details or {}
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses and log fields."""
        return {
            "kind": self.kind,
            "message": self.message,
            "status_code": self.status_code,
            "upstream_message": self.upstream_message,
            "details": self.details,
        }


# ========== CONFIGURATION ==========

class ConfigurationError(DocumentQAError):
    """Credential absent, a placeholder, or too short."""

    kind = "configuration"

    MISSING = "missing"
    INVALID = "invalid"

    def __init__(self, reason: str, message: Optional[str] = None):
        if message is None:
            if reason == self.MISSING:
                message = (
                    "Gemini API key not configured. "
                    "Set GEMINI_API_KEY before asking questions."
                )
            else:
                message = "Please configure a valid Gemini API key in GEMINI_API_KEY."
        self.reason = reason
        super().__init__(message, details={"reason": reason})


# ========== INGESTION ==========

class UnsupportedInputError(DocumentQAError):
    """File type outside the allow-list or size above the ceiling."""

    kind = "unsupported_input"

    SIZE = "size"
    TYPE = "type"

    def __init__(self, reason: str, message: str, details: Optional[Dict] = None):
        self.reason = reason
        super().__init__(message, details={"reason": reason, **(details or {})})


class EmptyContentError(DocumentQAError):
    kind = "empty_content"

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "The file appears to be empty or could not be read properly. "
            "Please try a different file."
        )


# ========== UPSTREAM ==========

class AuthError(DocumentQAError):
    kind = "auth"

    def __init__(self, status_code: int, upstream_message: Optional[str] = None):
        super().__init__(
            "Invalid API key. Please check your Gemini API key configuration.",
            status_code=status_code,
            upstream_message=upstream_message,
        )


class RateLimitError(DocumentQAError):
    """Upstream 429, distinct from the client-side request spacing."""

    kind = "rate_limit"

    def __init__(self, status_code: int = 429, upstream_message: Optional[str] = None):
        super().__init__(
            "API rate limit exceeded. Please wait a few minutes before asking "
            "another question. You can also try with a smaller document or "
            "shorter questions.",
            status_code=status_code,
            upstream_message=upstream_message,
        )


class UpstreamError(DocumentQAError):
    """Error object in the payload, or a payload with no candidates."""

    kind = "upstream"

    def __init__(
        self,
        upstream_message: Optional[str] = None,
        status_code: Optional[int] = None,
        upstream_status: Optional[str] = None,
    ):
        if upstream_message:
            message = f"Gemini API Error: {upstream_message}"
        else:
            message = "No response generated from Gemini API"
        super().__init__(
            message,
            status_code=status_code,
            upstream_message=upstream_message,
            details={"upstream_status": upstream_status} if upstream_status else None,
        )


class UnknownError(DocumentQAError):
    kind = "unknown"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(
            f"Failed to get AI response: {message or 'Unknown error'}",
            status_code=status_code,
        )
