"""
LogStitch Errors
================
Exception hierarchy for configuration, API and transport failures.
"""

from typing import Optional

import httpx


class LogStitchError(Exception):
    """Base exception for everything raised by the LogStitch client."""
    pass


class ConfigurationError(LogStitchError, ValueError):
    """Raised at construction when the client configuration is invalid."""
    pass


class APIError(LogStitchError):
    """Raised when the ingestion service answers with a non-2xx status."""

    def __init__(self, message: str, status: int, code: str = "unknown_error", request_id: str = ""):
        self.message = message
        self.status = status
        self.code = code
        self.request_id = request_id
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"APIError(status={self.status}, code={self.code!r}, "
            f"message={self.message!r}, request_id={self.request_id!r})"
        )

    @classmethod
    def from_response(cls, response: httpx.Response) -> "APIError":
        """
        Build an error from an HTTP response.

        The body is expected to look like
        ``{"error": {"code": ..., "message": ...}, "request_id": ...}``.
        Missing pieces, or a body that is not JSON, fall back to defaults.
        """
        code = "unknown_error"
        message = f"HTTP {response.status_code}"
        request_id = ""

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                code = error.get("code") or code
                message = error.get("message") or message
            request_id = body.get("request_id") or ""

        return cls(message, status=response.status_code, code=code, request_id=request_id)


class TransportError(LogStitchError):
    """Raised when no response could be obtained after all attempts."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.message = message
        self.url = url
        super().__init__(message)
