from __future__ import annotations
from typing import Any, Dict, Optional


class WaifuHavenError(Exception):
    """Base class for every error raised by the client."""


class ConfigError(WaifuHavenError, ValueError):
    """Client constructed with missing or invalid settings."""


class ValidationError(WaifuHavenError, ValueError):
    """Caller input rejected before any image request is sent."""


class TransportError(WaifuHavenError):
    """No response received (connection failure, timeout, ...)."""


class ApiRequestError(WaifuHavenError):
    """Generic API request error (4xx/5xx not otherwise classified)."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


class InvalidRequestError(ApiRequestError):
    """Bad request (400)."""


class ApiAuthError(ApiRequestError):
    """Authentication or authorization failure (401/403)."""


class InvalidCredentialsError(ApiAuthError):
    """API key rejected (401)."""


class AccessDeniedError(ApiAuthError):
    """API key lacks permission (403)."""


class CategoryNotFoundError(ApiRequestError):
    """No images for the requested category (404)."""

    def __init__(self, message: str, category: str, status_code: Optional[int] = 404, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=status_code, payload=payload)
        self.category = category


class ApiRateLimitError(ApiRequestError):
    """Rate limiting encountered (429)."""

    def __init__(self, message: str, retry_after: Optional[float] = None, status_code: Optional[int] = 429, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=status_code, payload=payload)
        self.retry_after = retry_after


RateLimitedError = ApiRateLimitError


class ServerError(ApiRequestError):
    """Internal server error (500)."""


class UnknownApiError(ApiRequestError):
    """Any other unexpected status or an unsuccessful payload."""
