from __future__ import annotations
import time
import logging
from typing import Any, Dict, Mapping, Optional
import requests
from .exceptions import (
    AccessDeniedError,
    ApiRateLimitError,
    ApiRequestError,
    CategoryNotFoundError,
    InvalidCredentialsError,
    InvalidRequestError,
    ServerError,
    TransportError,
    UnknownApiError,
)

logger = logging.getLogger(__name__)


def _server_message(payload: Mapping[str, Any]) -> Optional[str]:
    for key in ('message', 'error', 'detail'):
        val = payload.get(key)
        if isinstance(val, str) and val:
            return val
    return None


def _retry_after(headers: Mapping[str, str], payload: Mapping[str, Any]) -> Optional[float]:
    raw = headers.get('Retry-After')
    if raw is None:
        raw = payload.get('retryAfter')
    if raw is None:
        raw = payload.get('retry_after')
    if raw is None:
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def map_status_error(status: int, payload: Mapping[str, Any], headers: Mapping[str, str], category: Optional[str] = None) -> ApiRequestError:
    """Translate a non-success HTTP response into the matching error."""
    message = _server_message(payload)
    body = dict(payload)
    if status == 400:
        return InvalidRequestError(f"Invalid category: {message or 'Bad request'}", status_code=status, payload=body)
    if status == 401:
        return InvalidCredentialsError('Invalid API key. Please check your credentials.', status_code=status, payload=body)
    if status == 403:
        return AccessDeniedError('Access denied. Check your API key permissions.', status_code=status, payload=body)
    if status == 404 and category is not None:
        return CategoryNotFoundError(f'No images found in category "{category}".', category=category, payload=body)
    if status == 429:
        wait = _retry_after(headers, payload)
        text = 'Rate limit exceeded. Please slow down your requests.'
        if wait is not None:
            text += f" Retry after {wait:g} seconds."
        return ApiRateLimitError(text, retry_after=wait, payload=body)
    if status == 500:
        text = 'Server error. Please try again later.'
        if message:
            text += f" ({message})"
        return ServerError(text, status_code=status, payload=body)
    return UnknownApiError(f"API error ({status}): {message or 'Unknown error'}", status_code=status, payload=body)


class BaseClient:
    """Base HTTP client with optional pacing and JSON error mapping. No retries."""
    BASE_URL: str = ''

    def __init__(self, timeout: float = 30, session: Optional[requests.Session] = None, requests_per_second: Optional[float] = None):
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.requests_per_second = requests_per_second
        self._last_request_ts: float = 0.0

    def _respect_rate_limit(self):
        if not self.requests_per_second:
            return
        min_interval = 1.0 / self.requests_per_second
        now = time.monotonic()
        elapsed = now - self._last_request_ts
        if elapsed < min_interval:
            time.sleep(min_interval - elapsed)
        self._last_request_ts = time.monotonic()

    def _url(self, path: str) -> str:
        return self.BASE_URL.rstrip('/') + '/' + path.lstrip('/')

    def _request(self, method: str, path: str, *, headers: Dict[str, str] | None = None, category: Optional[str] = None) -> Dict[str, Any]:
        url = self._url(path)
        self._respect_rate_limit()
        logger.debug('%s %s', method.upper(), url)
        try:
            resp = self.session.request(method.upper(), url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Network error: {e}") from e

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if resp.status_code != 200:
            raise map_status_error(resp.status_code, payload if isinstance(payload, dict) else {}, resp.headers, category)
        if not isinstance(payload, dict):
            raise UnknownApiError(f"API error ({resp.status_code}): Failed to decode JSON response", status_code=resp.status_code)
        return payload

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
