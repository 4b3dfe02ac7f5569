"""Rate-limited HTTP helpers used for Twitter API calls."""

from __future__ import annotations

import threading

import requests as _requests

from .config import get
from .ratelimit import RateLimiter


_limiter: RateLimiter | None = None
_limiter_lock = threading.Lock()


def get_limiter() -> RateLimiter:
    """Return the process-wide limiter, creating it from config on first use."""
    global _limiter
    with _limiter_lock:
        if _limiter is None:
            _limiter = RateLimiter(
                max_calls=get("api.max_requests", 300),
                period=get("api.period_seconds", 10800),
            )
        return _limiter


class RateLimitedSession:
    """Subset of the requests API where every call passes through one limiter."""

    def __init__(self, limiter: RateLimiter | None = None, session: _requests.Session | None = None):
        self.limiter = limiter or get_limiter()
        self._session = session or _requests.Session()

    def get(self, url: str, **kwargs) -> _requests.Response:
        self.limiter.wait_if_needed()
        return self._session.get(url, **kwargs)

    def post(self, url: str, **kwargs) -> _requests.Response:
        self.limiter.wait_if_needed()
        return self._session.post(url, **kwargs)


def http_error_detail(err: Exception) -> str:
    """Best-effort extract of API error details from HTTP exceptions."""
    response = getattr(err, "response", None)
    if response is None:
        return str(err)

    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        parts = []
        for item in payload.get("errors") or []:
            if isinstance(item, dict) and item.get("message"):
                code = item.get("code")
                parts.append(f"{item['message']} (code {code})" if code is not None else item["message"])
        if parts:
            return " - ".join(parts)

    text = getattr(response, "text", "")
    if isinstance(text, str) and text.strip():
        return text.strip()[:500]
    return str(err)
