"""Per-client sliding-window rate limiting for the analyze endpoint.

Each key (``"<endpoint>:<client host>"``) gets its own window, so one noisy
client cannot starve the others.  Keys whose window has fully expired are
swept, so the table only holds clients seen within the last window.

The check runs as middleware, before FastAPI reads or validates the body,
so malformed requests count against the limit too.

Default: 60 analyze requests / minute per client.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Callable, Deque, Dict

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from finforecast.config import settings
from finforecast.schemas import ErrorDetail, ErrorResponse

logger = logging.getLogger("finforecast.middleware.rate_limit")

ANALYZE_WINDOW_SECONDS = 60

# (method, path) -> key prefix
RATE_LIMITED_ROUTES = {("POST", "/api/analyze"): "analyze"}


class RateLimiter:
    """Sliding-window rate limiter keyed by arbitrary strings.

    Safe for concurrent use inside one event loop via asyncio.Lock.

    Attributes:
        default_max_requests: Default cap per key (per window).
        default_window_seconds: Default sliding-window length in seconds.
    """

    def __init__(
        self,
        default_max_requests: int = 60,
        default_window_seconds: int = 60,
    ) -> None:
        self.default_max_requests = default_max_requests
        self.default_window_seconds = default_window_seconds
        # key -> deque of monotonic timestamps
        self._requests: Dict[str, Deque[float]] = {}
        self._lock = asyncio.Lock()
        self._last_sweep = time.monotonic()

    @property
    def tracked_keys(self) -> int:
        """Number of keys currently holding a window."""
        return len(self._requests)

    async def check_rate_limit(
        self,
        key: str,
        max_requests: int | None = None,
        window_seconds: int | None = None,
    ) -> tuple[bool, str | None]:
        """Check whether a request for *key* is within the rate limit.

        A ``max_requests`` of 0 blocks every request.

        Returns:
            (allowed, error_message) – *allowed* is ``True`` if the request
            should proceed.  *error_message* is ``None`` when allowed, or a
            human-readable explanation when denied.
        """
        max_req = self.default_max_requests if max_requests is None else max_requests
        window = self.default_window_seconds if window_seconds is None else window_seconds

        async with self._lock:
            now = time.monotonic()
            if now - self._last_sweep >= window:
                self._sweep(now - window)
                self._last_sweep = now

            timestamps = self._requests.get(key)
            if timestamps is None:
                timestamps = self._requests[key] = deque()

            while timestamps and timestamps[0] <= now - window:
                timestamps.popleft()

            if len(timestamps) >= max_req:
                if not timestamps:
                    del self._requests[key]
                    return False, f"Rate limit exceeded for '{key}'. Requests are disabled."
                retry_after = int(timestamps[0] + window - now) + 1
                return False, (
                    f"Rate limit exceeded for '{key}'. "
                    f"Max {max_req} requests per {window}s. "
                    f"Retry after {retry_after}s."
                )

            timestamps.append(now)
            return True, None

    def _sweep(self, cutoff: float) -> None:
        """Drop keys whose newest timestamp is at or before *cutoff*."""
        stale = [key for key, ts in self._requests.items() if not ts or ts[-1] <= cutoff]
        for key in stale:
            del self._requests[key]
        if stale:
            logger.debug("rate limiter swept %d stale keys", len(stale))

    async def reset(self, key: str | None = None) -> None:
        """Reset counters.  If *key* is ``None``, reset everything."""
        async with self._lock:
            if key:
                self._requests.pop(key, None)
            else:
                self._requests.clear()


# Module-level singleton shared by the middleware and tests.
rate_limiter = RateLimiter()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject over-limit requests to rate-limited routes with a 429 envelope.

    Settings are read per request, so toggling ``rate_limit_enabled`` or
    ``rate_limit_analyze`` takes effect without rebuilding the app.

    Usage:
        app.add_middleware(RateLimitMiddleware)
    """

    def __init__(self, app: Callable, limiter: RateLimiter | None = None):
        super().__init__(app)
        self.limiter = limiter or rate_limiter

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        prefix = RATE_LIMITED_ROUTES.get((request.method, request.url.path))
        if prefix is None or not settings.rate_limit_enabled:
            return await call_next(request)

        client_host = request.client.host if request.client else "unknown"
        allowed, error_msg = await self.limiter.check_rate_limit(
            f"{prefix}:{client_host}",
            max_requests=settings.rate_limit_analyze,
            window_seconds=ANALYZE_WINDOW_SECONDS,
        )
        if allowed:
            return await call_next(request)

        logger.warning("%s rate limited client=%s", prefix, client_host)
        body = ErrorResponse(
            error=ErrorDetail(
                error_code="RATE_LIMIT_EXCEEDED",
                message=error_msg or "Rate limit exceeded",
                hint=f"Wait before retrying. Limit: {settings.rate_limit_analyze} requests/minute.",
            )
        )
        return JSONResponse(status_code=429, content=body.model_dump())
