"""Security headers middleware and CORS helpers.

Adds OWASP Secure Headers Project recommendations plus a per-request
``X-Request-ID`` to every HTTP response.
"""

from __future__ import annotations

import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from finforecast.config import settings

# CSP permits the Swagger UI assets FastAPI loads from jsdelivr.
SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Content-Security-Policy": (
        "default-src 'self'; "
        "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
        "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
        "img-src 'self' data: https:; "
        "connect-src 'self'; "
        "frame-ancestors 'none'; "
        "base-uri 'self'; "
        "form-action 'self'"
    ),
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": (
        "accelerometer=(), camera=(), geolocation=(), gyroscope=(), "
        "magnetometer=(), microphone=(), payment=(), usb=()"
    ),
}

CORS_ALLOWED_METHODS = ["GET", "POST", "OPTIONS"]
CORS_ALLOWED_HEADERS = ["Content-Type", "Authorization"]


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers and an ``X-Request-ID`` to all responses.

    The request id is also stored on ``request.state.request_id`` so handlers
    can include it in log lines.

    Usage:
        app.add_middleware(SecurityHeadersMiddleware)
    """

    def __init__(self, app: Callable, enabled: bool = True):
        super().__init__(app)
        self.enabled = enabled and settings.enable_security_headers

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)

        if self.enabled:
            for name, value in SECURITY_HEADERS.items():
                response.headers[name] = value
        # Always tagged, even with the other headers disabled
        response.headers["X-Request-ID"] = request_id
        return response


def parse_cors_origins(origins_string: str) -> list[str]:
    """Parse CORS origins from comma-separated string.

    Args:
        origins_string: Comma-separated list of origins, or "*" for all

    Returns:
        List of allowed origins

    Example:
        >>> parse_cors_origins("https://app1.com, https://app2.com")
        ['https://app1.com', 'https://app2.com']

        >>> parse_cors_origins("*")
        ['*']
    """
    if origins_string.strip() == "*":
        return ["*"]

    return [origin.strip() for origin in origins_string.split(",") if origin.strip()]
