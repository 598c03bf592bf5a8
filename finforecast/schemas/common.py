"""Shared error envelope returned by the HTTP layer."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Structured error returned when a request is rejected."""

    error_code: str
    message: str
    hint: str | None = None


class ErrorResponse(BaseModel):
    """Body of every non-2xx JSON response."""

    error: ErrorDetail
