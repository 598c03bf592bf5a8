"""FastAPI application – HTTP transport around the forecast engine.

Run with:
    python -m finforecast.main
    # → http://localhost:8080/api/health
    # → http://localhost:8080/docs  (Swagger UI)
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from finforecast.config import settings
from finforecast.middleware.rate_limit import RateLimitMiddleware
from finforecast.middleware.security import (
    CORS_ALLOWED_HEADERS,
    CORS_ALLOWED_METHODS,
    SecurityHeadersMiddleware,
    parse_cors_origins,
)
from finforecast.schemas import AnalysisRequest, ErrorDetail, ErrorResponse, FinancialAnalysis
from finforecast.services.forecast_service import generate_analysis, normalize_history
from finforecast.services.months import names_for_locale

logger = logging.getLogger("finforecast.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "%s starting (env=%s, locale=%s)",
        settings.service_name,
        settings.app_env,
        settings.month_locale,
    )
    yield
    logger.info("%s shutting down", settings.service_name)


app = FastAPI(
    title=settings.service_name,
    description="Six-month income/expense forecast and cash-flow assessment for small businesses.",
    version=settings.service_version,
    lifespan=lifespan,
)

# Innermost first: 429s still pass through CORS and security headers.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=parse_cors_origins(settings.allowed_origins),
    allow_methods=CORS_ALLOWED_METHODS,
    allow_headers=CORS_ALLOWED_HEADERS,
)
app.add_middleware(SecurityHeadersMiddleware)


# ── Helpers ───────────────────────────────────────────────────────────────────


def _error_response(status_code: int, code: str, message: str, hint: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(error_code=code, message=message, hint=hint))
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    logger.warning("%s %s rejected: %s", request.method, request.url.path, message)
    return _error_response(
        400,
        "INVALID_INPUT",
        message,
        hint="Send a JSON body with 'company' and a non-empty 'historical_data' array.",
    )


# ── Service metadata & health ─────────────────────────────────────────────────


@app.get("/")
async def home():
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "endpoints": {
            "analyze": "POST /api/analyze",
            "health": "GET /api/health",
        },
        "status": "running",
        "time": _now_iso(),
    }


@app.get("/api/health")
async def health():
    return {
        "status": "healthy",
        "time": _now_iso(),
        "service": settings.service_name,
    }


# ── Analysis ──────────────────────────────────────────────────────────────────


@app.post(
    "/api/analyze",
    response_model=FinancialAnalysis,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
async def analyze(payload: AnalysisRequest, request: Request):
    t0 = time.perf_counter()

    normalized = payload.model_copy(
        update={"historical_data": normalize_history(payload.historical_data)}
    )
    analysis = generate_analysis(normalized, month_names=names_for_locale(settings.month_locale))

    elapsed = round((time.perf_counter() - t0) * 1000, 2)
    logger.info(
        "analyze company=%s months=%d request_id=%s ms=%.1f",
        payload.company.id,
        len(payload.historical_data),
        getattr(request.state, "request_id", "-"),
        elapsed,
    )
    return analysis
