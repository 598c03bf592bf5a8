"""Shared pytest fixtures – sample companies and monthly histories."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
import pytest_asyncio

from finforecast.middleware.rate_limit import rate_limiter
from finforecast.schemas import AnalysisRequest, CompanyProfile, MonthlyRecord
from finforecast.services.months import ENGLISH_MONTHS
from tests.factories import make_history


@pytest.fixture
def anchor() -> date:
    return date(2024, 8, 20)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 8, 20, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def company() -> CompanyProfile:
    return CompanyProfile(
        id="TEST001",
        name="Test Company Ltd.",
        sector="Technology",
        monthly_avg_income=500_000,
        monthly_avg_expense=400_000,
    )


@pytest.fixture
def sample_history() -> list[MonthlyRecord]:
    """Six months, March to August, growing business."""
    return make_history(
        [
            ("March", 450_000, 380_000),
            ("April", 420_000, 350_000),
            ("May", 480_000, 400_000),
            ("June", 550_000, 440_000),
            ("July", 600_000, 480_000),
            ("August", 580_000, 460_000),
        ]
    )


@pytest.fixture
def risky_history() -> list[MonthlyRecord]:
    """Three months of falling income and rising expense."""
    return make_history(
        [
            ("June", 180_000, 200_000),
            ("July", 160_000, 210_000),
            ("August", 150_000, 220_000),
        ]
    )


@pytest.fixture
def flat_year() -> list[MonthlyRecord]:
    """Twelve identical months covering the whole calendar."""
    return make_history([(name, 1_000, 900) for name in ENGLISH_MONTHS])


@pytest.fixture
def sample_request(company, sample_history) -> AnalysisRequest:
    return AnalysisRequest(company=company, historical_data=sample_history)


@pytest.fixture
def sample_payload() -> dict:
    """Raw JSON body as a client would send it."""
    return {
        "company": {
            "id": "TEST001",
            "name": "Test Company Ltd.",
            "sector": "Technology",
            "monthly_avg_income": 500000,
            "monthly_avg_expense": 400000,
        },
        "historical_data": [
            {"month": "March", "income": 450000, "expense": 380000, "net_flow": 70000},
            {"month": "April", "income": 420000, "expense": 350000, "net_flow": 70000},
            {"month": "May", "income": 480000, "expense": 400000, "net_flow": 80000},
            {"month": "June", "income": 550000, "expense": 440000, "net_flow": 110000},
            {"month": "July", "income": 600000, "expense": 480000, "net_flow": 120000},
            {"month": "August", "income": 580000, "expense": 460000, "net_flow": 120000},
        ],
    }


@pytest_asyncio.fixture
async def reset_rate_limiter():
    """Start and end each HTTP test with empty rate-limit windows."""
    await rate_limiter.reset()
    yield
    await rate_limiter.reset()
