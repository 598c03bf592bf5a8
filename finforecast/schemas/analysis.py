"""Analysis request/response Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from finforecast.schemas.company import CompanyProfile
from finforecast.schemas.financial import MAX_AMOUNT, MonthlyRecord


class GrowthTrend(str, Enum):
    RISING = "Rising"
    STABLE = "Stable"
    FALLING = "Falling"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class CashFlowHealth(str, Enum):
    STRONG = "Strong"
    NORMAL = "Normal"
    AT_RISK = "At-Risk"


class AnalysisSummary(BaseModel):
    """Totals, categorical assessment and recommendations."""

    model_config = ConfigDict(frozen=True)

    total_historical_income: float
    total_historical_expense: float
    total_historical_net_flow: float
    predicted_total_income: float
    predicted_total_expense: float
    predicted_total_net_flow: float
    growth_trend: GrowthTrend
    risk_level: RiskLevel
    cash_flow_health: CashFlowHealth
    recommendations: list[str]


class FinancialAnalysis(BaseModel):
    """Complete response payload for one analysis request."""

    model_config = ConfigDict(frozen=True)

    company: CompanyProfile
    historical_data: list[MonthlyRecord]
    predictions: list[MonthlyRecord]
    summary: AnalysisSummary
    created_at: datetime


class AnalysisRequest(BaseModel):
    """Body of ``POST /api/analyze``."""

    company: CompanyProfile
    historical_data: list[MonthlyRecord] = Field(
        ...,
        min_length=1,
        description="Chronological monthly records; net_flow is recomputed server-side.",
    )

    @field_validator("historical_data")
    @classmethod
    def _amounts_within_bound(cls, records: list[MonthlyRecord]) -> list[MonthlyRecord]:
        for index, record in enumerate(records):
            if record.income > MAX_AMOUNT or record.expense > MAX_AMOUNT:
                raise ValueError(f"record {index}: income and expense must not exceed {MAX_AMOUNT:.0e}")
        return records
