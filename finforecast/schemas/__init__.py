"""Pydantic request/response schemas."""

from finforecast.schemas.common import ErrorDetail, ErrorResponse
from finforecast.schemas.company import CompanyProfile
from finforecast.schemas.financial import MonthlyRecord
from finforecast.schemas.analysis import (
    AnalysisRequest,
    AnalysisSummary,
    CashFlowHealth,
    FinancialAnalysis,
    GrowthTrend,
    RiskLevel,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "CompanyProfile",
    "MonthlyRecord",
    "AnalysisRequest",
    "AnalysisSummary",
    "CashFlowHealth",
    "FinancialAnalysis",
    "GrowthTrend",
    "RiskLevel",
]
