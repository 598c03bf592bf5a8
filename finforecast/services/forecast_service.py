"""Forecast and summary service.

Turns a chronological list of monthly records into a six-month projection
and a qualitative assessment. Every function here is pure: the anchor date,
month calendar and timestamp are parameters, so the same input always yields
the same output.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Sequence

from finforecast.schemas.analysis import (
    AnalysisRequest,
    AnalysisSummary,
    CashFlowHealth,
    FinancialAnalysis,
    GrowthTrend,
    RiskLevel,
)
from finforecast.schemas.financial import MonthlyRecord
from finforecast.services.metrics import growth_rate, round_currency, seasonal_factors
from finforecast.services.months import ENGLISH_MONTHS, month_after

logger = logging.getLogger("finforecast.services.forecast")

FORECAST_MONTHS = 6

RISING_THRESHOLD = 1.10
FALLING_THRESHOLD = 0.90
LOW_RISK_THRESHOLD = 1.20
STRONG_HEALTH_THRESHOLD = 1.5

URGENT_CASH_FLOW_ACTIONS = (
    "Build an urgent cash-flow plan",
    "Consider cutting non-essential expenses",
    "Explore alternative financing sources",
)
DECLINE_ACTIONS = (
    "Develop new marketing strategies",
    "Run a cost optimization review",
    "Review your product and service portfolio",
)
GROWTH_ACTIONS = (
    "Evaluate investment opportunities",
    "Plan growth strategies",
    "Build an emergency fund",
)
PROFIT_SHARING_ACTION = "Consider a profit-sharing plan"
MAINTAIN_ACTION = "Focus on maintaining current performance"


def normalize_history(records: Sequence[MonthlyRecord]) -> list[MonthlyRecord]:
    """Return copies of *records* with ``net_flow`` recomputed as income - expense."""
    return [r.model_copy(update={"net_flow": r.income - r.expense}) for r in records]


def _volatility(step: int) -> float:
    # 0.95, 1.00, 1.05 repeating
    return 0.95 + (step % 3) * 0.05


def predict_next_months(
    records: Sequence[MonthlyRecord],
    *,
    anchor: date,
    month_names: tuple[str, ...] = ENGLISH_MONTHS,
) -> list[MonthlyRecord]:
    """Project the six months following *records*.

    Seasonal indexing continues from ``len(records)``; labels count forward
    from *anchor*. An empty history yields six zero-valued months.
    """
    if not records:
        return [
            MonthlyRecord(month=month_after(anchor, i + 1, month_names), income=0.0, expense=0.0)
            for i in range(FORECAST_MONTHS)
        ]

    income_growth = growth_rate(records, "income")
    expense_growth = growth_rate(records, "expense")
    factors = seasonal_factors(records, month_names)

    last = records[-1]
    history_len = len(records)

    predictions = []
    for i in range(FORECAST_MONTHS):
        factor = factors[(history_len + i) % 12]
        income = last.income * (1 + income_growth) ** (i + 1) * factor
        expense = last.expense * (1 + expense_growth) ** (i + 1)

        volatility = _volatility(i)
        income = round_currency(income * volatility)
        expense = round_currency(expense * (2.0 - volatility))

        predictions.append(
            MonthlyRecord(
                month=month_after(anchor, i + 1, month_names),
                income=income,
                expense=expense,
                net_flow=round_currency(income - expense),
            )
        )
    return predictions


def generate_recommendations(
    growth: GrowthTrend,
    risk: RiskLevel,
    health: CashFlowHealth,
    predicted_net_flow: float,
) -> list[str]:
    """Ordered advice list; each rule appends independently."""
    recommendations: list[str] = []

    if risk is RiskLevel.HIGH:
        recommendations.extend(URGENT_CASH_FLOW_ACTIONS)
    if growth is GrowthTrend.FALLING:
        recommendations.extend(DECLINE_ACTIONS)
    if health is CashFlowHealth.STRONG:
        recommendations.extend(GROWTH_ACTIONS)
    if predicted_net_flow > 0:
        recommendations.append(PROFIT_SHARING_ACTION)

    if not recommendations:
        recommendations.append(MAINTAIN_ACTION)
    return recommendations


def _classify_trend(hist_income: float, pred_income: float) -> GrowthTrend:
    if pred_income > hist_income * RISING_THRESHOLD:
        return GrowthTrend.RISING
    if pred_income < hist_income * FALLING_THRESHOLD:
        return GrowthTrend.FALLING
    return GrowthTrend.STABLE


def _classify_risk(hist_net: float, pred_net: float) -> RiskLevel:
    if pred_net < 0:
        return RiskLevel.HIGH
    if pred_net > hist_net * LOW_RISK_THRESHOLD:
        return RiskLevel.LOW
    return RiskLevel.MEDIUM


def _classify_health(hist_net: float, hist_count: int, pred_net: float) -> CashFlowHealth:
    avg_pred_net = pred_net / FORECAST_MONTHS
    if avg_pred_net < 0:
        return CashFlowHealth.AT_RISK
    # No history means no baseline to beat.
    if hist_count > 0 and avg_pred_net > hist_net / hist_count * STRONG_HEALTH_THRESHOLD:
        return CashFlowHealth.STRONG
    return CashFlowHealth.NORMAL


def generate_summary(
    historical: Sequence[MonthlyRecord],
    predicted: Sequence[MonthlyRecord],
) -> AnalysisSummary:
    """Aggregate totals and classify trend, risk and cash-flow health.

    Thresholds are applied to the raw sums; reported totals are rounded.
    """
    hist_income = sum(r.income for r in historical)
    hist_expense = sum(r.expense for r in historical)
    hist_net = sum(r.net_flow for r in historical)

    pred_income = sum(r.income for r in predicted)
    pred_expense = sum(r.expense for r in predicted)
    pred_net = sum(r.net_flow for r in predicted)

    trend = _classify_trend(hist_income, pred_income)
    risk = _classify_risk(hist_net, pred_net)
    health = _classify_health(hist_net, len(historical), pred_net)

    return AnalysisSummary(
        total_historical_income=round_currency(hist_income),
        total_historical_expense=round_currency(hist_expense),
        total_historical_net_flow=round_currency(hist_net),
        predicted_total_income=round_currency(pred_income),
        predicted_total_expense=round_currency(pred_expense),
        predicted_total_net_flow=round_currency(pred_net),
        growth_trend=trend,
        risk_level=risk,
        cash_flow_health=health,
        recommendations=generate_recommendations(trend, risk, health, pred_net),
    )


def generate_analysis(
    request: AnalysisRequest,
    *,
    month_names: tuple[str, ...] = ENGLISH_MONTHS,
    now: datetime | None = None,
    anchor: date | None = None,
) -> FinancialAnalysis:
    """Build the full analysis for *request*.

    ``now`` defaults to the current UTC time and is stamped as ``created_at``;
    ``anchor`` (the month forecast labels count from) defaults to ``now.date()``.
    """
    now = now or datetime.now(timezone.utc)
    anchor = anchor or now.date()

    predictions = predict_next_months(request.historical_data, anchor=anchor, month_names=month_names)
    summary = generate_summary(request.historical_data, predictions)
    logger.debug(
        "analysis company=%s months=%d trend=%s risk=%s health=%s",
        request.company.id,
        len(request.historical_data),
        summary.growth_trend.value,
        summary.risk_level.value,
        summary.cash_flow_health.value,
    )

    return FinancialAnalysis(
        company=request.company,
        historical_data=list(request.historical_data),
        predictions=predictions,
        summary=summary,
        created_at=now,
    )
