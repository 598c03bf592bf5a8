"""Tests for summary classification, recommendations and full analysis."""

from __future__ import annotations

from datetime import date

import pytest

from finforecast.schemas import (
    AnalysisRequest,
    CashFlowHealth,
    CompanyProfile,
    GrowthTrend,
    MonthlyRecord,
    RiskLevel,
)
from finforecast.services.forecast_service import (
    DECLINE_ACTIONS,
    GROWTH_ACTIONS,
    MAINTAIN_ACTION,
    PROFIT_SHARING_ACTION,
    URGENT_CASH_FLOW_ACTIONS,
    generate_analysis,
    generate_recommendations,
    generate_summary,
    predict_next_months,
)
from tests.factories import make_history


def _flat_forecast(income: float, expense: float) -> list[MonthlyRecord]:
    return make_history([("January", income, expense)] * 6)


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------


def test_sample_historical_totals(sample_history, anchor):
    summary = generate_summary(sample_history, predict_next_months(sample_history, anchor=anchor))
    assert summary.total_historical_income == 3_080_000
    assert summary.total_historical_expense == 2_510_000
    assert summary.total_historical_net_flow == 570_000


def test_predicted_totals_are_sums_of_forecast(sample_history, anchor):
    predictions = predict_next_months(sample_history, anchor=anchor)
    summary = generate_summary(sample_history, predictions)
    assert summary.predicted_total_income == pytest.approx(sum(p.income for p in predictions), abs=0.01)
    assert summary.predicted_total_expense == pytest.approx(sum(p.expense for p in predictions), abs=0.01)
    assert summary.predicted_total_net_flow == pytest.approx(sum(p.net_flow for p in predictions), abs=0.01)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def test_growing_business_is_rising_low_risk_strong(sample_history, anchor):
    summary = generate_summary(sample_history, predict_next_months(sample_history, anchor=anchor))
    assert summary.growth_trend is GrowthTrend.RISING
    assert summary.risk_level is RiskLevel.LOW
    assert summary.cash_flow_health is CashFlowHealth.STRONG
    assert summary.recommendations == [*GROWTH_ACTIONS, PROFIT_SHARING_ACTION]


def test_loss_making_business_is_high_risk(risky_history, anchor):
    predictions = predict_next_months(risky_history, anchor=anchor)
    summary = generate_summary(risky_history, predictions)
    assert summary.predicted_total_net_flow < 0
    assert summary.risk_level is RiskLevel.HIGH
    assert summary.cash_flow_health is CashFlowHealth.AT_RISK
    assert summary.recommendations == list(URGENT_CASH_FLOW_ACTIONS)


def test_shrinking_forecast_is_falling(flat_year, anchor):
    """A full flat year projects six months: half the historical income."""
    summary = generate_summary(flat_year, predict_next_months(flat_year, anchor=anchor))
    assert summary.growth_trend is GrowthTrend.FALLING
    assert summary.risk_level is RiskLevel.MEDIUM
    assert summary.cash_flow_health is CashFlowHealth.NORMAL
    assert summary.recommendations == [*DECLINE_ACTIONS, PROFIT_SHARING_ACTION]


@pytest.mark.parametrize(
    "pred_income, expected",
    [
        (1_101, GrowthTrend.RISING),
        (1_100, GrowthTrend.STABLE),
        (1_000, GrowthTrend.STABLE),
        (900, GrowthTrend.STABLE),
        (899, GrowthTrend.FALLING),
    ],
)
def test_growth_trend_thresholds(pred_income, expected):
    historical = make_history([("January", 1_000, 0)])
    predicted = make_history([("February", pred_income, 0)])
    assert generate_summary(historical, predicted).growth_trend is expected


@pytest.mark.parametrize(
    "pred_net, expected",
    [
        (-1, RiskLevel.HIGH),
        (0, RiskLevel.MEDIUM),
        (1_200, RiskLevel.MEDIUM),
        (1_201, RiskLevel.LOW),
    ],
)
def test_risk_level_thresholds(pred_net, expected):
    historical = make_history([("January", 2_000, 1_000)])
    if pred_net >= 0:
        predicted = make_history([("February", pred_net, 0)])
    else:
        predicted = make_history([("February", 0, -pred_net)])
    assert generate_summary(historical, predicted).risk_level is expected


@pytest.mark.parametrize(
    "monthly_net, expected",
    [
        (-10, CashFlowHealth.AT_RISK),
        (100, CashFlowHealth.NORMAL),
        (150, CashFlowHealth.NORMAL),
        (151, CashFlowHealth.STRONG),
    ],
)
def test_cash_flow_health_thresholds(monthly_net, expected):
    """Historical average net is 100, so Strong needs > 150 per month."""
    historical = make_history([("January", 300, 200), ("February", 300, 200)])
    if monthly_net >= 0:
        predicted = _flat_forecast(monthly_net, 0)
    else:
        predicted = _flat_forecast(0, -monthly_net)
    assert generate_summary(historical, predicted).cash_flow_health is expected


def test_negative_prediction_always_high_risk():
    historical = make_history([("January", 10, 1_000_000)])
    summary = generate_summary(historical, _flat_forecast(100, 200))
    assert summary.risk_level is RiskLevel.HIGH


def test_empty_history_health_is_guarded():
    """No historical baseline: positive forecast is Normal, never a division error."""
    summary = generate_summary([], _flat_forecast(1_000, 100))
    assert summary.cash_flow_health is CashFlowHealth.NORMAL
    assert summary.total_historical_income == 0
    assert summary.growth_trend is GrowthTrend.RISING
    assert summary.risk_level is RiskLevel.LOW


def test_empty_history_negative_forecast_is_at_risk():
    summary = generate_summary([], _flat_forecast(0, 100))
    assert summary.cash_flow_health is CashFlowHealth.AT_RISK


def test_all_zero_input_gets_fallback_recommendation(anchor):
    history = make_history([("May", 0, 0)])
    summary = generate_summary(history, predict_next_months(history, anchor=anchor))
    assert summary.growth_trend is GrowthTrend.STABLE
    assert summary.risk_level is RiskLevel.MEDIUM
    assert summary.cash_flow_health is CashFlowHealth.NORMAL
    assert summary.recommendations == [MAINTAIN_ACTION]


def test_summary_is_idempotent(sample_history, anchor):
    predictions = predict_next_months(sample_history, anchor=anchor)
    first = generate_summary(sample_history, predictions)
    second = generate_summary(sample_history, predictions)
    assert first == second
    assert first.model_dump_json() == second.model_dump_json()


def test_summary_totals_rounded():
    historical = make_history([("January", 0.005, 0.001), ("February", 10.111, 0.0)])
    summary = generate_summary(historical, _flat_forecast(1.0 / 3, 0))
    assert summary.predicted_total_income == 2.0
    assert round(summary.total_historical_income, 2) == summary.total_historical_income


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


def test_recommendations_fallback_only():
    recs = generate_recommendations(GrowthTrend.STABLE, RiskLevel.MEDIUM, CashFlowHealth.NORMAL, 0)
    assert recs == [MAINTAIN_ACTION]


def test_recommendations_all_rules_in_order():
    recs = generate_recommendations(GrowthTrend.FALLING, RiskLevel.HIGH, CashFlowHealth.STRONG, 10)
    assert recs == [
        *URGENT_CASH_FLOW_ACTIONS,
        *DECLINE_ACTIONS,
        *GROWTH_ACTIONS,
        PROFIT_SHARING_ACTION,
    ]
    assert MAINTAIN_ACTION not in recs


def test_recommendations_profit_sharing_alone():
    recs = generate_recommendations(GrowthTrend.RISING, RiskLevel.LOW, CashFlowHealth.NORMAL, 0.01)
    assert recs == [PROFIT_SHARING_ACTION]


@pytest.mark.parametrize("trend", list(GrowthTrend))
@pytest.mark.parametrize("risk", list(RiskLevel))
@pytest.mark.parametrize("health", list(CashFlowHealth))
@pytest.mark.parametrize("net", [-1.0, 0.0, 1.0])
def test_recommendations_never_empty(trend, risk, health, net):
    assert generate_recommendations(trend, risk, health, net)


# ---------------------------------------------------------------------------
# Full analysis
# ---------------------------------------------------------------------------


def test_generate_analysis_composition(sample_request, fixed_now):
    analysis = generate_analysis(sample_request, now=fixed_now)

    assert analysis.company == sample_request.company
    assert analysis.historical_data == sample_request.historical_data
    assert len(analysis.predictions) == 6
    assert analysis.created_at == fixed_now
    assert analysis.summary.total_historical_income == 3_080_000
    assert analysis.summary.total_historical_net_flow == 570_000


def test_generate_analysis_anchor_defaults_to_now(sample_request, fixed_now):
    analysis = generate_analysis(sample_request, now=fixed_now)
    assert analysis.predictions[0].month == "September"


def test_generate_analysis_explicit_anchor(sample_request, fixed_now):
    analysis = generate_analysis(sample_request, now=fixed_now, anchor=date(2024, 12, 1))
    assert analysis.predictions[0].month == "January"


def test_generate_analysis_each_call_is_fresh(sample_request, fixed_now):
    a = generate_analysis(sample_request, now=fixed_now)
    b = generate_analysis(sample_request, now=fixed_now)
    assert a == b
    assert a is not b
    assert a.predictions is not b.predictions


def test_generate_analysis_passes_company_through():
    company = CompanyProfile(id="X1", name="Zero Co", sector="Services")
    request = AnalysisRequest(company=company, historical_data=make_history([("March", 0, 0)]))
    analysis = generate_analysis(request)
    assert analysis.company.monthly_avg_income == 0.0
    assert analysis.summary.recommendations == [MAINTAIN_ACTION]
