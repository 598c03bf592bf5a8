"""Monthly financial record schema."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Upper bound on a submitted month's amount; keeps six compounded forecast
# steps far below float overflow. Enforced on requests, not on forecasts.
MAX_AMOUNT = 1e15


class MonthlyRecord(BaseModel):
    """One month of income and expense.

    ``net_flow`` is accepted from input but never trusted; callers pass records
    through ``normalize_history`` before forecasting.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    month: str
    income: float = Field(..., ge=0)
    expense: float = Field(..., ge=0)
    net_flow: float = 0.0
