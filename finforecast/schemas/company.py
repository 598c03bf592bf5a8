"""Company-related Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CompanyProfile(BaseModel):
    """Company profile echoed back in the analysis; not used in forecast math."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str
    name: str
    sector: str
    monthly_avg_income: float = 0.0
    monthly_avg_expense: float = 0.0
