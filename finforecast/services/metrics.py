"""Pure math / metric helpers (no I/O)."""

from __future__ import annotations

from typing import Sequence

from finforecast.schemas.financial import MonthlyRecord
from finforecast.services.months import DEFAULT_SEASONAL_FACTORS, ENGLISH_MONTHS, month_index

DEFAULT_GROWTH_RATE = 0.02
MIN_GROWTH_RATE = -0.20
MAX_GROWTH_RATE = 0.30

GROWTH_FIELDS = ("income", "expense")


def round_currency(value: float) -> float:
    """Round to cents."""
    return round(value, 2)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def growth_rate(records: Sequence[MonthlyRecord], field: str) -> float:
    """Average month-over-month growth of *field* ("income" or "expense").

    Periods whose previous value is not strictly positive are skipped.
    Returns ``DEFAULT_GROWTH_RATE`` for fewer than two points or when no
    period is usable; otherwise the average clamped to
    [``MIN_GROWTH_RATE``, ``MAX_GROWTH_RATE``].
    """
    if field not in GROWTH_FIELDS:
        raise ValueError(f"field must be one of {GROWTH_FIELDS}, got {field!r}")
    if len(records) < 2:
        return DEFAULT_GROWTH_RATE

    total_growth = 0.0
    valid_periods = 0
    for prev, curr in zip(records, records[1:]):
        previous = getattr(prev, field)
        if previous > 0:
            total_growth += (getattr(curr, field) - previous) / previous
            valid_periods += 1

    if valid_periods == 0:
        return DEFAULT_GROWTH_RATE
    return clamp(total_growth / valid_periods, MIN_GROWTH_RATE, MAX_GROWTH_RATE)


def seasonal_factors(
    records: Sequence[MonthlyRecord],
    month_names: tuple[str, ...] = ENGLISH_MONTHS,
) -> tuple[float, ...]:
    """Per-calendar-month income multipliers (index 0 = first month name).

    With fewer than 12 records the default table is returned. Otherwise each
    observed month gets ``month_avg / mean_of_month_avgs``; months without
    observations and records with unknown names fall back to the defaults.
    """
    factors = list(DEFAULT_SEASONAL_FACTORS)
    if len(records) < 12:
        return tuple(factors)

    sums = [0.0] * 12
    counts = [0] * 12
    for record in records:
        idx = month_index(record.month, month_names)
        if idx is None:
            continue
        sums[idx] += record.income
        counts[idx] += 1

    averages = {i: sums[i] / counts[i] for i in range(12) if counts[i] > 0}
    if not averages:
        return tuple(factors)

    grand_mean = sum(averages.values()) / len(averages)
    if grand_mean == 0:
        return tuple(factors)

    for i, avg in averages.items():
        factors[i] = avg / grand_mean
    return tuple(factors)
