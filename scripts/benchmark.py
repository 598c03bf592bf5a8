"""Performance benchmarks for the forecast engine.

Run:
    python -m scripts.benchmark
"""

from __future__ import annotations

import time
from datetime import date

from finforecast.schemas import AnalysisRequest, CompanyProfile, MonthlyRecord
from finforecast.services.forecast_service import (
    generate_analysis,
    normalize_history,
    predict_next_months,
)
from finforecast.services.months import ENGLISH_MONTHS


def _history(months: int) -> list[MonthlyRecord]:
    return normalize_history(
        [
            MonthlyRecord(
                month=ENGLISH_MONTHS[i % 12],
                income=400_000 + (i % 12) * 15_000,
                expense=320_000 + (i % 7) * 9_000,
            )
            for i in range(months)
        ]
    )


def _bench(label: str, fn, iterations: int = 1000) -> float:
    """Call *fn* *iterations* times and print average wall-clock ms."""
    fn()  # warm up

    start = time.perf_counter()
    for _ in range(iterations):
        fn()
    elapsed = time.perf_counter() - start

    avg_ms = elapsed / iterations * 1000
    print(f"  {label}: {avg_ms:.4f} ms avg ({iterations} iterations)")
    return avg_ms


def main():
    print("Running benchmarks …\n")
    anchor = date(2024, 9, 1)
    company = CompanyProfile(id="BENCH", name="Bench Co", sector="Testing")

    for months in (6, 24, 120):
        history = _history(months)
        _bench(
            f"predict_next_months({months} months)",
            lambda h=history: predict_next_months(h, anchor=anchor),
        )

        request = AnalysisRequest(company=company, historical_data=history)
        _bench(
            f"generate_analysis({months} months)",
            lambda r=request: generate_analysis(r, anchor=anchor),
        )

    print("\nDone.")


if __name__ == "__main__":
    main()
