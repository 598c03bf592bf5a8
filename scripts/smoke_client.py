"""Manual smoke test against a running server.

Run:
    python -m finforecast.main        # in one terminal
    python -m scripts.smoke_client    # in another

Options:
    --base-url URL   server root (default http://localhost:8080)
    --wait SECONDS   pause before the first request (default 0)
    --risky          also post a loss-making company
"""

from __future__ import annotations

import argparse
import json
import time

import httpx

SAMPLE_REQUEST = {
    "company": {
        "id": "TEST001",
        "name": "Test Company Ltd.",
        "sector": "Technology",
        "monthly_avg_income": 500000,
        "monthly_avg_expense": 400000,
    },
    "historical_data": [
        {"month": "March", "income": 450000, "expense": 380000},
        {"month": "April", "income": 420000, "expense": 350000},
        {"month": "May", "income": 480000, "expense": 400000},
        {"month": "June", "income": 550000, "expense": 440000},
        {"month": "July", "income": 600000, "expense": 480000},
        {"month": "August", "income": 580000, "expense": 460000},
    ],
}

RISKY_REQUEST = {
    "company": {
        "id": "RISK001",
        "name": "Risky Retail Co.",
        "sector": "Retail",
        "monthly_avg_income": 200000,
        "monthly_avg_expense": 220000,
    },
    "historical_data": [
        {"month": "June", "income": 180000, "expense": 200000},
        {"month": "July", "income": 160000, "expense": 210000},
        {"month": "August", "income": 150000, "expense": 220000},
    ],
}

CURL_EXAMPLE = """curl -X POST {base_url}/api/analyze \\
  -H "Content-Type: application/json" \\
  -d '{{
    "company": {{
      "id": "MANUAL001",
      "name": "Manual Test Co.",
      "sector": "E-commerce",
      "monthly_avg_income": 300000,
      "monthly_avg_expense": 250000
    }},
    "historical_data": [
      {{"month": "March", "income": 280000, "expense": 230000}},
      {{"month": "April", "income": 320000, "expense": 260000}},
      {{"month": "May", "income": 350000, "expense": 280000}},
      {{"month": "June", "income": 380000, "expense": 300000}}
    ]
  }}'"""


def check_health(client: httpx.Client) -> None:
    print("\n1) Health check")
    try:
        resp = client.get("/api/health")
    except httpx.HTTPError as exc:
        print(f"  FAILED: {exc}")
        return
    print(f"  status={resp.status_code} body={resp.text}")


def analyze(client: httpx.Client) -> None:
    print("\n2) Analyze sample company")
    try:
        resp = client.post("/api/analyze", json=SAMPLE_REQUEST)
    except httpx.HTTPError as exc:
        print(f"  FAILED: {exc}")
        return

    print(f"  status={resp.status_code}")
    if resp.status_code != 200:
        print(f"  error: {resp.text}")
        return

    result = resp.json()
    company = result["company"]
    summary = result["summary"]
    print(f"  company: {company['name']} ({company['sector']})")
    print(f"  growth trend:     {summary['growth_trend']}")
    print(f"  risk level:       {summary['risk_level']}")
    print(f"  cash-flow health: {summary['cash_flow_health']}")
    print(f"  6-month income:   {summary['predicted_total_income']:,.0f}")
    print(f"  6-month expense:  {summary['predicted_total_expense']:,.0f}")
    print(f"  6-month net flow: {summary['predicted_total_net_flow']:,.0f}")

    print("  recommendations:")
    for i, rec in enumerate(summary["recommendations"][:3], start=1):
        print(f"    {i}. {rec}")

    predictions = result["predictions"]
    print("  forecast:")
    for pred in predictions[:4]:
        print(
            f"    {pred['month']}: income {pred['income']:,.0f}, "
            f"expense {pred['expense']:,.0f}, net {pred['net_flow']:,.0f}"
        )
    if len(predictions) > 4:
        print(f"    ... and {len(predictions) - 4} more months")


def analyze_risky(client: httpx.Client) -> None:
    print("\n3) Analyze loss-making company")
    resp = client.post("/api/analyze", json=RISKY_REQUEST)
    if resp.status_code != 200:
        print(f"  FAILED status={resp.status_code}: {resp.text}")
        return
    summary = resp.json()["summary"]
    print(
        f"  risk={summary['risk_level']} trend={summary['growth_trend']} "
        f"health={summary['cash_flow_health']}"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--base-url", default="http://localhost:8080")
    parser.add_argument("--wait", type=float, default=0.0)
    parser.add_argument("--risky", action="store_true")
    args = parser.parse_args()

    print("SME Financial Forecast API - smoke test")
    if args.wait:
        print(f"Waiting {args.wait:.0f}s for the server …")
        time.sleep(args.wait)

    with httpx.Client(base_url=args.base_url, timeout=10.0) as client:
        check_health(client)
        analyze(client)
        if args.risky:
            analyze_risky(client)

    print("\nManual request:")
    print(CURL_EXAMPLE.format(base_url=args.base_url))
    print("\nSample payload:")
    print(json.dumps(SAMPLE_REQUEST, indent=2))
    print("\nDone.")


if __name__ == "__main__":
    main()
