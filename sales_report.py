#!/usr/bin/env python
"""
Sales Report Script

Fetches the analytics reports from a running ABT Analytics API and
prints a plain-text summary.

Usage:
    python sales_report.py --url http://localhost:8080
    python sales_report.py --limit 10
    python sales_report.py --year 2024
    python sales_report.py --output sales_report.json
"""
import argparse
import json
import sys
from decimal import Decimal
from typing import Any, Dict, List, Optional

import httpx


class SalesReporter:
    """Client for the analytics endpoints with text report rendering."""

    def __init__(
        self,
        api_url: str = "http://localhost:8080",
        transport: Optional[httpx.BaseTransport] = None,
        timeout: int = 30,
    ):
        """
        Initialize reporter.

        Args:
            api_url: Base URL of the ABT Analytics API
            transport: Optional httpx transport (used by tests)
            timeout: Request timeout in seconds
        """
        self.api_url = api_url.rstrip("/")
        self.transport = transport
        self.timeout = timeout

    def fetch_reports(
        self,
        limit: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Fetch health status and all four reports.

        Raises:
            httpx.HTTPError: If any request fails
        """
        limit_params = {"limit": limit} if limit is not None else {}
        year_params = {"year": year} if year is not None else {}

        with httpx.Client(
            base_url=f"{self.api_url}/api/v1",
            timeout=self.timeout,
            transport=self.transport,
        ) as client:

            def get(path: str, params: Dict[str, Any]) -> Any:
                response = client.get(path, params=params)
                response.raise_for_status()
                return response.json()

            return {
                "status": get("/health", {}).get("status"),
                "country_revenue": get("/analytics/country-revenue", {}),
                "top_products": get("/analytics/top-products", limit_params),
                "monthly_sales": get("/analytics/monthly-sales", year_params),
                "top_regions": get("/analytics/top-regions", limit_params),
            }

    @staticmethod
    def format_money(value: Any) -> str:
        """Format a decimal string as money with thousands separators."""
        return f"{Decimal(str(value)):,.2f}"

    def generate_report(self, data: Dict[str, Any]) -> str:
        """
        Render fetched reports as text.

        Args:
            data: Output of ``fetch_reports``

        Returns:
            Formatted report string
        """
        report: List[str] = []
        report.append("=" * 60)
        report.append("ABT SALES ANALYTICS")
        report.append("=" * 60)

        if data.get("status") != "ok":
            report.append("⚠️  API is running in degraded (demo) mode")

        sections = [
            ("🌍 REVENUE BY COUNTRY", "country_revenue", "country", "transactionCount", "txns"),
            ("🏆 TOP PRODUCTS", "top_products", "product", "totalQuantity", "units"),
            ("🗺️  TOP REGIONS", "top_regions", "region", "transactionCount", "txns"),
            ("📅 MONTHLY SALES", "monthly_sales", "yearMonth", "transactionCount", "txns"),
        ]
        for title, key, label_field, count_field, unit in sections:
            rows = data.get(key) or []
            report.append("")
            report.append(title)
            report.append("-" * 60)
            if not rows:
                report.append("No data available")
                continue
            for i, row in enumerate(rows, 1):
                report.append(
                    f"{i:>3}. {row[label_field]:<24} "
                    f"{self.format_money(row['totalRevenue']):>16} "
                    f"({row[count_field]:,} {unit})"
                )

        report.append("")
        report.append("=" * 60)
        return "\n".join(report)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Print a sales analytics report from the ABT Analytics API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--url",
        type=str,
        default="http://localhost:8080",
        help="Base API URL (default: http://localhost:8080)"
    )

    parser.add_argument(
        "--limit",
        type=int,
        help="Number of top products and regions (default: server default)"
    )

    parser.add_argument(
        "--year",
        type=int,
        help="Restrict monthly sales to one year"
    )

    parser.add_argument(
        "--output",
        type=str,
        help="Save raw report data to JSON file"
    )

    args = parser.parse_args()

    reporter = SalesReporter(api_url=args.url)

    print("🔍 Loading sales reports...")

    try:
        data = reporter.fetch_reports(limit=args.limit, year=args.year)
    except httpx.HTTPError as e:
        print(f"❌ Error loading reports: {e}", file=sys.stderr)
        sys.exit(1)

    print(reporter.generate_report(data))

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        print(f"\n💾 Data saved to: {args.output}")


if __name__ == "__main__":
    main()
