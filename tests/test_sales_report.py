"""Tests for the sales report script."""
import httpx
import pytest

from sales_report import SalesReporter

REPORTS = {
    "/api/v1/health": {"status": "ok"},
    "/api/v1/analytics/country-revenue": [
        {"country": "CA", "totalRevenue": "200.00", "transactionCount": 1},
        {"country": "US", "totalRevenue": "150.00", "transactionCount": 2},
    ],
    "/api/v1/analytics/top-products": [
        {"product": "Gadget", "totalRevenue": "200.00", "totalQuantity": 3},
    ],
    "/api/v1/analytics/monthly-sales": [
        {"yearMonth": "2024-01", "totalRevenue": "150.00", "transactionCount": 2},
    ],
    "/api/v1/analytics/top-regions": [
        {"region": "West", "totalRevenue": "1300.50", "transactionCount": 2},
    ],
}


def _transport(seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request.url)
        body = REPORTS.get(request.url.path)
        if body is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        return httpx.Response(200, json=body)

    return httpx.MockTransport(handler)


class TestFetchReports:
    """Tests for report fetching."""

    def test_fetches_all_reports(self):
        """Health and all four reports are fetched."""
        data = SalesReporter("http://api.test", transport=_transport()).fetch_reports()

        assert data["status"] == "ok"
        assert data["country_revenue"] == REPORTS["/api/v1/analytics/country-revenue"]
        assert data["top_regions"][0]["region"] == "West"

    def test_passes_limit_and_year(self):
        """Limit and year are forwarded as query parameters."""
        seen = []
        SalesReporter("http://api.test/", transport=_transport(seen)).fetch_reports(
            limit=3, year=2024
        )

        by_path = {url.path: url.params for url in seen}
        assert by_path["/api/v1/analytics/top-products"]["limit"] == "3"
        assert by_path["/api/v1/analytics/top-regions"]["limit"] == "3"
        assert by_path["/api/v1/analytics/monthly-sales"]["year"] == "2024"
        assert "limit" not in by_path["/api/v1/analytics/country-revenue"]

    def test_http_error_raised(self):
        """HTTP errors propagate to the caller."""
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        with pytest.raises(httpx.HTTPError):
            SalesReporter("http://api.test", transport=transport).fetch_reports()


class TestGenerateReport:
    """Tests for text report rendering."""

    def test_report_lists_rows(self):
        """The report lists every row returned."""
        reporter = SalesReporter("http://api.test", transport=_transport())
        report = reporter.generate_report(reporter.fetch_reports())

        assert "ABT SALES ANALYTICS" in report
        assert "CA" in report
        assert "200.00" in report
        assert "1,300.50" in report
        assert "(3 units)" in report
        assert "2024-01" in report
        assert "degraded" not in report

    def test_degraded_and_empty(self):
        """Degraded status and empty reports are called out."""
        report = SalesReporter().generate_report({"status": "degraded"})

        assert "degraded (demo) mode" in report
        assert report.count("No data available") == 4

    def test_format_money(self):
        """Money is printed with thousands separators and cents."""
        assert SalesReporter.format_money("1234567.5") == "1,234,567.50"
        assert SalesReporter.format_money("0") == "0.00"
