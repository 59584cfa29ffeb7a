"""Tests for dashboard and portfolio aggregation."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from app.services.reporting import (
    build_dashboard_summary,
    build_portfolio_report,
    health_distribution,
    monthly_premium_trend,
)

TODAY = date(2025, 11, 15)


def make_policy(premium, mode="Monthly", due_date=None):
    return SimpleNamespace(premium=Decimal(str(premium)), mode=mode, due_date=due_date)


class TestHealthDistribution:
    """Tests for counting policies by health."""

    def test_counts_every_bucket(self) -> None:
        policies = [
            make_policy(100, due_date=date(2025, 11, 1)),
            make_policy(100, due_date=date(2025, 11, 15)),
            make_policy(100, due_date=date(2025, 11, 22)),
            make_policy(100, due_date=date(2025, 12, 31)),
            make_policy(100, due_date=None),
        ]

        assert health_distribution(policies, TODAY) == {
            "on_track": 2,
            "due_soon": 2,
            "overdue": 1,
        }

    def test_empty(self) -> None:
        assert health_distribution([], TODAY) == {"on_track": 0, "due_soon": 0, "overdue": 0}


class TestMonthlyPremiumTrend:
    """Tests for the premium-due trend by calendar month."""

    def test_sums_by_due_month_in_order(self) -> None:
        policies = [
            make_policy(500, due_date=date(2025, 12, 3)),
            make_policy(1000, due_date=date(2025, 11, 20)),
            make_policy(250, due_date=date(2025, 11, 2)),
        ]

        assert monthly_premium_trend(policies, months=6) == [
            {"month": "2025-11", "label": "Nov 2025", "premium": 1250.0},
            {"month": "2025-12", "label": "Dec 2025", "premium": 500.0},
        ]

    def test_keeps_latest_months_only(self) -> None:
        policies = [make_policy(m * 100, due_date=date(2025, m, 1)) for m in range(1, 10)]

        trend = monthly_premium_trend(policies, months=6)

        assert [t["month"] for t in trend] == [
            "2025-04", "2025-05", "2025-06", "2025-07", "2025-08", "2025-09",
        ]
        assert trend[0]["premium"] == 400.0

    def test_months_are_those_present_in_data(self) -> None:
        policies = [
            make_policy(100, due_date=date(2024, 12, 10)),
            make_policy(200, due_date=date(2025, 6, 10)),
        ]

        trend = monthly_premium_trend(policies, months=6)

        assert [t["label"] for t in trend] == ["Dec 2024", "Jun 2025"]

    def test_skips_policies_without_due_date(self) -> None:
        assert monthly_premium_trend([make_policy(100)], months=6) == []

    def test_default_window_from_settings(self) -> None:
        policies = [make_policy(100, due_date=date(2025, m, 1)) for m in range(1, 13)]
        assert len(monthly_premium_trend(policies)) == 6


class TestDashboardSummary:
    """Tests for the dashboard headline numbers."""

    def test_summary(self) -> None:
        policies = [
            make_policy(1000, "Monthly", date(2025, 11, 10)),
            make_policy(3000, "Quarterly", date(2025, 11, 18)),
            make_policy(5000, "Half-Yearly", date(2026, 1, 1)),
            make_policy(12000, "Yearly", date(2026, 3, 1)),
        ]

        summary = build_dashboard_summary(3, policies, TODAY)

        assert summary == {
            "as_of": "2025-11-15",
            "total_customers": 3,
            "total_policies": 4,
            "due_soon_count": 1,
            "overdue_count": 1,
            "on_track_count": 2,
            "on_track_percent": 50,
            "total_annual_premium": 12000.0 + 12000.0 + 10000.0 + 12000.0,
        }

    def test_percent_rounds_to_whole_number(self) -> None:
        policies = [
            make_policy(100, due_date=date(2026, 1, 1)),
            make_policy(100, due_date=date(2026, 1, 1)),
            make_policy(100, due_date=date(2025, 1, 1)),
        ]

        assert build_dashboard_summary(1, policies, TODAY)["on_track_percent"] == 67

    def test_percent_half_rounds_up(self) -> None:
        # 1 of 8 on track is 12.5%
        policies = [make_policy(100, due_date=date(2026, 1, 1))]
        policies += [make_policy(100, due_date=date(2025, 1, 1)) for _ in range(7)]

        assert build_dashboard_summary(1, policies, TODAY)["on_track_percent"] == 13

    def test_empty_book(self) -> None:
        summary = build_dashboard_summary(0, [], TODAY)

        assert summary["total_policies"] == 0
        assert summary["on_track_percent"] == 0
        assert summary["total_annual_premium"] == 0.0


class TestPortfolioReport:
    """Tests for the portfolio report."""

    def test_ignores_unpriced_policies(self) -> None:
        policies = [
            make_policy(1000, "Quarterly", date(2025, 11, 20)),
            make_policy(0, "Monthly", date(2025, 10, 1)),
            make_policy(2400, "Yearly", date(2026, 2, 1)),
        ]

        report = build_portfolio_report(2, policies, TODAY)

        assert report["total_clients"] == 2
        assert report["total_policies"] == 2
        assert report["annual_premium"] == 4000.0 + 2400.0
        assert report["policy_health"] == {"on_track": 1, "due_soon": 1, "overdue": 0}
        assert [t["month"] for t in report["monthly_trend"]] == ["2025-11", "2026-02"]
