"""Report projection tests"""

from datetime import date

import pytest

from student_housing_mcp.models.building_model import SemesterData, YearlyForecastInput
from student_housing_mcp.utils.reports import (
    REPORTS,
    active_dues_report,
    claims_report,
    default_forecast_inputs,
    forecast_report,
    lost_revenue_breakdown,
    maintenance_performance_report,
    maintenance_stats,
    payment_plans_report,
    performance_indicators_report,
    quarterly_report,
    request_report,
    revenue_flow_report,
)
from student_housing_mcp.utils.store import HousingStore
from tests.helpers.shared import NOW, TODAY


def _assert_footer_matches_rows(table):
    assert table.totals is not None
    assert isinstance(table.totals[0], str)
    for index, value in enumerate(table.totals):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            column_sum = sum(row[index] or 0 for row in table.rows)
            if table.columns[index].endswith("%"):
                continue
            assert value == pytest.approx(column_sum)


class TestFooterTotals:
    """Footer row equals the sum of the rows"""

    @pytest.mark.parametrize(
        "name, params",
        [
            ("active_dues", {}),
            ("active_dues", {"view": "upcoming"}),
            ("claims", {}),
            ("claim_history", {}),
            ("payment_plans", {}),
            ("payment_plans", {"completed": True}),
            ("paid_installments", {}),
            ("lost_revenue", {}),
            ("performance_indicators", {}),
            ("quarterly", {}),
            ("revenue_flow", {}),
            ("maintenance_performance", {}),
            ("maintenance_archive", {}),
            ("request", {"kind": "overdue"}),
            ("request", {"kind": "status", "value": "under_maintenance"}),
            ("request", {"kind": "payment_status", "value": "paid"}),
            ("forecast", {}),
        ],
    )
    def test_footer(self, mixed_state, name, params):
        kwargs = dict(params)
        if name in ("active_dues", "claims", "payment_plans", "request"):
            kwargs["today"] = TODAY
        table = REPORTS[name](mixed_state, **kwargs)
        _assert_footer_matches_rows(table)


class TestRevenueReports:
    """Lost revenue, performance, quarterly and revenue flow"""

    def test_lost_revenue_breakdown(self, mixed_state):
        breakdown = lost_revenue_breakdown(mixed_state)
        assert breakdown == {
            "available": 1700,
            "under_maintenance": 3000,
            "office": 3000,
            "remaining_dues": 1700 + 850,
            "scholarship": 0,
            "exempt": 0,
            "maintenance_cost": 250,
        }

    def test_performance_indicators(self, mixed_state):
        table = performance_indicators_report(mixed_state)
        row = table.rows[0]
        assert row[1] == 4 * 1700 + 2 * 3000
        assert row[2] == 1700 + 0 + 850
        assert row[3] == row[1] - row[2]
        # 3 rented out of 5 non-office units
        assert row[4] == 60.0
        assert row[5] == round(100 * 2550 / 12800, 1)

    def test_quarterly_report(self, mixed_state):
        row = quarterly_report(mixed_state).rows[0]
        assert row[0] == "مبنى 1"
        assert row[4:] == [3, 0, 6]

    def test_revenue_flow_excludes_offices(self, mixed_state):
        table = revenue_flow_report(mixed_state)
        assert table.rows[0] == ["الإيراد المحصل", 2550]
        assert "9800" in table.totals[0]
        assert not any("مكتب" in row[0] for row in table.rows)


class TestDuesAndClaims:
    """Active dues, claims and payment plans"""

    def test_overdue_view(self, mixed_state):
        table = active_dues_report(mixed_state, TODAY)
        labels = table.column("المبنى/الغرفة")
        assert labels == ["1 / 2", "1 / 4"]
        assert table.column("مدة التأخير") == [0, (TODAY - date(2025, 2, 15)).days]
        assert table.totals[table.columns.index("المبلغ المتبقي")] == 1700 + 850

    def test_upcoming_view_is_empty_when_all_late(self, mixed_state):
        assert active_dues_report(mixed_state, TODAY, view="upcoming").rows == []

    def test_unknown_view(self, mixed_state):
        with pytest.raises(ValueError):
            active_dues_report(mixed_state, TODAY, view="someday")

    def test_claims_sorted_unclaimed_first(self, mixed_state):
        store = HousingStore(state=mixed_state, clock=lambda: NOW)
        store.log_claim_action(1, "B1-F1-A002", "مطالبة عبر البريد الإلكتروني")
        table = claims_report(store.state, TODAY)
        assert table.column("المبنى/الغرفة") == ["1 / 4", "1 / 2"]
        assert table.rows[1][5] == "مطالبة عبر البريد الإلكتروني"

    def test_active_plans_order(self, mixed_state):
        table = payment_plans_report(mixed_state, TODAY)
        assert table.column("المبنى/الغرفة") == ["1 / 2", "1 / 4"]

    def test_completed_plans(self, mixed_state):
        store = HousingStore(state=mixed_state, clock=lambda: NOW)
        store.archive_completed_plan(1, "B1-F1-A004")
        assert payment_plans_report(store.state, TODAY, completed=True).column("المبنى/الغرفة") == ["1 / 4"]
        assert payment_plans_report(store.state, TODAY).column("المبنى/الغرفة") == ["1 / 2"]


class TestMaintenanceReports:
    """Maintenance statistics"""

    def test_stats(self, mixed_state):
        stats = maintenance_stats(mixed_state)
        assert stats["jobs"] == 1
        assert stats["total_cost"] == 250
        assert stats["average_cost"] == 250
        assert stats["delayed"] == 1
        assert stats["on_time"] == 0
        assert stats["reasons"] == {"دهانات": 1}

    def test_performance_rows(self, mixed_state):
        table = maintenance_performance_report(mixed_state)
        assert table.rows == [["1 / 3", 1, 250, 0, -250, 0, 0, 1]]


class TestRequestReport:
    """request_report filters"""

    def test_status_filter(self, mixed_state):
        table = request_report(mixed_state, "status", "under_maintenance", TODAY)
        assert table.column("المبنى/الغرفة") == ["1 / 1"]
        assert table.column("التكلفة") == [400]

    def test_payment_status_filter(self, mixed_state):
        table = request_report(mixed_state, "payment_status", "deferred", TODAY)
        assert table.column("المبنى/الغرفة") == ["1 / 2"]

    def test_overdue_filter(self, mixed_state):
        table = request_report(mixed_state, "overdue", today=TODAY)
        assert table.column("المبنى/الغرفة") == ["1 / 2", "1 / 4"]

    def test_unknown_kind(self, mixed_state):
        with pytest.raises(ValueError):
            request_report(mixed_state, "mood")


class TestForecast:
    """Financial forecast"""

    def test_default_inputs_follow_the_tree(self, mixed_state):
        (year,) = default_forecast_inputs(mixed_state)
        assert year.year == 1447
        first = year.semesters[0]
        assert (first.apartment_rent, first.rented_apartments) == (1700, 3)
        assert (first.suite_rent, first.rented_suites) == (3000, 0)

    @pytest.mark.parametrize("years", [0, 21])
    def test_year_bounds(self, mixed_state, years):
        with pytest.raises(ValueError):
            default_forecast_inputs(mixed_state, years)

    def test_revenue_and_clamping(self, mixed_state):
        semester = SemesterData(
            apartment_rent=2000, rented_apartments=10, suite_rent=3000, rented_suites=1, expenses=500
        )
        forecasts = [YearlyForecastInput(year=1447, semesters=(semester, semester))]
        row = forecast_report(mixed_state, forecasts).rows[0]
        # 10 rented apartments are capped at the 4 that exist
        per_semester = 4 * 2000 + 1 * 3000
        assert row == ["1447هـ", per_semester, per_semester, 2 * per_semester, 1000, 2 * per_semester - 1000]
