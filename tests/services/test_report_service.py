"""
Integration tests for ReportService: store snapshot -> filter -> aggregate
-> format.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from billing_engines.formatting import format_money, render_to_dict
from billing_engines.periods import ReportPeriod
from billing_kernel.domain.records import EmployeeRole, WorkQuantity
from billing_kernel.domain.values import Money
from billing_kernel.exceptions import (
    HouseNotFoundError,
    IncompleteFilterSpecificationError,
    NoEntriesForPeriodError,
)

JANUARY = ReportPeriod.monthly(2024, 1)


@pytest.fixture
def jane_five_days(timesheet_service, caregiver, actor_id):
    """Jane Doe: 3 days on 01/10 then 2 days on 01/04 at Maple House."""
    timesheet_service.create_entry(
        caregiver.employee_id, date(2024, 1, 10), WorkQuantity.of_days(3), actor_id,
    )
    timesheet_service.create_entry(
        caregiver.employee_id, date(2024, 1, 4), WorkQuantity.of_days(2), actor_id,
    )
    return caregiver


class TestClientInvoice:

    def test_grouped_invoice(self, report_service, grouped_house, jane_five_days, deterministic_clock):
        report = report_service.client_invoice(JANUARY, house_id=grouped_house.house_id)
        view = report.view
        assert view.header.company_name == "SuperchargedByGrace"
        assert view.header.invoice_date == date(2024, 3, 15)
        assert view.header.period_label == "2024-01-01 to 2024-01-31"
        block = view.employees[0]
        assert block.lines == ("5 days",)
        assert format_money(block.subtotal) == "$1000.00"
        assert view.summary.total_amount_due == Money.of("1000.00")
        assert report.filename == (
            f"invoice-maple-house-2024-01-{deterministic_clock.timestamp_ms()}.pdf"
        )

    def test_daily_invoice(
        self, report_service, house_service, grouped_house, jane_five_days, actor_id,
    ):
        house_service.update_house(grouped_house.house_id, actor_id, invoice_style="daily")
        view = report_service.client_invoice(JANUARY, house_id=str(grouped_house.house_id)).view
        block = view.employees[0]
        assert block.lines == ("01/04", "01/10")
        assert format_money(block.subtotal) == "$1000.00"

    def test_house_without_entries_is_rejected(self, report_service, daily_house, jane_five_days):
        with pytest.raises(NoEntriesForPeriodError) as exc_info:
            report_service.client_invoice(JANUARY, house_id=daily_house.house_id)
        assert exc_info.value.house_id == str(daily_house.house_id)

    def test_period_without_entries_is_rejected(self, report_service, jane_five_days):
        with pytest.raises(NoEntriesForPeriodError):
            report_service.client_invoice(ReportPeriod.monthly(2024, 2))

    def test_all_houses_invoice(self, report_service, jane_five_days):
        report = report_service.client_invoice(ReportPeriod.all_time(), house_id="all")
        assert report.view.header.house_name is None
        assert report.filename.startswith("invoice-all-houses-all-time-")

    def test_weekly_without_start_date(self, report_service, jane_five_days):
        with pytest.raises(IncompleteFilterSpecificationError):
            report_service.client_invoice(ReportPeriod.weekly(None))

    def test_unknown_house(self, report_service):
        with pytest.raises(HouseNotFoundError):
            report_service.client_invoice(JANUARY, house_id=uuid4())

    def test_logs_report_generation(self, report_service, grouped_house, jane_five_days, captured_logs):
        report_service.client_invoice(JANUARY, house_id=grouped_house.house_id)
        logs = captured_logs()
        generated = [r for r in logs if r["message"] == "report_generated"]
        assert generated[0]["report_kind"] == "client_invoice"
        assert any(
            r["message"] == "BILLING_ENGINE_TRACE" and r["engine_name"] == "invoice"
            for r in logs
        )


class TestPayrollReport:

    def test_payroll_excludes_administrators(
        self, report_service, employee_service, timesheet_service, grouped_house,
        jane_five_days, actor_id,
    ):
        admin = employee_service.create_employee(
            "Ada Admin", "ada@example.com", actor_id,
            role=EmployeeRole.ADMINISTRATOR, house_id=grouped_house.house_id,
        )
        timesheet_service.create_entry(
            admin.employee_id, date(2024, 1, 5), WorkQuantity.of_hours(8), actor_id,
        )
        report = report_service.payroll_report(JANUARY)
        view = report.view
        assert [r.employee_name for r in view.employee_breakdown] == ["Jane Doe"]
        assert view.summary.total_entries == 2
        assert view.summary.total_hours == Decimal("40")
        assert view.summary.total_payroll == Money.of("750.00")
        assert report.filename.startswith("payroll-all-houses-2024-01-")

    def test_itemized_rows_in_date_order(self, report_service, jane_five_days):
        view = report_service.payroll_report(JANUARY).view
        assert [r.work_date for r in view.entries] == [date(2024, 1, 4), date(2024, 1, 10)]
        assert {r.rate_code for r in view.entries} == {"8hr"}
        assert view.pagination.rows_per_page == 35


class TestDashboard:

    def test_overview_all_time_uses_store_summary(self, report_service, jane_five_days):
        overview = report_service.overview(ReportPeriod.all_time())
        assert overview.total_revenue == Money.of("1000.00")
        assert overview.total_payroll == Money.of("750.00")
        assert overview.total_profit == Money.of("250.00")
        assert overview.margin_percent == Decimal("25.0")
        assert overview.total_hours == Decimal("40")

    def test_overview_filtered_period(self, report_service, jane_five_days):
        overview = report_service.overview(ReportPeriod.weekly(date(2024, 1, 1)))
        assert overview.total_entries == 1
        assert overview.total_revenue == Money.of("400.00")

    def test_overview_empty_store(self, report_service):
        overview = report_service.overview(ReportPeriod.all_time())
        assert overview.total_entries == 0
        assert overview.margin_percent == Decimal("0.0")

    def test_employee_performance(self, report_service, employee_service, jane_five_days, actor_id):
        employee_service.create_employee("Zoe Idle", "zoe@example.com", actor_id)
        rows = report_service.employee_performance(JANUARY)
        assert [r.employee_name for r in rows] == ["Jane Doe", "Zoe Idle"]
        assert rows[0].hours == Decimal("40")
        assert rows[1].entry_count == 0


class TestRenderedQuantities:

    @pytest.fixture
    def mixed_entries(self, timesheet_service, jane_five_days, actor_id):
        timesheet_service.create_entry(
            jane_five_days.employee_id, date(2024, 1, 12),
            WorkQuantity.of_hours(Decimal("7.5")), actor_id,
        )

    def test_day_entries_render_whole_hours(self, report_service, jane_five_days):
        rendered = render_to_dict(report_service.payroll_report(JANUARY).view)
        assert rendered["summary"]["total_hours"] == "40"
        assert [row["hours"] for row in rendered["entries"]] == ["16", "24"]

    def test_payroll_quantities(self, report_service, mixed_entries):
        rendered = render_to_dict(report_service.payroll_report(JANUARY).view)
        assert rendered["summary"]["total_hours"] == "47.5"
        assert rendered["employee_breakdown"][0]["total_hours"] == "47.5"
        assert rendered["entries"][-1]["hours"] == "7.5"

    def test_invoice_quantities(self, report_service, mixed_entries):
        rendered = render_to_dict(report_service.client_invoice(JANUARY).view)
        assert rendered["summary"]["total_days"] == "5"
        assert rendered["summary"]["total_hours"] == "7.5"
        assert rendered["employees"][0]["lines"] == ["5 days", "7.5 hours"]

    def test_overview_quantities(self, report_service, mixed_entries):
        all_time = render_to_dict(report_service.overview(ReportPeriod.all_time()))
        january = render_to_dict(report_service.overview(JANUARY))
        assert all_time["total_hours"] == "47.5"
        assert january["total_hours"] == "47.5"
