"""
Tests for the Aggregation Engine.

Covers:
- Global totals and profit
- Day entries: stored hours 40 -> 5 days, 40 hour-equivalents
- Per-employee / per-employee-house partitions
- Invoice groups keyed by display name
- Zero-revenue margin guard
- Overview and employee performance projections
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from billing_engines.aggregation import (
    aggregate_entries,
    build_overview,
    compute_margin,
    employee_performance,
    margin_percent,
)
from billing_kernel.domain.records import (
    Employee,
    EmployeeRole,
    EntryType,
    TimesheetEntry,
    TimesheetSummary,
    WorkQuantity,
)
from billing_kernel.domain.values import Money

JANE = uuid4()
JOHN = uuid4()
HOUSE_A = uuid4()
HOUSE_B = uuid4()


def _entry(
    employee_id=JANE,
    name="Jane Doe",
    day=1,
    quantity=None,
    pay="150.00",
    charge="200.00",
    house_id=HOUSE_A,
) -> TimesheetEntry:
    return TimesheetEntry(
        entry_id=uuid4(),
        employee_id=employee_id,
        employee_name=name,
        work_date=date(2024, 1, day),
        quantity=quantity or WorkQuantity.of_days(1),
        employee_pay=Money.of(pay),
        client_charge=Money.of(charge),
        house_id=house_id,
    )


class TestTotals:

    def test_revenue_payroll_profit(self):
        agg = aggregate_entries([
            _entry(pay="150.00", charge="200.00"),
            _entry(employee_id=JOHN, name="John Roe", pay="100.00", charge="180.00"),
        ])
        assert agg.total_revenue == Money.of("380.00")
        assert agg.total_payroll == Money.of("250.00")
        assert agg.total_profit == Money.of("130.00")
        assert agg.total_entries == 2

    def test_empty(self):
        agg = aggregate_entries([])
        assert agg.is_empty
        assert agg.total_revenue == Money.zero()
        assert agg.margin == Decimal("0")

    def test_currency_mismatch_rejected(self):
        entry = TimesheetEntry(
            entry_id=uuid4(),
            employee_id=JANE,
            employee_name="Jane Doe",
            work_date=date(2024, 1, 1),
            quantity=WorkQuantity.of_days(1),
            employee_pay=Money.of("1", "EUR"),
            client_charge=Money.of("2", "EUR"),
        )
        with pytest.raises(ValueError):
            aggregate_entries([entry], currency="USD")


class TestDayConvention:
    """Stored day entries hold days * 8 in the hours column."""

    def test_stored_forty_hours_is_five_days(self):
        quantity = WorkQuantity.from_stored(EntryType.DAYS, Decimal("40"))
        agg = aggregate_entries([_entry(quantity=quantity, pay="750.00", charge="1000.00")])
        totals = agg.employee(JANE)
        assert totals.days == Decimal("5")
        assert totals.hours == Decimal("0")
        assert totals.hours_equivalent == Decimal("40")
        assert agg.total_hours == Decimal("40")
        assert agg.total_days == Decimal("5")

    def test_mixed_hours_and_days(self):
        agg = aggregate_entries([
            _entry(quantity=WorkQuantity.of_days(2), day=1),
            _entry(quantity=WorkQuantity.of_hours(6), day=2, pay="112.50", charge="150.00"),
        ])
        totals = agg.employee(JANE)
        assert totals.days == Decimal("2")
        assert totals.hours == Decimal("6")
        assert totals.hours_equivalent == Decimal("22")


class TestPartitions:

    def test_per_employee_profit_sums_to_total(self):
        entries = [
            _entry(day=1),
            _entry(employee_id=JOHN, name="John Roe", day=2, pay="90.00", charge="200.00"),
            _entry(day=3, house_id=HOUSE_B, pay="120.00", charge="180.00"),
        ]
        agg = aggregate_entries(entries)
        total = sum((t.profit for t in agg.per_employee.values()), Money.zero())
        assert total == agg.total_profit
        assert sum(t.entry_count for t in agg.per_employee.values()) == 3

    def test_per_employee_house_split(self):
        agg = aggregate_entries([
            _entry(day=1, house_id=HOUSE_A),
            _entry(day=2, house_id=HOUSE_B, charge="180.00"),
        ])
        assert set(agg.per_employee_house) == {(JANE, HOUSE_A), (JANE, HOUSE_B)}
        assert agg.per_employee_house[(JANE, HOUSE_B)].revenue == Money.of("180.00")

    def test_per_employee_keeps_first_appearance_order(self):
        agg = aggregate_entries([
            _entry(employee_id=JOHN, name="John Roe", day=1),
            _entry(day=2),
            _entry(employee_id=JOHN, name="John Roe", day=3),
        ])
        assert list(agg.per_employee) == [JOHN, JANE]


class TestInvoiceGroups:

    def test_grouped_by_display_name(self):
        other_jane = uuid4()
        agg = aggregate_entries([
            _entry(day=1),
            _entry(employee_id=other_jane, day=2),
        ])
        assert list(agg.invoice_groups) == ["Jane Doe"]
        assert agg.invoice_groups["Jane Doe"].subtotal == Money.of("400.00")
        assert len(agg.per_employee) == 2

    def test_entries_by_date_sorted(self):
        agg = aggregate_entries([_entry(day=9), _entry(day=3)])
        group = agg.invoice_groups["Jane Doe"]
        assert [e.work_date.day for e in group.entries] == [9, 3]
        assert [e.work_date.day for e in group.entries_by_date()] == [3, 9]


class TestMargin:

    def test_zero_revenue_margin_is_zero(self):
        assert compute_margin(Money.zero(), Money.zero()) == Decimal("0")
        assert margin_percent(Decimal("-10"), Decimal("0")) == Decimal("0.0")

    def test_margin_percent_one_place(self):
        assert margin_percent(Decimal("1"), Decimal("3")) == Decimal("33.3")
        assert margin_percent(Decimal("2"), Decimal("3")) == Decimal("66.7")

    def test_aggregate_margin(self):
        agg = aggregate_entries([_entry(pay="150.00", charge="200.00")])
        assert agg.margin == Decimal("0.25")
        assert agg.margin_percent == Decimal("25.0")


class TestProjections:

    def test_overview_from_summary(self):
        summary = TimesheetSummary(
            total_revenue=Money.of("1000.00"),
            total_payroll=Money.of("750.00"),
            total_hours=Decimal("40"),
            total_entries=5,
        )
        overview = build_overview(summary)
        assert overview.total_profit == Money.of("250.00")
        assert overview.margin_percent == Decimal("25.0")

    def test_overview_zero_revenue(self):
        summary = TimesheetSummary(Money.zero(), Money.zero(), Decimal("0"), 0)
        assert build_overview(summary).margin_percent == Decimal("0.0")

    def test_aggregate_summary_matches_totals(self):
        agg = aggregate_entries([_entry(), _entry(day=2)])
        summary = agg.summary()
        assert summary.total_revenue == agg.total_revenue
        assert summary.total_entries == 2

    def test_employee_performance_skips_admins_and_fills_zero_rows(self):
        admin = Employee(uuid4(), "Ada Admin", "ada@example.com", EmployeeRole.ADMINISTRATOR)
        jane = Employee(JANE, "Jane Doe", "jane@example.com")
        john = Employee(JOHN, "John Roe", "john@example.com")
        agg = aggregate_entries([
            _entry(quantity=WorkQuantity.of_days(2), pay="300.00", charge="400.00"),
        ])
        rows = employee_performance(agg, [admin, jane, john])
        assert [r.employee_name for r in rows] == ["Jane Doe", "John Roe"]
        assert rows[0].hours == Decimal("16")
        assert rows[0].profit == Money.of("100.00")
        assert rows[1].entry_count == 0
        assert rows[1].revenue == Money.zero()
