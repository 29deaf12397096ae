"""
Tests for the Invoice Formatter.

Covers:
- Grouped style: "N days" / "N hours" lines, nonzero only
- Daily style: one MM/DD line per entry, ascending
- Shared subtotal and totals block
- Empty aggregate -> NoEntriesForPeriodError
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from billing_engines.aggregation import aggregate_entries
from billing_engines.formatting import format_money, render_to_dict
from billing_engines.invoice import (
    DEFAULT_FOOTER_LINES,
    DailyLines,
    GroupedLines,
    format_client_invoice,
    line_strategy_for,
)
from billing_kernel.domain.records import (
    House,
    InvoiceStyle,
    TimesheetEntry,
    WorkQuantity,
)
from billing_kernel.domain.values import Money
from billing_kernel.exceptions import NoEntriesForPeriodError

JANE = uuid4()
INVOICE_DATE = date(2024, 1, 31)


def _house(style: InvoiceStyle) -> House:
    return House(
        house_id=uuid4(),
        name="Maple House",
        employee_pay_per_day=Decimal("150"),
        client_charge_per_day=Decimal("200"),
        invoice_style=style,
    )


def _entry(day: int, quantity: WorkQuantity, charge: str, name="Jane Doe", employee_id=JANE):
    return TimesheetEntry(
        entry_id=uuid4(),
        employee_id=employee_id,
        employee_name=name,
        work_date=date(2024, 1, day),
        quantity=quantity,
        employee_pay=Money.of("0.00"),
        client_charge=Money.of(charge),
    )


def _jane_five_days():
    # Inserted out of date order on purpose
    return aggregate_entries([
        _entry(10, WorkQuantity.of_days(3), "600.00"),
        _entry(4, WorkQuantity.of_days(2), "400.00"),
    ])


def _invoice(aggregate, house, **kwargs):
    return format_client_invoice(
        aggregate,
        house,
        invoice_date=INVOICE_DATE,
        period_label="2024-01-01 to 2024-01-31",
        company_name="SuperchargedByGrace",
        **kwargs,
    )


class TestGroupedInvoice:

    def test_five_days_one_line_and_subtotal(self):
        view = _invoice(_jane_five_days(), _house(InvoiceStyle.GROUPED))
        assert len(view.employees) == 1
        block = view.employees[0]
        assert block.employee_name == "Jane Doe"
        assert block.lines == ("5 days",)
        assert format_money(block.subtotal) == "$1000.00"

    def test_hours_and_days_lines(self):
        agg = aggregate_entries([
            _entry(1, WorkQuantity.of_days(1), "200.00"),
            _entry(2, WorkQuantity.of_hours(3), "75.00"),
        ])
        block = _invoice(agg, _house(InvoiceStyle.GROUPED)).employees[0]
        assert block.lines == ("1 day", "3 hours")

    def test_hours_only_has_no_day_line(self):
        agg = aggregate_entries([_entry(1, WorkQuantity.of_hours(1), "25.00")])
        block = _invoice(agg, _house(InvoiceStyle.GROUPED)).employees[0]
        assert block.lines == ("1 hour",)


class TestDailyInvoice:

    def test_one_date_line_per_entry_ascending(self):
        view = _invoice(_jane_five_days(), _house(InvoiceStyle.DAILY))
        block = view.employees[0]
        assert block.lines == ("01/04", "01/10")
        assert format_money(block.subtotal) == "$1000.00"
        assert view.invoice_style == InvoiceStyle.DAILY


class TestSharedBlocks:

    def test_totals_block(self):
        agg = aggregate_entries([
            _entry(1, WorkQuantity.of_days(2), "400.00"),
            _entry(2, WorkQuantity.of_hours(4), "100.00", name="John Roe", employee_id=uuid4()),
        ])
        view = _invoice(agg, _house(InvoiceStyle.GROUPED))
        assert view.summary.total_entries == 2
        assert view.summary.total_days == Decimal("2")
        assert view.summary.total_hours == Decimal("4")
        assert view.summary.total_amount_due == Money.of("500.00")
        assert [b.employee_name for b in view.employees] == ["Jane Doe", "John Roe"]

    def test_header_and_footer(self):
        house = _house(InvoiceStyle.GROUPED)
        view = _invoice(_jane_five_days(), house)
        assert view.header.company_name == "SuperchargedByGrace"
        assert view.header.title == "Client Invoice"
        assert view.header.house_name == "Maple House"
        assert view.header.invoice_date == INVOICE_DATE
        assert view.footer_lines == DEFAULT_FOOTER_LINES

    def test_all_houses_uses_default_style(self):
        view = _invoice(_jane_five_days(), None, default_style=InvoiceStyle.DAILY)
        assert view.header.house_name is None
        assert view.employees[0].lines == ("01/04", "01/10")

    def test_render_to_dict(self):
        data = render_to_dict(_invoice(_jane_five_days(), _house(InvoiceStyle.GROUPED)))
        assert data["invoice_style"] == "grouped"
        assert data["header"]["invoice_date"] == "2024-01-31"
        assert data["summary"]["total_amount_due"] == {"amount": "1000.00", "currency": "USD"}


class TestEmptyInvoice:

    def test_empty_aggregate_raises(self):
        house = _house(InvoiceStyle.GROUPED)
        with pytest.raises(NoEntriesForPeriodError) as exc_info:
            _invoice(aggregate_entries([]), house)
        assert exc_info.value.code == "NO_ENTRIES_FOR_PERIOD"
        assert exc_info.value.house_id == str(house.house_id)


class TestStrategyDispatch:

    def test_dispatch(self):
        assert isinstance(line_strategy_for(InvoiceStyle.GROUPED), GroupedLines)
        assert isinstance(line_strategy_for(InvoiceStyle.DAILY), DailyLines)
        assert isinstance(line_strategy_for("daily"), DailyLines)
