"""Tests for display and filename helpers."""

from datetime import date
from decimal import Decimal

from billing_engines.formatting import (
    format_money,
    format_month_day,
    format_quantity,
    period_token,
    pluralize,
    report_filename,
    slugify,
)
from billing_engines.periods import ReportPeriod
from billing_kernel.domain.values import Money


class TestDisplayHelpers:

    def test_money(self):
        assert format_money(Money.of("1000")) == "$1000.00"
        assert format_money(Decimal("12.345")) == "$12.35"

    def test_quantity_trims_trailing_zeros(self):
        assert format_quantity(Decimal("5.000000000")) == "5"
        assert format_quantity(Decimal("2.50")) == "2.5"

    def test_pluralize(self):
        assert pluralize(Decimal("1"), "day") == "1 day"
        assert pluralize(Decimal("0.5"), "day") == "0.5 days"

    def test_month_day(self):
        assert format_month_day(date(2024, 3, 7)) == "03/07"


class TestFilenames:

    def test_slugify(self):
        assert slugify("Maple House #2") == "maple-house-2"

    def test_period_tokens(self):
        assert period_token(ReportPeriod.all_time()) == "all-time"
        assert period_token(ReportPeriod.monthly(2024, 2)) == "2024-02"
        assert period_token(ReportPeriod.weekly(date(2024, 1, 1))) == "week-2024-01-01"
        assert period_token(ReportPeriod.biweekly(date(2024, 1, 1))) == "biweek-2024-01-01"

    def test_invoice_filename(self):
        name = report_filename("invoice", "Maple House", ReportPeriod.monthly(2024, 2), 1700000000000)
        assert name == "invoice-maple-house-2024-02-1700000000000.pdf"

    def test_all_houses_filename(self):
        name = report_filename("payroll", None, ReportPeriod.all_time(), 1)
        assert name == "payroll-all-houses-all-time-1.pdf"
