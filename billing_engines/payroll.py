"""
Payroll Formatter (``billing_engines.payroll``).

Responsibility
--------------
Projects a ``BillingAggregate`` into a renderer-agnostic payroll report:
summary block, per-employee breakdown, itemized entry rows with their
rate-type label, pagination hints and a per-page footer total.

Architecture position
---------------------
**Engines layer** -- pure functional core.  The report date is a
parameter; nothing here reads the clock.

Invariants enforced
-------------------
* Hours everywhere are hour-equivalents: day entries count ``days * 8``.
* Employee breakdown and itemized rows keep data-source order.
* Empty aggregate -> ``NoEntriesForPeriodError``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import TypeVar

from billing_engines.aggregation import BillingAggregate
from billing_engines.periods import DateRange, period_label
from billing_engines.rates import RateTable, RateType, rate_type_for
from billing_engines.tracer import traced_engine
from billing_kernel.domain.records import House
from billing_kernel.domain.values import Money
from billing_kernel.exceptions import NoEntriesForPeriodError
from billing_kernel.logging_config import get_logger

logger = get_logger("engines.payroll")

DEFAULT_ROWS_PER_PAGE = 35

T = TypeVar("T")


@dataclass(frozen=True)
class PayrollHeader:
    company_name: str
    title: str
    report_date: date
    house_name: str | None
    period_label: str
    period_start: date | None
    period_end: date | None


@dataclass(frozen=True)
class PayrollSummary:
    total_entries: int
    total_hours: Decimal
    total_payroll: Money


@dataclass(frozen=True)
class PayrollEmployeeRow:
    employee_name: str
    total_hours: Decimal
    total_pay: Money
    entries: int


@dataclass(frozen=True)
class PayrollEntryRow:
    work_date: date
    employee_name: str
    hours: Decimal
    pay: Money
    rate_type: RateType
    rate_code: str


@dataclass(frozen=True)
class PaginationHints:
    """Hints passed through to the document renderer."""

    rows_per_page: int = DEFAULT_ROWS_PER_PAGE
    repeat_header_on_new_page: bool = True

    def __post_init__(self) -> None:
        if self.rows_per_page < 1:
            raise ValueError("rows_per_page must be at least 1")


@dataclass(frozen=True)
class PayrollView:
    """Payroll report ready for the document renderer."""

    header: PayrollHeader
    summary: PayrollSummary
    employee_breakdown: tuple[PayrollEmployeeRow, ...]
    entries: tuple[PayrollEntryRow, ...]
    pagination: PaginationHints
    footer_total: Money

    def entry_pages(self) -> tuple[tuple[PayrollEntryRow, ...], ...]:
        """Itemized rows split by ``pagination.rows_per_page``."""
        return paginate(self.entries, self.pagination.rows_per_page)


def paginate(rows: Sequence[T], rows_per_page: int) -> tuple[tuple[T, ...], ...]:
    """Split rows into consecutive pages of at most ``rows_per_page``."""
    if rows_per_page < 1:
        raise ValueError("rows_per_page must be at least 1")
    return tuple(
        tuple(rows[i:i + rows_per_page])
        for i in range(0, len(rows), rows_per_page)
    )


@traced_engine("payroll", "1.0", fingerprint_fields=("date_range",))
def format_payroll_report(
    aggregate: BillingAggregate,
    *,
    date_range: DateRange,
    report_date: date,
    house: House | None = None,
    company_name: str = "",
    rate_table: RateTable | None = None,
    pagination: PaginationHints | None = None,
) -> PayrollView:
    """
    Build the payroll report view.

    Args:
        aggregate: Aggregated, already-filtered entries.
        date_range: The resolved reporting window.
        report_date: Date printed on the report.
        house: House the report is restricted to, if any.
        company_name: Issuer name for the header.
        rate_table: Bands used for the rate-type labels.
        pagination: Rows-per-page and header-repeat hints.

    Raises:
        NoEntriesForPeriodError: The aggregate has no entries.
    """
    label = period_label(date_range)
    if aggregate.is_empty:
        logger.info("payroll_rejected_no_entries", extra={
            "period_label": label,
            "house_id": str(house.house_id) if house else None,
        })
        raise NoEntriesForPeriodError(
            "payroll report",
            label,
            str(house.house_id) if house else None,
        )

    breakdown = tuple(
        PayrollEmployeeRow(
            employee_name=totals.employee_name,
            total_hours=totals.hours_equivalent,
            total_pay=totals.payroll,
            entries=totals.entry_count,
        )
        for totals in aggregate.per_employee.values()
    )

    rows = []
    for entry in aggregate.entries:
        rate_type = rate_type_for(entry.quantity, rate_table)
        rows.append(PayrollEntryRow(
            work_date=entry.work_date,
            employee_name=entry.employee_name,
            hours=entry.hours_equivalent,
            pay=entry.employee_pay,
            rate_type=rate_type,
            rate_code=rate_type.short_code,
        ))

    return PayrollView(
        header=PayrollHeader(
            company_name=company_name,
            title="Employee Payroll Report",
            report_date=report_date,
            house_name=house.name if house else None,
            period_label=label,
            period_start=date_range.start,
            period_end=date_range.end,
        ),
        summary=PayrollSummary(
            total_entries=aggregate.total_entries,
            total_hours=aggregate.total_hours,
            total_payroll=aggregate.total_payroll,
        ),
        employee_breakdown=breakdown,
        entries=tuple(rows),
        pagination=pagination or PaginationHints(),
        footer_total=aggregate.total_payroll,
    )
