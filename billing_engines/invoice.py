"""
Invoice Formatter (``billing_engines.invoice``).

Responsibility
--------------
Projects a ``BillingAggregate`` into a renderer-agnostic client invoice
view: header, billing summary, one block per employee (display-name
group) and footer lines.

Architecture position
---------------------
**Engines layer** -- pure functional core.  The invoice date is a
parameter; nothing here reads the clock.

Invoice styles
--------------
Line rendering is dispatched by ``InvoiceStyle`` to an
``InvoiceLineStrategy``:

* ``grouped`` -- one "N day(s)" line and/or one "N hour(s)" line per
  employee, only for nonzero quantities.
* ``daily``   -- one "MM/DD" line per entry, ascending by date, no
  per-line amounts.

Both styles end each employee block with a subtotal equal to that
employee's summed client charge, and both share the same totals block.

Failure modes
-------------
* Empty aggregate -> ``NoEntriesForPeriodError``.  An empty invoice is
  never produced.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from billing_engines.aggregation import BillingAggregate, InvoiceGroup
from billing_engines.formatting import format_month_day, pluralize
from billing_engines.tracer import traced_engine
from billing_kernel.domain.records import House, InvoiceStyle
from billing_kernel.domain.values import Money
from billing_kernel.exceptions import NoEntriesForPeriodError
from billing_kernel.logging_config import get_logger

logger = get_logger("engines.invoice")

DEFAULT_FOOTER_LINES = (
    "Payment Terms: Net 30 Days",
    "Thank you for your business!",
)


# ============================================================================
# View
# ============================================================================


@dataclass(frozen=True)
class InvoiceHeader:
    company_name: str
    title: str
    invoice_date: date
    house_name: str | None
    period_label: str


@dataclass(frozen=True)
class InvoiceSummary:
    total_entries: int
    total_days: Decimal
    total_hours: Decimal
    total_amount_due: Money


@dataclass(frozen=True)
class InvoiceEmployeeBlock:
    employee_name: str
    lines: tuple[str, ...]
    subtotal: Money


@dataclass(frozen=True)
class InvoiceView:
    """Client invoice ready for the document renderer."""

    header: InvoiceHeader
    invoice_style: InvoiceStyle
    summary: InvoiceSummary
    employees: tuple[InvoiceEmployeeBlock, ...]
    footer_lines: tuple[str, ...]


# ============================================================================
# Line strategies
# ============================================================================


class InvoiceLineStrategy(ABC):
    """Renders the descriptive lines of one employee block."""

    @abstractmethod
    def lines(self, group: InvoiceGroup) -> tuple[str, ...]:
        ...


class GroupedLines(InvoiceLineStrategy):
    """Totals only: "5 days" and/or "3 hours"."""

    def lines(self, group: InvoiceGroup) -> tuple[str, ...]:
        lines = []
        if group.days:
            lines.append(pluralize(group.days, "day"))
        if group.hours:
            lines.append(pluralize(group.hours, "hour"))
        return tuple(lines)


class DailyLines(InvoiceLineStrategy):
    """One dated line per entry, ascending by date."""

    def lines(self, group: InvoiceGroup) -> tuple[str, ...]:
        return tuple(format_month_day(e.work_date) for e in group.entries_by_date())


_STRATEGIES: dict[InvoiceStyle, InvoiceLineStrategy] = {
    InvoiceStyle.GROUPED: GroupedLines(),
    InvoiceStyle.DAILY: DailyLines(),
}


def line_strategy_for(style: InvoiceStyle) -> InvoiceLineStrategy:
    return _STRATEGIES[InvoiceStyle(style)]


# ============================================================================
# Formatter
# ============================================================================


@traced_engine("invoice", "1.0", fingerprint_fields=("period_label", "default_style"))
def format_client_invoice(
    aggregate: BillingAggregate,
    house: House | None,
    *,
    invoice_date: date,
    period_label: str,
    company_name: str = "",
    default_style: InvoiceStyle = InvoiceStyle.GROUPED,
    footer_lines: tuple[str, ...] = DEFAULT_FOOTER_LINES,
) -> InvoiceView:
    """
    Build the client invoice view.

    Args:
        aggregate: Aggregated, already-filtered entries.
        house: The invoiced house; its ``invoice_style`` selects the line
            strategy.  None for an all-houses invoice.
        invoice_date: Date printed on the invoice.
        period_label: Human-readable period line.
        company_name: Issuer name for the header.
        default_style: Style used when ``house`` is None.
        footer_lines: Lines repeated at the bottom of every page.

    Raises:
        NoEntriesForPeriodError: The aggregate has no entries.
    """
    if aggregate.is_empty:
        logger.info("invoice_rejected_no_entries", extra={
            "period_label": period_label,
            "house_id": str(house.house_id) if house else None,
        })
        raise NoEntriesForPeriodError(
            "client invoice",
            period_label,
            str(house.house_id) if house else None,
        )

    style = house.invoice_style if house is not None else InvoiceStyle(default_style)
    strategy = line_strategy_for(style)

    blocks = tuple(
        InvoiceEmployeeBlock(
            employee_name=group.employee_name,
            lines=strategy.lines(group),
            subtotal=group.subtotal,
        )
        for group in aggregate.invoice_groups.values()
    )

    summary = InvoiceSummary(
        total_entries=aggregate.total_entries,
        total_days=aggregate.total_days,
        total_hours=sum(
            (g.hours for g in aggregate.invoice_groups.values()), Decimal("0")
        ),
        total_amount_due=aggregate.total_revenue,
    )

    return InvoiceView(
        header=InvoiceHeader(
            company_name=company_name,
            title="Client Invoice",
            invoice_date=invoice_date,
            house_name=house.name if house else None,
            period_label=period_label,
        ),
        invoice_style=style,
        summary=summary,
        employees=blocks,
        footer_lines=tuple(footer_lines),
    )
