"""
Aggregation Engine (``billing_engines.aggregation``).

Responsibility
--------------
Folds a filtered set of timesheet entries into global totals (revenue,
payroll, profit, hours), per-employee totals, per-employee-per-house
totals and the employee-name groups used by client invoices.  Entry
level detail is retained for itemized output.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O.  Consumes the
snapshotted ``employee_pay`` / ``client_charge`` already stored on each
entry (see ``billing_engines.rates`` for how they were produced).

Invariants enforced
-------------------
* Partition: every entry lands in exactly one per-employee bucket, one
  per-employee-per-house bucket and one invoice group, so
  ``sum(per_employee.profit) == total_profit``.
* Day entries contribute ``days`` to the day count and ``days * 8`` to
  the hour-equivalent count; never their hour-equivalent to ``days``.
* ``margin`` is 0 when revenue is 0; no division by zero reaches a report.
* Per-employee and per-group ordering follows first appearance in the
  input (data-source order).

Open behaviour
--------------
Invoice groups are keyed on the employee display name, so two employees
sharing a name are combined on a client invoice.  Per-employee totals
are keyed on employee id and are not affected.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from billing_engines.tracer import traced_engine
from billing_kernel.domain.records import (
    Employee,
    TimesheetEntry,
    TimesheetSummary,
)
from billing_kernel.domain.values import Money
from billing_kernel.logging_config import get_logger

logger = get_logger("engines.aggregation")

_ZERO = Decimal("0")
_ONE_PLACE = Decimal("0.1")


def compute_margin(profit: Money | Decimal, revenue: Money | Decimal) -> Decimal:
    """
    Profit margin as a ratio of revenue.

    Returns ``Decimal("0")`` when revenue is zero instead of dividing.
    """
    profit_amount = profit.amount if isinstance(profit, Money) else profit
    revenue_amount = revenue.amount if isinstance(revenue, Money) else revenue
    if revenue_amount == 0:
        return _ZERO
    return profit_amount / revenue_amount


def margin_percent(profit: Money | Decimal, revenue: Money | Decimal) -> Decimal:
    """Margin as a percentage rounded to one decimal place (e.g. 33.3)."""
    return (compute_margin(profit, revenue) * 100).quantize(
        _ONE_PLACE, rounding=ROUND_HALF_UP
    )


# ============================================================================
# Value Objects
# ============================================================================


@dataclass(frozen=True)
class EmployeeTotals:
    """
    Totals for one employee (optionally restricted to one house).

    ``hours`` counts hour entries only; ``days`` counts day entries only;
    ``hours_equivalent`` is ``hours + days * 8``.
    """

    employee_id: UUID
    employee_name: str
    house_id: UUID | None
    hours: Decimal
    days: Decimal
    hours_equivalent: Decimal
    revenue: Money
    payroll: Money
    entries: tuple[TimesheetEntry, ...]

    @property
    def profit(self) -> Money:
        return self.revenue - self.payroll

    @property
    def entry_count(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class InvoiceGroup:
    """Invoice line-item group for one employee display name."""

    employee_name: str
    days: Decimal
    hours: Decimal
    subtotal: Money
    entries: tuple[TimesheetEntry, ...]

    def entries_by_date(self) -> tuple[TimesheetEntry, ...]:
        """Entries re-sorted by ascending date (stable for equal dates)."""
        return tuple(sorted(self.entries, key=lambda e: e.work_date))


@dataclass(frozen=True)
class BillingAggregate:
    """Result of folding a filtered entry set."""

    currency: str
    entries: tuple[TimesheetEntry, ...]
    total_revenue: Money
    total_payroll: Money
    total_hours: Decimal
    total_days: Decimal
    total_entries: int
    per_employee: dict[UUID, EmployeeTotals] = field(default_factory=dict)
    per_employee_house: dict[tuple[UUID, UUID | None], EmployeeTotals] = field(
        default_factory=dict
    )
    invoice_groups: dict[str, InvoiceGroup] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.total_entries == 0

    @property
    def total_profit(self) -> Money:
        return self.total_revenue - self.total_payroll

    @property
    def margin(self) -> Decimal:
        return compute_margin(self.total_profit, self.total_revenue)

    @property
    def margin_percent(self) -> Decimal:
        return margin_percent(self.total_profit, self.total_revenue)

    def employee(self, employee_id: UUID) -> EmployeeTotals | None:
        return self.per_employee.get(employee_id)

    def summary(self) -> TimesheetSummary:
        """Totals in the same shape as the store's summary query."""
        return TimesheetSummary(
            total_revenue=self.total_revenue,
            total_payroll=self.total_payroll,
            total_hours=self.total_hours,
            total_entries=self.total_entries,
        )


class _Bucket:
    """Mutable accumulator, frozen into EmployeeTotals / InvoiceGroup."""

    def __init__(self, currency: str):
        self.hours = _ZERO
        self.days = _ZERO
        self.hours_equivalent = _ZERO
        self.revenue = Money.zero(currency)
        self.payroll = Money.zero(currency)
        self.entries: list[TimesheetEntry] = []

    def add(self, entry: TimesheetEntry) -> None:
        self.hours += entry.quantity.hours
        self.days += entry.quantity.days
        self.hours_equivalent += entry.quantity.hours_equivalent
        self.revenue = self.revenue + entry.client_charge
        self.payroll = self.payroll + entry.employee_pay
        self.entries.append(entry)

    def to_totals(self, first: TimesheetEntry, house_id: UUID | None) -> EmployeeTotals:
        return EmployeeTotals(
            employee_id=first.employee_id,
            employee_name=first.employee_name,
            house_id=house_id,
            hours=self.hours,
            days=self.days,
            hours_equivalent=self.hours_equivalent,
            revenue=self.revenue,
            payroll=self.payroll,
            entries=tuple(self.entries),
        )


# ============================================================================
# Core aggregation
# ============================================================================


@traced_engine("aggregation", "1.0", fingerprint_fields=("currency",))
def aggregate_entries(
    entries: Iterable[TimesheetEntry],
    currency: str = "USD",
) -> BillingAggregate:
    """
    Fold entries into a BillingAggregate.

    Pure function - no side effects, no I/O, deterministic output.

    Args:
        entries: The already-filtered entry set, in data-source order.
        currency: Currency of all entry amounts.

    Returns:
        BillingAggregate (empty totals when ``entries`` is empty).

    Raises:
        ValueError: An entry's amounts are in a different currency.
    """
    entries = tuple(entries)

    total_revenue = Money.zero(currency)
    total_payroll = Money.zero(currency)
    total_hours = _ZERO
    total_days = _ZERO

    by_employee: dict[UUID, _Bucket] = {}
    by_employee_house: dict[tuple[UUID, UUID | None], _Bucket] = {}
    by_name: dict[str, _Bucket] = {}

    for entry in entries:
        if entry.currency != currency:
            raise ValueError(
                f"Entry {entry.entry_id} is in {entry.currency}, expected {currency}"
            )
        total_revenue = total_revenue + entry.client_charge
        total_payroll = total_payroll + entry.employee_pay
        total_hours += entry.hours_equivalent
        total_days += entry.quantity.days

        by_employee.setdefault(entry.employee_id, _Bucket(currency)).add(entry)
        by_employee_house.setdefault(
            (entry.employee_id, entry.house_id), _Bucket(currency)
        ).add(entry)
        by_name.setdefault(entry.employee_name, _Bucket(currency)).add(entry)

    per_employee = {
        employee_id: bucket.to_totals(bucket.entries[0], None)
        for employee_id, bucket in by_employee.items()
    }
    per_employee_house = {
        key: bucket.to_totals(bucket.entries[0], key[1])
        for key, bucket in by_employee_house.items()
    }
    invoice_groups = {
        name: InvoiceGroup(
            employee_name=name,
            days=bucket.days,
            hours=bucket.hours,
            subtotal=bucket.revenue,
            entries=tuple(bucket.entries),
        )
        for name, bucket in by_name.items()
    }

    result = BillingAggregate(
        currency=currency,
        entries=entries,
        total_revenue=total_revenue,
        total_payroll=total_payroll,
        total_hours=total_hours,
        total_days=total_days,
        total_entries=len(entries),
        per_employee=per_employee,
        per_employee_house=per_employee_house,
        invoice_groups=invoice_groups,
    )

    logger.debug("aggregation_completed", extra={
        "total_entries": result.total_entries,
        "employee_count": len(per_employee),
        "total_revenue": str(total_revenue.amount),
        "total_payroll": str(total_payroll.amount),
    })
    return result


# ============================================================================
# Dashboard projections
# ============================================================================


@dataclass(frozen=True)
class Overview:
    """Headline dashboard figures."""

    total_revenue: Money
    total_payroll: Money
    total_profit: Money
    margin_percent: Decimal
    total_hours: Decimal
    total_entries: int


def build_overview(summary: TimesheetSummary) -> Overview:
    """Dashboard figures from a summary (store-computed or aggregated)."""
    profit = summary.total_profit
    return Overview(
        total_revenue=summary.total_revenue,
        total_payroll=summary.total_payroll,
        total_profit=profit,
        margin_percent=margin_percent(profit, summary.total_revenue),
        total_hours=summary.total_hours,
        total_entries=summary.total_entries,
    )


@dataclass(frozen=True)
class EmployeePerformance:
    """One employee's row on the performance panel."""

    employee_id: UUID
    employee_name: str
    hours: Decimal
    revenue: Money
    payroll: Money
    profit: Money
    entry_count: int


def employee_performance(
    aggregate: BillingAggregate,
    employees: Sequence[Employee],
) -> tuple[EmployeePerformance, ...]:
    """
    Per-employee performance rows in employee-list order.

    Administrators are excluded.  Employees without entries in the
    aggregate get a zero row.  ``hours`` is the hour-equivalent total.
    """
    zero = Money.zero(aggregate.currency)
    rows = []
    for employee in employees:
        if employee.is_administrator:
            continue
        totals = aggregate.employee(employee.employee_id)
        if totals is None:
            rows.append(EmployeePerformance(
                employee_id=employee.employee_id,
                employee_name=employee.name,
                hours=_ZERO,
                revenue=zero,
                payroll=zero,
                profit=zero,
                entry_count=0,
            ))
            continue
        rows.append(EmployeePerformance(
            employee_id=employee.employee_id,
            employee_name=employee.name,
            hours=totals.hours_equivalent,
            revenue=totals.revenue,
            payroll=totals.payroll,
            profit=totals.profit,
            entry_count=totals.entry_count,
        ))
    return tuple(rows)
