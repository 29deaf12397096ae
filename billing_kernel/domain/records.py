"""
Billing records (``billing_kernel.domain.records``).

Responsibility
--------------
Frozen dataclass snapshots of the records the Data Store hands to the
computation layer: houses, employees and timesheet entries, plus the
``WorkQuantity`` tagged variant that replaces the store's overloaded
``hours`` column.

Architecture position
---------------------
**Kernel > Domain** -- pure data definitions with ZERO I/O.  Produced by
the ORM ``to_dto()`` methods and consumed by ``billing_engines``.

Invariants enforced
-------------------
* Rates, quantities and snapshot amounts are non-negative.
* Day entries convert to hours at exactly ``HOURS_PER_DAY`` (8) hours
  per day.  Stored day entries hold ``days * 8`` in their ``hours``
  column; ``WorkQuantity.from_stored`` divides by 8 to recover the day
  count.
* A timesheet entry's ``employee_pay`` / ``client_charge`` are the
  amounts snapshotted when it was written; ``profit`` is always derived.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from billing_kernel.domain.values import Money

HOURS_PER_DAY = Decimal("8")


def normalize_quantity(value: Decimal) -> Decimal:
    """
    Drop storage scale from an hour or day count.

    ``Decimal("40.000000000")`` becomes ``Decimal("40")`` and
    ``Decimal("47.500000000")`` becomes ``Decimal("47.5")``, never an
    exponent form such as ``4E+1``.
    """
    value = Decimal(str(value))
    if value == value.to_integral_value():
        return value.quantize(Decimal("1"))
    return value.normalize()


class EntryType(str, Enum):
    """Unit in which a timesheet entry's worked time was recorded."""

    HOURS = "hours"
    DAYS = "days"


class EntryStatus(str, Enum):
    """Timesheet entry lifecycle status."""

    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"


class PaymentFrequency(str, Enum):
    """How often a house is invoiced and its caregivers are paid."""

    WEEKLY = "weekly"
    BIWEEKLY = "bi-weekly"
    MONTHLY = "monthly"


class InvoiceStyle(str, Enum):
    """Client invoice rendering style."""

    GROUPED = "grouped"  # totals only
    DAILY = "daily"  # itemized by date


class EmployeeRole(str, Enum):
    ADMINISTRATOR = "Administrator"
    CAREGIVER = "Caregiver"


# =========================================================================
# Work quantity
# =========================================================================


@dataclass(frozen=True)
class WorkQuantity:
    """
    Tagged variant ``{entry_type, value}`` for an entry's worked time.

    ``value`` is an hour count for HOURS entries and a day count for
    DAYS entries.
    """

    entry_type: EntryType
    value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            object.__setattr__(self, "value", Decimal(str(self.value)))
        if not isinstance(self.entry_type, EntryType):
            object.__setattr__(self, "entry_type", EntryType(self.entry_type))
        if self.value < 0:
            raise ValueError("work quantity must be non-negative")

    @classmethod
    def of_hours(cls, hours: Decimal | int | str) -> WorkQuantity:
        return cls(EntryType.HOURS, Decimal(str(hours)))

    @classmethod
    def of_days(cls, days: Decimal | int | str) -> WorkQuantity:
        return cls(EntryType.DAYS, Decimal(str(days)))

    @classmethod
    def from_stored(cls, entry_type: EntryType | str, stored_hours: Decimal) -> WorkQuantity:
        """Decode the store's ``hours`` column (days * 8 for day entries)."""
        entry_type = EntryType(entry_type)
        stored_hours = Decimal(str(stored_hours))
        if entry_type == EntryType.DAYS:
            return cls(entry_type, normalize_quantity(stored_hours / HOURS_PER_DAY))
        return cls(entry_type, normalize_quantity(stored_hours))

    @property
    def is_days(self) -> bool:
        return self.entry_type == EntryType.DAYS

    @property
    def hours(self) -> Decimal:
        """Raw hour count; zero for day entries."""
        return Decimal("0") if self.is_days else self.value

    @property
    def days(self) -> Decimal:
        """Day count; zero for hour entries."""
        return self.value if self.is_days else Decimal("0")

    @property
    def hours_equivalent(self) -> Decimal:
        """Hours for hour entries, ``days * 8`` for day entries."""
        return self.value * HOURS_PER_DAY if self.is_days else self.value

    @property
    def stored_hours(self) -> Decimal:
        """Value written to the store's ``hours`` column."""
        return self.hours_equivalent


# =========================================================================
# Records
# =========================================================================


@dataclass(frozen=True)
class DayRates:
    """Per-day employee pay and client charge."""

    employee_pay_per_day: Decimal
    client_charge_per_day: Decimal

    def __post_init__(self) -> None:
        for attr in ("employee_pay_per_day", "client_charge_per_day"):
            val = getattr(self, attr)
            if not isinstance(val, Decimal):
                object.__setattr__(self, attr, Decimal(str(val)))
            if getattr(self, attr) < 0:
                raise ValueError(f"{attr} must be non-negative")

    @property
    def profit_per_day(self) -> Decimal:
        return self.client_charge_per_day - self.employee_pay_per_day


@dataclass(frozen=True)
class House:
    """
    A client care facility with its own rates and invoicing style.

    ``client_charge_per_day`` is typically >= ``employee_pay_per_day`` but
    this is not enforced; profit may be negative.
    """

    house_id: UUID
    name: str
    employee_pay_per_day: Decimal
    client_charge_per_day: Decimal
    payment_frequency: PaymentFrequency = PaymentFrequency.WEEKLY
    invoice_style: InvoiceStyle = InvoiceStyle.GROUPED
    notes: str | None = None

    def __post_init__(self) -> None:
        for attr in ("employee_pay_per_day", "client_charge_per_day"):
            val = getattr(self, attr)
            if not isinstance(val, Decimal):
                object.__setattr__(self, attr, Decimal(str(val)))
            if getattr(self, attr) < 0:
                raise ValueError(f"{attr} must be non-negative")

    @property
    def day_rates(self) -> DayRates:
        return DayRates(self.employee_pay_per_day, self.client_charge_per_day)


@dataclass(frozen=True)
class Employee:
    """A caregiver or administrator.  ``house_id`` is a weak default-house reference."""

    employee_id: UUID
    name: str
    email: str
    role: EmployeeRole = EmployeeRole.CAREGIVER
    house_id: UUID | None = None

    @property
    def is_administrator(self) -> bool:
        return self.role == EmployeeRole.ADMINISTRATOR


@dataclass(frozen=True)
class TimesheetEntry:
    """
    One logged unit of work with its snapshotted money amounts.

    ``employee_name`` is the display name at fetch time; client invoices
    group on it.
    """

    entry_id: UUID
    employee_id: UUID
    employee_name: str
    work_date: date
    quantity: WorkQuantity
    employee_pay: Money
    client_charge: Money
    status: EntryStatus = EntryStatus.PENDING
    house_id: UUID | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.employee_pay.is_negative:
            raise ValueError("employee_pay must be non-negative")
        if self.client_charge.is_negative:
            raise ValueError("client_charge must be non-negative")
        if self.employee_pay.currency != self.client_charge.currency:
            raise ValueError("employee_pay and client_charge must share a currency")

    @property
    def entry_type(self) -> EntryType:
        return self.quantity.entry_type

    @property
    def hours_equivalent(self) -> Decimal:
        return self.quantity.hours_equivalent

    @property
    def profit(self) -> Money:
        return self.client_charge - self.employee_pay

    @property
    def currency(self) -> str:
        return self.client_charge.currency


@dataclass(frozen=True)
class TimesheetSummary:
    """Headline totals, as returned by the store's summary query."""

    total_revenue: Money
    total_payroll: Money
    total_hours: Decimal
    total_entries: int

    @property
    def total_profit(self) -> Money:
        return self.total_revenue - self.total_payroll
