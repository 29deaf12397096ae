"""
Billing kernel domain layer -- pure values and records, zero I/O.
"""

from billing_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from billing_kernel.domain.records import (
    HOURS_PER_DAY,
    DayRates,
    Employee,
    EmployeeRole,
    EntryStatus,
    EntryType,
    House,
    InvoiceStyle,
    PaymentFrequency,
    TimesheetEntry,
    TimesheetSummary,
    WorkQuantity,
    normalize_quantity,
)
from billing_kernel.domain.values import CurrencyRegistry, Money, sum_money

__all__ = [
    "Clock",
    "CurrencyRegistry",
    "DayRates",
    "DeterministicClock",
    "Employee",
    "EmployeeRole",
    "EntryStatus",
    "EntryType",
    "HOURS_PER_DAY",
    "House",
    "InvoiceStyle",
    "Money",
    "PaymentFrequency",
    "SystemClock",
    "TimesheetEntry",
    "TimesheetSummary",
    "WorkQuantity",
    "normalize_quantity",
    "sum_money",
]
