"""
Period Filter (``billing_engines.periods``).

Responsibility
--------------
Resolves a reporting-period selector (all-time, monthly, weekly,
bi-weekly) into an inclusive date range and selects the timesheet
entries that fall inside it, optionally restricted to one house.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO clock reads.

Invariants enforced
-------------------
* Ranges are inclusive at both ends.
* Monthly ranges end on the true last day of the month (leap years
  included); weekly ranges span 7 days; bi-weekly ranges span 14 days.
* A period that needs a bound it was not given raises
  ``IncompleteFilterSpecificationError``; it never widens to all-time.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from uuid import UUID

from billing_kernel.domain.records import PaymentFrequency, TimesheetEntry
from billing_kernel.exceptions import IncompleteFilterSpecificationError

ALL_HOUSES = "all"


class PeriodKind(str, Enum):
    ALL_TIME = "all"
    MONTHLY = "monthly"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"


_SPAN_DAYS = {
    PeriodKind.WEEKLY: 7,
    PeriodKind.BIWEEKLY: 14,
}


@dataclass(frozen=True)
class ReportPeriod:
    """
    Request-scoped reporting window selector.

    Construct through the ``all_time`` / ``monthly`` / ``weekly`` /
    ``biweekly`` factories.  Missing bounds are accepted here and rejected
    by ``resolve_range``.
    """

    kind: PeriodKind
    year: int | None = None
    month: int | None = None
    start_date: date | None = None

    def __post_init__(self) -> None:
        if self.month is not None and not 1 <= self.month <= 12:
            raise ValueError(f"month must be between 1 and 12, got {self.month}")

    @classmethod
    def all_time(cls) -> ReportPeriod:
        return cls(PeriodKind.ALL_TIME)

    @classmethod
    def monthly(cls, year: int | None, month: int | None) -> ReportPeriod:
        return cls(PeriodKind.MONTHLY, year=year, month=month)

    @classmethod
    def weekly(cls, start_date: date | None) -> ReportPeriod:
        return cls(PeriodKind.WEEKLY, start_date=start_date)

    @classmethod
    def biweekly(cls, start_date: date | None) -> ReportPeriod:
        return cls(PeriodKind.BIWEEKLY, start_date=start_date)

    @classmethod
    def from_selector(cls, kind: str, value: str | None = None) -> ReportPeriod:
        """
        Parse a UI period selector.

        ``kind`` is one of "all", "monthly", "weekly", "biweekly"
        ("bi-weekly" is accepted).  ``value`` is "YYYY-MM" for monthly and
        "YYYY-MM-DD" for weekly/bi-weekly.

        Raises:
            IncompleteFilterSpecificationError: ``value`` missing for a
                kind that needs one.
            ValueError: Unknown kind or malformed value.
        """
        period_kind = PeriodKind(kind.strip().lower().replace("-", ""))
        value = value.strip() if value else None

        if period_kind == PeriodKind.ALL_TIME:
            return cls.all_time()

        if period_kind == PeriodKind.MONTHLY:
            if not value:
                raise IncompleteFilterSpecificationError(period_kind.value, "month")
            year_str, _, month_str = value.partition("-")
            if not (year_str.isdigit() and month_str.isdigit()):
                raise ValueError(f"Monthly period must be YYYY-MM, got {value!r}")
            return cls.monthly(int(year_str), int(month_str))

        if not value:
            raise IncompleteFilterSpecificationError(period_kind.value, "start_date")
        return cls(period_kind, start_date=date.fromisoformat(value))


@dataclass(frozen=True)
class DateRange:
    """Inclusive ``[start, end]`` range; both None means unbounded (all time)."""

    start: date | None
    end: date | None

    def __post_init__(self) -> None:
        if (self.start is None) != (self.end is None):
            raise ValueError("DateRange bounds must both be set or both be None")
        if self.start is not None and self.end < self.start:
            raise ValueError(f"DateRange end {self.end} precedes start {self.start}")

    @classmethod
    def unbounded(cls) -> DateRange:
        return cls(None, None)

    @property
    def is_unbounded(self) -> bool:
        return self.start is None

    @property
    def day_count(self) -> int | None:
        if self.is_unbounded:
            return None
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        if self.is_unbounded:
            return True
        return self.start <= day <= self.end


def resolve_range(period: ReportPeriod) -> DateRange:
    """
    Resolve a period selector to its inclusive date range.

    Raises:
        IncompleteFilterSpecificationError: Required bound missing.
    """
    if period.kind == PeriodKind.ALL_TIME:
        return DateRange.unbounded()

    if period.kind == PeriodKind.MONTHLY:
        if period.year is None:
            raise IncompleteFilterSpecificationError(period.kind.value, "year")
        if period.month is None:
            raise IncompleteFilterSpecificationError(period.kind.value, "month")
        last_day = calendar.monthrange(period.year, period.month)[1]
        return DateRange(
            date(period.year, period.month, 1),
            date(period.year, period.month, last_day),
        )

    if period.start_date is None:
        raise IncompleteFilterSpecificationError(period.kind.value, "start_date")
    span = _SPAN_DAYS[period.kind]
    return DateRange(period.start_date, period.start_date + timedelta(days=span - 1))


def _house_matches(entry: TimesheetEntry, house_id: UUID | str | None) -> bool:
    if house_id is None or house_id == ALL_HOUSES:
        return True
    return entry.house_id is not None and str(entry.house_id) == str(house_id)


def filter_entries(
    entries: Iterable[TimesheetEntry],
    date_range: DateRange,
    house_id: UUID | str | None = None,
) -> tuple[TimesheetEntry, ...]:
    """
    Select the entries inside ``date_range`` and, when given, at ``house_id``.

    ``house_id`` of None or "all" disables the house predicate.  Input
    order is preserved.
    """
    return tuple(
        e for e in entries
        if date_range.contains(e.work_date) and _house_matches(e, house_id)
    )


def period_label(date_range: DateRange) -> str:
    """Human-readable period line for report headers."""
    if date_range.is_unbounded:
        return "All Time"
    return f"{date_range.start.isoformat()} to {date_range.end.isoformat()}"


def period_for_frequency(frequency: PaymentFrequency, anchor: date) -> ReportPeriod:
    """
    Map a house's payment frequency to a reporting period.

    Weekly and bi-weekly periods start at ``anchor``; monthly periods
    cover the calendar month containing it.
    """
    frequency = PaymentFrequency(frequency)
    if frequency == PaymentFrequency.WEEKLY:
        return ReportPeriod.weekly(anchor)
    if frequency == PaymentFrequency.BIWEEKLY:
        return ReportPeriod.biweekly(anchor)
    return ReportPeriod.monthly(anchor.year, anchor.month)
