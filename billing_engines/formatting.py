"""
Display and filename helpers shared by the invoice and payroll formatters.

ZERO I/O. ZERO clock reads: timestamps are passed in.
"""

from __future__ import annotations

import dataclasses
import re
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from billing_engines.periods import PeriodKind, ReportPeriod, resolve_range
from billing_kernel.domain.values import Money

ALL_HOUSES_TOKEN = "all-houses"

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def format_money(amount: Money | Decimal) -> str:
    """``$1000.00`` -- symbol, no thousands separator, currency precision."""
    money = amount if isinstance(amount, Money) else Money.of(amount)
    rounded = money.round()
    return f"{rounded.info.symbol}{rounded.amount}"


def format_quantity(value: Decimal) -> str:
    """Decimal without trailing zeros: 5 -> "5", 2.50 -> "2.5"."""
    if value == value.to_integral_value():
        return str(value.quantize(Decimal("1")))
    return format(value.normalize(), "f")


def pluralize(value: Decimal, unit: str) -> str:
    """``1 day`` / ``5 days`` / ``0.5 days``."""
    suffix = "" if value == 1 else "s"
    return f"{format_quantity(value)} {unit}{suffix}"


def format_month_day(day: date) -> str:
    """Two-digit month/day, e.g. ``01/05``."""
    return day.strftime("%m/%d")


# ============================================================================
# Filenames
# ============================================================================


def slugify(name: str) -> str:
    """Lowercase, non-alphanumeric runs collapsed to ``-``."""
    return _SLUG_RE.sub("-", name.lower()).strip("-")


def period_token(period: ReportPeriod) -> str:
    """``all-time`` | ``YYYY-MM`` | ``week-<start>`` | ``biweek-<start>``."""
    if period.kind == PeriodKind.ALL_TIME:
        return "all-time"
    date_range = resolve_range(period)
    if period.kind == PeriodKind.MONTHLY:
        return date_range.start.strftime("%Y-%m")
    if period.kind == PeriodKind.WEEKLY:
        return f"week-{date_range.start.isoformat()}"
    return f"biweek-{date_range.start.isoformat()}"


def report_filename(
    report_kind: str,
    house_name: str | None,
    period: ReportPeriod,
    timestamp_ms: int,
) -> str:
    """
    ``<kind>-<house-or-"all-houses">-<period-token>-<timestamp>.pdf``.

    ``report_kind`` is "invoice" or "payroll".
    """
    house_part = slugify(house_name) if house_name else ALL_HOUSES_TOKEN
    return f"{report_kind}-{house_part or ALL_HOUSES_TOKEN}-{period_token(period)}-{timestamp_ms}.pdf"


# ============================================================================
# Serialization
# ============================================================================


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any view dataclass to plain primitives for JSON serialization.

    Handles:
    - Money -> {"amount": str, "currency": str}
    - Decimal -> str (preserving precision)
    - UUID -> str
    - date -> ISO format string
    - Enum -> .value
    - Nested frozen dataclasses -> nested dicts
    - Tuples -> lists
    """
    if obj is None:
        return None
    if isinstance(obj, Money):
        return {"amount": str(obj.amount), "currency": obj.currency}
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
