"""
BillingConfig schema.

Frozen dataclasses for the billing configuration.  YAML files are parsed
into these types by the loader; ``bridges`` turns them into engine
inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

# ---------------------------------------------------------------------------
# Rates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HourlyBandDef:
    """One hourly band: ``max_hours`` None means open-ended."""

    rate_type: str
    max_hours: Decimal | None
    pay_multiplier: Decimal = Decimal("1")
    charge_multiplier: Decimal = Decimal("1")


@dataclass(frozen=True)
class DayRateDef:
    """Fallback day rates for entries with no house."""

    employee_pay_per_day: Decimal
    client_charge_per_day: Decimal


# ---------------------------------------------------------------------------
# Report settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InvoiceSettings:
    default_style: str = "grouped"
    footer_lines: tuple[str, ...] = (
        "Payment Terms: Net 30 Days",
        "Thank you for your business!",
    )


@dataclass(frozen=True)
class PayrollSettings:
    rows_per_page: int = 35
    repeat_header: bool = True


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BillingConfig:
    """The complete, validated billing configuration."""

    config_id: str
    version: int
    checksum: str
    currency: str
    company_name: str
    hourly_bands: tuple[HourlyBandDef, ...]
    invoice: InvoiceSettings = field(default_factory=InvoiceSettings)
    payroll: PayrollSettings = field(default_factory=PayrollSettings)
    default_rates: DayRateDef | None = None
