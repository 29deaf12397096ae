"""
Config -> Engine Bridges.

Functions that convert a ``BillingConfig`` into engine inputs.  These
live in billing_config (the producer) because the engines must never
import billing_config.

Usage:
    from billing_config.bridges import build_rate_table, build_default_rates

    config = get_active_config()
    rate_table = build_rate_table(config)
    default_rates = build_default_rates(config)
"""

from __future__ import annotations

from billing_config.schema import BillingConfig
from billing_engines.payroll import PaginationHints
from billing_engines.rates import RateBand, RateTable, RateType
from billing_kernel.domain.records import DayRates, InvoiceStyle


def build_rate_table(config: BillingConfig) -> RateTable:
    """Build the engine ``RateTable`` from the configured hourly bands."""
    return RateTable(bands=tuple(
        RateBand(
            rate_type=RateType(band.rate_type),
            max_hours=band.max_hours,
            pay_multiplier=band.pay_multiplier,
            charge_multiplier=band.charge_multiplier,
        )
        for band in config.hourly_bands
    ))


def build_default_rates(config: BillingConfig) -> DayRates | None:
    """Fallback day rates for house-less entries, or None when not configured."""
    if config.default_rates is None:
        return None
    return DayRates(
        employee_pay_per_day=config.default_rates.employee_pay_per_day,
        client_charge_per_day=config.default_rates.client_charge_per_day,
    )


def build_pagination(config: BillingConfig) -> PaginationHints:
    return PaginationHints(
        rows_per_page=config.payroll.rows_per_page,
        repeat_header_on_new_page=config.payroll.repeat_header,
    )


def default_invoice_style(config: BillingConfig) -> InvoiceStyle:
    return InvoiceStyle(config.invoice.default_style)
