"""
Module: billing_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    billing computation engines: Rate Resolver, Period Filter,
    Aggregation Engine, Invoice Formatter and Payroll Formatter.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import billing_kernel.domain, billing_kernel.exceptions and
    sibling engine modules.  MUST NOT import billing_services or the
    data store.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Invoice/report dates and filename timestamps are parameters.
    - Decimal-only arithmetic for money and quantities.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from billing_engines import (
        ReportPeriod, resolve_range, filter_entries,
        aggregate_entries, format_client_invoice, format_payroll_report,
    )
"""

from billing_engines.aggregation import (
    BillingAggregate,
    EmployeePerformance,
    EmployeeTotals,
    InvoiceGroup,
    Overview,
    aggregate_entries,
    build_overview,
    compute_margin,
    employee_performance,
    margin_percent,
)
from billing_engines.formatting import (
    format_money,
    format_month_day,
    format_quantity,
    period_token,
    render_to_dict,
    report_filename,
)
from billing_engines.invoice import (
    DailyLines,
    GroupedLines,
    InvoiceEmployeeBlock,
    InvoiceLineStrategy,
    InvoiceView,
    format_client_invoice,
)
from billing_engines.payroll import (
    PaginationHints,
    PayrollEmployeeRow,
    PayrollEntryRow,
    PayrollView,
    format_payroll_report,
    paginate,
)
from billing_engines.periods import (
    ALL_HOUSES,
    DateRange,
    PeriodKind,
    ReportPeriod,
    filter_entries,
    period_for_frequency,
    period_label,
    resolve_range,
)
from billing_engines.rates import (
    RateBand,
    RateTable,
    RateType,
    ResolvedRates,
    classify_rate_type,
    rate_type_for,
    reprice_entry,
    resolve_rates,
)

__all__ = [
    "ALL_HOUSES",
    "BillingAggregate",
    "DailyLines",
    "DateRange",
    "EmployeePerformance",
    "EmployeeTotals",
    "GroupedLines",
    "InvoiceEmployeeBlock",
    "InvoiceGroup",
    "InvoiceLineStrategy",
    "InvoiceView",
    "Overview",
    "PaginationHints",
    "PayrollEmployeeRow",
    "PayrollEntryRow",
    "PayrollView",
    "PeriodKind",
    "RateBand",
    "RateTable",
    "RateType",
    "ReportPeriod",
    "ResolvedRates",
    "aggregate_entries",
    "build_overview",
    "classify_rate_type",
    "compute_margin",
    "employee_performance",
    "filter_entries",
    "format_client_invoice",
    "format_money",
    "format_month_day",
    "format_payroll_report",
    "format_quantity",
    "margin_percent",
    "paginate",
    "period_for_frequency",
    "period_label",
    "period_token",
    "render_to_dict",
    "report_filename",
    "reprice_entry",
    "resolve_range",
    "resolve_rates",
]
