"""
Report Service (``billing_services.report_service``).

Responsibility
--------------
Produces client invoices, payroll reports and dashboard figures for a
reporting period and optional house.  Each call resolves the period,
fetches a private snapshot of entries from the store, filters it,
aggregates it and hands the aggregate to a formatter.

Architecture position
---------------------
**Services layer** -- thin glue between ``TimesheetSelector`` and the pure
engines in ``billing_engines``.  Read-only.  Constructor: ``session`` +
``clock`` + ``config``.  The clock supplies invoice/report dates and the
filename timestamp; engines never read it.

Invariants enforced
-------------------
* Read-only -- no mutations to the store.
* Each call works on its own snapshot; nothing is cached between calls.
* Payroll reports exclude Administrators' entries.

Failure modes
-------------
* ``IncompleteFilterSpecificationError`` -- period missing a bound.
* ``HouseNotFoundError`` -- unknown house id.
* ``NoEntriesForPeriodError`` -- empty filtered set at formatting time.
Core errors propagate unchanged; there is no partial output.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.orm import Session

from billing_config import get_active_config
from billing_config.bridges import (
    build_pagination,
    build_rate_table,
    default_invoice_style,
)
from billing_config.schema import BillingConfig
from billing_engines.aggregation import (
    BillingAggregate,
    EmployeePerformance,
    Overview,
    aggregate_entries,
    build_overview,
    employee_performance,
)
from billing_engines.formatting import report_filename
from billing_engines.invoice import InvoiceView, format_client_invoice
from billing_engines.payroll import PayrollView, format_payroll_report
from billing_engines.periods import (
    ALL_HOUSES,
    DateRange,
    PeriodKind,
    ReportPeriod,
    filter_entries,
    period_label,
    resolve_range,
)
from billing_kernel.domain.clock import Clock, SystemClock
from billing_kernel.domain.records import House, TimesheetEntry
from billing_kernel.logging_config import LogContext, get_logger
from billing_kernel.selectors.timesheet_selector import TimesheetSelector

logger = get_logger("services.report")


@dataclass(frozen=True)
class GeneratedReport:
    """A formatted view plus the filename the renderer should write it to."""

    view: InvoiceView | PayrollView
    filename: str


@dataclass(frozen=True)
class _Snapshot:
    date_range: DateRange
    house: House | None
    entries: tuple[TimesheetEntry, ...]


class ReportService:
    """
    Report generation service.

    Contract
    --------
    * ``client_invoice`` / ``payroll_report`` return ``GeneratedReport``.
    * ``overview`` returns ``Overview``; ``employee_performance`` returns a
      tuple of ``EmployeePerformance`` rows.
    * All methods are read-only.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: BillingConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()
        self._selector = TimesheetSelector(session)
        self._rate_table = build_rate_table(self._config)

        logger.info(
            "report_service_initialized",
            extra={
                "company_name": self._config.company_name,
                "currency": self._config.currency,
                "config_checksum": self._config.checksum,
            },
        )

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _resolve_house(self, house_id: UUID | str | None) -> House | None:
        if house_id is None or house_id == ALL_HOUSES:
            return None
        if not isinstance(house_id, UUID):
            house_id = UUID(str(house_id))
        return self._selector.get_house(house_id)

    def _snapshot(
        self,
        period: ReportPeriod,
        house_id: UUID | str | None,
    ) -> _Snapshot:
        date_range = resolve_range(period)
        house = self._resolve_house(house_id)
        fetched = self._selector.list_entries(
            start_date=date_range.start,
            end_date=date_range.end,
        )
        entries = filter_entries(
            fetched,
            date_range,
            house.house_id if house else None,
        )
        logger.debug("report_snapshot_loaded", extra={
            "period_label": period_label(date_range),
            "house_id": str(house.house_id) if house else None,
            "fetched": len(fetched),
            "selected": len(entries),
        })
        return _Snapshot(date_range=date_range, house=house, entries=entries)

    def _aggregate(self, entries: tuple[TimesheetEntry, ...]) -> BillingAggregate:
        return aggregate_entries(entries, currency=self._config.currency)

    def _filename(self, kind: str, house: House | None, period: ReportPeriod) -> str:
        return report_filename(
            kind,
            house.name if house else None,
            period,
            self._clock.timestamp_ms(),
        )

    # =========================================================================
    # Public API
    # =========================================================================

    def client_invoice(
        self,
        period: ReportPeriod,
        house_id: UUID | str | None = None,
    ) -> GeneratedReport:
        """
        Build the client invoice for a period and optional house.

        Raises:
            IncompleteFilterSpecificationError: Period missing a bound.
            HouseNotFoundError: Unknown house.
            NoEntriesForPeriodError: Nothing to invoice.
        """
        with LogContext.bind(report_kind="client_invoice"):
            snap = self._snapshot(period, house_id)
            aggregate = self._aggregate(snap.entries)
            view = format_client_invoice(
                aggregate,
                snap.house,
                invoice_date=self._clock.today(),
                period_label=period_label(snap.date_range),
                company_name=self._config.company_name,
                default_style=default_invoice_style(self._config),
                footer_lines=self._config.invoice.footer_lines,
            )
            report = GeneratedReport(
                view=view,
                filename=self._filename("invoice", snap.house, period),
            )
            logger.info("report_generated", extra={
                "report_filename": report.filename,
                "total_entries": aggregate.total_entries,
                "total_amount_due": str(aggregate.total_revenue.amount),
            })
            return report

    def payroll_report(
        self,
        period: ReportPeriod,
        house_id: UUID | str | None = None,
    ) -> GeneratedReport:
        """
        Build the payroll report for a period and optional house.

        Administrators' entries are left out.

        Raises:
            IncompleteFilterSpecificationError: Period missing a bound.
            HouseNotFoundError: Unknown house.
            NoEntriesForPeriodError: No payable entries.
        """
        with LogContext.bind(report_kind="payroll_report"):
            snap = self._snapshot(period, house_id)
            admin_ids = {
                e.employee_id for e in self._selector.list_employees()
                if e.is_administrator
            }
            payable = tuple(e for e in snap.entries if e.employee_id not in admin_ids)
            aggregate = self._aggregate(payable)
            view = format_payroll_report(
                aggregate,
                date_range=snap.date_range,
                report_date=self._clock.today(),
                house=snap.house,
                company_name=self._config.company_name,
                rate_table=self._rate_table,
                pagination=build_pagination(self._config),
            )
            report = GeneratedReport(
                view=view,
                filename=self._filename("payroll", snap.house, period),
            )
            logger.info("report_generated", extra={
                "report_filename": report.filename,
                "total_entries": aggregate.total_entries,
                "total_payroll": str(aggregate.total_payroll.amount),
                "excluded_admin_entries": len(snap.entries) - len(payable),
            })
            return report

    def overview(
        self,
        period: ReportPeriod,
        house_id: UUID | str | None = None,
    ) -> Overview:
        """
        Dashboard figures.  The all-time, all-houses case uses the store's
        pre-computed summary; every other case is recomputed.
        """
        if period.kind == PeriodKind.ALL_TIME and self._resolve_house(house_id) is None:
            return build_overview(self._selector.summary(self._config.currency))
        snap = self._snapshot(period, house_id)
        return build_overview(self._aggregate(snap.entries).summary())

    def employee_performance(
        self,
        period: ReportPeriod,
        house_id: UUID | str | None = None,
    ) -> tuple[EmployeePerformance, ...]:
        """Per-caregiver performance rows for the period (zero rows included)."""
        snap = self._snapshot(period, house_id)
        return employee_performance(
            self._aggregate(snap.entries),
            self._selector.list_employees(),
        )
