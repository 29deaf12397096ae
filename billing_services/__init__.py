"""
billing_services -- stateful orchestration over the billing engines.

Responsibility:
    Services that compose the pure engines (billing_engines/) with a
    database session and the injected clock.  This is the only layer
    that reads wall-clock time (through ``Clock``).

Dependency direction:
    billing_services/ -> billing_engines/  (allowed)
    billing_services/ -> billing_kernel/   (allowed)
    billing_engines/  -> billing_services/ (FORBIDDEN)
    billing_kernel/   -> billing_services/ (FORBIDDEN)
"""

from billing_services.report_service import GeneratedReport, ReportService
from billing_services.timesheet_service import TimesheetService

__all__ = [
    "GeneratedReport",
    "ReportService",
    "TimesheetService",
]
