"""
Typed Exception Hierarchy for the Billing Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from BillingKernelError:

    BillingKernelError (base)
    |
    +-- RateError
    |   +-- MissingRateConfigurationError
    |
    +-- PeriodError
    |   +-- IncompleteFilterSpecificationError
    |
    +-- ReportError
    |   +-- NoEntriesForPeriodError
    |
    +-- StoreError
        +-- HouseNotFoundError
        +-- EmployeeNotFoundError
        +-- TimesheetEntryNotFoundError
        +-- DuplicateEmailError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                             | When Raised
-----------|----------------------------------|---------------------------------------
Rate       | MISSING_RATE_CONFIGURATION       | No house and no default day rate
-----------|----------------------------------|---------------------------------------
Period     | INCOMPLETE_FILTER_SPECIFICATION  | Weekly/bi-weekly without a start date,
           |                                  | monthly without year/month
-----------|----------------------------------|---------------------------------------
Report     | NO_ENTRIES_FOR_PERIOD            | Filtered entry set is empty
-----------|----------------------------------|---------------------------------------
Store      | HOUSE_NOT_FOUND                  | House ID doesn't exist
           | EMPLOYEE_NOT_FOUND               | Employee ID doesn't exist
           | TIMESHEET_ENTRY_NOT_FOUND        | Entry ID doesn't exist
           | DUPLICATE_EMAIL                  | Employee email already registered

===============================================================================
HANDLING PATTERNS
===============================================================================

Every error is terminal for the single requested report or mutation.
The application layer translates codes into user-facing messages:

    try:
        report = report_service.client_invoice(period, house_id=house_id)
    except NoEntriesForPeriodError as e:
        return {"error": e.code, "period": e.period_label}
    except IncompleteFilterSpecificationError as e:
        return {"error": e.code, "missing": e.missing_field}

Programming errors (negative rates, month 13, malformed dates) raise
``ValueError`` and are not part of this hierarchy.

Margin computation with zero revenue is guarded in
``billing_engines.aggregation.compute_margin`` and returns 0; it never
raises.
"""


class BillingKernelError(Exception):
    """
    Base exception for all billing kernel errors.

    All subclasses must have a `code` class attribute
    for machine-readable error identification.
    """

    code: str = "BILLING_KERNEL_ERROR"


# Rate-related exceptions


class RateError(BillingKernelError):
    """Base exception for rate resolution errors."""

    code: str = "RATE_ERROR"


class MissingRateConfigurationError(RateError):
    """Entry references a house/rate that cannot be resolved."""

    code: str = "MISSING_RATE_CONFIGURATION"

    def __init__(self, house_id: str | None, entry_id: str | None = None):
        self.house_id = house_id
        self.entry_id = entry_id
        target = f"house {house_id}" if house_id else "entry without a house"
        super().__init__(
            f"No rate configuration available for {target}"
            + (f" (entry {entry_id})" if entry_id else "")
        )


# Period-related exceptions


class PeriodError(BillingKernelError):
    """Base exception for reporting-period errors."""

    code: str = "PERIOD_ERROR"


class IncompleteFilterSpecificationError(PeriodError):
    """A period type requiring a bound was selected without one."""

    code: str = "INCOMPLETE_FILTER_SPECIFICATION"

    def __init__(self, period_kind: str, missing_field: str):
        self.period_kind = period_kind
        self.missing_field = missing_field
        super().__init__(
            f"Period '{period_kind}' requires '{missing_field}'"
        )


# Report-related exceptions


class ReportError(BillingKernelError):
    """Base exception for report formatting errors."""

    code: str = "REPORT_ERROR"


class NoEntriesForPeriodError(ReportError):
    """The filtered entry set is empty at formatting time."""

    code: str = "NO_ENTRIES_FOR_PERIOD"

    def __init__(self, report_kind: str, period_label: str, house_id: str | None = None):
        self.report_kind = report_kind
        self.period_label = period_label
        self.house_id = house_id
        super().__init__(
            f"No timesheet entries for {report_kind} ({period_label})"
            + (f" at house {house_id}" if house_id else "")
        )


# Data store exceptions


class StoreError(BillingKernelError):
    """Base exception for data store errors."""

    code: str = "STORE_ERROR"


class HouseNotFoundError(StoreError):
    """House with given ID was not found."""

    code: str = "HOUSE_NOT_FOUND"

    def __init__(self, house_id: str):
        self.house_id = house_id
        super().__init__(f"House not found: {house_id}")


class EmployeeNotFoundError(StoreError):
    """Employee with given ID was not found."""

    code: str = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"Employee not found: {employee_id}")


class TimesheetEntryNotFoundError(StoreError):
    """Timesheet entry with given ID was not found."""

    code: str = "TIMESHEET_ENTRY_NOT_FOUND"

    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__(f"Timesheet entry not found: {entry_id}")


class DuplicateEmailError(StoreError):
    """An employee with this email already exists."""

    code: str = "DUPLICATE_EMAIL"

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already registered: {email}")
