"""Read-only selectors."""

from billing_kernel.selectors.base import BaseSelector
from billing_kernel.selectors.timesheet_selector import EmployeeStats, TimesheetSelector

__all__ = [
    "BaseSelector",
    "EmployeeStats",
    "TimesheetSelector",
]
