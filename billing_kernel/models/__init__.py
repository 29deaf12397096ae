"""ORM models.  Importing this package registers every table on Base.metadata."""

from billing_kernel.models.employee import EmployeeModel
from billing_kernel.models.house import HouseModel
from billing_kernel.models.timesheet import TimesheetEntryModel

__all__ = [
    "EmployeeModel",
    "HouseModel",
    "TimesheetEntryModel",
]
