"""Kernel write services (flush-only; the caller owns the transaction)."""

from billing_kernel.services.base import BaseService
from billing_kernel.services.employee_service import EmployeeService
from billing_kernel.services.house_service import HouseService

__all__ = [
    "BaseService",
    "EmployeeService",
    "HouseService",
]
