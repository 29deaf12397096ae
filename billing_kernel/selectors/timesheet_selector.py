"""
Module: billing_kernel.selectors.timesheet_selector
Responsibility: Read-only queries that hand the billing engines their
    input snapshot: timesheet entries (with the employee display name
    joined in), houses, employees and the pre-computed summary.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Entries are returned ordered by work date, then creation time.
    - Every call returns a fresh tuple of frozen DTOs; callers own their
      copy and nothing is shared between report computations.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select

from billing_kernel.domain.records import (
    Employee,
    House,
    TimesheetEntry,
    TimesheetSummary,
    normalize_quantity,
)
from billing_kernel.domain.values import Money
from billing_kernel.exceptions import EmployeeNotFoundError, HouseNotFoundError
from billing_kernel.models.employee import EmployeeModel
from billing_kernel.models.house import HouseModel
from billing_kernel.models.timesheet import TimesheetEntryModel
from billing_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class EmployeeStats:
    """Lifetime totals for one employee."""

    employee_id: UUID
    total_hours: Decimal
    total_earnings: Money
    total_entries: int


class TimesheetSelector(BaseSelector):
    """Queries over houses, employees and timesheet entries."""

    # =========================================================================
    # Entries
    # =========================================================================

    def list_entries(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        employee_id: UUID | None = None,
        house_id: UUID | None = None,
    ) -> tuple[TimesheetEntry, ...]:
        """
        Entries matching the optional bounds, as ``TimesheetEntry`` DTOs.

        Date bounds are inclusive.  Ordered by date, then creation time,
        then id.
        """
        stmt = (
            select(TimesheetEntryModel, EmployeeModel.name)
            .join(EmployeeModel, EmployeeModel.id == TimesheetEntryModel.employee_id)
        )
        if start_date is not None:
            stmt = stmt.where(TimesheetEntryModel.work_date >= start_date)
        if end_date is not None:
            stmt = stmt.where(TimesheetEntryModel.work_date <= end_date)
        if employee_id is not None:
            stmt = stmt.where(TimesheetEntryModel.employee_id == employee_id)
        if house_id is not None:
            stmt = stmt.where(TimesheetEntryModel.house_id == house_id)
        stmt = stmt.order_by(
            TimesheetEntryModel.work_date,
            TimesheetEntryModel.created_at,
            TimesheetEntryModel.id,
        )

        rows = self.session.execute(stmt).all()
        return tuple(model.to_dto(name) for model, name in rows)

    def get_entry(self, entry_id: UUID) -> TimesheetEntry | None:
        stmt = (
            select(TimesheetEntryModel, EmployeeModel.name)
            .join(EmployeeModel, EmployeeModel.id == TimesheetEntryModel.employee_id)
            .where(TimesheetEntryModel.id == entry_id)
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            return None
        model, name = row
        return model.to_dto(name)

    def summary(self, currency: str = "USD") -> TimesheetSummary:
        """Totals over every stored entry (the unfiltered dashboard summary)."""
        stmt = select(
            func.coalesce(func.sum(TimesheetEntryModel.client_charge), 0),
            func.coalesce(func.sum(TimesheetEntryModel.employee_pay), 0),
            func.coalesce(func.sum(TimesheetEntryModel.hours), 0),
            func.count(TimesheetEntryModel.id),
        )
        revenue, payroll, hours, count = self.session.execute(stmt).one()
        return TimesheetSummary(
            total_revenue=Money.of(Decimal(str(revenue)), currency).round(),
            total_payroll=Money.of(Decimal(str(payroll)), currency).round(),
            total_hours=normalize_quantity(hours),
            total_entries=int(count),
        )

    def employee_stats(self, employee_id: UUID, currency: str = "USD") -> EmployeeStats:
        """
        Lifetime hour-equivalents, earnings and entry count for one employee.

        Raises:
            EmployeeNotFoundError: Unknown employee.
        """
        if self.session.get(EmployeeModel, employee_id) is None:
            raise EmployeeNotFoundError(str(employee_id))
        stmt = select(
            func.coalesce(func.sum(TimesheetEntryModel.hours), 0),
            func.coalesce(func.sum(TimesheetEntryModel.employee_pay), 0),
            func.count(TimesheetEntryModel.id),
        ).where(TimesheetEntryModel.employee_id == employee_id)
        hours, earnings, count = self.session.execute(stmt).one()
        return EmployeeStats(
            employee_id=employee_id,
            total_hours=normalize_quantity(hours),
            total_earnings=Money.of(Decimal(str(earnings)), currency).round(),
            total_entries=int(count),
        )

    # =========================================================================
    # Houses and employees
    # =========================================================================

    def list_houses(self) -> tuple[House, ...]:
        stmt = select(HouseModel).order_by(HouseModel.name)
        return tuple(h.to_dto() for h in self.session.execute(stmt).scalars())

    def get_house(self, house_id: UUID) -> House:
        """
        Raises:
            HouseNotFoundError: Unknown house.
        """
        house = self.session.get(HouseModel, house_id)
        if house is None:
            raise HouseNotFoundError(str(house_id))
        return house.to_dto()

    def list_employees(self, house_id: UUID | None = None) -> tuple[Employee, ...]:
        stmt = select(EmployeeModel)
        if house_id is not None:
            stmt = stmt.where(EmployeeModel.house_id == house_id)
        stmt = stmt.order_by(EmployeeModel.name)
        return tuple(e.to_dto() for e in self.session.execute(stmt).scalars())

    def get_employee(self, employee_id: UUID) -> Employee:
        """
        Raises:
            EmployeeNotFoundError: Unknown employee.
        """
        employee = self.session.get(EmployeeModel, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(str(employee_id))
        return employee.to_dto()
