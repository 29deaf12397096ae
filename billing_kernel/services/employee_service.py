"""
Service layer for Employee operations.

Returns ``Employee`` DTOs, never ORM entities.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, select

from billing_kernel.domain.records import Employee, EmployeeRole
from billing_kernel.exceptions import (
    DuplicateEmailError,
    EmployeeNotFoundError,
    HouseNotFoundError,
)
from billing_kernel.logging_config import get_logger
from billing_kernel.models.employee import EmployeeModel
from billing_kernel.models.house import HouseModel
from billing_kernel.models.timesheet import TimesheetEntryModel
from billing_kernel.services.base import BaseService

logger = get_logger("services.employee")


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class EmployeeService(BaseService):
    """Service for managing caregivers and administrators."""

    def _get_by_id(self, employee_id: UUID) -> EmployeeModel:
        """Get employee by ID, raising if not found."""
        employee = self.session.get(EmployeeModel, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(str(employee_id))
        return employee

    def _check_house(self, house_id: UUID | None) -> None:
        if house_id is not None and self.session.get(HouseModel, house_id) is None:
            raise HouseNotFoundError(str(house_id))

    def _check_email_free(self, email: str, exclude_id: UUID | None = None) -> None:
        stmt = select(EmployeeModel.id).where(EmployeeModel.email == email)
        if exclude_id is not None:
            stmt = stmt.where(EmployeeModel.id != exclude_id)
        if self.session.execute(stmt).first() is not None:
            raise DuplicateEmailError(email)

    def get_by_id(self, employee_id: UUID) -> Employee:
        """
        Raises:
            EmployeeNotFoundError: If the employee doesn't exist.
        """
        return self._get_by_id(employee_id).to_dto()

    def list_employees(self, house_id: UUID | None = None) -> list[Employee]:
        stmt = select(EmployeeModel)
        if house_id is not None:
            stmt = stmt.where(EmployeeModel.house_id == house_id)
        stmt = stmt.order_by(EmployeeModel.name)
        return [e.to_dto() for e in self.session.execute(stmt).scalars()]

    def create_employee(
        self,
        name: str,
        email: str,
        actor_id: UUID,
        role: EmployeeRole = EmployeeRole.CAREGIVER,
        house_id: UUID | None = None,
    ) -> Employee:
        """
        Create a new employee.

        Args:
            name: Display name (used to group client invoice lines).
            email: Unique login email; compared case-insensitively.
            actor_id: UUID of the user creating the employee.
            role: Administrator or Caregiver.
            house_id: Default house for new timesheet entries.

        Returns:
            Created Employee DTO.

        Raises:
            DuplicateEmailError: Email already registered.
            HouseNotFoundError: ``house_id`` doesn't exist.
        """
        email = _normalize_email(email)
        self._check_email_free(email)
        self._check_house(house_id)

        employee = EmployeeModel(
            name=name,
            email=email,
            role=EmployeeRole(role).value,
            house_id=house_id,
            created_by_id=actor_id,
        )
        self.session.add(employee)
        self.session.flush()

        logger.info("employee_created", extra={
            "employee_id": str(employee.id),
            "role": employee.role,
            "house_id": str(house_id) if house_id else None,
        })
        return employee.to_dto()

    def update_employee(
        self,
        employee_id: UUID,
        actor_id: UUID,
        name: str | None = None,
        email: str | None = None,
        role: EmployeeRole | None = None,
    ) -> Employee:
        """
        Update employee details.  Only provided fields change.

        A renamed employee's existing entries appear under the new name
        on later invoices; the name is not snapshotted.

        Raises:
            EmployeeNotFoundError: If the employee doesn't exist.
            DuplicateEmailError: New email already registered.
        """
        employee = self._get_by_id(employee_id)

        if email is not None:
            email = _normalize_email(email)
            self._check_email_free(email, exclude_id=employee_id)
            employee.email = email
        if name is not None:
            employee.name = name
        if role is not None:
            employee.role = EmployeeRole(role).value
        employee.updated_by_id = actor_id

        self.session.flush()
        logger.info("employee_updated", extra={"employee_id": str(employee_id)})
        return employee.to_dto()

    def assign_house(
        self,
        employee_id: UUID,
        house_id: UUID | None,
        actor_id: UUID,
    ) -> Employee:
        """
        Set (or clear, with None) the employee's default house.

        Raises:
            EmployeeNotFoundError: If the employee doesn't exist.
            HouseNotFoundError: ``house_id`` doesn't exist.
        """
        employee = self._get_by_id(employee_id)
        self._check_house(house_id)
        employee.house_id = house_id
        employee.updated_by_id = actor_id
        self.session.flush()

        logger.info("employee_house_assigned", extra={
            "employee_id": str(employee_id),
            "house_id": str(house_id) if house_id else None,
        })
        return employee.to_dto()

    def delete_employee(self, employee_id: UUID) -> int:
        """
        Delete an employee and all of their timesheet entries.

        Returns:
            Number of timesheet entries deleted.

        Raises:
            EmployeeNotFoundError: If the employee doesn't exist.
        """
        employee = self._get_by_id(employee_id)
        result = self.session.execute(
            delete(TimesheetEntryModel)
            .where(TimesheetEntryModel.employee_id == employee_id)
        )
        self.session.delete(employee)
        self.session.flush()

        logger.info("employee_deleted", extra={
            "employee_id": str(employee_id),
            "entries_deleted": result.rowcount,
        })
        return result.rowcount
