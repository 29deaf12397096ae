"""Tests for EmployeeService."""

from datetime import date
from uuid import uuid4

import pytest

from billing_kernel.domain.records import EmployeeRole, WorkQuantity
from billing_kernel.exceptions import (
    DuplicateEmailError,
    EmployeeNotFoundError,
    HouseNotFoundError,
)


class TestEmployeeService:

    def test_create(self, employee_service, grouped_house, actor_id):
        emp = employee_service.create_employee(
            "Sam Poe", "Sam@Example.com", actor_id, house_id=grouped_house.house_id,
        )
        assert emp.email == "sam@example.com"
        assert emp.role == EmployeeRole.CAREGIVER
        assert emp.house_id == grouped_house.house_id

    def test_duplicate_email(self, employee_service, caregiver, actor_id):
        with pytest.raises(DuplicateEmailError) as exc_info:
            employee_service.create_employee("Other", "JANE@example.com", actor_id)
        assert exc_info.value.code == "DUPLICATE_EMAIL"

    def test_update_email_to_taken_one(self, employee_service, caregiver, actor_id):
        other = employee_service.create_employee("John Roe", "john@example.com", actor_id)
        with pytest.raises(DuplicateEmailError):
            employee_service.update_employee(other.employee_id, actor_id, email="jane@example.com")

    def test_update_keeps_own_email(self, employee_service, caregiver, actor_id):
        updated = employee_service.update_employee(
            caregiver.employee_id, actor_id, name="Jane Smith", email="jane@example.com",
        )
        assert updated.name == "Jane Smith"

    def test_unknown_house(self, employee_service, actor_id):
        with pytest.raises(HouseNotFoundError):
            employee_service.create_employee("X", "x@example.com", actor_id, house_id=uuid4())

    def test_assign_and_clear_house(self, employee_service, caregiver, daily_house, actor_id):
        moved = employee_service.assign_house(caregiver.employee_id, daily_house.house_id, actor_id)
        assert moved.house_id == daily_house.house_id
        cleared = employee_service.assign_house(caregiver.employee_id, None, actor_id)
        assert cleared.house_id is None

    def test_delete_cascades_to_entries(
        self, employee_service, timesheet_service, selector, caregiver, actor_id,
    ):
        timesheet_service.create_entry(
            caregiver.employee_id, date(2024, 1, 2), WorkQuantity.of_days(1), actor_id,
        )
        timesheet_service.create_entry(
            caregiver.employee_id, date(2024, 1, 3), WorkQuantity.of_hours(4), actor_id,
        )
        deleted = employee_service.delete_employee(caregiver.employee_id)
        assert deleted == 2
        assert selector.list_entries() == ()
        with pytest.raises(EmployeeNotFoundError):
            employee_service.get_by_id(caregiver.employee_id)

    def test_list_by_house(self, employee_service, caregiver, grouped_house, daily_house, actor_id):
        employee_service.create_employee(
            "Zoe", "zoe@example.com", actor_id, house_id=daily_house.house_id,
        )
        assert [e.name for e in employee_service.list_employees(grouped_house.house_id)] == [
            "Jane Doe"
        ]
        assert len(employee_service.list_employees()) == 2
