"""
Service layer for House operations.

Returns ``House`` DTOs, never ORM entities.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import select, update

from billing_kernel.domain.records import (
    DayRates,
    House,
    InvoiceStyle,
    PaymentFrequency,
)
from billing_kernel.exceptions import HouseNotFoundError
from billing_kernel.logging_config import get_logger
from billing_kernel.models.employee import EmployeeModel
from billing_kernel.models.house import HouseModel
from billing_kernel.services.base import BaseService

logger = get_logger("services.house")


class HouseService(BaseService):
    """
    Service for managing client houses.

    Rate changes apply to entries written afterwards; existing entries
    keep their snapshotted amounts.
    """

    def _get_by_id(self, house_id: UUID) -> HouseModel:
        """Get house by ID, raising if not found."""
        house = self.session.get(HouseModel, house_id)
        if house is None:
            raise HouseNotFoundError(str(house_id))
        return house

    def get_by_id(self, house_id: UUID) -> House:
        """
        Raises:
            HouseNotFoundError: If the house doesn't exist.
        """
        return self._get_by_id(house_id).to_dto()

    def list_houses(self) -> list[House]:
        stmt = select(HouseModel).order_by(HouseModel.name)
        return [h.to_dto() for h in self.session.execute(stmt).scalars()]

    def create_house(
        self,
        name: str,
        employee_pay_per_day: Decimal,
        client_charge_per_day: Decimal,
        actor_id: UUID,
        payment_frequency: PaymentFrequency = PaymentFrequency.WEEKLY,
        invoice_style: InvoiceStyle = InvoiceStyle.GROUPED,
        notes: str | None = None,
    ) -> House:
        """
        Create a new house.

        Args:
            name: Display name.
            employee_pay_per_day: Day rate paid to caregivers.
            client_charge_per_day: Day rate charged to the client.
            actor_id: UUID of the user creating the house.
            payment_frequency: Invoicing / pay cadence.
            invoice_style: Client invoice rendering style.
            notes: Free text.

        Returns:
            Created House DTO.

        Raises:
            ValueError: Negative rate.
        """
        rates = DayRates(employee_pay_per_day, client_charge_per_day)
        house = HouseModel(
            name=name,
            employee_pay_per_day=rates.employee_pay_per_day,
            client_charge_per_day=rates.client_charge_per_day,
            payment_frequency=PaymentFrequency(payment_frequency).value,
            invoice_style=InvoiceStyle(invoice_style).value,
            notes=notes,
            created_by_id=actor_id,
        )
        self.session.add(house)
        self.session.flush()

        logger.info("house_created", extra={
            "house_id": str(house.id),
            "invoice_style": house.invoice_style,
            "payment_frequency": house.payment_frequency,
        })
        return house.to_dto()

    def update_house(
        self,
        house_id: UUID,
        actor_id: UUID,
        name: str | None = None,
        employee_pay_per_day: Decimal | None = None,
        client_charge_per_day: Decimal | None = None,
        payment_frequency: PaymentFrequency | None = None,
        invoice_style: InvoiceStyle | None = None,
        notes: str | None = None,
    ) -> House:
        """
        Update house details.  Only provided fields change.

        Raises:
            HouseNotFoundError: If the house doesn't exist.
            ValueError: Negative rate.
        """
        house = self._get_by_id(house_id)

        rates = DayRates(
            employee_pay_per_day
            if employee_pay_per_day is not None else house.employee_pay_per_day,
            client_charge_per_day
            if client_charge_per_day is not None else house.client_charge_per_day,
        )
        house.employee_pay_per_day = rates.employee_pay_per_day
        house.client_charge_per_day = rates.client_charge_per_day

        if name is not None:
            house.name = name
        if payment_frequency is not None:
            house.payment_frequency = PaymentFrequency(payment_frequency).value
        if invoice_style is not None:
            house.invoice_style = InvoiceStyle(invoice_style).value
        if notes is not None:
            house.notes = notes
        house.updated_by_id = actor_id

        self.session.flush()
        logger.info("house_updated", extra={"house_id": str(house_id)})
        return house.to_dto()

    def delete_house(self, house_id: UUID) -> None:
        """
        Delete a house.

        Employees assigned to it become unassigned.  Timesheet entries
        keep their house id and snapshot amounts.

        Raises:
            HouseNotFoundError: If the house doesn't exist.
        """
        house = self._get_by_id(house_id)
        result = self.session.execute(
            update(EmployeeModel)
            .where(EmployeeModel.house_id == house_id)
            .values(house_id=None)
        )
        self.session.delete(house)
        self.session.flush()

        logger.info("house_deleted", extra={
            "house_id": str(house_id),
            "employees_unassigned": result.rowcount,
        })
