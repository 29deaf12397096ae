"""
Timesheet Service (``billing_services.timesheet_service``).

Responsibility
--------------
Writes timesheet entries.  On create and on edit of the date or quantity
the entry's pay and charge are resolved by the Rate Resolver from the
house's current day rates and snapshotted onto the row.

Architecture position
---------------------
**Services layer** -- composes the pure Rate Resolver with the database
session.  Flushes, never commits.

Invariants enforced
-------------------
* ``profit`` is always ``client_charge - employee_pay`` at write time.
* Entries without an explicit house use the employee's default house.
* Later rate changes on a house never touch existing snapshots unless
  the entry itself is edited.

Failure modes
-------------
* Unknown employee / house / entry  -> ``*NotFoundError``.
* No house and no configured default rates
  -> ``MissingRateConfigurationError``; nothing is written.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from billing_engines.rates import RateTable, resolve_rates
from billing_kernel.domain.records import (
    DayRates,
    EntryStatus,
    House,
    TimesheetEntry,
    WorkQuantity,
)
from billing_kernel.exceptions import (
    EmployeeNotFoundError,
    HouseNotFoundError,
    MissingRateConfigurationError,
    TimesheetEntryNotFoundError,
)
from billing_kernel.logging_config import LogContext, get_logger
from billing_kernel.models.employee import EmployeeModel
from billing_kernel.models.house import HouseModel
from billing_kernel.models.timesheet import TimesheetEntryModel
from billing_kernel.services.base import BaseService

logger = get_logger("services.timesheet")


class TimesheetService(BaseService):
    """Create, edit and delete timesheet entries."""

    def __init__(
        self,
        session: Session,
        rate_table: RateTable | None = None,
        default_rates: DayRates | None = None,
        currency: str = "USD",
    ):
        super().__init__(session)
        self._rate_table = rate_table
        self._default_rates = default_rates
        self._currency = currency

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _get_by_id(self, entry_id: UUID) -> TimesheetEntryModel:
        entry = self.session.get(TimesheetEntryModel, entry_id)
        if entry is None:
            raise TimesheetEntryNotFoundError(str(entry_id))
        return entry

    def _get_employee(self, employee_id: UUID) -> EmployeeModel:
        employee = self.session.get(EmployeeModel, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(str(employee_id))
        return employee

    def _find_house(self, house_id: UUID | None) -> House | None:
        if house_id is None:
            return None
        house = self.session.get(HouseModel, house_id)
        return house.to_dto() if house is not None else None

    def _snapshot(
        self,
        model: TimesheetEntryModel,
        quantity: WorkQuantity,
        house: House | None,
    ) -> None:
        try:
            resolved = resolve_rates(
                quantity,
                house,
                rate_table=self._rate_table,
                default_rates=self._default_rates,
                currency=self._currency,
            )
        except MissingRateConfigurationError as exc:
            raise MissingRateConfigurationError(
                house_id=str(model.house_id) if model.house_id else None,
                entry_id=str(model.id) if model.id else None,
            ) from exc

        model.entry_type = quantity.entry_type.value
        model.hours = quantity.stored_hours
        model.employee_pay = resolved.employee_pay.amount
        model.client_charge = resolved.client_charge.amount
        model.profit = resolved.profit.amount
        model.currency = self._currency

    def _to_dto(self, model: TimesheetEntryModel) -> TimesheetEntry:
        return model.to_dto(self._get_employee(model.employee_id).name)

    # =========================================================================
    # Public API
    # =========================================================================

    def create_entry(
        self,
        employee_id: UUID,
        work_date: date,
        quantity: WorkQuantity,
        actor_id: UUID,
        house_id: UUID | None = None,
        notes: str | None = None,
        status: EntryStatus = EntryStatus.PENDING,
    ) -> TimesheetEntry:
        """
        Log work and snapshot its pay and charge.

        Args:
            employee_id: Who worked.
            work_date: Day the work happened.
            quantity: Hours or days worked.
            actor_id: UUID of the user logging the entry.
            house_id: Where the work happened; defaults to the
                employee's house.
            notes: Free text.
            status: Initial lifecycle status.

        Returns:
            Created TimesheetEntry DTO.

        Raises:
            EmployeeNotFoundError: Unknown employee.
            HouseNotFoundError: Explicit ``house_id`` doesn't exist.
            MissingRateConfigurationError: No house and no default rates.
        """
        employee = self._get_employee(employee_id)
        if house_id is None:
            house_id = employee.house_id
            house = self._find_house(house_id)
        else:
            house = self._find_house(house_id)
            if house is None:
                raise HouseNotFoundError(str(house_id))

        model = TimesheetEntryModel(
            employee_id=employee_id,
            house_id=house_id,
            work_date=work_date,
            status=EntryStatus(status).value,
            notes=notes,
            created_by_id=actor_id,
        )
        self._snapshot(model, quantity, house)
        self.session.add(model)
        self.session.flush()

        with LogContext.bind(entry_id=str(model.id)):
            logger.info("timesheet_entry_created", extra={
                "employee_id": str(employee_id),
                "house_id": str(house_id) if house_id else None,
                "entry_type": model.entry_type,
                "employee_pay": str(model.employee_pay),
                "client_charge": str(model.client_charge),
            })
        return model.to_dto(employee.name)

    def update_entry(
        self,
        entry_id: UUID,
        actor_id: UUID,
        work_date: date | None = None,
        quantity: WorkQuantity | None = None,
        notes: str | None = None,
    ) -> TimesheetEntry:
        """
        Edit an entry.  Changing the date or quantity re-snapshots the
        amounts from the house's current rates.

        Raises:
            TimesheetEntryNotFoundError: Unknown entry.
            MissingRateConfigurationError: The entry's house is gone and
                no default rates are configured.
        """
        model = self._get_by_id(entry_id)

        if work_date is not None or quantity is not None:
            if work_date is not None:
                model.work_date = work_date
            self._snapshot(
                model,
                quantity if quantity is not None else model.quantity,
                self._find_house(model.house_id),
            )
        if notes is not None:
            model.notes = notes
        model.updated_by_id = actor_id

        self.session.flush()
        with LogContext.bind(entry_id=str(entry_id)):
            logger.info("timesheet_entry_updated", extra={
                "employee_pay": str(model.employee_pay),
                "client_charge": str(model.client_charge),
            })
        return self._to_dto(model)

    def set_status(
        self,
        entry_id: UUID,
        status: EntryStatus,
        actor_id: UUID,
    ) -> TimesheetEntry:
        """
        Raises:
            TimesheetEntryNotFoundError: Unknown entry.
        """
        model = self._get_by_id(entry_id)
        previous = model.status
        model.status = EntryStatus(status).value
        model.updated_by_id = actor_id
        self.session.flush()

        with LogContext.bind(entry_id=str(entry_id)):
            logger.info("timesheet_entry_status_changed", extra={
                "from_status": previous,
                "to_status": model.status,
            })
        return self._to_dto(model)

    def delete_entry(self, entry_id: UUID) -> None:
        """
        Raises:
            TimesheetEntryNotFoundError: Unknown entry.
        """
        model = self._get_by_id(entry_id)
        self.session.delete(model)
        self.session.flush()

        with LogContext.bind(entry_id=str(entry_id)):
            logger.info("timesheet_entry_deleted")
