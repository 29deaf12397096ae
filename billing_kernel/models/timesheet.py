"""
Module: billing_kernel.models.timesheet
Responsibility: ORM persistence for timesheet entries and their snapshotted
    pay / charge / profit amounts.
Architecture position: Kernel > Models.

Invariants enforced:
    - The ``hours`` column keeps the legacy convention: hour entries store
      the hour count, day entries store ``days * 8``.  ``to_dto`` decodes
      it into a ``WorkQuantity``.
    - employee_pay, client_charge and profit are written once from the
      Rate Resolver and only change when the entry itself is edited.
    - house_id is a weak reference (no foreign key) so entries survive
      the deletion of their house.
    - employee_id cascades: deleting an employee deletes their entries.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from billing_kernel.db.base import TrackedBase, UUIDString
from billing_kernel.domain.records import (
    EntryStatus,
    EntryType,
    TimesheetEntry,
    WorkQuantity,
)
from billing_kernel.domain.values import Money


class TimesheetEntryModel(TrackedBase):
    """One logged unit of work."""

    __tablename__ = "timesheet_entries"

    __table_args__ = (
        Index("idx_timesheet_date", "work_date"),
        Index("idx_timesheet_employee", "employee_id"),
        Index("idx_timesheet_house", "house_id"),
    )

    employee_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
    )

    house_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)

    work_date: Mapped[date] = mapped_column(Date, nullable=False)

    entry_type: Mapped[str] = mapped_column(String(10), nullable=False)

    # Hour count, or days * 8 for day entries
    hours: Mapped[Decimal] = mapped_column(nullable=False)

    employee_pay: Mapped[Decimal] = mapped_column(nullable=False)
    client_charge: Mapped[Decimal] = mapped_column(nullable=False)
    profit: Mapped[Decimal] = mapped_column(nullable=False)

    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=EntryStatus.PENDING.value,
    )

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def quantity(self) -> WorkQuantity:
        return WorkQuantity.from_stored(EntryType(self.entry_type), self.hours)

    def to_dto(self, employee_name: str) -> TimesheetEntry:
        """
        Snapshot this row as a ``TimesheetEntry``.

        ``employee_name`` is the employee's current display name, joined
        in by the selector.
        """
        return TimesheetEntry(
            entry_id=self.id,
            employee_id=self.employee_id,
            employee_name=employee_name,
            work_date=self.work_date,
            quantity=self.quantity,
            employee_pay=Money.of(self.employee_pay, self.currency).round(),
            client_charge=Money.of(self.client_charge, self.currency).round(),
            status=EntryStatus(self.status),
            house_id=self.house_id,
            notes=self.notes,
        )

    def __repr__(self) -> str:
        return f"<TimesheetEntryModel {self.work_date} {self.entry_type}={self.hours}>"
