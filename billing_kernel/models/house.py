"""
Module: billing_kernel.models.house
Responsibility: ORM persistence for client houses (care facilities) and their
    day rates, payment frequency and invoice style.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/.  MUST NOT import from services/, selectors/, or outer layers.

Invariants enforced:
    - Day rates are stored as Numeric(38, 9); never float.
    - Deleting a house does not touch timesheet entries: entries keep
      their house id and snapshot amounts (see HouseService.delete_house).
"""

from decimal import Decimal

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from billing_kernel.db.base import TrackedBase
from billing_kernel.domain.records import House, InvoiceStyle, PaymentFrequency


class HouseModel(TrackedBase):
    """A client care facility with its own rates and invoicing style."""

    __tablename__ = "houses"

    __table_args__ = (
        Index("idx_house_name", "name"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    employee_pay_per_day: Mapped[Decimal] = mapped_column(nullable=False)
    client_charge_per_day: Mapped[Decimal] = mapped_column(nullable=False)

    payment_frequency: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentFrequency.WEEKLY.value,
    )

    invoice_style: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=InvoiceStyle.GROUPED.value,
    )

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def to_dto(self) -> House:
        return House(
            house_id=self.id,
            name=self.name,
            employee_pay_per_day=self.employee_pay_per_day,
            client_charge_per_day=self.client_charge_per_day,
            payment_frequency=PaymentFrequency(self.payment_frequency),
            invoice_style=InvoiceStyle(self.invoice_style),
            notes=self.notes,
        )

    def __repr__(self) -> str:
        return f"<HouseModel {self.name} ({self.invoice_style})>"
