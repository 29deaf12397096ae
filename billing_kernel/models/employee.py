"""
Module: billing_kernel.models.employee
Responsibility: ORM persistence for caregivers and administrators.
Architecture position: Kernel > Models.

Invariants enforced:
    - email is unique (uq_employee_email).
    - house_id is the employee's default house; it is nulled when the
      house is deleted.
"""

from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from billing_kernel.db.base import TrackedBase, UUIDString
from billing_kernel.domain.records import Employee, EmployeeRole


class EmployeeModel(TrackedBase):
    """A caregiver or administrator."""

    __tablename__ = "employees"

    __table_args__ = (
        UniqueConstraint("email", name="uq_employee_email"),
        Index("idx_employee_house", "house_id"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=EmployeeRole.CAREGIVER.value,
    )

    house_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("houses.id", ondelete="SET NULL"),
        nullable=True,
    )

    def to_dto(self) -> Employee:
        return Employee(
            employee_id=self.id,
            name=self.name,
            email=self.email,
            role=EmployeeRole(self.role),
            house_id=self.house_id,
        )

    def __repr__(self) -> str:
        return f"<EmployeeModel {self.name} <{self.email}>>"
