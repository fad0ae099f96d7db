"""Dental office (billing entity) model."""
from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, Integer, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .invoice import Invoice
    from .machine import LuneMachine


class DentalOffice(TimestampMixin, Base):
    """A dental office owning Lune machines and receiving invoices."""

    __tablename__ = "dental_offices"
    __table_args__ = (
        Index("ix_dental_offices_active", "is_deleted", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    npi_id: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    town: Mapped[str | None] = mapped_column(String(100), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    machines: Mapped[list["LuneMachine"]] = relationship(back_populates="office")
    invoices: Mapped[list["Invoice"]] = relationship(back_populates="office")

    def snapshot(self) -> dict:
        """Office fields frozen into a generated invoice."""
        return {
            "id": self.id,
            "name": self.name,
            "npi_id": self.npi_id,
            "state": self.state,
            "town": self.town,
            "address": self.address,
            "phone_number": self.phone_number,
            "email": self.email,
        }

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<DentalOffice {self.id} {self.name} npi={self.npi_id}>"
