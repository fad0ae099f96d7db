"""Generated monthly invoice model."""
from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .office import DentalOffice


class InvoiceStatus(str, enum.Enum):
    """Payment states for invoices."""

    UNPAID = "unpaid"
    PAID = "paid"


class Invoice(Base):
    """One invoice per office and calendar month.

    The unique constraint on (office_id, month, year) is what ultimately
    rejects a duplicate generation.
    """

    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("office_id", "month", "year", name="ux_invoices_office_period"),
        Index("ix_invoices_period", "year", "month"),
        Index("ix_invoices_status", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    office_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("dental_offices.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    invoice_number: Mapped[str] = mapped_column(String(64), nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    invoice_data: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False
    )
    status: Mapped[InvoiceStatus] = mapped_column(
        Enum(InvoiceStatus, native_enum=False, validate_strings=True, name="invoice_status",
             values_callable=lambda enum_cls: [member.value for member in enum_cls]),
        nullable=False,
        default=InvoiceStatus.UNPAID,
    )
    generated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    office: Mapped["DentalOffice"] = relationship(back_populates="invoices", lazy="joined")

    @property
    def office_name(self) -> str | None:
        return self.office.name if self.office else None

    def mark_paid(self) -> None:
        """Mark paid, keeping the first payment timestamp."""
        if self.status != InvoiceStatus.PAID or self.paid_at is None:
            self.paid_at = utcnow()
        self.status = InvoiceStatus.PAID

    def mark_unpaid(self) -> None:
        self.status = InvoiceStatus.UNPAID
        self.paid_at = None

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Invoice {self.id} {self.invoice_number} {self.total_amount}>"
