"""Lune laser machine model."""
from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, ForeignKey, Integer, String, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .office import DentalOffice
    from .usage import ButtonUsage


class LuneMachine(TimestampMixin, Base):
    """A Lune device installed at exactly one dental office."""

    __tablename__ = "lune_machines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    serial_number: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    office_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("dental_offices.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    office: Mapped["DentalOffice"] = relationship(back_populates="machines", lazy="joined")
    usage_records: Mapped[list["ButtonUsage"]] = relationship(back_populates="machine")

    @property
    def office_name(self) -> str | None:
        return self.office.name if self.office else None

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<LuneMachine {self.id} {self.serial_number}>"
