"""Button usage telemetry model."""
from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .machine import LuneMachine


class ButtonUsage(Base):
    """One timed press of a numbered button on a Lune machine.

    ``usage_date`` drives month bucketing and may differ from the date of
    ``start_time`` when a record is attributed to another day.
    """

    __tablename__ = "button_usage"
    __table_args__ = (
        CheckConstraint("end_time >= start_time", name="ck_button_usage_interval"),
        CheckConstraint("duration_seconds >= 0", name="ck_button_usage_duration"),
        Index("ix_button_usage_machine_date", "machine_id", "usage_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    machine_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("lune_machines.id", ondelete="RESTRICT"),
        nullable=False,
    )
    button_number: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False)
    usage_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    machine: Mapped["LuneMachine"] = relationship(back_populates="usage_records")
