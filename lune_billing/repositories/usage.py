"""Usage repository: read access to button telemetry plus append-only ingestion."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List

from sqlalchemy import func, select

from ..core.periods import BillingPeriod
from ..models import ButtonUsage
from .base import BaseRepository


@dataclass(frozen=True)
class ButtonStats:
    """Aggregate of one machine's presses of one button within a month."""

    machine_id: int
    button_number: int
    press_count: int
    total_duration_seconds: int
    avg_duration_seconds: float
    min_duration_seconds: int
    max_duration_seconds: int


@dataclass(frozen=True)
class UsageMonth:
    year: int
    month: int
    usage_count: int


class UsageRepository(BaseRepository):
    """Queries usage records by machine set and calendar month."""

    async def button_stats(self, machine_ids: Iterable[int], period: BillingPeriod) -> List[ButtonStats]:
        """Per (machine, button) aggregates for the machines inside ``period``."""
        machine_ids = list(machine_ids)
        if not machine_ids:
            return []

        query = (
            select(
                ButtonUsage.machine_id,
                ButtonUsage.button_number,
                func.count(ButtonUsage.id).label("press_count"),
                func.sum(ButtonUsage.duration_seconds).label("total_duration"),
                func.avg(ButtonUsage.duration_seconds).label("avg_duration"),
                func.min(ButtonUsage.duration_seconds).label("min_duration"),
                func.max(ButtonUsage.duration_seconds).label("max_duration"),
            )
            .where(
                ButtonUsage.machine_id.in_(machine_ids),
                period.usage_filter(ButtonUsage.usage_date),
            )
            .group_by(ButtonUsage.machine_id, ButtonUsage.button_number)
            .order_by(ButtonUsage.machine_id, ButtonUsage.button_number)
        )
        result = await self._execute(query, "usage_button_stats")
        return [
            ButtonStats(
                machine_id=row.machine_id,
                button_number=row.button_number,
                press_count=int(row.press_count),
                total_duration_seconds=int(row.total_duration or 0),
                avg_duration_seconds=float(
                    Decimal(str(row.avg_duration or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
                ),
                min_duration_seconds=int(row.min_duration or 0),
                max_duration_seconds=int(row.max_duration or 0),
            )
            for row in result.all()
        ]

    async def records_for_machine(self, machine_id: int, period: BillingPeriod) -> List[ButtonUsage]:
        """Raw records of a machine inside ``period``, oldest press first."""
        query = (
            select(ButtonUsage)
            .where(
                ButtonUsage.machine_id == machine_id,
                period.usage_filter(ButtonUsage.usage_date),
            )
            .order_by(ButtonUsage.start_time.asc(), ButtonUsage.id.asc())
        )
        result = await self._execute(query, "usage_records")
        return list(result.scalars().all())

    async def available_months(self, machine_id: int) -> List[UsageMonth]:
        year = func.extract("year", ButtonUsage.usage_date).label("year")
        month = func.extract("month", ButtonUsage.usage_date).label("month")
        query = (
            select(year, month, func.count(ButtonUsage.id).label("usage_count"))
            .where(ButtonUsage.machine_id == machine_id)
            .group_by(year, month)
            .order_by(year.desc(), month.desc())
        )
        result = await self._execute(query, "usage_available_months")
        return [
            UsageMonth(year=int(row.year), month=int(row.month), usage_count=int(row.usage_count))
            for row in result.all()
        ]

    async def add(self, record: ButtonUsage) -> ButtonUsage:
        self.session.add(record)
        await self._commit("record_usage", "Usage record could not be stored")
        return record
