"""Usage drill-down and ingestion for individual Lune machines."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.errors import InvalidArgumentError
from ..core.logging import get_logger
from ..core.periods import BillingPeriod
from ..models import ButtonUsage, LuneMachine
from ..repositories import ButtonStats, MachineRepository, UsageMonth, UsageRepository

logger = get_logger(__name__)


@dataclass
class MonthlyUsage:
    machine: LuneMachine
    year: int
    month: int
    summary: List[ButtonStats]
    details: List[ButtonUsage]


class UsageService:
    def __init__(self, session: AsyncSession, buttons_per_machine: Optional[int] = None):
        self.machines = MachineRepository(session)
        self.usage = UsageRepository(session)
        self.buttons_per_machine = buttons_per_machine or settings.buttons_per_machine

    async def monthly_usage(self, machine_id: int, year: int, month: int) -> MonthlyUsage:
        """Per-button aggregate and raw records of one machine for one month.

        Uses the same aggregation and month predicate as invoice generation.
        """
        period = BillingPeriod.create(year, month, min_year=1)
        machine = await self.machines.get_active(machine_id)
        summary = await self.usage.button_stats([machine.id], period)
        details = await self.usage.records_for_machine(machine.id, period)
        return MonthlyUsage(
            machine=machine,
            year=period.year,
            month=period.month,
            summary=summary,
            details=details,
        )

    async def available_months(self, machine_id: int) -> List[UsageMonth]:
        machine = await self.machines.get_active(machine_id)
        return await self.usage.available_months(machine.id)

    async def record_usage(
        self,
        machine_id: int,
        button_number: int,
        start_time: datetime,
        end_time: datetime,
        usage_date: Optional[date] = None,
    ) -> ButtonUsage:
        """Append one button press. Records are never edited afterwards."""
        if not 1 <= button_number <= self.buttons_per_machine:
            raise InvalidArgumentError(
                f"Button number must be between 1 and {self.buttons_per_machine}, got {button_number}"
            )
        if end_time < start_time:
            raise InvalidArgumentError("end_time must not be earlier than start_time")

        machine = await self.machines.get_active(machine_id)
        record = ButtonUsage(
            machine_id=machine.id,
            button_number=button_number,
            start_time=start_time,
            end_time=end_time,
            duration_seconds=int((end_time - start_time).total_seconds()),
            usage_date=usage_date or start_time.date(),
        )
        await self.usage.add(record)
        logger.info(
            "Usage recorded",
            machine_id=machine.id,
            button_number=button_number,
            duration_seconds=record.duration_seconds,
        )
        return record
