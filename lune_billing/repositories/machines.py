"""Machine side of the office/machine directory."""

from datetime import date
from typing import List, Optional

from sqlalchemy import select

from ..core.errors import NotFoundError
from ..models import DentalOffice, LuneMachine
from .base import BaseRepository


class MachineRepository(BaseRepository):
    """Reads and writes Lune machines.

    Machines of a soft-deleted office are treated as absent everywhere.
    """

    def _active_query(self):
        return (
            select(LuneMachine)
            .join(LuneMachine.office)
            .where(LuneMachine.is_deleted.is_(False), DentalOffice.is_deleted.is_(False))
        )

    async def get_active(self, machine_id: int) -> LuneMachine:
        result = await self._execute(
            self._active_query().where(LuneMachine.id == machine_id), "get_machine"
        )
        machine = result.unique().scalar_one_or_none()
        if machine is None:
            raise NotFoundError("Lune machine", machine_id)
        return machine

    async def get_by_serial(self, serial_number: str) -> LuneMachine:
        result = await self._execute(
            self._active_query().where(LuneMachine.serial_number == serial_number),
            "get_machine_by_serial",
        )
        machine = result.unique().scalar_one_or_none()
        if machine is None:
            raise NotFoundError("Lune machine with serial", serial_number)
        return machine

    async def list_for_office(self, office_id: int) -> List[LuneMachine]:
        """Non-deleted machines of an office, in a stable order."""
        query = (
            select(LuneMachine)
            .where(LuneMachine.office_id == office_id, LuneMachine.is_deleted.is_(False))
            .order_by(LuneMachine.id)
        )
        result = await self._execute(query, "list_office_machines")
        return list(result.unique().scalars().all())

    async def list(
        self,
        search: Optional[str] = None,
        office_id: Optional[int] = None,
        include_deleted: bool = False,
    ) -> List[LuneMachine]:
        query = (
            select(LuneMachine)
            .join(LuneMachine.office)
            .where(DentalOffice.is_deleted.is_(False))
        )
        if not include_deleted:
            query = query.where(LuneMachine.is_deleted.is_(False))
        if search:
            query = query.where(LuneMachine.serial_number.ilike(f"%{search}%"))
        if office_id is not None:
            query = query.where(LuneMachine.office_id == office_id)
        query = query.order_by(LuneMachine.created_at.desc(), LuneMachine.id.desc())
        result = await self._execute(query, "list_machines")
        return list(result.unique().scalars().all())

    async def create(
        self, office: DentalOffice, serial_number: str, purchase_date: Optional[date]
    ) -> LuneMachine:
        machine = LuneMachine(serial_number=serial_number, purchase_date=purchase_date)
        machine.office = office
        self.session.add(machine)
        await self._commit("create_machine", f"Serial number {serial_number} already exists")
        return machine

    async def soft_delete(self, machine: LuneMachine) -> None:
        machine.is_deleted = True
        await self._commit("delete_machine", f"Lune machine {machine.id} could not be deleted")
