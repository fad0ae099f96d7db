"""Office side of the office/machine directory."""

from typing import Any, List, Optional

from sqlalchemy import or_, select

from ..core.errors import NotFoundError
from ..models import DentalOffice
from .base import BaseRepository


class OfficeRepository(BaseRepository):
    """Reads and writes dental offices."""

    async def get(self, office_id: int, include_deleted: bool = False) -> Optional[DentalOffice]:
        query = select(DentalOffice).where(DentalOffice.id == office_id)
        if not include_deleted:
            query = query.where(DentalOffice.is_deleted.is_(False))
        result = await self._execute(query, "get_office")
        return result.scalar_one_or_none()

    async def get_active(self, office_id: int) -> DentalOffice:
        office = await self.get(office_id)
        if office is None:
            raise NotFoundError("Dental office", office_id)
        return office

    async def list(self, search: Optional[str] = None, include_deleted: bool = False) -> List[DentalOffice]:
        query = select(DentalOffice)
        if not include_deleted:
            query = query.where(DentalOffice.is_deleted.is_(False))
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(DentalOffice.name.ilike(pattern), DentalOffice.npi_id.ilike(pattern))
            )
        query = query.order_by(DentalOffice.created_at.desc(), DentalOffice.id.desc())
        result = await self._execute(query, "list_offices")
        return list(result.scalars().all())

    async def create(self, **fields: Any) -> DentalOffice:
        office = DentalOffice(**fields)
        self.session.add(office)
        await self._commit("create_office", f"NPI ID {fields.get('npi_id')} already exists")
        await self._refresh(office, "create_office")
        return office

    async def update(self, office: DentalOffice, **fields: Any) -> DentalOffice:
        for name, value in fields.items():
            setattr(office, name, value)
        await self._commit("update_office", f"NPI ID {office.npi_id} already exists")
        await self._refresh(office, "update_office")
        return office

    async def soft_delete(self, office: DentalOffice) -> None:
        office.is_deleted = True
        await self._commit("delete_office", f"Dental office {office.id} could not be deleted")
