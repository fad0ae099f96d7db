"""Dental office endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.database import get_db_session
from ...core.logging import get_logger
from ...models.schemas import OfficeCreate, OfficeResponse, OfficeUpdate
from ...repositories import OfficeRepository

logger = get_logger(__name__)
router = APIRouter()


@router.get("", response_model=List[OfficeResponse])
async def list_offices(
    search: Optional[str] = Query(None, description="Match on office name or NPI ID"),
    include_deleted: bool = Query(False, description="Include soft-deleted offices"),
    session: AsyncSession = Depends(get_db_session),
):
    """List dental offices, newest first."""
    return await OfficeRepository(session).list(search=search, include_deleted=include_deleted)


@router.post("", response_model=OfficeResponse, status_code=status.HTTP_201_CREATED)
async def create_office(request: OfficeCreate, session: AsyncSession = Depends(get_db_session)):
    office = await OfficeRepository(session).create(**request.model_dump())
    logger.info("Dental office created", office_id=office.id, npi_id=office.npi_id)
    return office


@router.get("/{office_id}", response_model=OfficeResponse)
async def get_office(office_id: int, session: AsyncSession = Depends(get_db_session)):
    return await OfficeRepository(session).get_active(office_id)


@router.put("/{office_id}", response_model=OfficeResponse)
async def update_office(
    office_id: int,
    request: OfficeUpdate,
    session: AsyncSession = Depends(get_db_session),
):
    """Update the supplied fields of an office."""
    offices = OfficeRepository(session)
    office = await offices.get_active(office_id)
    office = await offices.update(office, **request.model_dump(exclude_unset=True))
    logger.info("Dental office updated", office_id=office.id)
    return office


@router.delete("/{office_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_office(office_id: int, session: AsyncSession = Depends(get_db_session)):
    """Soft-delete an office. Its machines and invoices drop out of listings."""
    offices = OfficeRepository(session)
    office = await offices.get_active(office_id)
    await offices.soft_delete(office)
    logger.info("Dental office deleted", office_id=office_id)
