"""Lune machine endpoints, including monthly usage drill-down."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.database import get_db_session
from ...core.logging import get_logger
from ...models.schemas import (
    ButtonSummary,
    MachineCreate,
    MachineResponse,
    MonthlyUsageResponse,
    UsageMonthResponse,
    UsageRecordResponse,
)
from ...repositories import MachineRepository, OfficeRepository
from ...services import UsageService

logger = get_logger(__name__)
router = APIRouter()


@router.get("", response_model=List[MachineResponse])
async def list_machines(
    search: Optional[str] = Query(None, description="Match on serial number"),
    office_id: Optional[int] = Query(None, ge=1, description="Restrict to one office"),
    include_deleted: bool = Query(False, description="Include soft-deleted machines"),
    session: AsyncSession = Depends(get_db_session),
):
    return await MachineRepository(session).list(
        search=search, office_id=office_id, include_deleted=include_deleted
    )


@router.post("", response_model=MachineResponse, status_code=status.HTTP_201_CREATED)
async def create_machine(request: MachineCreate, session: AsyncSession = Depends(get_db_session)):
    """Register a machine at an active office."""
    office = await OfficeRepository(session).get_active(request.office_id)
    machine = await MachineRepository(session).create(
        office, serial_number=request.serial_number, purchase_date=request.purchase_date
    )
    logger.info("Lune machine created", machine_id=machine.id, office_id=office.id)
    return machine


@router.get("/serial/{serial_number}", response_model=MachineResponse)
async def get_machine_by_serial(serial_number: str, session: AsyncSession = Depends(get_db_session)):
    return await MachineRepository(session).get_by_serial(serial_number)


@router.get("/{machine_id}", response_model=MachineResponse)
async def get_machine(machine_id: int, session: AsyncSession = Depends(get_db_session)):
    return await MachineRepository(session).get_active(machine_id)


@router.delete("/{machine_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_machine(machine_id: int, session: AsyncSession = Depends(get_db_session)):
    machines = MachineRepository(session)
    machine = await machines.get_active(machine_id)
    await machines.soft_delete(machine)
    logger.info("Lune machine deleted", machine_id=machine_id)


@router.get("/{machine_id}/usage/{year}/{month}", response_model=MonthlyUsageResponse)
async def get_monthly_usage(
    machine_id: int,
    year: int,
    month: int,
    session: AsyncSession = Depends(get_db_session),
):
    """Per-button summary and raw presses for one calendar month."""
    usage = await UsageService(session).monthly_usage(machine_id, year, month)
    return MonthlyUsageResponse(
        machine=MachineResponse.model_validate(usage.machine),
        year=usage.year,
        month=usage.month,
        summary=[ButtonSummary.model_validate(row) for row in usage.summary],
        details=[UsageRecordResponse.model_validate(record) for record in usage.details],
    )


@router.get("/{machine_id}/months", response_model=List[UsageMonthResponse])
async def get_available_months(machine_id: int, session: AsyncSession = Depends(get_db_session)):
    return await UsageService(session).available_months(machine_id)
