"""Usage ingestion endpoint."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.database import get_db_session
from ...models.schemas import UsageCreate, UsageRecordResponse
from ...services import UsageService

router = APIRouter()


@router.post("", response_model=UsageRecordResponse, status_code=status.HTTP_201_CREATED)
async def record_usage(request: UsageCreate, session: AsyncSession = Depends(get_db_session)):
    """Record one button press reported by a machine."""
    return await UsageService(session).record_usage(
        machine_id=request.machine_id,
        button_number=request.button_number,
        start_time=request.start_time,
        end_time=request.end_time,
        usage_date=request.usage_date,
    )
