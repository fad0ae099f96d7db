"""Invoice endpoints: generation, listing and payment status."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.database import get_db_session
from ...models import InvoiceStatus
from ...models.schemas import (
    GeneratedInvoiceResponse,
    GenerateInvoiceRequest,
    InvoiceDetail,
    InvoiceStatusUpdate,
    InvoiceSummary,
)
from ...repositories import InvoiceStore
from ...services import InvoiceGenerator, InvoiceStatusService

router = APIRouter()


@router.get("", response_model=List[InvoiceSummary])
async def list_invoices(
    office_id: Optional[int] = Query(None, ge=1),
    status_filter: Optional[InvoiceStatus] = Query(None, alias="status"),
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    session: AsyncSession = Depends(get_db_session),
):
    """List invoices, most recent period first."""
    return await InvoiceStore(session).list(
        office_id=office_id, status=status_filter, year=year, month=month
    )


@router.post("/generate", response_model=GeneratedInvoiceResponse, status_code=status.HTTP_201_CREATED)
async def generate_invoice(request: GenerateInvoiceRequest, session: AsyncSession = Depends(get_db_session)):
    """Generate the invoice of an office for one calendar month.

    Returns 409 when an invoice already exists for that office and month.
    """
    return await InvoiceGenerator(session).generate(
        office_id=request.office_id, month=request.month, year=request.year
    )


@router.get("/{invoice_id}", response_model=InvoiceDetail)
async def get_invoice(invoice_id: int, session: AsyncSession = Depends(get_db_session)):
    return await InvoiceStore(session).get(invoice_id)


@router.patch("/{invoice_id}/status", response_model=InvoiceDetail)
async def update_invoice_status(
    invoice_id: int,
    request: InvoiceStatusUpdate,
    session: AsyncSession = Depends(get_db_session),
):
    return await InvoiceStatusService(session).set_status(invoice_id, InvoiceStatus(request.status))
