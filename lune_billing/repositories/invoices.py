"""Invoice store: existence checks, inserts and status updates."""

from typing import List, Optional

from sqlalchemy import select

from ..core.errors import NotFoundError
from ..core.periods import BillingPeriod
from ..models import DentalOffice, Invoice, InvoiceStatus
from .base import BaseRepository


class InvoiceStore(BaseRepository):
    """Persists invoices. The (office_id, month, year) constraint is enforced here."""

    async def exists_for_period(self, office_id: int, period: BillingPeriod) -> bool:
        query = select(Invoice.id).where(
            Invoice.office_id == office_id,
            Invoice.month == period.month,
            Invoice.year == period.year,
        )
        result = await self._execute(query, "invoice_exists")
        return result.first() is not None

    async def get(self, invoice_id: int) -> Invoice:
        query = select(Invoice).where(Invoice.id == invoice_id)
        result = await self._execute(query, "get_invoice")
        invoice = result.unique().scalar_one_or_none()
        if invoice is None:
            raise NotFoundError("Invoice", invoice_id)
        return invoice

    async def list(
        self,
        office_id: Optional[int] = None,
        status: Optional[InvoiceStatus] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> List[Invoice]:
        query = (
            select(Invoice)
            .join(Invoice.office)
            .where(DentalOffice.is_deleted.is_(False))
        )
        if office_id is not None:
            query = query.where(Invoice.office_id == office_id)
        if status is not None:
            query = query.where(Invoice.status == status)
        if year is not None:
            query = query.where(Invoice.year == year)
        if month is not None:
            query = query.where(Invoice.month == month)
        query = query.order_by(Invoice.year.desc(), Invoice.month.desc(), Invoice.generated_at.desc())
        result = await self._execute(query, "list_invoices")
        return list(result.unique().scalars().all())

    async def insert(self, invoice: Invoice) -> Invoice:
        """Insert a new invoice; a period collision raises ConflictError."""
        self.session.add(invoice)
        await self._commit(
            "insert_invoice",
            f"Invoice already exists for office {invoice.office_id} "
            f"and period {invoice.year}-{invoice.month:02d}",
        )
        return invoice

    async def save(self, invoice: Invoice) -> Invoice:
        await self._commit("update_invoice", f"Invoice {invoice.id} could not be updated")
        return invoice
