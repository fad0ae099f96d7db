"""Invoice payment status transitions."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..models import Invoice, InvoiceStatus
from ..repositories import InvoiceStore

logger = get_logger(__name__)


class InvoiceStatusService:
    """Moves invoices between unpaid and paid. No other field is touched."""

    def __init__(self, session: AsyncSession):
        self.invoices = InvoiceStore(session)

    async def mark_paid(self, invoice_id: int) -> Invoice:
        invoice = await self.invoices.get(invoice_id)
        invoice.mark_paid()
        await self.invoices.save(invoice)
        logger.info("Invoice marked paid", invoice_id=invoice_id, paid_at=invoice.paid_at.isoformat())
        return invoice

    async def mark_unpaid(self, invoice_id: int) -> Invoice:
        invoice = await self.invoices.get(invoice_id)
        invoice.mark_unpaid()
        await self.invoices.save(invoice)
        logger.info("Invoice marked unpaid", invoice_id=invoice_id)
        return invoice

    async def set_status(self, invoice_id: int, status: InvoiceStatus) -> Invoice:
        if InvoiceStatus(status) == InvoiceStatus.PAID:
            return await self.mark_paid(invoice_id)
        return await self.mark_unpaid(invoice_id)
