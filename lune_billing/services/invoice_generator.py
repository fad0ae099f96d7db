"""Invoice generation: monthly usage of an office's machines priced into one invoice."""

from collections import defaultdict
from typing import Dict, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.errors import ConflictError, InvalidStateError
from ..core.logging import get_logger
from ..core.periods import BillingPeriod
from ..models import DentalOffice, Invoice, InvoiceStatus
from ..repositories import InvoiceStore, MachineRepository, OfficeRepository, UsageRepository
from .pricing import Tariff, invoice_total, price_machine

logger = get_logger(__name__)


def build_invoice_number(office: DentalOffice, period: BillingPeriod) -> str:
    return f"INV-{period.label}-{office.npi_id}"


class InvoiceGenerator:
    """Generates and persists invoices exactly once per office and month.

    The session is supplied by the caller; the only write is the final
    insert, so a failure anywhere leaves nothing behind.
    """

    def __init__(self, session: AsyncSession, tariff: Optional[Tariff] = None, min_year: Optional[int] = None):
        self.session = session
        self.tariff = tariff or Tariff.from_settings(settings)
        self.min_year = settings.min_invoice_year if min_year is None else min_year
        self.offices = OfficeRepository(session)
        self.machines = MachineRepository(session)
        self.usage = UsageRepository(session)
        self.invoices = InvoiceStore(session)

    async def generate(self, office_id: int, month: int, year: int) -> Invoice:
        period = BillingPeriod.create(year, month, min_year=self.min_year)
        log = logger.bind(office_id=office_id, year=year, month=month)

        office = await self.offices.get_active(office_id)

        if await self.invoices.exists_for_period(office_id, period):
            log.warning("Invoice already exists for period")
            raise ConflictError(
                f"Invoice already exists for office {office_id} and period {year}-{month:02d}"
            )

        machines = await self.machines.list_for_office(office_id)
        if not machines:
            log.warning("No active machines to bill")
            raise InvalidStateError(f"No Lune machines found for dental office {office_id}")

        stats = await self.usage.button_stats((machine.id for machine in machines), period)
        usage_by_machine: Dict[int, Dict[int, Tuple[int, int]]] = defaultdict(dict)
        for row in stats:
            usage_by_machine[row.machine_id][row.button_number] = (
                row.press_count,
                row.total_duration_seconds,
            )

        statements = [
            price_machine(
                self.tariff,
                machine_id=machine.id,
                serial_number=machine.serial_number,
                purchase_date=machine.purchase_date,
                usage=usage_by_machine.get(machine.id, {}),
            )
            for machine in machines
        ]
        total_amount = invoice_total(statements)

        invoice = Invoice(
            office_id=office.id,
            invoice_number=build_invoice_number(office, period),
            month=period.month,
            year=period.year,
            total_amount=total_amount,
            invoice_data=self._invoice_document(office, period, statements, total_amount),
            status=InvoiceStatus.UNPAID,
        )
        invoice.office = office

        try:
            await self.invoices.insert(invoice)
        except ConflictError:
            log.warning("Concurrent generation rejected by storage constraint")
            raise

        log.info(
            "Invoice generated",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            total_amount=str(total_amount),
            machine_count=len(statements),
        )
        return invoice

    @staticmethod
    def _invoice_document(office: DentalOffice, period: BillingPeriod, statements, total_amount) -> dict:
        return {
            "office": office.snapshot(),
            "month": period.month,
            "year": period.year,
            "lunes": [statement.as_dict() for statement in statements],
            "total_amount": float(total_amount),
        }
