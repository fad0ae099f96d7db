"""Domain services."""
from .invoice_generator import InvoiceGenerator, build_invoice_number
from .invoice_status import InvoiceStatusService
from .pricing import Tariff, round_money
from .usage_service import MonthlyUsage, UsageService

__all__ = [
    "InvoiceGenerator",
    "InvoiceStatusService",
    "MonthlyUsage",
    "Tariff",
    "UsageService",
    "build_invoice_number",
    "round_money",
]
