"""Database models package."""
from .base import Base
from .invoice import Invoice, InvoiceStatus
from .machine import LuneMachine
from .office import DentalOffice
from .usage import ButtonUsage

__all__ = [
    "Base",
    "DentalOffice",
    "LuneMachine",
    "ButtonUsage",
    "Invoice",
    "InvoiceStatus",
]
