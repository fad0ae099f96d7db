"""Storage interface: one repository per collaborator, all sharing a session."""
from .base import BaseRepository
from .invoices import InvoiceStore
from .machines import MachineRepository
from .offices import OfficeRepository
from .usage import ButtonStats, UsageMonth, UsageRepository

__all__ = [
    "BaseRepository",
    "ButtonStats",
    "InvoiceStore",
    "MachineRepository",
    "OfficeRepository",
    "UsageMonth",
    "UsageRepository",
]
