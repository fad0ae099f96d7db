"""Metered pricing of Lune button usage.

Money is handled as ``Decimal`` throughout. Rounding is ROUND_HALF_UP to the
cent and happens at the line level: each button line rounds its press cost,
duration cost and total independently from unrounded values, a machine
subtotal is the rounded sum of its rounded line totals, and an invoice total
is the rounded sum of machine subtotals.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Mapping, Optional

from ..core.config import Settings

CENT = Decimal("0.01")
SECONDS_PER_MINUTE = Decimal(60)


def round_money(value: Decimal) -> Decimal:
    """Round half-up to two decimal places (0.005 -> 0.01)."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Tariff:
    """Per-press and per-minute prices applied to every button."""

    cost_per_press: Decimal = Decimal("0.10")
    cost_per_minute: Decimal = Decimal("0.05")
    buttons_per_machine: int = 6

    @classmethod
    def from_settings(cls, settings: Settings) -> "Tariff":
        return cls(
            cost_per_press=Decimal(str(settings.cost_per_press)),
            cost_per_minute=Decimal(str(settings.cost_per_minute)),
            buttons_per_machine=settings.buttons_per_machine,
        )

    @property
    def button_numbers(self) -> range:
        return range(1, self.buttons_per_machine + 1)


@dataclass(frozen=True)
class ButtonLine:
    button_number: int
    press_count: int
    total_duration_seconds: int
    total_duration_minutes: Decimal
    press_cost: Decimal
    duration_cost: Decimal
    total_cost: Decimal

    def as_dict(self) -> dict:
        return {
            "button_number": self.button_number,
            "press_count": self.press_count,
            "total_duration_seconds": self.total_duration_seconds,
            "total_duration_minutes": float(self.total_duration_minutes),
            "press_cost": float(self.press_cost),
            "duration_cost": float(self.duration_cost),
            "total_cost": float(self.total_cost),
        }


@dataclass
class MachineStatement:
    machine_id: int
    serial_number: str
    purchase_date: Optional[date]
    buttons: List[ButtonLine] = field(default_factory=list)

    @property
    def total_cost(self) -> Decimal:
        return round_money(sum((line.total_cost for line in self.buttons), Decimal("0")))

    def as_dict(self) -> dict:
        return {
            "machine_id": self.machine_id,
            "serial_number": self.serial_number,
            "purchase_date": self.purchase_date.isoformat() if self.purchase_date else None,
            "buttons": [line.as_dict() for line in self.buttons],
            "total_cost": float(self.total_cost),
        }


def price_button(tariff: Tariff, button_number: int, press_count: int, total_duration_seconds: int) -> ButtonLine:
    minutes = Decimal(total_duration_seconds) / SECONDS_PER_MINUTE
    press_cost = tariff.cost_per_press * press_count
    duration_cost = minutes * tariff.cost_per_minute
    return ButtonLine(
        button_number=button_number,
        press_count=press_count,
        total_duration_seconds=total_duration_seconds,
        total_duration_minutes=round_money(minutes),
        press_cost=round_money(press_cost),
        duration_cost=round_money(duration_cost),
        total_cost=round_money(press_cost + duration_cost),
    )


def price_machine(
    tariff: Tariff,
    machine_id: int,
    serial_number: str,
    purchase_date: Optional[date],
    usage: Mapping[int, tuple],
) -> MachineStatement:
    """Price every button of a machine.

    ``usage`` maps button number to ``(press_count, total_duration_seconds)``;
    buttons without an entry are billed as zero usage.
    """
    statement = MachineStatement(
        machine_id=machine_id, serial_number=serial_number, purchase_date=purchase_date
    )
    for button_number in tariff.button_numbers:
        press_count, total_seconds = usage.get(button_number, (0, 0))
        statement.buttons.append(price_button(tariff, button_number, press_count, total_seconds))
    return statement


def invoice_total(statements: Iterable[MachineStatement]) -> Decimal:
    return round_money(sum((statement.total_cost for statement in statements), Decimal("0")))
