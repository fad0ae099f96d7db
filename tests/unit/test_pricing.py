"""Unit tests for metered pricing and rounding."""

from datetime import date
from decimal import Decimal

import pytest

from lune_billing.core.config import Settings
from lune_billing.services.pricing import (
    MachineStatement,
    Tariff,
    invoice_total,
    price_button,
    price_machine,
    round_money,
)


class TestRoundMoney:
    """Round-half-up to the cent."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("0.005", "0.01"),
            ("0.125", "0.13"),
            ("0.5625", "0.56"),
            ("0.3", "0.30"),
            ("0", "0.00"),
        ],
    )
    def test_round_half_up(self, raw, expected):
        assert round_money(Decimal(raw)) == Decimal(expected)

    def test_not_bankers_rounding(self):
        """0.125 would round to 0.12 under round-half-even."""
        assert round_money(Decimal("0.125")) != round(Decimal("0.125"), 2)


class TestPriceButton:
    """Test cases for a single button line."""

    def test_aggregated_presses(self):
        line = price_button(Tariff(), button_number=2, press_count=3, total_duration_seconds=675)

        assert line.press_cost == Decimal("0.30")
        assert line.duration_cost == Decimal("0.56")
        assert line.total_cost == Decimal("0.86")
        assert line.total_duration_minutes == Decimal("11.25")

    def test_zero_usage(self):
        line = price_button(Tariff(), button_number=5, press_count=0, total_duration_seconds=0)

        assert line.press_cost == Decimal("0.00")
        assert line.duration_cost == Decimal("0.00")
        assert line.total_cost == Decimal("0.00")

    def test_fractional_minutes(self):
        line = price_button(Tariff(), button_number=1, press_count=0, total_duration_seconds=7 * 60 + 7)

        # 7.1166.. min * 0.05 = 0.35583..
        assert line.duration_cost == Decimal("0.36")
        assert line.total_duration_minutes == Decimal("7.12")

    def test_line_total_rounds_from_unrounded_parts(self):
        line = price_button(Tariff(), button_number=1, press_count=1, total_duration_seconds=6)

        assert line.duration_cost == Decimal("0.01")
        assert line.total_cost == Decimal("0.11")

    def test_as_dict_shape(self):
        data = price_button(Tariff(), 3, 1, 60).as_dict()

        assert data == {
            "button_number": 3,
            "press_count": 1,
            "total_duration_seconds": 60,
            "total_duration_minutes": 1.0,
            "press_cost": 0.1,
            "duration_cost": 0.05,
            "total_cost": 0.15,
        }


class TestPriceMachine:
    """Test cases for machine statements."""

    def test_all_buttons_present(self):
        statement = price_machine(
            Tariff(),
            machine_id=1,
            serial_number="LN0001",
            purchase_date=date(2024, 1, 5),
            usage={2: (3, 675)},
        )

        assert [line.button_number for line in statement.buttons] == [1, 2, 3, 4, 5, 6]
        assert statement.buttons[1].total_cost == Decimal("0.86")
        assert all(line.press_count == 0 for i, line in enumerate(statement.buttons) if i != 1)
        assert statement.total_cost == Decimal("0.86")

    def test_button_range_follows_tariff(self):
        statement = price_machine(Tariff(buttons_per_machine=4), 1, "LN0001", None, {})

        assert len(statement.buttons) == 4
        assert statement.as_dict()["purchase_date"] is None

    def test_subtotal_is_sum_of_rounded_lines(self):
        # Each line: 1 press + 6s -> 0.105 unrounded, 0.11 rounded
        usage = {button: (1, 6) for button in range(1, 7)}
        statement = price_machine(Tariff(), 1, "LN0001", None, usage)

        assert statement.total_cost == Decimal("0.66")


class TestInvoiceTotal:
    """Round-then-sum across machines."""

    def test_total_sums_rounded_subtotals(self):
        statements = [
            price_machine(Tariff(), machine_id, f"LN{machine_id}", None, {1: (1, 6)})
            for machine_id in (1, 2, 3)
        ]

        raw_sum = sum(
            Decimal("0.10") + Decimal(6) / 60 * Decimal("0.05") for _ in statements
        )
        assert round_money(raw_sum) == Decimal("0.32")
        assert invoice_total(statements) == Decimal("0.33")

    def test_empty_total(self):
        assert invoice_total([]) == Decimal("0.00")

    def test_statement_without_buttons(self):
        assert MachineStatement(machine_id=1, serial_number="LN1", purchase_date=None).total_cost == Decimal("0.00")


class TestTariff:
    def test_from_settings(self):
        tariff = Tariff.from_settings(
            Settings(cost_per_press=Decimal("0.25"), cost_per_minute=Decimal("0.10"), buttons_per_machine=8)
        )

        assert tariff.cost_per_press == Decimal("0.25")
        assert tariff.cost_per_minute == Decimal("0.10")
        assert list(tariff.button_numbers) == list(range(1, 9))

    def test_defaults(self):
        tariff = Tariff()

        assert tariff.cost_per_press == Decimal("0.10")
        assert tariff.cost_per_minute == Decimal("0.05")
        assert tariff.buttons_per_machine == 6
