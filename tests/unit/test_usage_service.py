"""Unit tests for the usage drill-down and ingestion."""

from datetime import date, datetime, timedelta, timezone

import pytest

from lune_billing.core.errors import InvalidArgumentError, NotFoundError
from lune_billing.services import UsageService


class TestMonthlyUsage:
    """Test cases for UsageService.monthly_usage."""

    @pytest.mark.asyncio
    async def test_summary_and_details(self, test_session, machine, add_usage):
        await add_usage(machine.id, 3, 90, date(2024, 3, 12))
        await add_usage(machine.id, 1, 30, date(2024, 3, 2))
        await add_usage(machine.id, 1, 60, date(2024, 3, 20))

        usage = await UsageService(test_session).monthly_usage(machine.id, 2024, 3)

        assert usage.machine.id == machine.id
        assert (usage.year, usage.month) == (2024, 3)

        assert [row.button_number for row in usage.summary] == [1, 3]
        first = usage.summary[0]
        assert first.press_count == 2
        assert first.total_duration_seconds == 90
        assert first.avg_duration_seconds == 45.0
        assert first.min_duration_seconds == 30
        assert first.max_duration_seconds == 60

        assert [record.usage_date for record in usage.details] == [
            date(2024, 3, 2),
            date(2024, 3, 12),
            date(2024, 3, 20),
        ]

    @pytest.mark.asyncio
    async def test_average_rounds_half_up(self, test_session, machine, add_usage):
        # Nine seconds over eight presses: 1.125 -> 1.13
        for seconds in (1, 1, 1, 1, 1, 1, 1, 2):
            await add_usage(machine.id, 5, seconds, date(2024, 3, 9))

        usage = await UsageService(test_session).monthly_usage(machine.id, 2024, 3)

        assert usage.summary[0].avg_duration_seconds == 1.13

    @pytest.mark.asyncio
    async def test_other_months_excluded(self, test_session, machine, add_usage):
        await add_usage(machine.id, 2, 30, date(2024, 2, 29))
        await add_usage(machine.id, 2, 30, date(2024, 3, 1))
        await add_usage(machine.id, 2, 30, date(2024, 4, 1))

        usage = await UsageService(test_session).monthly_usage(machine.id, 2024, 3)

        assert len(usage.details) == 1
        assert usage.summary[0].press_count == 1

    @pytest.mark.asyncio
    async def test_empty_month(self, test_session, machine):
        usage = await UsageService(test_session).monthly_usage(machine.id, 2024, 3)

        assert usage.summary == []
        assert usage.details == []

    @pytest.mark.asyncio
    async def test_invalid_month(self, test_session, machine):
        with pytest.raises(InvalidArgumentError):
            await UsageService(test_session).monthly_usage(machine.id, 2024, 13)

    @pytest.mark.asyncio
    async def test_deleted_machine_not_found(self, test_session, machine):
        machine.is_deleted = True
        await test_session.commit()

        with pytest.raises(NotFoundError):
            await UsageService(test_session).monthly_usage(machine.id, 2024, 3)

    @pytest.mark.asyncio
    async def test_machine_of_deleted_office_not_found(self, test_session, office, machine):
        office.is_deleted = True
        await test_session.commit()

        with pytest.raises(NotFoundError):
            await UsageService(test_session).monthly_usage(machine.id, 2024, 3)


class TestAvailableMonths:

    @pytest.mark.asyncio
    async def test_newest_first_with_counts(self, test_session, machine, add_usage):
        await add_usage(machine.id, 1, 10, date(2023, 12, 31))
        await add_usage(machine.id, 1, 10, date(2024, 3, 5))
        await add_usage(machine.id, 2, 10, date(2024, 3, 6))
        await add_usage(machine.id, 1, 10, date(2024, 1, 15))

        months = await UsageService(test_session).available_months(machine.id)

        assert [(m.year, m.month, m.usage_count) for m in months] == [
            (2024, 3, 2),
            (2024, 1, 1),
            (2023, 12, 1),
        ]

    @pytest.mark.asyncio
    async def test_unknown_machine(self, test_session):
        with pytest.raises(NotFoundError):
            await UsageService(test_session).available_months(777)


class TestRecordUsage:

    @pytest.mark.asyncio
    async def test_duration_and_default_usage_date(self, test_session, machine):
        start = datetime(2024, 3, 8, 14, 0, tzinfo=timezone.utc)

        record = await UsageService(test_session).record_usage(
            machine.id, 5, start, start + timedelta(minutes=2, seconds=5)
        )

        assert record.id is not None
        assert record.duration_seconds == 125
        assert record.usage_date == date(2024, 3, 8)

    @pytest.mark.asyncio
    async def test_explicit_usage_date_wins(self, test_session, machine):
        start = datetime(2024, 4, 1, 0, 10, tzinfo=timezone.utc)

        record = await UsageService(test_session).record_usage(
            machine.id, 1, start, start + timedelta(seconds=20), usage_date=date(2024, 3, 31)
        )

        assert record.usage_date == date(2024, 3, 31)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("button_number", [0, 7, -1])
    async def test_button_out_of_range(self, test_session, machine, button_number):
        start = datetime(2024, 3, 8, 14, 0, tzinfo=timezone.utc)

        with pytest.raises(InvalidArgumentError):
            await UsageService(test_session).record_usage(
                machine.id, button_number, start, start + timedelta(seconds=5)
            )

    @pytest.mark.asyncio
    async def test_end_before_start(self, test_session, machine):
        start = datetime(2024, 3, 8, 14, 0, tzinfo=timezone.utc)

        with pytest.raises(InvalidArgumentError):
            await UsageService(test_session).record_usage(
                machine.id, 1, start, start - timedelta(seconds=1)
            )

    @pytest.mark.asyncio
    async def test_unknown_machine(self, test_session):
        start = datetime(2024, 3, 8, 14, 0, tzinfo=timezone.utc)

        with pytest.raises(NotFoundError):
            await UsageService(test_session).record_usage(999, 1, start, start + timedelta(seconds=5))
