"""Pytest configuration and fixtures for the Lune Billing Service tests."""

from datetime import date, datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from lune_billing.core.database import build_engine, build_session_factory, get_db_session
from lune_billing.main import app
from lune_billing.models import Base, ButtonUsage, DentalOffice, LuneMachine


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """Create a file-backed SQLite engine with all tables."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'lune_test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return build_session_factory(test_engine)


@pytest_asyncio.fixture
async def test_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """Create test HTTP client bound to the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def office_data():
    """Sample office data for testing."""
    return {
        "name": "Bright Smile Dental",
        "npi_id": "1234567890",
        "state": "California",
        "town": "Los Angeles",
        "address": "123 Main Street, Los Angeles, CA 90210",
        "phone_number": "(555) 123-4567",
        "email": "info@brightsmile.com",
    }


@pytest_asyncio.fixture
async def office(test_session: AsyncSession, office_data):
    """Create an active office in the database."""
    office = DentalOffice(**office_data)
    test_session.add(office)
    await test_session.commit()
    await test_session.refresh(office)
    return office


@pytest_asyncio.fixture
async def machine(test_session: AsyncSession, office):
    """Create one active machine belonging to ``office``."""
    machine = LuneMachine(
        serial_number="LN7890001",
        office_id=office.id,
        purchase_date=date(2024, 2, 14),
    )
    test_session.add(machine)
    await test_session.commit()
    await test_session.refresh(machine)
    return machine


@pytest.fixture
def add_usage(test_session: AsyncSession):
    """Factory inserting button presses for a machine."""

    async def _add_usage(machine_id, button_number, seconds, usage_date, start_time=None):
        start = start_time or datetime(
            usage_date.year, usage_date.month, usage_date.day, 9, 0, tzinfo=timezone.utc
        )
        record = ButtonUsage(
            machine_id=machine_id,
            button_number=button_number,
            start_time=start,
            end_time=start + timedelta(seconds=seconds),
            duration_seconds=seconds,
            usage_date=usage_date,
        )
        test_session.add(record)
        await test_session.commit()
        return record

    return _add_usage
