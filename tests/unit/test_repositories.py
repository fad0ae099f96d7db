"""Unit tests for storage error translation in the repositories."""

from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError

from lune_billing.core.errors import ConflictError, InvalidArgumentError
from lune_billing.repositories import OfficeRepository
from lune_billing.repositories.base import is_unique_violation


class TestIsUniqueViolation:

    def test_sqlite_unique_message(self):
        error = IntegrityError(
            "UPDATE", {}, Exception("UNIQUE constraint failed: dental_offices.npi_id")
        )
        assert is_unique_violation(error) is True

    def test_postgres_sqlstate(self):
        orig = SimpleNamespace(sqlstate="23505")
        assert is_unique_violation(IntegrityError("INSERT", {}, orig)) is True

    def test_not_null_is_not_unique(self):
        error = IntegrityError(
            "UPDATE", {}, Exception("NOT NULL constraint failed: dental_offices.name")
        )
        assert is_unique_violation(error) is False

    def test_foreign_key_is_not_unique(self):
        orig = SimpleNamespace(sqlstate="23503")
        assert is_unique_violation(IntegrityError("INSERT", {}, orig)) is False


class TestOfficeRepositoryCommit:

    @pytest.mark.asyncio
    async def test_null_required_field_is_invalid_argument(self, test_session, office):
        repository = OfficeRepository(test_session)

        with pytest.raises(InvalidArgumentError):
            await repository.update(office, name=None)

    @pytest.mark.asyncio
    async def test_duplicate_npi_is_conflict(self, test_session, office, office_data):
        repository = OfficeRepository(test_session)
        other = await repository.create(**{**office_data, "npi_id": "5550001111"})

        with pytest.raises(ConflictError) as exc_info:
            await repository.update(other, npi_id=office_data["npi_id"])

        assert office_data["npi_id"] in str(exc_info.value)
