"""
Base repository implementation.

Repositories wrap a caller-supplied AsyncSession; they never open their own
connections or transactions. Storage failures are translated into the
service error taxonomy here so callers only see ``DependencyError``,
``ConflictError`` or ``InvalidArgumentError``.
"""

from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import ConflictError, DependencyError, InvalidArgumentError
from ..core.logging import get_logger

logger = get_logger(__name__)

UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """Whether an integrity error comes from a unique constraint.

    PostgreSQL drivers report SQLSTATE 23505; SQLite only reports it in the
    message text.
    """
    orig = getattr(error, "orig", None)
    if getattr(orig, "sqlstate", None) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    if getattr(orig, "pgcode", None) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    message = str(orig if orig is not None else error).lower()
    return "unique constraint" in message or "duplicate key" in message


class BaseRepository:
    """Common session handling for all repositories."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _execute(self, statement: Any, operation: str):
        """Execute a statement, surfacing storage failures as DependencyError."""
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as e:
            logger.error("Storage read failed", operation=operation, error_type=type(e).__name__)
            raise DependencyError(f"Storage failure during {operation}") from e

    async def _commit(self, operation: str, conflict_message: str) -> None:
        """Commit the unit of work.

        A unique-constraint violation is rolled back and raised as
        ConflictError, any other integrity violation (NOT NULL, foreign key,
        check) as InvalidArgumentError. Other storage failures are rolled
        back and raised as DependencyError.
        """
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if is_unique_violation(e):
                logger.warning("Unique constraint violation", operation=operation)
                raise ConflictError(conflict_message) from e
            logger.warning("Integrity violation", operation=operation, error_type=type(e.orig).__name__)
            raise InvalidArgumentError(f"Rejected by storage constraints during {operation}") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Storage write failed", operation=operation, error_type=type(e).__name__)
            raise DependencyError(f"Storage failure during {operation}") from e

    async def _refresh(self, entity: Any, operation: str) -> None:
        try:
            await self.session.refresh(entity)
        except SQLAlchemyError as e:
            logger.error("Storage read failed", operation=operation, error_type=type(e).__name__)
            raise DependencyError(f"Storage failure during {operation}") from e
