"""
Database configuration and connection management for the Lune Billing Service
Owns the pooled async engine and hands out one session per request
"""
from typing import AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import settings
from .logging import get_logger

logger = get_logger("lune.database")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):  # pragma: no cover - engine hook
    """Ensure SQLite enforces foreign key constraints."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine, pooled for server databases."""
    if database_url.startswith("sqlite"):
        engine = create_async_engine(database_url, echo=echo)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


class DatabaseManager:
    """Manages the engine lifecycle."""

    def __init__(self):
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_initialized(self) -> bool:
        return self.session_factory is not None

    async def initialize(self, database_url: str = None) -> None:
        """Create the engine and, when configured, the tables."""
        from ..models import Base

        url = database_url or settings.database_url
        self.engine = build_engine(url, echo=settings.db_echo)
        self.session_factory = build_session_factory(self.engine)

        if settings.db_create_tables:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        logger.info("Database initialized", dialect=self.engine.dialect.name)

    async def close(self) -> None:
        """Dispose pooled connections."""
        if self.engine:
            await self.engine.dispose()
            logger.info("Database connections closed")
        self.engine = None
        self.session_factory = None


# Global database manager instance
db_manager = DatabaseManager()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting a request-scoped database session."""
    if not db_manager.is_initialized:
        raise RuntimeError("Database not initialized")

    async with db_manager.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
