"""Database Session Manager — async engine, sessions with rollback, error translation.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - No SQLAlchemy exception leaves this module: each maps to a FundraisingError
      (stale project version -> ConcurrencyConflictError, the rest -> DatabaseError)
    - Pool sizing applies to server databases only; SQLite uses the driver default

Design Decisions:
    - Singleton db_manager initialized in the FastAPI lifespan
    - expire_on_commit=False: handlers build responses after commit without
      lazy loads in async context
    - Services call commit_or_conflict() so a failed commit surfaces inside the
      request, while the project lock is still held
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import ConcurrencyConflictError, DatabaseError, FundraisingError

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError subclass DBAPIError.
_DB_ERRORS: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)


def translate_db_error(exc: Exception) -> FundraisingError:
    """Map a SQLAlchemy failure onto the fundraising error hierarchy."""
    if isinstance(exc, StaleDataError):
        logger.warning(f"Stale project version: {exc}")
        return ConcurrencyConflictError(
            "Project was modified concurrently; retry the operation",
        )
    for exc_type, message, operation in _DB_ERRORS:
        if isinstance(exc, exc_type):
            logger.error(f"{exc_type.__name__} during {operation}: {exc}")
            return DatabaseError(message, operation)
    raise TypeError(f"not a database error: {exc!r}")


class DatabaseSessionManager:
    """Owns the async engine and hands out sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session that rolls back and translates any database failure."""
        session = self._session_factory()
        try:
            yield session
        except (StaleDataError, SQLAlchemyError) as e:
            await session.rollback()
            raise translate_db_error(e) from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """SELECT 1 round trip for the readiness check."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


async def commit_or_conflict(session: AsyncSession) -> None:
    """Commit, or roll back and raise the translated error."""
    try:
        await session.commit()
    except (StaleDataError, SQLAlchemyError) as e:
        await session.rollback()
        raise translate_db_error(e) from e


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
