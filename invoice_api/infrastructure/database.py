"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Integrity violations map to ConstraintViolationError, every other
      SQLAlchemy exception to DatabaseError (core/errors.py)
    - Pool sizing only applies to server databases; SQLite uses SQLAlchemy's default pool

Design Decisions:
    - Instance owned by the FastAPI lifespan and stored on app.state
      (no global import side effects, tests build their own)
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import event, text

from invoice_api.core.errors import ConstraintViolationError, DatabaseError
from invoice_api.db.base import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores REFERENCES clauses unless enabled per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def enforce_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)


def _describe_failure(exc: SQLAlchemyError) -> tuple[str, str]:
    """(reason, operation) reported by DatabaseError for a driver failure."""
    if isinstance(exc, OperationalError):
        return "Connection or operational error", "execute"
    if isinstance(exc, DBAPIError):
        return "Database driver error", "query"
    return "Database operation failed", "unknown"


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        enforce_sqlite_foreign_keys(self.engine)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "DatabaseSessionManager":
        """Wrap an existing engine (test fixtures, scripts)."""
        manager = cls.__new__(cls)
        manager.engine = engine
        manager._session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False,
        )
        return manager

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            # Lost a race with the service-level checks; the FK caught it
            await session.rollback()
            logger.warning(f"DB integrity error: {e.orig}")
            raise ConstraintViolationError(
                "Operation conflicts with related records",
            ) from None
        except SQLAlchemyError as e:
            await session.rollback()
            reason, operation = _describe_failure(e)
            logger.error(f"DB {operation} failed: {e}")
            raise DatabaseError(reason, operation) from None
        finally:
            await session.close()

    async def create_tables(self) -> None:
        """Create missing tables from model metadata (development convenience)."""
        import invoice_api.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
