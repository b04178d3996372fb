"""Database connection, session management and transient-error retries."""

import asyncio
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from boxoffice.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# SQLSTATE codes for serialization failure and deadlock
TRANSIENT_SQLSTATES = {"40001", "40P01"}

# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=False,  # Set to True for SQL query logging
    future=True,
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for FastAPI to provide database sessions.

    Usage:
        @app.get("/endpoint")
        async def endpoint(db: AsyncSession = Depends(get_db)):
            # Use db here
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def is_transient(exc: DBAPIError) -> bool:
    """Whether a database error is worth retrying in a fresh transaction."""
    if exc.connection_invalidated or isinstance(exc, OperationalError):
        return True
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    return sqlstate in TRANSIENT_SQLSTATES


async def run_with_retries(
    db: AsyncSession,
    operation: Callable[[], Awaitable[T]],
    max_retries: int | None = None,
    backoff_seconds: float | None = None,
) -> T:
    """
    Run a unit of work and commit it, retrying on transient database errors.

    The session is rolled back between attempts, so ``operation`` must re-read
    everything it depends on. Domain errors are never retried.

    Args:
        db: Session the operation works in
        operation: Zero-argument coroutine function performing the work
        max_retries: Attempts before giving up (defaults to settings)
        backoff_seconds: Base delay, doubled on each attempt (defaults to settings)

    Returns:
        Whatever ``operation`` returned
    """
    attempts = max_retries or settings.db_max_retries
    backoff = settings.db_retry_backoff_seconds if backoff_seconds is None else backoff_seconds

    for attempt in range(1, attempts + 1):
        try:
            result = await operation()
            await db.commit()
            return result
        except DBAPIError as e:
            await db.rollback()
            if not is_transient(e) or attempt == attempts:
                raise
            delay = backoff * (2 ** (attempt - 1))
            logger.warning(
                f"Transient database error on attempt {attempt}/{attempts}, "
                f"retrying in {delay:.2f}s: {e}"
            )
            await asyncio.sleep(delay)

    raise RuntimeError("unreachable")  # pragma: no cover
