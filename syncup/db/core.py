"""Core database connection pool management."""

import logging
from contextlib import asynccontextmanager

import psycopg
from psycopg_pool import AsyncConnectionPool

from syncup.config import get_settings

_logger = logging.getLogger(__name__)

# Global connection pool
_pool: AsyncConnectionPool | None = None


def _get_dsn() -> str:
    """Get DSN from settings."""
    return get_settings().postgres.get_dsn()


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return
    settings = get_settings().postgres
    _pool = AsyncConnectionPool(
        settings.get_dsn(),
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        timeout=settings.pool_timeout,
        max_lifetime=settings.pool_max_lifetime,
        max_idle=settings.pool_max_idle,
        check=AsyncConnectionPool.check_connection,
        open=False,
    )
    await _pool.open()
    _logger.info(
        "Database connection pool initialized (min=%d, max=%d, timeout=%ds)",
        settings.pool_min_size,
        settings.pool_max_size,
        settings.pool_timeout,
    )
    # Import here to avoid circular imports
    from syncup.db.schema import ensure_schema

    await ensure_schema()


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
        _logger.info("Database connection pool closed")


@asynccontextmanager
async def _get_connection(autocommit: bool = True):
    if _pool is not None:
        async with _pool.connection() as conn:
            if autocommit:
                await conn.set_autocommit(True)
            yield conn
    else:
        dsn = _get_dsn()
        async with await psycopg.AsyncConnection.connect(dsn, autocommit=autocommit) as conn:
            yield conn


def get_pool() -> AsyncConnectionPool | None:
    """Get the connection pool instance."""
    return _pool


def get_pool_stats() -> dict[str, object]:
    """Get current pool statistics for monitoring."""
    if _pool is None:
        return {"status": "not_initialized"}
    stats = _pool.get_stats()
    return {
        "status": "active",
        "size": stats["pool_size"],
        "available": stats["pool_available"],
        "waiting": stats["requests_waiting"],
        "min_size": stats["pool_min"],
        "max_size": stats["pool_max"],
    }
