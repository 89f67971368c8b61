"""Application startup and shutdown."""

import logging
from dataclasses import dataclass

from syncup import db
from syncup.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class LifespanResources:
    """Container for resources initialized during lifespan."""

    db_enabled: bool = False


async def init_database() -> bool:
    """Initialize database connection pool.

    Returns:
        True if database was initialized, False otherwise.
    """
    if not get_settings().features.database:
        logger.info("Database disabled by configuration")
        return False
    try:
        await db.init_pool()
        return True
    except Exception as e:
        logger.warning("Failed to initialize database: %s", e)
    return False


async def setup_resources() -> LifespanResources:
    """Set up all shared resources."""
    resources = LifespanResources()
    resources.db_enabled = await init_database()
    return resources


async def cleanup_resources(resources: LifespanResources) -> None:
    """Clean up all resources on shutdown."""
    if resources.db_enabled:
        try:
            await db.close_pool()
        except Exception as e:
            logger.warning("Failed to close database pool: %s", e)
