"""Database schema for events and participant availability."""

import logging

from syncup.db.core import _get_connection

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS events (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT,
        dates JSONB NOT NULL DEFAULT '[]'::jsonb,
        timezone TEXT NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS availabilities (
        event_id TEXT NOT NULL REFERENCES events(id) ON DELETE CASCADE,
        participant_name TEXT NOT NULL,
        slots JSONB NOT NULL DEFAULT '[]'::jsonb,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        PRIMARY KEY (event_id, participant_name)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_availabilities_event ON availabilities(event_id)",
)


async def ensure_schema() -> None:
    """Create tables if missing. Safe to call repeatedly."""
    async with _get_connection() as conn:
        for statement in SCHEMA_STATEMENTS:
            await conn.execute(statement)
    logger.info("Schema ensured (%d statements)", len(SCHEMA_STATEMENTS))
