"""PostgreSQL storage for events and participant availability."""

from syncup.db.core import close_pool, get_pool, get_pool_stats, init_pool
from syncup.db.events import (
    create_event,
    get_availability,
    get_event,
    list_availabilities,
    upsert_availability,
)
from syncup.db.schema import ensure_schema

__all__ = [
    "close_pool",
    "create_event",
    "ensure_schema",
    "get_availability",
    "get_event",
    "get_pool",
    "get_pool_stats",
    "init_pool",
    "list_availabilities",
    "upsert_availability",
]
