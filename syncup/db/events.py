import secrets
import string
from datetime import UTC, datetime
from typing import Any

from psycopg import errors as pg_errors
from psycopg.types.json import Json

from syncup.db.core import _get_connection


def _generate_event_id(length: int = 10) -> str:
    chars = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(chars) for _ in range(length))


def _iso(value: datetime) -> str:
    return value.astimezone(UTC).isoformat()


async def create_event(
    name: str,
    dates: list[str],
    timezone: str,
    description: str | None = None,
) -> dict[str, Any]:
    now = datetime.now(UTC)
    async with _get_connection() as conn:
        for _ in range(10):
            event_id = _generate_event_id()
            try:
                await conn.execute(
                    """INSERT INTO events (id, name, description, dates, timezone, created_at)
                       VALUES (%s, %s, %s, %s, %s, %s)""",
                    (event_id, name, description, Json(dates), timezone, now),
                )
                return {
                    "id": event_id,
                    "name": name,
                    "description": description,
                    "dates": dates,
                    "timezone": timezone,
                    "created_at": now.isoformat(),
                }
            except pg_errors.UniqueViolation:
                continue
        raise RuntimeError("Failed to generate unique event ID")


async def get_event(event_id: str) -> dict[str, Any] | None:
    async with _get_connection() as conn:
        rows = await conn.execute(
            "SELECT id, name, description, dates, timezone, created_at FROM events WHERE id = %s",
            (event_id,),
        )
        row = await rows.fetchone()
        if not row:
            return None
        return {
            "id": row[0],
            "name": row[1],
            "description": row[2],
            "dates": row[3] or [],
            "timezone": row[4],
            "created_at": _iso(row[5]),
        }


async def list_availabilities(event_id: str) -> list[dict[str, Any]]:
    async with _get_connection() as conn:
        rows = await conn.execute(
            """SELECT participant_name, slots, created_at, updated_at FROM availabilities
               WHERE event_id = %s ORDER BY created_at, participant_name""",
            (event_id,),
        )
        result = []
        async for row in rows:
            result.append(
                {
                    "participant_name": row[0],
                    "slots": row[1] or [],
                    "created_at": _iso(row[2]),
                    "updated_at": _iso(row[3]),
                }
            )
        return result


async def get_availability(event_id: str, participant_name: str) -> dict[str, Any] | None:
    async with _get_connection() as conn:
        row = await (
            await conn.execute(
                """SELECT participant_name, slots, created_at, updated_at FROM availabilities
                   WHERE event_id = %s AND participant_name = %s""",
                (event_id, participant_name),
            )
        ).fetchone()
        if not row:
            return None
        return {
            "participant_name": row[0],
            "slots": row[1] or [],
            "created_at": _iso(row[2]),
            "updated_at": _iso(row[3]),
        }


async def upsert_availability(
    event_id: str,
    participant_name: str,
    slots: list[dict[str, Any]],
) -> dict[str, Any]:
    """Store a participant's canonical slots, replacing any earlier submission."""
    now = datetime.now(UTC)
    async with _get_connection() as conn:
        await conn.execute(
            """INSERT INTO availabilities (event_id, participant_name, slots, created_at, updated_at)
               VALUES (%s, %s, %s, %s, %s)
               ON CONFLICT (event_id, participant_name)
               DO UPDATE SET slots = EXCLUDED.slots, updated_at = EXCLUDED.updated_at""",
            (event_id, participant_name, Json(slots), now, now),
        )
        return {
            "event_id": event_id,
            "participant_name": participant_name,
            "slots": slots,
            "updated_at": now.isoformat(),
        }
