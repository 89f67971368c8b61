"""Conversion of locally entered ranges into the canonical timezone.

Participants enter ranges on a calendar date in their own IANA zone. Results
are aggregated in one canonical zone, so every range is turned into absolute
instants with real zone rules (DST included) and re-read as wall-clock time in
the canonical zone. A range that crosses canonical midnight is split into one
piece per canonical date.
"""

import logging
from datetime import UTC, date, datetime, time, timedelta
from typing import Iterable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from syncup.errors import TimezoneError
from syncup.scheduling.intervals import MINUTES_PER_DAY, TimeRange

logger = logging.getLogger(__name__)

Zone = ZoneInfo | str


def get_zone(name: str) -> ZoneInfo:
    """Resolve an IANA identifier. Unknown names never fall back to UTC."""
    if not isinstance(name, str) or not name.strip():
        raise TimezoneError(detail=f"unknown timezone: {name!r}", timezone=name)
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise TimezoneError(detail=f"unknown timezone: {name!r}", timezone=name) from e


def _zone(tz: Zone) -> ZoneInfo:
    return tz if isinstance(tz, ZoneInfo) else get_zone(tz)


def to_canonical(day: date, minutes: int, source: ZoneInfo, canonical: ZoneInfo) -> tuple[date, int]:
    """Map a source wall-clock time to canonical (date, minute-of-day).

    ``minutes`` may be 1440, meaning midnight at the start of the next day.
    Conversion always goes through UTC, so a wall-clock time that does not
    exist in ``source`` is resolved even when ``source`` is ``canonical``.
    """
    local = datetime.combine(day, time()) + timedelta(minutes=minutes)
    converted = local.replace(tzinfo=source).astimezone(UTC).astimezone(canonical)
    return converted.date(), converted.hour * 60 + converted.minute


def normalize_ranges(
    day: date,
    ranges: Iterable[TimeRange],
    source_tz: Zone,
    canonical_tz: Zone,
) -> list[tuple[date, TimeRange]]:
    """Convert ranges entered on ``day`` in ``source_tz`` into canonical pieces.

    Each input range yields one ``(date, range)`` pair when both ends land on
    the same canonical date, otherwise it is split at canonical midnight into
    ``start-24:00`` and ``00:00-end``. A piece that would end exactly at
    midnight of the following day is kept whole as ``start-24:00``.
    """
    source = _zone(source_tz)
    canonical = _zone(canonical_tz)
    pieces: list[tuple[date, TimeRange]] = []
    for rng in ranges:
        start_day, start_min = to_canonical(day, rng.start, source, canonical)
        end_day, end_min = to_canonical(day, rng.end, source, canonical)
        if (end_day, end_min) <= (start_day, start_min):
            # Both ends fell into a DST gap or the range was folded away.
            logger.debug("Dropping range %s on %s: empty after conversion from %s", rng, day, source.key)
            continue
        while start_day < end_day:
            pieces.append((start_day, TimeRange(start_min, MINUTES_PER_DAY)))
            start_day += timedelta(days=1)
            start_min = 0
        if start_min < end_min:
            pieces.append((start_day, TimeRange(start_min, end_min)))
    return pieces


def edit_neighbors(day: date) -> tuple[date, date, date]:
    """Canonical dates a previous submission for ``day`` may have written to.

    The source zone of earlier ranges is not stored, so an edit cannot tell
    exactly which canonical dates it produced. Conversion shifts a range by at
    most one calendar day, so the day before, the day itself and the day after
    bound every possibility. Clearing all three can also drop ranges that came
    from editing a neighbouring source date.
    """
    one = timedelta(days=1)
    return day - one, day, day + one
