"""Per-participant availability keyed by canonical date."""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Mapping

from syncup.errors import ParseError
from syncup.scheduling.intervals import FULL_DAY, TimeRange, format_ranges, merge_ranges, parse_range
from syncup.scheduling.timezones import Zone, edit_neighbors, normalize_ranges

logger = logging.getLogger(__name__)


def parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as e:
        raise ParseError(detail=f"invalid date: {value!r}") from e


@dataclass(frozen=True)
class DaySlot:
    """Merged free ranges on one calendar date.

    An empty ``ranges`` is the legacy "available, no specific time" form and
    reads as the whole day.
    """

    date: date
    ranges: tuple[TimeRange, ...] = ()

    @classmethod
    def build(cls, day: date, ranges: Iterable[TimeRange]) -> "DaySlot":
        return cls(day, tuple(merge_ranges(ranges)))

    def effective_ranges(self) -> list[TimeRange]:
        return list(self.ranges) if self.ranges else [FULL_DAY]

    def to_record(self) -> dict[str, Any]:
        return {"date": self.date.isoformat(), "ranges": format_ranges(self.effective_ranges())}


@dataclass
class ParticipantAvailability:
    name: str
    slots: dict[date, DaySlot] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValueError("participant name must not be empty")

    def get(self, day: date) -> DaySlot | None:
        return self.slots.get(day)

    def upsert(self, day: date, ranges: Iterable[TimeRange]) -> DaySlot | None:
        """Replace the slot for ``day``. No ranges means not available."""
        ranges = list(ranges)
        if not ranges:
            self.delete(day)
            return None
        slot = DaySlot.build(day, ranges)
        self.slots[day] = slot
        return slot

    def add(self, day: date, ranges: Iterable[TimeRange]) -> DaySlot | None:
        """Merge ``ranges`` into whatever is already stored for ``day``."""
        existing = self.slots.get(day)
        combined = list(existing.effective_ranges()) if existing else []
        combined.extend(ranges)
        return self.upsert(day, combined)

    def delete(self, day: date) -> DaySlot | None:
        return self.slots.pop(day, None)

    def sorted_slots(self) -> list[DaySlot]:
        return [self.slots[d] for d in sorted(self.slots)]

    @property
    def dates(self) -> list[date]:
        return sorted(self.slots)

    def to_record(self) -> dict[str, Any]:
        return {"name": self.name, "slots": [s.to_record() for s in self.sorted_slots()]}


def clear_edit_neighbors(availability: ParticipantAvailability, day: date) -> list[date]:
    """Drop the canonical slots a previous submission for ``day`` may own."""
    cleared = [d for d in edit_neighbors(day) if availability.delete(d) is not None]
    if cleared:
        logger.debug("Cleared %d neighbouring slots for %s on %s", len(cleared), availability.name, day)
    return cleared


def apply_date_edit(
    availability: ParticipantAvailability,
    day: date,
    ranges: Iterable[TimeRange],
    source_tz: Zone,
    canonical_tz: Zone,
) -> ParticipantAvailability:
    """Re-enter one local date: clear its neighbourhood then write the conversion."""
    clear_edit_neighbors(availability, day)
    for canonical_day, piece in normalize_ranges(day, ranges, source_tz, canonical_tz):
        availability.add(canonical_day, [piece])
    return availability


def normalize_submission(
    name: str,
    local_slots: Mapping[date, Iterable[TimeRange]],
    source_tz: Zone,
    canonical_tz: Zone,
) -> ParticipantAvailability:
    """Build a canonical record from a full submission in ``source_tz``."""
    availability = ParticipantAvailability(name)
    for day in sorted(local_slots):
        for canonical_day, piece in normalize_ranges(day, local_slots[day], source_tz, canonical_tz):
            availability.add(canonical_day, [piece])
    return availability


def _parse_slot(name: str, slot: Any) -> DaySlot | None:
    if isinstance(slot, str):
        return DaySlot(parse_date(slot), (FULL_DAY,))
    if not isinstance(slot, Mapping):
        raise ParseError(detail=f"invalid slot: {slot!r}")
    day = parse_date(slot.get("date"))
    raw_ranges = slot.get("ranges") or []
    if not isinstance(raw_ranges, (list, tuple)):
        raise ParseError(detail=f"invalid ranges for {day}: {raw_ranges!r}")
    if not raw_ranges:
        return DaySlot(day, (FULL_DAY,))
    ranges = []
    for raw in raw_ranges:
        try:
            ranges.append(parse_range(raw))
        except ParseError as e:
            logger.warning("Dropping range for %s on %s: %s", name, day, e.detail)
    if not ranges:
        logger.warning("Dropping slot for %s on %s: no valid ranges", name, day)
        return None
    return DaySlot.build(day, ranges)


def parse_record(record: Mapping[str, Any]) -> ParticipantAvailability:
    """Read a stored participant record.

    Slots may be ``{"date", "ranges"}`` objects or bare date strings (whole
    day). Malformed ranges and dates are dropped with a warning so a single
    bad entry does not spoil the group result.
    """
    name = record.get("name") or record.get("participant_name") or record.get("user_name") or ""
    raw_slots = record.get("slots")
    if raw_slots is None:
        raw_slots = record.get("selected_slots") or []
    if not isinstance(raw_slots, (list, tuple)):
        logger.warning("Ignoring slots for %s: expected a list, got %r", name, raw_slots)
        raw_slots = []
    availability = ParticipantAvailability(name)
    for raw in raw_slots:
        try:
            slot = _parse_slot(availability.name, raw)
        except ParseError as e:
            logger.warning("Dropping slot for %s: %s", availability.name, e.detail)
            continue
        if slot is not None:
            availability.add(slot.date, slot.effective_ranges())
    return availability
