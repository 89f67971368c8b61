"""Selection of the maximum-attendance dates and their common windows."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping

from syncup.scheduling.aggregate import AggregateDateStat, aggregate
from syncup.scheduling.availability import ParticipantAvailability, parse_record
from syncup.scheduling.intervals import FULL_DAY, TimeRange, format_ranges, intersect, merge_ranges

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BestSlot:
    date: date
    windows: tuple[TimeRange, ...]
    attendees: tuple[str, ...]

    @property
    def has_common_window(self) -> bool:
        """False when everyone attending this date is free at disjoint times."""
        return bool(self.windows)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "windows": format_ranges(self.windows),
            "attendees": list(self.attendees),
            "has_common_window": self.has_common_window,
        }


@dataclass(frozen=True)
class BestSlotSummary:
    max_count: int
    participant_count: int
    slots: tuple[BestSlot, ...] = ()

    @property
    def has_dates(self) -> bool:
        return self.max_count > 0

    def find(self, day: date) -> BestSlot | None:
        return next((s for s in self.slots if s.date == day), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_count": self.max_count,
            "participant_count": self.participant_count,
            "has_dates": self.has_dates,
            "slots": [s.to_dict() for s in self.slots],
        }


def common_window(range_lists: Iterable[list[TimeRange]]) -> list[TimeRange]:
    """Intersect every attendee's ranges, starting from the whole day."""
    window = [FULL_DAY]
    for ranges in range_lists:
        window = intersect(window, ranges)
        if not window:
            break
    return merge_ranges(window)


def select_best_slots(
    stats: Mapping[date, AggregateDateStat],
    participant_count: int | None = None,
) -> BestSlotSummary:
    """Pick every date with maximum attendance, oldest first.

    ``max_count == 0`` is the "no applicable dates" state. A selected date may
    still have no common window.
    """
    if participant_count is None:
        participant_count = len({name for stat in stats.values() for name in stat.attendees})
    max_count = max((stat.attendance_count for stat in stats.values()), default=0)
    if max_count == 0:
        return BestSlotSummary(max_count=0, participant_count=participant_count)

    slots = []
    for day in sorted(d for d, stat in stats.items() if stat.attendance_count == max_count):
        stat = stats[day]
        slots.append(
            BestSlot(
                date=day,
                windows=tuple(common_window(stat.ranges)),
                attendees=tuple(stat.attendees),
            )
        )
    return BestSlotSummary(max_count=max_count, participant_count=participant_count, slots=tuple(slots))


def summarize(records: Iterable[Mapping[str, Any] | ParticipantAvailability]) -> BestSlotSummary:
    """Parse stored records, aggregate them and select the best slots."""
    participants: list[ParticipantAvailability] = []
    for record in records:
        if isinstance(record, ParticipantAvailability):
            participants.append(record)
            continue
        try:
            participants.append(parse_record(record))
        except ValueError as e:
            logger.warning("Skipping participant record: %s", e)
    return select_best_slots(aggregate(participants), participant_count=len(participants))
