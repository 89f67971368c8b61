from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from syncup.scheduling.availability import ParticipantAvailability
from syncup.scheduling.intervals import TimeRange


@dataclass
class AggregateDateStat:
    date: date
    attendance_count: int = 0
    attendees: list[str] = field(default_factory=list)
    ranges: list[list[TimeRange]] = field(default_factory=list)


def aggregate(participants: Iterable[ParticipantAvailability]) -> dict[date, AggregateDateStat]:
    """Count attendance per canonical date in a single pass over all slots.

    Each attendee's range list is kept alongside their name; a slot without
    ranges contributes the whole day.
    """
    stats: dict[date, AggregateDateStat] = {}
    for participant in participants:
        for slot in participant.slots.values():
            stat = stats.get(slot.date)
            if stat is None:
                stat = stats[slot.date] = AggregateDateStat(slot.date)
            stat.attendance_count += 1
            stat.attendees.append(participant.name)
            stat.ranges.append(slot.effective_ranges())
    return stats
