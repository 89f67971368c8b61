"""Minute-of-day interval arithmetic.

Times are integers counting minutes since local midnight. The value 1440
(``"24:00"``) is a legal end point so a range can run to the end of a day.
"""

import re
from dataclasses import dataclass
from typing import Iterable

from syncup.errors import ParseError

MINUTES_PER_DAY = 24 * 60

TIME_RE = re.compile(r"^([0-9]{2}):([0-9]{2})$")


def to_minutes(time_str: str) -> int:
    """Parse ``"HH:MM"`` (24-hour) into minutes since midnight.

    Hours run 0-24 and minutes 0-59; ``"24:00"`` is the only accepted value
    past 23:59.
    """
    match = TIME_RE.match(time_str.strip()) if isinstance(time_str, str) else None
    if not match:
        raise ParseError(detail=f"invalid time: {time_str!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 24 or minutes >= 60:
        raise ParseError(detail=f"invalid time: {time_str!r}")
    total = hours * 60 + minutes
    if total > MINUTES_PER_DAY:
        raise ParseError(detail=f"invalid time: {time_str!r}")
    return total


def to_time_str(minutes: int) -> str:
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise ValueError(f"minutes out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True, order=True)
class TimeRange:
    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start < self.end <= MINUTES_PER_DAY:
            raise ValueError(f"invalid time range: {self.start}-{self.end}")

    def __str__(self) -> str:
        return f"{to_time_str(self.start)}-{to_time_str(self.end)}"


FULL_DAY = TimeRange(0, MINUTES_PER_DAY)


def parse_range(range_str: str) -> TimeRange:
    """Parse ``"HH:MM-HH:MM"``; start must be strictly before end."""
    if not isinstance(range_str, str) or range_str.count("-") != 1:
        raise ParseError(detail=f"invalid time range: {range_str!r}")
    start_str, end_str = range_str.split("-")
    start, end = to_minutes(start_str), to_minutes(end_str)
    if start >= end:
        raise ParseError(detail=f"range start must be before end: {range_str!r}")
    return TimeRange(start, end)


def format_ranges(ranges: Iterable[TimeRange]) -> list[str]:
    return [str(r) for r in ranges]


def merge_ranges(ranges: Iterable[TimeRange]) -> list[TimeRange]:
    """Sort and fuse ranges that overlap or touch.

    Touching counts as overlapping: 09:00-10:00 and 10:00-11:00 become
    09:00-11:00.
    """
    merged: list[TimeRange] = []
    for current in sorted(ranges):
        if merged and merged[-1].end >= current.start:
            last = merged[-1]
            merged[-1] = TimeRange(last.start, max(last.end, current.end))
        else:
            merged.append(current)
    return merged


def intersect(a: Iterable[TimeRange], b: Iterable[TimeRange]) -> list[TimeRange]:
    """Pairwise intersection of two range lists.

    Zero-length overlaps are discarded. The result is neither sorted nor
    merged.
    """
    b = list(b)
    result: list[TimeRange] = []
    for left in a:
        for right in b:
            start = max(left.start, right.start)
            end = min(left.end, right.end)
            if start < end:
                result.append(TimeRange(start, end))
    return result
