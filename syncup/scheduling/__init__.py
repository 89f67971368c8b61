"""Availability aggregation and timezone normalization.

Pure, synchronous functions over value objects; nothing here performs I/O.
"""

from syncup.scheduling.aggregate import AggregateDateStat, aggregate
from syncup.scheduling.availability import (
    DaySlot,
    ParticipantAvailability,
    apply_date_edit,
    clear_edit_neighbors,
    normalize_submission,
    parse_date,
    parse_record,
)
from syncup.scheduling.best_slot import BestSlot, BestSlotSummary, common_window, select_best_slots, summarize
from syncup.scheduling.colors import participant_color
from syncup.scheduling.intervals import (
    FULL_DAY,
    MINUTES_PER_DAY,
    TimeRange,
    format_ranges,
    intersect,
    merge_ranges,
    parse_range,
    to_minutes,
    to_time_str,
)
from syncup.scheduling.timezones import edit_neighbors, get_zone, normalize_ranges

__all__ = [
    "AggregateDateStat",
    "BestSlot",
    "BestSlotSummary",
    "DaySlot",
    "FULL_DAY",
    "MINUTES_PER_DAY",
    "ParticipantAvailability",
    "TimeRange",
    "aggregate",
    "apply_date_edit",
    "clear_edit_neighbors",
    "common_window",
    "edit_neighbors",
    "format_ranges",
    "get_zone",
    "intersect",
    "merge_ranges",
    "normalize_ranges",
    "normalize_submission",
    "parse_date",
    "parse_range",
    "parse_record",
    "participant_color",
    "select_best_slots",
    "summarize",
    "to_minutes",
    "to_time_str",
]
