"""Tests for canonical timezone normalization."""

from datetime import date
from zoneinfo import ZoneInfo

import pytest

from syncup.errors import TimezoneError
from syncup.scheduling.intervals import parse_range
from syncup.scheduling.timezones import edit_neighbors, get_zone, normalize_ranges

NY = "America/New_York"
LA = "America/Los_Angeles"


def pieces(result):
    return [(d.isoformat(), str(r)) for d, r in result]


class TestGetZone:
    def test_known_zone(self):
        assert get_zone(NY) == ZoneInfo(NY)

    @pytest.mark.parametrize("name", ["Mars/Olympus_Mons", "", "   ", "../etc/passwd", None])
    def test_unknown_zone_raises(self, name):
        with pytest.raises(TimezoneError):
            get_zone(name)

    def test_unknown_zone_does_not_fall_back_to_utc(self):
        with pytest.raises(TimezoneError):
            normalize_ranges(date(2024, 7, 1), [parse_range("09:00-10:00")], "Not/AZone", NY)


class TestNormalizeRanges:
    def test_same_zone_is_identity(self):
        result = normalize_ranges(date(2024, 7, 1), [parse_range("09:00-17:00")], NY, NY)
        assert pieces(result) == [("2024-07-01", "09:00-17:00")]

    def test_range_to_end_of_day_is_not_split(self):
        result = normalize_ranges(date(2024, 7, 1), [parse_range("22:00-24:00")], NY, NY)
        assert pieces(result) == [("2024-07-01", "22:00-24:00")]

    def test_crossing_canonical_midnight_splits(self):
        # Los Angeles is three hours behind New York.
        result = normalize_ranges(date(2024, 7, 1), [parse_range("20:00-23:00")], LA, NY)
        assert pieces(result) == [
            ("2024-07-01", "23:00-24:00"),
            ("2024-07-02", "00:00-02:00"),
        ]

    def test_whole_shift_to_next_day(self):
        result = normalize_ranges(date(2024, 7, 1), [parse_range("22:00-24:00")], LA, NY)
        assert pieces(result) == [("2024-07-02", "01:00-03:00")]

    def test_shift_to_previous_day(self):
        result = normalize_ranges(date(2024, 7, 1), [parse_range("09:00-10:00")], "Asia/Tokyo", NY)
        assert pieces(result) == [("2024-06-30", "20:00-21:00")]

    def test_full_day_from_ahead_zone(self):
        result = normalize_ranges(date(2024, 7, 1), [parse_range("00:00-24:00")], "Asia/Tokyo", NY)
        assert pieces(result) == [
            ("2024-06-30", "11:00-24:00"),
            ("2024-07-01", "00:00-11:00"),
        ]

    def test_uses_dst_rules_not_fixed_offset(self):
        noon = [parse_range("12:00-13:00")]
        # London and New York both on summer time: five hours apart.
        summer = normalize_ranges(date(2024, 7, 1), noon, "Europe/London", NY)
        # New York switched on 10 March, London only on 31 March: four hours apart.
        spring = normalize_ranges(date(2024, 3, 20), noon, "Europe/London", NY)
        winter = normalize_ranges(date(2024, 1, 15), noon, "Europe/London", NY)
        assert pieces(summer) == [("2024-07-01", "07:00-08:00")]
        assert pieces(spring) == [("2024-03-20", "08:00-09:00")]
        assert pieces(winter) == [("2024-01-15", "07:00-08:00")]

    def test_range_inside_dst_gap_is_dropped(self):
        # 02:00-03:00 does not exist in New York on 10 March 2024.
        result = normalize_ranges(date(2024, 3, 10), [parse_range("02:00-03:00")], NY, NY)
        assert result == []

    def test_same_zone_range_starting_in_dst_gap(self):
        result = normalize_ranges(date(2024, 3, 10), [parse_range("02:30-04:00")], NY, NY)
        assert pieces(result) == [("2024-03-10", "03:30-04:00")]

    def test_same_zone_given_as_zoneinfo(self):
        gap = [parse_range("02:00-03:00"), parse_range("09:00-10:00")]
        result = normalize_ranges(date(2024, 3, 10), gap, ZoneInfo(NY), ZoneInfo(NY))
        assert pieces(result) == [("2024-03-10", "09:00-10:00")]

    def test_multiple_ranges(self):
        result = normalize_ranges(
            date(2024, 7, 1),
            [parse_range("08:00-09:00"), parse_range("21:30-22:30")],
            LA,
            NY,
        )
        assert pieces(result) == [
            ("2024-07-01", "11:00-12:00"),
            ("2024-07-02", "00:30-01:30"),
        ]

    def test_accepts_zone_objects(self):
        result = normalize_ranges(date(2024, 7, 1), [parse_range("09:00-10:00")], ZoneInfo("UTC"), ZoneInfo(NY))
        assert pieces(result) == [("2024-07-01", "05:00-06:00")]


def test_edit_neighbors():
    assert edit_neighbors(date(2024, 3, 1)) == (date(2024, 2, 29), date(2024, 3, 1), date(2024, 3, 2))
