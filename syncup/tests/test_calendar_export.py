"""Tests for calendar invite formatting."""

from datetime import UTC, date, datetime
from urllib.parse import parse_qs, urlparse

import pytest

from syncup.calendar_export import CalendarInvite, escape_ics_text
from syncup.scheduling.best_slot import BestSlot
from syncup.scheduling.intervals import parse_range

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def _invite(**overrides):
    params = dict(
        title="Team dinner",
        date=date(2024, 7, 1),
        start_time="11:00",
        end_time="12:00",
        timezone="America/New_York",
        description="Somewhere nice",
        attendees=["Ada", "Grace"],
    )
    params.update(overrides)
    return CalendarInvite(**params)


def _unfold(ics):
    return ics.replace("\r\n ", "")


def _query(url):
    return {k: v[0] for k, v in parse_qs(urlparse(url).query, keep_blank_values=True).items()}


def test_escape_ics_text():
    assert escape_ics_text("a,b;c\\d\nE") == "a\\,b\\;c\\\\d\\nE"
    assert escape_ics_text(None) == ""


def test_full_description():
    assert _invite().full_description() == (
        "Somewhere nice\n\nAvailable participants: Ada, Grace\n\nCreated with SyncUp"
    )
    assert _invite(description=None, attendees=[]).full_description() == "Created with SyncUp"


def test_ics_document():
    ics = _invite().to_ics(now=NOW)
    assert ics.startswith("BEGIN:VCALENDAR\r\n")
    assert ics.endswith("END:VCALENDAR\r\n")
    lines = _unfold(ics).split("\r\n")
    assert "DTSTART:20240701T150000Z" in lines
    assert "DTEND:20240701T160000Z" in lines
    assert "DTSTAMP:20240601T120000Z" in lines
    assert "SUMMARY:Team dinner" in lines
    assert "STATUS:TENTATIVE" in lines
    assert "DESCRIPTION:Somewhere nice\\n\\nAvailable participants: Ada\\, Grace\\n\\nCreated with SyncUp" in lines
    assert any(line.startswith("UID:") and line.endswith("@syncup.app") for line in lines)


def test_ics_lines_are_folded():
    ics = _invite(description="x" * 200).to_ics(now=NOW)
    assert all(len(line.encode()) <= 75 for line in ics.split("\r\n"))
    assert "x" * 200 in _unfold(ics)


def test_end_of_day_runs_to_next_midnight():
    ics = _invite(start_time="22:00", end_time="24:00").to_ics(now=NOW)
    assert "DTEND:20240702T040000Z" in ics


def test_google_url():
    url = _invite().google_url()
    assert url.startswith("https://calendar.google.com/calendar/render?")
    query = _query(url)
    assert query["action"] == "TEMPLATE"
    assert query["text"] == "Team dinner"
    assert query["dates"] == "20240701T110000/20240701T120000"
    assert query["ctz"] == "America/New_York"
    assert "Available participants: Ada, Grace" in query["details"]


def test_yahoo_and_outlook_urls():
    yahoo = _query(_invite().url("yahoo"))
    assert yahoo["st"] == "20240701T150000Z"
    assert yahoo["et"] == "20240701T160000Z"
    outlook = _query(_invite().url("outlook"))
    assert outlook["startdt"] == "2024-07-01T15:00:00Z"
    assert outlook["enddt"] == "2024-07-01T16:00:00Z"
    assert outlook["subject"] == "Team dinner"


def test_unknown_url_format():
    with pytest.raises(ValueError):
        _invite().url("ics")


def test_from_best_slot():
    best = BestSlot(
        date=date(2024, 7, 1),
        windows=(parse_range("09:00-10:00"), parse_range("15:00-16:30")),
        attendees=("Ada", "Grace"),
    )
    invite = CalendarInvite.from_best_slot(best, title="Sync", timezone="America/New_York", window=1)
    assert (invite.start_time, invite.end_time) == ("15:00", "16:30")
    assert invite.attendees == ["Ada", "Grace"]


def test_from_best_slot_without_window():
    best = BestSlot(date=date(2024, 7, 1), windows=(), attendees=("Ada", "Grace"))
    with pytest.raises(ValueError):
        CalendarInvite.from_best_slot(best, title="Sync", timezone="America/New_York")
