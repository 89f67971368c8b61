"""Calendar invites for a resolved meeting slot.

Produces an iCalendar (.ics) document and "add to calendar" links for
Google, Yahoo and Outlook. Times arrive as canonical-zone wall clock
(``"HH:MM"``, end may be ``"24:00"``) and are converted to UTC where the
target format wants absolute instants.
"""

import secrets
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta
from urllib.parse import urlencode

from syncup.scheduling.best_slot import BestSlot
from syncup.scheduling.intervals import TimeRange, to_minutes, to_time_str
from syncup.scheduling.timezones import get_zone

GOOGLE_URL = "https://calendar.google.com/calendar/render"
YAHOO_URL = "https://calendar.yahoo.com/"
OUTLOOK_URL = "https://outlook.live.com/calendar/0/deeplink/compose"

EXPORT_FORMATS = ("ics", "google", "yahoo", "outlook")


def escape_ics_text(text: str | None) -> str:
    if not text:
        return ""
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def _fold(line: str) -> str:
    """Fold content lines longer than 75 octets (RFC 5545 3.1)."""
    encoded = line.encode("utf-8")
    if len(encoded) <= 75:
        return line
    parts = []
    current = ""
    limit = 75
    for ch in line:
        if len((current + ch).encode("utf-8")) > limit:
            parts.append(current)
            current = ch
            limit = 74
        else:
            current += ch
    parts.append(current)
    return "\r\n ".join(parts)


@dataclass
class CalendarInvite:
    title: str
    date: date
    start_time: str
    end_time: str
    timezone: str
    description: str | None = None
    attendees: list[str] = field(default_factory=list)
    app_name: str = "SyncUp"
    uid_domain: str = "syncup.app"

    @classmethod
    def from_best_slot(
        cls,
        slot: BestSlot,
        title: str,
        timezone: str,
        description: str | None = None,
        window: int = 0,
        **kwargs,
    ) -> "CalendarInvite":
        if not slot.windows:
            raise ValueError(f"no common window on {slot.date.isoformat()}")
        chosen: TimeRange = slot.windows[window]
        return cls(
            title=title,
            date=slot.date,
            start_time=to_time_str(chosen.start),
            end_time=to_time_str(chosen.end),
            timezone=timezone,
            description=description,
            attendees=list(slot.attendees),
            **kwargs,
        )

    def _local(self, time_str: str) -> datetime:
        # "24:00" is midnight of the next day.
        return datetime.combine(self.date, time()) + timedelta(minutes=to_minutes(time_str))

    @property
    def starts_at(self) -> datetime:
        return self._local(self.start_time).replace(tzinfo=get_zone(self.timezone))

    @property
    def ends_at(self) -> datetime:
        return self._local(self.end_time).replace(tzinfo=get_zone(self.timezone))

    def full_description(self) -> str:
        parts = []
        if self.description:
            parts.append(self.description)
        if self.attendees:
            if parts:
                parts.append("")
            parts.append(f"Available participants: {', '.join(self.attendees)}")
        if parts:
            parts.append("")
        parts.append(f"Created with {self.app_name}")
        return "\n".join(parts)

    def to_ics(self, now: datetime | None = None) -> str:
        now = now or datetime.now(UTC)
        stamp = now.astimezone(UTC).strftime("%Y%m%dT%H%M%SZ")
        uid = f"{int(now.timestamp())}-{secrets.token_hex(5)}@{self.uid_domain}"
        lines = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            f"PRODID:-//{self.app_name}//Calendar Event//EN",
            "CALSCALE:GREGORIAN",
            "METHOD:PUBLISH",
            "BEGIN:VEVENT",
            f"UID:{uid}",
            f"DTSTAMP:{stamp}",
            f"DTSTART:{_utc_stamp(self.starts_at)}",
            f"DTEND:{_utc_stamp(self.ends_at)}",
            f"SUMMARY:{escape_ics_text(self.title)}",
            f"DESCRIPTION:{escape_ics_text(self.full_description())}",
            "STATUS:TENTATIVE",
            "SEQUENCE:0",
            "END:VEVENT",
            "END:VCALENDAR",
        ]
        return "\r\n".join(_fold(line) for line in lines) + "\r\n"

    def google_url(self) -> str:
        start = self._local(self.start_time).strftime("%Y%m%dT%H%M%S")
        end = self._local(self.end_time).strftime("%Y%m%dT%H%M%S")
        params = {
            "action": "TEMPLATE",
            "text": self.title,
            "details": self.full_description(),
            "dates": f"{start}/{end}",
            "ctz": self.timezone,
        }
        return f"{GOOGLE_URL}?{urlencode(params)}"

    def yahoo_url(self) -> str:
        params = {
            "v": "60",
            "title": self.title,
            "desc": self.full_description(),
            "st": _utc_stamp(self.starts_at),
            "et": _utc_stamp(self.ends_at),
            "in_loc": "",
        }
        return f"{YAHOO_URL}?{urlencode(params)}"

    def outlook_url(self) -> str:
        params = {
            "path": "/calendar/action/compose",
            "rru": "addevent",
            "subject": self.title,
            "body": self.full_description(),
            "startdt": self.starts_at.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "enddt": self.ends_at.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "allday": "false",
        }
        return f"{OUTLOOK_URL}?{urlencode(params)}"

    def url(self, fmt: str) -> str:
        builders = {
            "google": self.google_url,
            "yahoo": self.yahoo_url,
            "outlook": self.outlook_url,
        }
        if fmt not in builders:
            raise ValueError(f"unsupported calendar link format: {fmt}")
        return builders[fmt]()


def _utc_stamp(dt: datetime) -> str:
    return dt.astimezone(UTC).strftime("%Y%m%dT%H%M%SZ")
