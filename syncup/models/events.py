from pydantic import BaseModel


class Event(BaseModel):
    id: str
    name: str
    description: str | None = None
    dates: list[str]
    timezone: str
    created_at: str


class Slot(BaseModel):
    date: str
    ranges: list[str]


class Availability(BaseModel):
    participant_name: str
    color: str
    slots: list[Slot]
    created_at: str | None = None
    updated_at: str | None = None


class BestSlot(BaseModel):
    date: str
    windows: list[str]
    attendees: list[str]
    has_common_window: bool


class Summary(BaseModel):
    max_count: int
    participant_count: int
    has_dates: bool
    slots: list[BestSlot]


class EventResponse(BaseModel):
    event: Event
    availabilities: list[Availability]
    summary: Summary


class AvailabilityResponse(BaseModel):
    event_id: str
    participant_name: str
    slots: list[Slot]
    updated_at: str


class CalendarLinkResponse(BaseModel):
    format: str
    date: str
    start_time: str
    end_time: str
    url: str
