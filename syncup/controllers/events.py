import datetime as dt
import logging
import re
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional

import psycopg
from fastapi import APIRouter, Query, Response
from pydantic import BaseModel, field_validator, model_validator

from syncup import db
from syncup.calendar_export import EXPORT_FORMATS, CalendarInvite
from syncup.config import get_settings
from syncup.errors import BadRequestError, ConflictError, DatabaseError, NotFoundError
from syncup.models.events import (
    Availability,
    AvailabilityResponse,
    CalendarLinkResponse,
    Event,
    EventResponse,
    Slot,
    Summary,
)
from syncup.scheduling import (
    FULL_DAY,
    BestSlotSummary,
    ParticipantAvailability,
    TimeRange,
    apply_date_edit,
    get_zone,
    normalize_submission,
    parse_range,
    parse_record,
    participant_color,
    summarize,
)

logger = logging.getLogger("syncup.events")
router = APIRouter()

MAX_EVENT_DAYS = 366


def _validate_ranges(v: List[str]) -> List[str]:
    for r in v:
        parse_range(r)
    return v


class CreateEventRequest(BaseModel):
    name: str
    description: Optional[str] = None
    dates: Optional[List[dt.date]] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v or len(v) > 200:
            raise ValueError("name must be 1-200 characters")
        return v

    @model_validator(mode="after")
    def expand_date_range(self) -> "CreateEventRequest":
        if (self.start_date is None) != (self.end_date is None):
            raise ValueError("start_date and end_date must be given together")
        if self.start_date is not None and self.end_date is not None:
            if self.start_date > self.end_date:
                raise ValueError("start_date must not be after end_date")
            days = (self.end_date - self.start_date).days + 1
            if days > MAX_EVENT_DAYS:
                raise ValueError(f"date range must be at most {MAX_EVENT_DAYS} days")
            self.dates = [self.start_date + dt.timedelta(days=i) for i in range(days)]
        return self

    def candidate_dates(self) -> List[str]:
        return sorted({d.isoformat() for d in self.dates or []})


class SlotRequest(BaseModel):
    date: dt.date
    ranges: List[str] = []

    @field_validator("ranges")
    @classmethod
    def validate_ranges(cls, v: List[str]) -> List[str]:
        return _validate_ranges(v)

    def time_ranges(self) -> List[TimeRange]:
        # No ranges: available, no specific time.
        return [parse_range(r) for r in self.ranges] or [FULL_DAY]


class AvailabilityRequest(BaseModel):
    participant_name: str
    timezone: Optional[str] = None
    slots: List[SlotRequest]

    @field_validator("participant_name")
    @classmethod
    def validate_participant_name(cls, v: str) -> str:
        v = v.strip()
        if not v or len(v) > 100:
            raise ValueError("participant_name must be 1-100 characters")
        return v

    @field_validator("slots", mode="before")
    @classmethod
    def accept_bare_dates(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [{"date": s} if isinstance(s, str) else s for s in v]
        return v

    @field_validator("slots")
    @classmethod
    def validate_slots(cls, v: List[SlotRequest]) -> List[SlotRequest]:
        if not v:
            raise ValueError("slots must not be empty")
        return v


class DateEditRequest(BaseModel):
    timezone: Optional[str] = None
    ranges: List[str] = []

    @field_validator("ranges")
    @classmethod
    def validate_ranges(cls, v: List[str]) -> List[str]:
        return _validate_ranges(v)


async def _load_event(event_id: str) -> Dict[str, Any]:
    event = await db.get_event(event_id)
    if not event:
        logger.warning("Event not found: %s", event_id)
        raise NotFoundError(detail="Event not found", resource_type="event", resource_id=event_id)
    return event


def _check_candidate_dates(event: Dict[str, Any], days: Iterable[dt.date]) -> None:
    allowed = set(event.get("dates") or [])
    if not allowed:
        return
    rejected = sorted(d.isoformat() for d in days if d.isoformat() not in allowed)
    if rejected:
        raise BadRequestError(detail=f"Dates not offered by this event: {', '.join(rejected)}", dates=rejected)


def _availability_out(record: Dict[str, Any]) -> Availability:
    participant = parse_record(record)
    return Availability(
        participant_name=participant.name,
        color=participant_color(participant.name),
        slots=[Slot(**s) for s in participant.to_record()["slots"]],
        created_at=record.get("created_at"),
        updated_at=record.get("updated_at"),
    )


async def _store(event_id: str, participant: ParticipantAvailability) -> AvailabilityResponse:
    slots = participant.to_record()["slots"]
    try:
        result = await db.upsert_availability(event_id, participant.name, slots)
    except psycopg.Error as e:
        logger.exception("Failed to upsert availability")
        raise DatabaseError(detail=str(e)) from e
    logger.info("Upserted availability for %s on event %s (%d dates)", participant.name, event_id, len(slots))
    return AvailabilityResponse(
        event_id=event_id,
        participant_name=participant.name,
        slots=[Slot(**s) for s in result["slots"]],
        updated_at=result["updated_at"],
    )


async def _summary(event_id: str) -> tuple[List[Dict[str, Any]], BestSlotSummary]:
    records = await db.list_availabilities(event_id)
    return records, summarize(records)


@router.post("/events", status_code=201)
async def create_event(req: CreateEventRequest) -> Event:
    dates = req.candidate_dates()
    timezone = get_settings().scheduling.canonical_timezone
    logger.info("POST /events name=%s dates=%d timezone=%s", req.name, len(dates), timezone)
    try:
        event = await db.create_event(
            name=req.name,
            dates=dates,
            timezone=timezone,
            description=req.description,
        )
    except psycopg.Error as e:
        logger.exception("Failed to create event")
        raise DatabaseError(detail=str(e)) from e
    logger.info("Created event id=%s", event["id"])
    return Event(**event)


@router.get("/events/{event_id}")
async def get_event(event_id: str) -> EventResponse:
    logger.info("GET /events/%s", event_id)
    event = await _load_event(event_id)
    records, summary = await _summary(event_id)
    logger.info("Returning event %s with %d availabilities", event_id, len(records))
    return EventResponse(
        event=Event(**event),
        availabilities=[_availability_out(r) for r in records],
        summary=Summary(**summary.to_dict()),
    )


@router.get("/events/{event_id}/summary")
async def get_summary(event_id: str) -> Summary:
    await _load_event(event_id)
    _, summary = await _summary(event_id)
    return Summary(**summary.to_dict())


@router.post("/events/{event_id}/availability")
async def submit_availability(event_id: str, req: AvailabilityRequest) -> AvailabilityResponse:
    logger.info(
        "POST /events/%s/availability participant=%s slots=%d timezone=%s",
        event_id, req.participant_name, len(req.slots), req.timezone,
    )
    event = await _load_event(event_id)
    canonical = get_zone(event["timezone"])
    source = get_zone(req.timezone) if req.timezone else canonical

    local_slots: Dict[dt.date, List[TimeRange]] = defaultdict(list)
    for slot in req.slots:
        local_slots[slot.date].extend(slot.time_ranges())
    _check_candidate_dates(event, local_slots)

    participant = normalize_submission(req.participant_name, local_slots, source, canonical)
    existing = await db.get_availability(event_id, participant.name)
    if existing:
        logger.info("Replacing earlier submission from %s on event %s", participant.name, event_id)
    return await _store(event_id, participant)


@router.put("/events/{event_id}/availability/{participant_name}/dates/{day}")
async def edit_availability_date(
    event_id: str,
    participant_name: str,
    day: dt.date,
    req: DateEditRequest,
) -> AvailabilityResponse:
    logger.info("PUT /events/%s/availability/%s/dates/%s ranges=%d", event_id, participant_name, day, len(req.ranges))
    event = await _load_event(event_id)
    canonical = get_zone(event["timezone"])
    source = get_zone(req.timezone) if req.timezone else canonical
    if req.ranges:
        _check_candidate_dates(event, [day])

    existing = await db.get_availability(event_id, participant_name)
    if not existing:
        raise NotFoundError(
            detail="Participant has not submitted availability",
            resource_type="participant",
            resource_id=participant_name,
        )
    participant = parse_record(existing)
    apply_date_edit(participant, day, [parse_range(r) for r in req.ranges], source, canonical)
    return await _store(event_id, participant)


FILENAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


@router.get("/events/{event_id}/export", response_model=None)
async def export_event(
    event_id: str,
    fmt: str = Query("ics", alias="format"),
    day: Optional[dt.date] = Query(None, alias="date"),
    window: int = Query(0, ge=0),
) -> Response | CalendarLinkResponse:
    if fmt not in EXPORT_FORMATS:
        raise BadRequestError(detail=f"Unsupported format: {fmt}", formats=list(EXPORT_FORMATS))
    event = await _load_event(event_id)
    _, summary = await _summary(event_id)
    if not summary.has_dates:
        raise NotFoundError(detail="No applicable dates yet", resource_type="event", resource_id=event_id)

    slot = summary.find(day) if day else summary.slots[0]
    if slot is None:
        raise NotFoundError(detail=f"{day} is not a best date for this event")
    if not slot.has_common_window:
        raise ConflictError(detail=f"No common time window on {slot.date.isoformat()}")
    if window >= len(slot.windows):
        raise BadRequestError(detail=f"window must be below {len(slot.windows)}")

    settings = get_settings().scheduling
    invite = CalendarInvite.from_best_slot(
        slot,
        title=event["name"],
        timezone=event["timezone"],
        description=event.get("description"),
        window=window,
        app_name=settings.app_name,
        uid_domain=settings.uid_domain,
    )
    logger.info("Exporting event %s as %s for %s %s-%s", event_id, fmt, invite.date, invite.start_time, invite.end_time)
    if fmt == "ics":
        filename = FILENAME_RE.sub("_", event["name"]).strip("_") or "event"
        return Response(
            content=invite.to_ics(),
            media_type="text/calendar",
            headers={"Content-Disposition": f'attachment; filename="{filename}.ics"'},
        )
    return CalendarLinkResponse(
        format=fmt,
        date=invite.date.isoformat(),
        start_time=invite.start_time,
        end_time=invite.end_time,
        url=invite.url(fmt),
    )
