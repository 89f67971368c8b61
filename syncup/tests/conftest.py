import os
import sys
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from syncup.config import clear_settings_cache


class FakeDB:
    """In-memory stand-in for the syncup.db storage functions."""

    def __init__(self):
        self.events = {}
        self.availabilities = {}
        self._next_id = 0

    async def create_event(self, name, dates, timezone, description=None):
        self._next_id += 1
        event = {
            "id": f"evt{self._next_id}",
            "name": name,
            "description": description,
            "dates": dates,
            "timezone": timezone,
            "created_at": datetime.now(UTC).isoformat(),
        }
        self.events[event["id"]] = event
        return event

    async def get_event(self, event_id):
        return self.events.get(event_id)

    async def list_availabilities(self, event_id):
        return [dict(v) for (eid, _), v in self.availabilities.items() if eid == event_id]

    async def get_availability(self, event_id, participant_name):
        return self.availabilities.get((event_id, participant_name))

    async def upsert_availability(self, event_id, participant_name, slots):
        now = datetime.now(UTC).isoformat()
        existing = self.availabilities.get((event_id, participant_name))
        self.availabilities[(event_id, participant_name)] = {
            "participant_name": participant_name,
            "slots": slots,
            "created_at": existing["created_at"] if existing else now,
            "updated_at": now,
        }
        return {
            "event_id": event_id,
            "participant_name": participant_name,
            "slots": slots,
            "updated_at": now,
        }


@pytest.fixture
def fake_db(monkeypatch):
    import syncup.controllers.events as events_controller

    fake = FakeDB()
    monkeypatch.setattr(events_controller, "db", fake)
    return fake


@pytest.fixture
def client(monkeypatch, fake_db):
    monkeypatch.setenv("ENABLE_DB", "0")
    clear_settings_cache()

    import syncup.main as main

    with TestClient(main.app) as c:
        yield c
    clear_settings_cache()
