import json
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from traveladvisor.api.routers.places import get_places_cache
from traveladvisor.core.clerk_security import get_current_identity
from traveladvisor.core.llm_provider import (
    TextGenerator,
    get_optional_text_generator,
    get_text_generator,
)
from traveladvisor.core.repository import (
    event_document,
    get_optional_repo,
    get_repo,
    hotel_document,
)
from traveladvisor.core.schemas import Identity
from traveladvisor.core.settings import Settings, get_settings
from traveladvisor.core.ttl_cache import TTLCache
from traveladvisor.main import create_app

USER = Identity(user_id="user_123", email="traveller@example.com")
ADMIN = Identity(user_id="user_admin", email="admin@example.com")


class FakeGenerator(TextGenerator):
    """Returns canned responses in order (the last one repeats) and records prompts."""

    name = "fake"

    def __init__(self, *responses: str, error: Exception | None = None) -> None:
        self.responses = list(responses) or ["{}"]
        self.error = error
        self.prompts: list[str] = []

    @classmethod
    def from_settings(cls, settings):
        return None

    def generate(self, prompt: str, temperature: float = 0.7) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


class FakeRepo:
    """In-memory stand-in for MongoDBRepo with the same method surface."""

    def __init__(self) -> None:
        self.trips: list[dict[str, Any]] = []
        self.hotels: list[dict[str, Any]] = []
        self.events: list[dict[str, Any]] = []
        self.fail_writes = False
        self._seq = 0

    def _next_id(self, prefix: str) -> str:
        self._seq += 1
        return f"{prefix}_{self._seq:012d}"

    def add_trip(self, user_id, trip_type, input_data, result):
        if self.fail_writes:
            raise RuntimeError("database unavailable")
        trip_id = self._next_id("trp")
        self.trips.append(
            {
                "id": trip_id,
                "user_id": user_id,
                "type": trip_type,
                "input": input_data,
                "result": result,
                "created_at": self._seq,
            }
        )
        return trip_id

    def list_user_trips(self, user_id):
        trips = [t for t in self.trips if t["user_id"] == user_id]
        return sorted(trips, key=lambda t: t["created_at"], reverse=True)

    def list_hotels(self):
        return sorted((dict(h) for h in self.hotels), key=lambda h: h["name"])

    def create_hotel(self, body, created_by):
        doc = hotel_document(body)
        doc.setdefault("location", {"latitude": None, "longitude": None})
        doc.update({"id": self._next_id("htl"), "created_by": created_by})
        self.hotels.append(doc)
        return doc["id"]

    def update_hotel(self, hotel_id, body, updated_by):
        for hotel in self.hotels:
            if hotel["id"] == hotel_id:
                for key, value in hotel_document(body, partial=True).items():
                    if key.startswith("location."):
                        hotel.setdefault("location", {})[key.split(".", 1)[1]] = value
                    else:
                        hotel[key] = value
                hotel["updated_by"] = updated_by
                return True
        return False

    def delete_hotel(self, hotel_id):
        before = len(self.hotels)
        self.hotels = [h for h in self.hotels if h["id"] != hotel_id]
        return len(self.hotels) < before

    def list_events(self, limit=None, recent=False):
        sort_field = "created_at" if recent else "event_date"
        events = sorted((dict(e) for e in self.events), key=lambda e: e[sort_field], reverse=True)
        return events[:limit] if limit else events

    def create_event(self, body, created_by):
        doc = event_document(body)
        doc.update({"id": self._next_id("evt"), "created_at": self._seq, "created_by": created_by})
        self.events.append(doc)
        return doc["id"]

    def update_event(self, event_id, body, updated_by):
        for event in self.events:
            if event["id"] == event_id:
                event.update(event_document(body, partial=True))
                event["updated_by"] = updated_by
                return True
        return False

    def delete_event(self, event_id):
        before = len(self.events)
        self.events = [e for e in self.events if e["id"] != event_id]
        return len(self.events) < before


def plan_json() -> str:
    plan = {
        "tripTitle": "Mysuru Getaway",
        "roadmap": [
            {
                "day": 1,
                "location": "Mysuru",
                "activities": [{"time": "09:00", "title": "Mysore Palace"}],
            }
        ],
        "accommodations": [{"name": "Royal Orchid"}],
        "attractions": [{"name": "Chamundi Hills"}],
        "restaurants": [],
    }
    return json.dumps(plan)


@pytest.fixture
def fake_repo() -> FakeRepo:
    return FakeRepo()


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator(plan_json())


@pytest.fixture
def places_cache() -> TTLCache:
    return TTLCache(ttl_seconds=300, max_size=16)


@pytest.fixture
def settings() -> Settings:
    return Settings(admin_user_ids=[ADMIN.user_id], admin_emails=[])


@pytest.fixture
def app(fake_repo, generator, places_cache, settings):
    application = create_app()
    application.dependency_overrides[get_repo] = lambda: fake_repo
    application.dependency_overrides[get_optional_repo] = lambda: fake_repo
    application.dependency_overrides[get_text_generator] = lambda: generator
    application.dependency_overrides[get_optional_text_generator] = lambda: generator
    application.dependency_overrides[get_places_cache] = lambda: places_cache
    application.dependency_overrides[get_settings] = lambda: settings
    application.dependency_overrides[get_current_identity] = lambda: USER
    return application


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def as_user(app):
    """Switch the caller identity; None means an unauthenticated request."""

    def switch(identity: Identity | None) -> None:
        if identity is None:
            app.dependency_overrides.pop(get_current_identity, None)
        else:
            app.dependency_overrides[get_current_identity] = lambda: identity

    return switch


@pytest.fixture
def use_generator(app):
    """Install a FakeGenerator with the given canned responses."""

    def install(*responses: str, error: Exception | None = None) -> FakeGenerator:
        fake = FakeGenerator(*responses, error=error)
        app.dependency_overrides[get_text_generator] = lambda: fake
        app.dependency_overrides[get_optional_text_generator] = lambda: fake
        return fake

    return install


@pytest.fixture
def admin_identity() -> Identity:
    return ADMIN


@pytest.fixture
def user_identity() -> Identity:
    return USER
