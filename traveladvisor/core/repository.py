from __future__ import annotations

import logging
import time
import uuid
from datetime import date, datetime, time as dt_time, timezone
from functools import lru_cache
from typing import Any

from fastapi import HTTPException, status
from pymongo import DESCENDING, MongoClient
from pymongo.errors import PyMongoError

from traveladvisor.core.schemas import (
    EventCreate,
    EventUpdate,
    PartnerHotelCreate,
    PartnerHotelUpdate,
)
from traveladvisor.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)

TRIP_TYPES = ("plan", "suggest", "custom")

# Fields of a hotel body that live under "location" in the stored document
_HOTEL_LOCATION_FIELDS = ("latitude", "longitude")


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _clean(doc: dict | None) -> dict | None:
    if doc:
        doc.pop("_id", None)  # Remove MongoDB ObjectId
    return doc


def event_date_ms(value: date | datetime) -> int:
    """Epoch milliseconds for an event date (midnight UTC for a plain date)."""
    if not isinstance(value, datetime):
        value = datetime.combine(value, dt_time.min, tzinfo=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def hotel_document(body: PartnerHotelCreate | PartnerHotelUpdate, partial: bool = False) -> dict:
    """
    Map a hotel request body to its stored shape.

    Coordinates are nested under "location" and city_lower is recomputed
    whenever city is written. With partial=True only fields the caller sent
    are included (as dotted paths for the nested coordinates).
    """
    data = body.model_dump(exclude_unset=partial)
    doc: dict[str, Any] = {}
    for key, value in data.items():
        if key in _HOTEL_LOCATION_FIELDS:
            if partial:
                doc[f"location.{key}"] = value
            else:
                doc.setdefault("location", {})[key] = value
        else:
            doc[key] = value
    if doc.get("city"):
        doc["city_lower"] = doc["city"].strip().lower()
    return doc


def event_document(body: EventCreate | EventUpdate, partial: bool = False) -> dict:
    doc = body.model_dump(exclude_unset=partial)
    if doc.get("event_date") is not None:
        doc["event_date"] = event_date_ms(doc["event_date"])
    return doc


class MongoDBRepo:
    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()

        # Determine which MongoDB URI to use based on environment
        if settings.is_development:
            mongodb_uri = settings.mongodb_uri_test or settings.mongodb_uri
            database_name = settings.database_name_test
            if not mongodb_uri:
                raise ValueError(
                    "MONGODB_URI_TEST or MONGODB_URI environment variable is required for development"
                )
            logger.info(f"[Mongo] Using TEST database: {database_name}")
        else:
            mongodb_uri = settings.mongodb_uri
            database_name = settings.database_name
            if not mongodb_uri:
                raise ValueError("MONGODB_URI environment variable is required")
            logger.info(f"[Mongo] Using database: {database_name}")

        self.client = MongoClient(
            mongodb_uri,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=10000,
            socketTimeoutMS=20000,
            retryWrites=True,
            retryReads=True,
        )
        self.db = self.client[database_name]

        # Collections
        self.trips_collection = self.db.trips
        self.events_collection = self.db.events
        self.hotels_collection = self.db.partner_hotels

        try:
            self.client.admin.command("ping")
            self.trips_collection.create_index([("user_id", 1), ("created_at", DESCENDING)])
            self.hotels_collection.create_index("city_lower")
            self.events_collection.create_index("event_date")
            self.events_collection.create_index("created_at")
            logger.info("[Mongo] Connection successful, indexes ensured")
        except PyMongoError as e:
            logger.warning(f"[Mongo] Connection check failed, continuing: {str(e)[:200]}")

    # Trips
    def add_trip(
        self,
        user_id: str,
        trip_type: str,
        input_data: dict[str, Any],
        result: dict[str, Any] | None,
    ) -> str:
        """
        Append a TripRecord. Records are never updated after this.

        Returns:
            The new record id
        """
        if trip_type not in TRIP_TYPES:
            raise ValueError(f"Unknown trip type '{trip_type}'")
        trip_id = _new_id("trp")
        self.trips_collection.insert_one(
            {
                "id": trip_id,
                "user_id": user_id,
                "type": trip_type,
                "input": input_data,
                "result": result,
                "created_at": _now_ms(),
            }
        )
        return trip_id

    def list_user_trips(self, user_id: str) -> list[dict]:
        """Caller's TripRecords, newest first."""
        cursor = self.trips_collection.find({"user_id": user_id}).sort("created_at", DESCENDING)
        return [_clean(doc) for doc in cursor]

    # Partner hotels
    def list_hotels(self) -> list[dict]:
        return [_clean(doc) for doc in self.hotels_collection.find().sort("name", 1)]

    def create_hotel(self, body: PartnerHotelCreate, created_by: str) -> str:
        hotel_id = _new_id("htl")
        doc = hotel_document(body)
        doc.setdefault("location", {"latitude": None, "longitude": None})
        doc.update({"id": hotel_id, "created_at": _now_ms(), "created_by": created_by})
        self.hotels_collection.insert_one(doc)
        return hotel_id

    def update_hotel(self, hotel_id: str, body: PartnerHotelUpdate, updated_by: str) -> bool:
        """Apply the fields the caller sent. Returns False when the hotel does not exist."""
        updates = hotel_document(body, partial=True)
        updates.update({"updated_at": _now_ms(), "updated_by": updated_by})
        result = self.hotels_collection.update_one({"id": hotel_id}, {"$set": updates})
        return result.matched_count > 0

    def delete_hotel(self, hotel_id: str) -> bool:
        result = self.hotels_collection.delete_one({"id": hotel_id})
        return result.deleted_count > 0

    # Events
    def list_events(self, limit: int | None = None, recent: bool = False) -> list[dict]:
        """All events, latest event date first (or newest created first when recent)."""
        sort_field = "created_at" if recent else "event_date"
        cursor = self.events_collection.find().sort(sort_field, DESCENDING)
        if limit:
            cursor = cursor.limit(limit)
        return [_clean(doc) for doc in cursor]

    def create_event(self, body: EventCreate, created_by: str) -> str:
        event_id = _new_id("evt")
        doc = event_document(body)
        doc.update({"id": event_id, "created_at": _now_ms(), "created_by": created_by})
        self.events_collection.insert_one(doc)
        return event_id

    def update_event(self, event_id: str, body: EventUpdate, updated_by: str) -> bool:
        updates = event_document(body, partial=True)
        updates.update({"updated_at": _now_ms(), "updated_by": updated_by})
        result = self.events_collection.update_one({"id": event_id}, {"$set": updates})
        return result.matched_count > 0

    def delete_event(self, event_id: str) -> bool:
        result = self.events_collection.delete_one({"id": event_id})
        return result.deleted_count > 0


@lru_cache(maxsize=1)
def shared_repo() -> MongoDBRepo:
    """Shared repository, connected on first use."""
    return MongoDBRepo()


def get_repo() -> MongoDBRepo:
    """FastAPI dependency; HTTP 500 when the database is not configured."""
    try:
        return shared_repo()
    except ValueError as e:
        logger.error(f"[Mongo] {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Database not configured", "details": str(e)},
        )


def get_optional_repo() -> MongoDBRepo | None:
    """Repository for fire-and-forget writes; None when the database is not configured."""
    try:
        return shared_repo()
    except ValueError as e:
        logger.error(f"[Mongo] {e}")
        return None
