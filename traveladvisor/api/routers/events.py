"""
Events API Router

Public listing of curated events.
"""

import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Query

from traveladvisor.core.repository import MongoDBRepo, get_repo
from traveladvisor.core.schemas import Event

router = APIRouter(prefix="/events", tags=["events"])

# How many stored events a listing is selected from
SCAN_LIMIT = 100


def _to_iso(epoch_ms: Any) -> str | None:
    if not isinstance(epoch_ms, (int, float)):
        return None
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).isoformat()


def event_out(doc: dict[str, Any]) -> dict[str, Any]:
    """Stored event document to its camelCase response shape."""
    return Event.model_validate({**doc, "event_date": _to_iso(doc.get("event_date"))}).model_dump(
        by_alias=True
    )


def select_events(
    events: list[dict[str, Any]],
    city: str | None = None,
    category: str | None = None,
    limit: int = 20,
    recent: bool = False,
    now_ms: int | None = None,
) -> list[dict[str, Any]]:
    """
    Active events for a listing.

    recent=True: newest created first, filtered by category only.
    Otherwise: upcoming events (event date not in the past), filtered by city
    (case-insensitive) and category, soonest first.
    """
    selected = [e for e in events if e.get("is_active") is True]
    if category:
        selected = [e for e in selected if e.get("category") == category]

    if recent:
        selected.sort(key=lambda e: e.get("created_at") or 0, reverse=True)
        return selected[:limit]

    if city:
        city_key = city.strip().lower()
        selected = [e for e in selected if (e.get("city") or "").lower() == city_key]

    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    selected = [e for e in selected if (e.get("event_date") or 0) >= now_ms]
    selected.sort(key=lambda e: e["event_date"])
    return selected[:limit]


@router.get("")
def list_events(
    city: str | None = Query(None, max_length=120),
    category: str | None = Query(None, max_length=60),
    limit: int = Query(20, ge=1, le=100),
    recent: bool = False,
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, Any]:
    stored = repo.list_events(limit=SCAN_LIMIT, recent=recent)
    events = select_events(stored, city, category, limit, recent)
    return {"events": [event_out(e) for e in events]}
