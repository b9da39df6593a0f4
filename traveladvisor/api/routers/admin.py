"""
Admin CRUD for curated events and partner hotels.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from traveladvisor.api.routers.events import event_out
from traveladvisor.core.clerk_security import require_admin
from traveladvisor.core.repository import MongoDBRepo, get_repo
from traveladvisor.core.schemas import (
    EventCreate,
    EventUpdate,
    Identity,
    PartnerHotel,
    PartnerHotelCreate,
    PartnerHotelUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def _actor(identity: Identity) -> str:
    return identity.email or identity.user_id


# Events
@router.get("/events")
def list_events(
    _: Identity = Depends(require_admin),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, Any]:
    """All events, latest event date first."""
    return {"events": [event_out(e) for e in repo.list_events()]}


@router.post("/events", status_code=status.HTTP_201_CREATED)
def create_event(
    body: EventCreate,
    identity: Identity = Depends(require_admin),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, str]:
    event_id = repo.create_event(body, created_by=identity.user_id)
    logger.info(f"[Admin] {_actor(identity)} created event {event_id}")
    return {"id": event_id}


@router.patch("/events/{event_id}")
def update_event(
    event_id: str,
    body: EventUpdate,
    identity: Identity = Depends(require_admin),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, bool]:
    """Update only the fields provided."""
    if not repo.update_event(event_id, body, updated_by=_actor(identity)):
        raise HTTPException(status_code=404, detail="Event not found")
    logger.info(f"[Admin] {_actor(identity)} updated event {event_id}")
    return {"success": True}


@router.delete("/events/{event_id}")
def delete_event(
    event_id: str,
    identity: Identity = Depends(require_admin),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, bool]:
    if not repo.delete_event(event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    logger.info(f"[Admin] {_actor(identity)} deleted event {event_id}")
    return {"success": True}


# Partner hotels
@router.get("/hotels")
def list_hotels(
    _: Identity = Depends(require_admin),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, Any]:
    return {
        "hotels": [
            PartnerHotel.model_validate(h).model_dump(by_alias=True) for h in repo.list_hotels()
        ]
    }


@router.post("/hotels", status_code=status.HTTP_201_CREATED)
def create_hotel(
    body: PartnerHotelCreate,
    identity: Identity = Depends(require_admin),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, str]:
    hotel_id = repo.create_hotel(body, created_by=_actor(identity))
    logger.info(f"[Admin] {_actor(identity)} created hotel {hotel_id}")
    return {"id": hotel_id}


@router.patch("/hotels/{hotel_id}")
def update_hotel(
    hotel_id: str,
    body: PartnerHotelUpdate,
    identity: Identity = Depends(require_admin),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, bool]:
    if not repo.update_hotel(hotel_id, body, updated_by=_actor(identity)):
        raise HTTPException(status_code=404, detail="Hotel not found")
    logger.info(f"[Admin] {_actor(identity)} updated hotel {hotel_id}")
    return {"success": True}


@router.delete("/hotels/{hotel_id}")
def delete_hotel(
    hotel_id: str,
    identity: Identity = Depends(require_admin),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, bool]:
    if not repo.delete_hotel(hotel_id):
        raise HTTPException(status_code=404, detail="Hotel not found")
    logger.info(f"[Admin] {_actor(identity)} deleted hotel {hotel_id}")
    return {"success": True}
