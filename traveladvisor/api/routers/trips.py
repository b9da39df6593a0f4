from typing import Any

from fastapi import APIRouter, Body, Depends, status

from traveladvisor.core.clerk_security import get_current_identity
from traveladvisor.core.repository import MongoDBRepo, get_repo
from traveladvisor.core.schemas import Identity

router = APIRouter(prefix="/trips", tags=["trips"])


def trip_out(doc: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": doc.get("id"),
        "userId": doc.get("user_id"),
        "type": doc.get("type"),
        "input": doc.get("input"),
        "result": doc.get("result"),
        "createdAt": doc.get("created_at"),
    }


@router.get("")
def list_trips(
    identity: Identity = Depends(get_current_identity),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, Any]:
    """The caller's saved plans, suggestions and custom trips, newest first."""
    return {"trips": [trip_out(t) for t in repo.list_user_trips(identity.user_id)]}


@router.post("", status_code=status.HTTP_201_CREATED)
def save_trip(
    body: dict[str, Any] = Body(...),
    identity: Identity = Depends(get_current_identity),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, str]:
    """Save a client-assembled trip as a "custom" record; the body is stored as-is."""
    trip_id = repo.add_trip(identity.user_id, "custom", body, body.get("result"))
    return {"id": trip_id}
