from typing import Any

from fastapi import APIRouter, HTTPException, Query

from traveladvisor.core.transport_costs import route_cost, transport_costs

router = APIRouter(tags=["transport"])


def _require_route(origin: str | None, destination: str | None) -> None:
    if not origin or not destination:
        raise HTTPException(status_code=400, detail="Origin and destination are required")


@router.get("/transportation-costs")
def transportation_costs(
    origin: str | None = Query(None, max_length=120),
    destination: str | None = Query(None, max_length=120),
    mode: str = Query("all", max_length=20),
) -> dict[str, Any]:
    """Reference fares between two cities for one mode, road modes, or all modes."""
    _require_route(origin, destination)
    try:
        return transport_costs(origin, destination, mode)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/transportation-costs/route")
def transportation_route_cost(
    origin: str | None = Query(None, max_length=120),
    destination: str | None = Query(None, max_length=120),
    mode: str = Query("train", max_length=20),
) -> dict[str, Any]:
    """Single-traveller cost and rough duration for one leg (flight, bus, taxi, self-drive, train)."""
    _require_route(origin, destination)
    return {"origin": origin, "destination": destination, "mode": mode, **route_cost(origin, destination, mode)}
