import logging
from typing import Any

from fastapi import APIRouter, Depends, Query

from traveladvisor.core.geo_utils import DEFAULT_RADIUS_KM, find_hotels
from traveladvisor.core.repository import MongoDBRepo, get_repo
from traveladvisor.core.schemas import PartnerHotel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/hotels", tags=["hotels"])


@router.get("/near")
def hotels_near(
    city: str | None = Query(None, max_length=120),
    state: str | None = Query(None, max_length=120),
    lat: float | None = Query(None, ge=-90, le=90),
    lng: float | None = Query(None, ge=-180, le=180),
    radius_km: float = Query(DEFAULT_RADIUS_KM, alias="radiusKm", gt=0, le=500),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, Any]:
    """
    Partner hotels by city (with alias matching) and/or within radiusKm of lat/lng.

    With coordinates the list is ordered nearest first and each hotel carries
    distanceKm. No match is an empty list.
    """
    hotels = find_hotels(repo.list_hotels(), city, state, lat, lng, radius_km)
    logger.debug(f"[Hotels] city={city} state={state} lat={lat} lng={lng} -> {len(hotels)}")
    return {
        "hotels": [PartnerHotel.model_validate(h).model_dump(by_alias=True) for h in hotels]
    }
