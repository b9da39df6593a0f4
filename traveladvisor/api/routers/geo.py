import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request

from traveladvisor.core.geo_service import GeoLookupError, client_ip, geo_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/geo", tags=["geo"])


@router.get("/reverse")
def reverse(
    lat: float | None = Query(None, ge=-90, le=90),
    lng: float | None = Query(None, ge=-180, le=180),
) -> dict[str, Any]:
    """Coordinates to {city, state, displayName}."""
    if lat is None or lng is None:
        raise HTTPException(status_code=400, detail="lat and lng required")
    try:
        return geo_service.reverse_geocode(lat, lng)
    except GeoLookupError as e:
        logger.error(f"[Geo] {e}")
        raise HTTPException(
            status_code=500, detail={"error": "Reverse geocode failed", "details": str(e)}
        )


@router.get("/ip")
def locate_ip(request: Request) -> dict[str, Any]:
    """Approximate location of the caller's IP, read from proxy headers."""
    ip = client_ip(request.headers)
    try:
        location = geo_service.locate_ip(ip)
    except GeoLookupError as e:
        logger.error(f"[Geo] {e}")
        raise HTTPException(
            status_code=500, detail={"error": "IP geolocation failed", "details": str(e)}
        )
    if location is None:
        raise HTTPException(status_code=404, detail="Location not available")
    return location
