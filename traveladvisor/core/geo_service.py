"""
Reverse geocoding (Nominatim) and IP geolocation with provider fallbacks.
"""

import logging
import math
from typing import Any, Mapping
from urllib.parse import quote

import requests

from traveladvisor.core.settings import get_settings

logger = logging.getLogger(__name__)

NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"
REQUEST_TIMEOUT = 10


class GeoLookupError(RuntimeError):
    """A geolocation provider could not be reached or answered with an error."""


def _to_float(value: Any) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def client_ip(headers: Mapping[str, str]) -> str | None:
    """Caller IP from proxy headers: X-Forwarded-For (first hop), X-Real-IP, CF-Connecting-IP."""
    forwarded = headers.get("x-forwarded-for", "")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
        if ip:
            return ip
    for header in ("x-real-ip", "cf-connecting-ip"):
        value = headers.get(header, "").strip()
        if value:
            return value
    return None


class GeoService:
    """Thin wrappers around public geolocation APIs."""

    def __init__(self, user_agent: str | None = None):
        self.user_agent = user_agent or get_settings().geo_user_agent

    def reverse_geocode(self, lat: float, lng: float) -> dict[str, str | None]:
        """
        Resolve coordinates to a place name.

        Returns:
            {"city", "state", "displayName"}; city falls back through town,
            village and county.

        Raises:
            GeoLookupError: transport failure or non-2xx answer
        """
        params = {
            "format": "jsonv2",
            "lat": lat,
            "lon": lng,
            "zoom": 10,
            "addressdetails": 1,
        }
        try:
            response = requests.get(
                NOMINATIM_REVERSE_URL,
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise GeoLookupError(f"reverse geocode failed: {e}") from e

        address = data.get("address") or {}
        city = (
            address.get("city")
            or address.get("town")
            or address.get("village")
            or address.get("county")
        )
        return {
            "city": city,
            "state": address.get("state"),
            "displayName": data.get("display_name"),
        }

    def reverse_geocode_city(self, lat: float, lng: float) -> str | None:
        """Best-effort city name (falls back to the state); None on any failure."""
        try:
            place = self.reverse_geocode(lat, lng)
        except GeoLookupError as e:
            logger.warning(f"[Geo] {e}")
            return None
        return place.get("city") or place.get("state")

    def _get_json(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        response = requests.get(url, params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()

    def locate_ip(self, ip: str | None) -> dict[str, Any] | None:
        """
        Geolocate an IP (or the server's own address when ip is None).

        Tries ipapi.co, then ipwho.is, then ip-api.com. The first provider with
        numeric coordinates wins; city/region are filled from whichever provider
        reports them first.

        Returns:
            {"lat", "lng", "city", "state", "ip"} or None when no provider has coordinates

        Raises:
            GeoLookupError: no provider could be reached
        """
        ip_path = f"/{quote(ip, safe='')}" if ip else ""
        errors = []

        try:
            data = self._get_json(f"https://ipapi.co{ip_path}/json/")
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"[Geo] ipapi.co lookup failed: {e}")
            errors.append(f"ipapi.co: {e}")
            data = {}

        lat = _to_float(data.get("latitude"))
        lng = _to_float(data.get("longitude"))
        city = data.get("city")
        region = data.get("region")

        if lat is None or lng is None:
            try:
                alt = self._get_json(f"https://ipwho.is{ip_path}")
                lat = _to_float(alt.get("latitude"))
                lng = _to_float(alt.get("longitude"))
                city = city or alt.get("city")
                region = region or alt.get("region")
            except (requests.exceptions.RequestException, ValueError) as e:
                logger.warning(f"[Geo] ipwho.is lookup failed: {e}")
                errors.append(f"ipwho.is: {e}")

        if lat is None or lng is None:
            try:
                alt = self._get_json(
                    f"http://ip-api.com/json{ip_path}",
                    params={"fields": "status,country,regionName,city,lat,lon"},
                )
                if alt.get("status") == "success":
                    lat = _to_float(alt.get("lat"))
                    lng = _to_float(alt.get("lon"))
                    city = city or alt.get("city")
                    region = region or alt.get("regionName")
            except (requests.exceptions.RequestException, ValueError) as e:
                logger.warning(f"[Geo] ip-api.com lookup failed: {e}")
                errors.append(f"ip-api.com: {e}")

        if lat is None or lng is None:
            if len(errors) == 3:
                raise GeoLookupError(f"IP geolocation failed: {'; '.join(errors)}")
            return None
        return {"lat": lat, "lng": lng, "city": city, "state": region, "ip": ip}


geo_service = GeoService()
