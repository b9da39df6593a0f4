"""
Google Maps link generation for plans and place listings.
"""

from typing import Any
from urllib.parse import quote

MAPS_BASE = "https://www.google.com/maps"
TRAVEL_MODES = ("driving", "walking", "transit", "bicycling")


def maps_search_url(query: str) -> str:
    return f"{MAPS_BASE}/search/?api=1&query={quote(query, safe='')}"


def maps_directions_url(origin: str, destination: str, travel_mode: str = "driving") -> str:
    if travel_mode not in TRAVEL_MODES:
        raise ValueError(f"Unsupported travel mode: {travel_mode}")
    return (
        f"{MAPS_BASE}/dir/?api=1&origin={quote(origin, safe='')}"
        f"&destination={quote(destination, safe='')}&travelmode={travel_mode}"
    )


def maps_coordinates_url(lat: float, lng: float, zoom: int = 15) -> str:
    return f"{MAPS_BASE}/@{lat},{lng},{zoom}z"


def location_query(
    name: str,
    address: str | None = None,
    city: str | None = None,
    state: str | None = None,
) -> str:
    """Most specific search query available for a place, qualified with India."""
    if address and city:
        return f"{name}, {address}, {city}"
    if city and state:
        return f"{name}, {city}, {state}, India"
    if city:
        return f"{name}, {city}, India"
    if name:
        return f"{name}, India"
    return "India"


def is_valid_maps_url(url: str) -> bool:
    return url.startswith(f"{MAPS_BASE}/") or url.startswith("https://maps.google.com/")


def _fill_missing(items: Any, name_key: str, city: str | None) -> None:
    if not isinstance(items, list):
        return
    for item in items:
        if not isinstance(item, dict):
            continue
        url = item.get("mapsUrl")
        if isinstance(url, str) and is_valid_maps_url(url):
            continue
        name = item.get(name_key)
        if not name:
            continue
        location = item.get("location")
        if location and location != name:
            query = f"{name}, {location}, India"
        else:
            query = location_query(str(name), city=city)
        item["mapsUrl"] = maps_search_url(query)


def attach_maps_links(plan: dict[str, Any], destinations: list[str]) -> dict[str, Any]:
    """
    Give every accommodation, attraction, restaurant and roadmap activity a
    Maps search URL when the model left it out or produced something that is
    not a Maps link. Mutates and returns `plan`.
    """
    city = destinations[0] if destinations else None
    _fill_missing(plan.get("accommodations"), "name", city)
    _fill_missing(plan.get("attractions"), "name", city)
    _fill_missing(plan.get("restaurants"), "name", city)

    roadmap = plan.get("roadmap")
    if isinstance(roadmap, list):
        for day in roadmap:
            if isinstance(day, dict):
                _fill_missing(day.get("activities"), "title", day.get("location") or city)
    return plan
