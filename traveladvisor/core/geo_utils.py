"""
Geographic utilities for partner-hotel lookups and distance calculations.
"""

import math
from typing import Any, Dict, List, Optional, Tuple

DEFAULT_RADIUS_KM = 25.0

# Equivalent spellings of the same place; compared lowercase
CITY_ALIAS_GROUPS: List[Tuple[str, ...]] = [
    ("bengaluru", "bangalore"),
    ("mysuru", "mysore"),
    ("mumbai", "bombay"),
    ("chennai", "madras"),
    ("kolkata", "calcutta"),
    ("shivamogga", "shimoga"),
    ("mangaluru", "mangalore"),
    ("gurugram", "gurgaon"),
    ("puducherry", "pondicherry"),
    ("thiruvananthapuram", "trivandrum"),
    ("kochi", "cochin"),
    ("varanasi", "banaras", "benares"),
]


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Args:
        lat1, lng1: Coordinates of point 1
        lat2, lng2: Coordinates of point 2

    Returns:
        Distance in kilometers
    """
    R = 6371  # Earth's radius in kilometers

    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return R * c


def normalize_city(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def city_aliases(name: str) -> set[str]:
    """All known spellings for a city (including itself), lowercase."""
    key = normalize_city(name)
    for group in CITY_ALIAS_GROUPS:
        if key in group:
            return set(group)
    return {key}


def _hotel_city(hotel: Dict[str, Any]) -> str:
    return hotel.get("city_lower") or normalize_city(hotel.get("city"))


def filter_hotels_by_city(
    hotels: List[Dict[str, Any]], city: str, state: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    Match hotels by city name.

    Exact (normalized) match first; if that finds nothing, retry against all
    records using the alias table (e.g. "Bangalore" also finds "Bengaluru").
    """
    key = normalize_city(city)
    matches = [h for h in hotels if _hotel_city(h) == key]

    if not matches:
        aliases = city_aliases(key)
        matches = [h for h in hotels if _hotel_city(h) in aliases]

    if state:
        state_key = state.strip().lower()
        matches = [h for h in matches if (h.get("state") or "").strip().lower() == state_key]

    return matches


def hotel_coordinates(hotel: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    """(lat, lng) from the hotel's location, or None when missing or non-numeric."""
    location = hotel.get("location") or {}
    lat = location.get("latitude")
    lng = location.get("longitude")
    # bool is an int subclass; a stray True is not a coordinate
    if not isinstance(lat, (int, float)) or isinstance(lat, bool):
        return None
    if not isinstance(lng, (int, float)) or isinstance(lng, bool):
        return None
    return float(lat), float(lng)


def filter_hotels_near(
    hotels: List[Dict[str, Any]],
    lat: float,
    lng: float,
    radius_km: float = DEFAULT_RADIUS_KM,
) -> List[Dict[str, Any]]:
    """
    Hotels within radius_km of (lat, lng), nearest first.

    Each returned hotel is a copy with `distance_km` attached. Hotels without
    coordinates are treated as infinitely far and never returned.
    """
    results = []
    for hotel in hotels:
        coords = hotel_coordinates(hotel)
        if coords is None:
            continue
        distance = haversine_distance(lat, lng, coords[0], coords[1])
        if distance <= radius_km:
            results.append({**hotel, "distance_km": distance})

    results.sort(key=lambda h: h["distance_km"])
    return results


def find_hotels(
    hotels: List[Dict[str, Any]],
    city: Optional[str] = None,
    state: Optional[str] = None,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    radius_km: float = DEFAULT_RADIUS_KM,
) -> List[Dict[str, Any]]:
    """City filter (if given) then coordinate filter (if given). No match is an empty list."""
    results = hotels
    if city:
        results = filter_hotels_by_city(results, city, state)
    elif state:
        state_key = state.strip().lower()
        results = [h for h in results if (h.get("state") or "").strip().lower() == state_key]

    if lat is not None and lng is not None:
        results = filter_hotels_near(results, lat, lng, radius_km)

    return results
