import logging
import re
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from traveladvisor.core.geo_service import geo_service
from traveladvisor.core.json_repair import JSONExtractionError, extract_json
from traveladvisor.core.llm_provider import TextGenerator, get_optional_text_generator
from traveladvisor.core.maps import maps_search_url
from traveladvisor.core.prompts import build_chat_places_prompt, build_local_places_prompt
from traveladvisor.core.schemas import ChatPlacesRequest, Place
from traveladvisor.core.settings import get_settings
from traveladvisor.core.ttl_cache import TTLCache
from traveladvisor.core.wiki_images import fetch_wiki_image, find_place_image, search_wikipedia

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["places"])

_PREPOSITION_CITY = re.compile(r"\b(?:in|at|near|around|from)\s+([A-Za-z\s]+?)(?:\s|$|,|\.)", re.I)
_SUFFIX_CITY = re.compile(r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\s+(?:district|city|state)\b")
# Words that describe what is wanted rather than where
_NOT_A_PLACE = ("best", "temple", "restaurant", "beach", "park")


@lru_cache(maxsize=1)
def get_places_cache() -> TTLCache:
    """Process-wide place-list cache, injected so tests and deployments can swap it."""
    settings = get_settings()
    return TTLCache(
        ttl_seconds=settings.places_cache_ttl_seconds,
        max_size=settings.places_cache_max_size,
    )


def mentioned_city(message: str) -> str | None:
    """
    First place name the user mentions, e.g. "temples in Mysuru" -> "Mysuru",
    "Shivamogga district forts" -> "Shivamogga".
    """
    for match in _PREPOSITION_CITY.finditer(message):
        name = match.group(1).strip()
        if len(name) > 2 and not any(word in name.lower() for word in _NOT_A_PLACE):
            return name
    match = _SUFFIX_CITY.search(message)
    return match.group(1).strip() if match else None


def cache_key(city: str | None, lat: float | None, lng: float | None, count: int) -> str | None:
    if city:
        return f"city:{city.lower()}:{count}"
    if lat is not None and lng is not None:
        return f"ll:{lat},{lng}:{count}"
    return None


def _generate_places(
    generator: TextGenerator | None, prompt: str, count: int, tag: str
) -> tuple[list[dict], str | None]:
    """Places (and the city the model resolved, if any) from one generation; empty on failure."""
    if generator is None:
        return [], None
    try:
        payload = extract_json(generator.generate(prompt))
    except JSONExtractionError:
        logger.warning(f"[{tag}] Model output held no JSON")
        return [], None
    except Exception as e:
        logger.warning(f"[{tag}] Generation failed with {generator.name}: {e}")
        return [], None

    if not isinstance(payload, dict):
        return [], None
    places = payload.get("places")
    places = [p for p in places if isinstance(p, dict)] if isinstance(places, list) else []
    city = payload.get("city") if isinstance(payload.get("city"), str) else None
    return places[:count], city


def _maps_query(title: str, city: str | None) -> str:
    return ", ".join(part for part in (title, city, "India") if part)


def _enrich(place: dict[str, Any], city: str | None, find_image) -> dict[str, Any]:
    title = str(place.get("title") or "").strip()
    wiki_title = str(place.get("wikipediaTitle") or title).strip()
    image = place.get("imageUrl") or find_image(wiki_title, city)
    return Place(
        title=title,
        description=str(place.get("description") or "").strip(),
        image_url=image,
        wiki_title=wiki_title,
        maps_url=maps_search_url(_maps_query(title, city)),
    ).model_dump(by_alias=True)


@router.get("/local-places")
def local_places(
    city: str | None = Query(None, max_length=120),
    lat: float | None = Query(None, ge=-90, le=90),
    lng: float | None = Query(None, ge=-180, le=180),
    count: int = Query(6, ge=1, le=20),
    generator: TextGenerator | None = Depends(get_optional_text_generator),
    cache: TTLCache = Depends(get_places_cache),
) -> dict[str, Any]:
    """
    Famous attractions for a city or a coordinate pair.

    Flow:
    1. Cached answer for the same city/coordinates and count
    2. Model-generated list
    3. Wikipedia search, reverse geocoding the coordinates to a city first
    Every place gets an image and a Maps link. Results are cached.
    """
    city = city.strip() if city else None
    key = cache_key(city, lat, lng, count)
    if key is None:
        raise HTTPException(status_code=400, detail="Provide city or lat/lng")

    cached = cache.get(key)
    if cached is not None:
        logger.debug(f"[LocalPlaces] cache hit {key}")
        return cached

    location_text = f"City: {city}" if city else f"Coordinates: {lat},{lng}"
    places, city_name = _generate_places(
        generator, build_local_places_prompt(location_text, count), count, "LocalPlaces"
    )
    city_name = city_name or city

    if not places:
        fallback_city = city_name
        if not fallback_city and lat is not None and lng is not None:
            fallback_city = geo_service.reverse_geocode_city(lat, lng)
        if not fallback_city:
            return {"city": None, "places": []}
        logger.info(f"[LocalPlaces] Falling back to Wikipedia search for {fallback_city}")
        places = search_wikipedia(f"{fallback_city} tourist attractions India", limit=count)
        city_name = fallback_city

    payload = {
        "city": city_name,
        "places": [_enrich(p, city_name, find_place_image) for p in places[:count]],
    }
    cache.put(key, payload)
    return payload


@router.post("/chat-places")
def chat_places(
    request: ChatPlacesRequest,
    generator: TextGenerator | None = Depends(get_optional_text_generator),
) -> dict[str, Any]:
    """Places matching a free-text request; a city named in the message wins over `city`."""
    target_city = mentioned_city(request.message)
    location = target_city or request.city
    location_text = location or "detected location"

    places, _ = _generate_places(
        generator,
        build_chat_places_prompt(request.message, location_text),
        request.count,
        "ChatPlaces",
    )
    if not places:
        query = f"{request.message} {target_city + ' India' if target_city else 'India'}"
        places = search_wikipedia(query, limit=request.count)

    return {
        "places": [
            _enrich(p, location, lambda title, _city: fetch_wiki_image(title))
            for p in places[: request.count]
        ]
    }
