"""
Place images and fallback place listings from Wikipedia / Wikimedia Commons.

Everything here is enrichment: failures are logged and degrade to None or an
empty list, never to an error for the caller.
"""

import logging
import re
from typing import Any

import requests

logger = logging.getLogger(__name__)

WIKIPEDIA_API = "https://en.wikipedia.org/w/api.php"
COMMONS_API = "https://commons.wikimedia.org/w/api.php"
REQUEST_TIMEOUT = 10

_HTML_TAG = re.compile(r"<[^>]+>")


def _query(api: str, params: dict[str, Any]) -> dict[str, Any]:
    response = requests.get(
        api,
        params={"action": "query", "format": "json", **params},
        timeout=REQUEST_TIMEOUT,
    )
    response.raise_for_status()
    return response.json()


def _first_page(data: dict[str, Any]) -> dict[str, Any]:
    pages = (data.get("query") or {}).get("pages") or {}
    return next(iter(pages.values()), {}) if pages else {}


def fetch_wiki_image(title: str) -> str | None:
    """Original-size lead image of the Wikipedia article with this exact title."""
    if not title:
        return None
    try:
        data = _query(WIKIPEDIA_API, {"prop": "pageimages", "piprop": "original", "titles": title})
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.debug(f"[WikiImage] pageimages failed for '{title}': {e}")
        return None
    source = (_first_page(data).get("original") or {}).get("source")
    return source if isinstance(source, str) else None


def search_wikipedia(query: str, limit: int = 6) -> list[dict[str, str]]:
    """Article search; results shaped like model place entries."""
    try:
        data = _query(WIKIPEDIA_API, {"list": "search", "srsearch": query, "srlimit": limit})
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.warning(f"[WikiImage] search failed for '{query}': {e}")
        return []

    places = []
    for hit in ((data.get("query") or {}).get("search") or [])[:limit]:
        title = hit.get("title")
        if not title:
            continue
        places.append(
            {
                "title": title,
                "description": _HTML_TAG.sub("", hit.get("snippet") or ""),
                "wikipediaTitle": title,
            }
        )
    return places


def _commons_image(query: str) -> str | None:
    try:
        data = _query(
            COMMONS_API,
            {"list": "search", "srsearch": query, "srnamespace": 6, "srlimit": 5},
        )
        for hit in (data.get("query") or {}).get("search") or []:
            file_title = hit.get("title")
            if not file_title:
                continue
            info = _query(COMMONS_API, {"prop": "imageinfo", "iiprop": "url", "titles": file_title})
            image_info = _first_page(info).get("imageinfo") or []
            if image_info and image_info[0].get("url"):
                return image_info[0]["url"]
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.debug(f"[WikiImage] commons lookup failed for '{query}': {e}")
    return None


def find_place_image(title: str, city: str | None = None) -> str | None:
    """
    Best image for a place.

    Flow:
    1. Wikipedia article with the exact title
    2. Top 3 Wikipedia search hits for "title city"
    3. Wikimedia Commons file search
    """
    image = fetch_wiki_image(title)
    if image:
        return image

    query = f"{title} {city}" if city else title
    for hit in search_wikipedia(query, limit=3):
        image = fetch_wiki_image(hit["title"])
        if image:
            return image

    return _commons_image(query)
