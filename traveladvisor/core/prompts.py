"""
Prompt construction for the trip-planning and place-lookup endpoints.

Every prompt spells out the expected JSON shape and demands bare JSON, since
json_repair is the only defence against conversational wrapper text.
"""

from traveladvisor.core.schemas import SuggestRequest, TripRequest

MAPS_URL_FORMAT = "https://www.google.com/maps/search/?api=1&query=<place name>, <city>, <state>, India"

PLAN_SCHEMA = """{
  "destinations": [string],
  "days": number,
  "currency": "INR",
  "totalBudget": number,
  "roadmap": [
    {
      "day": number,
      "date": string,
      "summary": string,
      "location": string,
      "activities": [
        {"time": string, "title": string, "description": string, "duration": string,
         "cost": number, "mapsUrl": string, "tips": string}
      ],
      "meals": [{"type": string, "suggestion": string, "cost": number, "location": string}],
      "transportation": {"mode": string, "details": string, "cost": number, "duration": string}
    }
  ],
  "accommodations": [
    {"name": string, "type": string, "location": string, "pricePerNight": number,
     "rating": number, "amenities": [string], "mapsUrl": string, "bookingUrl": string}
  ],
  "attractions": [
    {"name": string, "location": string, "description": string, "entryFee": number,
     "bestTime": string, "duration": string, "tips": string, "mapsUrl": string}
  ],
  "restaurants": [
    {"name": string, "cuisine": string, "location": string, "priceRange": string,
     "specialties": [string], "dietaryOptions": [string], "mapsUrl": string}
  ],
  "transportation": {
    "summary": string,
    "options": [{"mode": string, "description": string, "cost": number, "duration": string, "tips": string}]
  },
  "budgetBreakdown": {
    "accommodation": number, "transportation": number, "food": number,
    "attractions": number, "miscellaneous": number, "total": number
  },
  "packingList": [string],
  "localTips": [string],
  "emergencyContacts": {"police": string, "hospital": string, "touristHelpline": string}
}"""

SUGGEST_SCHEMA = """{
  "suggestions": [
    {
      "destination": string,
      "state": string,
      "region": string,
      "bestTimeToVisit": string,
      "estimatedCost": number,
      "budgetCategory": "budget" | "mid-range" | "luxury",
      "highlights": [string],
      "breakdown": {
        "flights": number, "accommodation": number, "food": number,
        "localTransport": number, "attractions": number, "miscellaneous": number
      },
      "samplePlan": {
        "roadmap": [
          {"day": number, "summary": string,
           "activities": [{"time": string, "title": string, "description": string, "mapsUrl": string}]}
        ],
        "accommodations": [
          {"name": string, "type": string, "pricePerNight": number, "location": string, "mapsUrl": string}
        ],
        "attractions": [{"name": string, "description": string, "entryFee": number, "mapsUrl": string}],
        "restaurants": [{"name": string, "cuisine": string, "priceRange": string, "mapsUrl": string}]
      },
      "transportation": {
        "toDestination": {"mode": string, "duration": string, "cost": number, "tips": string},
        "withinDestination": {"options": [{"mode": string, "description": string, "cost": number}]}
      },
      "localTips": [string],
      "safetyNotes": [string],
      "culturalNotes": [string]
    }
  ]
}"""

PLACES_SCHEMA = """{
  "city": string,
  "places": [
    { "title": string, "description": string, "wikipediaTitle": string }
  ]
}"""


def _join(items: list[str], default: str) -> str:
    return ", ".join(items) if items else default


def format_inr(amount: float) -> str:
    """Indian digit grouping, e.g. 1234567 -> '₹12,34,567'."""
    whole = str(int(round(amount)))
    if len(whole) <= 3:
        return f"₹{whole}"
    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return "₹" + ",".join(groups + [tail])


def build_plan_prompt(request: TripRequest, budget: float) -> str:
    """Compose the day-by-day plan prompt. `budget` is the explicit or estimated total in INR."""
    lines = [
        "You are an expert Indian travel planner. Generate a comprehensive "
        f"{request.days}-day trip plan for {request.travelers} travelers visiting "
        f"{', '.join(request.places)} in India.",
        "",
        f"Budget: {format_inr(budget)} INR",
        f"Travel Style: {request.travel_style.value}",
        f"Accommodation: {request.accommodation_type.value}",
        f"Transportation: {request.transportation_type.value}",
        f"Interests: {_join(request.interests, 'General sightseeing')}",
        f"Dietary Restrictions: {_join(request.dietary_restrictions, 'None')}",
        f"Accessibility Needs: {_join(request.accessibility, 'None')}",
    ]
    if request.start_date:
        lines.append(f"Start Date: {request.start_date.isoformat()}")
    if request.end_date:
        lines.append(f"End Date: {request.end_date.isoformat()}")
    if request.special_requests:
        lines.append(f"Special Requests: {request.special_requests}")

    lines += [
        "",
        "Return JSON with this exact schema:",
        PLAN_SCHEMA,
        "",
        "Rules:",
        "- Always provide valid JSON only, no markdown, no commentary.",
        "- Use Indian Rupees (INR) for all costs.",
        "- Generate a Google Maps URL for each location, activity, accommodation and restaurant.",
        f"- For places use the format {MAPS_URL_FORMAT}",
        "- Include estimated walking/driving times between locations.",
        "- Consider local customs, festivals, and weather.",
        "- Include vegetarian and local food options.",
        "- Provide practical transportation options (trains, buses, cabs, etc.).",
        "- Consider the specified travel style, accommodation preferences, and accessibility needs.",
        "- Ensure the total cost stays within the specified budget.",
    ]
    return "\n".join(lines)


def build_suggest_prompt(request: SuggestRequest) -> str:
    """Compose the budget-driven destination suggestion prompt."""
    origin = f" starting from {request.origin}" if request.origin else ""
    budget = format_inr(request.budget_inr)
    lines = [
        "You are an expert Indian travel planner. Suggest 5 diverse destinations in India "
        f"that fit within a total budget of {budget} INR for a {request.days}-day trip{origin}.",
        "",
        f"Travel Style: {request.travel_style.value}",
        f"Interests: {_join(request.interests, 'General sightseeing')}",
        f"Preferred Season: {request.preferred_season or 'Any'}",
        f"Group Size: {request.group_size} travelers",
        "",
        "Return JSON with this exact schema:",
        SUGGEST_SCHEMA,
        "",
        "Rules:",
        "- Only valid JSON output, no markdown.",
        f"- Generate Google Maps URLs for all locations and activities using {MAPS_URL_FORMAT}",
        f"- Ensure estimatedCost <= {int(request.budget_inr)} for each suggestion.",
        "- Include diverse destinations across different regions of India.",
        "- Include both popular and offbeat destinations.",
        "- Provide realistic costs in Indian Rupees (INR).",
        "- Consider seasonal factors, local festivals, safety and cultural considerations.",
    ]
    return "\n".join(lines)


def build_local_places_prompt(location_text: str, count: int) -> str:
    return "\n".join(
        [
            "You are a local travel expert specializing in Indian tourism. "
            f"List {count} of the most famous tourist attractions that are actually located "
            f"in this district/city in India. {location_text}",
            "",
            "Requirements:",
            "- Only places physically located within India and within the specified district/city.",
            "- Do not include places from neighbouring districts, states or countries.",
            "- Prefer landmarks and monuments, then wildlife parks, temples and historical sites,",
            "  then parks and gardens, then museums and galleries.",
            "",
            "Return strict JSON only, no markdown, with this schema:",
            PLACES_SCHEMA,
            "Use accurate local names for wikipediaTitle suitable for Wikipedia search.",
        ]
    )


def build_chat_places_prompt(message: str, location_text: str) -> str:
    return "\n".join(
        [
            f"Find real {message} that actually exist in {location_text}, India.",
            "",
            f"- Return only actual {message} physically located in {location_text}.",
            "- These must be real places that people can visit, with their actual names.",
            "- Do not return administrative areas, lists, or places from other locations.",
            "",
            "Return strict JSON only, no markdown:",
            '{ "places": [ { "title": string, "description": string, "wikipediaTitle": string } ] }',
        ]
    )
