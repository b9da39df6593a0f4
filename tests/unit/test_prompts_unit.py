from traveladvisor.core.prompts import (
    build_chat_places_prompt,
    build_local_places_prompt,
    build_plan_prompt,
    build_suggest_prompt,
    format_inr,
)
from traveladvisor.core.schemas import SuggestRequest, TripRequest


def test_format_inr_uses_indian_grouping():
    assert format_inr(999) == "₹999"
    assert format_inr(12540) == "₹12,540"
    assert format_inr(1234567) == "₹12,34,567"


def test_plan_prompt_embeds_request_and_json_rule():
    request = TripRequest(
        places="Mysuru, Coorg",
        days=4,
        travelers=3,
        travelStyle="adventure",
        interests=["wildlife"],
        dietaryRestrictions=["vegetarian"],
        startDate="2026-12-01",
        specialRequests="Sunrise trek",
    )
    prompt = build_plan_prompt(request, 54000)
    assert "4-day trip plan for 3 travelers visiting Mysuru, Coorg" in prompt
    assert "Budget: ₹54,000 INR" in prompt
    assert "Travel Style: adventure" in prompt
    assert "Interests: wildlife" in prompt
    assert "Dietary Restrictions: vegetarian" in prompt
    assert "Accessibility Needs: None" in prompt
    assert "Start Date: 2026-12-01" in prompt
    assert "Special Requests: Sunrise trek" in prompt
    assert "Always provide valid JSON only, no markdown, no commentary." in prompt
    assert '"roadmap"' in prompt


def test_plan_prompt_defaults():
    prompt = build_plan_prompt(TripRequest(places=["Hampi"]), 10000)
    assert "Interests: General sightseeing" in prompt
    assert "Start Date" not in prompt


def test_suggest_prompt():
    request = SuggestRequest(budgetINR=40000, days=5, origin="Pune", interests="beaches, food")
    prompt = build_suggest_prompt(request)
    assert "total budget of ₹40,000 INR for a 5-day trip starting from Pune" in prompt
    assert "Interests: beaches, food" in prompt
    assert "Only valid JSON output, no markdown." in prompt
    assert '"suggestions"' in prompt


def test_places_prompts():
    local = build_local_places_prompt("City: Mysuru", 6)
    assert "List 6 of the most famous" in local
    assert "City: Mysuru" in local
    assert "wikipediaTitle" in local

    chat = build_chat_places_prompt("temples", "Hampi")
    assert "Find real temples that actually exist in Hampi, India." in chat
    assert '"places"' in chat
