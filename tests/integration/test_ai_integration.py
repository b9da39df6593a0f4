"""
Integration tests for /ai/plan and /ai/suggest against in-memory fakes.
"""

import json

import pytest

from traveladvisor.core.maps import maps_search_url

PLAN_BODY = {"places": ["Mysuru"], "days": 3, "travelers": 2, "travelStyle": "budget"}


@pytest.mark.asyncio
async def test_plan_without_budget_returns_calculated_budget(client, fake_repo, generator):
    response = await client.post("/ai/plan", json=PLAN_BODY)
    assert response.status_code == 200
    body = response.json()

    assert body["calculatedBudget"] is not None
    assert body["calculatedBudget"] == body["budgetBreakdown"]["total"] == 12540
    assert body["saved"] is True
    assert body["id"] == fake_repo.trips[0]["id"]

    # the estimated budget is what the model is asked to plan for
    assert "Budget: ₹12,540 INR" in generator.prompts[0]


@pytest.mark.asyncio
async def test_plan_attaches_maps_links(client):
    plan = (await client.post("/ai/plan", json=PLAN_BODY)).json()["plan"]
    assert plan["accommodations"][0]["mapsUrl"] == maps_search_url("Royal Orchid, Mysuru, India")
    assert plan["attractions"][0]["mapsUrl"] == maps_search_url("Chamundi Hills, Mysuru, India")
    activity = plan["roadmap"][0]["activities"][0]
    assert activity["mapsUrl"] == maps_search_url("Mysore Palace, Mysuru, India")


@pytest.mark.asyncio
async def test_plan_with_budget_saves_plan_record(client, fake_repo):
    response = await client.post("/ai/plan", json={**PLAN_BODY, "budget": 30000})
    body = response.json()
    assert body["calculatedBudget"] is None
    assert body["budgetBreakdown"]["total"] == 12540

    record = fake_repo.trips[0]
    assert record["type"] == "plan"
    assert record["user_id"] == "user_123"
    assert record["input"]["budget"] == 30000
    assert record["input"]["travelStyle"] == "budget"
    assert record["input"]["budgetBreakdown"]["total"] == 12540
    assert record["result"]["tripTitle"] == "Mysuru Getaway"


@pytest.mark.asyncio
async def test_plan_recovers_fenced_json(client, use_generator):
    fenced = "Here is your plan:\n```json\n" + json.dumps(
        {"roadmap": [], "accommodations": [], "attractions": []}
    ) + "\n```"
    use_generator(fenced)
    response = await client.post("/ai/plan", json=PLAN_BODY)
    assert response.status_code == 200
    assert response.json()["plan"]["roadmap"] == []


@pytest.mark.asyncio
async def test_save_failure_does_not_fail_request(client, fake_repo):
    fake_repo.fail_writes = True
    response = await client.post("/ai/plan", json=PLAN_BODY)
    assert response.status_code == 200
    body = response.json()
    assert body["saved"] is False
    assert body["id"] is None
    assert body["plan"]["tripTitle"] == "Mysuru Getaway"


@pytest.mark.asyncio
async def test_save_skipped_without_database(app, client):
    from traveladvisor.core.repository import get_optional_repo

    app.dependency_overrides[get_optional_repo] = lambda: None
    body = (await client.post("/ai/plan", json=PLAN_BODY)).json()
    assert body["saved"] is False
    assert body["id"] is None


@pytest.mark.asyncio
async def test_invalid_model_output_is_502_with_raw(client, use_generator):
    use_generator("Sorry, I can only help with travel in India.")
    response = await client.post("/ai/plan", json=PLAN_BODY)
    assert response.status_code == 502
    assert response.json() == {
        "error": "AI returned invalid JSON",
        "raw": "Sorry, I can only help with travel in India.",
    }


@pytest.mark.asyncio
async def test_missing_required_keys_is_502(client, use_generator, fake_repo):
    use_generator('{"roadmap": []}')
    response = await client.post("/ai/plan", json=PLAN_BODY)
    assert response.status_code == 502
    assert fake_repo.trips == []


@pytest.mark.asyncio
async def test_provider_error_is_500(client, use_generator):
    use_generator(error=RuntimeError("quota exceeded"))
    response = await client.post("/ai/plan", json=PLAN_BODY)
    assert response.status_code == 500
    assert response.json() == {"error": "Generation failed", "details": "quota exceeded"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"travelStyle": "backpacker"},
        {"transportationType": "rocket"},
        {"days": 0},
        {"places": []},
    ],
)
async def test_invalid_request_is_400(client, overrides, generator):
    response = await client.post("/ai/plan", json={**PLAN_BODY, **overrides})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    assert response.json()["details"]
    assert generator.prompts == []


@pytest.mark.asyncio
async def test_plan_requires_identity(client, as_user):
    as_user(None)
    response = await client.post("/ai/plan", json=PLAN_BODY)
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


@pytest.mark.asyncio
async def test_suggest_saves_suggest_record(client, use_generator, fake_repo):
    fake = use_generator('{"suggestions": [{"destination": "Gokarna", "estimatedCost": 18000}]}')
    response = await client.post(
        "/ai/suggest", json={"budgetINR": 20000, "days": 4, "origin": "Bengaluru"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["suggestions"][0]["destination"] == "Gokarna"
    assert body["saved"] is True

    record = fake_repo.trips[0]
    assert record["type"] == "suggest"
    assert record["input"]["budgetINR"] == 20000
    assert "starting from Bengaluru" in fake.prompts[0]


@pytest.mark.asyncio
async def test_suggest_requires_budget(client):
    response = await client.post("/ai/suggest", json={"days": 4})
    assert response.status_code == 400
    assert "budgetINR" in response.json()["details"]
