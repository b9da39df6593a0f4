import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from traveladvisor.core import repository
from traveladvisor.core.geo_service import GeoLookupError, geo_service
from traveladvisor.core.settings import Settings


def _hotel(hotel_id, name, city, lat=None, lng=None):
    return {
        "id": hotel_id,
        "name": name,
        "city": city,
        "city_lower": city.lower(),
        "state": "Karnataka",
        "location": {"latitude": lat, "longitude": lng},
    }


@pytest.fixture
def hotels(fake_repo):
    fake_repo.hotels = [
        _hotel("htl_1", "Palace View", "Mysuru", 12.3051, 76.6551),
        _hotel("htl_2", "Hill Top", "Mysuru", 12.2724, 76.6700),
        _hotel("htl_3", "Garden City Inn", "Bengaluru", 12.9716, 77.5946),
        _hotel("htl_4", "No Coords Lodge", "Mysuru"),
    ]
    return fake_repo.hotels


@pytest.mark.asyncio
async def test_healthz(client):
    response = await client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_hotels_near_city_alias(client, hotels):
    response = await client.get("/hotels/near", params={"city": "Bangalore"})
    assert response.status_code == 200
    assert [h["name"] for h in response.json()["hotels"]] == ["Garden City Inn"]


@pytest.mark.asyncio
async def test_hotels_near_coordinates_sorted_with_distance(client, hotels):
    response = await client.get(
        "/hotels/near", params={"lat": 12.2958, "lng": 76.6394, "radiusKm": 10}
    )
    found = response.json()["hotels"]
    assert [h["name"] for h in found] == ["Palace View", "Hill Top"]
    assert found[0]["distanceKm"] <= found[1]["distanceKm"] <= 10


@pytest.mark.asyncio
async def test_hotels_near_no_match_is_empty(client, hotels):
    response = await client.get("/hotels/near", params={"city": "Atlantis"})
    assert response.json() == {"hotels": []}


@pytest.mark.asyncio
async def test_hotels_near_rejects_bad_radius(client):
    response = await client.get("/hotels/near", params={"lat": 12.3, "lng": 76.6, "radiusKm": -5})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_trips_are_per_user_newest_first(client, as_user, admin_identity, user_identity):
    first = await client.post("/trips", json={"title": "Coorg weekend", "result": {"days": 2}})
    assert first.status_code == 201
    await client.post("/trips", json={"title": "Hampi ruins"})

    as_user(admin_identity)
    await client.post("/trips", json={"title": "Someone else's"})

    as_user(None)
    assert (await client.get("/trips")).status_code == 401

    as_user(user_identity)
    trips = (await client.get("/trips")).json()["trips"]
    assert [t["input"]["title"] for t in trips] == ["Hampi ruins", "Coorg weekend"]
    assert trips[1]["type"] == "custom"
    assert trips[1]["result"] == {"days": 2}
    assert trips[1]["id"] == first.json()["id"]
    assert trips[0]["userId"] == user_identity.user_id


@pytest.mark.asyncio
async def test_transportation_costs(client):
    response = await client.get(
        "/transportation-costs", params={"origin": "Mumbai", "destination": "Delhi", "mode": "road"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["distanceKm"] == 1400
    assert "flights" not in body["data"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [{"origin": "Mumbai"}, {"origin": "Mumbai", "destination": "Delhi", "mode": "hovercraft"}],
)
async def test_transportation_costs_bad_request(client, params):
    response = await client.get("/transportation-costs", params=params)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_geo_reverse(client, monkeypatch):
    place = {"city": "Mysuru", "state": "Karnataka", "displayName": "Mysuru, Karnataka, India"}
    monkeypatch.setattr(geo_service, "reverse_geocode", lambda lat, lng: place)
    response = await client.get("/geo/reverse", params={"lat": 12.3, "lng": 76.6})
    assert response.json() == place

    assert (await client.get("/geo/reverse", params={"lat": 12.3})).status_code == 400


@pytest.mark.asyncio
async def test_geo_reverse_upstream_failure(client, monkeypatch):
    def fail(lat, lng):
        raise GeoLookupError("nominatim down")

    monkeypatch.setattr(geo_service, "reverse_geocode", fail)
    response = await client.get("/geo/reverse", params={"lat": 12.3, "lng": 76.6})
    assert response.status_code == 500
    assert response.json() == {"error": "Reverse geocode failed", "details": "nominatim down"}


@pytest.mark.asyncio
async def test_geo_ip_uses_forwarded_address(client, monkeypatch):
    seen = []

    def locate(ip):
        seen.append(ip)
        return {"lat": 12.97, "lng": 77.59, "city": "Bengaluru", "state": "Karnataka", "ip": ip}

    monkeypatch.setattr(geo_service, "locate_ip", locate)
    response = await client.get("/geo/ip", headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})
    assert response.status_code == 200
    assert response.json()["city"] == "Bengaluru"
    assert seen == ["203.0.113.7"]


@pytest.mark.asyncio
async def test_geo_ip_not_available(client, monkeypatch):
    monkeypatch.setattr(geo_service, "locate_ip", lambda ip: None)
    response = await client.get("/geo/ip")
    assert response.status_code == 404
    assert response.json() == {"error": "Location not available"}


@pytest.mark.asyncio
async def test_csrf_rejects_foreign_origin(client, fake_repo):
    response = await client.post(
        "/trips", json={"title": "x"}, headers={"Origin": "https://evil.example"}
    )
    assert response.status_code == 403
    assert response.json() == {"error": "Origin not allowed"}
    assert fake_repo.trips == []


@pytest.mark.asyncio
async def test_csrf_allows_known_origin_and_reads(client):
    allowed = await client.post(
        "/trips", json={"title": "x"}, headers={"Origin": "http://localhost:3000"}
    )
    assert allowed.status_code == 201
    read = await client.get("/healthz", headers={"Origin": "https://evil.example"})
    assert read.status_code == 200


@pytest.mark.asyncio
async def test_route_cost_quote(client):
    response = await client.get(
        "/transportation-costs/route",
        params={"origin": "Bangalore", "destination": "Chennai", "mode": "taxi"},
    )
    assert response.status_code == 200
    assert response.json() == {
        "origin": "Bangalore",
        "destination": "Chennai",
        "mode": "taxi",
        "cost": 5250,
        "duration": "9 hours",
        "description": "Taxi/cab service",
    }
    assert (await client.get("/transportation-costs/route", params={"origin": "Pune"})).status_code == 400


@pytest_asyncio.fixture
async def lenient_client(app):
    """Client that receives the app's 500 responses instead of re-raising the error."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_unexpected_error_is_json(app, lenient_client, fake_repo):
    fake_repo.hotels = [{"id": "htl_bad", "name": None, "city": "Mysuru", "city_lower": "mysuru"}]
    response = await lenient_client.get("/hotels/near", params={"city": "Mysuru"})
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


@pytest.mark.asyncio
async def test_unconfigured_database_is_json_500(app, lenient_client, monkeypatch):
    monkeypatch.setattr(repository, "get_settings", lambda: Settings(environment="production", mongodb_uri=""))
    repository.shared_repo.cache_clear()
    app.dependency_overrides.pop(repository.get_repo)
    try:
        response = await lenient_client.get("/trips")
    finally:
        repository.shared_repo.cache_clear()
    assert response.status_code == 500
    assert response.json()["error"] == "Database not configured"
    assert "MONGODB_URI" in response.json()["details"]
