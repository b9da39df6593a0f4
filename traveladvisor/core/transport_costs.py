"""
Reference transportation pricing between major Indian cities.

Quotes are derived from a static city-pair distance table and market-rate
constants; there is no live fare source behind them.
"""

from datetime import datetime, timezone
from typing import Any

DEFAULT_DISTANCE_KM = 500

CITY_DISTANCES_KM: dict[str, dict[str, int]] = {
    "mumbai": {"delhi": 1400, "bangalore": 850, "chennai": 1300, "kolkata": 2000},
    "delhi": {"mumbai": 1400, "bangalore": 2100, "chennai": 2200, "kolkata": 1500},
    "bangalore": {"mumbai": 850, "delhi": 2100, "chennai": 350, "kolkata": 1800},
    "chennai": {"mumbai": 1300, "delhi": 2200, "bangalore": 350, "kolkata": 1700},
    "kolkata": {"mumbai": 2000, "delhi": 1500, "bangalore": 1800, "chennai": 1700},
}

# Names the distance table is keyed by
_CITY_KEYS = {
    "bengaluru": "bangalore",
    "bombay": "mumbai",
    "new delhi": "delhi",
    "calcutta": "kolkata",
    "madras": "chennai",
}

FALLBACK_PRICING: dict[str, dict[str, Any]] = {
    "flights": {"economy": 4500, "business": 12000, "source": "Market Research"},
    "trains": {
        "sleeper": 400,
        "ac3": 1200,
        "ac2": 2500,
        "ac1": 4500,
        "source": "IRCTC Market Rates",
    },
    "buses": {
        "ordinary": 150,
        "semiLuxury": 300,
        "luxury": 600,
        "source": "State Transport Corporations",
    },
    "taxis": {"perKm": 15, "perDay": 2000, "source": "Ola/Uber Market Rates"},
    "selfDrive": {"fuelPerKm": 8, "rentalPerDay": 1500, "source": "Fuel Price Index"},
}

MODES = ("all", "road", "flights", "trains", "buses", "taxis", "selfDrive")
ROAD_MODES = ("trains", "buses", "taxis", "selfDrive")


def _city_key(name: str) -> str:
    key = name.strip().lower()
    return _CITY_KEYS.get(key, key)


def city_distance_km(origin: str, destination: str) -> int:
    """Road/rail distance from the table, DEFAULT_DISTANCE_KM for unknown pairs."""
    return CITY_DISTANCES_KM.get(_city_key(origin), {}).get(
        _city_key(destination), DEFAULT_DISTANCE_KM
    )


def flight_prices(distance_km: float) -> dict[str, Any]:
    economy = 3000 + distance_km * 0.5
    return {
        "economy": round(economy),
        "business": round(economy * 2.5),
        "source": "Distance-based estimate",
    }


def train_prices(distance_km: float) -> dict[str, Any]:
    return {
        "sleeper": round(200 + distance_km * 0.3),
        "ac3": round(600 + distance_km * 0.8),
        "ac2": round(1200 + distance_km * 1.5),
        "ac1": round(2000 + distance_km * 2.5),
        "source": "Distance-based estimate",
    }


def bus_prices(distance_km: float) -> dict[str, Any]:
    return {
        "ordinary": round(50 + distance_km * 0.2),
        "semiLuxury": round(100 + distance_km * 0.4),
        "luxury": round(200 + distance_km * 0.8),
        "source": "Distance-based estimate",
    }


def _wanted(mode: str | None) -> set[str]:
    if not mode or mode == "all":
        return {"flights", *ROAD_MODES}
    if mode == "road":
        return set(ROAD_MODES)
    if mode not in MODES:
        raise ValueError(f"Unknown mode '{mode}'")
    return {mode}


def transport_costs(origin: str, destination: str, mode: str | None = None) -> dict[str, Any]:
    """
    Price quotes for the requested mode group.

    Args:
        origin, destination: City names
        mode: all (default) | road (everything but flights) | a single mode

    Raises:
        ValueError: unknown mode
    """
    wanted = _wanted(mode)
    distance = city_distance_km(origin, destination)
    last_updated = datetime.now(timezone.utc).isoformat()

    quotes = {
        "flights": flight_prices(distance),
        "trains": train_prices(distance),
        "buses": bus_prices(distance),
        "taxis": {"perKm": 15.5, "perDay": 2200, "source": "Market rate"},
        "selfDrive": {"fuelPerKm": 8.5, "rentalPerDay": 1500, "source": "Market rate"},
    }
    data = {}
    for name in ("flights", "trains", "buses", "taxis", "selfDrive"):
        if name in wanted:
            data[name] = {**quotes[name], "lastUpdated": last_updated}

    return {
        "success": True,
        "origin": origin,
        "destination": destination,
        "distanceKm": distance,
        "data": data,
        "timestamp": last_updated,
    }


def route_cost(
    origin: str, destination: str, mode: str, pricing: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Single-traveller cost, rough duration and description for one mode."""
    pricing = pricing or FALLBACK_PRICING
    distance = city_distance_km(origin, destination)
    key = mode.lower()

    if key in ("flight", "flights"):
        return {
            "cost": pricing["flights"]["economy"],
            "duration": f"{round(distance / 600)} hours",
            "description": f"Direct flight from {origin} to {destination}",
        }
    if key in ("bus", "buses"):
        return {
            "cost": pricing["buses"]["semiLuxury"],
            "duration": f"{round(distance / 50)} hours",
            "description": "Semi-luxury bus service",
        }
    if key in ("taxi", "taxis"):
        return {
            "cost": round(pricing["taxis"]["perKm"] * distance),
            "duration": f"{round(distance / 40)} hours",
            "description": "Taxi/cab service",
        }
    if key in ("self-drive", "selfdrive"):
        self_drive = pricing["selfDrive"]
        return {
            "cost": round(self_drive["fuelPerKm"] * distance + self_drive["rentalPerDay"]),
            "duration": f"{round(distance / 50)} hours",
            "description": "Self-drive with car rental",
        }
    # trains, and anything unrecognised
    return {
        "cost": pricing["trains"]["ac3"],
        "duration": f"{round(distance / 60)} hours",
        "description": "AC 3-tier train journey",
    }
