"""
Budget estimation for trip plans when the traveller does not supply a budget.

All rates are INR per person per day. The travel style picks the base row;
accommodation and transport types scale the accommodation and transport rates.
"""

import math

from traveladvisor.core.schemas import (
    AccommodationType,
    BudgetBreakdown,
    TransportationType,
    TravelStyle,
)

# Kilometres assumed to be driven per day on an own-vehicle trip
OWN_VEHICLE_KM_PER_DAY = 200

MISC_SHARE = 0.10

STYLE_RATES: dict[TravelStyle, dict[str, int]] = {
    TravelStyle.BUDGET: {
        "accommodation": 800,
        "transportation": 400,
        "food": 500,
        "attractions": 200,
    },
    TravelStyle.BALANCED: {
        "accommodation": 2000,
        "transportation": 800,
        "food": 1000,
        "attractions": 500,
    },
    TravelStyle.ADVENTURE: {
        "accommodation": 1500,
        "transportation": 1200,
        "food": 900,
        "attractions": 1500,
    },
    TravelStyle.LUXURY: {
        "accommodation": 6000,
        "transportation": 2500,
        "food": 2500,
        "attractions": 1500,
    },
}

ACCOMMODATION_MULTIPLIERS: dict[AccommodationType, float] = {
    AccommodationType.CAMPING: 0.4,
    AccommodationType.HOSTEL: 0.5,
    AccommodationType.GUESTHOUSE: 0.7,
    AccommodationType.HOMESTAY: 0.8,
    AccommodationType.HOTEL: 1.0,
    AccommodationType.RESORT: 1.6,
}

TRANSPORT_MULTIPLIERS: dict[TransportationType, float] = {
    TransportationType.BUS: 0.5,
    TransportationType.PUBLIC: 0.6,
    TransportationType.TRAIN: 0.8,
    TransportationType.MIX: 1.0,
    TransportationType.OWN_VEHICLE: 1.0,
    TransportationType.TAXI: 1.5,
    TransportationType.FLIGHT: 2.5,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def own_vehicle_fuel_cost(days: int, fuel_cost_per_liter: float, vehicle_mileage: float) -> int:
    """Fuel for the whole party: (days x 200 km) / km-per-liter x cost-per-liter."""
    liters = (days * OWN_VEHICLE_KM_PER_DAY) / vehicle_mileage
    return round_half_up(liters * fuel_cost_per_liter)


def estimate_budget(
    days: int,
    travelers: int,
    travel_style: TravelStyle | str = TravelStyle.BALANCED,
    accommodation_type: AccommodationType | str = AccommodationType.HOTEL,
    transportation_type: TransportationType | str = TransportationType.MIX,
    fuel_cost_per_liter: float | None = None,
    vehicle_mileage: float | None = None,
) -> BudgetBreakdown:
    """
    Derive a budget breakdown from the fixed rate tables.

    Args:
        days: Trip length (>= 1)
        travelers: Party size (>= 1)
        travel_style: Picks the base rate row
        accommodation_type: Scales the accommodation rate
        transportation_type: Scales the transport rate; "own-vehicle" with fuel
            figures switches transport to a fuel-cost estimate
        fuel_cost_per_liter: INR per liter (own-vehicle only)
        vehicle_mileage: km per liter (own-vehicle only)

    Returns:
        BudgetBreakdown with misc = 10% of the other four categories

    Raises:
        ValueError: days/travelers below 1 or a value outside the enumerations
    """
    if days < 1 or travelers < 1:
        raise ValueError("days and travelers must be at least 1")

    style = TravelStyle(travel_style)
    accommodation = AccommodationType(accommodation_type)
    transport = TransportationType(transportation_type)

    rates = STYLE_RATES[style]
    person_days = days * travelers

    accommodation_total = round_half_up(
        rates["accommodation"] * ACCOMMODATION_MULTIPLIERS[accommodation] * person_days
    )
    if transport is TransportationType.OWN_VEHICLE and fuel_cost_per_liter and vehicle_mileage:
        transport_total = own_vehicle_fuel_cost(days, fuel_cost_per_liter, vehicle_mileage)
    else:
        transport_total = round_half_up(
            rates["transportation"] * TRANSPORT_MULTIPLIERS[transport] * person_days
        )
    food_total = round_half_up(rates["food"] * person_days)
    attractions_total = round_half_up(rates["attractions"] * person_days)

    subtotal = accommodation_total + transport_total + food_total + attractions_total
    miscellaneous = round_half_up(subtotal * MISC_SHARE)

    return BudgetBreakdown(
        accommodation=accommodation_total,
        transportation=transport_total,
        food=food_total,
        attractions=attractions_total,
        miscellaneous=miscellaneous,
        total=subtotal + miscellaneous,
    )
