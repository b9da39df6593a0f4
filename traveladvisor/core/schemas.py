from datetime import date
from enum import Enum
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for API bodies: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Trip planning
# =============================================================================


class TravelStyle(str, Enum):
    BUDGET = "budget"
    BALANCED = "balanced"
    LUXURY = "luxury"
    ADVENTURE = "adventure"


class AccommodationType(str, Enum):
    HOTEL = "hotel"
    HOSTEL = "hostel"
    HOMESTAY = "homestay"
    GUESTHOUSE = "guesthouse"
    RESORT = "resort"
    CAMPING = "camping"


class TransportationType(str, Enum):
    MIX = "mix"
    PUBLIC = "public"
    BUS = "bus"
    TRAIN = "train"
    FLIGHT = "flight"
    TAXI = "taxi"
    OWN_VEHICLE = "own-vehicle"


def _split_tags(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Accepts either a JSON list or a comma-separated string
TagList = Annotated[list[str], BeforeValidator(_split_tags)]
OptionalEmail = Annotated[EmailStr | None, BeforeValidator(_blank_to_none)]


class TripRequest(CamelModel):
    """Parameters for a day-by-day plan. Immutable once submitted."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    places: TagList = Field(..., description="Destinations, e.g. ['Mysuru', 'Coorg']")
    days: int = Field(3, ge=1, le=60)
    travelers: int = Field(2, ge=1, le=50)
    budget: float | None = Field(None, gt=0, description="Total budget in INR")
    travel_style: TravelStyle = TravelStyle.BALANCED
    accommodation_type: AccommodationType = AccommodationType.HOTEL
    transportation_type: TransportationType = TransportationType.MIX
    interests: TagList = Field(default_factory=list)
    dietary_restrictions: TagList = Field(default_factory=list)
    accessibility: TagList = Field(default_factory=list)
    start_date: date | None = None
    end_date: date | None = None
    special_requests: str | None = Field(None, max_length=1000)
    fuel_cost_per_liter: float | None = Field(None, gt=0)
    vehicle_mileage: float | None = Field(None, gt=0, description="km per liter")

    @field_validator("places")
    @classmethod
    def places_not_empty(cls, value: list[str]) -> list[str]:
        cleaned = [p.strip() for p in value if p and p.strip()]
        if not cleaned:
            raise ValueError("Missing places")
        return cleaned

    @model_validator(mode="after")
    def check_date_range(self) -> "TripRequest":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class SuggestRequest(CamelModel):
    """Parameters for budget-driven destination suggestions."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    budget_inr: float = Field(..., gt=0, alias="budgetINR")
    days: int = Field(3, ge=1, le=60)
    origin: str | None = None
    travel_style: TravelStyle = TravelStyle.BALANCED
    interests: TagList = Field(default_factory=list)
    preferred_season: str | None = None
    group_size: int = Field(2, ge=1, le=50)


class BudgetBreakdown(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    accommodation: int
    transportation: int
    food: int
    attractions: int
    miscellaneous: int
    total: int


# =============================================================================
# Places
# =============================================================================


class ChatPlacesRequest(CamelModel):
    message: str = Field(..., min_length=1, max_length=300)
    city: str | None = None
    count: int = Field(6, ge=1, le=20)


class Place(CamelModel):
    title: str
    description: str = ""
    image_url: str | None = None
    wiki_title: str | None = None
    maps_url: str | None = None


# =============================================================================
# Partner hotels
# =============================================================================


class GeoPoint(BaseModel):
    latitude: float | None = None
    longitude: float | None = None


class PartnerHotelCreate(CamelModel):
    name: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str | None = None
    address: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    price_per_night_inr: float | None = Field(None, ge=0, alias="pricePerNightINR")
    rating: float | None = Field(None, ge=0, le=5)
    amenities: list[str] = Field(default_factory=list)
    maps_url: str | None = None
    website: str | None = None
    contact: str | None = None

    @field_validator("name", "city")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class PartnerHotelUpdate(CamelModel):
    name: str | None = None
    city: str | None = None
    state: str | None = None
    address: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    price_per_night_inr: float | None = Field(None, ge=0, alias="pricePerNightINR")
    rating: float | None = Field(None, ge=0, le=5)
    amenities: list[str] | None = None
    maps_url: str | None = None
    website: str | None = None
    contact: str | None = None

    # Omitted fields are left alone; an explicit null would erase a required field
    @field_validator("name", "city")
    @classmethod
    def not_blank(cls, value: str | None) -> str:
        if value is None or not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("amenities")
    @classmethod
    def amenities_not_null(cls, value: list[str] | None) -> list[str]:
        if value is None:
            raise ValueError("must not be null")
        return value


class PartnerHotel(CamelModel):
    id: str
    name: str
    city: str
    city_lower: str = ""
    state: str | None = None
    address: str | None = None
    location: GeoPoint = Field(default_factory=GeoPoint)
    price_per_night_inr: float | None = Field(None, alias="pricePerNightINR")
    rating: float | None = None
    amenities: list[str] = Field(default_factory=list)
    maps_url: str | None = None
    website: str | None = None
    contact: str | None = None
    created_at: int | None = None
    created_by: str | None = None
    updated_at: int | None = None
    updated_by: str | None = None
    distance_km: float | None = None


# =============================================================================
# Events
# =============================================================================


class EventCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    event_date: date = Field(..., description="ISO date of the event")
    city: str | None = None
    state: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    category: str = "General"
    price: float | None = Field(None, ge=0)
    max_capacity: int | None = Field(None, ge=0)
    current_capacity: int = Field(0, ge=0)
    image_url: str | None = None
    organizer: str | None = None
    contact_email: OptionalEmail = None
    contact_phone: str | None = None
    maps_url: str | None = None
    website: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_active: bool = True


class EventUpdate(CamelModel):
    title: str | None = None
    description: str | None = None
    location: str | None = None
    event_date: date | None = None
    city: str | None = None
    state: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    category: str | None = None
    price: float | None = Field(None, ge=0)
    max_capacity: int | None = Field(None, ge=0)
    current_capacity: int | None = Field(None, ge=0)
    image_url: str | None = None
    organizer: str | None = None
    contact_email: OptionalEmail = None
    contact_phone: str | None = None
    maps_url: str | None = None
    website: str | None = None
    tags: list[str] | None = None
    is_active: bool | None = None

    @field_validator("title", "description", "location")
    @classmethod
    def not_blank(cls, value: str | None) -> str:
        if value is None or not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("event_date", "category", "current_capacity", "tags", "is_active")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must not be null")
        return value


class Event(CamelModel):
    """Stored event as returned to clients; event_date as an ISO timestamp."""

    id: str
    title: str
    description: str = ""
    location: str = ""
    event_date: str | None = None
    city: str | None = None
    state: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    category: str = "General"
    price: float | None = None
    max_capacity: int | None = None
    current_capacity: int = 0
    image_url: str | None = None
    organizer: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    maps_url: str | None = None
    website: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_active: bool = True
    created_at: int | None = None
    created_by: str | None = None
    updated_at: int | None = None
    updated_by: str | None = None


# =============================================================================
# Identity
# =============================================================================


class Identity(BaseModel):
    """Authenticated caller as resolved from a Clerk session token."""

    user_id: str
    email: str | None = None
