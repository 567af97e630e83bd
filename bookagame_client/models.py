from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SlotStatus = Literal["available", "booked", "blocked"]
BookingStatus = Literal["confirmed", "completed", "cancelled"]
BookingSource = Literal["online", "walk_in"]
Role = Literal["user", "owner", "admin"]


class ApiModel(BaseModel):
    # The API grows fields faster than the client; ignore what we don't know.
    model_config = ConfigDict(extra="ignore")


# --- Users & auth ---


class User(ApiModel):
    id: str
    email: str
    name: str = ""
    phone: str | None = None
    role: Role = "user"
    avatar_url: str | None = None
    created_at: str | None = None


class AuthTokens(ApiModel):
    access_token: str
    refresh_token: str


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str
    phone: str | None = None


class ProfileUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    avatar_url: str | None = None


# --- Venues & courts ---


class OpeningHours(ApiModel):
    open: str
    close: str


class Court(ApiModel):
    id: str
    venue_id: str | None = None
    name: str
    sport_type: str = ""
    base_price: float = 0.0
    photos: List[str] = Field(default_factory=list)
    is_active: bool = True


class Venue(ApiModel):
    id: str
    name: str
    address: str = ""
    latitude: float | None = None
    longitude: float | None = None
    photos: List[str] = Field(default_factory=list)
    description: str | None = None
    operating_hours: Dict[str, OpeningHours] = Field(default_factory=dict)
    amenities: List[str] = Field(default_factory=list)
    rating: float = 0.0
    review_count: int = 0
    courts: List[Court] = Field(default_factory=list)
    owner_id: str | None = None
    status: Literal["pending", "approved", "rejected"] | None = None


class VenueListItem(ApiModel):
    id: str
    name: str
    address: str = ""
    latitude: float | None = None
    longitude: float | None = None
    main_photo: str | None = None
    rating: float = 0.0
    review_count: int = 0
    min_price: float = 0.0
    max_price: float = 0.0
    sport_types: List[str] = Field(default_factory=list)
    distance: float | None = None


class CourtRequest(BaseModel):
    name: str
    sport_type: str
    base_price: float
    id: str | None = None


class VenueRequest(BaseModel):
    name: str
    address: str
    description: str = ""
    phone: str = ""
    sport_types: List[str]
    lat: float | None = None
    lng: float | None = None
    opening_time: str = "06:00"
    closing_time: str = "22:00"


# --- Slots & bookings ---


class TimeSlot(ApiModel):
    start_time: str  # "09:00"
    end_time: str  # "10:00"
    status: SlotStatus = "available"
    booking_id: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _missing_status_is_available(cls, value):
        return "available" if value is None else value

    @property
    def is_available(self) -> bool:
        return self.status == "available"


class SlotRange(BaseModel):
    """A contiguous run of selected slots, as sent to the booking endpoints."""

    start_time: str
    end_time: str


class Booking(ApiModel):
    id: str
    user_id: str | None = None
    court_id: str
    date: str  # YYYY-MM-DD
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    original_price: float = 0.0
    final_price: float = 0.0
    status: BookingStatus
    source: BookingSource = "online"
    court: Court | None = None
    venue: Venue | None = None
    created_at: str | None = None


class OwnerBooking(Booking):
    user_name: str | None = None
    user_phone: str | None = None


class CreateBookingRequest(BaseModel):
    court_id: str
    date: str
    start_time: str
    end_time: str


class WalkinRequest(CreateBookingRequest):
    guest_name: str
    guest_phone: str


class BlockedSlot(ApiModel):
    id: str
    court_id: str
    date: str
    start_time: str
    end_time: str
    reason: str | None = None


class BlockedSlotRequest(BaseModel):
    date: str
    start_time: str
    end_time: str
    reason: str | None = None


# --- Reviews & favorites ---


class ReviewAuthor(ApiModel):
    name: str
    avatar_url: str | None = None


class Review(ApiModel):
    id: str
    booking_id: str | None = None
    user_id: str | None = None
    venue_id: str | None = None
    rating: int
    comment: str | None = None
    owner_response: str | None = None
    created_at: str | None = None
    user: ReviewAuthor | None = None


class ReviewRequest(BaseModel):
    rating: int
    comment: str | None = None


class Favorite(ApiModel):
    id: str
    user_id: str | None = None
    venue_id: str
    venue: VenueListItem | None = None
    created_at: str | None = None


# --- Owner dashboard ---


class EarningsSummary(ApiModel):
    total_earnings: float = 0.0
    this_week: float = 0.0
    this_month: float = 0.0
    pending_payouts: float = 0.0


class DashboardStats(ApiModel):
    today_bookings: int = 0
    week_earnings: float = 0.0
    pending_bookings: int = 0
    active_venues: int = 0
