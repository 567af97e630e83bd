from datetime import datetime
from typing import List, Optional

from bookagame_client import config
from bookagame_client.bookings import walkin_end_time
from bookagame_client.errors import FormError
from bookagame_client.models import (
    BlockedSlotRequest,
    CourtRequest,
    CreateBookingRequest,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    ReviewRequest,
    SlotRange,
    VenueRequest,
    WalkinRequest,
)


def _strip(value: Optional[str]) -> str:
    return (value or "").strip()


def validate_time(value: str, label: str = "time") -> str:
    """Checks an HH:MM string and returns it zero-padded."""
    try:
        return datetime.strptime(value.strip(), "%H:%M").strftime("%H:%M")
    except (ValueError, AttributeError):
        raise FormError(f"Invalid {label} '{value}', expected HH:MM")


def validate_date(value: str) -> str:
    """Checks a YYYY-MM-DD string."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").strftime("%Y-%m-%d")
    except (ValueError, AttributeError):
        raise FormError(f"Invalid date '{value}', expected YYYY-MM-DD")


def validate_login(email: str, password: str) -> LoginRequest:
    if not _strip(email) or not _strip(password):
        raise FormError("Please enter both email and password")
    return LoginRequest(email=email.strip(), password=password)


def validate_registration(
    name: str, email: str, password: str, confirm_password: str, phone: Optional[str] = None
) -> RegisterRequest:
    if not _strip(name) or not _strip(email) or not _strip(password):
        raise FormError("Please fill in all required fields")
    if password != confirm_password:
        raise FormError("Passwords do not match")
    if len(password) < config.MIN_PASSWORD_LENGTH:
        raise FormError(f"Password must be at least {config.MIN_PASSWORD_LENGTH} characters")
    return RegisterRequest(name=name.strip(), email=email.strip(), password=password, phone=_strip(phone) or None)


def validate_profile(name: Optional[str], phone: Optional[str] = None) -> ProfileUpdate:
    if not _strip(name):
        raise FormError("Name is required")
    return ProfileUpdate(name=name.strip(), phone=_strip(phone) or None)


def validate_court(name: str, sport_type: str, base_price: str, court_id: Optional[str] = None) -> CourtRequest:
    if not _strip(name):
        raise FormError("Court name is required")
    if not _strip(sport_type):
        raise FormError("Please select a sport type")
    try:
        price = float(base_price)
    except (TypeError, ValueError):
        raise FormError("Please enter a valid hourly rate")
    if price != price or price < 0:  # NaN or negative
        raise FormError("Please enter a valid hourly rate")
    return CourtRequest(name=name.strip(), sport_type=sport_type.strip(), base_price=price, id=court_id)


def validate_venue(
    name: str,
    address: str,
    sport_types: List[str],
    description: str = "",
    phone: str = "",
    latitude: Optional[str] = None,
    longitude: Optional[str] = None,
    opening_time: str = "06:00",
    closing_time: str = "22:00",
) -> VenueRequest:
    if not _strip(name):
        raise FormError("Venue name is required")
    if not _strip(address):
        raise FormError("Address is required")
    if not sport_types:
        raise FormError("Select at least one sport type")

    coords = []
    for label, raw in (("latitude", latitude), ("longitude", longitude)):
        if not _strip(raw):
            coords.append(None)
            continue
        try:
            coords.append(float(raw))
        except ValueError:
            raise FormError(f"Invalid {label} '{raw}'")

    opening = validate_time(opening_time, "opening time")
    closing = validate_time(closing_time, "closing time")
    if opening >= closing:
        raise FormError("Closing time must be after opening time")

    return VenueRequest(
        name=name.strip(),
        address=address.strip(),
        description=_strip(description),
        phone=_strip(phone),
        sport_types=list(sport_types),
        lat=coords[0],
        lng=coords[1],
        opening_time=opening,
        closing_time=closing,
    )


def validate_blocked_slot(
    court_id: Optional[str], date: str, start_time: Optional[str], end_time: Optional[str], reason: Optional[str] = None
) -> BlockedSlotRequest:
    if not _strip(court_id):
        raise FormError("Please select a court")
    if not _strip(start_time) or not _strip(end_time):
        raise FormError("Please select start and end time")
    start = validate_time(start_time, "start time")
    end = validate_time(end_time, "end time")
    if start not in config.TIME_OPTIONS or end not in config.TIME_OPTIONS:
        raise FormError(f"Times must be on the hour between {config.TIME_OPTIONS[0]} and {config.TIME_OPTIONS[-1]}")
    if config.TIME_OPTIONS.index(start) >= config.TIME_OPTIONS.index(end):
        raise FormError("End time must be after start time")
    return BlockedSlotRequest(date=validate_date(date), start_time=start, end_time=end, reason=_strip(reason) or None)


def validate_booking(court_id: str, date: str, selected: Optional[SlotRange]) -> CreateBookingRequest:
    if not _strip(court_id):
        raise FormError("Please select a court")
    if selected is None:
        raise FormError("Please select at least one time slot")
    return CreateBookingRequest(
        court_id=court_id, date=validate_date(date), start_time=selected.start_time, end_time=selected.end_time
    )


def validate_walkin(
    court_id: Optional[str], date: str, selected_slots: List[str], guest_name: str, guest_phone: str
) -> WalkinRequest:
    if not selected_slots:
        raise FormError("Please select at least one time slot")
    if not _strip(guest_name):
        raise FormError("Please enter guest name")
    if not _strip(guest_phone):
        raise FormError("Please enter guest phone")
    if not _strip(court_id):
        raise FormError("Please select a court")
    ordered = sorted(selected_slots)
    return WalkinRequest(
        court_id=court_id,
        date=validate_date(date),
        start_time=ordered[0],
        end_time=walkin_end_time(ordered),
        guest_name=guest_name.strip(),
        guest_phone=guest_phone.strip(),
    )


def validate_review(rating: int, comment: Optional[str] = None) -> ReviewRequest:
    if not isinstance(rating, int) or not 1 <= rating <= 5:
        raise FormError("Rating must be between 1 and 5")
    return ReviewRequest(rating=rating, comment=_strip(comment) or None)
