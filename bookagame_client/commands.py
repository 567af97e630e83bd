"""User actions, one function per CLI command.

Each command composes the API client, session, validators and slot picker,
prints its result to stdout and raises a ``BookAGameError`` when the action
fails, leaving nothing half-done on the client side.
"""

import logging
from datetime import date as date_cls
from typing import Dict, List, Optional

from bookagame_client import forms
from bookagame_client.bookings import (
    BookingFilter,
    can_cancel,
    can_review,
    filter_bookings,
    owner_schedule,
    week_dates,
)
from bookagame_client.errors import AuthError, BookAGameError, FormError
from bookagame_client.formatting import (
    format_date,
    format_price,
    format_time,
    render_booking,
    render_review,
    render_schedule,
    render_slots,
    render_venue,
)
from bookagame_client.session import AuthSession
from bookagame_client.slot_picker import SlotPicker

logger = logging.getLogger(__name__)


def today() -> str:
    return date_cls.today().isoformat()


def _print_lines(lines: List[str]):
    for line in lines:
        print(line)


# --- Auth ---


def login(session: AuthSession, email: str, password: str):
    credentials = forms.validate_login(email, password)
    if not session.login(credentials.email, credentials.password):
        raise AuthError(session.error or "Login failed")
    user = session.user
    if user is not None:
        print(f"Signed in as {user.name or user.email} ({user.role})")
    else:
        print(f"Signed in as {credentials.email}")


def logout(session: AuthSession):
    session.logout()
    print("Signed out.")


def register(
    session: AuthSession,
    name: str,
    email: str,
    password: str,
    confirm_password: str,
    phone: Optional[str] = None,
    role: str = "user",
):
    data = forms.validate_registration(name, email, password, confirm_password, phone)
    if role == "owner":
        ok = session.register_owner(data)
    else:
        ok = session.register_user(data)
    if not ok:
        raise AuthError(session.error or "Registration failed")
    account = "owner" if role == "owner" else "player"
    print(f"Your {account} account has been created. Please log in with your credentials.")


def show_profile(session: AuthSession):
    user = session.require_user()
    print(f"{user.name} <{user.email}>")
    print(f"Role: {user.role}")
    if user.phone:
        print(f"Phone: {user.phone}")


def update_profile(session: AuthSession, name: Optional[str], phone: Optional[str] = None):
    user = session.require_user()
    changes = forms.validate_profile(name if name is not None else user.name, phone)
    if not session.update_profile(changes):
        raise BookAGameError(session.error or "Update failed")
    print("Profile updated successfully!")


# --- Venues ---


def list_venues(
    session: AuthSession,
    sport_type: Optional[str] = None,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    radius: Optional[float] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
):
    venues = session.client.get_venues(
        sport_type=sport_type, lat=lat, lng=lng, radius=radius, limit=limit, offset=offset
    )
    if not venues:
        print("No venues found.")
        return
    for venue in venues:
        print(render_venue(venue))
    print(f"Summary: Found {len(venues)} venues.")


def show_venue(session: AuthSession, venue_id: str):
    venue = session.client.get_venue(venue_id)
    print(f"{venue.name}")
    print(f"{venue.address}")
    if venue.description:
        print(venue.description)
    print(f"Rating: {venue.rating:.1f} ({venue.review_count} reviews)")
    if venue.amenities:
        print(f"Amenities: {', '.join(venue.amenities)}")
    for day, hours in venue.operating_hours.items():
        print(f"  {day}: {format_time(hours.open)} - {format_time(hours.close)}")
    print("Courts:")
    if not venue.courts:
        print("  No courts listed.")
    for court in venue.courts:
        state = "" if court.is_active else " (inactive)"
        print(f"  {court.id}: {court.name} - {court.sport_type} {format_price(court.base_price)}/hr{state}")


def venue_availability(session: AuthSession, venue_id: str):
    availability = session.client.get_venue_availability(venue_id)
    if not availability:
        print("No availability information.")
        return
    for key, value in availability.items():
        if isinstance(value, list):
            print(f"{key}:")
            for item in value:
                print(f"  - {item}")
        else:
            print(f"{key}: {value}")


def list_sports(session: AuthSession):
    for sport in session.client.get_sport_types():
        print(sport)


def venue_reviews(session: AuthSession, venue_id: str, limit: Optional[int] = None, offset: Optional[int] = None):
    reviews = session.client.get_venue_reviews(venue_id, limit=limit, offset=offset)
    if not reviews:
        print("No reviews yet.")
        return
    for review in reviews:
        _print_lines(render_review(review))


# --- Slots & bookings ---


def select_slots(session: AuthSession, court_id: str, day: str, taps: List[str], picker: Optional[SlotPicker] = None) -> SlotPicker:
    """Loads the court's slots for ``day`` and replays ``taps`` on them."""
    picker = picker or SlotPicker()
    picker.load_for(session.client, court_id, forms.validate_date(day))
    picker.tap_all([forms.validate_time(tap, "slot") for tap in taps])
    return picker


def show_slots(session: AuthSession, court_id: str, day: Optional[str] = None, taps: Optional[List[str]] = None):
    day = day or today()
    picker = select_slots(session, court_id, day, taps or [])
    _print_lines(render_slots(picker, day))
    selected = picker.selected_range
    if selected is not None:
        print(f"Selected: {format_time(selected.start_time)} - {format_time(selected.end_time)}")


def book(session: AuthSession, court_id: str, day: str, taps: List[str]):
    session.require_user()
    picker = select_slots(session, court_id, day, taps)
    if not picker.is_complete:
        raise FormError(f"Please select at least {max(picker.min_slots, 1)} time slot(s)")
    request = forms.validate_booking(court_id, day, picker.selected_range)

    logger.info(f"Booking court {court_id} on {request.date} {request.start_time}-{request.end_time}")
    booking = session.client.create_booking(request)
    print(f"Booked {format_date(request.date)} {format_time(request.start_time)} - {format_time(request.end_time)}")
    if booking is not None:
        print(render_booking(booking))


def list_bookings(session: AuthSession, which: BookingFilter = "upcoming"):
    session.require_user()
    bookings = filter_bookings(session.client.get_bookings(), which)
    if not bookings:
        print(f"No {which} bookings")
        return
    for booking in bookings:
        print(render_booking(booking))


def cancel_booking(session: AuthSession, booking_id: str, reason: Optional[str] = None):
    session.require_user()
    booking = session.client.get_booking(booking_id)
    if not can_cancel(booking):
        raise BookAGameError("Only upcoming confirmed bookings can be cancelled")
    session.client.cancel_booking(booking_id, reason)
    print(f"Booking {booking_id} cancelled.")


def review_booking(session: AuthSession, booking_id: str, rating: int, comment: Optional[str] = None):
    session.require_user()
    request = forms.validate_review(rating, comment)
    booking = session.client.get_booking(booking_id)
    if not can_review(booking):
        raise BookAGameError("Only completed bookings can be reviewed")
    session.client.submit_review(booking_id, request)
    print("Your review has been submitted!")


def my_reviews(session: AuthSession):
    session.require_user()
    reviews = session.client.get_my_reviews()
    if not reviews:
        print("You have not written any reviews yet.")
        return
    for review in reviews:
        _print_lines(render_review(review))


# --- Favorites ---


def list_favorites(session: AuthSession):
    session.require_user()
    favorites = session.client.get_favorites()
    if not favorites:
        print("No favorites yet.")
        return
    for favorite in favorites:
        if favorite.venue is not None:
            print(render_venue(favorite.venue))
        else:
            print(favorite.venue_id)


def add_favorite(session: AuthSession, venue_id: str):
    session.require_user()
    session.client.add_favorite(venue_id)
    print(f"Added {venue_id} to favorites.")


def remove_favorite(session: AuthSession, venue_id: str):
    session.require_user()
    session.client.remove_favorite(venue_id)
    print(f"Removed {venue_id} from favorites.")


# --- Owner ---


def owner_venues(session: AuthSession):
    session.require_owner()
    venues = session.client.owner.get_venues()
    if not venues:
        print("You have no venues yet.")
        return
    for venue in venues:
        status = f" [{venue.status}]" if venue.status else ""
        print(f"{venue.id}: {venue.name} - {venue.address} ({len(venue.courts)} courts){status}")


def save_venue(session: AuthSession, venue_id: Optional[str] = None, **fields):
    session.require_owner()
    request = forms.validate_venue(**fields)
    if venue_id:
        session.client.owner.update_venue(venue_id, request)
        print("Venue updated successfully")
    else:
        session.client.owner.create_venue(request)
        print("Venue created successfully. It will be reviewed by admin.")


def delete_venue(session: AuthSession, venue_id: str):
    session.require_owner()
    session.client.owner.delete_venue(venue_id)
    print(f"Venue {venue_id} deleted.")


def owner_courts(session: AuthSession, venue_id: str):
    session.require_owner()
    courts = session.client.owner.get_venue_courts(venue_id)
    if not courts:
        print("No courts yet.")
        return
    for court in courts:
        state = "" if court.is_active else " (inactive)"
        print(f"{court.id}: {court.name} - {court.sport_type} {format_price(court.base_price)}/hr{state}")


def save_court(
    session: AuthSession, venue_id: str, name: str, sport_type: str, base_price: str, court_id: Optional[str] = None
):
    session.require_owner()
    request = forms.validate_court(name, sport_type, base_price, court_id)
    session.client.owner.create_court(venue_id, request)
    print("Court updated" if court_id else "Court added successfully")


def owner_bookings(session: AuthSession, day: Optional[str] = None, court_id: Optional[str] = None):
    session.require_owner()
    bookings = session.client.owner.get_bookings(date=day, court_id=court_id)
    if not bookings:
        print("No bookings found.")
        return
    for booking in bookings:
        print(render_booking(booking))


def walk_in(session: AuthSession, court_id: str, day: str, taps: List[str], guest_name: str, guest_phone: str):
    session.require_owner()
    picker = select_slots(session, court_id, day, taps)
    request = forms.validate_walkin(court_id, day, picker.selection, guest_name, guest_phone)
    session.client.owner.create_walkin(request)
    print("Walk-in booking created successfully")


def block_slot(
    session: AuthSession, court_id: str, day: str, start_time: str, end_time: str, reason: Optional[str] = None
):
    session.require_owner()
    request = forms.validate_blocked_slot(court_id, day, start_time, end_time, reason)
    session.client.owner.create_blocked_slot(court_id, request)
    print("Time slot blocked successfully")


def list_blocked(session: AuthSession, court_id: str):
    session.require_owner()
    slots = session.client.owner.get_blocked_slots(court_id)
    if not slots:
        print("No blocked slots.")
        return
    for slot in sorted(slots, key=lambda s: (s.date, s.start_time)):
        reason = f" - {slot.reason}" if slot.reason else ""
        print(f"{slot.id}: {format_date(slot.date)} {format_time(slot.start_time)} - {format_time(slot.end_time)}{reason}")


def unblock_slot(session: AuthSession, slot_id: str):
    session.require_owner()
    session.client.owner.delete_blocked_slot(slot_id)
    print(f"Blocked slot {slot_id} removed.")


def earnings(session: AuthSession):
    session.require_owner()
    summary = session.client.owner.get_earnings_summary()
    print(f"Total earnings:  {format_price(summary.total_earnings)}")
    print(f"This week:       {format_price(summary.this_week)}")
    print(f"This month:      {format_price(summary.this_month)}")
    print(f"Pending payouts: {format_price(summary.pending_payouts)}")


def dashboard(session: AuthSession):
    user = session.require_owner()
    stats = session.client.owner.get_dashboard_stats()
    first_name = (user.name or "Owner").split(" ")[0]
    print(f"Welcome back, {first_name}!")
    print(f"Today's bookings: {stats.today_bookings}")
    print(f"Week earnings:    {format_price(stats.week_earnings)}")
    print(f"Pending bookings: {stats.pending_bookings}")
    print(f"Active venues:    {stats.active_venues}")


def schedule(session: AuthSession, day: Optional[str] = None, venue_id: Optional[str] = None):
    """Prints one day's bookings and blocked slots across the owner's courts."""
    session.require_owner()
    day = forms.validate_date(day or today())

    venues = session.client.owner.get_venues()
    if venue_id:
        venues = [v for v in venues if v.id == venue_id]

    court_names: Dict[str, str] = {}
    blocked = []
    for venue in venues:
        for court in venue.courts:
            court_names[court.id] = f"{venue.name} / {court.name}"
            blocked.extend(session.client.owner.get_blocked_slots(court.id))

    bookings = session.client.owner.get_bookings(date=day)
    if venue_id:
        bookings = [b for b in bookings if b.court_id in court_names]
    _print_lines(render_schedule(owner_schedule(bookings, blocked, day), court_names))


def week(session: AuthSession, venue_id: Optional[str] = None):
    """One line per day from two days ago to four days ahead."""
    session.require_owner()
    court_ids = None
    if venue_id:
        venues = [v for v in session.client.owner.get_venues() if v.id == venue_id]
        court_ids = {court.id for venue in venues for court in venue.courts}

    bookings = session.client.owner.get_bookings()
    for day in week_dates():
        iso = day.isoformat()
        booked = [
            b
            for b in bookings
            if b.date == iso and b.status != "cancelled" and (court_ids is None or b.court_id in court_ids)
        ]
        marker = " <- today" if iso == today() else ""
        print(f"{format_date(iso)}: {len(booked)} booking{'s' if len(booked) != 1 else ''}{marker}")
