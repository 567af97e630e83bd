from datetime import datetime
from typing import List, Optional

from bookagame_client.bookings import DaySchedule
from bookagame_client.models import Booking, Review, TimeSlot, VenueListItem
from bookagame_client.slot_picker import SlotPicker

CURRENCY = "Rs."


def format_time(value: str) -> str:
    """'13:30' -> '1:30 PM'."""
    hours, minutes = value.split(":")[:2]
    hour = int(hours)
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minutes} {suffix}"


def format_date(value: str) -> str:
    """'2025-01-06' -> 'Mon, Jan 6'."""
    day = datetime.strptime(value, "%Y-%m-%d")
    return f"{day.strftime('%a, %b')} {day.day}"


def format_price(amount: float) -> str:
    return f"{CURRENCY} {amount:g}"


def status_label(status: str) -> str:
    return status.replace("_", " ").capitalize()


def render_slots(picker: SlotPicker, date: str) -> List[str]:
    """Availability grid for one court and date, marking the current selection."""
    lines = [f"--- Slots for {format_date(date)} ---"]
    if not picker.slots:
        lines.append("No slots available for this date")
        return lines

    for slot in picker.slots:
        lines.append(f"{_slot_marker(picker, slot)} {format_time(slot.start_time)} - {format_time(slot.end_time)}")

    lines.append(f"{picker.available_count} available | Max {picker.max_slots} consecutive hours")
    if picker.hours_selected:
        hours = picker.hours_selected
        lines.append(f"{hours} hour{'s' if hours > 1 else ''} selected")
    return lines


def _slot_marker(picker: SlotPicker, slot: TimeSlot) -> str:
    if picker.is_selected(slot.start_time):
        return "[SELECTED] "
    if slot.status == "available":
        return "[AVAILABLE]"
    return f"[{slot.status.upper()}]".ljust(11)


def render_booking(booking: Booking) -> str:
    venue = booking.venue.name if booking.venue else "Venue"
    court = booking.court.name if booking.court else "Court"
    sport = booking.court.sport_type if booking.court and booking.court.sport_type else "Sport"
    when = f"{format_date(booking.date)} {format_time(booking.start_time)} - {format_time(booking.end_time)}"
    line = f"[{status_label(booking.status)}] {booking.id}: {venue} / {court} ({sport}) {when} {format_price(booking.final_price)}"
    if booking.source == "walk_in":
        guest = getattr(booking, "user_name", None)
        line += f" walk-in{f' for {guest}' if guest else ''}"
    return line


def render_venue(venue: VenueListItem) -> str:
    sports = ", ".join(venue.sport_types) or "-"
    distance = f" {venue.distance:.1f} km" if venue.distance is not None else ""
    return (
        f"{venue.id}: {venue.name} - {venue.address} | {sports} | "
        f"from {format_price(venue.min_price)}/hr | {venue.rating:.1f} ({venue.review_count}){distance}"
    )


def render_review(review: Review) -> List[str]:
    author = review.user.name if review.user else "Anonymous"
    lines = [f"{'*' * review.rating}{'.' * (5 - review.rating)} {author}"]
    if review.comment:
        lines.append(f"  {review.comment}")
    if review.owner_response:
        lines.append(f"  Owner: {review.owner_response}")
    return lines


def render_schedule(schedule: DaySchedule, court_names: Optional[dict] = None) -> List[str]:
    court_names = court_names or {}
    lines = [f"--- Schedule for {format_date(schedule.date)} ---"]
    if schedule.is_empty:
        lines.append("No bookings or blocked slots")
        return lines
    for booking in schedule.bookings:
        court = court_names.get(booking.court_id, booking.court_id)
        guest = booking.user_name or "Guest"
        lines.append(
            f"[BOOKED]  {format_time(booking.start_time)} - {format_time(booking.end_time)} {court}: "
            f"{guest} ({status_label(booking.status)})"
        )
    for slot in schedule.blocked_slots:
        court = court_names.get(slot.court_id, slot.court_id)
        reason = f": {slot.reason}" if slot.reason else ""
        lines.append(f"[BLOCKED] {format_time(slot.start_time)} - {format_time(slot.end_time)} {court}{reason} ({slot.id})")
    return lines
