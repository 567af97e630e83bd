import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Literal, Optional

from bookagame_client import config
from bookagame_client.models import BlockedSlot, Booking, OwnerBooking

logger = logging.getLogger(__name__)

BookingFilter = Literal["upcoming", "past", "cancelled"]
BOOKING_FILTERS = ("upcoming", "past", "cancelled")


def booking_start(booking: Booking) -> datetime:
    """Local start datetime of a booking."""
    return datetime.strptime(f"{booking.date} {booking.start_time}", "%Y-%m-%d %H:%M")


def is_upcoming(booking: Booking, now: Optional[datetime] = None) -> bool:
    """A confirmed booking whose start is still ahead."""
    if booking.status != "confirmed":
        return False
    return booking_start(booking) > (now or datetime.now())


def can_cancel(booking: Booking, now: Optional[datetime] = None) -> bool:
    return is_upcoming(booking, now)


def can_review(booking: Booking) -> bool:
    return booking.status == "completed"


def filter_bookings(bookings: List[Booking], which: BookingFilter, now: Optional[datetime] = None) -> List[Booking]:
    """Splits a booking list the way the bookings tabs do.

    upcoming: confirmed and in the future, soonest first.
    past: completed, or confirmed with a start that has gone by, latest first.
    cancelled: cancelled, latest first.
    """
    now = now or datetime.now()
    if which == "upcoming":
        selected = [b for b in bookings if is_upcoming(b, now)]
        return sorted(selected, key=booking_start)
    if which == "past":
        selected = [b for b in bookings if b.status != "cancelled" and not is_upcoming(b, now)]
    elif which == "cancelled":
        selected = [b for b in bookings if b.status == "cancelled"]
    else:
        raise ValueError(f"Unknown booking filter: {which}")
    return sorted(selected, key=booking_start, reverse=True)


def walkin_end_time(selected_slots: List[str]) -> str:
    """End of a walk-in: the last selected slot's start plus one slot."""
    last = datetime.strptime(max(selected_slots), "%H:%M")
    end = last + timedelta(minutes=config.SLOT_DURATION_MINUTES)
    if end.day != last.day:
        return "24:00"
    return end.strftime("%H:%M")


def week_dates(today: Optional[date] = None) -> List[date]:
    """The owner schedule strip: two days back through four days ahead."""
    today = today or date.today()
    return [today + timedelta(days=offset) for offset in range(-2, 5)]


@dataclass
class DaySchedule:
    date: str
    bookings: List[OwnerBooking]
    blocked_slots: List[BlockedSlot]

    @property
    def is_empty(self) -> bool:
        return not self.bookings and not self.blocked_slots


def owner_schedule(bookings: List[OwnerBooking], blocked_slots: List[BlockedSlot], day: str) -> DaySchedule:
    """Collects one day's bookings and blocked slots, each sorted by start time."""
    day_bookings = sorted((b for b in bookings if b.date == day), key=lambda b: b.start_time)
    day_blocked = sorted((s for s in blocked_slots if s.date == day), key=lambda s: s.start_time)
    logger.debug(f"Schedule for {day}: {len(day_bookings)} bookings, {len(day_blocked)} blocked slots")
    return DaySchedule(date=day, bookings=day_bookings, blocked_slots=day_blocked)
