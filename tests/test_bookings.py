from datetime import date, datetime

import pytest

from bookagame_client import bookings
from bookagame_client.models import BlockedSlot, Booking, OwnerBooking

NOW = datetime(2025, 1, 10, 12, 0)


def make_booking(booking_id, day, start, status="confirmed", **extra):
    hour = int(start[:2])
    return Booking(
        id=booking_id,
        court_id="c1",
        date=day,
        start_time=start,
        end_time=f"{hour + 1:02d}:00",
        status=status,
        **extra,
    )


def test_is_upcoming():
    assert bookings.is_upcoming(make_booking("b1", "2025-01-10", "13:00"), NOW)
    assert not bookings.is_upcoming(make_booking("b2", "2025-01-10", "11:00"), NOW)
    assert not bookings.is_upcoming(make_booking("b3", "2025-01-11", "13:00", status="cancelled"), NOW)


def test_cancel_and_review_eligibility():
    assert bookings.can_cancel(make_booking("b1", "2025-01-11", "09:00"), NOW)
    assert not bookings.can_cancel(make_booking("b2", "2025-01-09", "09:00"), NOW)
    assert bookings.can_review(make_booking("b3", "2025-01-09", "09:00", status="completed"))
    assert not bookings.can_review(make_booking("b4", "2025-01-09", "09:00"))


def test_filter_bookings():
    items = [
        make_booking("later", "2025-01-12", "09:00"),
        make_booking("soon", "2025-01-10", "18:00"),
        make_booking("done", "2025-01-05", "09:00", status="completed"),
        make_booking("missed", "2025-01-09", "09:00"),
        make_booking("off", "2025-01-11", "09:00", status="cancelled"),
    ]

    assert [b.id for b in bookings.filter_bookings(items, "upcoming", NOW)] == ["soon", "later"]
    assert [b.id for b in bookings.filter_bookings(items, "past", NOW)] == ["missed", "done"]
    assert [b.id for b in bookings.filter_bookings(items, "cancelled", NOW)] == ["off"]

    with pytest.raises(ValueError):
        bookings.filter_bookings(items, "everything", NOW)


def test_walkin_end_time():
    assert bookings.walkin_end_time(["18:00", "19:00"]) == "20:00"
    assert bookings.walkin_end_time(["09:30"]) == "10:30"
    assert bookings.walkin_end_time(["23:00"]) == "24:00"


def test_week_dates():
    days = bookings.week_dates(date(2025, 1, 10))
    assert len(days) == 7
    assert days[0] == date(2025, 1, 8)
    assert days[2] == date(2025, 1, 10)
    assert days[-1] == date(2025, 1, 14)


def test_owner_schedule():
    day_bookings = [
        OwnerBooking(**make_booking("b2", "2025-01-10", "18:00").model_dump(), user_name="Ali"),
        OwnerBooking(**make_booking("b1", "2025-01-10", "09:00").model_dump()),
        OwnerBooking(**make_booking("b3", "2025-01-11", "09:00").model_dump()),
    ]
    blocked = [
        BlockedSlot(id="s1", court_id="c1", date="2025-01-10", start_time="06:00", end_time="08:00"),
        BlockedSlot(id="s2", court_id="c1", date="2025-01-12", start_time="06:00", end_time="08:00"),
    ]

    schedule = bookings.owner_schedule(day_bookings, blocked, "2025-01-10")

    assert [b.id for b in schedule.bookings] == ["b1", "b2"]
    assert [s.id for s in schedule.blocked_slots] == ["s1"]
    assert not schedule.is_empty
    assert bookings.owner_schedule([], [], "2025-01-10").is_empty
