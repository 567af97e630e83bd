import pytest

from bookagame_client import forms
from bookagame_client.errors import FormError
from bookagame_client.models import SlotRange


def test_validate_login():
    request = forms.validate_login(" ali@example.com ", "secret")
    assert request.email == "ali@example.com"

    with pytest.raises(FormError, match="both email and password"):
        forms.validate_login("ali@example.com", "  ")


@pytest.mark.parametrize(
    "name, email, password, confirm, message",
    [
        ("", "a@b.c", "secret1", "secret1", "fill in all required fields"),
        ("Ali", "a@b.c", "secret1", "secret2", "Passwords do not match"),
        ("Ali", "a@b.c", "12345", "12345", "at least 6 characters"),
    ],
)
def test_validate_registration_errors(name, email, password, confirm, message):
    with pytest.raises(FormError, match=message):
        forms.validate_registration(name, email, password, confirm)


def test_validate_registration_blank_phone_is_dropped():
    request = forms.validate_registration("Ali ", "a@b.c", "secret1", "secret1", phone="  ")
    assert request.name == "Ali"
    assert request.phone is None


def test_validate_profile():
    assert forms.validate_profile("Ali", "0300").phone == "0300"
    with pytest.raises(FormError, match="Name is required"):
        forms.validate_profile("")


@pytest.mark.parametrize("price", ["", "abc", "nan", "-5"])
def test_validate_court_rejects_bad_price(price):
    with pytest.raises(FormError, match="valid hourly rate"):
        forms.validate_court("Court 1", "Tennis", price)


def test_validate_court():
    request = forms.validate_court(" Court 1 ", "Tennis", "1500", court_id="c9")
    assert request.name == "Court 1"
    assert request.base_price == 1500.0
    assert request.id == "c9"

    with pytest.raises(FormError, match="sport type"):
        forms.validate_court("Court 1", "", "1500")


def test_validate_venue():
    request = forms.validate_venue("Arena", "Main St", ["Tennis"], latitude="31.5", longitude="")
    assert request.lat == 31.5
    assert request.lng is None

    with pytest.raises(FormError, match="Address is required"):
        forms.validate_venue("Arena", " ", ["Tennis"])
    with pytest.raises(FormError, match="at least one sport type"):
        forms.validate_venue("Arena", "Main St", [])
    with pytest.raises(FormError, match="Invalid latitude"):
        forms.validate_venue("Arena", "Main St", ["Tennis"], latitude="north")


def test_validate_blocked_slot():
    request = forms.validate_blocked_slot("c1", "2025-01-01", "6:00", "08:00", reason=" ")
    assert request.start_time == "06:00"
    assert request.reason is None

    with pytest.raises(FormError, match="select a court"):
        forms.validate_blocked_slot(None, "2025-01-01", "06:00", "08:00")
    with pytest.raises(FormError, match="End time must be after start time"):
        forms.validate_blocked_slot("c1", "2025-01-01", "10:00", "10:00")
    with pytest.raises(FormError, match="on the hour"):
        forms.validate_blocked_slot("c1", "2025-01-01", "05:00", "08:00")


def test_validate_booking():
    request = forms.validate_booking("c1", "2025-01-01", SlotRange(start_time="10:00", end_time="12:00"))
    assert request.end_time == "12:00"

    with pytest.raises(FormError, match="at least one time slot"):
        forms.validate_booking("c1", "2025-01-01", None)
    with pytest.raises(FormError, match="Invalid date"):
        forms.validate_booking("c1", "01.01.2025", SlotRange(start_time="10:00", end_time="11:00"))


def test_validate_walkin():
    request = forms.validate_walkin("c1", "2025-01-01", ["19:00", "18:00"], " Ali ", "0300")
    assert request.start_time == "18:00"
    assert request.end_time == "20:00"
    assert request.guest_name == "Ali"

    with pytest.raises(FormError, match="guest phone"):
        forms.validate_walkin("c1", "2025-01-01", ["18:00"], "Ali", "")
    with pytest.raises(FormError, match="at least one time slot"):
        forms.validate_walkin("c1", "2025-01-01", [], "Ali", "0300")


@pytest.mark.parametrize("rating", [0, 6])
def test_validate_review_rating_bounds(rating):
    with pytest.raises(FormError):
        forms.validate_review(rating)


def test_validate_review():
    assert forms.validate_review(5, "Great court").comment == "Great court"
