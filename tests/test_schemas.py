from decimal import Decimal

import pytest
from pydantic import ValidationError

from tourism_api.domain.schemas.auth import SignupIn, VerifyOtpIn
from tourism_api.domain.schemas.booking import BookingIn, CarItem, FlightItem, HotelItem
from tourism_api.domain.schemas.contact import ContactIn
from tourism_api.domain.schemas.payment import CallUserIn, RefundIn
from tourism_api.services.payments import to_minor_units
from tests.conftest import booking_payload


def test_items_are_dispatched_on_category():
    payload = BookingIn.model_validate(booking_payload())

    flight, hotel = payload.items
    assert isinstance(flight, FlightItem) and flight.flight_number == "6E-211"
    assert isinstance(hotel, HotelItem) and hotel.rooms == 1
    # provider-specific extras survive
    assert hotel.model_dump()["meal_plan"] == "breakfast"


def test_car_item():
    raw = booking_payload()
    raw["items"] = [{"category": "car", "pickup_location": "GOI airport", "pickup_at": "2026-12-20T09:00:00Z"}]
    (car,) = BookingIn.model_validate(raw).items
    assert isinstance(car, CarItem)


def test_unknown_category_is_rejected():
    raw = booking_payload()
    raw["items"].append({"category": "cruise", "ship": "Angriya"})
    with pytest.raises(ValidationError):
        BookingIn.model_validate(raw)


def test_hotel_checkout_must_follow_checkin():
    raw = booking_payload()
    raw["items"][1]["check_out"] = raw["items"][1]["check_in"]
    with pytest.raises(ValidationError):
        BookingIn.model_validate(raw)


def test_leg_cannot_arrive_before_departing():
    raw = booking_payload()
    raw["items"][0]["arrival_at"] = "2026-12-20T05:00:00+05:30"
    with pytest.raises(ValidationError):
        BookingIn.model_validate(raw)


def test_trip_dates_in_order():
    raw = booking_payload()
    raw["end_date"] = "2026-12-01"
    with pytest.raises(ValidationError):
        BookingIn.model_validate(raw)


def test_minor_units_round_half_up():
    assert to_minor_units(Decimal("45999.50")) == 4599950
    assert to_minor_units(Decimal("0.005")) == 1
    assert to_minor_units(Decimal("10")) == 1000


def test_refund_amount_must_be_positive():
    with pytest.raises(ValidationError):
        RefundIn(payment_id="pay_1", amount=Decimal("0"))
    assert RefundIn(payment_id=" pay_1 ", amount="12.50").payment_id == "pay_1"


def test_otp_must_be_six_digits():
    VerifyOtpIn(email="a@example.com", otp="012345")
    for bad in ("12345", "1234567", "12a456"):
        with pytest.raises(ValidationError):
            VerifyOtpIn(email="a@example.com", otp=bad)


def test_signup_password_bounds():
    with pytest.raises(ValidationError):
        SignupIn(name="Asha", email="a@example.com", password="short")
    with pytest.raises(ValidationError):
        SignupIn(name="Asha", email="a@example.com", password="x" * 73)


def test_contact_coordinates_are_lng_lat():
    ok = ContactIn(name="A", email="a@example.com", subject="s", message="m", coordinates=[73.8, 15.5])
    assert ok.coordinates == [73.8, 15.5]
    with pytest.raises(ValidationError):
        ContactIn(name="A", email="a@example.com", subject="s", message="m", coordinates=[15.5, 173.8])
    with pytest.raises(ValidationError):
        ContactIn(name="A", email="a@example.com", subject="s", message="m", coordinates=[1.0])


def test_call_user_phone_format():
    assert CallUserIn(phone_number="+919876543210", place_name="Goa").phone_number == "+919876543210"
    with pytest.raises(ValidationError):
        CallUserIn(phone_number="call me", place_name="Goa")
