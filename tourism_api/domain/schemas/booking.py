from __future__ import annotations
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, model_validator

from ...models import Booking
from .common import CAMEL_INPUT, EmailsSent

Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Money = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]


# ---------- category-tagged booking items ----------
class _Item(BaseModel):
    # unknown provider fields ride along untouched
    model_config = ConfigDict(extra="allow", **CAMEL_INPUT)

    price: Optional[Money] = None
    reference: Optional[str] = None


class _Leg(_Item):
    origin: Text
    destination: Text
    departure_at: datetime
    arrival_at: Optional[datetime] = None

    @model_validator(mode="after")
    def arrival_after_departure(self):
        if self.arrival_at and self.arrival_at < self.departure_at:
            raise ValueError("arrival_at must not be before departure_at")
        return self


class FlightItem(_Leg):
    category: Literal["flight"]
    airline: Optional[str] = None
    flight_number: Optional[str] = None
    cabin_class: Optional[str] = None


class TrainItem(_Leg):
    category: Literal["train"]
    train_number: Optional[str] = None
    travel_class: Optional[str] = None


class BusItem(_Leg):
    category: Literal["bus"]
    operator: Optional[str] = None
    seat_type: Optional[str] = None


class HotelItem(_Item):
    category: Literal["hotel"]
    hotel_name: Text
    city: Optional[str] = None
    check_in: date
    check_out: date
    rooms: int = Field(default=1, ge=1)
    room_type: Optional[str] = None

    @model_validator(mode="after")
    def checkout_after_checkin(self):
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class CarItem(_Item):
    category: Literal["car"]
    pickup_location: Text
    dropoff_location: Optional[str] = None
    pickup_at: datetime
    dropoff_at: Optional[datetime] = None
    car_type: Optional[str] = None
    provider: Optional[str] = None


BookingItem = Annotated[
    Union[FlightItem, HotelItem, CarItem, TrainItem, BusItem],
    Field(discriminator="category"),
]


# ---------- booking ----------
class TravelerInfo(BaseModel):
    model_config = CAMEL_INPUT

    name: Text
    email: EmailStr
    phone: Optional[str] = None
    address: Optional[str] = None


class Addons(BaseModel):
    flight: bool = False
    hotel: bool = False
    car: bool = False
    train: bool = False
    bus: bool = False
    guide: bool = False


class PaymentIn(BaseModel):
    model_config = CAMEL_INPUT

    amount: Money
    status: str = "paid"
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    receipt: Optional[Dict[str, Any]] = None


class BookingIn(BaseModel):
    model_config = CAMEL_INPUT

    booking_id: Text
    user_id: Optional[str] = None
    destination: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    package_type: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0)
    travelers: Optional[int] = Field(default=None, ge=1)
    traveler_info: TravelerInfo
    addons: Addons = Field(default_factory=Addons)
    items: List[BookingItem] = Field(default_factory=list)
    payment: PaymentIn

    @model_validator(mode="after")
    def dates_in_order(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class PaymentOut(BaseModel):
    amount: Decimal
    status: str
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    receipt: Optional[Dict[str, Any]] = None


class CancellationOut(BaseModel):
    date: datetime
    reason: Optional[str] = None
    refund_amount: Optional[Decimal] = None
    refund_id: Optional[str] = None
    refund_status: Optional[str] = None


class BookingOut(BaseModel):
    id: uuid.UUID
    booking_id: str
    user_id: Optional[str] = None
    destination: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    package_type: Optional[str] = None
    duration: Optional[int] = None
    travelers: Optional[int] = None
    traveler_info: TravelerInfo
    addons: Addons
    items: List[BookingItem]
    payment: PaymentOut
    cancellation: Optional[CancellationOut] = None
    created_at: datetime

    @classmethod
    def from_model(cls, b: Booking) -> "BookingOut":
        cancellation = None
        if b.cancelled_at:
            cancellation = CancellationOut(
                date=b.cancelled_at,
                reason=b.cancellation_reason,
                refund_amount=b.refund_amount,
                refund_id=b.refund_id,
                refund_status=b.refund_status,
            )
        return cls(
            id=b.id,
            booking_id=b.booking_id,
            user_id=b.user_id,
            destination=b.destination,
            start_date=b.start_date,
            end_date=b.end_date,
            package_type=b.package_type,
            duration=b.duration,
            travelers=b.travelers,
            traveler_info=b.traveler_info,
            addons=b.addons or {},
            items=b.items or [],
            payment=PaymentOut(
                amount=b.payment_amount,
                status=b.payment_status,
                razorpay_order_id=b.razorpay_order_id,
                razorpay_payment_id=b.razorpay_payment_id,
                receipt=b.payment_receipt,
            ),
            cancellation=cancellation,
            created_at=b.created_at,
        )


class BookingCreatedOut(BaseModel):
    booking: BookingOut
    emails_sent: EmailsSent
