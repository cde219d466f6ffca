from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

import sqlalchemy as sa
from sqlalchemy import CheckConstraint, Index
from sqlalchemy.dialects import postgresql as pg
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# JSONB on Postgres, plain JSON elsewhere
JSONType = sa.JSON().with_variant(pg.JSONB(astext_type=sa.Text()), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------- Base & naming ----------
class Base(DeclarativeBase):
    # Keep index/constraint names stable for cleaner migrations
    metadata = sa.MetaData(
        naming_convention={
            "ix": "ix_%(column_0_label)s",
            "uq": "uq_%(table_name)s_%(column_0_name)s",
            "ck": "ck_%(table_name)s_%(constraint_name)s",
            "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
            "pk": "pk_%(table_name)s",
        }
    )


# ---------- USERS ----------
class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(sa.Text, nullable=False)
    # always stored lower-cased (see services.otp.normalize_email)
    email: Mapped[str] = mapped_column(sa.Text, nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(sa.Text, nullable=False)
    verified: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False, server_default=sa.false())

    reset_password_token: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    reset_password_expires_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow, server_default=sa.func.now()
    )


# ---------- CONTACT SUBMISSIONS ----------
class Contact(Base):
    __tablename__ = "contacts"

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(sa.Text, nullable=False)
    email: Mapped[str] = mapped_column(sa.Text, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    subject: Mapped[str] = mapped_column(sa.Text, nullable=False)
    message: Mapped[str] = mapped_column(sa.Text, nullable=False)

    # GeoJSON point order on the wire is [lng, lat]
    longitude: Mapped[float] = mapped_column(sa.Float, nullable=False)
    latitude: Mapped[float] = mapped_column(sa.Float, nullable=False)
    ip_address: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow, server_default=sa.func.now()
    )

    __table_args__ = (
        CheckConstraint("longitude >= -180 AND longitude <= 180", name="contacts_longitude_range"),
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="contacts_latitude_range"),
        Index("ix_contacts_location", "longitude", "latitude"),
    )


# ---------- CANCELLATION REQUESTS ----------
class CancellationRequest(Base):
    __tablename__ = "cancellation_requests"

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    payment_id: Mapped[str] = mapped_column(sa.Text, nullable=False)
    destination: Mapped[str] = mapped_column(sa.Text, nullable=False)
    contact_number: Mapped[str] = mapped_column(sa.Text, nullable=False)
    reason: Mapped[str] = mapped_column(
        sa.Text, nullable=False, default="Not specified", server_default=sa.text("'Not specified'")
    )
    status: Mapped[str] = mapped_column(
        sa.Text,
        nullable=False,
        default="pending",
        server_default=sa.text("'pending'"),
    )  # 'pending' | 'completed' | 'rejected'

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow, server_default=sa.func.now()
    )

    __table_args__ = (
        CheckConstraint("status in ('pending','completed','rejected')", name="cancellation_requests_status"),
        Index("ix_cancellation_requests_created_at", "created_at"),
    )


# ---------- BOOKINGS ----------
class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    booking_id: Mapped[str] = mapped_column(sa.Text, nullable=False, unique=True)
    user_id: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)

    destination: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    start_date: Mapped[Optional[date]] = mapped_column(sa.Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(sa.Date, nullable=True)
    package_type: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    duration: Mapped[Optional[int]] = mapped_column(sa.Integer, nullable=True)
    travelers: Mapped[Optional[int]] = mapped_column(sa.Integer, nullable=True)

    traveler_info: Mapped[dict] = mapped_column(JSONType, nullable=False)
    addons: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    # list of category-tagged items (flight/hotel/car/train/bus)
    items: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    payment_amount: Mapped[Decimal] = mapped_column(sa.Numeric(12, 2), nullable=False)
    payment_status: Mapped[str] = mapped_column(sa.Text, nullable=False)
    razorpay_order_id: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    razorpay_payment_id: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    razorpay_signature: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    payment_receipt: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    cancelled_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    refund_amount: Mapped[Optional[Decimal]] = mapped_column(sa.Numeric(12, 2), nullable=True)
    refund_id: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    refund_status: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow, server_default=sa.func.now()
    )

    __table_args__ = (
        CheckConstraint("payment_amount >= 0", name="bookings_amount_nonneg"),
        Index("ix_bookings_user_id", "user_id"),
        Index("ix_bookings_razorpay_payment_id", "razorpay_payment_id"),
    )
