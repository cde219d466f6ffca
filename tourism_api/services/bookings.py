from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..domain.schemas.booking import BookingIn
from ..errors import ConflictError
from ..models import Booking
from ..observability.metrics import BOOKINGS_CREATED, REFUNDS
from ..repos import bookings as bookings_repo
from .emails import booking_admin_email, booking_user_email
from .mailer import SMTPMailer
from .notify import fan_out
from .payments import RazorpayGateway, RefundRecord, to_minor_units

logger = logging.getLogger(__name__)
S = get_settings()


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


async def create_booking(db: AsyncSession, mailer: SMTPMailer, payload: BookingIn) -> Tuple[Booking, Dict[str, bool]]:
    """Commit the booking, then notify admin and traveler concurrently."""
    booking = Booking(
        booking_id=payload.booking_id,
        user_id=payload.user_id,
        destination=payload.destination,
        start_date=payload.start_date,
        end_date=payload.end_date,
        package_type=payload.package_type,
        duration=payload.duration,
        travelers=payload.travelers,
        traveler_info=payload.traveler_info.model_dump(mode="json"),
        addons=payload.addons.model_dump(mode="json"),
        items=[item.model_dump(mode="json") for item in payload.items],
        payment_amount=payload.payment.amount,
        payment_status=payload.payment.status,
        razorpay_order_id=payload.payment.razorpay_order_id,
        razorpay_payment_id=payload.payment.razorpay_payment_id,
        razorpay_signature=payload.payment.razorpay_signature,
        payment_receipt=payload.payment.receipt,
    )
    try:
        await bookings_repo.add_booking(db, booking)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(f"Booking {payload.booking_id} already exists")
    BOOKINGS_CREATED.inc()

    admin_subject, admin_html = booking_admin_email(booking)
    user_subject, user_html = booking_user_email(booking)
    emails_sent = await fan_out({
        "admin": mailer.send_email(
            to=S.ADMIN_EMAIL, subject=admin_subject, html=admin_html, sender_name="Booking System"
        ),
        "user": mailer.send_email(
            to=booking.traveler_info.get("email"), subject=user_subject, html=user_html, sender_name="Tourism Booking"
        ),
    })
    return booking, emails_sent


async def refund_payment(
    db: AsyncSession,
    gateway: RazorpayGateway,
    *,
    payment_id: str,
    amount: Decimal,
    reason: Optional[str] = None,
) -> RefundRecord:
    """Refund through the gateway, then mark the matching booking cancelled.

    The gateway call is authoritative; a payment with no booking on file is
    refunded anyway and only logged.
    """
    reason = reason or "Customer requested refund"
    try:
        refund = await gateway.refund(payment_id=payment_id, amount_minor=to_minor_units(amount), reason=reason)
    except Exception:
        REFUNDS.labels(status="failed").inc()
        raise
    REFUNDS.labels(status=refund.status).inc()

    booking = await bookings_repo.get_by_payment_id(db, payment_id)
    if booking is None:
        logger.warning("refund %s for unknown payment %s", refund.id, payment_id)
        return refund

    booking.payment_status = "cancelled"
    booking.cancelled_at = _now_utc()
    booking.cancellation_reason = reason
    booking.refund_amount = amount
    booking.refund_id = refund.id
    booking.refund_status = refund.status
    await db.commit()
    return refund
