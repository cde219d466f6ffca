from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...db import get_db
from ...domain.schemas.common import Envelope
from ...domain.schemas.payment import RefundIn, RefundOut
from ...resources import get_payments
from ...services.bookings import refund_payment
from ...services.payments import RazorpayGateway

router = APIRouter(tags=["payments"])


@router.post("/refund", response_model=Envelope[RefundOut])
async def refund(payload: RefundIn, db: AsyncSession = Depends(get_db), gateway: RazorpayGateway = Depends(get_payments)):
    record = await refund_payment(
        db, gateway, payment_id=payload.payment_id, amount=payload.amount, reason=payload.reason
    )
    return Envelope(
        message="Refund initiated",
        data=RefundOut(refund_id=record.id, amount=payload.amount, status=record.status),
    )
