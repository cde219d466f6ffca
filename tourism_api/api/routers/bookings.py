from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...db import get_db
from ...domain.schemas.booking import BookingCreatedOut, BookingIn, BookingOut
from ...domain.schemas.common import EmailsSent, Envelope
from ...repos import bookings as bookings_repo
from ...resources import get_mailer
from ...services.bookings import create_booking
from ...services.mailer import SMTPMailer

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=Envelope[BookingCreatedOut], status_code=status.HTTP_201_CREATED)
async def book(payload: BookingIn, db: AsyncSession = Depends(get_db), mailer: SMTPMailer = Depends(get_mailer)):
    booking, emails_sent = await create_booking(db, mailer, payload)
    return Envelope(
        message="Booking saved",
        data=BookingCreatedOut(booking=BookingOut.from_model(booking), emails_sent=EmailsSent(**emails_sent)),
    )


@router.get("/{user_id}", response_model=Envelope[List[BookingOut]])
async def bookings_for_user(user_id: str, db: AsyncSession = Depends(get_db)):
    rows = await bookings_repo.list_for_user(db, user_id)
    return Envelope(data=[BookingOut.from_model(b) for b in rows])
