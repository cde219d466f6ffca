from __future__ import annotations
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from ..models import Booking


async def add_booking(db: AsyncSession, booking: Booking) -> Booking:
    db.add(booking)
    # no commit here; caller's transaction should commit
    await db.flush()
    return booking


async def list_for_user(db: AsyncSession, user_id: str) -> List[Booking]:
    res = await db.execute(
        select(Booking).where(Booking.user_id == user_id).order_by(Booking.created_at.desc())
    )
    return list(res.scalars().all())


async def get_by_payment_id(db: AsyncSession, payment_id: str) -> Optional[Booking]:
    res = await db.execute(
        select(Booking).where(Booking.razorpay_payment_id == payment_id).with_for_update()
    )
    return res.scalars().first()
