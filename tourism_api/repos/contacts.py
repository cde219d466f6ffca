from __future__ import annotations
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from ..models import CancellationRequest, Contact


async def add_contact(
    db: AsyncSession,
    *,
    name: str,
    email: str,
    phone: Optional[str],
    subject: str,
    message: str,
    longitude: float,
    latitude: float,
    ip_address: Optional[str],
) -> Contact:
    contact = Contact(
        name=name,
        email=email,
        phone=phone or None,
        subject=subject,
        message=message,
        longitude=longitude,
        latitude=latitude,
        ip_address=ip_address,
    )
    db.add(contact)
    await db.flush()
    return contact


async def add_cancellation_request(
    db: AsyncSession,
    *,
    payment_id: str,
    destination: str,
    contact_number: str,
    reason: Optional[str] = None,
) -> CancellationRequest:
    req = CancellationRequest(
        payment_id=payment_id,
        destination=destination,
        contact_number=contact_number,
        reason=(reason or "").strip() or "Not specified",
    )
    db.add(req)
    await db.flush()
    return req


async def list_cancellation_requests(db: AsyncSession, *, limit: int = 200) -> List[CancellationRequest]:
    res = await db.execute(
        select(CancellationRequest).order_by(CancellationRequest.created_at.desc()).limit(limit)
    )
    return list(res.scalars().all())
