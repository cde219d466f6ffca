from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...db import get_db
from ...domain.schemas.common import ContactEmailsSent, Envelope
from ...domain.schemas.contact import ContactIn, ContactOut, ContactSubmittedOut
from ...resources import get_mailer
from ...services.contacts import submit_contact
from ...services.mailer import SMTPMailer
from ...services.rate_limit import client_ip

router = APIRouter(tags=["contact"])


@router.post("/contact", response_model=Envelope[ContactSubmittedOut], status_code=status.HTTP_201_CREATED)
async def contact(
    payload: ContactIn,
    request: Request,
    db: AsyncSession = Depends(get_db),
    mailer: SMTPMailer = Depends(get_mailer),
):
    lng, lat = payload.coordinates
    saved, emails_sent = await submit_contact(
        db,
        mailer,
        name=payload.name,
        email=str(payload.email),
        phone=payload.phone,
        subject=payload.subject,
        message=payload.message,
        longitude=lng,
        latitude=lat,
        ip_address=client_ip(request),
    )
    return Envelope(
        message="Contact form submitted successfully!",
        data=ContactSubmittedOut(contact=ContactOut.from_model(saved), emails_sent=ContactEmailsSent(**emails_sent)),
    )
