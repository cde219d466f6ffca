from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..models import Contact
from ..repos import contacts as contacts_repo
from .emails import contact_admin_email, contact_client_email
from .mailer import SMTPMailer
from .notify import fan_out

logger = logging.getLogger(__name__)
S = get_settings()


async def submit_contact(
    db: AsyncSession,
    mailer: SMTPMailer,
    *,
    name: str,
    email: str,
    phone: Optional[str],
    subject: str,
    message: str,
    longitude: float,
    latitude: float,
    ip_address: Optional[str],
) -> Tuple[Contact, Dict[str, bool]]:
    """Store a contact-form submission, then mail the admin and the sender.

    The stored row is authoritative; mail outcomes come back as flags.
    """
    contact = await contacts_repo.add_contact(
        db,
        name=name,
        email=email,
        phone=phone,
        subject=subject,
        message=message,
        longitude=longitude,
        latitude=latitude,
        ip_address=ip_address,
    )
    await db.commit()

    admin_subject, admin_html = contact_admin_email(contact)
    client_subject, client_html = contact_client_email(contact)
    emails_sent = await fan_out({
        "admin": mailer.send_email(
            to=S.ADMIN_EMAIL, subject=admin_subject, html=admin_html, sender_name="Contact Form"
        ),
        "client": mailer.send_email(
            to=contact.email, subject=client_subject, html=client_html, sender_name="Tourism Support"
        ),
    })
    return contact, emails_sent
