from __future__ import annotations
import uuid
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator

from ...models import Contact
from .common import ContactEmailsSent

Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ContactIn(BaseModel):
    name: Text
    email: EmailStr
    phone: Optional[str] = None
    subject: Text
    message: Text
    coordinates: List[float] = Field(description="[longitude, latitude]")

    @field_validator("coordinates")
    @classmethod
    def lng_lat(cls, v):
        if len(v) != 2:
            raise ValueError("coordinates must be [longitude, latitude]")
        lng, lat = v
        if not -180 <= lng <= 180:
            raise ValueError("longitude must be within [-180, 180]")
        if not -90 <= lat <= 90:
            raise ValueError("latitude must be within [-90, 90]")
        return v


class ContactOut(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone: Optional[str] = None
    subject: str
    message: str
    location: dict
    ip_address: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_model(cls, c: Contact) -> "ContactOut":
        return cls(
            id=c.id,
            name=c.name,
            email=c.email,
            phone=c.phone,
            subject=c.subject,
            message=c.message,
            location={"type": "Point", "coordinates": [c.longitude, c.latitude]},
            ip_address=c.ip_address,
            created_at=c.created_at,
        )


class ContactSubmittedOut(BaseModel):
    contact: ContactOut
    emails_sent: ContactEmailsSent
