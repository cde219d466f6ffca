from __future__ import annotations
import uuid
from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, StringConstraints

from .common import CAMEL_INPUT

Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CancellationRequestIn(BaseModel):
    model_config = CAMEL_INPUT

    payment_id: Text
    destination: Text
    contact_number: Text
    reason: Optional[str] = None


class CancellationRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    payment_id: str
    destination: str
    contact_number: str
    reason: str
    status: Literal["pending", "completed", "rejected"]
    created_at: datetime
