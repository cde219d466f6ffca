from __future__ import annotations
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints

from .common import CAMEL_INPUT

Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class RefundIn(BaseModel):
    payment_id: Text
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2, description="major units, e.g. rupees")
    reason: Optional[str] = None


class RefundOut(BaseModel):
    refund_id: str
    amount: Decimal
    status: str


class CallUserIn(BaseModel):
    model_config = CAMEL_INPUT

    phone_number: Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^\+?[0-9]{6,15}$")]
    place_name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]


class CallPlacedOut(BaseModel):
    call_sid: str
