from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...db import get_db
from ...domain.schemas.cancellation import CancellationRequestIn, CancellationRequestOut
from ...domain.schemas.common import Envelope
from ...repos import contacts as contacts_repo

router = APIRouter(prefix="/cancellation-requests", tags=["cancellations"])


@router.post("", response_model=Envelope[CancellationRequestOut], status_code=status.HTTP_201_CREATED)
async def create_cancellation_request(payload: CancellationRequestIn, db: AsyncSession = Depends(get_db)):
    req = await contacts_repo.add_cancellation_request(
        db,
        payment_id=payload.payment_id,
        destination=payload.destination,
        contact_number=payload.contact_number,
        reason=payload.reason,
    )
    await db.commit()
    return Envelope(message="Cancellation request received", data=CancellationRequestOut.model_validate(req))


@router.get("", response_model=Envelope[List[CancellationRequestOut]])
async def list_cancellation_requests(
    db: AsyncSession = Depends(get_db),
    limit: int = Query(default=200, gt=0, le=1000),
):
    rows = await contacts_repo.list_cancellation_requests(db, limit=limit)
    return Envelope(data=[CancellationRequestOut.model_validate(r) for r in rows])
