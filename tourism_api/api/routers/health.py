from fastapi import APIRouter, Depends
from pydantic import BaseModel
from ...db import db_health
from ...domain.schemas.common import Envelope
from ...redis_client import redis_health
from ...resources import Resources, get_resources

router = APIRouter(prefix="/health", tags=["health"])


class Dependencies(BaseModel):
    postgres: bool
    redis: bool
    mail: bool
    voice: bool
    payments: bool


class HealthOut(BaseModel):
    status: str
    dependencies: Dependencies


class ReadinessOut(BaseModel):
    ready: bool
    postgres: bool
    redis: bool


class LivenessOut(BaseModel):
    alive: bool = True


async def _check(res: Resources) -> tuple[bool, bool]:
    return await db_health(res.engine), await redis_health(res.redis)


@router.get("", response_model=Envelope[HealthOut])
async def health(res: Resources = Depends(get_resources)):
    db_ok, redis_ok = await _check(res)
    status = "ok" if (db_ok and redis_ok) else "degraded"
    return Envelope(
        data=HealthOut(
            status=status,
            dependencies=Dependencies(
                postgres=db_ok,
                redis=redis_ok,
                mail=res.mailer.enabled,
                voice=res.voice.enabled,
                payments=res.payments.enabled,
            ),
        )
    )


@router.get("/readiness", response_model=Envelope[ReadinessOut])
async def readiness(res: Resources = Depends(get_resources)):
    db_ok, redis_ok = await _check(res)
    return Envelope(data=ReadinessOut(ready=bool(db_ok and redis_ok), postgres=db_ok, redis=redis_ok))


@router.get("/liveness", response_model=Envelope[LivenessOut])
async def liveness():
    return Envelope(data=LivenessOut())
