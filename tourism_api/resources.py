"""Process-wide collaborators, built once per app in the lifespan and injected via Depends."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Request
from redis.asyncio import Redis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from .config import Settings
from .db import make_engine, make_sessionmaker
from .redis_client import make_redis
from .services.mailer import SMTPMailer
from .services.payments import RazorpayGateway
from .services.voice import TwilioVoiceService

log = logging.getLogger(__name__)


@dataclass
class Resources:
    engine: AsyncEngine
    sessionmaker: async_sessionmaker[AsyncSession]
    redis: Redis
    mailer: SMTPMailer
    voice: TwilioVoiceService
    payments: RazorpayGateway

    @classmethod
    async def open(cls, settings: Settings) -> "Resources":
        engine = make_engine(settings.DATABASE_URL)
        redis = None
        try:
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            log.info("database ready")

            redis = make_redis(settings.REDIS_URL)
            mailer = SMTPMailer(settings)
            if await mailer.verify():
                log.info("mail server is ready to send messages")
        except BaseException:
            # nothing is handed to the app, so release what was opened here
            if redis is not None:
                await redis.aclose()
            await engine.dispose()
            raise

        return cls(
            engine=engine,
            sessionmaker=make_sessionmaker(engine),
            redis=redis,
            mailer=mailer,
            voice=TwilioVoiceService(settings),
            payments=RazorpayGateway(settings),
        )

    async def close(self) -> None:
        await self.redis.aclose()
        await self.engine.dispose()
        log.info("resources closed")


def get_resources(request: Request) -> Resources:
    return request.app.state.resources


def get_mailer(request: Request) -> SMTPMailer:
    return request.app.state.resources.mailer


def get_voice(request: Request) -> TwilioVoiceService:
    return request.app.state.resources.voice


def get_payments(request: Request) -> RazorpayGateway:
    return request.app.state.resources.payments
