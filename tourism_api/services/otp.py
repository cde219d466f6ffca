"""One-time passcodes kept in Redis, one live code per email.

Layout: ``otp:{email}`` is a hash with ``code`` and ``expires_at`` (ISO-8601,
UTC). The Redis key lives ``OTP_RETENTION_SECONDS`` past the logical expiry so
a late verify still reports *expired* rather than *not found*. A successful
verify leaves ``otp:verified:{email}`` behind; signup consumes it.
"""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from redis.asyncio import Redis
from redis.exceptions import WatchError

from ..config import get_settings
from ..errors import ExpiredError, MismatchError, NotFoundError, ValidationError
from ..observability.logging import log_extra, mask_email
from ..observability.metrics import OTP_ISSUED, OTP_VERIFY
from .emails import otp_email
from .mailer import SMTPMailer

logger = logging.getLogger(__name__)
S = get_settings()


@dataclass
class OtpRecord:
    email: str
    code: str
    expires_at: datetime


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    email = str(email or "").strip().lower()
    if "@" not in email:
        raise ValidationError("A valid email address is required", field="email")
    return email


def _k_otp(email: str) -> str:
    return f"otp:{email}"


def _k_verified(email: str) -> str:
    return f"otp:verified:{email}"


def generate_code() -> str:
    # uniform over [100000, 999999]
    return str(100000 + secrets.randbelow(900000))


async def store_otp(redis: Redis, *, email: str, code: str, now: datetime) -> OtpRecord:
    """Upsert the code for ``email``, replacing any earlier one."""
    email = normalize_email(email)
    record = OtpRecord(email=email, code=code, expires_at=now + timedelta(seconds=S.OTP_TTL_SECONDS))
    key = _k_otp(email)
    async with redis.pipeline(transaction=True) as pipe:
        pipe.delete(key)
        pipe.hset(key, mapping={"code": record.code, "expires_at": record.expires_at.isoformat()})
        pipe.expire(key, S.OTP_TTL_SECONDS + S.OTP_RETENTION_SECONDS)
        await pipe.execute()
    return record


async def issue_otp(redis: Redis, mailer: SMTPMailer, *, email: str) -> OtpRecord:
    """Generate, store and mail a fresh code.

    A mail failure propagates as ``DeliveryError`` but the stored code stays
    valid, so re-issuing is always a consistent retry.
    """
    record = await store_otp(redis, email=email, code=generate_code(), now=_now_utc())
    OTP_ISSUED.inc()
    subject, html = otp_email(record.code, S.OTP_TTL_SECONDS // 60)
    await mailer.send_email(to=record.email, subject=subject, html=html)
    return record


async def get_otp(redis: Redis, email: str) -> OtpRecord | None:
    email = normalize_email(email)
    stored = await redis.hgetall(_k_otp(email))
    if not stored:
        return None
    return OtpRecord(email=email, code=stored["code"], expires_at=datetime.fromisoformat(stored["expires_at"]))


async def verify_otp(redis: Redis, *, email: str, code: str) -> None:
    """Check ``code`` for ``email`` and consume it.

    Raises NotFoundError (nothing stored), ExpiredError (past expiry; the
    record is purged) or MismatchError (wrong code; the record is kept).
    The read and the delete run under WATCH/MULTI, so two concurrent callers
    holding the right code cannot both succeed.
    """
    email = normalize_email(email)
    code = str(code).strip()
    if len(code) != 6 or not code.isdigit():
        raise ValidationError("OTP must be a 6-digit code", field="otp")
    key = _k_otp(email)

    async with redis.pipeline(transaction=True) as pipe:
        while True:
            try:
                await pipe.watch(key)
                stored = await pipe.hgetall(key)
                if not stored:
                    outcome = "not_found"
                elif _now_utc() > datetime.fromisoformat(stored["expires_at"]):
                    outcome = "expired"
                elif not secrets.compare_digest(stored["code"], str(code)):
                    outcome = "mismatch"
                else:
                    outcome = "ok"

                if outcome in ("not_found", "mismatch"):
                    await pipe.unwatch()
                    break

                pipe.multi()
                pipe.delete(key)
                if outcome == "ok":
                    pipe.set(_k_verified(email), "1", ex=S.VERIFIED_EMAIL_TTL_SECONDS)
                await pipe.execute()
                break
            except WatchError:
                # key changed under us (re-issue or a racing verify); re-read
                continue

    OTP_VERIFY.labels(outcome=outcome).inc()
    if outcome == "not_found":
        raise NotFoundError("No OTP found for this email")
    if outcome == "expired":
        raise ExpiredError("OTP expired")
    if outcome == "mismatch":
        raise MismatchError("Invalid OTP")
    logger.info("otp_verified", extra=log_extra(email=mask_email(email)))


async def consume_verified_email(redis: Redis, email: str) -> bool:
    """True exactly once per successful verification (within its TTL)."""
    return await redis.getdel(_k_verified(normalize_email(email))) is not None


async def restore_verified_email(redis: Redis, email: str) -> None:
    """Put back a marker taken by ``consume_verified_email`` when signup did not go through."""
    await redis.set(_k_verified(normalize_email(email)), "1", ex=S.VERIFIED_EMAIL_TTL_SECONDS)
