from __future__ import annotations

import logging
from datetime import timedelta

from redis.asyncio import Redis
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.jwt import SESSION, create_jwt
from ..auth.passwords import check_password, hash_password
from ..config import get_settings
from ..errors import ConflictError, ForbiddenError, MismatchError
from ..models import User
from ..observability.logging import log_extra
from ..observability.metrics import SIGNUPS
from ..repos import users as users_repo
from .otp import consume_verified_email, normalize_email, restore_verified_email

logger = logging.getLogger(__name__)
S = get_settings()


async def register_account(
    db: AsyncSession,
    redis: Redis,
    *,
    name: str,
    email: str,
    password: str,
) -> User:
    """Create a verified account for an email that has just passed OTP verification.

    Duplicates are reported before the verification marker is consumed.
    """
    email = normalize_email(email)
    if await users_repo.get_by_email(db, email):
        raise ConflictError("Email already in use")

    if not await consume_verified_email(redis, email):
        raise ForbiddenError("Email address has not been verified")

    password_hash = await hash_password(password)
    try:
        user = await users_repo.create_user(
            db, name=name.strip(), email=email, password_hash=password_hash, verified=True
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        await restore_verified_email(redis, email)
        raise ConflictError("Email already in use")

    SIGNUPS.inc()
    logger.info("account_created", extra=log_extra(user_id=user.id))
    return user


async def authenticate(db: AsyncSession, *, email: str, password: str) -> User:
    user = await users_repo.get_by_email(db, normalize_email(email))
    if not user or not await check_password(password, user.password_hash):
        raise MismatchError("Invalid credentials", status_code=401)
    if not user.verified:
        raise ForbiddenError("Please verify your email first.")
    return user


def issue_session_token(user: User) -> str:
    return create_jwt(
        user.id,
        purpose=SESSION,
        expires_in=timedelta(minutes=S.JWT_EXPIRE_MINUTES),
        email=user.email,
        name=user.name,
    )
