"""Forgot/reset password.

States: no reset pending -> token issued -> consumed (back to none) or
rejected. The token is a signed JWT *and* is stored on the account with its
own expiry; a reset needs the signature, the stored copy and the stored
expiry to agree.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.jwt import PASSWORD_RESET, create_jwt, subject_id, verify_jwt
from ..auth.passwords import hash_password
from ..config import get_settings
from ..errors import InvalidOrExpiredToken, NotFoundError
from ..observability.logging import log_extra
from ..repos import users as users_repo
from .emails import password_reset_email
from .mailer import SMTPMailer
from .otp import normalize_email

logger = logging.getLogger(__name__)
S = get_settings()


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


async def request_password_reset(
    db: AsyncSession,
    mailer: SMTPMailer,
    *,
    email: str,
    reset_url_base: str,
) -> str:
    """Store a fresh reset token on the account and mail the link. Returns the token.

    The token is committed before mailing; a ``DeliveryError`` still
    propagates to the caller.
    """
    user = await users_repo.get_by_email(db, normalize_email(email))
    if not user:
        raise NotFoundError("User not found with this email")

    ttl = timedelta(minutes=S.RESET_TOKEN_TTL_MINUTES)
    token = create_jwt(user.id, purpose=PASSWORD_RESET, expires_in=ttl)
    user.reset_password_token = token
    user.reset_password_expires_at = _now_utc() + ttl
    await db.commit()

    link = f"{reset_url_base.rstrip('/')}/reset-password/{token}"
    subject, html = password_reset_email(user.name, link, S.RESET_TOKEN_TTL_MINUTES)
    await mailer.send_email(to=user.email, subject=subject, html=html)
    return token


async def reset_password(db: AsyncSession, *, token: str, new_password: str) -> None:
    try:
        user_id = subject_id(verify_jwt(token, purpose=PASSWORD_RESET))
    except jwt.PyJWTError:
        raise InvalidOrExpiredToken()

    user = await users_repo.get_by_reset_token(db, user_id=user_id, token=token, now=_now_utc())
    if not user:
        raise InvalidOrExpiredToken()

    user.password_hash = await hash_password(new_password)
    user.reset_password_token = None
    user.reset_password_expires_at = None
    await db.commit()
    logger.info("password_reset", extra=log_extra(user_id=user.id))
