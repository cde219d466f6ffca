from __future__ import annotations
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from ..models import User


async def get_by_id(db: AsyncSession, user_id: uuid.UUID) -> Optional[User]:
    res = await db.execute(select(User).where(User.id == user_id))
    return res.scalar_one_or_none()


async def get_by_email(db: AsyncSession, email: str) -> Optional[User]:
    res = await db.execute(select(User).where(User.email == email))
    return res.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    *,
    name: str,
    email: str,
    password_hash: str,
    verified: bool,
) -> User:
    user = User(name=name, email=email, password_hash=password_hash, verified=verified)
    db.add(user)
    await db.flush()
    return user


async def get_by_reset_token(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    token: str,
    now: datetime,
) -> Optional[User]:
    """User whose stored reset token matches and has not passed its stored expiry."""
    res = await db.execute(
        select(User).where(
            User.id == user_id,
            User.reset_password_token == token,
            User.reset_password_expires_at > now,
        )
    )
    return res.scalar_one_or_none()
