from __future__ import annotations
import jwt
from fastapi import Depends, HTTPException, Request
from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from ..config import get_settings
from ..db import get_db
from ..models import User
from ..repos import users as users_repo
from .jwt import SESSION, subject_id, verify_jwt

S = get_settings()


def token_from_request(request: Request) -> Optional[str]:
    """Session token from the cookie, else from an ``Authorization: Bearer`` header."""
    token = request.cookies.get(S.SESSION_COOKIE_NAME)
    if token:
        return token
    auth = request.headers.get("authorization") or ""
    scheme, _, value = auth.partition(" ")
    if scheme.lower() == "bearer" and value:
        return value.strip()
    return None


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    token = token_from_request(request)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    try:
        user_id = subject_id(verify_jwt(token, purpose=SESSION))
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid session")

    user = await users_repo.get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user
