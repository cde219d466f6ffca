"""Signed tokens for sessions and password-reset links.

Every token carries a ``purpose`` claim and is only accepted for that
purpose, so a reset link can never stand in for a session and vice versa.
"""
from __future__ import annotations
import time
import uuid
from datetime import timedelta
from typing import Any, Dict
import jwt  # PyJWT
from jwt.exceptions import InvalidSubjectError

from ..config import get_settings

S = get_settings()

ALGO = "HS256"

SESSION = "session"
PASSWORD_RESET = "password_reset"


class WrongPurpose(jwt.InvalidTokenError):
    pass


def _now() -> int:
    return int(time.time())


def create_jwt(subject: uuid.UUID | str, *, purpose: str, expires_in: timedelta, **claims: Any) -> str:
    iat = _now()
    to_encode = {
        **claims,
        "iss": S.APP_NAME,
        "aud": S.APP_NAME,
        "iat": iat,
        "exp": iat + int(expires_in.total_seconds()),
        "sub": str(subject),
        "purpose": purpose,
    }
    return jwt.encode(to_encode, S.JWT_SECRET, algorithm=ALGO)


def verify_jwt(token: str, *, purpose: str) -> Dict[str, Any]:
    """Decode ``token`` and check it was minted for ``purpose``.

    Raises jwt.PyJWTError (``WrongPurpose`` for a purpose mismatch).
    """
    claims = jwt.decode(
        token,
        S.JWT_SECRET,
        algorithms=[ALGO],
        audience=S.APP_NAME,
        issuer=S.APP_NAME,
    )
    if claims.get("purpose") != purpose:
        raise WrongPurpose(f"token is not valid for {purpose}")
    return claims


def subject_id(claims: Dict[str, Any]) -> uuid.UUID:
    try:
        return uuid.UUID(str(claims.get("sub")))
    except ValueError as exc:
        raise InvalidSubjectError("subject is not a user id") from exc
