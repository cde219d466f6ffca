from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from ...auth.deps import get_current_user
from ...config import get_settings
from ...db import get_db
from ...domain.schemas.auth import (
    ForgotPasswordIn,
    LoginIn,
    OtpSentOut,
    ResetPasswordIn,
    SendOtpIn,
    SessionOut,
    SignupIn,
    UserOut,
    VerifyOtpIn,
)
from ...domain.schemas.common import Envelope
from ...models import User
from ...redis_client import get_redis
from ...resources import get_mailer
from ...services import accounts, password_reset
from ...services.mailer import SMTPMailer
from ...services.otp import issue_otp, verify_otp
from ...services.rate_limit import limit_login, limit_otp_request, limit_otp_verify

router = APIRouter(prefix="/auth", tags=["auth"])

S = get_settings()


def set_session_cookie(response: Response, request: Request, value: str, max_age_seconds: int):
    host = request.url.hostname or ""
    on_localhost = host in {"localhost", "127.0.0.1", "::1"}

    cookie_kwargs = dict(
        key=S.SESSION_COOKIE_NAME,
        value=value,
        httponly=True,
        samesite="lax",
        path="/",
        max_age=max_age_seconds,
        secure=not on_localhost,
    )
    if S.SESSION_COOKIE_DOMAIN and not on_localhost:
        cookie_kwargs["domain"] = S.SESSION_COOKIE_DOMAIN

    response.set_cookie(**cookie_kwargs)


@router.post("/send-otp", response_model=Envelope[OtpSentOut])
async def send_otp(
    payload: SendOtpIn,
    request: Request,
    redis: Redis = Depends(get_redis),
    mailer: SMTPMailer = Depends(get_mailer),
):
    await limit_otp_request(redis, request)
    record = await issue_otp(redis, mailer, email=payload.email)
    return Envelope(
        message="OTP sent to your email.",
        data=OtpSentOut(email=record.email, ttl_sec=S.OTP_TTL_SECONDS),
    )


@router.post("/verify-otp", response_model=Envelope)
async def verify_otp_route(payload: VerifyOtpIn, request: Request, redis: Redis = Depends(get_redis)):
    await limit_otp_verify(redis, request)
    await verify_otp(redis, email=payload.email, code=payload.otp)
    return Envelope(message="Email verified! You can now complete signup.")


@router.post("/signup", response_model=Envelope[SessionOut], status_code=status.HTTP_201_CREATED)
async def signup(
    payload: SignupIn,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    user = await accounts.register_account(
        db, redis, name=payload.name, email=payload.email, password=payload.password
    )
    token = accounts.issue_session_token(user)
    set_session_cookie(response, request, token, max_age_seconds=S.JWT_EXPIRE_MINUTES * 60)
    return Envelope(message="Account created.", data=SessionOut(token=token, user=UserOut.from_model(user)))


@router.post("/login", response_model=Envelope[SessionOut])
async def login(
    payload: LoginIn,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    await limit_login(redis, request)
    user = await accounts.authenticate(db, email=payload.email, password=payload.password)
    token = accounts.issue_session_token(user)
    set_session_cookie(response, request, token, max_age_seconds=S.JWT_EXPIRE_MINUTES * 60)
    return Envelope(message="Login successful", data=SessionOut(token=token, user=UserOut.from_model(user)))


@router.post("/logout", response_model=Envelope)
async def logout(response: Response):
    response.delete_cookie(S.SESSION_COOKIE_NAME, path="/", domain=S.SESSION_COOKIE_DOMAIN)
    return Envelope(message="Logged out")


@router.get("/me", response_model=Envelope[UserOut])
async def me(current: User = Depends(get_current_user)):
    return Envelope(data=UserOut.from_model(current))


@router.post("/forgot-password", response_model=Envelope)
async def forgot_password(
    payload: ForgotPasswordIn,
    db: AsyncSession = Depends(get_db),
    mailer: SMTPMailer = Depends(get_mailer),
):
    await password_reset.request_password_reset(
        db, mailer, email=payload.email, reset_url_base=S.FRONTEND_ORIGIN
    )
    return Envelope(message="Reset link sent to your email.")


@router.post("/reset-password/{token}", response_model=Envelope)
async def reset_password(token: str, payload: ResetPasswordIn, db: AsyncSession = Depends(get_db)):
    await password_reset.reset_password(db, token=token, new_password=payload.password)
    return Envelope(message="Password reset successful")
