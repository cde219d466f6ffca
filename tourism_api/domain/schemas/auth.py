from __future__ import annotations
from pydantic import BaseModel, EmailStr, Field, StringConstraints
from typing import Annotated

from ...models import User

# bcrypt only looks at the first 72 bytes
Password = Annotated[str, Field(min_length=8, max_length=72)]
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]


class SendOtpIn(BaseModel):
    email: EmailStr


class VerifyOtpIn(BaseModel):
    email: EmailStr
    otp: str = Field(min_length=6, max_length=6, pattern=r"^\d{6}$")


class OtpSentOut(BaseModel):
    email: EmailStr
    ttl_sec: int


class SignupIn(BaseModel):
    name: Name
    email: EmailStr
    password: Password


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=72)


class ForgotPasswordIn(BaseModel):
    email: EmailStr


class ResetPasswordIn(BaseModel):
    password: Password


class UserOut(BaseModel):
    id: str
    name: str
    email: EmailStr
    verified: bool

    @classmethod
    def from_model(cls, u: User) -> "UserOut":
        return cls(id=str(u.id), name=u.name, email=u.email, verified=u.verified)


class SessionOut(BaseModel):
    token: str
    user: UserOut
