from __future__ import annotations
from typing import Any, Optional


class AppError(Exception):
    """Base for errors that map onto a failure envelope."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None, data: Any = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.data = data
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid input"

    def __init__(self, message: Optional[str] = None, *, field: Optional[str] = None):
        super().__init__(message, data={"field": field} if field else None)
        self.field = field


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Already exists"


class ExpiredError(AppError):
    status_code = 400
    default_message = "Expired"


class InvalidOrExpiredToken(ExpiredError):
    default_message = "Invalid or expired token"


class MismatchError(AppError):
    status_code = 400
    default_message = "Does not match"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Forbidden"


class UpstreamError(AppError):
    status_code = 502
    default_message = "Upstream service failed"


class DeliveryError(UpstreamError):
    default_message = "Notification delivery failed"


class GatewayError(UpstreamError):
    default_message = "Payment gateway request failed"
