from __future__ import annotations
import logging
import time
from datetime import datetime, timezone
import jwt
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from ..observability.logging import bind_record, get_request_id, mask_email
from ..config import get_settings
from ..auth.deps import token_from_request
from ..auth.jwt import SESSION, verify_jwt

S = get_settings()
log = logging.getLogger("tourism_api.request")

class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = get_request_id(request)
        start = time.perf_counter()
        timestamp = datetime.now(timezone.utc).isoformat()

        user_id = None
        user_email = None
        token = token_from_request(request)
        if token:
            try:
                claims = verify_jwt(token, purpose=SESSION)
                user_id = claims.get("sub")
                user_email = claims.get("email")
            except jwt.PyJWTError:
                # invalid/expired token: log as anonymous
                pass

        user_info = f"user_id={user_id or 'anonymous'}"
        if user_email:
            user_info += f" email={mask_email(user_email)}"

        try:
            response = await call_next(request)
        except Exception:
            dur_ms = int((time.perf_counter() - start) * 1000)
            rec = bind_record(logging.LogRecord(
                name=log.name, level=logging.ERROR, pathname=__file__, lineno=0,
                msg="unhandled_error", args=(), exc_info=None
            ), request_id=rid, extra=f"timestamp={timestamp} path={request.url.path} method={request.method} ms={dur_ms} {user_info}")
            log.handle(rec)
            raise

        dur_ms = int((time.perf_counter() - start) * 1000)
        response.headers[S.REQUEST_ID_HEADER] = rid
        rec = bind_record(logging.LogRecord(
            name=log.name, level=logging.INFO, pathname=__file__, lineno=0,
            msg="request", args=(), exc_info=None
        ), request_id=rid, extra=f"timestamp={timestamp} path={request.url.path} method={request.method} status={response.status_code} ms={dur_ms} {user_info}")
        log.handle(rec)
        return response
