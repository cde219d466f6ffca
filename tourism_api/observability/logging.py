from __future__ import annotations
import logging
import sys
import uuid
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger
from fastapi import Request
from ..config import get_settings

S = get_settings()

# SDK loggers that chatter at INFO about every outbound HTTP call
_QUIET = ("uvicorn.access", "twilio.http_client", "urllib3.connectionpool")


def setup_logging(level: Optional[str] = None) -> None:
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    formatter = jsonlogger.JsonFormatter(
        "%(levelname)s %(name)s %(message)s %(asctime)s %(request_id)s %(extra)s",
        rename_fields={"levelname": "level", "name": "logger"},
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)
    root.setLevel(level or S.LOG_LEVEL)

    for name in _QUIET:
        logging.getLogger(name).setLevel("WARNING")


def mask_email(email: Optional[str]) -> str:
    """a***@example.com; addresses are not written to logs in full."""
    if not email or "@" not in email:
        return "unknown"
    local, _, domain = email.partition("@")
    return f"{local[:1]}***@{domain}"


def log_extra(**fields: Any) -> Dict[str, str]:
    """``extra=`` payload rendered into the ``extra`` column as ``k=v`` pairs."""
    return {"extra": " ".join(f"{k}={v}" for k, v in fields.items() if v is not None)}


def get_request_id(req: Request) -> str:
    rid = (req.headers.get(S.REQUEST_ID_HEADER) or "").strip()
    # client-supplied ids are echoed back, so keep them short and printable
    if rid and len(rid) <= 128 and rid.isprintable():
        return rid
    return uuid.uuid4().hex


def bind_record(record: logging.LogRecord, **extra):
    # attach arbitrary fields to a log record (safe for missing attrs)
    for k, v in extra.items():
        setattr(record, k, v or "")
    return record
