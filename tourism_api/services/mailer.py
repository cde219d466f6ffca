from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from ..config import Settings, get_settings
from ..errors import DeliveryError

logger = logging.getLogger(__name__)


class SMTPMailer:
    """SMTP sender with an async-friendly ``send_email``.

    Without ``MAIL_USERNAME``/``MAIL_PASSWORD`` the mailer runs in dev mode and
    only logs what it would have sent.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        self._host = settings.MAIL_SERVER
        self._port = settings.MAIL_PORT
        self._username = settings.MAIL_USERNAME
        self._password = settings.MAIL_PASSWORD
        self._sender = settings.MAIL_FROM or settings.MAIL_USERNAME
        self._use_tls = settings.MAIL_USE_TLS
        self._timeout = settings.MAIL_TIMEOUT_SEC
        if not self.enabled:
            logger.info("SMTP delivery disabled; missing MAIL_USERNAME or MAIL_PASSWORD")

    @property
    def enabled(self) -> bool:
        return bool(self._username and self._password)

    async def send_email(self, *, to: Optional[str], subject: str, html: str, sender_name: Optional[str] = None) -> None:
        if not to:
            raise DeliveryError("no recipient address")

        msg = EmailMessage()
        msg["From"] = f'"{sender_name}" <{self._sender}>' if sender_name and self._sender else (self._sender or "")
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content("This message requires an HTML-capable mail client.")
        msg.add_alternative(html, subtype="html")

        if not self.enabled:
            logger.info("[DEV] email to %s: %s\n%s", to, subject, html)
            return

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._deliver, msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning("SMTP send to %s failed: %s", to, exc)
            raise DeliveryError(f"email delivery failed: {exc}") from exc

    async def verify(self) -> bool:
        """Connect and authenticate once; used at startup to surface bad credentials early."""
        if not self.enabled:
            return False
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._login_only)
            return True
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Mail server configuration error: %s", exc)
            return False

    def _handshake(self, server: smtplib.SMTP) -> None:
        server.ehlo()
        if self._use_tls:
            server.starttls()
            server.ehlo()
        server.login(self._username, self._password)

    def _deliver(self, msg: EmailMessage) -> None:
        # the socket is closed by the with block even when the handshake fails
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
            self._handshake(server)
            server.send_message(msg)

    def _login_only(self) -> None:
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
            self._handshake(server)
