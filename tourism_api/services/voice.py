from __future__ import annotations

import asyncio
import logging
from typing import Optional

from twilio.base.exceptions import TwilioException
from twilio.rest import Client
from twilio.twiml.voice_response import VoiceResponse

from ..config import Settings, get_settings
from ..errors import DeliveryError

logger = logging.getLogger(__name__)


class TwilioVoiceService:
    """Thin wrapper around the Twilio REST client with async-friendly calls."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        self._from_number: Optional[str] = settings.TWILIO_FROM_NUMBER
        if settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN and self._from_number:
            self._client: Optional[Client] = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        else:
            self._client = None
            missing = [
                key
                for key, value in [
                    ("TWILIO_ACCOUNT_SID", settings.TWILIO_ACCOUNT_SID),
                    ("TWILIO_AUTH_TOKEN", settings.TWILIO_AUTH_TOKEN),
                    ("TWILIO_FROM_NUMBER", self._from_number),
                ]
                if not value
            ]
            if missing:
                logger.info("Twilio voice disabled; missing settings: %s", ", ".join(missing))

    @property
    def enabled(self) -> bool:
        return bool(self._client and self._from_number)

    async def place_call(self, *, to: str, callback_url: str) -> str:
        """Start an outbound call that fetches its script from ``callback_url``; returns the call SID."""
        if not self._client or not self._from_number:
            raise DeliveryError("voice channel is not configured")

        loop = asyncio.get_running_loop()
        try:
            call = await loop.run_in_executor(
                None,
                lambda: self._client.calls.create(  # type: ignore[union-attr]
                    url=callback_url,
                    to=to,
                    from_=self._from_number,
                ),
            )
        except TwilioException as exc:
            logger.warning("Twilio call to %s failed: %s", to, exc)
            raise DeliveryError("Call failed") from exc
        return call.sid


def place_script(place: str) -> str:
    """TwiML document read out to the callee."""
    response = VoiceResponse()
    response.say(
        f"Hello! Thank you for your interest in {place}. "
        "It is one of the most beautiful destinations with amazing attractions and facilities. "
        "Visit our website to book now!",
        voice="alice",
    )
    return str(response)
