from __future__ import annotations
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, Response

from ...config import get_settings
from ...domain.schemas.common import Envelope
from ...domain.schemas.payment import CallPlacedOut, CallUserIn
from ...resources import get_voice
from ...services.voice import TwilioVoiceService, place_script

router = APIRouter(tags=["calls"])

S = get_settings()


@router.post("/call-user", response_model=Envelope[CallPlacedOut])
async def call_user(payload: CallUserIn, request: Request, voice: TwilioVoiceService = Depends(get_voice)):
    base = (S.PUBLIC_BASE_URL or str(request.base_url)).rstrip("/")
    callback_url = f"{base}/twiml/{quote(payload.place_name, safe='')}"
    sid = await voice.place_call(to=payload.phone_number, callback_url=callback_url)
    return Envelope(message="Call placed", data=CallPlacedOut(call_sid=sid))


# Twilio requests the script with POST unless the call was created with method=GET
@router.api_route("/twiml/{place_name:path}", methods=["GET", "POST"], include_in_schema=False)
async def twiml(place_name: str):
    return Response(content=place_script(place_name), media_type="text/xml")
