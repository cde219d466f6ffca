from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

import razorpay
from razorpay.errors import BadRequestError, ServerError, GatewayError as RazorpayGatewayError

from ..config import Settings, get_settings
from ..errors import GatewayError

logger = logging.getLogger(__name__)


@dataclass
class RefundRecord:
    id: str
    payment_id: str
    amount_minor: int
    status: str


def to_minor_units(amount: Decimal) -> int:
    """Rupees -> paise, rounded half up."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class RazorpayGateway:
    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        if settings.RAZORPAY_KEY_ID and settings.RAZORPAY_KEY_SECRET:
            self._client: Optional[razorpay.Client] = razorpay.Client(
                auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)
            )
        else:
            self._client = None
            logger.info("Razorpay disabled; missing RAZORPAY_KEY_ID or RAZORPAY_KEY_SECRET")

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def refund(self, *, payment_id: str, amount_minor: int, reason: str) -> RefundRecord:
        if self._client is None:
            raise GatewayError("payment gateway is not configured")

        payload = {
            "amount": amount_minor,
            "speed": "normal",
            "notes": {"reason": reason},
        }
        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(
                None, lambda: self._client.payment.refund(payment_id, payload)  # type: ignore[union-attr]
            )
        except (BadRequestError, ServerError, RazorpayGatewayError) as exc:
            logger.warning("Razorpay refund for %s failed: %s", payment_id, exc)
            raise GatewayError(str(exc) or "Refund processing failed") from exc
        except OSError as exc:
            # requests' network errors derive from OSError
            logger.warning("Razorpay unreachable for %s: %s", payment_id, exc)
            raise GatewayError("Refund processing failed") from exc

        return RefundRecord(
            id=data["id"],
            payment_id=payment_id,
            amount_minor=int(data.get("amount", amount_minor)),
            status=data.get("status", "pending"),
        )
