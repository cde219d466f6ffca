from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Dict

from ..errors import DeliveryError
from ..observability.metrics import NOTIFY_FAILED

logger = logging.getLogger(__name__)


async def fan_out(deliveries: Dict[str, Awaitable[None]]) -> Dict[str, bool]:
    """Run best-effort deliveries concurrently and report a per-channel outcome.

    Only ``DeliveryError`` is absorbed; anything else is a bug and propagates.
    """
    names = list(deliveries)
    results = await asyncio.gather(*deliveries.values(), return_exceptions=True)

    outcome: Dict[str, bool] = {}
    for name, result in zip(names, results):
        if isinstance(result, DeliveryError):
            logger.warning("%s notification failed: %s", name, result.message)
            NOTIFY_FAILED.labels(channel=name).inc()
            outcome[name] = False
        elif isinstance(result, BaseException):
            raise result
        else:
            outcome[name] = True
    return outcome
