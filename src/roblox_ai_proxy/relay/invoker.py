"""Outbound HTTP call to the selected provider."""
from __future__ import annotations
import logging
import time

import httpx

from roblox_ai_proxy.relay.translate import OutboundRequest

LOGGER = logging.getLogger("roblox_ai_proxy.relay.invoker")


def _client(timeout: float) -> httpx.Client:
    return httpx.Client(timeout=timeout)


def send(request: OutboundRequest, timeout: float = 120.0) -> httpx.Response:
    """
    POST the request once and return the fully buffered response.

    No retries; transport errors propagate to the caller.
    """
    LOGGER.info("Calling %s at %s", request.provider.display_name, request.url)
    start = time.time()
    with _client(timeout) as client:
        response = client.post(
            request.url,
            headers=request.headers,
            params=request.params or None,
            json=request.payload,
        )
    latency = int((time.time() - start) * 1000)
    LOGGER.info(
        "%s responded in %sms with status %s",
        request.provider.display_name,
        latency,
        response.status_code,
    )
    return response
