"""Reduce provider responses to the client contract."""
from __future__ import annotations
import json
import logging
from typing import Any

import httpx

from roblox_ai_proxy.common.schema import GenerationResponse
from roblox_ai_proxy.relay.errors import InternalError, UpstreamProviderError
from roblox_ai_proxy.relay.providers import Provider

LOGGER = logging.getLogger("roblox_ai_proxy.relay.normalize")


def parse_error_body(body: str) -> tuple[str, str | None, int | str | None]:
    """
    Best-effort extraction of ``(details, type, code)`` from an upstream error body.

    All three providers nest the message under ``error.message``; some
    gateways return ``error`` as a bare string. Anything else yields the
    raw text.
    """
    try:
        data = json.loads(body)
    except ValueError:
        return body, None, None
    if not isinstance(data, dict):
        return body, None, None
    err = data.get("error")
    if isinstance(err, dict):
        message = err.get("message")
        err_type = err.get("type") or err.get("status")
        code = err.get("code")
        return (
            message if isinstance(message, str) and message else body,
            str(err_type) if err_type else None,
            code if isinstance(code, (int, str)) and code != "" else None,
        )
    if isinstance(err, str) and err:
        return err, None, None
    return body, None, None


def extract_text(provider: Provider, data: Any) -> str | None:
    """Pull the reply text out of a successful provider response, or None."""
    try:
        if provider is Provider.OPENAI:
            text = data["choices"][0]["message"]["content"]
        elif provider is Provider.GEMINI:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        elif provider is Provider.CLAUDE:
            text = data["content"][0]["text"]
        else:
            return None
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) and text else None


def normalize_response(provider: Provider, response: httpx.Response) -> GenerationResponse:
    if not response.is_success:
        body = response.text
        LOGGER.error(
            "%s API error status=%s body=%s", provider.display_name, response.status_code, body
        )
        details, err_type, code = parse_error_body(body)
        # Only 4xx/5xx are meaningful to the plugin; redirects and the like become 502.
        status = response.status_code if 400 <= response.status_code < 600 else 502
        raise UpstreamProviderError(
            f"Error from {provider.display_name} API",
            details,
            status_code=status,
            error_type=err_type,
            code=code if code is not None else response.status_code,
        )

    try:
        data = response.json()
    except ValueError:
        data = None
    text = extract_text(provider, data)
    if text is None:
        LOGGER.error("Invalid response structure from %s: %s", provider.display_name, response.text)
        raise InternalError(
            "Could not parse AI response.",
            f"Response structure from {provider.display_name} was unexpected",
        )
    return GenerationResponse(text=text)
