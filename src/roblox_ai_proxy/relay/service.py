"""Request pipeline: validate, route, translate, call, normalize."""
from __future__ import annotations
import logging
import traceback

from roblox_ai_proxy.common.config import Settings
from roblox_ai_proxy.common.schema import GenerationRequest, GenerationResponse
from roblox_ai_proxy.common.templates import build_system_prompt
from roblox_ai_proxy.relay import invoker
from roblox_ai_proxy.relay.credentials import resolve_api_key
from roblox_ai_proxy.relay.errors import ClientValidationError, InternalError, RelayError
from roblox_ai_proxy.relay.normalize import normalize_response
from roblox_ai_proxy.relay.providers import select_provider
from roblox_ai_proxy.relay.translate import build_outbound_request

LOGGER = logging.getLogger("roblox_ai_proxy.relay.service")


def _generate(body: GenerationRequest, settings: Settings) -> GenerationResponse:
    if not body.messages:
        raise ClientValidationError(
            "Missing 'messages' in request body.",
            "Provide at least one message with a role and content.",
        )
    model = body.model or settings.default_model
    provider = select_provider(model)
    api_key = resolve_api_key(provider, body.api_key, settings)

    LOGGER.info(
        "Routing %d message(s) to %s model=%s context=%s",
        len(body.messages),
        provider.display_name,
        model,
        "yes" if body.context else "no",
    )
    outbound = build_outbound_request(
        provider,
        model,
        body.messages,
        build_system_prompt(body.context),
        api_key,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
    )
    response = invoker.send(outbound, timeout=settings.upstream_timeout)
    return normalize_response(provider, response)


def generate(body: GenerationRequest, settings: Settings) -> GenerationResponse:
    """
    Relay one generation request to its provider.

    Raises:
        RelayError: any failure; unexpected exceptions are wrapped in a
            generic ``InternalError`` whose diagnostics only appear in debug mode.
    """
    try:
        return _generate(body, settings)
    except RelayError:
        raise
    except Exception as e:
        LOGGER.exception("Unexpected error in /generate: %s", e)
        if settings.debug:
            raise InternalError(
                "Internal server error.",
                f"{type(e).__name__}: {e}",
                stack=traceback.format_exc(),
            ) from e
        raise InternalError("Internal server error.") from e
