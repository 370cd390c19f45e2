"""Translate the unified chat request into each provider's wire format.

All builders are pure: they return new structures and never touch the
caller's messages.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Sequence
from urllib.parse import quote

from roblox_ai_proxy.common.schema import ChatMessage
from roblox_ai_proxy.relay.errors import InternalError
from roblox_ai_proxy.relay.providers import Provider

OPENAI_URL = "https://api.openai.com/v1/chat/completions"
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
CLAUDE_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"

GEMINI_SYSTEM_DELIMITER = "\n\n---\n\n"


@dataclass(frozen=True)
class OutboundRequest:
    """Everything needed to issue one POST to a provider."""
    provider: Provider
    url: str
    payload: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)


def openai_payload(
    model: str,
    messages: Sequence[ChatMessage],
    system_prompt: str,
    temperature: float,
    max_tokens: int,
) -> dict[str, Any]:
    return {
        "model": model,
        "messages": [{"role": "system", "content": system_prompt}]
        + [{"role": m.role, "content": m.content} for m in messages],
        "temperature": temperature,
        "max_tokens": max_tokens,
    }


def gemini_contents(messages: Sequence[ChatMessage], system_prompt: str) -> list[dict[str, Any]]:
    """
    Build Gemini ``contents`` with the system prompt folded into the first turn.

    Gemini has no system role, so the prompt is prepended to the first
    message's text. Role "assistant" becomes "model"; everything else is "user".
    """
    contents = [
        {
            "role": "model" if m.role == "assistant" else "user",
            "parts": [{"text": m.content}],
        }
        for m in messages
    ]
    if not contents:
        return contents
    first_part = contents[0]["parts"][0]
    if not isinstance(first_part.get("text"), str):
        raise InternalError("Internal server error.", "First Gemini message has no text part")
    contents[0] = {
        "role": contents[0]["role"],
        "parts": [{"text": f"{system_prompt}{GEMINI_SYSTEM_DELIMITER}{first_part['text']}"}],
    }
    return contents


def gemini_payload(
    messages: Sequence[ChatMessage],
    system_prompt: str,
    temperature: float,
    max_tokens: int,
) -> dict[str, Any]:
    return {
        "contents": gemini_contents(messages, system_prompt),
        "generationConfig": {"temperature": temperature, "maxOutputTokens": max_tokens},
    }


def claude_payload(
    model: str,
    messages: Sequence[ChatMessage],
    system_prompt: str,
    temperature: float,
    max_tokens: int,
) -> dict[str, Any]:
    return {
        "model": model,
        "system": system_prompt,
        "messages": [
            {"role": "assistant" if m.role == "assistant" else "user", "content": m.content}
            for m in messages
        ],
        "max_tokens": max_tokens,
        "temperature": temperature,
    }


def build_outbound_request(
    provider: Provider,
    model: str,
    messages: Sequence[ChatMessage],
    system_prompt: str,
    api_key: str,
    temperature: float = 0.7,
    max_tokens: int = 2048,
) -> OutboundRequest:
    """Build the provider payload together with its endpoint and auth placement."""
    if provider is Provider.OPENAI:
        return OutboundRequest(
            provider=provider,
            url=OPENAI_URL,
            payload=openai_payload(model, messages, system_prompt, temperature, max_tokens),
            headers={"Authorization": f"Bearer {api_key}"},
        )
    if provider is Provider.GEMINI:
        return OutboundRequest(
            provider=provider,
            url=GEMINI_URL.format(model=quote(model, safe="")),
            payload=gemini_payload(messages, system_prompt, temperature, max_tokens),
            params={"key": api_key},
        )
    if provider is Provider.CLAUDE:
        return OutboundRequest(
            provider=provider,
            url=CLAUDE_URL,
            payload=claude_payload(model, messages, system_prompt, temperature, max_tokens),
            headers={"x-api-key": api_key, "anthropic-version": ANTHROPIC_VERSION},
        )
    raise InternalError("Internal server error.", f"No translator for provider {provider!r}")
