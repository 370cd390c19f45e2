"""Credential resolution.

Callers bring their own key. A server-held key is only used when the
provider is listed in ``FALLBACK_PROVIDERS`` and a key for it is configured.
"""
from __future__ import annotations

from roblox_ai_proxy.common.config import Settings
from roblox_ai_proxy.relay.errors import MissingApiKeyError
from roblox_ai_proxy.relay.providers import Provider


def server_key(provider: Provider, settings: Settings) -> str | None:
    """Return the server-held key for ``provider`` if fallback is enabled for it."""
    if provider.value not in settings.fallback_providers:
        return None
    return {
        Provider.OPENAI: settings.openai_api_key,
        Provider.GEMINI: settings.gemini_api_key,
        Provider.CLAUDE: settings.anthropic_api_key,
    }[provider]


def has_fallback_key(settings: Settings) -> bool:
    return any(server_key(p, settings) for p in Provider)


def resolve_api_key(provider: Provider, api_key: str | None, settings: Settings) -> str:
    if api_key:
        return api_key
    fallback = server_key(provider, settings)
    if fallback:
        return fallback
    raise MissingApiKeyError(provider.display_name)
