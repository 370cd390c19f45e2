"""Provider selection by model-name prefix."""
from __future__ import annotations

from enum import Enum

from roblox_ai_proxy.relay.errors import UnsupportedModelError


class Provider(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"

    @property
    def prefix(self) -> str:
        return _PREFIXES[self]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_PREFIXES = {
    Provider.OPENAI: "gpt-",
    Provider.GEMINI: "gemini-",
    Provider.CLAUDE: "claude-",
}

_DISPLAY_NAMES = {
    Provider.OPENAI: "OpenAI",
    Provider.GEMINI: "Gemini",
    Provider.CLAUDE: "Claude",
}


def select_provider(model: str) -> Provider:
    """
    Map a model identifier to its provider.

    Matching is a case-sensitive prefix check in declaration order; the rest
    of the name is passed to the provider unchecked.

    Raises:
        UnsupportedModelError: no provider prefix matches.
    """
    for provider in Provider:
        if model.startswith(provider.prefix):
            return provider
    raise UnsupportedModelError(model)
