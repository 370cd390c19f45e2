"""Environment configuration for the proxy."""
from __future__ import annotations
import os
from dataclasses import dataclass, field
from functools import lru_cache

DEFAULT_MODEL = "gpt-4o-mini"


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str) -> tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(item.strip().lower() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read once from the environment."""
    host: str = "0.0.0.0"
    port: int = 3000
    default_model: str = DEFAULT_MODEL
    temperature: float = 0.7
    max_tokens: int = 2048
    upstream_timeout: float = 120.0
    debug: bool = False
    log_level: str = "INFO"
    # Server-held keys, only used for providers named in fallback_providers.
    openai_api_key: str | None = None
    gemini_api_key: str | None = None
    anthropic_api_key: str | None = None
    fallback_providers: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            default_model=os.getenv("DEFAULT_MODEL", DEFAULT_MODEL) or DEFAULT_MODEL,
            temperature=float(os.getenv("TEMPERATURE", "0.7")),
            max_tokens=int(os.getenv("MAX_TOKENS", "2048")),
            upstream_timeout=float(os.getenv("UPSTREAM_TIMEOUT", "120")),
            debug=_env_bool("DEBUG"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            fallback_providers=_env_list("FALLBACK_PROVIDERS"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
