"""Error taxonomy for the relay.

Every failure the relay produces is a ``RelayError`` carrying the HTTP status
and the client-facing ``error``/``details`` pair. The FastAPI layer renders
them as ``ErrorResponse`` bodies.
"""
from __future__ import annotations

from roblox_ai_proxy.common.schema import ErrorResponse


class RelayError(Exception):
    status_code: int = 500

    def __init__(
        self,
        error: str,
        details: str | None = None,
        *,
        status_code: int | None = None,
        error_type: str | None = None,
        code: int | str | None = None,
        stack: str | None = None,
    ) -> None:
        super().__init__(error if details is None else f"{error}: {details}")
        self.error = error
        self.details = details
        self.error_type = error_type
        self.code = code
        self.stack = stack
        if status_code is not None:
            self.status_code = status_code

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error=self.error,
            details=self.details,
            type=self.error_type,
            code=self.code,
            stack=self.stack,
        )


class ClientValidationError(RelayError):
    """Malformed or incomplete request; resolved without contacting a provider."""
    status_code = 400


class UnsupportedModelError(ClientValidationError):
    def __init__(self, model: str) -> None:
        super().__init__(
            "Unsupported model",
            f"Model '{model}' is not supported. Use a model name starting with "
            "'gpt-', 'gemini-' or 'claude-'.",
        )
        self.model = model


class MissingApiKeyError(ClientValidationError):
    def __init__(self, provider_name: str) -> None:
        super().__init__(
            "API key required",
            f"Provide 'apiKey' in the request body to use {provider_name} models.",
        )


class UpstreamProviderError(RelayError):
    """Non-2xx answer from a provider; keeps the upstream status code."""
    status_code = 502


class InternalError(RelayError):
    status_code = 500
