"""Pydantic models for the client-facing request/response contract."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    role: str
    content: str


class GenerationRequest(BaseModel):
    """Body of POST /generate as sent by the Studio plugin."""
    model_config = ConfigDict(populate_by_name=True)

    context: str | None = None
    model: str | None = None
    api_key: str | None = Field(default=None, alias="apiKey")
    messages: list[ChatMessage] | None = None


class GenerationResponse(BaseModel):
    text: str


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
    type: str | None = None
    code: int | str | None = None
    stack: str | None = None
