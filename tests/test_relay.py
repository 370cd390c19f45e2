from __future__ import annotations

import httpx
import pytest

from roblox_ai_proxy.common.config import Settings
from roblox_ai_proxy.common.schema import ChatMessage
from roblox_ai_proxy.relay.credentials import resolve_api_key
from roblox_ai_proxy.relay.errors import (
    InternalError,
    MissingApiKeyError,
    UnsupportedModelError,
    UpstreamProviderError,
)
from roblox_ai_proxy.relay.normalize import extract_text, normalize_response, parse_error_body
from roblox_ai_proxy.relay.providers import Provider, select_provider
from roblox_ai_proxy.relay.translate import (
    GEMINI_SYSTEM_DELIMITER,
    build_outbound_request,
    claude_payload,
    gemini_contents,
)

SYSTEM = "SYSTEM PROMPT"


def _messages(*pairs: tuple[str, str]) -> list[ChatMessage]:
    return [ChatMessage(role=r, content=c) for r, c in pairs]


@pytest.mark.parametrize(
    "model,provider",
    [
        ("gpt-4o-mini", Provider.OPENAI),
        ("gpt-", Provider.OPENAI),
        ("gemini-1.5-pro", Provider.GEMINI),
        ("claude-3-opus-20240229", Provider.CLAUDE),
    ],
)
def test_select_provider(model: str, provider: Provider) -> None:
    assert select_provider(model) is provider


@pytest.mark.parametrize("model", ["", "gpt4", "Gemini-pro", "o1-mini", " claude-3"])
def test_select_provider_rejects_unknown(model: str) -> None:
    with pytest.raises(UnsupportedModelError) as exc:
        select_provider(model)
    assert exc.value.status_code == 400


def test_caller_key_wins_over_server_key() -> None:
    settings = Settings(openai_api_key="server", fallback_providers=("openai",))
    assert resolve_api_key(Provider.OPENAI, "caller", settings) == "caller"
    assert resolve_api_key(Provider.OPENAI, None, settings) == "server"


def test_server_key_ignored_unless_listed() -> None:
    settings = Settings(gemini_api_key="server", fallback_providers=("openai",))
    with pytest.raises(MissingApiKeyError):
        resolve_api_key(Provider.GEMINI, None, settings)


def test_gemini_contents_preserve_order_and_length() -> None:
    messages = _messages(
        ("user", "one"), ("assistant", "two"), ("user", "three"), ("system", "four")
    )
    contents = gemini_contents(messages, SYSTEM)
    assert len(contents) == len(messages)
    assert [c["role"] for c in contents] == ["user", "model", "user", "user"]
    assert contents[0]["parts"][0]["text"] == f"{SYSTEM}{GEMINI_SYSTEM_DELIMITER}one"
    assert [c["parts"][0]["text"] for c in contents[1:]] == ["two", "three", "four"]


def test_gemini_contents_do_not_mutate_input() -> None:
    messages = _messages(("user", "hi"))
    gemini_contents(messages, SYSTEM)
    assert messages[0].content == "hi"


def test_claude_payload_uses_system_field() -> None:
    payload = claude_payload("claude-3-haiku", _messages(("user", "a"), ("tool", "b")), SYSTEM, 0.7, 2048)
    assert payload["system"] == SYSTEM
    assert payload["messages"] == [
        {"role": "user", "content": "a"},
        {"role": "user", "content": "b"},
    ]
    assert payload["max_tokens"] == 2048


def test_outbound_auth_placement() -> None:
    msgs = _messages(("user", "hi"))
    openai = build_outbound_request(Provider.OPENAI, "gpt-4o", msgs, SYSTEM, "k")
    gemini = build_outbound_request(Provider.GEMINI, "gemini-pro", msgs, SYSTEM, "k")
    claude = build_outbound_request(Provider.CLAUDE, "claude-3", msgs, SYSTEM, "k")
    assert openai.headers == {"Authorization": "Bearer k"}
    assert gemini.params == {"key": "k"} and gemini.headers == {}
    assert gemini.url.endswith("/models/gemini-pro:generateContent")
    assert claude.headers["x-api-key"] == "k"


def test_parse_error_body_variants() -> None:
    assert parse_error_body('{"error":{"message":"bad key","type":"auth","code":"invalid_api_key"}}') == (
        "bad key",
        "auth",
        "invalid_api_key",
    )
    assert parse_error_body(
        '{"error":{"code":429,"message":"quota","status":"RESOURCE_EXHAUSTED"}}'
    ) == ("quota", "RESOURCE_EXHAUSTED", 429)
    assert parse_error_body('{"error":"nope"}') == ("nope", None, None)
    assert parse_error_body("<html>502</html>") == ("<html>502</html>", None, None)


def test_extract_text_empty_is_none() -> None:
    assert extract_text(Provider.OPENAI, {"choices": [{"message": {"content": ""}}]}) is None
    assert extract_text(Provider.CLAUDE, {"content": []}) is None
    assert extract_text(Provider.GEMINI, None) is None


def test_normalize_non_json_success_is_internal_error() -> None:
    response = httpx.Response(200, text="not json")
    with pytest.raises(InternalError):
        normalize_response(Provider.OPENAI, response)


def test_normalize_upstream_error_keeps_status() -> None:
    response = httpx.Response(401, json={"error": {"message": "invalid x-api-key"}})
    with pytest.raises(UpstreamProviderError) as exc:
        normalize_response(Provider.CLAUDE, response)
    assert exc.value.status_code == 401
    assert exc.value.error == "Error from Claude API"
    assert exc.value.details == "invalid x-api-key"
    assert exc.value.code == 401


def test_normalize_redirect_becomes_bad_gateway() -> None:
    response = httpx.Response(302, text="moved")
    with pytest.raises(UpstreamProviderError) as exc:
        normalize_response(Provider.OPENAI, response)
    assert exc.value.status_code == 502
    assert exc.value.code == 302


def test_gemini_model_cannot_escape_endpoint_path() -> None:
    outbound = build_outbound_request(
        Provider.GEMINI,
        "gemini-x/../../../v1beta/cachedContents#",
        _messages(("user", "hi")),
        SYSTEM,
        "k",
    )
    url = httpx.URL(outbound.url)
    assert url.fragment == ""
    assert url.raw_path.startswith(b"/v1beta/models/gemini-x%2F")
    assert url.raw_path.endswith(b":generateContent")
    assert b"/cachedContents" not in url.raw_path


def test_gemini_first_message_without_text_is_internal_error() -> None:
    messages = [ChatMessage.model_construct(role="user", content=None)]
    with pytest.raises(InternalError) as exc:
        gemini_contents(messages, SYSTEM)
    assert exc.value.status_code == 500
