"""Tests for the LLM extraction service (HTTP faked via `urlopen`)."""

from __future__ import annotations

import io
import json
from typing import Any
from http.client import BadStatusLine, IncompleteRead
from urllib.error import HTTPError

import pytest

from fakes import make_settings
from solana_plugin.collection import llm_extractor
from solana_plugin.collection.llm_extractor import (
    LLMConfig,
    LLMExtractionError,
    OpenAIExtractor,
    llm_config_from_settings,
    render_collection_prompt,
)


class _FakeResponse(io.BytesIO):
    def __enter__(self) -> _FakeResponse:
        return self

    def __exit__(self, *_exc: Any) -> None:
        self.close()


def _completion(content: str) -> bytes:
    return json.dumps({"choices": [{"message": {"content": content}}]}).encode()


def _serve(monkeypatch: pytest.MonkeyPatch, body: bytes | Exception) -> list[Any]:
    requests: list[Any] = []

    def _fake_urlopen(req: Any, timeout: float) -> _FakeResponse:
        requests.append(req)
        if isinstance(body, Exception):
            raise body
        return _FakeResponse(body)

    monkeypatch.setattr(llm_extractor, "urlopen", _fake_urlopen)
    return requests


def test_prompt_embeds_message_and_defaults() -> None:
    prompt = render_collection_prompt(
        "Create an NFT collection called 'Cats'",
        default_uri="https://example.org/default.json",
        wallet_address="WALLET1",
    )

    assert "Message: \"Create an NFT collection called 'Cats'\"" in prompt
    assert "https://example.org/default.json" in prompt
    assert '{ "address": "WALLET1", "percentage": 100 }' in prompt
    assert "royaltyBasisPoints: 500" in prompt
    assert "{{" not in prompt


def test_prompt_uses_placeholder_without_wallet() -> None:
    prompt = render_collection_prompt("x", default_uri="https://d", wallet_address=None)

    assert "<wallet_address>" in prompt


def test_extract_posts_chat_completion_and_strips_fences(monkeypatch: pytest.MonkeyPatch) -> None:
    requests = _serve(monkeypatch, _completion('```json\n{"name": "Cats", "uri": "https://a.io/m"}\n```'))
    extractor = OpenAIExtractor(LLMConfig(api_key="sk-test", api_base="https://llm.local/v1/"))

    candidate = extractor.extract("PROMPT")

    assert candidate == {"name": "Cats", "uri": "https://a.io/m"}
    assert len(requests) == 1
    req = requests[0]
    assert req.full_url == "https://llm.local/v1/chat/completions"
    assert req.get_header("Authorization") == "Bearer sk-test"
    payload = json.loads(req.data)
    assert payload["temperature"] == 0
    assert payload["messages"][0] == {"role": "system", "content": "PROMPT"}


def test_extract_rejects_non_json_content(monkeypatch: pytest.MonkeyPatch) -> None:
    _serve(monkeypatch, _completion("Sure! The collection is called Cats."))

    with pytest.raises(LLMExtractionError):
        OpenAIExtractor(LLMConfig(api_key="sk-test")).extract("PROMPT")


def test_extract_rejects_json_that_is_not_an_object(monkeypatch: pytest.MonkeyPatch) -> None:
    _serve(monkeypatch, _completion("[1, 2, 3]"))

    with pytest.raises(LLMExtractionError):
        OpenAIExtractor(LLMConfig(api_key="sk-test")).extract("PROMPT")


def test_extract_reports_http_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    _serve(monkeypatch, HTTPError("https://llm", 401, "Unauthorized", None, None))  # type: ignore[arg-type]

    with pytest.raises(LLMExtractionError, match="401"):
        OpenAIExtractor(LLMConfig(api_key="sk-test")).extract("PROMPT")


@pytest.mark.parametrize("failure", [BadStatusLine("garbage"), IncompleteRead(b"")])
def test_extract_reports_malformed_http_responses(monkeypatch: pytest.MonkeyPatch, failure: Exception) -> None:
    _serve(monkeypatch, failure)

    with pytest.raises(LLMExtractionError, match="malformed"):
        OpenAIExtractor(LLMConfig(api_key="sk-test")).extract("PROMPT")


def test_extract_reports_unexpected_response_shape(monkeypatch: pytest.MonkeyPatch) -> None:
    _serve(monkeypatch, b'{"error": "nope"}')

    with pytest.raises(LLMExtractionError, match="format"):
        OpenAIExtractor(LLMConfig(api_key="sk-test")).extract("PROMPT")


def test_missing_api_key_fails_without_network(monkeypatch: pytest.MonkeyPatch) -> None:
    requests = _serve(monkeypatch, _completion("{}"))
    extractor = OpenAIExtractor(llm_config_from_settings(make_settings(OPENAI_API_KEY="")))

    with pytest.raises(LLMExtractionError, match="OPENAI_API_KEY"):
        extractor.extract("PROMPT")
    assert requests == []


def test_config_from_settings() -> None:
    cfg = llm_config_from_settings(
        make_settings(OPENAI_API_KEY="sk-live", LLM_MODEL="gpt-4o", LLM_API_BASE="https://x/v1", LLM_TIMEOUT_S=5)
    )

    assert cfg == LLMConfig(api_key="sk-live", model="gpt-4o", api_base="https://x/v1", timeout_s=5.0)
