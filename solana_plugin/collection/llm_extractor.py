"""LLM-based extraction of collection parameters.

The model is only asked for a JSON candidate; the caller validates it against
`CollectionParams`. Anything implementing `CandidateExtractor` can stand in for the model, which
is how tests supply canned candidates.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from http.client import HTTPException
from pathlib import Path
from typing import Any, Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from solana_plugin.config.settings import RuntimeSettings


class LLMExtractionError(RuntimeError):
    """Raised when the LLM call fails or does not return a JSON object."""


class CandidateExtractor(Protocol):
    """Turns a rendered extraction prompt into a best-effort JSON candidate."""

    def extract(self, prompt: str) -> dict[str, Any]: ...


@dataclass(frozen=True)
class LLMConfig:
    """Configuration for the OpenAI-style Chat Completions API call."""

    api_key: str
    model: str = "gpt-4o-mini"
    api_base: str = "https://api.openai.com/v1"
    timeout_s: float = 30.0


def _load_prompt() -> str:
    prompt_path = Path(__file__).resolve().parent / "prompt_collection_v1.md"
    return prompt_path.read_text(encoding="utf-8")


def render_collection_prompt(text: str, *, default_uri: str, wallet_address: str | None) -> str:
    """Fill the extraction template with the message and the default values."""

    return (
        _load_prompt()
        .replace("{{message}}", text)
        .replace("{{default_uri}}", default_uri)
        .replace("{{wallet_address}}", wallet_address or "<wallet_address>")
    )


def _strip_code_fences(text: str) -> str:
    value = (text or "").strip()
    if value.startswith("```"):
        value = value.strip("`")
        # After stripping backticks, try to remove leading "json" marker.
        value = value.removeprefix("json").strip()
    return value


def _chat_completions_url(api_base: str) -> str:
    return api_base.rstrip("/") + "/chat/completions"


class OpenAIExtractor:
    """Extractor backed by an OpenAI-compatible `/chat/completions` endpoint."""

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    def extract(self, prompt: str) -> dict[str, Any]:
        if not self.config.api_key:
            raise LLMExtractionError("OPENAI_API_KEY is required")

        payload = {
            "model": self.config.model,
            "temperature": 0,
            "messages": [
                {"role": "system", "content": prompt},
                {"role": "user", "content": "Return the collection details as JSON."},
            ],
        }

        req = Request(
            _chat_completions_url(self.config.api_base),
            method="POST",
            headers={
                "Authorization": f"Bearer {self.config.api_key}",
                "Content-Type": "application/json",
            },
            data=json.dumps(payload).encode(),
        )

        try:
            with urlopen(req, timeout=self.config.timeout_s) as resp:  # noqa: S310 (configured LLM endpoint)
                body = resp.read()
        except HTTPError as exc:
            raise LLMExtractionError(f"LLM HTTP error: {exc.code}") from exc
        except URLError as exc:
            raise LLMExtractionError("LLM connection error") from exc
        except (TimeoutError, OSError) as exc:
            raise LLMExtractionError("LLM request timed out") from exc
        except HTTPException as exc:
            raise LLMExtractionError(f"LLM response was malformed: {exc!r}") from exc

        try:
            decoded = json.loads(body)
            content = decoded["choices"][0]["message"]["content"]
        except Exception as exc:  # noqa: BLE001
            raise LLMExtractionError("Unexpected LLM response format") from exc

        try:
            candidate = json.loads(_strip_code_fences(content))
        except json.JSONDecodeError as exc:
            raise LLMExtractionError("LLM did not return valid JSON") from exc

        if not isinstance(candidate, dict):
            raise LLMExtractionError("LLM did not return a JSON object")
        return candidate


def llm_config_from_settings(settings: RuntimeSettings) -> LLMConfig:
    """Build LLM config from runtime settings (`OPENAI_API_KEY`, `LLM_*`).

    A missing key is reported on the first `extract()` call, not here.
    """

    return LLMConfig(
        api_key=settings.openai_api_key or "",
        model=settings.llm_model,
        api_base=settings.llm_api_base,
        timeout_s=settings.llm_timeout_s,
    )
