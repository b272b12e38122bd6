from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from deiscanner.config import ScannerConfig
from deiscanner.errors import ResponseFormatError, SummarizationError
from deiscanner.models import PolicyReport
from deiscanner.services.summarizer import PolicySummarizer, build_messages


def _completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _client(response=None, error: Exception | None = None) -> MagicMock:
    client = MagicMock()
    if error is not None:
        client.chat.completions.create.side_effect = error
    else:
        client.chat.completions.create.return_value = response
    return client


def test_build_messages_embeds_text_and_url() -> None:
    messages = build_messages("We celebrate belonging.", "https://example.com/dei")

    assert [message["role"] for message in messages] == ["system", "user"]
    assert "DEI policy analyst" in messages[0]["content"]
    assert "https://example.com/dei" in messages[1]["content"]
    assert messages[1]["content"].endswith("We celebrate belonging.")
    assert "JSON" not in messages[1]["content"]


def test_summarize_returns_trimmed_text() -> None:
    client = _client(_completion("  The company publishes a DEI report.  "))
    summarizer = PolicySummarizer(client, model="gpt-4o-mini", max_tokens=1000, temperature=0.3)

    summary = summarizer.summarize("text", "https://example.com")

    assert summary.url == "https://example.com"
    assert summary.content == "The company publishes a DEI report."
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["max_tokens"] == 1000
    assert kwargs["temperature"] == 0.3
    assert "response_format" not in kwargs


def test_summarize_structured_parses_report() -> None:
    payload = {
        "summary": "Committed to inclusive hiring.",
        "findings": ["Publishes workforce data"],
        "recommendations": ["Add measurable goals"],
    }
    client = _client(_completion(json.dumps(payload)))
    summarizer = PolicySummarizer(client, structured=True)

    summary = summarizer.summarize("text", "https://example.com")

    assert summary.content == PolicyReport(**payload)
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["response_format"] == {"type": "json_object"}
    assert "recommendations" in kwargs["messages"][1]["content"]


@pytest.mark.parametrize(
    "content",
    ["not json at all", json.dumps({"summary": "Missing lists"})],
)
def test_summarize_structured_rejects_bad_reports(content: str) -> None:
    summarizer = PolicySummarizer(_client(_completion(content)), structured=True)

    with pytest.raises(ResponseFormatError):
        summarizer.summarize("text", "https://example.com")


def test_summarize_wraps_api_errors() -> None:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    error = openai.APIConnectionError(request=request)
    summarizer = PolicySummarizer(_client(error=error))

    with pytest.raises(SummarizationError, match="Failed to analyze content with OpenAI") as excinfo:
        summarizer.summarize("text")

    assert excinfo.value.__cause__ is error


@pytest.mark.parametrize("response", [_completion(""), _completion(None), SimpleNamespace(choices=[])])
def test_summarize_rejects_empty_completions(response) -> None:
    summarizer = PolicySummarizer(_client(response))

    with pytest.raises(SummarizationError):
        summarizer.summarize("text")


def test_from_config_uses_configured_values() -> None:
    config = ScannerConfig(openai_api_key="sk-test", model="gpt-4o", max_tokens=500, structured_output=True)
    client = object()

    summarizer = PolicySummarizer.from_config(config, client)

    assert summarizer.model == "gpt-4o"
    assert summarizer.max_tokens == 500
    assert summarizer.structured is True
