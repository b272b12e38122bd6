"""Summarisation of extracted page text with the OpenAI chat completion API."""

from __future__ import annotations

import logging
from typing import Any

from openai import OpenAI, OpenAIError
from pydantic import ValidationError

from deiscanner.config import ScannerConfig
from deiscanner.errors import ResponseFormatError, SummarizationError
from deiscanner.models import PolicyReport, PolicySummary

__all__ = [
    "SYSTEM_PROMPT",
    "PolicySummarizer",
    "build_messages",
    "build_openai_client",
]

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a DEI policy analyst that extracts and summarizes Diversity, Equity, and Inclusion "
    "policies from website content. Extract key policies, commitments, initiatives, and goals related "
    "to DEI. If no DEI content is found, state that clearly."
)

TASK_PROMPT = (
    "Below is text scraped from the website: {url}\n\n"
    "Your task:\n"
    "1. Identify any DEI-related policies, statements, commitments, or initiatives in the content.\n"
    "2. Summarize the passages that discuss diversity, equity, inclusion, belonging, or related topics.\n"
    "3. If no explicit DEI policy is found, say so and note any information that indicates the "
    "organization's stance on diversity and inclusion.\n"
)

JSON_PROMPT = (
    "Respond with a single JSON object with exactly these fields:\n"
    '  "summary": a short paragraph summarizing the DEI position,\n'
    '  "findings": a list of strings, one per DEI-related statement or initiative found,\n'
    '  "recommendations": a list of strings suggesting where the policy could be clearer or stronger.\n'
)


def build_openai_client(config: ScannerConfig) -> OpenAI:
    """Create the OpenAI client shared by every scan in the process."""

    return OpenAI(api_key=config.openai_api_key)


def build_messages(text: str, url: str = "", *, structured: bool = False) -> list[dict[str, str]]:
    """Return the role-tagged chat messages for ``text`` scraped from ``url``."""

    instructions = TASK_PROMPT.format(url=url or "(unknown)")
    if structured:
        instructions += "\n" + JSON_PROMPT

    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"{instructions}\nWebsite content:\n{text}"},
    ]


class PolicySummarizer:
    """Send page text to a chat completion model and return its DEI summary."""

    def __init__(
        self,
        client: Any,
        *,
        model: str = "gpt-4o-mini",
        max_tokens: int = 1000,
        temperature: float = 0.3,
        structured: bool = False,
    ) -> None:
        self._client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.structured = structured

    @classmethod
    def from_config(cls, config: ScannerConfig, client: Any | None = None) -> "PolicySummarizer":
        return cls(
            client if client is not None else build_openai_client(config),
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            structured=config.structured_output,
        )

    def summarize(self, text: str, url: str = "") -> PolicySummary:
        """Summarise ``text`` and return the model's answer for ``url``.

        Raises :class:`SummarizationError` when the API call fails and
        :class:`ResponseFormatError` when a structured answer is malformed.
        """

        request: dict[str, Any] = {
            "model": self.model,
            "messages": build_messages(text, url, structured=self.structured),
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        if self.structured:
            request["response_format"] = {"type": "json_object"}

        logger.info("Summarizing %d characters from %s with %s", len(text), url or "page", self.model)
        try:
            response = self._client.chat.completions.create(**request)
        except OpenAIError as exc:
            logger.error("OpenAI request failed for %s: %s", url or "page", exc)
            raise SummarizationError(f"Failed to analyze content with OpenAI: {exc}") from exc

        content = self._first_message(response)
        if self.structured:
            return PolicySummary(url=url, content=self._parse_report(content))
        return PolicySummary(url=url, content=content)

    @staticmethod
    def _first_message(response: Any) -> str:
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            raise SummarizationError("OpenAI returned a malformed completion") from exc

        if not content or not content.strip():
            raise SummarizationError("OpenAI returned an empty completion")
        return content.strip()

    @staticmethod
    def _parse_report(content: str) -> PolicyReport:
        try:
            return PolicyReport.model_validate_json(content)
        except ValidationError as exc:
            raise ResponseFormatError(f"Model response is not a valid policy report: {exc}") from exc
