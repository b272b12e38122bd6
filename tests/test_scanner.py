from __future__ import annotations

from types import SimpleNamespace

import pytest
import requests

from deiscanner.config import ScannerConfig
from deiscanner.errors import ExtractionError, FetchError, ValidationError
from deiscanner.models import PolicySummary
from deiscanner.services.scanner import PolicyScanner


class DummyResponse:
    def __init__(self, text: str, status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


class RecordingSummarizer:
    model = "test-model"

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def summarize(self, text: str, url: str = "") -> PolicySummary:
        self.calls.append((text, url))
        return PolicySummary(url=url, content=f"summary of {url}")


def _scanner(pages: dict[str, str], **overrides) -> tuple[PolicyScanner, RecordingSummarizer, list[str]]:
    config = ScannerConfig(openai_api_key="sk-test", **overrides)
    summarizer = RecordingSummarizer()
    requested: list[str] = []

    def fake_get(url, headers, timeout):
        requested.append(url)
        if url not in pages:
            raise requests.ConnectionError(f"Failed to resolve {url}")
        return DummyResponse(pages[url])

    scanner = PolicyScanner(config, summarizer, session=SimpleNamespace(get=fake_get))
    return scanner, summarizer, requested


def test_zero_candidates_falls_back_to_homepage() -> None:
    scanner, summarizer, requested = _scanner(
        {"https://example.com": "<body><p>Welcome</p><a href='/shop'>Shop</a></body>"}
    )

    result = scanner.scan("www.example.com/products")

    assert requested == ["https://example.com"]
    assert summarizer.calls == [("Welcome Shop", "https://example.com")]
    assert result.url == "https://example.com"
    assert result.pages_analyzed == ["https://example.com"]
    assert isinstance(result.policies, PolicySummary)


def test_candidates_are_capped() -> None:
    links = "".join(f"<a href='/dei-{index}'>DEI {index}</a>" for index in range(5))
    pages = {"https://example.com": f"<body>{links}</body>"}
    pages.update({f"https://example.com/dei-{index}": f"<p>Page {index}</p>" for index in range(5)})
    scanner, summarizer, requested = _scanner(pages)

    result = scanner.scan("example.com")

    expected = [f"https://example.com/dei-{index}" for index in range(3)]
    assert [url for _, url in summarizer.calls] == expected
    assert requested == ["https://example.com", *expected]
    assert result.pages_analyzed == expected
    assert isinstance(result.policies, list)
    assert len(result.policies) == 3


def test_single_candidate_flattens_policies() -> None:
    scanner, summarizer, _ = _scanner(
        {
            "https://example.com": "<a href='/inclusion'>Inclusion</a>",
            "https://example.com/inclusion": "<p>We are inclusive.</p>",
        }
    )

    result = scanner.scan("https://example.com")

    assert isinstance(result.policies, PolicySummary)
    assert result.policies.url == "https://example.com/inclusion"
    assert summarizer.calls == [("We are inclusive.", "https://example.com/inclusion")]


def test_discovery_disabled_scans_given_page() -> None:
    scanner, summarizer, requested = _scanner(
        {"https://example.com/about": "<p>About our values.</p>"},
        discovery_enabled=False,
    )

    result = scanner.scan("example.com/about")

    assert requested == ["https://example.com/about"]
    assert result.url == "https://example.com/about"
    assert summarizer.calls == [("About our values.", "https://example.com/about")]


def test_discover_argument_overrides_config() -> None:
    scanner, _, requested = _scanner({"https://example.com/careers": "<p>Careers</p>"})

    scanner.scan("example.com/careers", discover=False)

    assert requested == ["https://example.com/careers"]


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_blank_url_is_rejected(raw) -> None:
    scanner, summarizer, requested = _scanner({})

    with pytest.raises(ValidationError, match="URL is required"):
        scanner.scan(raw)

    assert requested == []
    assert summarizer.calls == []


def test_failure_aborts_remaining_pages() -> None:
    scanner, summarizer, _ = _scanner(
        {
            "https://example.com": "<a href='/diversity'>Diversity</a><a href='/equity'>Equity</a>",
            "https://example.com/equity": "<p>Equity</p>",
        }
    )

    with pytest.raises(FetchError, match="https://example.com/diversity"):
        scanner.scan("example.com")

    assert summarizer.calls == []


def test_keep_partial_results_records_page_errors() -> None:
    scanner, summarizer, _ = _scanner(
        {
            "https://example.com": "<a href='/diversity'>Diversity</a><a href='/equity'>Equity</a>",
            "https://example.com/diversity": "<script>only()</script>",
            "https://example.com/equity": "<p>Equity matters.</p>",
        },
        keep_partial_results=True,
    )

    result = scanner.scan("example.com")

    assert result.pages_analyzed == ["https://example.com/equity"]
    assert [error.url for error in result.errors] == ["https://example.com/diversity"]
    assert summarizer.calls == [("Equity matters.", "https://example.com/equity")]


def test_keep_partial_results_raises_when_every_page_fails() -> None:
    scanner, _, _ = _scanner(
        {"https://example.com": "<body><script>only()</script></body>"},
        keep_partial_results=True,
    )

    with pytest.raises(ExtractionError):
        scanner.scan("example.com")


def test_extraction_uses_configured_cap() -> None:
    scanner, summarizer, _ = _scanner(
        {"https://example.com": "<p>" + "inclusion " * 1000 + "</p>"},
        max_chars=100,
    )

    scanner.scan("example.com")

    assert len(summarizer.calls[0][0]) <= 100
