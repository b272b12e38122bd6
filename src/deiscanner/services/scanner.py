"""Per-request pipeline: fetch, discover, extract and summarise."""

from __future__ import annotations

import logging
from typing import List

import requests

from deiscanner.config import ScannerConfig
from deiscanner.errors import ScannerError, ValidationError
from deiscanner.models import PageError, PolicySummary, ScanResult
from deiscanner.services.discovery import discover_policy_pages
from deiscanner.services.extractor import extract_text
from deiscanner.services.fetcher import fetch_html, normalize_url, origin_from_url
from deiscanner.services.summarizer import PolicySummarizer

__all__ = ["PolicyScanner"]

logger = logging.getLogger(__name__)


class PolicyScanner:
    """Run a DEI policy scan for a single website.

    Every step runs sequentially. By default the first failure aborts the
    scan; with ``keep_partial_results`` failed pages are reported in
    :attr:`ScanResult.errors` while the remaining pages are processed.
    """

    # Pipeline stages, overridable per instance.
    fetch_html = staticmethod(fetch_html)
    discover_policy_pages = staticmethod(discover_policy_pages)
    extract_text = staticmethod(extract_text)

    def __init__(
        self,
        config: ScannerConfig,
        summarizer: PolicySummarizer,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        self.summarizer = summarizer
        self._session = session

    def scan(self, raw_url: str | None, *, discover: bool | None = None) -> ScanResult:
        """Scan ``raw_url`` and return the aggregated summaries.

        ``discover`` overrides the configured link discovery for this scan.
        """

        if not raw_url or not raw_url.strip():
            raise ValidationError("URL is required")

        if discover is None:
            discover = self.config.discovery_enabled

        prefetched: dict[str, str] = {}
        if discover:
            site_url = origin_from_url(raw_url)
            logger.info("Scanning %s for DEI policy pages", site_url)
            homepage = self._fetch(site_url)
            candidates = self.discover_policy_pages(homepage, site_url)
            if candidates:
                pages = [candidate.url for candidate in candidates[: self.config.max_pages]]
            else:
                logger.info("No DEI links found on %s, analysing the homepage", site_url)
                pages = [site_url]
                prefetched[site_url] = homepage
        else:
            site_url = normalize_url(raw_url)
            logger.info("Scanning %s", site_url)
            pages = [site_url]

        summaries: List[PolicySummary] = []
        errors: List[PageError] = []
        first_error: ScannerError | None = None

        for page_url in pages:
            try:
                summaries.append(self._analyze(page_url, prefetched.get(page_url)))
            except ScannerError as exc:
                if not self.config.keep_partial_results:
                    raise
                logger.warning("Skipping %s: %s", page_url, exc)
                errors.append(PageError(url=page_url, error=str(exc)))
                if first_error is None:
                    first_error = exc

        if not summaries and first_error is not None:
            raise first_error

        policies = summaries[0] if len(pages) == 1 else summaries

        return ScanResult(
            url=site_url,
            pages_analyzed=[summary.url for summary in summaries],
            policies=policies,
            errors=errors,
        )

    def _fetch(self, url: str) -> str:
        return self.fetch_html(url, session=self._session, timeout=self.config.request_timeout)

    def _analyze(self, page_url: str, html: str | None = None) -> PolicySummary:
        if html is None:
            html = self._fetch(page_url)
        scraped = self.extract_text(
            html,
            policy=self.config.extraction_policy,
            max_chars=self.config.max_chars,
            source_url=page_url,
        )
        return self.summarizer.summarize(scraped.text, page_url)
