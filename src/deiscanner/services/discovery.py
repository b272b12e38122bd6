"""Discovery of DEI-related pages linked from a homepage."""

from __future__ import annotations

import logging
from typing import Iterable, List
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from deiscanner.models import CandidatePage

__all__ = [
    "DEI_KEYWORDS",
    "EXCLUDED_EXTENSIONS",
    "discover_policy_pages",
    "matches_keyword",
    "same_host",
]

logger = logging.getLogger(__name__)

DEI_KEYWORDS = (
    "diversity",
    "equity",
    "inclusion",
    "dei",
    "equality",
    "belonging",
    "responsible",
    "responsibility",
    "esg",
    "social responsibility",
    "about us",
    "about",
    "mission",
    "values",
)

EXCLUDED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".css", ".js")


def matches_keyword(text: str, keywords: Iterable[str] = DEI_KEYWORDS) -> bool:
    """Return ``True`` when the lower-cased ``text`` contains any keyword."""

    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def _bare_host(netloc: str) -> str:
    host = netloc.lower().split("@")[-1].split(":")[0]
    return host[4:] if host.startswith("www.") else host


def same_host(candidate_url: str, origin: str) -> bool:
    """Compare hostnames, treating ``www.example.com`` and ``example.com`` as one site."""

    candidate = _bare_host(urlparse(candidate_url).netloc)
    return bool(candidate) and candidate == _bare_host(urlparse(origin).netloc)


def discover_policy_pages(html: str, origin: str) -> List[CandidatePage]:
    """Return same-site pages whose link text mentions a DEI keyword.

    Pages are listed once each, in the order their first link appears. An
    empty list means the homepage itself should be analysed.
    """

    soup = BeautifulSoup(html, "lxml")
    seen: set[str] = set()
    pages: List[CandidatePage] = []

    for anchor in soup.find_all("a"):
        href = (anchor.get("href") or "").strip()
        text = anchor.get_text(" ", strip=True)
        if not href or not text:
            continue
        if not matches_keyword(text):
            continue

        try:
            absolute = urljoin(origin, href)
            parsed = urlparse(absolute)
        except ValueError as exc:
            logger.debug("Skipping malformed link %r: %s", href, exc)
            continue
        if parsed.scheme not in {"http", "https"}:
            continue
        if parsed.path.lower().endswith(EXCLUDED_EXTENSIONS):
            continue
        if not same_host(absolute, origin):
            continue

        if absolute in seen:
            continue
        seen.add(absolute)
        pages.append(CandidatePage(url=absolute, anchor_text=text))

    logger.info("Discovered %d candidate DEI pages on %s", len(pages), origin)
    return pages
