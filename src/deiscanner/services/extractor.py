"""Conversion of raw HTML into cleaned, length-capped plain text."""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup

from deiscanner.config import ExtractionPolicy
from deiscanner.errors import ExtractionError
from deiscanner.models import ScrapedText

__all__ = [
    "CONTENT_SELECTOR",
    "DEFAULT_MAX_CHARS",
    "NON_CONTENT_TAGS",
    "clean_text",
    "extract_text",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHARS = 8000
NON_CONTENT_TAGS = ["script", "style", "meta", "link", "noscript", "template", "iframe", "svg"]
CONTENT_SELECTOR = "p, h1, h2, h3, h4, h5, h6, li"

_WHITESPACE_RE = re.compile(r"\s+")


def clean_text(text: str, *, preserve_newlines: bool = False) -> str:
    """Collapse whitespace runs into single spaces.

    With ``preserve_newlines`` each line is collapsed separately and blank
    lines are dropped, so the result keeps one paragraph per line.
    """

    if not preserve_newlines:
        return _WHITESPACE_RE.sub(" ", text).strip()

    lines = (_WHITESPACE_RE.sub(" ", line).strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)


def _element_text(soup: BeautifulSoup) -> str:
    parts = (clean_text(element.get_text(" ")) for element in soup.select(CONTENT_SELECTOR))
    return "\n".join(part for part in parts if part)


def _body_text(soup: BeautifulSoup) -> str:
    root = soup.body or soup
    return clean_text(root.get_text(" "))


def extract_text(
    html: str,
    *,
    policy: ExtractionPolicy = ExtractionPolicy.BODY,
    max_chars: int = DEFAULT_MAX_CHARS,
    source_url: str = "",
) -> ScrapedText:
    """Extract readable text from ``html`` and truncate it to ``max_chars``."""

    soup = BeautifulSoup(html, "lxml")
    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()

    if policy is ExtractionPolicy.ELEMENTS:
        text = _element_text(soup)
    else:
        text = _body_text(soup)

    text = text[:max_chars].rstrip()
    if not text:
        raise ExtractionError(f"No readable text found on {source_url or 'the page'}")

    logger.debug("Extracted %d characters from %s", len(text), source_url or "page")
    return ScrapedText(source_url=source_url, text=text, length_cap=max_chars)
