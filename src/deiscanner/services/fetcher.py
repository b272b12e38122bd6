"""HTTP retrieval of raw page HTML."""

from __future__ import annotations

import logging
import re

import requests

from deiscanner.errors import FetchError

__all__ = ["DEFAULT_HEADERS", "fetch_html", "normalize_url", "origin_from_url"]

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/129.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

CONNECT_TIMEOUT = 10

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_ORIGIN_PREFIX_RE = re.compile(r"^(?:https?://)?(?:www\.)?", re.IGNORECASE)


def normalize_url(raw_url: str) -> str:
    """Return ``raw_url`` with an ``https://`` scheme added when none is present."""

    url = raw_url.strip()
    if not _SCHEME_RE.match(url):
        url = "https://" + url
    return url


def origin_from_url(raw_url: str) -> str:
    """Reduce ``raw_url`` to ``https://<host>``, dropping any path and ``www.`` prefix."""

    host = _ORIGIN_PREFIX_RE.sub("", raw_url.strip(), count=1)
    host = re.split(r"[/?#]", host, maxsplit=1)[0]
    return "https://" + host


def fetch_html(
    url: str,
    *,
    session: requests.Session | None = None,
    timeout: float = 30.0,
) -> str:
    """Fetch ``url`` once and return the response body.

    Network errors, TLS errors and non-2xx responses are raised as
    :class:`~deiscanner.errors.FetchError`. Nothing is retried.
    """

    target = normalize_url(url)
    getter = session.get if session is not None else requests.get

    try:
        response = getter(target, headers=DEFAULT_HEADERS, timeout=(CONNECT_TIMEOUT, timeout))
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.error("Fetch failed for %s: %s", target, exc)
        raise FetchError(f"Failed to fetch {target}: {exc}") from exc

    logger.info("Fetched %d characters from %s", len(response.text), target)
    return response.text
