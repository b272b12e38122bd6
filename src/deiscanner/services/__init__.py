"""Service layer entry points for the DEI policy scanner."""

from __future__ import annotations

from .discovery import discover_policy_pages  # noqa: F401
from .extractor import extract_text  # noqa: F401
from .fetcher import fetch_html  # noqa: F401
from .scanner import PolicyScanner  # noqa: F401
from .summarizer import PolicySummarizer  # noqa: F401

__all__ = ["PolicyScanner", "PolicySummarizer", "discover_policy_pages", "extract_text", "fetch_html"]
