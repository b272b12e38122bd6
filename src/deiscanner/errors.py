"""Error kinds raised by the scan pipeline."""

from __future__ import annotations

__all__ = [
    "ScannerError",
    "FetchError",
    "ExtractionError",
    "SummarizationError",
    "ResponseFormatError",
    "ValidationError",
]


class ScannerError(Exception):
    """Base class for every failure surfaced to API callers."""


class FetchError(ScannerError):
    """Raised when a page cannot be retrieved over HTTP."""


class ExtractionError(ScannerError):
    """Raised when no usable text remains after cleaning a page."""


class SummarizationError(ScannerError):
    """Raised when the language model call fails or returns nothing usable."""


class ResponseFormatError(SummarizationError):
    """Raised when a structured model response cannot be parsed into a report."""


class ValidationError(ScannerError):
    """Raised when a scan request is missing a required field."""
