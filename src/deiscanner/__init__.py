"""DEI policy scanner package exposing configuration, API, and service helpers."""

from __future__ import annotations

from .config import ConfigurationError, ExtractionPolicy, ScannerConfig  # noqa: F401
from .errors import (  # noqa: F401
    ExtractionError,
    FetchError,
    ResponseFormatError,
    ScannerError,
    SummarizationError,
    ValidationError,
)

__all__ = [
    "ConfigurationError",
    "ExtractionError",
    "ExtractionPolicy",
    "FetchError",
    "ResponseFormatError",
    "ScannerConfig",
    "ScannerError",
    "SummarizationError",
    "ValidationError",
]
