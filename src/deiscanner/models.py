"""Domain models used across the application."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ScanRequest(BaseModel):
    """Body of a scan request; ``url`` may omit its scheme."""

    url: Optional[str] = None


class CandidatePage(BaseModel):
    """A same-site page whose link text suggests DEI content."""

    url: str
    anchor_text: str = ""


class ScrapedText(BaseModel):
    """Cleaned text extracted from a fetched page."""

    source_url: str = ""
    text: str
    length_cap: int


class PolicyReport(BaseModel):
    """Structured summary returned when JSON output is enabled."""

    summary: str
    findings: List[str]
    recommendations: List[str]


class PolicySummary(BaseModel):
    """The model's answer for a single page."""

    url: str
    content: Union[PolicyReport, str]


class PageError(BaseModel):
    """A page that failed while partial results were being kept."""

    url: str
    error: str


class ScanResult(BaseModel):
    """Aggregate returned to the caller for one scan."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    pages_analyzed: List[str] = Field(default_factory=list, alias="pagesAnalyzed")
    policies: Union[PolicySummary, List[PolicySummary]]
    errors: List[PageError] = Field(default_factory=list)


__all__ = [
    "CandidatePage",
    "PageError",
    "PolicyReport",
    "PolicySummary",
    "ScanRequest",
    "ScanResult",
    "ScrapedText",
]
