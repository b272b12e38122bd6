"""API routes exposing the DEI policy scan."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from deiscanner.errors import ValidationError
from deiscanner.models import ScanRequest, ScanResult
from deiscanner.services.scanner import PolicyScanner

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    model: str


def get_scanner(request: Request) -> PolicyScanner:
    """Return the scanner created for the application at startup."""

    return request.app.state.scanner


def _requested_url(payload: Any) -> str:
    try:
        request = ScanRequest.model_validate(payload if isinstance(payload, dict) else {})
    except PydanticValidationError as exc:
        raise ValidationError("URL is required") from exc

    if not request.url or not request.url.strip():
        raise ValidationError("URL is required")
    return request.url.strip()


@router.post("/search", response_model=ScanResult)
async def search_policies(
    payload: Any = Body(default=None),
    scanner: PolicyScanner = Depends(get_scanner),
) -> ScanResult:
    """Discover DEI pages on the requested site and summarise up to three of them."""

    url = _requested_url(payload)
    logger.info("Scan requested for %s", url)
    return await run_in_threadpool(scanner.scan, url)


@router.post("/search-dei", response_model=ScanResult)
async def search_single_page(
    payload: Any = Body(default=None),
    scanner: PolicyScanner = Depends(get_scanner),
) -> ScanResult:
    """Summarise only the requested page, without link discovery."""

    url = _requested_url(payload)
    logger.info("Single page scan requested for %s", url)
    return await run_in_threadpool(scanner.scan, url, discover=False)


@router.get("/health", response_model=HealthResponse)
async def health(scanner: PolicyScanner = Depends(get_scanner)) -> HealthResponse:
    """Report that the service is up and which model it summarises with."""

    return HealthResponse(status="ok", model=scanner.summarizer.model)
