"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from deiscanner.api.routes import router
from deiscanner.config import ScannerConfig
from deiscanner.errors import ScannerError, ValidationError
from deiscanner.services.scanner import PolicyScanner
from deiscanner.services.summarizer import PolicySummarizer

logger = logging.getLogger(__name__)


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def _scanner_error_handler(request: Request, exc: ScannerError) -> JSONResponse:
    logger.exception("Error processing %s %s", request.method, request.url.path, exc_info=exc)
    message = str(exc) or "An error occurred while processing your request"
    return JSONResponse(status_code=500, content={"error": message})


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error processing %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": f"An error occurred while processing your request: {exc}"})


def create_app(
    config: ScannerConfig | None = None,
    *,
    scanner: PolicyScanner | None = None,
) -> FastAPI:
    """Build the API around a scanner created once for the process.

    Without arguments the configuration is read from the environment, so a
    missing ``OPENAI_API_KEY`` raises :class:`~deiscanner.config.ConfigurationError`
    before the server starts.
    """

    if scanner is None:
        config = config or ScannerConfig.from_env()
        scanner = PolicyScanner(config, PolicySummarizer.from_config(config))

    app = FastAPI(title="DEI Policy Scanner", description="Summarise DEI policies published on company websites")
    app.state.scanner = scanner

    app.add_middleware(
        CORSMiddleware,
        allow_origins=scanner.config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(ScannerError, _scanner_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)
    app.include_router(router, prefix="/api")

    return app
