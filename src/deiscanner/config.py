"""Configuration models and helpers for the DEI policy scanner."""

from __future__ import annotations

import json
import os
from enum import Enum
from pathlib import Path
from typing import List, Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator

__all__ = [
    "ConfigurationError",
    "ExtractionPolicy",
    "ScannerConfig",
    "DEFAULT_ENV_PATH",
    "load_local_env",
]

DEFAULT_ENV_PATH = Path(__file__).resolve().parents[2] / ".env"

#: Environment variable names mapped onto :class:`ScannerConfig` fields.
ENV_FIELDS = {
    "OPENAI_API_KEY": "openai_api_key",
    "DEI_SCANNER_MODEL": "model",
    "DEI_SCANNER_MAX_TOKENS": "max_tokens",
    "DEI_SCANNER_TEMPERATURE": "temperature",
    "DEI_SCANNER_MAX_CHARS": "max_chars",
    "DEI_SCANNER_MAX_PAGES": "max_pages",
    "DEI_SCANNER_DISCOVERY": "discovery_enabled",
    "DEI_SCANNER_EXTRACTION": "extraction_policy",
    "DEI_SCANNER_STRUCTURED": "structured_output",
    "DEI_SCANNER_KEEP_PARTIAL": "keep_partial_results",
    "DEI_SCANNER_TIMEOUT": "request_timeout",
    "DEI_SCANNER_CORS_ORIGINS": "cors_origins",
    "PORT": "port",
}


class ConfigurationError(RuntimeError):
    """Raised when the scanner cannot be configured from its environment."""


class ExtractionPolicy(str, Enum):
    """Which parts of a page are turned into text for the summarizer."""

    #: Only ``p``, ``h1``-``h6`` and ``li`` elements, one per line.
    ELEMENTS = "elements"
    #: The whole ``<body>`` text collapsed onto a single line.
    BODY = "body"


def load_local_env(env_path: Path | str | None = None) -> None:
    """Populate ``os.environ`` with variables from a project-level ``.env`` file.

    Variables already present in the environment win over the file.
    """

    path = Path(env_path) if env_path else DEFAULT_ENV_PATH
    if not path.exists():
        return

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key or key in os.environ:
            continue

        os.environ[key] = value.strip().strip('"').strip("'")


class ScannerConfig(BaseModel):
    """Settings shared by every scan handled by the process."""

    openai_api_key: str = Field(..., min_length=1, description="API key for the OpenAI platform")
    model: str = Field(default="gpt-4o-mini", description="Chat completion model used for summaries")
    max_tokens: int = Field(default=1000, gt=0, description="Upper bound on completion length")
    temperature: float = Field(default=0.3, ge=0.3, le=0.7, description="Sampling temperature, kept low-to-moderate")
    max_chars: int = Field(
        default=8000,
        gt=0,
        description="Character budget for page text handed to the model",
    )
    max_pages: int = Field(
        default=3,
        gt=0,
        description="Maximum number of discovered pages analysed per scan",
    )
    discovery_enabled: bool = Field(
        default=True,
        description="Scan the homepage for DEI-related links before summarising",
    )
    extraction_policy: ExtractionPolicy = Field(default=ExtractionPolicy.BODY)
    structured_output: bool = Field(
        default=False,
        description="Ask the model for a JSON report instead of free text",
    )
    keep_partial_results: bool = Field(
        default=False,
        description=(
            "Record per-page failures and keep going instead of aborting the scan. "
            "The scan still fails when every page fails."
        ),
    )
    request_timeout: float = Field(default=30.0, gt=0, description="Read timeout in seconds")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    port: int = Field(default=3000, gt=0, lt=65536)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        env_path: Path | str | None = None,
        **overrides: object,
    ) -> "ScannerConfig":
        """Build a configuration from environment variables.

        When ``environ`` is omitted the process environment is used after a
        local ``.env`` file has been merged into it.
        """

        if environ is None:
            load_local_env(env_path)
            environ = os.environ

        data: dict[str, object] = {}
        for variable, field_name in ENV_FIELDS.items():
            value = environ.get(variable)
            if value is not None and value.strip():
                data[field_name] = value.strip()
        data.update(overrides)

        if not data.get("openai_api_key"):
            raise ConfigurationError(
                "OPENAI_API_KEY is not set. Export it or add it to a .env file before starting the scanner."
            )

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid scanner configuration:\n{exc}") from exc

    @classmethod
    def from_file(cls, path: Path | str, **overrides: object) -> "ScannerConfig":
        """Load configuration data from a JSON file, applying any ``overrides`` on top."""

        config_path = Path(path)
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ConfigurationError(f"Configuration file not found: {config_path}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid JSON in configuration file: {config_path}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must contain a JSON object: {config_path}")
        data.update(overrides)

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Configuration file is invalid: {config_path}\n{exc}") from exc
