"""Convenience script for scanning a single website from the command line."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure the src directory is on the Python path so the deiscanner package can be imported
SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from deiscanner.config import ConfigurationError, ScannerConfig  # noqa: E402  (import after path setup)
from deiscanner.errors import ScannerError  # noqa: E402
from deiscanner.services.scanner import PolicyScanner  # noqa: E402
from deiscanner.services.summarizer import PolicySummarizer  # noqa: E402


def main(argv: list[str] | None = None) -> None:
    """Run one scan for the URL given on the command line and print the result as JSON."""

    parser = argparse.ArgumentParser(description="Summarise the DEI policies published on a website.")
    parser.add_argument("url", help="Website to scan, with or without https://")
    parser.add_argument("--no-discovery", action="store_true", help="Analyse only the given page")
    parser.add_argument("--structured", action="store_true", help="Request a JSON report from the model")
    parser.add_argument("--max-pages", type=int, default=None, help="Maximum number of discovered pages")
    parser.add_argument("--config", type=Path, default=None, help="JSON configuration file used instead of the environment")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    overrides: dict[str, object] = {}
    if args.no_discovery:
        overrides["discovery_enabled"] = False
    if args.structured:
        overrides["structured_output"] = True
    if args.max_pages is not None:
        overrides["max_pages"] = args.max_pages

    try:
        if args.config is not None:
            config = ScannerConfig.from_file(args.config, **overrides)
        else:
            config = ScannerConfig.from_env(**overrides)
    except ConfigurationError as exc:
        logging.error("Could not load scanner configuration: %s", exc)
        sys.exit(1)

    scanner = PolicyScanner(config, PolicySummarizer.from_config(config))

    try:
        result = scanner.scan(args.url)
    except ScannerError as exc:
        logging.error("Scan of %s failed: %s", args.url, exc)
        sys.exit(1)

    print(json.dumps(result.model_dump(by_alias=True), indent=2))


if __name__ == "__main__":
    main()
