from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rec_browser.config.loader import DEFAULT_SPEC_FILE, load_input_spec
from rec_browser.core.exceptions import RecBrowserError
from rec_browser.core.navigator import Navigator
from rec_browser.importing.record_loader import load_store
from rec_browser.logging_config import configure_logging
from rec_browser.ui.app import RecordBrowserApp

logger = logging.getLogger(__name__)

EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rec-browser",
        description="Utility for grouping JSON input objects.",
    )
    parser.add_argument("input", type=Path, help="Input file")
    parser.add_argument(
        "spec",
        type=Path,
        nargs="?",
        default=Path(DEFAULT_SPEC_FILE),
        help=f"Input spec file (default: {DEFAULT_SPEC_FILE})",
    )
    parser.add_argument(
        "-s",
        "--single",
        action="store_true",
        help="Parse input as a single JSON array (default: parse a stream of JSON objects)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Root log level (default: WARNING)",
    )
    parser.add_argument(
        "--log-format",
        choices=["json", "plain"],
        default=None,
        help="Log format (default: $REC_BROWSER_LOG_FORMAT or json)",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file instead of stderr")
    return parser


def build_navigator(input_path: Path, spec_path: Path, single: bool = False) -> Navigator:
    """
    Load the spec and the records and build the session's Navigator.

    Everything that can be wrong with the configuration or the data fails
    here, before any interactive session starts.
    """
    spec = load_input_spec(spec_path)
    store = load_store(input_path, spec, single=single)
    return Navigator(store, spec.group_by, spec.show_in_grouped, spec.timeline)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(
        level=getattr(logging, args.log_level),
        force_format=args.log_format,
        log_file=args.log_file,
    )

    try:
        navigator = build_navigator(args.input, args.spec, single=args.single)
    except (FileNotFoundError, RecBrowserError) as exc:
        logger.error("Startup failed", extra={"error": str(exc)})
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    RecordBrowserApp(navigator).run()
    return 0
