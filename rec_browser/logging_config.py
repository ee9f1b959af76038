from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(
        level: int = logging.INFO,
        force_format: Optional[str] = None,
        log_file: Optional[Path] = None,
) -> None:
    """
    Configure root logger for the app

    Modes:
    - JSON (default)
    - plain text (dev mode)

    Selection Order:
        1) force_format argument ("json" or "plain") if provided
        2) env var REC_BROWSER_LOG_FORMAT
        3) default = "json"

    With `log_file` set, records go to that file instead of stderr so they
    don't draw over the terminal UI.
    """

    if force_format is not None:
        format_mode = force_format.lower()
    else:
        format_mode = os.getenv("REC_BROWSER_LOG_FORMAT", "json").lower()

    logger = logging.getLogger()
    logger.setLevel(level)

    if log_file is not None:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()

    if format_mode == "plain":
        formatter = logging.Formatter(LOG_FORMAT)
    else:
        formatter = jsonlogger.JsonFormatter(LOG_FORMAT)

    handler.setFormatter(formatter)

    # Replace any existing handlers to avoid duplicate logs
    logger.handlers.clear()
    logger.addHandler(handler)
