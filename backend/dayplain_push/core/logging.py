"""Logging configuration for the push server process."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """
    Configure root logging with a console handler and an optional file handler.

    Call once, before the application is created.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Remove pre-existing handlers to avoid duplicate lines on re-run
    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    root.addHandler(console)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)

    # pywebpush logs every request body at DEBUG
    logging.getLogger("pywebpush").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
