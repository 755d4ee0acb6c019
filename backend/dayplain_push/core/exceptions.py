"""
Dayplain push server - custom exceptions.
"""

from pathlib import Path
from typing import Optional


class DayplainPushError(Exception):
    """Base exception for the push server."""


class ConfigurationError(DayplainPushError):
    """The process cannot start with the current configuration."""


class StorageError(DayplainPushError):
    """A durable JSON document could not be read or written."""

    def __init__(self, path: Path, detail: str, cause: Optional[BaseException] = None):
        super().__init__(f"{path}: {detail}")
        self.path = path
        self.detail = detail
        self.cause = cause


class StorageReadError(StorageError):
    """The document exists but is unreadable or not valid JSON."""


class StorageWriteError(StorageError):
    """The document could not be replaced. The previous version is left intact."""
