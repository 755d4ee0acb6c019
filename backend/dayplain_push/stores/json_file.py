"""
Durable JSON documents with whole-file atomic replace.

A write goes to a sibling temp file which is flushed, fsynced and then
renamed over the target with os.replace, so readers see either the old or
the new document and never a partial one.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from dayplain_push.core.exceptions import StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)


class JsonFileStore:
    """One JSON document on disk."""

    def __init__(self, path: Path, *, allow_direct_write: bool = False) -> None:
        """
        Args:
            path: Location of the document.
            allow_direct_write: Fall back to overwriting the file in place when
                the platform refuses the rename. Only for low-value documents.
        """
        self.path = Path(path)
        self.allow_direct_write = allow_direct_write

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> Any:
        """Return the parsed document, or None when the file does not exist."""
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            raise StorageReadError(self.path, f"unreadable document: {e}", e) from e

    def write(self, document: Any) -> None:
        """Atomically replace the document."""
        try:
            data = json.dumps(document, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageWriteError(self.path, f"document is not serializable: {e}", e) from e

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageWriteError(self.path, f"cannot create directory: {e}", e) from e

        try:
            self._replace(data)
        except PermissionError as e:
            if not self.allow_direct_write:
                raise StorageWriteError(self.path, f"atomic replace failed: {e}", e) from e
            logger.warning(f"Atomic replace refused for {self.path} ({e}), writing in place")
            self._write_direct(data)
        except OSError as e:
            raise StorageWriteError(self.path, f"atomic replace failed: {e}", e) from e

    def _replace(self, data: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    def _write_direct(self, data: str) -> None:
        try:
            with self.path.open("w", encoding="utf-8") as fh:
                fh.write(data)
        except OSError as e:
            raise StorageWriteError(self.path, f"direct write failed: {e}", e) from e
