"""JSON file persistence backend."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from veriflow.errors import StoreError

logger = logging.getLogger(__name__)


class JSONFileBackend:
    """Keep the whole store document in a single JSON file.

    Reads parse the full file; writes serialise the full document to a
    temporary sibling and move it over the target. File I/O runs in a worker
    thread so requests sharing the event loop keep moving.

    Example:
        >>> backend = JSONFileBackend("db/SalesDB.json")
        >>> store = await TableStore(backend).load()
    """

    def __init__(self, path: str | Path):
        """Initialize with the path of the JSON file.

        Args:
            path: File path; the parent directory is created on first write
        """
        self.path = Path(path)

    @property
    def location(self) -> str:
        return str(self.path)

    async def read(self) -> dict[str, Any] | None:
        """Load the document.

        Returns:
            Parsed document, or None if the file is missing or not valid JSON

        Raises:
            StoreError: If the file exists but cannot be read
        """
        try:
            text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreError(f"Failed to read store file {self.path}: {e}") from e

        if not text.strip():
            logger.warning("Store file %s is empty", self.path)
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("Store file %s is not valid JSON: %s", self.path, e)
            return None

    async def write(self, document: dict[str, Any]) -> None:
        """Rewrite the whole file.

        Raises:
            StoreError: If the file cannot be written
        """
        try:
            await asyncio.to_thread(self._write_sync, document)
        except OSError as e:
            raise StoreError(f"Failed to write store file {self.path}: {e}") from e

    def _write_sync(self, document: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, default=str)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


__all__ = ["JSONFileBackend"]
