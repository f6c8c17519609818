"""Store layer: in-memory table store plus persistence backends.

Example:
    >>> from veriflow.store import TableStore, open_backend
    >>>
    >>> backend = open_backend(path="db/SalesDB.json")
    >>> store = await TableStore(backend).load()
    >>> store.get("Customers")[:2]
"""

from __future__ import annotations

from pathlib import Path

from veriflow.store.base import (
    VIEWS_KEY,
    MemoryBackend,
    StoreBackend,
    TableStore,
    default_document,
)
from veriflow.store.json_file import JSONFileBackend


def open_backend(path: str | Path | None = None, url: str | None = None) -> StoreBackend:
    """Pick a backend: a database URL wins over a JSON file path.

    Args:
        path: JSON file path
        url: SQLAlchemy database URL

    Returns:
        A StoreBackend instance
    """
    if url:
        # Imported lazily so the JSON backend works without a DB driver
        from veriflow.store.db import SQLBackend

        return SQLBackend(url)
    if path is None:
        raise ValueError("Either a store path or a database URL is required")
    return JSONFileBackend(path)


__all__ = [
    "StoreBackend",
    "TableStore",
    "MemoryBackend",
    "JSONFileBackend",
    "open_backend",
    "default_document",
    "VIEWS_KEY",
]
