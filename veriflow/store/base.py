"""In-memory table store with a protocol for persistence backends.

The store holds one JSON-shaped document: top-level arrays are tables and
the ``Views`` map holds materialized views. A ``TableStore`` is built for
each request, loaded from its backend, mutated in memory and saved back in
full.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Protocol, runtime_checkable

from veriflow.types import Row, ViewRecord

logger = logging.getLogger(__name__)

VIEWS_KEY = "Views"


def default_document() -> dict[str, Any]:
    """Empty store layout used when no document exists yet."""
    return {"Customers": [], "Transactions": [], VIEWS_KEY: {}}


@runtime_checkable
class StoreBackend(Protocol):
    """Protocol for store persistence backends.

    Implement this to keep the document somewhere other than a JSON file.
    """

    location: str

    async def read(self) -> dict[str, Any] | None:
        """Return the stored document, or None if it does not exist."""
        ...

    async def write(self, document: dict[str, Any]) -> None:
        """Replace the stored document."""
        ...


class MemoryBackend:
    """Backend that keeps the document in process memory.

    Example:
        >>> backend = MemoryBackend({"Customers": [{"CustomerID": 1}]})
        >>> store = TableStore(backend)
        >>> await store.load()
    """

    location = ":memory:"

    def __init__(self, document: dict[str, Any] | None = None) -> None:
        self._document = copy.deepcopy(document) if document is not None else None

    async def read(self) -> dict[str, Any] | None:
        if self._document is None:
            return None
        return copy.deepcopy(self._document)

    async def write(self, document: dict[str, Any]) -> None:
        self._document = copy.deepcopy(document)


class TableStore:
    """Explicit in-memory table store over a pluggable backend.

    Example:
        >>> store = TableStore(JSONFileBackend("db/SalesDB.json"))
        >>> await store.load()
        >>> store.list()
        ['Customers', 'Transactions']
        >>> customers = store.get("Customers")
        >>> store.put_view("v1", ViewRecord(definition="create view v1 as ..."))
        >>> await store.save()
    """

    def __init__(self, backend: StoreBackend, document: dict[str, Any] | None = None) -> None:
        """Initialize the store.

        Args:
            backend: Where the document is read from and written to
            document: Optional starting document (skips the need to load)
        """
        self.backend = backend
        self._document: dict[str, Any] = document if document is not None else default_document()

    @property
    def location(self) -> str:
        """Human-readable location of the backing document."""
        return self.backend.location

    @property
    def document(self) -> dict[str, Any]:
        """The whole in-memory document."""
        return self._document

    async def load(self) -> TableStore:
        """Read the whole document from the backend.

        A missing document is replaced by the empty default layout.
        """
        data = await self.backend.read()
        if data is None:
            logger.warning("No store document at %s, starting empty", self.location)
            data = default_document()
        elif not isinstance(data, dict):
            logger.warning("Store document at %s is not an object, starting empty", self.location)
            data = default_document()
        self._document = data
        return self

    async def save(self) -> None:
        """Rewrite the whole document through the backend."""
        await self.backend.write(self._document)
        logger.debug("Store written to %s", self.location)

    def get(self, name: str) -> list[Row]:
        """Get a table's rows (empty list if the table is absent)."""
        rows = self._document.get(name)
        return rows if isinstance(rows, list) else []

    def put(self, name: str, rows: list[Row]) -> None:
        """Replace a table's rows."""
        self._document[name] = rows

    def list(self) -> list[str]:
        """Names of all array-valued tables, in document order."""
        return [k for k, v in self._document.items() if isinstance(v, list)]

    @property
    def views(self) -> dict[str, dict[str, Any]]:
        """Raw ``Views`` map (created on first access)."""
        views = self._document.get(VIEWS_KEY)
        if not isinstance(views, dict):
            views = {}
            self._document[VIEWS_KEY] = views
        return views

    def get_view(self, name: str) -> ViewRecord | None:
        """Get a view by exact name."""
        raw = self.views.get(name)
        return ViewRecord.from_dict(raw) if raw is not None else None

    def find_view(self, name: str) -> str | None:
        """Resolve a view name case-insensitively to its stored spelling."""
        if name in self.views:
            return name
        lowered = name.lower()
        for stored in self.views:
            if stored.lower() == lowered:
                return stored
        return None

    def put_view(self, name: str, record: ViewRecord) -> None:
        """Store or replace a view."""
        self.views[name] = record.to_dict()

    def __contains__(self, name: str) -> bool:
        return name in self._document


__all__ = [
    "StoreBackend",
    "MemoryBackend",
    "TableStore",
    "default_document",
    "VIEWS_KEY",
]
