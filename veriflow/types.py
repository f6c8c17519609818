"""Core types shared by the store, the dispatcher and the API.

Rows and documents stay plain dicts so they serialise straight back to the
JSON store; the dataclasses here wrap the few structured values that travel
between layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

Row = dict[str, Any]


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class SchemaColumn:
    """One inferred (table, column, type) entry."""

    table: str
    column: str
    data_type: str

    def to_dict(self) -> dict[str, str]:
        return {
            "TABLE_NAME": self.table,
            "COLUMN_NAME": self.column,
            "DATA_TYPE": self.data_type,
        }


@dataclass
class QueryResult:
    """Rows and a status message produced by the dispatcher."""

    data: list[Row] = field(default_factory=list)
    message: str = ""

    @property
    def row_count(self) -> int:
        """Number of rows returned."""
        return len(self.data)

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "message": self.message}


@dataclass
class ViewRecord:
    """A materialized view as persisted under ``Views`` in the store.

    Views are snapshots: ``data`` holds the rows produced when the view was
    created or last replaced and does not follow later table changes.
    """

    definition: str
    data: list[Row] = field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None
    previous_definition: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "definition": self.definition,
            "data": self.data,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "previous_definition": self.previous_definition,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ViewRecord:
        return cls(
            definition=data.get("definition", ""),
            data=list(data.get("data") or []),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            previous_definition=data.get("previous_definition"),
        )


__all__ = [
    "Row",
    "SchemaColumn",
    "QueryResult",
    "ViewRecord",
    "utc_now_iso",
]
