"""Schema inference over the store document.

No schema is persisted. Column types are derived on every call from the
first record of each table.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from veriflow.errors import StoreError
from veriflow.store.base import StoreBackend
from veriflow.types import SchemaColumn

logger = logging.getLogger(__name__)

ISO_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


def infer_type(value: Any) -> str:
    """Map a JSON value to a SQL-ish type name.

    Example:
        >>> infer_type(3)
        'INTEGER'
        >>> infer_type("2024-01-01T00:00:00.000Z")
        'DATETIME'
    """
    # bool is a subclass of int
    if isinstance(value, bool):
        return "BOOLEAN"
    if isinstance(value, int):
        return "INTEGER"
    if isinstance(value, float):
        return "INTEGER" if value.is_integer() else "REAL"
    if isinstance(value, str):
        return "DATETIME" if ISO_DATETIME_RE.match(value) else "TEXT"
    if value is None:
        return "NULL"
    if isinstance(value, list):
        return "ARRAY"
    if isinstance(value, dict):
        return "OBJECT"
    return type(value).__name__.upper()


def infer_schema(document: dict[str, Any]) -> list[SchemaColumn]:
    """Infer (table, column, type) entries for every array in the document.

    Only the first record of each table is inspected. Empty tables
    contribute no columns.

    Args:
        document: Store document

    Returns:
        Flat list of SchemaColumn, in table then column order
    """
    columns: list[SchemaColumn] = []
    for table, rows in document.items():
        if not isinstance(rows, list):
            continue
        if not rows:
            logger.warning('Table "%s" is empty, cannot infer schema from data', table)
            continue
        first = rows[0]
        if not isinstance(first, dict):
            logger.warning('Table "%s" does not hold records, skipping', table)
            continue
        for column, value in first.items():
            columns.append(SchemaColumn(table=table, column=column, data_type=infer_type(value)))
    return columns


async def get_schema_info(backend: StoreBackend) -> list[SchemaColumn]:
    """Read the store through its backend and infer its schema.

    Args:
        backend: Store backend to read

    Returns:
        Inferred schema; empty when the store does not exist

    Raises:
        StoreError: For filesystem or database failures other than a
            missing document
    """
    try:
        document = await backend.read()
    except StoreError:
        logger.error("Error reading store at %s", backend.location)
        raise

    if document is None:
        logger.warning("Store not found at %s. Returning empty schema.", backend.location)
        return []
    if not isinstance(document, dict):
        logger.warning("Store at %s has an invalid format. Returning empty schema.", backend.location)
        return []
    return infer_schema(document)


__all__ = ["infer_type", "infer_schema", "get_schema_info", "ISO_DATETIME_RE"]
