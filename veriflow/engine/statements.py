"""Statement classification for the mock SQL engine.

Every input string maps to exactly one StatementKind. Classification looks
at prefixes and table names only; there is no SQL parser behind it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

_FROM_RE = re.compile(r"\bfrom\b", re.IGNORECASE)
_FROM_TARGET_RE = re.compile(r"\bfrom\s+(\w+)", re.IGNORECASE)
_CUSTOMERS_RE = re.compile(r"\bcustomers\b")
_TRANSACTIONS_RE = re.compile(r"\btransactions\b")


class StatementKind(str, Enum):
    """Closed set of statement shapes the engine understands."""

    CREATE_VIEW = "create_view"
    SELECT_JOIN = "select_join"
    SELECT_CUSTOMERS = "select_customers"
    SELECT_TRANSACTIONS = "select_transactions"
    SELECT_VIEW = "select_view"
    SELECT_OTHER = "select_other"
    CREATE_TABLE = "create_table"
    INSERT = "insert"
    OTHER = "other"

    @property
    def is_select(self) -> bool:
        return self.value.startswith("select_")


@dataclass(frozen=True)
class Statement:
    """A classified statement.

    Attributes:
        kind: Recognised shape
        sql: Original statement text, untouched
        target: Stored view name for SELECT_VIEW, else None
    """

    kind: StatementKind
    sql: str
    target: str | None = None


def from_clause(sql: str) -> str:
    """Text from the first FROM keyword to the end, lower-cased ("" if none)."""
    match = _FROM_RE.search(sql)
    return sql[match.end():].lower() if match else ""


def classify_select(sql: str, view_names: Iterable[str] = ()) -> Statement:
    """Classify a SELECT by the tables named after FROM.

    Args:
        sql: SELECT statement text
        view_names: Names of stored views

    Returns:
        Statement with one of the SELECT_* kinds
    """
    tail = from_clause(sql)
    has_customers = bool(_CUSTOMERS_RE.search(tail))
    has_transactions = bool(_TRANSACTIONS_RE.search(tail))

    if has_customers and has_transactions:
        return Statement(StatementKind.SELECT_JOIN, sql)
    if has_customers:
        return Statement(StatementKind.SELECT_CUSTOMERS, sql)
    if has_transactions:
        return Statement(StatementKind.SELECT_TRANSACTIONS, sql)

    match = _FROM_TARGET_RE.search(sql)
    if match:
        identifier = match.group(1)
        names = list(view_names)
        if identifier in names:
            return Statement(StatementKind.SELECT_VIEW, sql, target=identifier)
        wanted = identifier.lower()
        for name in names:
            if name.lower() == wanted:
                return Statement(StatementKind.SELECT_VIEW, sql, target=name)

    return Statement(StatementKind.SELECT_OTHER, sql)


def classify(sql: str, view_names: Iterable[str] = ()) -> Statement:
    """Classify a SQL-like string into one StatementKind.

    Checks run in a fixed priority order on the trimmed, lower-cased text:
    CREATE VIEW, SELECT, CREATE TABLE, INSERT, then everything else.

    Args:
        sql: Statement text as submitted
        view_names: Names of stored views, for SELECT ... FROM <view>

    Returns:
        Classified Statement

    Example:
        >>> classify("SELECT * FROM Customers").kind
        <StatementKind.SELECT_CUSTOMERS: 'select_customers'>
        >>> classify("do something weird").kind
        <StatementKind.OTHER: 'other'>
    """
    text = sql.strip().lower()

    if text.startswith("create view") or text.startswith("create or replace view"):
        return Statement(StatementKind.CREATE_VIEW, sql)
    if text.startswith("select"):
        return classify_select(sql, view_names)
    if text.startswith("create table"):
        return Statement(StatementKind.CREATE_TABLE, sql)
    if text.startswith("insert"):
        return Statement(StatementKind.INSERT, sql)
    return Statement(StatementKind.OTHER, sql)


__all__ = ["StatementKind", "Statement", "classify", "classify_select", "from_clause"]
