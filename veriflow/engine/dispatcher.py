"""Mock SQL engine over the table store.

Each StatementKind has one fixed handler. Handlers read the in-memory
store; only CREATE VIEW writes, and it persists the whole store afterwards.

This is a simulation for a demo. WHERE clauses are noticed and logged, never
applied, and INSERT / CREATE TABLE change nothing.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable

from veriflow.engine.statements import Statement, StatementKind, classify, classify_select
from veriflow.errors import InvalidViewSyntaxError
from veriflow.store.base import TableStore
from veriflow.types import QueryResult, Row, ViewRecord, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_ROW_LIMIT = 50
PREVIEW_CHARS = 100

CREATE_VIEW_RE = re.compile(
    r"create\s+(?:or\s+replace\s+)?view\s+(\w+)\s+as\s+(select\s+.+)", re.IGNORECASE
)
_WHERE_RE = re.compile(r"\bwhere\b", re.IGNORECASE)

CUSTOMER_FIELDS = ("CustomerID", "FirstName", "LastName", "Email", "SignupDate")


class MockSQLEngine:
    """Execute SQL-like text against a TableStore.

    Example:
        >>> store = await TableStore(JSONFileBackend("db/SalesDB.json")).load()
        >>> engine = MockSQLEngine(store)
        >>> result = await engine.execute("SELECT * FROM Customers")
        >>> result.message
        'Customers query executed, 4 rows returned'
    """

    def __init__(self, store: TableStore, row_limit: int = DEFAULT_ROW_LIMIT):
        """Initialize the engine.

        Args:
            store: Loaded table store the statements run against
            row_limit: Maximum rows returned by single-table selects
        """
        self.store = store
        self.row_limit = row_limit
        self._handlers: dict[StatementKind, Callable[[Statement], Awaitable[QueryResult]]] = {
            StatementKind.CREATE_VIEW: self._create_view,
            StatementKind.SELECT_JOIN: self._select_join,
            StatementKind.SELECT_CUSTOMERS: self._select_customers,
            StatementKind.SELECT_TRANSACTIONS: self._select_transactions,
            StatementKind.SELECT_VIEW: self._select_view,
            StatementKind.SELECT_OTHER: self._select_other,
            StatementKind.CREATE_TABLE: self._create_table,
            StatementKind.INSERT: self._insert,
            StatementKind.OTHER: self._other,
        }

    def classify(self, sql: str) -> Statement:
        """Classify a statement against the views currently in the store."""
        return classify(sql, self.store.views.keys())

    async def execute(self, sql: str) -> QueryResult:
        """Classify and run a statement.

        Args:
            sql: Statement text

        Returns:
            QueryResult with rows and a status message

        Raises:
            InvalidViewSyntaxError: If a CREATE VIEW cannot be parsed
        """
        statement = self.classify(sql)
        logger.info("Executing %s statement", statement.kind.value)
        return await self._handlers[statement.kind](statement)

    async def select(self, sql: str) -> QueryResult:
        """Run text through the SELECT handlers only."""
        statement = classify_select(sql, self.store.views.keys())
        return await self._handlers[statement.kind](statement)

    async def _create_view(self, statement: Statement) -> QueryResult:
        sql = statement.sql
        normalized = re.sub(r"\s+", " ", sql)
        match = CREATE_VIEW_RE.search(normalized)
        if not match:
            raise InvalidViewSyntaxError()

        view_name, select_sql = match.group(1), match.group(2)
        logger.debug("View name: %s, select: %s", view_name, select_sql)

        selected = await self.select(select_sql)

        existing = self.store.get_view(view_name)
        now = utc_now_iso()
        record = ViewRecord(
            definition=sql,
            data=selected.data,
            created_at=existing.created_at if existing and existing.created_at else now,
            updated_at=now,
            previous_definition=existing.definition if existing else None,
        )
        self.store.put_view(view_name, record)
        await self.store.save()

        action = "replaced" if existing else "created"
        rows = selected.row_count
        logger.info("View '%s' %s with %d rows", view_name, action, rows)
        return QueryResult(
            data=[
                {
                    "view_name": view_name,
                    "rows_created": rows,
                    "message": f"View '{view_name}' {'updated' if existing else 'created'} "
                    f"successfully with {rows} rows",
                    "action": action,
                }
            ],
            message="CREATE VIEW executed successfully",
        )

    async def _select_join(self, statement: Statement) -> QueryResult:
        transactions = self.store.get("Transactions")
        result: list[Row] = []
        for customer in self.store.get("Customers"):
            matched = [t for t in transactions if t.get("CustomerID") == customer.get("CustomerID")]
            row = {field: customer.get(field) for field in CUSTOMER_FIELDS}
            row["TotalAmount"] = sum(t.get("Amount") or 0 for t in matched)
            row["TransactionCount"] = len(matched)
            row["IsActive"] = len(matched) > 0
            result.append(row)

        # "active" anywhere in the text stands in for a real predicate
        if "active" in statement.sql.lower():
            result = [r for r in result if r["IsActive"]]

        return QueryResult(
            data=result, message=f"JOIN query executed, {len(result)} rows returned"
        )

    def _limited(self, table: str, statement: Statement) -> list[Row]:
        if _WHERE_RE.search(statement.sql):
            logger.info("WHERE clause detected on %s (not applied)", table)
        return list(self.store.get(table))[: self.row_limit]

    async def _select_customers(self, statement: Statement) -> QueryResult:
        rows = self._limited("Customers", statement)
        return QueryResult(data=rows, message=f"Customers query executed, {len(rows)} rows returned")

    async def _select_transactions(self, statement: Statement) -> QueryResult:
        rows = self._limited("Transactions", statement)
        return QueryResult(
            data=rows, message=f"Transactions query executed, {len(rows)} rows returned"
        )

    async def _select_view(self, statement: Statement) -> QueryResult:
        view = self.store.get_view(statement.target or "")
        return QueryResult(
            data=list(view.data) if view else [],
            message=f"Selected from view '{statement.target}'",
        )

    async def _select_other(self, statement: Statement) -> QueryResult:
        return QueryResult(
            data=[
                {
                    "message": "SELECT query processed",
                    "sql_preview": statement.sql[:PREVIEW_CHARS],
                }
            ],
            message="SELECT executed (simplified)",
        )

    async def _create_table(self, statement: Statement) -> QueryResult:
        return QueryResult(
            data=[
                {
                    "message": "CREATE TABLE simulation",
                    "note": "Tables are created implicitly by the JSON store",
                }
            ],
            message="CREATE TABLE executed (simulation)",
        )

    async def _insert(self, statement: Statement) -> QueryResult:
        return QueryResult(
            data=[{"message": "INSERT simulation", "note": "Rows are not written to the store"}],
            message="INSERT executed (simulation)",
        )

    async def _other(self, statement: Statement) -> QueryResult:
        return QueryResult(
            data=[
                {
                    "message": "SQL parsed successfully",
                    "sql_type": "Other",
                    "sql_preview": statement.sql[:PREVIEW_CHARS] + "...",
                }
            ],
            message="SQL command processed (simulation)",
        )


async def execute_sql(store: TableStore, sql: str, row_limit: int = DEFAULT_ROW_LIMIT) -> QueryResult:
    """Run one statement against a loaded store."""
    return await MockSQLEngine(store, row_limit=row_limit).execute(sql)


__all__ = ["MockSQLEngine", "execute_sql", "DEFAULT_ROW_LIMIT", "CREATE_VIEW_RE"]
