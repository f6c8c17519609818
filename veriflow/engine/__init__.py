"""Mock SQL engine.

Example:
    >>> from veriflow.engine import MockSQLEngine
    >>>
    >>> engine = MockSQLEngine(store)
    >>> result = await engine.execute(
    ...     "CREATE VIEW active_customers AS SELECT * FROM Customers c "
    ...     "JOIN Transactions t ON c.CustomerID = t.CustomerID"
    ... )
    >>> result.data[0]["action"]
    'created'
"""

from veriflow.engine.dispatcher import DEFAULT_ROW_LIMIT, MockSQLEngine, execute_sql
from veriflow.engine.statements import Statement, StatementKind, classify

__all__ = [
    "MockSQLEngine",
    "execute_sql",
    "DEFAULT_ROW_LIMIT",
    "Statement",
    "StatementKind",
    "classify",
]
