"""Veriflow - natural-language SQL over a mock JSON database.

Usage:
    from veriflow import TableStore, JSONFileBackend, MockSQLEngine

    store = await TableStore(JSONFileBackend("db/SalesDB.json")).load()
    result = await MockSQLEngine(store).execute("SELECT * FROM Customers")
    print(result.message)

    # HTTP API
    from veriflow import create_app, load_settings
    app = create_app(load_settings())
"""

from veriflow.api import create_app
from veriflow.assistant import InconsistencyDebugger, SQLGenerator
from veriflow.config import Settings, load_settings
from veriflow.engine import MockSQLEngine, StatementKind, classify
from veriflow.errors import InvalidViewSyntaxError, StoreError, VeriflowError
from veriflow.llm import LLM
from veriflow.schema import get_schema_info, infer_schema
from veriflow.store import JSONFileBackend, MemoryBackend, TableStore
from veriflow.types import QueryResult, SchemaColumn, ViewRecord

__version__ = "0.1.0"

__all__ = [
    # Engine
    "MockSQLEngine",
    "StatementKind",
    "classify",
    # Store
    "TableStore",
    "JSONFileBackend",
    "MemoryBackend",
    # Schema
    "infer_schema",
    "get_schema_info",
    # Assistants
    "SQLGenerator",
    "InconsistencyDebugger",
    "LLM",
    # API and config
    "create_app",
    "Settings",
    "load_settings",
    # Types
    "QueryResult",
    "SchemaColumn",
    "ViewRecord",
    # Errors
    "VeriflowError",
    "StoreError",
    "InvalidViewSyntaxError",
]
