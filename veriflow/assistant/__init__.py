"""LLM-backed assistants: SQL generation and inconsistency debugging.

Example:
    >>> from veriflow.assistant import SQLGenerator, InconsistencyDebugger
    >>> from veriflow.llm import LLM
    >>>
    >>> llm = LLM()
    >>> sql = await generate_sql("customers who bought a laptop", backend, SQLGenerator(llm))
    >>> report = await debug_inconsistency(problem, store, InconsistencyDebugger(llm))
    >>> report.diff_info
"""

from veriflow.assistant.debugger import (
    DebugResult,
    DiffInfo,
    InconsistencyDebugger,
    InconsistencyReport,
    build_diff_info,
    debug_inconsistency,
    extract_view_names,
)
from veriflow.assistant.generator import SQLGenerator, generate_sql, placeholder_sql

__all__ = [
    "SQLGenerator",
    "generate_sql",
    "placeholder_sql",
    "InconsistencyDebugger",
    "debug_inconsistency",
    "extract_view_names",
    "build_diff_info",
    "DebugResult",
    "DiffInfo",
    "InconsistencyReport",
]
