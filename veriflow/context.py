"""Builds the LLM context strings from a prompt and the inferred schema."""

from __future__ import annotations

import re

from veriflow.types import SchemaColumn

GENERATION_INSTRUCTIONS = """\
Instructions:
- Generate SQL that is compatible with the provided schema
- Use proper SQL syntax and naming conventions
- Consider data types when performing operations
- Include appropriate JOIN conditions if multiple tables are involved
- Add helpful comments where necessary
- Ensure the SQL is executable and follows best practices"""

DEBUG_REQUIREMENTS = """\
Analysis Requirements:
- Identify the most likely causes of the data discrepancy
- Consider common issues like filtering differences, join conditions, aggregation problems
- Look for timing issues, data type mismatches, or missing data
- Provide actionable insights and specific SQL fixes when possible
- Focus on the relationship between the mentioned database objects"""

_ID_SUFFIX_RE = re.compile(r"(ID|Id)$")


def group_by_table(schema: list[SchemaColumn]) -> dict[str, list[SchemaColumn]]:
    """Group columns by table, keeping first-seen order."""
    tables: dict[str, list[SchemaColumn]] = {}
    for col in schema:
        tables.setdefault(col.table, []).append(col)
    return tables


def infer_relationships(schema: list[SchemaColumn]) -> list[str]:
    """Guess foreign keys from column names.

    A column ``CustomerID`` in ``Transactions`` points at ``Customers`` when
    a table named ``Customer`` or ``Customers`` exists.

    Args:
        schema: Inferred schema

    Returns:
        Human-readable relationship hints
    """
    tables = group_by_table(schema)
    hints: list[str] = []
    for table, columns in tables.items():
        for col in columns:
            name = col.column
            if not _ID_SUFFIX_RE.search(name):
                continue
            parent = _ID_SUFFIX_RE.sub("", name)
            plural = parent + "s"
            if plural in tables and table != plural:
                hints.append(f"{table}.{name} likely references {plural}.{name}")
            elif parent in tables and table != parent:
                hints.append(f"{table}.{name} likely references {parent}.{name}")
    return hints


def format_schema(schema: list[SchemaColumn]) -> str:
    """Render the schema and relationship hints as plain text."""
    lines = ["Available Database Schema:", ""]
    for table, columns in group_by_table(schema).items():
        lines.append(f"Table: {table}")
        lines.append("Columns:")
        lines.extend(f"  - {c.column} ({c.data_type})" for c in columns)
        lines.append("")

    hints = infer_relationships(schema)
    if hints:
        lines.append("Likely Relationships:")
        lines.extend(f"  - {h}" for h in hints)
        lines.append("")
    return "\n".join(lines)


def build_context(prompt: str, schema: list[SchemaColumn]) -> str:
    """Combine the user request and the schema into the SQL generation context.

    Args:
        prompt: Natural-language request
        schema: Inferred schema

    Returns:
        Context string for the LLM
    """
    return (
        f'User Request: "{prompt}"\n\n'
        f"{format_schema(schema)}\n\n"
        f"{GENERATION_INSTRUCTIONS}\n\n"
        "Please generate the appropriate SQL query:"
    )


def build_debug_context(
    problem_description: str,
    schema: list[SchemaColumn],
    additional_context: str | None = None,
) -> str:
    """Build the context for analysing a data inconsistency.

    Args:
        problem_description: User's description of the discrepancy
        schema: Inferred schema
        additional_context: Extra material such as existing view definitions

    Returns:
        Context string for the LLM
    """
    parts = [
        "Data Inconsistency Report:",
        f'Problem: "{problem_description}"',
        "",
        build_context("", schema),
        "",
    ]
    if additional_context:
        parts += [f"Additional Context:\n{additional_context}", ""]
    parts += [DEBUG_REQUIREMENTS, "", "Please analyze this inconsistency and provide your findings."]
    return "\n".join(parts)


__all__ = [
    "build_context",
    "build_debug_context",
    "format_schema",
    "infer_relationships",
    "group_by_table",
]
