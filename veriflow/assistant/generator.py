"""Natural-language to SQL generation."""

from __future__ import annotations

import logging

from veriflow.context import build_context
from veriflow.llm.client import LLM
from veriflow.prompts.templates import SQL_GENERATION_PROMPT, SQL_SYSTEM_PROMPT
from veriflow.schema import get_schema_info
from veriflow.store.base import StoreBackend

logger = logging.getLogger(__name__)

PLACEHOLDER_HEADER = "-- Placeholder SQL - LLM not called\n"

ACTIVE_SUMMARY_VIEW_SQL = """CREATE VIEW active_customer_summary AS
SELECT
    c.CustomerID,
    c.FirstName,
    c.LastName,
    c.Email,
    SUM(t.Amount) AS TotalSpent
FROM
    Customers c
JOIN
    Transactions t ON c.CustomerID = t.CustomerID
WHERE
    t.TransactionDate >= date('now', '-6 months')
GROUP BY
    c.CustomerID;"""


def placeholder_sql(context: str) -> str:
    """Keyword-driven stand-in used when no LLM answer is available.

    Args:
        context: Full generation context (prompt plus schema)

    Returns:
        SQL text starting with a ``--`` comment header
    """
    text = context.lower()
    if "create view" in text and "active_customer_summary" in text:
        body = ACTIVE_SUMMARY_VIEW_SQL
    elif "select" in text and "customers" in text:
        body = "SELECT CustomerID, FirstName, Email FROM Customers LIMIT 10;"
    elif "count" in text and "transactions" in text:
        body = "SELECT COUNT(*) AS TotalTransactions FROM Transactions;"
    else:
        body = "SELECT 'No specific SQL generated for this prompt.';"
    return PLACEHOLDER_HEADER + body


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code block, if any."""
    text = text.strip()
    if text.startswith("```"):
        lines = [line for line in text.split("\n") if not line.strip().startswith("```")]
        text = "\n".join(lines).strip()
    return text


class SQLGenerator:
    """Generate SQL from a schema-aware context.

    Falls back to placeholder SQL when no LLM is configured or the call
    fails, so the request always gets SQL back.

    Example:
        >>> generator = SQLGenerator(LLM(model="gpt-4o-mini"))
        >>> sql = await generator.generate(build_context(prompt, schema))
    """

    def __init__(self, llm: LLM | None = None):
        """Initialize the generator.

        Args:
            llm: LLM client, or None to always use placeholder SQL
        """
        self.llm = llm

    async def generate(self, context: str) -> str:
        """Return SQL for the given context."""
        if self.llm is None:
            logger.info("LLM disabled, returning placeholder SQL")
            return placeholder_sql(context)

        prompt = SQL_GENERATION_PROMPT.format(context=context)
        try:
            reply = await self.llm.generate(prompt, system=SQL_SYSTEM_PROMPT)
        except Exception as e:
            logger.error("SQL generation failed: %s", e)
            return f"-- LLM call failed: {e}\n" + placeholder_sql(context)

        sql = strip_code_fence(reply)
        logger.debug("Generated SQL: %s", sql[:200])
        return sql


async def generate_sql(prompt: str, backend: StoreBackend, generator: SQLGenerator) -> str:
    """Infer the schema, build the context and generate SQL for a prompt.

    Args:
        prompt: Natural-language request
        backend: Store backend the schema is inferred from
        generator: SQL generator to call

    Returns:
        Generated SQL text
    """
    schema = await get_schema_info(backend)
    logger.info("Schema tables: %s", sorted({c.table for c in schema}))
    context = build_context(prompt, schema)
    return await generator.generate(context)


__all__ = ["SQLGenerator", "generate_sql", "placeholder_sql", "strip_code_fence"]
