"""
Veriflow end-to-end demo.

Demonstrates:
1. Seeding a fresh JSON store with sample customers and transactions
2. Schema inference from the stored rows
3. Running SELECT, JOIN and CREATE VIEW through the mock SQL engine
4. Generating SQL from a prompt (real LLM if an API key is set, placeholder otherwise)
5. Debugging a view that disagrees with its base table, with a diff of the fix

Run: python examples/demo_flow.py
"""

import asyncio
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

EXAMPLES_DIR = Path(__file__).parent
DB_PATH = EXAMPLES_DIR / "demo_SalesDB.json"


def banner(title: str) -> None:
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


async def run_demo():
    from veriflow.assistant import (
        InconsistencyDebugger,
        SQLGenerator,
        debug_inconsistency,
        generate_sql,
    )
    from veriflow.engine import MockSQLEngine
    from veriflow.llm import LLM, has_provider
    from veriflow.schema import get_schema_info
    from veriflow.seed import seed_store
    from veriflow.store import JSONFileBackend, TableStore

    backend = JSONFileBackend(DB_PATH)
    store = await TableStore(backend).load()
    await seed_store(store, force=True)
    print(f"Store created: {DB_PATH}")

    banner("STEP 1: Inferred schema")
    for column in await get_schema_info(backend):
        print(f"  {column.table}.{column.column}: {column.data_type}")

    banner("STEP 2: Mock SQL engine")
    engine = MockSQLEngine(store)
    for sql in [
        "SELECT * FROM Customers",
        "SELECT c.CustomerID, SUM(t.Amount) FROM Customers c JOIN Transactions t "
        "ON c.CustomerID = t.CustomerID",
        "CREATE VIEW big_spenders AS SELECT * FROM Customers c JOIN Transactions t "
        "ON c.CustomerID = t.CustomerID WHERE active",
        "SELECT * FROM big_spenders",
    ]:
        result = await engine.execute(sql)
        print(f"{sql[:60]}...")
        print(f"  -> {result.message}")

    llm = LLM() if has_provider() else None
    print(f"\nLLM: {llm.model if llm else 'none (placeholder output)'}")

    banner("STEP 3: SQL generation")
    sql = await generate_sql(
        "Show the first ten customers with their email", backend, SQLGenerator(llm)
    )
    print(sql)

    banner("STEP 4: Inconsistency debugging")
    report = await debug_inconsistency(
        "The big_spenders view has fewer rows than the Customers table",
        store,
        InconsistencyDebugger(llm),
    )
    print(f"Explanation: {report.explanation}")
    print(f"Proposed fix:\n{report.proposed_fix}")
    if report.diff_info:
        print("\nDiff:")
        for line in report.diff_info.diff:
            print(f"  {line}")

    banner("Demo complete")


async def main():
    try:
        await run_demo()
    finally:
        if DB_PATH.exists():
            DB_PATH.unlink()
            print(f"\nCleaned up: {DB_PATH}")


if __name__ == "__main__":
    asyncio.run(main())
