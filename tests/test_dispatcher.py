import pytest

from veriflow.engine import MockSQLEngine
from veriflow.errors import InvalidViewSyntaxError
from veriflow.store import MemoryBackend, TableStore


@pytest.fixture
def engine(store):
    return MockSQLEngine(store)


async def test_join_filters_on_active_keyword(engine):
    sql = (
        "SELECT c.CustomerID, SUM(t.Amount) FROM Customers c "
        "JOIN Transactions t ON c.CustomerID = t.CustomerID"
    )

    everyone = await engine.execute(sql)
    active = await engine.execute(sql + " -- active customers only")

    assert len(everyone.data) == 2
    assert len(active.data) == 1
    assert active.data[0]["CustomerID"] == 1
    assert active.message == "JOIN query executed, 1 rows returned"


async def test_join_rows_carry_totals(engine, store):
    store.get("Transactions").append(
        {"TransactionID": 2, "CustomerID": 1, "Product": "Mouse", "Amount": 2.5}
    )

    result = await engine.execute("select * from customers, transactions")

    alice, bob = result.data
    assert alice["TotalAmount"] == 12.5
    assert alice["TransactionCount"] == 2
    assert alice["IsActive"] is True
    assert bob["TotalAmount"] == 0
    assert bob["TransactionCount"] == 0
    assert bob["IsActive"] is False
    assert set(alice) == {
        "CustomerID",
        "FirstName",
        "LastName",
        "Email",
        "SignupDate",
        "TotalAmount",
        "TransactionCount",
        "IsActive",
    }


async def test_customers_are_truncated_to_fifty_rows():
    customers = [{"CustomerID": i, "FirstName": f"c{i}"} for i in range(60)]
    store = await TableStore(MemoryBackend({"Customers": customers, "Transactions": []})).load()

    result = await MockSQLEngine(store).execute("SELECT * FROM Customers")

    assert len(result.data) == 50
    assert result.data[0]["CustomerID"] == 0
    assert result.message == "Customers query executed, 50 rows returned"


async def test_select_returns_a_copy(engine, store):
    result = await engine.execute("SELECT * FROM Customers")
    result.data.clear()

    assert len(store.get("Customers")) == 2


async def test_where_clause_is_not_applied(engine):
    result = await engine.execute("SELECT * FROM Customers WHERE CustomerID = 2")
    assert len(result.data) == 2


async def test_transactions_query(engine):
    result = await engine.execute("select * from Transactions")

    assert result.data[0]["Product"] == "Laptop"
    assert result.message == "Transactions query executed, 1 rows returned"


async def test_row_limit_is_configurable(store):
    result = await MockSQLEngine(store, row_limit=1).execute("SELECT * FROM Customers")
    assert len(result.data) == 1


async def test_unknown_sql_returns_placeholder(engine):
    result = await engine.execute("do something weird")

    assert result.message == "SQL command processed (simulation)"
    assert result.data == [
        {
            "message": "SQL parsed successfully",
            "sql_type": "Other",
            "sql_preview": "do something weird...",
        }
    ]


async def test_unrecognised_select_returns_placeholder(engine):
    result = await engine.execute("SELECT 42")

    assert result.message == "SELECT executed (simplified)"
    assert result.data[0]["sql_preview"] == "SELECT 42"


async def test_create_table_and_insert_change_nothing(engine, backend, store):
    before = await backend.read()

    created = await engine.execute("CREATE TABLE Products (id INTEGER)")
    inserted = await engine.execute("INSERT INTO Customers VALUES (3, 'x')")

    assert created.message == "CREATE TABLE executed (simulation)"
    assert inserted.message == "INSERT executed (simulation)"
    assert len(store.get("Customers")) == 2
    assert await backend.read() == before


async def test_create_view_materializes_and_persists(engine, backend):
    sql = "CREATE VIEW v1 AS\n  SELECT *\n  FROM Customers"

    result = await engine.execute(sql)

    row = result.data[0]
    assert row["view_name"] == "v1"
    assert row["rows_created"] == 2
    assert row["action"] == "created"
    assert result.message == "CREATE VIEW executed successfully"

    saved = (await backend.read())["Views"]["v1"]
    assert saved["definition"] == sql
    assert len(saved["data"]) == 2
    assert saved["previous_definition"] is None
    assert saved["created_at"].endswith("Z")


async def test_replace_view_keeps_created_at(engine, store):
    await engine.execute("CREATE VIEW v1 AS SELECT * FROM Customers")
    first = store.get_view("v1")

    replacement = "CREATE OR REPLACE VIEW v1 AS SELECT * FROM Transactions"
    result = await engine.execute(replacement)

    view = store.get_view("v1")
    assert result.data[0]["action"] == "replaced"
    assert view.created_at == first.created_at
    assert view.previous_definition == "CREATE VIEW v1 AS SELECT * FROM Customers"
    assert view.definition == replacement
    assert view.updated_at is not None
    assert len(view.data) == 1


async def test_select_from_view_returns_snapshot(engine, store):
    await engine.execute(
        "CREATE VIEW active_summary AS SELECT * FROM Customers c "
        "JOIN Transactions t ON c.CustomerID = t.CustomerID WHERE c.IsActive"
    )
    store.get("Transactions").clear()

    result = await engine.execute("SELECT * FROM active_summary")

    # Filtered to active customers when created, unaffected by later changes
    assert len(result.data) == 1
    assert result.message == "Selected from view 'active_summary'"


async def test_invalid_create_view_raises(engine):
    with pytest.raises(InvalidViewSyntaxError, match="Invalid CREATE VIEW syntax"):
        await engine.execute("CREATE VIEW missing_select")


async def test_select_prefers_exactly_named_view(engine, store):
    await engine.execute("CREATE VIEW v1 AS SELECT * FROM Customers")
    await engine.execute("CREATE VIEW V1 AS SELECT * FROM Transactions")

    result = await engine.execute("SELECT * FROM V1")

    assert result.message == "Selected from view 'V1'"
    assert [row["TransactionID"] for row in result.data] == [1]
