import pytest

from veriflow.engine.statements import StatementKind, classify, from_clause


@pytest.mark.parametrize(
    "sql, kind",
    [
        ("CREATE VIEW v AS SELECT * FROM Customers", StatementKind.CREATE_VIEW),
        ("  create or replace view v as select 1", StatementKind.CREATE_VIEW),
        ("SELECT * FROM Customers", StatementKind.SELECT_CUSTOMERS),
        ("select * from transactions where Amount > 5", StatementKind.SELECT_TRANSACTIONS),
        (
            "SELECT c.*, t.Amount FROM Customers c JOIN Transactions t ON c.CustomerID = t.CustomerID",
            StatementKind.SELECT_JOIN,
        ),
        ("SELECT 1", StatementKind.SELECT_OTHER),
        ("SELECT * FROM products", StatementKind.SELECT_OTHER),
        ("CREATE TABLE t (id INTEGER)", StatementKind.CREATE_TABLE),
        ("INSERT INTO Customers VALUES (1)", StatementKind.INSERT),
        ("do something weird", StatementKind.OTHER),
        ("", StatementKind.OTHER),
    ],
)
def test_classification(sql, kind):
    assert classify(sql).kind == kind


def test_create_view_takes_priority_over_select_text():
    stmt = classify("CREATE VIEW s AS SELECT * FROM Customers JOIN Transactions")
    assert stmt.kind == StatementKind.CREATE_VIEW


def test_table_names_only_count_after_from():
    # "customers" in the column list must not make this a customers query
    assert classify("SELECT customers FROM Transactions").kind == StatementKind.SELECT_TRANSACTIONS


def test_view_lookup_is_case_insensitive_and_returns_stored_name():
    stmt = classify("select * from ACTIVE_customers_v", view_names=["Active_Customers_V"])

    assert stmt.kind == StatementKind.SELECT_VIEW
    assert stmt.target == "Active_Customers_V"


def test_exact_view_name_wins_over_case_insensitive_match():
    stmt = classify("SELECT * FROM V1", view_names=["v1", "V1"])
    assert stmt.kind == StatementKind.SELECT_VIEW
    assert stmt.target == "V1"


def test_unknown_view_falls_back_to_select_other():
    stmt = classify("SELECT * FROM nothing_here", view_names=["v1"])
    assert stmt.kind == StatementKind.SELECT_OTHER
    assert stmt.target is None


def test_statement_keeps_original_text():
    sql = "  SELECT * FROM Customers  "
    assert classify(sql).sql == sql


def test_from_clause():
    assert from_clause("SELECT a FROM Customers WHERE x") == " customers where x"
    assert from_clause("SELECT 1") == ""


def test_is_select():
    assert StatementKind.SELECT_VIEW.is_select
    assert not StatementKind.CREATE_VIEW.is_select
