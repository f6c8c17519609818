import logging

import pytest

from veriflow.errors import StoreError
from veriflow.schema import get_schema_info, infer_schema, infer_type
from veriflow.store import JSONFileBackend, MemoryBackend
from veriflow.types import SchemaColumn


def test_infers_integer_and_datetime_from_first_record():
    doc = {"Customers": [{"CustomerID": 1, "SignupDate": "2024-01-01T00:00:00.000Z"}]}

    schema = infer_schema(doc)

    assert SchemaColumn("Customers", "CustomerID", "INTEGER") in schema
    assert SchemaColumn("Customers", "SignupDate", "DATETIME") in schema


@pytest.mark.parametrize(
    "value, expected",
    [
        (True, "BOOLEAN"),
        (0, "INTEGER"),
        (5.0, "INTEGER"),
        (12.5, "REAL"),
        ("hello", "TEXT"),
        ("2024-01-01", "TEXT"),
        ("2024-01-01T00:00:00Z", "TEXT"),
        (None, "NULL"),
        ([1, 2], "ARRAY"),
        ({"a": 1}, "OBJECT"),
    ],
)
def test_infer_type(value, expected):
    assert infer_type(value) == expected


def test_only_first_record_is_inspected():
    doc = {"T": [{"a": 1}, {"a": "text", "b": 2}]}

    assert infer_schema(doc) == [SchemaColumn("T", "a", "INTEGER")]


def test_empty_tables_and_maps_contribute_nothing(caplog):
    doc = {"Customers": [], "Views": {"v": {"definition": "x"}}, "Transactions": [{"Amount": 1.5}]}

    with caplog.at_level(logging.WARNING, logger="veriflow"):
        schema = infer_schema(doc)

    assert schema == [SchemaColumn("Transactions", "Amount", "REAL")]
    assert "Customers" in caplog.text


def test_schema_column_serialises_with_upper_keys():
    col = SchemaColumn("Customers", "Email", "TEXT")
    assert col.to_dict() == {"TABLE_NAME": "Customers", "COLUMN_NAME": "Email", "DATA_TYPE": "TEXT"}


async def test_missing_store_yields_empty_schema(tmp_path, caplog):
    backend = JSONFileBackend(tmp_path / "missing.json")

    with caplog.at_level(logging.WARNING, logger="veriflow"):
        assert await get_schema_info(backend) == []
    assert "Returning empty schema" in caplog.text


async def test_non_object_store_yields_empty_schema(tmp_path):
    path = tmp_path / "db.json"
    path.write_text("[1, 2, 3]")

    assert await get_schema_info(JSONFileBackend(path)) == []


async def test_schema_from_backend(document):
    schema = await get_schema_info(MemoryBackend(document))

    tables = {c.table for c in schema}
    assert tables == {"Customers", "Transactions"}
    assert SchemaColumn("Transactions", "Amount", "INTEGER") in schema


async def test_read_errors_propagate(tmp_path):
    # A directory where the file should be cannot be read
    path = tmp_path / "db.json"
    path.mkdir()

    with pytest.raises(StoreError):
        await get_schema_info(JSONFileBackend(path))
