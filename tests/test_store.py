import asyncio
import json
import threading

import pytest

from veriflow.errors import StoreError
from veriflow.seed import sample_document, seed_store
from veriflow.store import (
    JSONFileBackend,
    MemoryBackend,
    StoreBackend,
    TableStore,
    default_document,
    open_backend,
)
from veriflow.store.db import SQLBackend, normalize_url
from veriflow.types import ViewRecord


async def test_json_file_round_trip(tmp_path, document):
    backend = JSONFileBackend(tmp_path / "nested" / "SalesDB.json")

    await backend.write(document)

    assert backend.path.exists()
    assert json.loads(backend.path.read_text()) == document
    assert await backend.read() == document
    # no temporary files are left next to the store
    assert [p.name for p in backend.path.parent.iterdir()] == ["SalesDB.json"]


async def test_json_file_missing_reads_none(tmp_path):
    assert await JSONFileBackend(tmp_path / "absent.json").read() is None


@pytest.mark.parametrize("content", ["", "   \n", "{not json"])
async def test_json_file_unparseable_reads_none(tmp_path, content, caplog):
    path = tmp_path / "SalesDB.json"
    path.write_text(content)

    assert await JSONFileBackend(path).read() is None
    assert "SalesDB.json" in caplog.text


async def test_json_file_unwritable_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")

    with pytest.raises(StoreError, match="Failed to write"):
        await JSONFileBackend(blocker / "SalesDB.json").write({})


async def test_json_file_io_runs_off_the_event_loop(tmp_path, document, monkeypatch):
    backend = JSONFileBackend(tmp_path / "SalesDB.json")
    loop_thread = threading.get_ident()
    io_threads = []
    original = asyncio.to_thread

    async def recording_to_thread(func, /, *args, **kwargs):
        def run():
            io_threads.append(threading.get_ident())
            return func(*args, **kwargs)

        return await original(run)

    monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)

    await backend.write(document)
    assert await backend.read() == document

    assert len(io_threads) == 2
    assert loop_thread not in io_threads


def test_backends_satisfy_protocol(tmp_path):
    assert isinstance(MemoryBackend(), StoreBackend)
    assert isinstance(JSONFileBackend(tmp_path / "x.json"), StoreBackend)


async def test_load_missing_document_starts_empty(caplog):
    store = await TableStore(MemoryBackend()).load()

    assert store.document == default_document()
    assert store.list() == ["Customers", "Transactions"]
    assert "starting empty" in caplog.text


async def test_get_put_list(store):
    assert store.list() == ["Customers", "Transactions"]
    assert store.get("Products") == []
    assert store.get("Views") == []

    store.put("Products", [{"ProductID": 1}])

    assert store.list() == ["Customers", "Transactions", "Products"]
    assert store.get("Products") == [{"ProductID": 1}]
    assert "Products" in store


async def test_save_writes_whole_document(store, backend):
    store.put("Products", [{"ProductID": 1}])
    store.put_view("v1", ViewRecord(definition="CREATE VIEW v1 AS SELECT 1"))

    await store.save()

    saved = await backend.read()
    assert saved["Products"] == [{"ProductID": 1}]
    assert saved["Views"]["v1"]["definition"] == "CREATE VIEW v1 AS SELECT 1"
    assert len(saved["Customers"]) == 2


async def test_views_map_is_created_when_missing():
    store = await TableStore(MemoryBackend({"Customers": []})).load()

    assert store.views == {}
    assert store.document["Views"] == {}


async def test_view_lookup(store):
    store.put_view("Active_Summary", ViewRecord(definition="d", data=[{"a": 1}]))

    assert store.get_view("Active_Summary").data == [{"a": 1}]
    assert store.get_view("active_summary") is None
    assert store.find_view("active_summary") == "Active_Summary"
    assert store.find_view("nope") is None


async def test_memory_backend_isolates_copies(document):
    backend = MemoryBackend(document)
    store = await TableStore(backend).load()

    store.get("Customers").clear()

    assert len((await backend.read())["Customers"]) == 2


async def test_sql_backend_round_trip(tmp_path, document):
    backend = SQLBackend(f"sqlite:///{tmp_path / 'veriflow.db'}")
    try:
        assert await backend.read() is None

        await backend.write(document)
        document["Customers"].pop()
        await backend.write(document)

        assert await backend.read() == document
        assert backend.location.endswith("#SalesDB")
    finally:
        await backend.close()


@pytest.mark.parametrize(
    "url,expected",
    [
        ("postgres://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("postgresql://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("postgresql+asyncpg://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("sqlite:///./x.db", "sqlite+aiosqlite:///./x.db"),
    ],
)
def test_normalize_url(url, expected):
    assert normalize_url(url) == expected


def test_open_backend(tmp_path):
    assert isinstance(open_backend(path=tmp_path / "s.json"), JSONFileBackend)
    with pytest.raises(ValueError):
        open_backend()


async def test_seed_only_fills_empty_store():
    backend = MemoryBackend()
    store = await TableStore(backend).load()

    assert await seed_store(store) is True
    assert await seed_store(store) is False

    saved = await backend.read()
    assert len(saved["Customers"]) == 4
    assert len(saved["Transactions"]) == 6
    assert [c["CustomerID"] for c in saved["Customers"]] == [1, 2, 3, 4]


async def test_seed_force_overwrites(store):
    assert await seed_store(store, force=True) is True
    assert len(store.get("Customers")) == 4


def test_sample_document_uses_timestamp():
    doc = sample_document("2024-05-01T00:00:00.000Z")
    assert {c["SignupDate"] for c in doc["Customers"]} == {"2024-05-01T00:00:00.000Z"}
    assert doc["Views"] == {}
