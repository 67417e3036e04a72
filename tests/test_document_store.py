from __future__ import annotations

import json
from pathlib import Path

import pytest

from marketplace.documents import (
    SCHEMA_VERSION,
    InMemoryDocumentStore,
    JsonFileDocumentStore,
    create_document_store_from_env,
    repair_document,
)
from marketplace.errors import StorageError

COLLECTIONS = {"users": [], "suppliers": {}, "tariffs": {}, "chatThreads": {}, "orders": {}}


def test_read_creates_missing_document_with_all_collections(db_path: Path):
    documents = JsonFileDocumentStore(db_path)
    assert not db_path.exists()

    doc = documents.read()

    assert db_path.exists()
    for name, empty in COLLECTIONS.items():
        assert doc[name] == empty
    assert doc["schema_version"] == SCHEMA_VERSION


def test_missing_orders_collection_is_repaired_and_persisted(db_path: Path):
    db_path.write_text(
        json.dumps({"users": [{"id": "u_1", "email": "a@b.it"}], "suppliers": {}, "tariffs": {}, "chatThreads": {}}),
        encoding="utf-8",
    )

    doc = JsonFileDocumentStore(db_path).read()
    assert doc["orders"] == {}
    assert doc["users"] == [{"id": "u_1", "email": "a@b.it"}]

    on_disk = json.loads(db_path.read_text(encoding="utf-8"))
    assert on_disk["orders"] == {}
    assert JsonFileDocumentStore(db_path).read()["orders"] == {}


def test_unparsable_document_is_replaced_with_empty_one(db_path: Path):
    db_path.write_text("{not json", encoding="utf-8")

    doc = JsonFileDocumentStore(db_path).read()

    assert {k: doc[k] for k in COLLECTIONS} == COLLECTIONS
    assert json.loads(db_path.read_text(encoding="utf-8"))["users"] == []


def test_non_object_root_is_replaced(db_path: Path):
    db_path.write_text("[1, 2, 3]", encoding="utf-8")
    doc = JsonFileDocumentStore(db_path).read()
    assert doc["orders"] == {}


def test_mistyped_collection_is_reset_to_its_default(db_path: Path):
    db_path.write_text(json.dumps({**COLLECTIONS, "users": {"oops": True}, "orders": []}), encoding="utf-8")
    doc = JsonFileDocumentStore(db_path).read()
    assert doc["users"] == []
    assert doc["orders"] == {}


def test_repair_is_idempotent_and_tags_schema_version():
    legacy = {"users": [], "suppliers": {"x@y.it": {"email": "x@y.it"}}}
    assert repair_document(legacy) is True
    assert legacy["schema_version"] == SCHEMA_VERSION
    assert legacy["suppliers"] == {"x@y.it": {"email": "x@y.it"}}
    assert repair_document(legacy) is False


def test_write_is_pretty_printed_and_leaves_no_temp_files(db_path: Path):
    documents = JsonFileDocumentStore(db_path)
    doc = documents.read()
    doc["tariffs"]["s@x.it"] = [{"unit": "€/cm³"}]
    documents.write(doc)

    raw = db_path.read_text(encoding="utf-8")
    assert raw.startswith("{\n  ")
    assert "€/cm³" in raw
    assert [p.name for p in db_path.parent.iterdir()] == [db_path.name]


def test_transaction_persists_only_when_block_completes(db_path: Path):
    documents = JsonFileDocumentStore(db_path)
    with documents.transaction() as doc:
        doc["orders"]["ord_1"] = {"id": "ord_1"}

    with pytest.raises(RuntimeError):
        with documents.transaction() as doc:
            doc["orders"]["ord_2"] = {"id": "ord_2"}
            raise RuntimeError("boom")

    assert set(documents.read()["orders"]) == {"ord_1"}


def test_write_failure_raises_storage_error(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    documents = JsonFileDocumentStore(blocker / "db.json")

    with pytest.raises(StorageError) as exc:
        documents.write({**COLLECTIONS})
    assert exc.value.http_status == 500


def test_in_memory_store_returns_independent_copies():
    documents = InMemoryDocumentStore()
    first = documents.read()
    first["users"].append({"email": "ghost@x.it"})
    assert documents.read()["users"] == []


def test_factory_defaults_to_json_file(monkeypatch, tmp_path: Path):
    monkeypatch.delenv("MARKET_STORE_BACKEND", raising=False)
    monkeypatch.setenv("MARKET_DB_PATH", str(tmp_path / "factory.json"))
    documents = create_document_store_from_env()
    assert isinstance(documents, JsonFileDocumentStore)
    assert documents.path == tmp_path / "factory.json"


def test_factory_supports_memory_and_rejects_unknown_backend():
    assert isinstance(create_document_store_from_env({"MARKET_STORE_BACKEND": "memory"}), InMemoryDocumentStore)
    with pytest.raises(ValueError) as exc:
        create_document_store_from_env({"MARKET_STORE_BACKEND": "redis"})
    assert "MARKET_STORE_BACKEND" in str(exc.value)


def test_ensure_alone_creates_the_file(db_path: Path):
    JsonFileDocumentStore(db_path).ensure()
    on_disk = json.loads(db_path.read_text(encoding="utf-8"))
    assert {k: on_disk[k] for k in COLLECTIONS} == COLLECTIONS
    assert on_disk["schema_version"] == SCHEMA_VERSION


def test_ensure_alone_repairs_missing_collections(db_path: Path):
    db_path.write_text(json.dumps({"users": [{"id": "u_1"}]}), encoding="utf-8")
    JsonFileDocumentStore(db_path).ensure()
    on_disk = json.loads(db_path.read_text(encoding="utf-8"))
    assert on_disk["users"] == [{"id": "u_1"}]
    assert on_disk["orders"] == {}
    assert on_disk["tariffs"] == {}
