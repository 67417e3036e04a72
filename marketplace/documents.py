"""Single-document JSON persistence.

The whole marketplace state lives in one JSON object holding named collections.
Callers always load the full document, mutate it in memory and write the full
document back; there is no partial-document API.

Backends:
  - JsonFileDocumentStore: pretty-printed JSON file, atomic temp-file + rename
  - InMemoryDocumentStore: serialized JSON kept in memory (tests, ephemeral runs)

Configuration via environment variables:
  MARKET_STORE_BACKEND = json | memory   (default: json)
  MARKET_DB_PATH       = dev-db.json     (json backend only)

Within one process, ``transaction()`` serializes read-modify-write cycles with a
lock. Separate processes sharing one file are not coordinated: the last
completed write wins at whole-document granularity.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from marketplace.errors import StorageError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

COLLECTION_DEFAULTS: dict[str, type] = {
    "users": list,
    "suppliers": dict,
    "tariffs": dict,
    "chatThreads": dict,
    "orders": dict,
}


def empty_document() -> dict[str, Any]:
    doc: dict[str, Any] = {"schema_version": SCHEMA_VERSION}
    for name, factory in COLLECTION_DEFAULTS.items():
        doc[name] = factory()
    return doc


def _ensure_collections(doc: dict[str, Any]) -> bool:
    changed = False
    for name, factory in COLLECTION_DEFAULTS.items():
        if not isinstance(doc.get(name), factory):
            doc[name] = factory()
            changed = True
    return changed


def _upgrade_to_v1(doc: dict[str, Any]) -> None:
    _ensure_collections(doc)


# Ordered (target_version, step) pairs; each step must be idempotent.
UPGRADE_STEPS: list[tuple[int, Callable[[dict[str, Any]], None]]] = [
    (1, _upgrade_to_v1),
]


def _schema_version(doc: Mapping[str, Any]) -> int:
    raw = doc.get("schema_version")
    if isinstance(raw, bool) or not isinstance(raw, int):
        return 0
    return raw


def repair_document(doc: dict[str, Any]) -> bool:
    """Apply pending upgrade steps and the collection check in place.

    Returns True when the document changed and needs to be persisted.
    """
    changed = False
    version = _schema_version(doc)
    for target, step in UPGRADE_STEPS:
        if version < target:
            step(doc)
            version = target
            changed = True
    if doc.get("schema_version") != version:
        doc["schema_version"] = version
        changed = True
    if _ensure_collections(doc):
        changed = True
    return changed


def serialize_document(doc: Mapping[str, Any]) -> str:
    return json.dumps(doc, ensure_ascii=False, indent=2)


def parse_document(raw: str) -> dict[str, Any] | None:
    """Parse persisted content; None means the content is beyond repair."""
    try:
        doc = json.loads(raw)
    except (json.JSONDecodeError, ValueError):
        return None
    if not isinstance(doc, dict):
        return None
    return doc


class DocumentStore:
    """Base class implementing ensure/read/write on top of raw load/save hooks."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

    def _load_raw(self) -> str | None:
        raise NotImplementedError

    def _save_raw(self, payload: str) -> None:
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__

    def _load_or_repair(self) -> dict[str, Any]:
        with self._lock:
            raw = self._load_raw()
            if raw is None:
                doc = empty_document()
                self._save_raw(serialize_document(doc))
                return doc
            doc = parse_document(raw)
            if doc is None:
                logger.warning("document_unparsable store=%s action=reset", self.describe())
                doc = empty_document()
                self._save_raw(serialize_document(doc))
                return doc
            if repair_document(doc):
                logger.warning("document_repaired store=%s", self.describe())
                self._save_raw(serialize_document(doc))
            return doc

    def ensure(self) -> None:
        self._load_or_repair()

    def read(self) -> dict[str, Any]:
        return self._load_or_repair()

    def write(self, document: Mapping[str, Any]) -> None:
        try:
            payload = serialize_document(document)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"document is not serializable: {exc}", code="STORAGE_SERIALIZE_FAILED") from exc
        with self._lock:
            self._save_raw(payload)

    @contextmanager
    def transaction(self) -> Iterator[dict[str, Any]]:
        """Yield the current document and persist it if the block completes."""
        with self._lock:
            doc = self.read()
            yield doc
            self.write(doc)


class JsonFileDocumentStore(DocumentStore):
    def __init__(self, path: str | os.PathLike[str]) -> None:
        super().__init__()
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def describe(self) -> str:
        return str(self._path)

    def _load_raw(self) -> str | None:
        try:
            return self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError:
            return ""
        except OSError as exc:
            raise StorageError(f"cannot read {self._path}: {exc}", code="STORAGE_READ_FAILED") from exc

    def _save_raw(self, payload: str) -> None:
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as exc:
            raise StorageError(f"cannot write {self._path}: {exc}") from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("temp_file_cleanup_failed path=%s", tmp_name)


class InMemoryDocumentStore(DocumentStore):
    def __init__(self, initial: str | None = None) -> None:
        super().__init__()
        self._payload = initial

    def _load_raw(self) -> str | None:
        return self._payload

    def _save_raw(self, payload: str) -> None:
        self._payload = payload


def create_document_store_from_env(environ: Mapping[str, str] | None = None) -> DocumentStore:
    env = os.environ if environ is None else environ
    backend = env.get("MARKET_STORE_BACKEND", "json").strip().lower() or "json"
    if backend == "memory":
        return InMemoryDocumentStore()
    if backend == "json":
        db_path = env.get("MARKET_DB_PATH", "dev-db.json").strip() or "dev-db.json"
        return JsonFileDocumentStore(db_path)
    raise ValueError(f"unsupported MARKET_STORE_BACKEND: {backend}")
