"""
In-process data store that mimics the Firestore client.
Used when no Firebase credentials are found. Optionally file-backed so
local data survives process restarts.

Supports the subset of the Firestore API the CRUD layer relies on:
nested collections, where/order_by/limit queries, batched writes,
transactions, DELETE_FIELD and deep ``merge=True`` sets.
"""

import copy
import json
import threading
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from google.api_core.exceptions import NotFound
from google.cloud.firestore import DELETE_FIELD

from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)


def _json_serial(obj):
    """JSON serializer for objects not serializable by default."""
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    raise TypeError(f"Type {type(obj)} not serializable")


def _clone(value):
    # DELETE_FIELD must keep its identity across copies
    return copy.deepcopy(value, {id(DELETE_FIELD): DELETE_FIELD})


def _strip_sentinels(data: dict) -> dict:
    cleaned = {}
    for key, value in data.items():
        if value is DELETE_FIELD:
            continue
        if isinstance(value, dict):
            value = _strip_sentinels(value)
        cleaned[key] = value
    return cleaned


def _deep_merge(target: dict, source: dict) -> None:
    for key, value in source.items():
        if value is DELETE_FIELD:
            target.pop(key, None)
        elif isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        elif isinstance(value, dict):
            target[key] = _strip_sentinels(value)
        else:
            target[key] = _clone(value)


def _apply_update(target: dict, updates: dict) -> None:
    """Apply Firestore ``update()`` semantics; dotted keys address nested fields."""
    for key, value in updates.items():
        parts = key.split(".")
        node = target
        for part in parts[:-1]:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
        if value is DELETE_FIELD:
            node.pop(parts[-1], None)
        elif isinstance(value, dict):
            node[parts[-1]] = _strip_sentinels(value)
        else:
            node[parts[-1]] = _clone(value)


def _sort_key(value: Any) -> Any:
    # Timestamps reloaded from disk are ISO strings; compare both forms alike
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _matches(doc_val: Any, op: str, value: Any) -> bool:
    if op == "==":
        return doc_val == value
    if op == "!=":
        return doc_val != value
    if op == "<":
        return doc_val < value
    if op == "<=":
        return doc_val <= value
    if op == ">":
        return doc_val > value
    if op == ">=":
        return doc_val >= value
    if op == "in":
        return doc_val in value
    if op == "not-in":
        return doc_val not in value
    if op == "array_contains":
        return isinstance(doc_val, list) and value in doc_val
    if op == "array_contains_any":
        return isinstance(doc_val, list) and any(v in doc_val for v in value)
    raise ValueError(f"Unsupported operator: {op}")


class LocalStore:
    """Data store that mimics Firestore operations."""

    def __init__(self, data_dir: Optional[Path] = None):
        # Keyed by full collection path, e.g. "households/abc/toys"
        self.collections: Dict[str, Dict[str, dict]] = {}
        self._lock = threading.RLock()
        self._data_dir = Path(data_dir) if data_dir else None

        if self._data_dir is not None:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            self._load_data()

    def _file_for(self, path: str) -> Path:
        return self._data_dir / f"{path.replace('/', '__')}.json"

    def _load_data(self) -> None:
        """Load every persisted collection from the data dir."""
        for data_file in sorted(self._data_dir.glob("*.json")):
            path = data_file.stem.replace("__", "/")
            with open(data_file) as f:
                self.collections[path] = json.load(f)
        logger.info("LocalStore loaded %d collections from %s", len(self.collections), self._data_dir)

    def _persist(self, path: str) -> None:
        """Write a collection to disk as JSON (no-op for in-memory stores)."""
        if self._data_dir is None:
            return
        with open(self._file_for(path), "w") as f:
            json.dump(self.collections.get(path, {}), f, indent=2, default=_json_serial)

    def _docs(self, path: str) -> Dict[str, dict]:
        return self.collections.setdefault(path, {})

    # ── Raw write primitives (callers hold the lock) ─────────────────

    def _set(self, path: str, doc_id: str, data: dict, merge: bool = False) -> None:
        docs = self._docs(path)
        if merge and doc_id in docs:
            _deep_merge(docs[doc_id], data)
        else:
            docs[doc_id] = _strip_sentinels(_clone(data))
        self._persist(path)

    def _update(self, path: str, doc_id: str, data: dict) -> None:
        docs = self._docs(path)
        if doc_id not in docs:
            raise NotFound(f"No document to update: {path}/{doc_id}")
        _apply_update(docs[doc_id], data)
        self._persist(path)

    def _delete(self, path: str, doc_id: str) -> None:
        self._docs(path).pop(doc_id, None)
        self._persist(path)

    # ── Firestore-like API ───────────────────────────────────────────

    def collection(self, path: str) -> "CollectionRef":
        return CollectionRef(self, path)

    def batch(self) -> "WriteBatch":
        return WriteBatch(self)

    def transaction(self) -> "LocalTransaction":
        return LocalTransaction(self)

    def run_transaction(self, func: Callable, *args, **kwargs):
        """Run ``func(transaction, *args)`` atomically.

        The store lock is held for the whole call, so reads and writes made
        through the transaction cannot interleave with other writers. Writes
        are applied only if ``func`` returns without raising.
        """
        with self._lock:
            transaction = LocalTransaction(self)
            result = func(transaction, *args, **kwargs)
            transaction.commit()
            return result


class _WriteQueue:
    """Shared buffering for batches and transactions."""

    def __init__(self, store: LocalStore):
        self._store = store
        self._writes: List[Tuple[str, "DocumentRef", Optional[dict], bool]] = []

    def set(self, reference: "DocumentRef", document_data: dict, merge: bool = False) -> None:
        self._writes.append(("set", reference, _clone(document_data), merge))

    def update(self, reference: "DocumentRef", field_updates: dict) -> None:
        self._writes.append(("update", reference, _clone(field_updates), False))

    def delete(self, reference: "DocumentRef") -> None:
        self._writes.append(("delete", reference, None, False))

    def commit(self) -> list:
        with self._store._lock:
            # Validate updates up front so a failing write leaves nothing applied
            pending = {}
            for kind, ref, _, _ in self._writes:
                key = (ref._path, ref.id)
                if kind == "update" and not pending.get(key, ref.id in self._store._docs(ref._path)):
                    raise NotFound(f"No document to update: {ref.path}")
                pending[key] = kind != "delete"

            for kind, ref, data, merge in self._writes:
                if kind == "set":
                    self._store._set(ref._path, ref.id, data, merge=merge)
                elif kind == "update":
                    self._store._update(ref._path, ref.id, data)
                else:
                    self._store._delete(ref._path, ref.id)
            results = [None] * len(self._writes)
            self._writes = []
            return results


class WriteBatch(_WriteQueue):
    """Mimics Firestore WriteBatch."""


class LocalTransaction(_WriteQueue):
    """Mimics Firestore Transaction (reads go through DocumentRef/Query.get)."""


class CollectionRef:
    """Mimics Firestore collection reference and query."""

    def __init__(self, store: LocalStore, path: str):
        self._store = store
        self._path = path
        self._filters: List[Tuple[str, str, Any]] = []
        self._order_by: List[Tuple[str, str]] = []
        self._limit_val: Optional[int] = None

    @property
    def id(self) -> str:
        return self._path.rsplit("/", 1)[-1]

    def _copy(self) -> "CollectionRef":
        new_ref = CollectionRef(self._store, self._path)
        new_ref._filters = list(self._filters)
        new_ref._order_by = list(self._order_by)
        new_ref._limit_val = self._limit_val
        return new_ref

    def document(self, doc_id: Optional[str] = None) -> "DocumentRef":
        return DocumentRef(self._store, self._path, doc_id or uuid.uuid4().hex[:20])

    def where(self, field: str, op: str, value) -> "CollectionRef":
        new_ref = self._copy()
        new_ref._filters.append((field, op, value))
        return new_ref

    def order_by(self, field: str, direction: str = "ASCENDING") -> "CollectionRef":
        new_ref = self._copy()
        new_ref._order_by.append((field, direction))
        return new_ref

    def limit(self, count: int) -> "CollectionRef":
        new_ref = self._copy()
        new_ref._limit_val = count
        return new_ref

    def get(self, transaction: Optional[LocalTransaction] = None) -> List["DocumentSnapshot"]:
        with self._store._lock:
            items = list(self._store._docs(self._path).items())

            for field, op, value in self._filters:
                items = [
                    (doc_id, doc) for doc_id, doc in items
                    if field in doc and _matches(doc[field], op, value)
                ]

            # Firestore drops documents missing an order_by field
            for field, _ in self._order_by:
                items = [(doc_id, doc) for doc_id, doc in items if field in doc]
            for field, direction in reversed(self._order_by):
                items.sort(key=lambda item: _sort_key(item[1][field]), reverse=direction == "DESCENDING")

            if self._limit_val is not None:
                items = items[: self._limit_val]

            return [
                DocumentSnapshot(self.document(doc_id), _clone(doc))
                for doc_id, doc in items
            ]


class DocumentRef:
    """Mimics Firestore document reference."""

    def __init__(self, store: LocalStore, collection_path: str, doc_id: str):
        self._store = store
        self._path = collection_path
        self._id = doc_id

    @property
    def id(self) -> str:
        return self._id

    @property
    def path(self) -> str:
        return f"{self._path}/{self._id}"

    def collection(self, name: str) -> CollectionRef:
        return CollectionRef(self._store, f"{self.path}/{name}")

    def get(self, transaction: Optional[LocalTransaction] = None) -> "DocumentSnapshot":
        with self._store._lock:
            doc = self._store._docs(self._path).get(self._id)
            return DocumentSnapshot(self, _clone(doc))

    def set(self, document_data: dict, merge: bool = False) -> None:
        with self._store._lock:
            self._store._set(self._path, self._id, document_data, merge=merge)

    def update(self, field_updates: dict) -> None:
        with self._store._lock:
            self._store._update(self._path, self._id, field_updates)

    def delete(self) -> None:
        with self._store._lock:
            self._store._delete(self._path, self._id)

    def __eq__(self, other) -> bool:
        return isinstance(other, DocumentRef) and other.path == self.path

    def __hash__(self) -> int:
        return hash(self.path)


class DocumentSnapshot:
    """Mimics Firestore document snapshot."""

    def __init__(self, reference: DocumentRef, data: Optional[dict]):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[dict]:
        return self._data

    def get(self, field: str, default=None):
        if self._data is None:
            return default
        return self._data.get(field, default)


# ── Singleton ────────────────────────────────────────────────────

_local_store: Optional[LocalStore] = None


def get_local_store(data_dir: Optional[str] = None) -> LocalStore:
    """Get or create the singleton LocalStore instance."""
    global _local_store
    if _local_store is None:
        _local_store = LocalStore(Path(data_dir) if data_dir else None)
    return _local_store
