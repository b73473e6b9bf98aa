"""
Purpose: The document store "port".
What it does:
- Defines the operations the rest of the code needs from the backend's
  document database: add / get / set / update / equality query / live
  subscription, plus one conditional multi-document write.
- Ships an in-memory implementation used by tests, seed loading and the
  local simulation script.

The Firestore implementation lives in store/firestore_store.py.

Rule: No ride or volunteer rules here. Collections and fields only.
"""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


class _Sentinel:
    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return self.name


#resolved by the store at write time
SERVER_TIMESTAMP = _Sentinel("SERVER_TIMESTAMP")
#removes the field from the document
DELETE_FIELD = _Sentinel("DELETE_FIELD")


class StoreError(Exception):
    """Raised when a read or write against the document store fails."""
    pass


@dataclass(frozen=True)
class StoredDocument:
    id: str
    data: Dict[str, Any]


@dataclass(frozen=True)
class Precondition:
    """
    `collection/doc_id` must currently hold `expected` in `field`.
    A missing document never matches; a missing field reads as None.
    """
    collection: str
    doc_id: str
    field: str
    expected: Any


@dataclass(frozen=True)
class Write:
    collection: str
    doc_id: str
    fields: Dict[str, Any]


@dataclass(frozen=True)
class ConditionalWriteResult:
    committed: bool
    failed_precondition: Optional[Precondition] = None


Listener = Callable[[List[StoredDocument]], None]
Unsubscribe = Callable[[], None]


class DocumentStore(ABC):

    @abstractmethod
    def add(self, collection: str, data: Mapping[str, Any]) -> str:
        """Create a document with a generated id and return that id."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return the document's fields, or None if it does not exist."""

    @abstractmethod
    def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        """Create or overwrite a document."""

    @abstractmethod
    def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        """Merge fields into an existing document."""

    @abstractmethod
    def query(self, collection: str, filters: Mapping[str, Any]) -> List[StoredDocument]:
        """All documents whose fields equal every filter value. Store order."""

    @abstractmethod
    def listen(self, collection: str, filters: Mapping[str, Any], callback: Listener) -> Unsubscribe:
        """Call `callback` with the full query result now and after every change."""

    @abstractmethod
    def write_if(
        self,
        preconditions: Sequence[Precondition],
        writes: Sequence[Write],
    ) -> ConditionalWriteResult:
        """
        Atomically check every precondition and, only if all hold, apply
        every write. Nothing is written when a precondition fails.
        """


@dataclass
class InMemoryDocumentStore(DocumentStore):
    """
    Dict-backed store. Conditional writes are serialized with a lock, which
    gives the same all-or-nothing outcome as a Firestore transaction.
    """
    _collections: Dict[str, Dict[str, Dict[str, Any]]] = field(default_factory=dict)
    _listeners: List[tuple] = field(default_factory=list)
    _lock: threading.RLock = field(default_factory=threading.RLock)

    # --- Public API ---

    def add(self, collection: str, data: Mapping[str, Any]) -> str:
        doc_id = uuid.uuid4().hex[:20]
        self.set(collection, doc_id, data)
        return doc_id

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            document = self._collections.get(collection, {}).get(doc_id)
            return copy.deepcopy(document) if document is not None else None

    def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        with self._lock:
            self._collections.setdefault(collection, {})[doc_id] = self._resolve({}, data)
        self._notify(collection)

    def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        with self._lock:
            self._apply_update(collection, doc_id, fields)
        self._notify(collection)

    def query(self, collection: str, filters: Mapping[str, Any]) -> List[StoredDocument]:
        with self._lock:
            documents = self._collections.get(collection, {})
            return [
                StoredDocument(doc_id, copy.deepcopy(data))
                for doc_id, data in documents.items()
                if all(key in data and data[key] == value for key, value in filters.items())
            ]

    def listen(self, collection: str, filters: Mapping[str, Any], callback: Listener) -> Unsubscribe:
        entry = (collection, dict(filters), callback)
        with self._lock:
            self._listeners.append(entry)
        callback(self.query(collection, filters))

        def unsubscribe() -> None:
            with self._lock:
                if entry in self._listeners:
                    self._listeners.remove(entry)

        return unsubscribe

    def write_if(
        self,
        preconditions: Sequence[Precondition],
        writes: Sequence[Write],
    ) -> ConditionalWriteResult:
        with self._lock:
            for condition in preconditions:
                document = self._collections.get(condition.collection, {}).get(condition.doc_id)
                if document is None or document.get(condition.field) != condition.expected:
                    return ConditionalWriteResult(committed=False, failed_precondition=condition)

            # stage every write first so a failing one leaves nothing half-applied
            staged: Dict[tuple, Dict[str, Any]] = {}
            for write in writes:
                key = (write.collection, write.doc_id)
                if key in staged:
                    current = staged[key]
                else:
                    current = self._collections.get(write.collection, {}).get(write.doc_id)
                if current is None:
                    raise StoreError(f"No document to update: {write.collection}/{write.doc_id}")
                staged[key] = self._resolve(current, write.fields)

            for (collection, doc_id), document in staged.items():
                self._collections[collection][doc_id] = document

        for touched in {write.collection for write in writes}:
            self._notify(touched)
        return ConditionalWriteResult(committed=True)

    # --- Internal helpers ---

    def _apply_update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        document = self._collections.get(collection, {}).get(doc_id)
        if document is None:
            raise StoreError(f"No document to update: {collection}/{doc_id}")
        self._collections[collection][doc_id] = self._resolve(document, fields)

    @staticmethod
    def _resolve(current: Dict[str, Any], fields: Mapping[str, Any]) -> Dict[str, Any]:
        merged = dict(current)
        for key, value in fields.items():
            if value is DELETE_FIELD:
                merged.pop(key, None)
            elif value is SERVER_TIMESTAMP:
                merged[key] = datetime.now(timezone.utc)
            else:
                merged[key] = copy.deepcopy(value)
        return merged

    def _notify(self, collection: str) -> None:
        with self._lock:
            listeners = [entry for entry in self._listeners if entry[0] == collection]
        for _, filters, callback in listeners:
            callback(self.query(collection, filters))
