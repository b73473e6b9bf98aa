"""
Purpose: The Cloud Firestore "adapter".
Sole responsibility: talk to Firestore through firebase_admin and return
normalized outputs (plain dicts, StoredDocument lists).
Encapsulates Firestore-specific details:
- field filters and snapshot listeners
- transactions for conditional writes
- server timestamp / delete-field sentinels
- wrapping google.api_core errors into StoreError
It should not contain matching rules or status rules.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore_v1.base_query import FieldFilter

from .document_store import (
    DELETE_FIELD,
    SERVER_TIMESTAMP,
    ConditionalWriteResult,
    DocumentStore,
    Listener,
    Precondition,
    StoredDocument,
    StoreError,
    Unsubscribe,
    Write,
)
from .firebase_app import get_firebase_app

logger = logging.getLogger(__name__)


class FirestoreDocumentStore(DocumentStore):
    """
    Firestore adapter.

    `client` can be injected (e.g. an emulator client); otherwise the shared
    firebase_admin app is used.
    """

    def __init__(self, client=None):
        self._client = client or firestore.client(app=get_firebase_app())

    # ----------------
    # Internal helpers
    # ----------------
    @staticmethod
    def _translate(fields: Mapping[str, Any]) -> Dict[str, Any]:
        translated = {}
        for key, value in fields.items():
            if value is SERVER_TIMESTAMP:
                translated[key] = firestore.SERVER_TIMESTAMP
            elif value is DELETE_FIELD:
                translated[key] = firestore.DELETE_FIELD
            else:
                translated[key] = value
        return translated

    def _filtered(self, collection: str, filters: Mapping[str, Any]):
        query = self._client.collection(collection)
        for key, value in filters.items():
            query = query.where(filter=FieldFilter(key, "==", value))
        return query

    def _ref(self, collection: str, doc_id: str):
        return self._client.collection(collection).document(doc_id)

    # ----------------
    # Public methods
    # ----------------
    def add(self, collection: str, data: Mapping[str, Any]) -> str:
        try:
            _, doc_ref = self._client.collection(collection).add(self._translate(data))
        except GoogleAPIError as exc:
            raise StoreError(f"Failed to add document to {collection}: {exc}") from exc
        return doc_ref.id

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            snapshot = self._ref(collection, doc_id).get()
        except GoogleAPIError as exc:
            raise StoreError(f"Failed to read {collection}/{doc_id}: {exc}") from exc
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        try:
            self._ref(collection, doc_id).set(self._translate(data))
        except GoogleAPIError as exc:
            raise StoreError(f"Failed to write {collection}/{doc_id}: {exc}") from exc

    def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        try:
            self._ref(collection, doc_id).update(self._translate(fields))
        except GoogleAPIError as exc:
            raise StoreError(f"Failed to update {collection}/{doc_id}: {exc}") from exc

    def query(self, collection: str, filters: Mapping[str, Any]) -> List[StoredDocument]:
        try:
            snapshots = list(self._filtered(collection, filters).stream())
        except GoogleAPIError as exc:
            raise StoreError(f"Failed to query {collection}: {exc}") from exc
        return [StoredDocument(snapshot.id, snapshot.to_dict() or {}) for snapshot in snapshots]

    def listen(self, collection: str, filters: Mapping[str, Any], callback: Listener) -> Unsubscribe:

        def on_snapshot(snapshots, changes, read_time):
            callback([StoredDocument(snapshot.id, snapshot.to_dict() or {}) for snapshot in snapshots])

        watch = self._filtered(collection, filters).on_snapshot(on_snapshot)
        return watch.unsubscribe

    def write_if(
        self,
        preconditions: Sequence[Precondition],
        writes: Sequence[Write],
    ) -> ConditionalWriteResult:
        """
        Firestore transaction: every precondition read happens before any
        write, and the SDK retries the whole function on contention.
        """

        @firestore.transactional
        def apply(transaction) -> ConditionalWriteResult:
            for condition in preconditions:
                snapshot = self._ref(condition.collection, condition.doc_id).get(transaction=transaction)
                current = snapshot.to_dict() if snapshot.exists else None
                if current is None or current.get(condition.field) != condition.expected:
                    return ConditionalWriteResult(committed=False, failed_precondition=condition)

            for write in writes:
                transaction.update(self._ref(write.collection, write.doc_id), self._translate(write.fields))
            return ConditionalWriteResult(committed=True)

        try:
            return apply(self._client.transaction())
        except (GoogleAPIError, ValueError) as exc:
            # ValueError: the SDK gave up after too many contended attempts
            raise StoreError(f"Conditional write failed: {exc}") from exc
