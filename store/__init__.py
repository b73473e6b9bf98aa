#Marks store as a package.
#Re-exports the document store port and its in-memory implementation.
#The Firestore adapter (store.firestore_store), the typed repository
#(store.repository) and the seed sources (store.seed) are imported from
#their own modules.
#No business logic.

from .document_store import (
    DELETE_FIELD,
    SERVER_TIMESTAMP,
    ConditionalWriteResult,
    DocumentStore,
    InMemoryDocumentStore,
    Precondition,
    StoredDocument,
    StoreError,
    Write,
)

__all__ = [
    "DELETE_FIELD",
    "SERVER_TIMESTAMP",
    "ConditionalWriteResult",
    "DocumentStore",
    "InMemoryDocumentStore",
    "Precondition",
    "StoredDocument",
    "StoreError",
    "Write",
]
