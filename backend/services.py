"""
Process-wide collaborators for the HTTP host, built lazily on first use.
Views go through these functions so tests can swap them out.
"""
from functools import lru_cache

from accounts.auth_client import AuthClient
from dispatch.dispatcher import Dispatcher
from notifications.messaging_client import FcmPushClient
from notifications.notifier import Notifier
from store.document_store import DocumentStore
from store.repository import RideRepository


@lru_cache(maxsize=None)
def get_store() -> DocumentStore:
    from store.firestore_store import FirestoreDocumentStore

    return FirestoreDocumentStore()


@lru_cache(maxsize=None)
def get_push_client() -> FcmPushClient:
    return FcmPushClient()


@lru_cache(maxsize=None)
def get_auth_client() -> AuthClient:
    return AuthClient(get_repository())


def get_repository() -> RideRepository:
    return RideRepository(get_store())


def get_dispatcher() -> Dispatcher:
    store = get_store()
    return Dispatcher(store, notifier=Notifier(store, get_push_client()))
