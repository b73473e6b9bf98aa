import pytest

from notifications.messaging_client import PushDeliveryError
from rides.models import RIDE_REQUESTS_COLLECTION
from store.document_store import InMemoryDocumentStore
from volunteers.models import VOLUNTEERS_COLLECTION


class RecordingPushClient:
    """Push client double: keeps every message instead of sending it."""

    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def send(self, token, title, body, data=None):
        if self.fail:
            raise PushDeliveryError("FCM unavailable")
        self.sent.append({"token": token, "title": title, "body": body, "data": dict(data or {})})
        return f"projects/lifttogether/messages/{len(self.sent)}"


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def push_client():
    return RecordingPushClient()


@pytest.fixture
def failing_push_client():
    return RecordingPushClient(fail=True)


@pytest.fixture
def add_volunteer(store):
    """
    add_volunteer("v1", lat, lon, max_distance) writes a volunteer document
    the way the mobile app does.
    """
    def _add(volunteer_id, lat, lon, max_distance=10.0, name=None, is_available=True, is_online=True, fcm_token=None, **extra):
        document = {
            "name": name,
            "isAvailable": is_available,
            "isOnline": is_online,
            "currentLocation": {"latitude": lat, "longitude": lon},
            "maxDistance": max_distance,
            "fcmToken": fcm_token,
        }
        document.update(extra)
        store.set(VOLUNTEERS_COLLECTION, volunteer_id, document)
        return store.get(VOLUNTEERS_COLLECTION, volunteer_id)
    return _add


@pytest.fixture
def add_ride(store):
    """
    add_ride("ride-1", lat, lon) writes a ride request and returns the stored
    document, i.e. what the "created" event carries.
    """
    def _add(ride_id, lat, lon, urgency="MEDIUM", status="PENDING", **extra):
        document = {
            "pickupLocation": {"latitude": lat, "longitude": lon},
            "dropoffLocation": None,
            "urgency": urgency,
            "notes": "",
            "status": status,
        }
        document.update(extra)
        store.set(RIDE_REQUESTS_COLLECTION, ride_id, document)
        return store.get(RIDE_REQUESTS_COLLECTION, ride_id)
    return _add
