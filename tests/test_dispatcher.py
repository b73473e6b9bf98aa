from datetime import datetime

import pytest

import dispatch.dispatcher as dispatcher_module
from dispatch.candidate_filter import fetch_candidate_volunteers
from dispatch.dispatcher import Dispatcher, MatchStatus
from notifications.notifier import Notifier
from rides.models import RIDE_REQUESTS_COLLECTION
from store.document_store import StoreError
from volunteers.models import VOLUNTEERS_COLLECTION


@pytest.fixture
def dispatcher(store, push_client):
    return Dispatcher(store, notifier=Notifier(store, push_client))


def test_new_request_is_assigned_to_closest_volunteer_and_notified(dispatcher, store, push_client, add_ride, add_volunteer):
    data = add_ride("ride-1", 0.0, 0.0, urgency="EMERGENCY", riderName="Jane")
    add_volunteer("V1", 0.0, 0.01, max_distance=5, name="Tariro", fcm_token="token-v1")
    add_volunteer("V2", 0.0, 0.5, max_distance=100, name="Kuda", fcm_token="token-v2")

    outcome = dispatcher.handle_ride_request_created("ride-1", data)

    assert outcome.status == MatchStatus.ASSIGNED
    assert outcome.volunteer_id == "V1"
    assert outcome.distance_km == pytest.approx(1.112, rel=1e-3)
    assert outcome.notified is True

    ride = store.get(RIDE_REQUESTS_COLLECTION, "ride-1")
    assert ride["status"] == "ACCEPTED"
    assert ride["assignedVolunteerId"] == "V1"
    assert ride["assignedVolunteerName"] == "Tariro"
    assert isinstance(ride["acceptedAt"], datetime)

    volunteer = store.get(VOLUNTEERS_COLLECTION, "V1")
    assert volunteer["isAvailable"] is False
    assert volunteer["activeRideId"] == "ride-1"
    assert store.get(VOLUNTEERS_COLLECTION, "V2")["isAvailable"] is True

    assert push_client.sent == [{
        "token": "token-v1",
        "title": "New Ride Request",
        "body": "Ride request from Jane - Emergency priority",
        "data": {"rideId": "ride-1", "type": "ride_request"},
    }]


def test_nobody_in_range_leaves_request_untouched(dispatcher, store, push_client, add_ride, add_volunteer):
    data = add_ride("ride-1", 0.0, 0.0)
    add_volunteer("far", 10.0, 10.0, max_distance=5, fcm_token="token-far")

    outcome = dispatcher.handle_ride_request_created("ride-1", data)

    assert outcome.status == MatchStatus.NO_MATCH
    assert store.get(RIDE_REQUESTS_COLLECTION, "ride-1") == data
    assert store.get(VOLUNTEERS_COLLECTION, "far")["isAvailable"] is True
    assert push_client.sent == []


def test_request_that_is_not_pending_is_skipped_without_reading_volunteers(dispatcher, store, monkeypatch, add_ride, add_volunteer):
    data = add_ride("ride-1", 0.0, 0.0, status="ACCEPTED", assignedVolunteerId="V9")
    add_volunteer("V1", 0.0, 0.01, max_distance=5)

    def no_query(*args, **kwargs):
        raise AssertionError("volunteers should not be fetched")

    monkeypatch.setattr(store, "query", no_query)

    outcome = dispatcher.handle_ride_request_created("ride-1", data)

    assert outcome.status == MatchStatus.SKIPPED
    assert store.get(RIDE_REQUESTS_COLLECTION, "ride-1") == data


def test_volunteer_without_push_token_is_still_assigned(dispatcher, store, push_client, add_ride, add_volunteer):
    data = add_ride("ride-1", 0.0, 0.0)
    add_volunteer("V1", 0.0, 0.01, max_distance=5)

    outcome = dispatcher.handle_ride_request_created("ride-1", data)

    assert outcome.status == MatchStatus.ASSIGNED
    assert outcome.notified is False
    assert store.get(RIDE_REQUESTS_COLLECTION, "ride-1")["status"] == "ACCEPTED"
    assert push_client.sent == []


def test_push_failure_keeps_the_assignment(store, failing_push_client, add_ride, add_volunteer):
    dispatcher = Dispatcher(store, notifier=Notifier(store, failing_push_client))
    data = add_ride("ride-1", 0.0, 0.0)
    add_volunteer("V1", 0.0, 0.01, max_distance=5, fcm_token="token-v1")

    outcome = dispatcher.handle_ride_request_created("ride-1", data)

    assert outcome.status == MatchStatus.ASSIGNED
    assert outcome.notified is False
    assert store.get(RIDE_REQUESTS_COLLECTION, "ride-1")["assignedVolunteerId"] == "V1"


def test_only_available_and_online_volunteers_are_candidates(dispatcher, add_ride, add_volunteer):
    data = add_ride("ride-1", 0.0, 0.0)
    add_volunteer("offline", 0.0, 0.01, is_online=False)
    add_volunteer("busy", 0.0, 0.01, is_available=False)

    outcome = dispatcher.handle_ride_request_created("ride-1", data)

    assert outcome.status == MatchStatus.NO_CANDIDATES


def test_unreadable_volunteer_records_are_skipped(dispatcher, store, add_ride, add_volunteer):
    data = add_ride("ride-1", 0.0, 0.0)
    store.set(VOLUNTEERS_COLLECTION, "broken", {"isAvailable": True, "isOnline": True, "maxDistance": 10})
    add_volunteer("V1", 0.0, 0.02, max_distance=5)

    outcome = dispatcher.handle_ride_request_created("ride-1", data)

    assert outcome.volunteer_id == "V1"


def test_unreadable_ride_record_fails_without_raising(dispatcher, store):
    outcome = dispatcher.handle_ride_request_created("ride-1", {"urgency": "HIGH", "status": "PENDING"})

    assert outcome.status == MatchStatus.FAILED


def test_store_failure_is_reported_not_raised(dispatcher, store, monkeypatch, add_ride):
    data = add_ride("ride-1", 0.0, 0.0)

    def broken_query(*args, **kwargs):
        raise StoreError("deadline exceeded")

    monkeypatch.setattr(store, "query", broken_query)

    outcome = dispatcher.handle_ride_request_created("ride-1", data)

    assert outcome.status == MatchStatus.FAILED
    assert store.get(RIDE_REQUESTS_COLLECTION, "ride-1")["status"] == "PENDING"


def test_two_requests_racing_for_one_volunteer(dispatcher, store, monkeypatch, add_ride, add_volunteer):
    """
    Both requests read the same candidate list; only the first to commit
    gets the volunteer, the other stays PENDING.
    """
    first = add_ride("ride-1", 0.0, 0.0)
    second = add_ride("ride-2", 0.0, 0.0)
    add_volunteer("V1", 0.0, 0.01, max_distance=5)

    stale_candidates = fetch_candidate_volunteers(store)
    monkeypatch.setattr(dispatcher_module, "fetch_candidate_volunteers", lambda _store: stale_candidates)

    assert dispatcher.handle_ride_request_created("ride-1", first).status == MatchStatus.ASSIGNED
    assert dispatcher.handle_ride_request_created("ride-2", second).status == MatchStatus.NO_MATCH

    assert store.get(RIDE_REQUESTS_COLLECTION, "ride-1")["assignedVolunteerId"] == "V1"
    ride_2 = store.get(RIDE_REQUESTS_COLLECTION, "ride-2")
    assert ride_2["status"] == "PENDING"
    assert "assignedVolunteerId" not in ride_2


def test_losing_a_race_falls_through_to_next_closest(dispatcher, store, monkeypatch, add_ride, add_volunteer):
    first = add_ride("ride-1", 0.0, 0.0)
    second = add_ride("ride-2", 0.0, 0.0)
    add_volunteer("V1", 0.0, 0.01, max_distance=5)
    add_volunteer("V2", 0.0, 0.03, max_distance=5)

    stale_candidates = fetch_candidate_volunteers(store)
    monkeypatch.setattr(dispatcher_module, "fetch_candidate_volunteers", lambda _store: stale_candidates)

    assert dispatcher.handle_ride_request_created("ride-1", first).volunteer_id == "V1"
    assert dispatcher.handle_ride_request_created("ride-2", second).volunteer_id == "V2"


def test_replayed_event_does_not_reassign(dispatcher, store, push_client, add_ride, add_volunteer):
    data = add_ride("ride-1", 0.0, 0.0)
    add_volunteer("V1", 0.0, 0.01, max_distance=5, fcm_token="token-v1")
    add_volunteer("V2", 0.0, 0.03, max_distance=5, fcm_token="token-v2")

    dispatcher.handle_ride_request_created("ride-1", data)
    replay = dispatcher.handle_ride_request_created("ride-1", data)

    assert replay.status == MatchStatus.SKIPPED
    assert store.get(RIDE_REQUESTS_COLLECTION, "ride-1")["assignedVolunteerId"] == "V1"
    assert store.get(VOLUNTEERS_COLLECTION, "V2")["isAvailable"] is True
    assert len(push_client.sent) == 1


def test_outcome_serializes_for_the_event_response(dispatcher, add_ride, add_volunteer):
    data = add_ride("ride-1", 0.0, 0.0)
    add_volunteer("V1", 0.0, 0.01, max_distance=5)

    payload = dispatcher.handle_ride_request_created("ride-1", data).to_dict()

    assert payload["rideId"] == "ride-1"
    assert payload["status"] == "assigned"
    assert payload["volunteerId"] == "V1"
    assert payload["notified"] is False


class DisconnectedPushClient:
    def send(self, token, title, body, data=None):
        raise ConnectionError("socket reset")


def test_unexpected_push_error_keeps_the_assignment(store, add_ride, add_volunteer):
    dispatcher = Dispatcher(store, notifier=Notifier(store, DisconnectedPushClient()))
    data = add_ride("ride-1", 0.0, 0.0)
    add_volunteer("V1", 0.0, 0.01, max_distance=5, fcm_token="token-v1")

    outcome = dispatcher.handle_ride_request_created("ride-1", data)

    assert outcome.status == MatchStatus.ASSIGNED
    assert outcome.notified is False
    assert store.get(RIDE_REQUESTS_COLLECTION, "ride-1")["assignedVolunteerId"] == "V1"


def test_unexpected_matching_error_is_reported_not_raised(dispatcher, store, monkeypatch, add_ride):
    data = add_ride("ride-1", 0.0, 0.0)

    def broken_query(*args, **kwargs):
        raise ConnectionError("socket reset")

    monkeypatch.setattr(store, "query", broken_query)

    outcome = dispatcher.handle_ride_request_created("ride-1", data)

    assert outcome.status == MatchStatus.FAILED
