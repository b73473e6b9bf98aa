from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from rides.models import Location, RecordDecodeError, RideRequest, RideStatus, UrgencyLevel, is_number
from volunteers.models import Volunteer


def ride_document(**overrides):
    document = {
        "pickupLocation": {"latitude": -17.8292, "longitude": 31.0522},
        "dropoffLocation": {"latitude": -17.7840, "longitude": 31.0530},
        "urgency": "HIGH",
        "notes": "Two bags",
        "status": "PENDING",
        "riderId": "rider-1",
        "riderName": "Jane",
    }
    document.update(overrides)
    return document


def volunteer_document(**overrides):
    document = {
        "name": "Tariro",
        "vehicleInfo": {"make": "Toyota", "model": "Corolla", "color": "White", "licensePlate": "AEZ-1234"},
        "rating": 4.7,
        "isAvailable": True,
        "isOnline": True,
        "currentLocation": {"latitude": -17.80, "longitude": 31.04},
        "maxDistance": 12,
        "fcmToken": "token-1",
    }
    document.update(overrides)
    return document


def test_ride_request_decodes_every_field():
    ride_request = RideRequest.from_document("ride-1", ride_document(createdAt=1700000000000))

    assert ride_request.pickup_location == Location(-17.8292, 31.0522)
    assert ride_request.dropoff_location == Location(-17.7840, 31.0530)
    assert ride_request.urgency == UrgencyLevel.HIGH
    assert ride_request.status == RideStatus.PENDING
    assert ride_request.notes == "Two bags"
    assert ride_request.created_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


@pytest.mark.parametrize("field", ["pickupLocation", "urgency", "status"])
def test_missing_required_ride_field_is_a_decode_error(field):
    document = ride_document()
    del document[field]

    with pytest.raises(RecordDecodeError) as excinfo:
        RideRequest.from_document("ride-1", document)
    assert excinfo.value.field == field
    assert excinfo.value.doc_id == "ride-1"


@pytest.mark.parametrize("overrides,field", [
    ({"urgency": "CRITICAL"}, "urgency"),
    ({"status": "WAITING"}, "status"),
    ({"pickupLocation": {"latitude": "-17.8", "longitude": 31.0}}, "pickupLocation"),
    ({"pickupLocation": {"latitude": True, "longitude": 31.0}}, "pickupLocation"),
    ({"dropoffLocation": {"latitude": 1.0}}, "dropoffLocation"),
    ({"notes": 7}, "notes"),
])
def test_mistyped_ride_field_is_a_decode_error(overrides, field):
    with pytest.raises(RecordDecodeError) as excinfo:
        RideRequest.from_document("ride-1", ride_document(**overrides))
    assert excinfo.value.field == field


def test_optional_ride_fields_default():
    document = ride_document()
    for field in ("dropoffLocation", "notes", "riderId", "riderName"):
        del document[field]

    ride_request = RideRequest.from_document("ride-1", document)

    assert ride_request.dropoff_location is None
    assert ride_request.notes == ""
    assert ride_request.rider_name is None


def test_legacy_assigned_status_reads_as_accepted():
    assert RideRequest.from_document("ride-1", ride_document(status="ASSIGNED")).status == RideStatus.ACCEPTED


def test_geopoint_like_locations_are_accepted():
    geopoint = SimpleNamespace(latitude=-17.82, longitude=31.05)

    ride_request = RideRequest.from_document("ride-1", ride_document(pickupLocation=geopoint))

    assert ride_request.pickup_location == Location(-17.82, 31.05)


def test_urgency_priority_order():
    ordered = sorted(UrgencyLevel, key=lambda level: level.priority)

    assert ordered == [UrgencyLevel.EMERGENCY, UrgencyLevel.HIGH, UrgencyLevel.MEDIUM, UrgencyLevel.LOW]
    assert UrgencyLevel.EMERGENCY.label == "Emergency"


def test_volunteer_decodes_every_field():
    volunteer = Volunteer.from_document("V1", volunteer_document())

    assert volunteer.current_location == Location(-17.80, 31.04)
    assert volunteer.max_distance_km == 12.0
    assert volunteer.vehicle.license_plate == "AEZ-1234"
    assert volunteer.rating == 4.7
    assert volunteer.fcm_token == "token-1"


@pytest.mark.parametrize("overrides,field", [
    ({"currentLocation": None}, "currentLocation"),
    ({"maxDistance": None}, "maxDistance"),
    ({"maxDistance": "10"}, "maxDistance"),
    ({"isAvailable": "true"}, "isAvailable"),
    ({"isOnline": None}, "isOnline"),
    ({"vehicleInfo": {"make": "Toyota"}}, "vehicleInfo.model"),
])
def test_volunteer_decode_errors(overrides, field):
    with pytest.raises(RecordDecodeError) as excinfo:
        Volunteer.from_document("V1", volunteer_document(**overrides))
    assert excinfo.value.field == field


def test_volunteer_document_round_trip_keeps_stored_names():
    document = Volunteer.from_document("V1", volunteer_document()).to_document()

    assert document["maxDistance"] == 12.0
    assert document["vehicleInfo"]["licensePlate"] == "AEZ-1234"
    assert document["currentLocation"] == {"latitude": -17.80, "longitude": 31.04}


@pytest.mark.parametrize("value,expected", [(3, True), (2.5, True), (True, False), ("3", False), (None, False)])
def test_is_number_rejects_bools_and_strings(value, expected):
    assert is_number(value) is expected


def test_volunteer_with_boolean_max_distance_is_unreadable():
    with pytest.raises(RecordDecodeError):
        Volunteer.from_document("V1", {
            "isAvailable": True,
            "isOnline": True,
            "currentLocation": {"latitude": 0.0, "longitude": 0.0},
            "maxDistance": True,
        })
