"""
Purpose: Domain models for the Rides capability.
What it does:
- Defines core data structures:
- Location (latitude / longitude pair)
- RideRequest (pickup, dropoff, urgency, notes, status, assignment fields)

Defines enums/constants:
- UrgencyLevel = EMERGENCY | HIGH | MEDIUM | LOW (priority order)
- RideStatus = PENDING | ACCEPTED | ON_THE_WAY | ARRIVED | IN_PROGRESS | COMPLETED | CANCELLED

Decodes raw document maps into typed records. A missing or mistyped
required field raises RecordDecodeError instead of falling back to a default.

Rule: No store calls, no matching logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

RIDE_REQUESTS_COLLECTION = "rideRequests"


class RecordDecodeError(Exception):
    """Raised when a stored document cannot be decoded into a typed record."""

    def __init__(self, collection: str, doc_id: Optional[str], field: str, reason: str = "missing"):
        self.collection = collection
        self.doc_id = doc_id
        self.field = field
        self.reason = reason
        super().__init__(f"{collection}/{doc_id}: field '{field}' is {reason}")


class UrgencyLevel(str, Enum):
    EMERGENCY = "EMERGENCY"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def priority(self) -> int:
        """1 is the most urgent."""
        return _URGENCY_PRIORITY[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


_URGENCY_PRIORITY = {
    UrgencyLevel.EMERGENCY: 1,
    UrgencyLevel.HIGH: 2,
    UrgencyLevel.MEDIUM: 3,
    UrgencyLevel.LOW: 4,
}


class RideStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    ON_THE_WAY = "ON_THE_WAY"
    ARRIVED = "ARRIVED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (RideStatus.COMPLETED, RideStatus.CANCELLED)

    @classmethod
    def parse(cls, value: str) -> RideStatus:
        # older mobile builds write ASSIGNED for an accepted ride
        if value == "ASSIGNED":
            return cls.ACCEPTED
        return cls(value)


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float

    def to_document(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_document(cls, value: Any, *, collection: str, doc_id: Optional[str], field: str) -> Location:
        """
        Accepts a {"latitude", "longitude"} map or any object exposing those
        attributes (e.g. a Firestore GeoPoint).
        """
        if value is None:
            raise RecordDecodeError(collection, doc_id, field)

        if isinstance(value, Mapping):
            latitude = value.get("latitude")
            longitude = value.get("longitude")
        else:
            latitude = getattr(value, "latitude", None)
            longitude = getattr(value, "longitude", None)

        if not is_number(latitude) or not is_number(longitude):
            raise RecordDecodeError(collection, doc_id, field, "not a latitude/longitude pair")
        return cls(float(latitude), float(longitude))


@dataclass
class RideRequest:
    """
    A rider's submitted trip. Mutated by the matcher (status + assignment)
    and by later status updates; never deleted.
    """
    id: str
    pickup_location: Location
    urgency: UrgencyLevel
    status: RideStatus = RideStatus.PENDING

    dropoff_location: Optional[Location] = None
    notes: str = ""
    rider_id: Optional[str] = None
    rider_name: Optional[str] = None
    created_at: Optional[datetime] = None

    assigned_volunteer_id: Optional[str] = None
    assigned_volunteer_name: Optional[str] = None
    accepted_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> RideRequest:
        collection = RIDE_REQUESTS_COLLECTION
        if data is None:
            raise RecordDecodeError(collection, doc_id, "<document>")

        pickup = Location.from_document(
            data.get("pickupLocation"), collection=collection, doc_id=doc_id, field="pickupLocation"
        )

        dropoff = None
        if data.get("dropoffLocation") is not None:
            dropoff = Location.from_document(
                data["dropoffLocation"], collection=collection, doc_id=doc_id, field="dropoffLocation"
            )

        urgency = _decode_enum(UrgencyLevel, data.get("urgency"), collection, doc_id, "urgency")

        raw_status = data.get("status")
        if not isinstance(raw_status, str):
            raise RecordDecodeError(collection, doc_id, "status")
        try:
            status = RideStatus.parse(raw_status)
        except ValueError:
            raise RecordDecodeError(collection, doc_id, "status", f"unknown value {raw_status!r}")

        notes = data.get("notes") or ""
        if not isinstance(notes, str):
            raise RecordDecodeError(collection, doc_id, "notes", "not a string")

        return cls(
            id=doc_id,
            pickup_location=pickup,
            dropoff_location=dropoff,
            urgency=urgency,
            status=status,
            notes=notes,
            rider_id=data.get("riderId"),
            rider_name=data.get("riderName"),
            created_at=_as_datetime(data.get("createdAt")),
            assigned_volunteer_id=data.get("assignedVolunteerId"),
            assigned_volunteer_name=data.get("assignedVolunteerName"),
            accepted_at=_as_datetime(data.get("acceptedAt")),
        )

    def to_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {
            "pickupLocation": self.pickup_location.to_document(),
            "dropoffLocation": self.dropoff_location.to_document() if self.dropoff_location else None,
            "urgency": self.urgency.value,
            "notes": self.notes,
            "status": self.status.value,
            "riderId": self.rider_id,
            "riderName": self.rider_name,
            "createdAt": self.created_at,
        }
        if self.assigned_volunteer_id is not None:
            document["assignedVolunteerId"] = self.assigned_volunteer_id
            document["assignedVolunteerName"] = self.assigned_volunteer_name
            document["acceptedAt"] = self.accepted_at
        return document


def is_number(value: Any) -> bool:
    """True for int and float, never for bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_datetime(value: Any) -> Optional[datetime]:
    # createdAt is epoch millis when written by the mobile client
    if isinstance(value, datetime):
        return value
    if is_number(value):
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
    return None


def _decode_enum(enum_cls, value, collection, doc_id, field):
    if not isinstance(value, str):
        raise RecordDecodeError(collection, doc_id, field)
    try:
        return enum_cls(value)
    except ValueError:
        raise RecordDecodeError(collection, doc_id, field, f"unknown value {value!r}")
