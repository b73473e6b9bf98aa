"""
Purpose: Typed data access for rides, volunteers and user profiles.
What it does:
Wraps the document store with the operations the app performs:

- create_ride_request / get_ride_request / list_pending_requests
- listen_to_pending_requests (live subscription)
- update_ride_status (validated by the ride state machine)
- update_volunteer_availability / list_available_volunteers
- save_user_profile

Rule: Returns typed records, raises StoreError / RideStateException /
RecordNotFound. No matching logic.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from dispatch.state_machines.ride_state import RideStateException, transition_ride_status
from dispatch.state_machines.volunteer_state import release_fields
from rides.models import (
    RIDE_REQUESTS_COLLECTION,
    Location,
    RecordDecodeError,
    RideRequest,
    RideStatus,
    UrgencyLevel,
)
from volunteers.models import VOLUNTEERS_COLLECTION, Volunteer
from .document_store import (
    SERVER_TIMESTAMP,
    DocumentStore,
    Precondition,
    StoredDocument,
    Unsubscribe,
    Write,
)

USERS_COLLECTION = "users"

logger = logging.getLogger(__name__)


class RecordNotFound(LookupError):
    """Raised when an operation targets a ride or volunteer that does not exist."""
    pass


class RideRepository:

    def __init__(self, store: DocumentStore):
        self.store = store

    # --- Ride requests ---

    def create_ride_request(
        self,
        *,
        rider_id: Optional[str],
        rider_name: Optional[str],
        pickup: Location,
        dropoff: Optional[Location],
        urgency: UrgencyLevel,
        notes: str = "",
    ) -> str:
        """
        New requests always start PENDING; storing one is what triggers matching.
        """
        return self.store.add(
            RIDE_REQUESTS_COLLECTION,
            {
                "riderId": rider_id,
                "riderName": rider_name,
                "pickupLocation": pickup.to_document(),
                "dropoffLocation": dropoff.to_document() if dropoff else None,
                "urgency": urgency.value,
                "notes": notes,
                "status": RideStatus.PENDING.value,
                "createdAt": SERVER_TIMESTAMP,
            },
        )

    def get_ride_request(self, ride_id: str) -> Optional[RideRequest]:
        data = self.store.get(RIDE_REQUESTS_COLLECTION, ride_id)
        if data is None:
            return None
        return RideRequest.from_document(ride_id, data)

    def list_pending_requests(self) -> List[RideRequest]:
        documents = self.store.query(RIDE_REQUESTS_COLLECTION, {"status": RideStatus.PENDING.value})
        return _decode_all(documents, RideRequest.from_document)

    def listen_to_pending_requests(self, callback: Callable[[List[RideRequest]], None]) -> Unsubscribe:
        def on_change(documents: List[StoredDocument]) -> None:
            callback(_decode_all(documents, RideRequest.from_document))

        return self.store.listen(RIDE_REQUESTS_COLLECTION, {"status": RideStatus.PENDING.value}, on_change)

    def update_ride_status(self, ride_id: str, new_status: RideStatus) -> RideRequest:
        """
        Move a ride along its lifecycle. The write only lands if the stored
        status is still the one the transition was validated against.
        Reaching COMPLETED or CANCELLED hands the volunteer back to the pool
        in the same conditional write.
        """
        data = self.store.get(RIDE_REQUESTS_COLLECTION, ride_id)
        if data is None:
            raise RecordNotFound(f"Ride request {ride_id} not found")

        ride_request = RideRequest.from_document(ride_id, data)
        previous_status = ride_request.status
        # raw value, so a legacy "ASSIGNED" still matches the precondition
        stored_status = data["status"]
        transition_ride_status(ride_request, new_status)

        preconditions = [Precondition(RIDE_REQUESTS_COLLECTION, ride_id, "status", stored_status)]
        writes = [Write(RIDE_REQUESTS_COLLECTION, ride_id, {"status": new_status.value})]

        volunteer_id = ride_request.assigned_volunteer_id
        if new_status.is_terminal and volunteer_id:
            volunteer = self.store.get(VOLUNTEERS_COLLECTION, volunteer_id)
            # only if the volunteer is still tied to this ride
            if volunteer is not None and volunteer.get("activeRideId") == ride_id:
                preconditions.append(Precondition(VOLUNTEERS_COLLECTION, volunteer_id, "activeRideId", ride_id))
                writes.append(Write(VOLUNTEERS_COLLECTION, volunteer_id, release_fields()))
            else:
                logger.info("Volunteer %s is no longer on ride %s; not released", volunteer_id, ride_id)

        result = self.store.write_if(preconditions, writes)
        if not result.committed:
            raise RideStateException(
                f"Ride {ride_id} changed while moving from {previous_status.value} to {new_status.value}"
            )

        return ride_request

    # --- Volunteers ---

    def update_volunteer_availability(self, volunteer_id: str, is_available: bool) -> None:
        """
        A volunteer can always go unavailable. Coming back is refused while
        they still hold an active ride; that ride's completion or
        cancellation releases them.
        """
        data = self.store.get(VOLUNTEERS_COLLECTION, volunteer_id)
        if data is None:
            raise RecordNotFound(f"Volunteer {volunteer_id} not found")

        if not is_available:
            self.store.update(VOLUNTEERS_COLLECTION, volunteer_id, {"isAvailable": False})
            return

        active_ride_id = data.get("activeRideId")
        if active_ride_id:
            raise RideStateException(f"Volunteer {volunteer_id} is still on ride {active_ride_id}")

        result = self.store.write_if(
            [Precondition(VOLUNTEERS_COLLECTION, volunteer_id, "activeRideId", None)],
            [Write(VOLUNTEERS_COLLECTION, volunteer_id, {"isAvailable": True})],
        )
        if not result.committed:
            raise RideStateException(f"Volunteer {volunteer_id} was assigned a ride meanwhile")

    def list_available_volunteers(self) -> List[Volunteer]:
        documents = self.store.query(VOLUNTEERS_COLLECTION, {"isAvailable": True})
        return _decode_all(documents, Volunteer.from_document)

    # --- Users ---

    def save_user_profile(self, uid: str, email: str, user_type: str) -> None:
        self.store.set(
            USERS_COLLECTION,
            uid,
            {"email": email, "userType": user_type, "createdAt": SERVER_TIMESTAMP},
        )

    def get_user_profile(self, uid: str) -> Optional[dict]:
        return self.store.get(USERS_COLLECTION, uid)


def _decode_all(documents: List[StoredDocument], decoder) -> list:
    records = []
    for document in documents:
        try:
            records.append(decoder(document.id, document.data))
        except RecordDecodeError as exc:
            logger.warning("Skipping unreadable record: %s", exc)
    return records
