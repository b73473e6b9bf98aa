"""
Purpose: Assignment writer.
What it does:
Records the chosen volunteer on the ride request and takes the volunteer
out of the available pool, as one conditional write:

- ride must still be PENDING (a replayed event or a cancelled ride is left alone,
  and a COMPLETED / CANCELLED ride is never moved back to ACCEPTED)
- volunteer must still be available (two rides racing for the same
  volunteer: only one wins)
"""

import logging
from enum import Enum

from rides.models import RIDE_REQUESTS_COLLECTION, RideStatus
from store.document_store import SERVER_TIMESTAMP, DocumentStore, Precondition, Write
from volunteers.models import VOLUNTEERS_COLLECTION, Volunteer
from .state_machines.volunteer_state import reservation_fields

logger = logging.getLogger(__name__)

DEFAULT_VOLUNTEER_NAME = "Volunteer"


class AssignmentOutcome(str, Enum):
    ASSIGNED = "assigned"
    RIDE_NOT_PENDING = "ride_not_pending"
    VOLUNTEER_TAKEN = "volunteer_taken"


def assign_volunteer(store: DocumentStore, ride_id: str, volunteer: Volunteer) -> AssignmentOutcome:
    """
    Raises StoreError if the store cannot be reached; the caller decides
    whether that is fatal.
    """
    preconditions = [
        Precondition(RIDE_REQUESTS_COLLECTION, ride_id, "status", RideStatus.PENDING.value),
        Precondition(VOLUNTEERS_COLLECTION, volunteer.id, "isAvailable", True),
    ]
    writes = [
        Write(
            RIDE_REQUESTS_COLLECTION,
            ride_id,
            {
                "assignedVolunteerId": volunteer.id,
                "assignedVolunteerName": volunteer.name or DEFAULT_VOLUNTEER_NAME,
                "status": RideStatus.ACCEPTED.value,
                "acceptedAt": SERVER_TIMESTAMP,
            },
        ),
        Write(VOLUNTEERS_COLLECTION, volunteer.id, reservation_fields(ride_id)),
    ]

    result = store.write_if(preconditions, writes)
    if result.committed:
        return AssignmentOutcome.ASSIGNED

    if result.failed_precondition.collection == RIDE_REQUESTS_COLLECTION:
        logger.info("Ride %s is no longer pending; assignment skipped", ride_id)
        return AssignmentOutcome.RIDE_NOT_PENDING

    logger.info("Volunteer %s was claimed by another ride before %s", volunteer.id, ride_id)
    return AssignmentOutcome.VOLUNTEER_TAKEN
