from typing import Dict, FrozenSet

from rides.models import RideRequest, RideStatus


class RideStateException(Exception):
    """Raised when an invalid ride status transition is attempted."""
    pass


# PENDING -> ACCEPTED -> ON_THE_WAY -> ARRIVED -> IN_PROGRESS -> COMPLETED,
# CANCELLED from anything not yet terminal.
ALLOWED_TRANSITIONS: Dict[RideStatus, FrozenSet[RideStatus]] = {
    RideStatus.PENDING: frozenset({RideStatus.ACCEPTED, RideStatus.CANCELLED}),
    RideStatus.ACCEPTED: frozenset({RideStatus.ON_THE_WAY, RideStatus.CANCELLED}),
    RideStatus.ON_THE_WAY: frozenset({RideStatus.ARRIVED, RideStatus.CANCELLED}),
    RideStatus.ARRIVED: frozenset({RideStatus.IN_PROGRESS, RideStatus.CANCELLED}),
    RideStatus.IN_PROGRESS: frozenset({RideStatus.COMPLETED, RideStatus.CANCELLED}),
    RideStatus.COMPLETED: frozenset(),
    RideStatus.CANCELLED: frozenset(),
}


def can_transition(current: RideStatus, new_status: RideStatus) -> bool:
    return new_status in ALLOWED_TRANSITIONS[current]


def transition_ride_status(ride_request: RideRequest, new_status: RideStatus) -> RideRequest:
    """
    Called when the rider or the volunteer moves a ride forward (or cancels it).
    Terminal rides (COMPLETED / CANCELLED) never move again.
    """
    if not can_transition(ride_request.status, new_status):
        raise RideStateException(
            f"Cannot move ride {ride_request.id} from {ride_request.status.value} to {new_status.value}"
        )

    ride_request.status = new_status
    return ride_request
