from .ride_state import RideStateException, can_transition, transition_ride_status
from .volunteer_state import release_fields, reservation_fields

__all__ = [
    "RideStateException",
    "can_transition",
    "transition_ride_status",
    "release_fields",
    "reservation_fields",
]
