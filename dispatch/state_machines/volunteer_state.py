from typing import Any, Dict

from store.document_store import DELETE_FIELD


def reservation_fields(ride_id: str) -> Dict[str, Any]:
    """
    Fields written on the volunteer when a ride is assigned to them.
    Taking them out of the available pool keeps a volunteer on at most one
    active ride.
    """
    return {"isAvailable": False, "activeRideId": ride_id}


def release_fields() -> Dict[str, Any]:
    """
    Fields written on the volunteer once their ride is COMPLETED or CANCELLED.
    """
    return {"isAvailable": True, "activeRideId": DELETE_FIELD}
