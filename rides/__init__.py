"""
Rides domain package.

Public API:
- Domain models: RideRequest, Location
- Enums: UrgencyLevel, RideStatus
- Decoding: RecordDecodeError
"""
from .models import (
    RIDE_REQUESTS_COLLECTION,
    Location,
    RecordDecodeError,
    RideRequest,
    RideStatus,
    UrgencyLevel,
)

__all__ = [
    "RIDE_REQUESTS_COLLECTION",
    "Location",
    "RecordDecodeError",
    "RideRequest",
    "RideStatus",
    "UrgencyLevel",
]
