"""
Purpose: Core data models for the volunteers domain.
What it does:
Defines the structure of a Volunteer (vehicle, rating, availability, location,
service radius, push token) and decodes it from a stored document.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from rides.models import Location, RecordDecodeError, is_number

VOLUNTEERS_COLLECTION = "volunteers"


@dataclass(frozen=True)
class VehicleInfo:
    make: str
    model: str
    color: str
    license_plate: str

    def to_document(self) -> Dict[str, str]:
        return {
            "make": self.make,
            "model": self.model,
            "color": self.color,
            "licensePlate": self.license_plate,
        }


@dataclass(frozen=True)
class Volunteer:
    """
    A volunteer driver at a specific point in time.
    Read-only from the matcher's point of view.
    """
    id: str
    current_location: Location
    max_distance_km: float
    is_available: bool
    is_online: bool

    name: Optional[str] = None
    vehicle: Optional[VehicleInfo] = None
    rating: Optional[float] = None
    fcm_token: Optional[str] = None
    active_ride_id: Optional[str] = None

    @classmethod
    def new(
        cls,
        volunteer_id: str,
        lat: float,
        lon: float,
        max_distance_km: float,
        name: Optional[str] = None,
        is_available: bool = True,
        is_online: bool = True,
        fcm_token: Optional[str] = None,
    ) -> Volunteer:
        return cls(
            id=volunteer_id,
            current_location=Location(lat, lon),
            max_distance_km=max_distance_km,
            is_available=is_available,
            is_online=is_online,
            name=name,
            fcm_token=fcm_token,
        )

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> Volunteer:
        collection = VOLUNTEERS_COLLECTION
        if data is None:
            raise RecordDecodeError(collection, doc_id, "<document>")

        location = Location.from_document(
            data.get("currentLocation"), collection=collection, doc_id=doc_id, field="currentLocation"
        )

        max_distance = data.get("maxDistance")
        if not is_number(max_distance):
            raise RecordDecodeError(collection, doc_id, "maxDistance")

        flags = {}
        for field in ("isAvailable", "isOnline"):
            value = data.get(field)
            if not isinstance(value, bool):
                raise RecordDecodeError(collection, doc_id, field)
            flags[field] = value

        rating = data.get("rating")
        if rating is not None and not is_number(rating):
            raise RecordDecodeError(collection, doc_id, "rating", "not a number")

        return cls(
            id=doc_id,
            current_location=location,
            max_distance_km=float(max_distance),
            is_available=flags["isAvailable"],
            is_online=flags["isOnline"],
            name=data.get("name"),
            vehicle=_decode_vehicle(data.get("vehicleInfo"), doc_id),
            rating=float(rating) if rating is not None else None,
            fcm_token=data.get("fcmToken") or None,
            active_ride_id=data.get("activeRideId"),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "vehicleInfo": self.vehicle.to_document() if self.vehicle else None,
            "rating": self.rating,
            "isAvailable": self.is_available,
            "isOnline": self.is_online,
            "currentLocation": self.current_location.to_document(),
            "maxDistance": self.max_distance_km,
            "fcmToken": self.fcm_token,
        }


def _decode_vehicle(value: Any, doc_id: str) -> Optional[VehicleInfo]:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise RecordDecodeError(VOLUNTEERS_COLLECTION, doc_id, "vehicleInfo", "not a map")

    fields = {}
    for key in ("make", "model", "color", "licensePlate"):
        if not isinstance(value.get(key), str):
            raise RecordDecodeError(VOLUNTEERS_COLLECTION, doc_id, f"vehicleInfo.{key}")
        fields[key] = value[key]

    return VehicleInfo(
        make=fields["make"],
        model=fields["model"],
        color=fields["color"],
        license_plate=fields["licensePlate"],
    )
