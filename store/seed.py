"""
Purpose: Seed / fixture data for volunteers and ride requests.
What it does:
Replaces hardcoded mock lists with an injectable source:

- SeedSource: the interface (volunteer records + ride request records)
- StaticSeedSource: records given in code (tests, demos)
- CsvSeedSource: records read from CSV files with pandas
  (see scripts/generate_mock_volunteers.py)

load_seed() writes any source into any DocumentStore.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from rides.models import RIDE_REQUESTS_COLLECTION
from volunteers.models import VOLUNTEERS_COLLECTION
from .document_store import DocumentStore

#each record is a stored document plus its "id"
SeedRecord = Dict[str, Any]


class SeedSource(ABC):

    @abstractmethod
    def volunteers(self) -> List[SeedRecord]:
        ...

    def ride_requests(self) -> List[SeedRecord]:
        return []


class StaticSeedSource(SeedSource):

    def __init__(self, volunteers: Optional[List[SeedRecord]] = None, ride_requests: Optional[List[SeedRecord]] = None):
        self._volunteers = list(volunteers if volunteers is not None else DEFAULT_VOLUNTEERS)
        self._ride_requests = list(ride_requests or [])

    def volunteers(self) -> List[SeedRecord]:
        return [dict(record) for record in self._volunteers]

    def ride_requests(self) -> List[SeedRecord]:
        return [dict(record) for record in self._ride_requests]


class CsvSeedSource(SeedSource):
    """
    Volunteers CSV columns:
    volunteer_id, name, lat, lon, max_distance_km, is_available, is_online,
    rating, make, model, color, license_plate, fcm_token

    Ride requests CSV columns (optional file):
    ride_id, rider_id, rider_name, pickup_lat, pickup_lon, dropoff_lat,
    dropoff_lon, urgency, notes, status
    """

    def __init__(self, volunteers_csv: str, ride_requests_csv: Optional[str] = None):
        self.volunteers_csv = volunteers_csv
        self.ride_requests_csv = ride_requests_csv

    def volunteers(self) -> List[SeedRecord]:
        return [_volunteer_record(row) for row in _read_rows(self.volunteers_csv)]

    def ride_requests(self) -> List[SeedRecord]:
        if not self.ride_requests_csv:
            return []
        return [_ride_request_record(row) for row in _read_rows(self.ride_requests_csv)]


def load_seed(store: DocumentStore, source: SeedSource) -> Tuple[int, int]:
    """
    Write every seed record under its own id. Returns
    (volunteers written, ride requests written).
    """
    volunteers = source.volunteers()
    for record in volunteers:
        record = dict(record)
        store.set(VOLUNTEERS_COLLECTION, record.pop("id"), record)

    ride_requests = source.ride_requests()
    for record in ride_requests:
        record = dict(record)
        store.set(RIDE_REQUESTS_COLLECTION, record.pop("id"), record)

    return len(volunteers), len(ride_requests)


# ----------------
# CSV helpers
# ----------------
def _read_rows(path: str) -> List[Dict[str, Any]]:
    df = pd.read_csv(path)
    # empty cells become None instead of NaN
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")


def _volunteer_record(row: Dict[str, Any]) -> SeedRecord:
    vehicle = None
    if row.get("make"):
        vehicle = {
            "make": str(row["make"]),
            "model": str(row["model"]),
            "color": str(row["color"]),
            "licensePlate": str(row["license_plate"]),
        }

    return {
        "id": str(row["volunteer_id"]),
        "name": row.get("name"),
        "vehicleInfo": vehicle,
        "rating": float(row["rating"]) if row.get("rating") is not None else None,
        "isAvailable": _as_bool(row["is_available"]),
        "isOnline": _as_bool(row["is_online"]),
        "currentLocation": {"latitude": float(row["lat"]), "longitude": float(row["lon"])},
        "maxDistance": float(row["max_distance_km"]),
        "fcmToken": row.get("fcm_token"),
    }


def _ride_request_record(row: Dict[str, Any]) -> SeedRecord:
    dropoff = None
    if row.get("dropoff_lat") is not None and row.get("dropoff_lon") is not None:
        dropoff = {"latitude": float(row["dropoff_lat"]), "longitude": float(row["dropoff_lon"])}

    return {
        "id": str(row["ride_id"]),
        "riderId": row.get("rider_id"),
        "riderName": row.get("rider_name"),
        "pickupLocation": {"latitude": float(row["pickup_lat"]), "longitude": float(row["pickup_lon"])},
        "dropoffLocation": dropoff,
        "urgency": str(row["urgency"]),
        "notes": row.get("notes") or "",
        "status": str(row.get("status") or "PENDING"),
    }


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


# Demo volunteers around Harare city centre.
DEFAULT_VOLUNTEERS: List[SeedRecord] = [
    {
        "id": "vol-john-smith",
        "name": "John Smith",
        "vehicleInfo": {"make": "Toyota", "model": "Camry", "color": "Silver", "licensePlate": "ABC-123"},
        "rating": 4.8,
        "isAvailable": True,
        "isOnline": True,
        "currentLocation": {"latitude": -17.8249, "longitude": 31.0530},
        "maxDistance": 10.0,
        "fcmToken": "demo-token-john-smith",
    },
    {
        "id": "vol-sarah-moyo",
        "name": "Sarah Moyo",
        "vehicleInfo": {"make": "Honda", "model": "Fit", "color": "Blue", "licensePlate": "AEX-4412"},
        "rating": 4.6,
        "isAvailable": True,
        "isOnline": True,
        "currentLocation": {"latitude": -17.8010, "longitude": 31.0450},
        "maxDistance": 15.0,
        "fcmToken": None,
    },
    {
        "id": "vol-tendai-ncube",
        "name": "Tendai Ncube",
        "vehicleInfo": {"make": "Nissan", "model": "X-Trail", "color": "White", "licensePlate": "AFB-0098"},
        "rating": 4.9,
        "isAvailable": False,
        "isOnline": True,
        "currentLocation": {"latitude": -17.8400, "longitude": 31.0700},
        "maxDistance": 25.0,
        "fcmToken": None,
    },
]
