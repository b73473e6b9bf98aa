"""
Purpose: Business rules and distance math for choosing the best volunteer.
What it does:
Accepts a RideRequest and a pool of volunteers, computes the great-circle
distance from each volunteer to the pickup, drops volunteers whose own
service radius does not reach the pickup, and ranks the rest closest first.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from rides.models import Location, RideRequest
from .models import Volunteer
from .policy import MatchPolicy, default_match_policy


@dataclass(frozen=True)
class MatchCandidate:
    """
    A volunteer annotated with its distance to the pickup point.
    Only lives for the duration of one matching run.
    """
    volunteer: Volunteer
    distance_km: float


def haversine_km(a: Location, b: Location, earth_radius_km: float = 6371.0) -> float:
    """
    Great-circle distance between two points in kilometers.
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    # rounding can push h just past 1.0 for near-antipodal points
    h = min(1.0, max(0.0, h))
    return earth_radius_km * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def build_match_candidates(
    ride_request: RideRequest,
    volunteers: Sequence[Volunteer],
    policy: Optional[MatchPolicy] = None,
) -> List[MatchCandidate]:
    """
    Pair every volunteer with its distance to the pickup and keep only
    those within their own maxDistance (unsorted).
    """
    policy = policy or default_match_policy()

    radius_factor = 1.0
    if ride_request.urgency.priority <= policy.high_urgency_threshold.priority:
        radius_factor = policy.high_urgency_radius_factor

    candidates = []
    for volunteer in volunteers:
        distance = haversine_km(
            ride_request.pickup_location,
            volunteer.current_location,
            policy.earth_radius_km,
        )
        if distance > volunteer.max_distance_km * radius_factor:
            continue
        candidates.append(MatchCandidate(volunteer=volunteer, distance_km=distance))

    return candidates

