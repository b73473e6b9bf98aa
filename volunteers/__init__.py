"""
Volunteers domain package.

Public API:
- Domain models: Volunteer, VehicleInfo
- Matching policy: MatchPolicy, default_match_policy
- Distance + radius filtering: haversine_km, build_match_candidates, MatchCandidate
"""
from .models import VOLUNTEERS_COLLECTION, VehicleInfo, Volunteer
from .policy import MatchPolicy, default_match_policy
from .selection import MatchCandidate, build_match_candidates, haversine_km

__all__ = [
    "VOLUNTEERS_COLLECTION",
    "VehicleInfo",
    "Volunteer",
    "MatchPolicy",
    "default_match_policy",
    "MatchCandidate",
    "build_match_candidates",
    "haversine_km",
]
