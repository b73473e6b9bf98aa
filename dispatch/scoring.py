#Purpose: Ranking/selection model (the “who is best” layer).
#Takes candidates (already in range) with their distance to the pickup.
#Produces: candidates ordered best first.
#Ranking: ascending great-circle distance.
#Tie-break (deterministic): volunteer id ascending.
#Urgency is read but does not change the order; see MatchPolicy for the only urgency knob.
#Output: ranked volunteers for the assignment writer.

import logging
from typing import List, Optional, Sequence

from rides.models import RideRequest
from volunteers.models import Volunteer
from volunteers.policy import MatchPolicy
from volunteers.selection import MatchCandidate, build_match_candidates

logger = logging.getLogger(__name__)


def rank_candidates(ride_request: RideRequest, candidates: Sequence[MatchCandidate]) -> List[MatchCandidate]:
    """
    Order in-range candidates closest first.
    """
    # urgency does not reorder candidates; EMERGENCY and LOW rank the same way
    return sorted(candidates, key=_distance_then_id)


def select_best_volunteer(
    ride_request: RideRequest,
    volunteers: Sequence[Volunteer],
    policy: Optional[MatchPolicy] = None,
) -> Optional[Volunteer]:
    """
    The matcher: the closest volunteer whose own radius covers the pickup,
    or None when nobody is in range.
    """
    ranked = rank_candidates(ride_request, build_match_candidates(ride_request, volunteers, policy))
    if not ranked:
        logger.info("No volunteer in range for ride %s (%d checked)", ride_request.id, len(volunteers))
        return None
    return ranked[0].volunteer


def _distance_then_id(candidate: MatchCandidate):
    return (candidate.distance_km, candidate.volunteer.id)
