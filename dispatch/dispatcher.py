"""
Purpose: Orchestrator / decision pipeline (the "glue").
What it does:
Runs once for every newly created ride request:
Trigger check -> candidate fetch -> matcher -> assignment write -> notification.

Every stage is best-effort from the trigger's point of view: store failures
and undecodable records are logged and reported in the returned outcome,
never raised back to the host.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from rides.models import RecordDecodeError, RideRequest, RideStatus
from store.document_store import DocumentStore
from volunteers.policy import MatchPolicy, default_match_policy
from volunteers.selection import build_match_candidates
from .assignment import AssignmentOutcome, assign_volunteer
from .candidate_filter import fetch_candidate_volunteers
from .scoring import rank_candidates

logger = logging.getLogger(__name__)


class MatchStatus(str, Enum):
    SKIPPED = "skipped"              # not pending (replay, seeded record, cancelled meanwhile)
    NO_CANDIDATES = "no_candidates"  # nobody available and online
    NO_MATCH = "no_match"            # nobody in range, or every in-range volunteer was claimed
    ASSIGNED = "assigned"
    FAILED = "failed"                # store failure or undecodable ride record


@dataclass(frozen=True)
class MatchOutcome:
    ride_id: str
    status: MatchStatus
    volunteer_id: Optional[str] = None
    distance_km: Optional[float] = None
    notified: bool = False

    def to_dict(self):
        return {
            "rideId": self.ride_id,
            "status": self.status.value,
            "volunteerId": self.volunteer_id,
            "distanceKm": self.distance_km,
            "notified": self.notified,
        }


class Dispatcher:
    """
    Coordinates matching one ride request to one volunteer.
    """
    def __init__(self, store: DocumentStore, notifier=None, policy: Optional[MatchPolicy] = None):
        self.store = store
        self.notifier = notifier
        self.policy = policy or default_match_policy()

    def handle_ride_request_created(self, ride_id: str, data: Mapping[str, Any]) -> MatchOutcome:
        """
        Entry point for the "ride request created" event. `data` is the
        document as it was stored; it is read once.
        """
        try:
            ride_request = RideRequest.from_document(ride_id, data)
        except RecordDecodeError:
            logger.exception("Error matching ride request %s: unreadable record", ride_id)
            return MatchOutcome(ride_id, MatchStatus.FAILED)

        if ride_request.status != RideStatus.PENDING:
            logger.info("Ride %s is %s, nothing to match", ride_id, ride_request.status.value)
            return MatchOutcome(ride_id, MatchStatus.SKIPPED)

        try:
            outcome = self._match_and_assign(ride_request)
        except Exception:
            # the trigger caller never sees an exception
            logger.exception("Error matching ride request %s", ride_id)
            return MatchOutcome(ride_id, MatchStatus.FAILED)

        if outcome.status != MatchStatus.ASSIGNED:
            return outcome

        notified = False
        if self.notifier:
            notified = self.notifier.notify_volunteer(outcome.volunteer_id, ride_request)

        logger.info("Matched ride %s with volunteer %s", ride_id, outcome.volunteer_id)
        return MatchOutcome(
            ride_id,
            MatchStatus.ASSIGNED,
            volunteer_id=outcome.volunteer_id,
            distance_km=outcome.distance_km,
            notified=notified,
        )

    def _match_and_assign(self, ride_request: RideRequest) -> MatchOutcome:
        ride_id = ride_request.id

        # 1. Available + online volunteers
        volunteers = fetch_candidate_volunteers(self.store)
        if not volunteers:
            logger.info("No available volunteers found")
            return MatchOutcome(ride_id, MatchStatus.NO_CANDIDATES)

        # 2. In range of the pickup, closest first
        ranked = rank_candidates(
            ride_request,
            build_match_candidates(ride_request, volunteers, self.policy),
        )
        if not ranked:
            logger.info("No volunteer within range of ride %s", ride_id)
            return MatchOutcome(ride_id, MatchStatus.NO_MATCH)

        # 3. Claim the best one. If another ride claimed them first, fall
        #    through to the next closest.
        for candidate in ranked:
            result = assign_volunteer(self.store, ride_id, candidate.volunteer)

            if result == AssignmentOutcome.ASSIGNED:
                return MatchOutcome(
                    ride_id,
                    MatchStatus.ASSIGNED,
                    volunteer_id=candidate.volunteer.id,
                    distance_km=candidate.distance_km,
                )

            if result == AssignmentOutcome.RIDE_NOT_PENDING:
                return MatchOutcome(ride_id, MatchStatus.SKIPPED)

        logger.info("Every in-range volunteer for ride %s was already claimed", ride_id)
        return MatchOutcome(ride_id, MatchStatus.NO_MATCH)
