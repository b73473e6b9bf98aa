#Expose the high-level pipeline pieces:
#Candidate fetching (hard rules)
#Scoring / ranking + the matcher
#Assignment writer
#Dispatcher orchestrator (the “one call” entry point)

from .assignment import AssignmentOutcome, assign_volunteer
from .candidate_filter import fetch_candidate_volunteers
from .scoring import rank_candidates, select_best_volunteer
from .dispatcher import Dispatcher, MatchOutcome, MatchStatus #the main entry point for a created ride request

__all__ = [
    "AssignmentOutcome",
    "assign_volunteer",
    "fetch_candidate_volunteers",
    "rank_candidates",
    "select_best_volunteer",
    "Dispatcher",
    "MatchOutcome",
    "MatchStatus",
]
