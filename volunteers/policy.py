"""
Purpose: Central configuration for volunteer matching.
What it does:

Stores the tunable parameters of the matcher:

EARTH_RADIUS_KM = 6371
HIGH_URGENCY_RADIUS_FACTOR = 1.0

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass

from rides.models import UrgencyLevel


@dataclass(frozen=True)
class MatchPolicy:
    """
    Central configuration for candidate ranking and radius checks.
    """

    # --- Distance model ---
    # Mean Earth radius used by the haversine formula.
    earth_radius_km: float = 6371.0

    # --- Urgency ---
    # Urgency is read by the matcher but does not change the ranking.
    # Raising this factor above 1.0 lets EMERGENCY and HIGH requests reach
    # volunteers slightly beyond their own maxDistance. Left at 1.0 until
    # the product owners decide how urgency should weigh in.
    high_urgency_radius_factor: float = 1.0

    # Requests at or above this urgency get the factor above.
    high_urgency_threshold: UrgencyLevel = UrgencyLevel.HIGH

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.earth_radius_km <= 0:
            raise ValueError("earth_radius_km must be > 0")

        if self.high_urgency_radius_factor < 1.0:
            raise ValueError("high_urgency_radius_factor must be >= 1.0")


def default_match_policy() -> MatchPolicy:
    """
    Convenience factory for the default policy.
    """
    p = MatchPolicy()
    p.validate()
    return p
