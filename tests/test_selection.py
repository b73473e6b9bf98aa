import math

import pytest

from dispatch.scoring import rank_candidates, select_best_volunteer
from rides.models import Location, RideRequest, UrgencyLevel
from volunteers.models import Volunteer
from volunteers.policy import MatchPolicy
from volunteers.selection import build_match_candidates, haversine_km


def make_request(lat, lon, urgency=UrgencyLevel.MEDIUM):
    return RideRequest(id="ride-1", pickup_location=Location(lat, lon), urgency=urgency)


def test_haversine_symmetric_and_zero_for_same_point():
    harare = Location(-17.8249, 31.0530)
    borrowdale = Location(-17.7840, 31.0930)

    assert haversine_km(harare, borrowdale) == pytest.approx(haversine_km(borrowdale, harare))
    assert haversine_km(harare, harare) == 0.0


def test_haversine_known_distances():
    origin = Location(0.0, 0.0)

    # 0.01 degree of longitude on the equator
    assert haversine_km(origin, Location(0.0, 0.01)) == pytest.approx(1.112, rel=1e-3)
    assert haversine_km(origin, Location(10.0, 10.0)) == pytest.approx(1568.5, rel=1e-3)


@pytest.mark.parametrize("a,b", [
    (Location(69.5123, 86.5812), Location(-69.5123, -93.4188)),
    (Location(0.0, 0.0), Location(0.0, 180.0)),
    (Location(90.0, 0.0), Location(-90.0, 0.0)),
])
def test_haversine_antipodal_points_are_half_way_round(a, b):
    assert haversine_km(a, b) == pytest.approx(math.pi * 6371.0, rel=1e-6)


def test_antipodal_volunteer_is_simply_out_of_range():
    request = make_request(69.5123, 86.5812)
    volunteers = [Volunteer.new("far", -69.5123, -93.4188, max_distance_km=50)]

    assert build_match_candidates(request, volunteers) == []


def test_closest_in_range_volunteer_wins():
    """
    Request at (0,0): V1 is ~1.1 km away with a 5 km radius, V2 is ~55.6 km
    away with a 100 km radius. Both are in range; V1 is closer.
    """
    request = make_request(0.0, 0.0, UrgencyLevel.EMERGENCY)
    volunteers = [
        Volunteer.new("V2", 0.0, 0.5, max_distance_km=100),
        Volunteer.new("V1", 0.0, 0.01, max_distance_km=5),
    ]

    ranked = rank_candidates(request, build_match_candidates(request, volunteers))

    assert [candidate.volunteer.id for candidate in ranked] == ["V1", "V2"]
    assert ranked[0].distance_km == pytest.approx(1.112, rel=1e-3)
    assert ranked[1].distance_km == pytest.approx(55.6, rel=1e-3)
    assert select_best_volunteer(request, volunteers).id == "V1"


def test_volunteer_out_of_own_radius_is_never_selected():
    request = make_request(0.0, 0.0)
    volunteers = [Volunteer.new("far", 10.0, 10.0, max_distance_km=5)]

    assert build_match_candidates(request, volunteers) == []
    assert select_best_volunteer(request, volunteers) is None


def test_no_volunteers_means_no_match():
    assert select_best_volunteer(make_request(0.0, 0.0), []) is None


def test_equal_distance_ties_break_by_volunteer_id():
    request = make_request(0.0, 0.0)
    volunteers = [
        Volunteer.new("vol-b", 0.0, 0.02, max_distance_km=10),
        Volunteer.new("vol-a", 0.0, 0.02, max_distance_km=10),
        Volunteer.new("vol-c", 0.0, 0.02, max_distance_km=10),
    ]

    ranked = rank_candidates(request, build_match_candidates(request, volunteers))

    assert [candidate.volunteer.id for candidate in ranked] == ["vol-a", "vol-b", "vol-c"]


def test_urgency_does_not_change_the_choice_by_default():
    volunteers = [
        Volunteer.new("near", 0.0, 0.01, max_distance_km=5),
        Volunteer.new("far", 0.0, 0.04, max_distance_km=5),
        Volunteer.new("edge", 0.0, 0.05, max_distance_km=5),  # ~5.6 km, just out of range
    ]

    for urgency in UrgencyLevel:
        request = make_request(0.0, 0.0, urgency)
        ranked = rank_candidates(request, build_match_candidates(request, volunteers))
        assert [candidate.volunteer.id for candidate in ranked] == ["near", "far"]


def test_high_urgency_radius_factor_widens_reach_for_urgent_requests_only():
    policy = MatchPolicy(high_urgency_radius_factor=1.2)
    volunteers = [Volunteer.new("edge", 0.0, 0.05, max_distance_km=5)]

    for urgency in (UrgencyLevel.EMERGENCY, UrgencyLevel.HIGH):
        assert select_best_volunteer(make_request(0.0, 0.0, urgency), volunteers, policy).id == "edge"

    for urgency in (UrgencyLevel.MEDIUM, UrgencyLevel.LOW):
        assert select_best_volunteer(make_request(0.0, 0.0, urgency), volunteers, policy) is None


def test_policy_rejects_shrinking_factor():
    with pytest.raises(ValueError):
        MatchPolicy(high_urgency_radius_factor=0.5).validate()

    with pytest.raises(ValueError):
        MatchPolicy(earth_radius_km=0).validate()
