"""
Tests for the pre-queue filters: tag overlap and distance radius.
"""

import logging
import math

import pytest

from src.models.candidate import Candidate
from src.swipe.filters import (
    EARTH_RADIUS_METRES,
    distance_between,
    distance_to,
    filter_by_distance,
    filter_by_interests,
    has_tag_overlap,
)
from tests.sample_data import make_candidate


METRES_PER_DEGREE = EARTH_RADIUS_METRES * math.pi / 180


def north_of_origin(pod_id: str, metres: float) -> Candidate:
    """A pod due north of (0, 0), exactly `metres` away."""
    return make_candidate(pod_id, lat=str(metres / METRES_PER_DEGREE), lng="0")


@pytest.mark.filters
class TestTagFilter:

    def test_overlap_included(self):
        pod = make_candidate(tags=["music", "art"])
        assert has_tag_overlap(pod, ["art", "sports"])

    def test_no_overlap_excluded(self):
        pod = make_candidate(tags=["music", "art"])
        assert not has_tag_overlap(pod, ["sports", "food"])

    def test_tags_are_case_sensitive(self):
        pod = make_candidate(tags=["Art"])
        assert not has_tag_overlap(pod, ["art"])

    def test_untagged_pod_never_matches(self):
        pod = make_candidate(tags=[])
        assert not has_tag_overlap(pod, ["art"])

    def test_filter_keeps_server_order(self, candidates):
        kept = filter_by_interests(candidates, ["art"])
        assert [c.id for c in kept] == ["pod-1", "pod-3"]

    def test_filter_with_no_interests_is_empty(self, candidates):
        assert filter_by_interests(candidates, []) == []

    def test_filter_accepts_generator_interests(self, candidates):
        kept = filter_by_interests(candidates, (tag for tag in ["music"]))
        assert [c.id for c in kept] == ["pod-2"]


@pytest.mark.filters
class TestDistance:

    def test_same_point_is_zero(self):
        assert distance_between((52.0, 5.0), (52.0, 5.0)) == 0

    def test_one_degree_latitude(self):
        assert distance_between((0, 0), (1, 0)) == pytest.approx(METRES_PER_DEGREE)

    def test_known_city_distance(self):
        # Amsterdam -> Utrecht is roughly 35 km
        metres = distance_between((52.3676, 4.9041), (52.0907, 5.1214))
        assert 33_000 < metres < 36_000

    def test_distance_to_parses_string_coordinates(self):
        pod = north_of_origin("p", 900)
        assert distance_to(pod, (0.0, 0.0)) == pytest.approx(900, abs=0.01)

    def test_distance_to_malformed_is_none_and_logged(self, caplog):
        pod = make_candidate("bad", lat="abc", lng="4.9")
        with caplog.at_level(logging.WARNING):
            assert distance_to(pod, (0.0, 0.0)) is None
        assert "bad" in caplog.text

    def test_distance_to_missing_location(self):
        pod = Candidate(id="nowhere", name="Nowhere")
        assert distance_to(pod, (0.0, 0.0)) is None


@pytest.mark.filters
class TestDistanceFilter:

    def test_within_radius_included(self):
        pod = north_of_origin("near", 900)
        assert filter_by_distance([pod], (0.0, 0.0), 1000) == [pod]

    def test_outside_radius_excluded(self):
        pod = north_of_origin("near", 900)
        assert filter_by_distance([pod], (0.0, 0.0), 500) == []

    def test_malformed_coordinates_are_kept(self):
        pod = make_candidate("bad", lat="", lng="")
        assert filter_by_distance([pod], (0.0, 0.0), 1) == [pod]

    def test_no_origin_disables_filter(self):
        pods = [north_of_origin("far", 10_000)]
        assert filter_by_distance(pods, None, 500) == pods

    def test_no_limit_disables_filter(self):
        pods = [north_of_origin("far", 10_000)]
        assert filter_by_distance(pods, (0.0, 0.0), None) == pods

    def test_mixed_list_keeps_order(self):
        pods = [
            north_of_origin("a", 100),
            north_of_origin("b", 5_000),
            north_of_origin("c", 900),
        ]
        kept = filter_by_distance(pods, (0.0, 0.0), 1000)
        assert [p.id for p in kept] == ["a", "c"]
