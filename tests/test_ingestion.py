"""Tests for record normalization and profile assembly."""

import pytest

from feedrank.ingestion import (
    ProfileSignals,
    build_profile,
    candidate_from_record,
    candidates_from_records,
    normalize_record,
    travel_radius_km,
)
from feedrank.models import EventCandidate, LocationCandidate, PostCandidate


class TestRecords:
    def test_location_record(self):
        record = {
            "id": "loc-1",
            "name": "Corner Cafe",
            "categories": ["Cafe", {"name": "Bakery"}],
            "coordinates": {"latitude": 40.7, "longitude": "-73.9"},
            "priceRange": "moderate",
            "likeCount": 12,
            "createdBy": {"id": "u1", "status": "active"},
            "createdAt": "2024-05-30T10:00:00Z",
            "description": "Fresh pastries",
        }
        candidate = candidate_from_record(record, "location")

        assert isinstance(candidate, LocationCandidate)
        assert candidate.categories == ("Cafe", "Bakery")
        assert candidate.coordinates.longitude == -73.9
        assert candidate.price_range == "moderate"
        assert candidate.engagement.likes == 12
        assert candidate.author_id == "u1"
        assert candidate.text_content == "Fresh pastries"
        assert candidate.created_at.year == 2024

    def test_post_record_with_nested_engagement_and_location(self):
        record = {
            "id": "p1",
            "kind": "post",
            "content": "Sunset from the pier",
            "engagement": {"likes": 5, "comments": 2, "saves": 1},
            "location": {"id": "loc-7", "coordinates": {"lat": 1.0, "lng": 2.0}},
            "reportCount": 3,
            "author": "u2",
            "authorStatus": "Suspended",
        }
        candidate = candidate_from_record(record)

        assert isinstance(candidate, PostCandidate)
        assert candidate.location_id == "loc-7"
        assert candidate.location_ref == "loc-7"
        assert candidate.coordinates.latitude == 1.0
        assert (candidate.engagement.likes, candidate.engagement.comments, candidate.engagement.saves) == (5, 2, 1)
        assert candidate.moderation.report_count == 3
        assert candidate.moderation.author_status.value == "suspended"

    def test_event_falls_back_to_start_date(self):
        candidate = candidate_from_record({"id": "e1", "startDate": "2024-07-04T18:00:00Z"}, "event")
        assert isinstance(candidate, EventCandidate)
        assert candidate.created_at == candidate.starts_at

    def test_missing_values_get_defaults(self):
        normalized = normalize_record({"id": 7, "likeCount": "lots", "coordinates": {"lat": "x"}}, "post")
        assert normalized["id"] == "7"
        assert normalized["engagement"] == {"likes": 0, "comments": 0, "saves": 0}
        assert normalized["coordinates"] is None

    def test_negative_counts_clamped(self):
        candidate = candidate_from_record({"id": "p1", "likeCount": -4}, "post")
        assert candidate.engagement.likes == 0

    def test_unparseable_timestamp_becomes_none(self):
        candidate = candidate_from_record({"id": "p1", "createdAt": "yesterday-ish"}, "post")
        assert candidate is not None
        assert candidate.created_at is None

    def test_epoch_milliseconds(self):
        candidate = candidate_from_record({"id": "p1", "createdAt": 1717243200000}, "post")
        assert candidate.created_at.year == 2024

    @pytest.mark.parametrize("record", [{"name": "no id"}, "not a dict", {"id": "x", "kind": "video"}])
    def test_unusable_records_are_skipped(self, record):
        assert candidate_from_record(record) is None

    def test_duplicate_ids_dropped(self):
        records = [
            {"id": "a", "kind": "post", "likeCount": 1},
            {"id": "a", "kind": "post", "likeCount": 2},
            {"id": "b", "kind": "location"},
        ]
        candidates = candidates_from_records(records)
        assert [c.id for c in candidates] == ["a", "b"]
        assert candidates[0].engagement.likes == 1


class TestProfiles:
    def test_empty_signals(self):
        profile = build_profile(ProfileSignals())
        assert profile.is_empty
        assert profile.travel_radius_km is None

    def test_none_signals(self):
        assert build_profile(None).is_empty

    def test_full_signals(self):
        signals = ProfileSignals(
            user={
                "interests": ["Coffee", "coffee", "Nature"],
                "preferences": {"categories": ["arts"]},
                "location": {"coordinates": {"latitude": 40.0, "longitude": -73.0}},
                "onboardingData": {"travelRadius": "5", "budgetPreference": "Budget"},
            },
            saved_items=[{"location": {"id": "loc-1"}}, "loc-2"],
            liked_items=[{"id": "p1", "author": "u9", "categories": ["cafe"]}],
            followed_authors=[{"id": "u9"}, "u10"],
        )
        profile = build_profile(signals)

        assert profile.interest_categories == ["Coffee", "Nature", "arts"]
        assert profile.coordinates.latitude == 40.0
        assert profile.saved_item_ids == {"loc-1", "loc-2"}
        assert profile.liked_item_ids == {"p1"}
        assert profile.followed_author_ids == {"u9", "u10"}
        assert profile.travel_radius_km == 8.0
        assert profile.budget_preference == "budget"
        # Saves and likes stand in for history
        assert [(i.item_id, i.action) for i in profile.interaction_history] == [
            ("loc-1", "save"),
            ("loc-2", "save"),
            ("p1", "like"),
        ]
        assert profile.interaction_history[2].author_id == "u9"

    def test_explicit_interactions_take_precedence(self):
        signals = ProfileSignals(
            liked_items=["p1"],
            interactions=[
                {"itemId": "p5", "action": "LIKE", "timestamp": "2024-05-01T00:00:00Z"},
                {"action": "save"},
            ],
        )
        history = build_profile(signals).interaction_history
        assert [(i.item_id, i.action) for i in history] == [("p5", "like")]

    def test_unknown_budget_ignored(self):
        profile = build_profile(ProfileSignals(user={"budgetPreference": "whatever"}))
        assert profile.budget_preference is None

    @pytest.mark.parametrize(
        "value,expected",
        [("0.5", 0.8), ("2", 3.0), ("15", 25.0), ("unlimited", 100.0), (None, None), ("far", 8.0)],
    )
    def test_travel_radius_mapping(self, value, expected):
        assert travel_radius_km(value) == expected

    def test_unmapped_miles_converted(self):
        assert travel_radius_km(10) == pytest.approx(16.09344)


class TestMalformedRecords:
    def test_scalar_categories_ignored(self):
        candidates = candidates_from_records([{"id": "x", "kind": "post", "categories": 7}])
        assert [c.categories for c in candidates] == [()]

    def test_infinite_count_becomes_zero(self):
        candidates = candidates_from_records([{"id": "x", "kind": "post", "likeCount": float("inf")}])
        assert candidates[0].engagement.likes == 0

    def test_overflowing_timestamp_becomes_none(self):
        candidates = candidates_from_records([{"id": "x", "kind": "post", "createdAt": "99999999999999999999"}])
        assert candidates[0].created_at is None

    def test_bad_record_does_not_abort_batch(self):
        records = [
            {"id": "a", "kind": "post", "categories": 7, "likeCount": float("inf")},
            {"id": "b", "kind": "post"},
        ]
        assert [c.id for c in candidates_from_records(records)] == ["a", "b"]

    def test_scalar_interests_ignored(self):
        profile = build_profile(ProfileSignals(user={"interests": 3, "preferences": {"categories": 5}}))
        assert profile.interest_categories == []
