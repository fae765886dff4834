"""Tests for the feed service."""

import pytest

from feedrank.config import ConfigModel
from feedrank.ingestion import ProfileSignals
from feedrank.interactions import DeduplicationCache, InMemoryInteractionStore, InteractionRecorder
from feedrank.pipeline import FeedMode, FeedRequest, FeedService
from feedrank.sources import InMemoryCandidateSource, InMemoryProfileSource

VIEWER = "viewer-1"


@pytest.fixture
def candidate_source():
    return InMemoryCandidateSource(
        {
            "location": [
                {"id": "loc-1", "categories": ["cafe"], "createdAt": "2024-06-01T09:00:00Z"},
                {"id": "loc-2", "categories": ["park"], "createdAt": "2024-05-20T09:00:00Z"},
            ],
            "post": [
                {"id": "p1", "author": "u1", "likeCount": 3, "createdAt": "2024-06-01T15:00:00Z", "categories": ["cafe"]},
                {"id": "p2", "author": "u2", "likeCount": 40, "createdAt": "2024-05-30T12:00:00Z", "categories": ["bar"]},
                {"id": "p3", "author": "u1", "likeCount": 10, "createdAt": "2024-05-31T12:00:00Z", "categories": ["park"]},
                {"id": "p4", "author": "u3", "likeCount": 99, "reportCount": 12, "createdAt": "2024-06-01T15:30:00Z"},
                {"id": "p5", "author": "u3", "likeCount": 0, "categories": ["museum"]},
            ],
            "event": [
                {"id": "ev-1", "categories": ["concert hall"], "startDate": "2024-06-02T20:00:00Z"},
            ],
        }
    )


@pytest.fixture
def profile_source():
    return InMemoryProfileSource(
        {
            VIEWER: ProfileSignals(
                user={"interests": ["coffee"]},
                liked_items=["p1"],
                saved_items=["loc-1"],
                followed_authors=["u1"],
            )
        }
    )


@pytest.fixture
def service(candidate_source, profile_source):
    return FeedService(candidate_source, profile_source)


def test_latest_sorts_safe_posts_by_time(service, now):
    page = service.get_feed(FeedRequest(mode=FeedMode.LATEST), viewer_id=VIEWER, now=now)
    assert [e.candidate.id for e in page.items] == ["p1", "p3", "p2", "p5"]
    assert page.content_mix == {"location": 0, "post": 4, "event": 0}
    assert not page.personalized


def test_popular_sorts_by_likes(service, now):
    page = service.get_feed(FeedRequest(mode=FeedMode.POPULAR), now=now)
    assert [e.candidate.id for e in page.items] == ["p2", "p3", "p1", "p5"]


def test_following_feed(service, now):
    page = service.get_feed(FeedRequest(mode=FeedMode.FOLLOWING), viewer_id=VIEWER, now=now)
    assert [e.candidate.id for e in page.items] == ["p1", "p3"]


def test_following_feed_is_empty_for_anonymous(service, now):
    page = service.get_feed(FeedRequest(mode=FeedMode.FOLLOWING), now=now)
    assert page.items == []
    assert not page.has_more


def test_recommended_feed_is_personalized(service, now):
    page = service.get_feed(FeedRequest(limit=10), viewer_id=VIEWER, now=now)

    ids = [e.candidate.id for e in page.items]
    assert page.personalized
    assert len(ids) == 7
    assert "p4" not in ids
    assert all(e.breakdown is not None for e in page.items)
    assert page.content_mix == {"location": 2, "post": 4, "event": 1}


def test_recommended_feed_anonymous(service, now):
    page = service.get_feed(FeedRequest(limit=10), now=now)
    assert not page.personalized
    assert len(page.items) == 7


def test_recommended_pagination(service, now):
    first = service.get_feed(FeedRequest(limit=3, page=1), viewer_id=VIEWER, now=now)
    second = service.get_feed(FeedRequest(limit=3, page=2), viewer_id=VIEWER, now=now)
    third = service.get_feed(FeedRequest(limit=3, page=3), viewer_id=VIEWER, now=now)

    first_ids = [e.candidate.id for e in first.items]
    second_ids = [e.candidate.id for e in second.items]
    assert len(first_ids) == 3
    assert len(second_ids) == 3
    assert not set(first_ids) & set(second_ids)
    assert first.has_more and second.has_more
    assert len(third.items) == 1
    assert not third.has_more


def test_simple_sort_pagination(service, now):
    page = service.get_feed(FeedRequest(mode=FeedMode.LATEST, limit=2, page=2), now=now)
    assert [e.candidate.id for e in page.items] == ["p2", "p5"]
    assert not page.has_more


def test_limit_capped(candidate_source, profile_source, now):
    config = ConfigModel(feed={"max_limit": 2})
    service = FeedService(candidate_source, profile_source, config=config)
    page = service.get_feed(FeedRequest(limit=50, mode=FeedMode.LATEST), now=now)
    assert page.limit == 2
    assert len(page.items) == 2


def test_viewer_state_flags(service, now):
    page = service.get_feed(FeedRequest(limit=10), viewer_id=VIEWER, now=now)
    flags = {e.candidate.id: (e.is_liked, e.is_saved) for e in page.items}
    assert flags["p1"] == (True, False)
    assert flags["loc-1"] == (False, True)
    assert flags["p2"] == (False, False)


def test_unknown_viewer_gets_empty_profile(service):
    profile = service.load_profile("stranger")
    assert profile is not None
    assert profile.is_empty
    assert service.load_profile(None) is None


def test_recorded_interactions_enrich_profile(candidate_source, now):
    recorder = InteractionRecorder(InMemoryInteractionStore(), DeduplicationCache())
    recorder.record(VIEWER, "p2", "like", item_kind="post", timestamp=now)
    service = FeedService(candidate_source, InMemoryProfileSource(), recorder=recorder)

    profile = service.load_profile(VIEWER)

    assert [(i.item_id, i.action) for i in profile.interaction_history] == [("p2", "like")]
