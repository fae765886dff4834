"""Shared fixtures for feedrank tests."""

import pendulum
import pytest

from feedrank.models import (
    Coordinates,
    Engagement,
    EventCandidate,
    LocationCandidate,
    Moderation,
    PostCandidate,
)

# 16:00 UTC falls outside every meal band
NOW = pendulum.datetime(2024, 6, 1, 16, 0, tz="UTC")


def _common(
    candidate_id,
    categories=("cafe",),
    author="author-1",
    created_at=None,
    likes=0,
    comments=0,
    saves=0,
    reports=0,
    status="active",
    text=None,
    coords=None,
):
    return {
        "id": candidate_id,
        "categories": tuple(categories),
        "author_id": author,
        "created_at": created_at,
        "engagement": Engagement(likes=likes, comments=comments, saves=saves),
        "moderation": Moderation(report_count=reports, author_status=status),
        "text_content": text,
        "coordinates": Coordinates(latitude=coords[0], longitude=coords[1]) if coords else None,
    }


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_location():
    """Factory for location candidates."""

    def _make(candidate_id, name=None, price_range=None, **kw):
        return LocationCandidate(name=name, price_range=price_range, **_common(candidate_id, **kw))

    return _make


@pytest.fixture
def make_post():
    """Factory for post candidates."""

    def _make(candidate_id, location_id=None, **kw):
        return PostCandidate(location_id=location_id, **_common(candidate_id, **kw))

    return _make


@pytest.fixture
def make_event():
    """Factory for event candidates."""

    def _make(candidate_id, location_id=None, starts_at=None, **kw):
        return EventCandidate(location_id=location_id, starts_at=starts_at, **_common(candidate_id, **kw))

    return _make
