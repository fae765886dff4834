"""Feed serving pipeline."""

from .feed import (
    FeedEntry,
    FeedMode,
    FeedPage,
    FeedRequest,
    FeedService,
    attach_viewer_state,
    content_mix,
)

__all__ = [
    "FeedEntry",
    "FeedMode",
    "FeedPage",
    "FeedRequest",
    "FeedService",
    "attach_viewer_state",
    "content_mix",
]
