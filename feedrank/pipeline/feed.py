"""Feed service that routes feed requests to ranking or simple sorts."""

import logging
import time
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Set

import pendulum
from pydantic import BaseModel, Field

from ..config import ConfigModel
from ..ingestion import ProfileBuilder, ProfileSignals
from ..interactions import InteractionRecorder
from ..models import CANDIDATE_KINDS, Candidate, Rankable, UserProfile
from ..ranking import RankingEngine, ScoreBreakdown
from ..sources import CandidateSource, ProfileSource

logger = logging.getLogger(__name__)


class FeedMode(str, Enum):
    """Feed ordering requested by the client."""

    RECOMMENDED = "recommended"
    LATEST = "latest"
    POPULAR = "popular"
    FOLLOWING = "following"


class FeedRequest(BaseModel):
    """A page request from a feed handler."""

    limit: int = Field(20, ge=1, description="Items per page")
    page: int = Field(1, ge=1, description="1-based page number")
    mode: FeedMode = Field(FeedMode.RECOMMENDED, description="Feed ordering")


class FeedEntry(BaseModel):
    """A feed item with optional scoring diagnostics and viewer state."""

    candidate: Candidate
    breakdown: Optional[ScoreBreakdown] = None
    match_reasons: List[str] = Field(default_factory=list)
    is_liked: bool = False
    is_saved: bool = False


class FeedPage(BaseModel):
    """Response for a feed request."""

    items: List[FeedEntry] = Field(default_factory=list)
    page: int
    limit: int
    has_more: bool = False
    mode: FeedMode
    content_mix: Dict[str, int] = Field(default_factory=dict)
    personalized: bool = False
    duration_ms: float = 0.0


class FeedService:
    """Serve feed pages from candidate and profile collaborators."""

    def __init__(
        self,
        candidate_source: CandidateSource,
        profile_source: ProfileSource,
        config: Optional[ConfigModel] = None,
        engine: Optional[RankingEngine] = None,
        recorder: Optional[InteractionRecorder] = None,
    ) -> None:
        """
        Initialize feed service.

        Args:
            candidate_source: Read path for candidate records
            profile_source: Read path for profile signals
            config: Service configuration
            engine: Ranking engine; built from config when omitted
            recorder: Interaction recorder whose history enriches profiles
        """
        self.candidate_source = candidate_source
        self.profile_source = profile_source
        self.config = config or ConfigModel()
        self.engine = engine or RankingEngine(self.config.ranking, self.config.safety)
        self.recorder = recorder
        self.profile_builder = ProfileBuilder()

    def load_profile(self, viewer_id: Optional[str]) -> Optional[UserProfile]:
        """Build the viewer's profile; None for anonymous viewers."""
        if not viewer_id:
            return None

        signals = self.profile_source.fetch_signals(viewer_id) or ProfileSignals()
        if self.recorder is not None:
            recorded = self.recorder.history_records(viewer_id)
            if recorded:
                signals = signals.model_copy(update={"interactions": signals.interactions + recorded})
        return self.profile_builder.build(signals)

    def get_feed(
        self,
        request: FeedRequest,
        viewer_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> FeedPage:
        """Serve one page of the requested feed."""
        start = time.time()
        limit = min(request.limit, self.config.feed.max_limit)
        offset = (request.page - 1) * limit
        now = now or pendulum.now("UTC")

        candidates = self.candidate_source.load_candidates()
        profile = self.load_profile(viewer_id)

        if request.mode == FeedMode.RECOMMENDED:
            # Pages are slices of one ordering of the whole pool
            rank_limit = max(len(candidates), offset + limit)
            result = self.engine.rank(candidates, profile, limit=rank_limit, now=now)
            total = len(result.items)
            entries = [
                FeedEntry(
                    candidate=item.candidate,
                    breakdown=item.breakdown,
                    match_reasons=item.match_reasons,
                )
                for item in result.items[offset : offset + limit]
            ]
        else:
            ordered = self.simple_sort(request.mode, candidates, profile)
            total = len(ordered)
            entries = [FeedEntry(candidate=c) for c in ordered[offset : offset + limit]]

        attach_viewer_state(entries, profile)

        page = FeedPage(
            items=entries,
            page=request.page,
            limit=limit,
            has_more=total > offset + limit,
            mode=request.mode,
            content_mix=content_mix(entries),
            personalized=request.mode == FeedMode.RECOMMENDED and profile is not None,
            duration_ms=(time.time() - start) * 1000,
        )
        logger.info(
            "Served %s feed page %d for %s: %d items",
            request.mode.value,
            request.page,
            viewer_id or "anonymous",
            len(entries),
        )
        return page

    def simple_sort(
        self,
        mode: FeedMode,
        candidates: List[Rankable],
        profile: Optional[UserProfile],
    ) -> List[Rankable]:
        """Latest, popular and following feeds: plain sorts over safe posts."""
        posts = [c for c in self.engine.safety_filter.filter(candidates) if c.kind == "post"]

        if mode == FeedMode.FOLLOWING:
            if profile is None:
                return []
            posts = [p for p in posts if p.author_id in profile.followed_author_ids]

        if mode == FeedMode.POPULAR:
            return sorted(posts, key=lambda p: (p.engagement.likes, _timestamp(p)), reverse=True)
        return sorted(posts, key=_timestamp, reverse=True)


def _timestamp(candidate: Rankable) -> float:
    # Undated items sort last
    return candidate.created_at.timestamp() if candidate.created_at else float("-inf")


def attach_viewer_state(entries: List[FeedEntry], profile: Optional[UserProfile]) -> None:
    """Mark entries the viewer liked or saved."""
    if profile is None:
        return
    liked: Set[str] = profile.liked_item_ids
    saved: Set[str] = profile.saved_item_ids
    for entry in entries:
        entry.is_liked = entry.candidate.id in liked
        entry.is_saved = entry.candidate.id in saved


def content_mix(entries: List[FeedEntry]) -> Dict[str, int]:
    """Count entries per candidate kind."""
    mix = {kind: 0 for kind in CANDIDATE_KINDS}
    for entry in entries:
        mix[entry.candidate.kind] += 1
    return mix
