"""Ranking engine that combines filtering, scoring and diversified selection."""

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Dict, List, Optional

import pendulum
from rich.console import Console
from rich.table import Table

from ..config import AnonymousOrder, GeoPolicy, RankingConfig, SafetyConfig
from ..models import Rankable, UserProfile
from .composer import ScoreComposer
from .models import RankedItem, RankingResult, ScoreBreakdown
from .safety import SafetyFilter
from .scorers import (
    BehavioralScorer,
    GeoScorer,
    InterestScorer,
    PopularityScorer,
    TemporalScorer,
    budget_reasons,
)
from .selector import DiversifiedSelector

console = Console()
logger = logging.getLogger(__name__)


class RankingEngine:
    """Rank candidates for a user: filter, score, compose, diversify."""

    def __init__(
        self,
        config: Optional[RankingConfig] = None,
        safety: Optional[SafetyConfig] = None,
        geo_policy: Optional[GeoPolicy] = None,
    ) -> None:
        """
        Initialize ranking engine.

        Args:
            config: Weights, decay constants and caps
            safety: Content safety filter configuration
            geo_policy: Overrides the configured geo decay policy
        """
        self.config = config or RankingConfig()
        self.safety_filter = SafetyFilter(safety)

        # Initialize scorers
        self.interest_scorer = InterestScorer(self.config)
        self.geo_scorer = GeoScorer(self.config, policy=geo_policy)
        self.temporal_scorer = TemporalScorer(self.config)
        self.popularity_scorer = PopularityScorer(self.config)
        self.behavioral_scorer = BehavioralScorer(self.config)

        self.composer = ScoreComposer(self.config)
        self.selector = DiversifiedSelector(self.config)

    def score_candidate(
        self,
        candidate: Rankable,
        profile: UserProfile,
        context: Dict,
    ) -> RankedItem:
        """Score a single candidate against a profile."""
        factors = {
            "interest": self.interest_scorer.score(candidate, profile, context),
            "geo": self.geo_scorer.score(candidate, profile, context),
            "temporal": self.temporal_scorer.score(candidate, profile, context),
            "popularity": self.popularity_scorer.score(candidate, profile, context),
            "behavioral": self.behavioral_scorer.score(candidate, profile, context),
        }
        scores = {name: factor.score for name, factor in factors.items()}

        reasons: List[str] = []
        for factor in factors.values():
            reasons.extend(factor.reasons)
        reasons.extend(budget_reasons(candidate, profile))

        breakdown = ScoreBreakdown(
            candidate_id=candidate.id,
            composed=self.composer.compose(scores),
            **scores,
        )
        return RankedItem(candidate=candidate, breakdown=breakdown, match_reasons=reasons)

    def rank(
        self,
        candidates: Sequence,
        profile: Optional[UserProfile],
        limit: int,
        now: Optional[datetime] = None,
    ) -> RankingResult:
        """
        Rank candidates for a profile.

        Args:
            candidates: Candidates to rank; may be empty
            profile: Viewer profile, or None for the anonymous fallback
            limit: Maximum number of items to return (must be positive)
            now: Reference time for recency and time-of-day scoring

        Returns:
            Ranking result with ordered items and diagnostics
        """
        if isinstance(candidates, (str, bytes)) or not isinstance(candidates, Sequence):
            raise TypeError("candidates must be a sequence of Candidate objects")
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValueError(f"limit must be a positive integer, got {limit!r}")
        for candidate in candidates:
            if not isinstance(candidate, Rankable):
                raise TypeError(f"Not a candidate: {type(candidate).__name__}")

        if now is None:
            now = pendulum.now("UTC")
        elif now.tzinfo is None:
            now = pendulum.instance(now.replace(tzinfo=pendulum.UTC))
        context = {"now": now}

        allowed, rejected = self.safety_filter.partition(candidates)

        if profile is None:
            items = self._rank_anonymous(allowed, context)[:limit]
            relaxed = 0
        else:
            scored = [self.score_candidate(c, profile, context) for c in allowed]
            items, relaxed = self.selector.select(scored, limit)

        logger.debug(
            "Ranked %d of %d candidates (%d filtered, %d relaxed, personalized=%s)",
            len(items),
            len(candidates),
            len(rejected),
            relaxed,
            profile is not None,
        )

        return RankingResult(
            items=items,
            total_candidates=len(candidates),
            filtered_out=rejected,
            relaxed_fill=relaxed,
            personalized=profile is not None,
            ranked_at=now,
            config_used=self.config.model_dump(mode="json"),
        )

    def _rank_anonymous(self, candidates: List[Rankable], context: Dict) -> List[RankedItem]:
        """Recency or popularity order without personal factors."""
        now = context["now"]
        items = []
        for candidate in candidates:
            temporal = self.temporal_scorer.score(candidate, None, context)
            popularity = self.popularity_scorer.score(candidate, None, context)
            if self.config.anonymous_order == AnonymousOrder.POPULARITY:
                composed = popularity.score
            else:
                composed = temporal.score
            breakdown = ScoreBreakdown(
                candidate_id=candidate.id,
                temporal=temporal.score,
                popularity=popularity.score,
                composed=composed,
                final=composed,
            )
            items.append(
                RankedItem(
                    candidate=candidate,
                    breakdown=breakdown,
                    match_reasons=temporal.reasons + popularity.reasons,
                )
            )

        def recency_key(item: RankedItem):
            created = item.candidate.created_at or now
            return (created.timestamp(), item.breakdown.popularity)

        def popularity_key(item: RankedItem):
            engagement = item.candidate.engagement
            return (item.breakdown.popularity, engagement.likes, recency_key(item)[0])

        key = popularity_key if self.config.anonymous_order == AnonymousOrder.POPULARITY else recency_key
        return sorted(items, key=key, reverse=True)


def print_ranking_summary(result: RankingResult, top: int = 10) -> None:
    """Print ranking summary."""
    console.print("\n[bold]Ranking Summary:[/bold]")
    console.print(f"  Total candidates: {result.total_candidates}")
    console.print(f"  Filtered by safety: {len(result.filtered_out)}")
    console.print(f"  Selected items: {len(result.items)}")
    if result.relaxed_fill:
        console.print(f"  Filled by relaxed pass: {result.relaxed_fill}")
    if not result.personalized:
        console.print("  [dim]Anonymous fallback (no profile)[/dim]")

    if not result.items:
        return

    table = Table(title="Top Items")
    table.add_column("#", justify="right")
    table.add_column("Kind")
    table.add_column("ID", style="yellow")
    table.add_column("Score", justify="right")
    table.add_column("Breakdown")
    table.add_column("Reasons")

    for i, item in enumerate(result.items[:top], 1):
        b = item.breakdown
        breakdown = (
            f"I:{_fmt(b.interest)} G:{_fmt(b.geo)} T:{b.temporal:.2f} "
            f"P:{b.popularity:.2f} B:{_fmt(b.behavioral)} D:{b.diversity:.2f}"
        )
        table.add_row(
            str(i),
            item.candidate.kind,
            item.candidate.id,
            f"{(b.final if b.final is not None else b.composed):.3f}",
            breakdown,
            "; ".join(item.match_reasons),
        )
    console.print(table)


def _fmt(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:.2f}"
