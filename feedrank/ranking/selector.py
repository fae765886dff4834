"""
Diversified selection.

Greedy single pass over candidates in descending composed score. Each
candidate's score is scaled by a diversity multiplier derived from how many
already-selected items share its primary category and author; candidates
whose category or author is already at its cap are skipped unless the
selection is still in its bootstrap phase. When the capped pass cannot fill
the limit, a relaxed pass appends skipped candidates in score order.
"""

import logging
from collections import Counter
from typing import List, Optional, Tuple

from ..config import RankingConfig
from .models import RankedItem

logger = logging.getLogger(__name__)


class DiversifiedSelector:
    """Select a diverse top-N from scored candidates."""

    def __init__(self, config: Optional[RankingConfig] = None) -> None:
        self.config = config or RankingConfig()

    def diversity_multiplier(self, same_category: int, same_author: int) -> float:
        """Score multiplier for an item given overlaps with the current selection."""
        multiplier = (
            1.0
            - same_category * self.config.category_penalty
            - same_author * self.config.author_penalty
        )
        return max(self.config.penalty_floor, multiplier)

    def select(self, scored: List[RankedItem], limit: int) -> Tuple[List[RankedItem], int]:
        """
        Select up to ``limit`` items.

        Args:
            scored: Items with composed scores, in input order. Breakdowns are
                updated in place with the diversity multiplier and final score.
            limit: Number of items to return

        Returns:
            Selected items and how many of them came from the relaxed pass
        """
        ordered = [
            item
            for _, item in sorted(
                enumerate(scored), key=lambda pair: (-pair[1].breakdown.composed, pair[0])
            )
        ]

        selected: List[RankedItem] = []
        skipped: List[RankedItem] = []
        category_counts: Counter = Counter()
        author_counts: Counter = Counter()
        bootstrap_size = self.config.bootstrap_fraction * limit

        for item in ordered:
            if len(selected) >= limit:
                break

            category = item.candidate.primary_category
            author = item.candidate.author_id
            same_category = category_counts[category] if category else 0
            same_author = author_counts[author] if author else 0

            self._apply_multiplier(item, same_category, same_author)

            within_caps = (
                same_category < self.config.category_cap
                and same_author < self.config.author_cap
            )
            if within_caps or len(selected) < bootstrap_size:
                selected.append(item)
                if category:
                    category_counts[category] += 1
                if author:
                    author_counts[author] += 1
            else:
                skipped.append(item)

        selected.sort(key=lambda item: item.breakdown.final, reverse=True)

        relaxed = 0
        for item in skipped:
            if len(selected) >= limit:
                break
            category = item.candidate.primary_category
            author = item.candidate.author_id
            self._apply_multiplier(
                item,
                category_counts[category] if category else 0,
                author_counts[author] if author else 0,
            )
            selected.append(item)
            relaxed += 1
            if category:
                category_counts[category] += 1
            if author:
                author_counts[author] += 1

        if relaxed:
            logger.debug("Relaxed pass added %d items to reach %d", relaxed, len(selected))
        return selected, relaxed

    def _apply_multiplier(self, item: RankedItem, same_category: int, same_author: int) -> None:
        multiplier = self.diversity_multiplier(same_category, same_author)
        item.breakdown.diversity = multiplier
        item.breakdown.final = item.breakdown.composed * multiplier
