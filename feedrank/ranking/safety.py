"""Content safety filter applied before any scoring."""

import logging
from typing import List, Optional, Sequence, Tuple

from ..config import SafetyConfig
from ..models import Rankable
from .models import RejectedCandidate

logger = logging.getLogger(__name__)


class SafetyFilter:
    """Remove policy-violating, over-reported or blocked-author candidates."""

    def __init__(self, config: Optional[SafetyConfig] = None) -> None:
        self.config = config or SafetyConfig()
        self.keywords = [k.lower() for k in self.config.objectionable_keywords if k.strip()]
        self.blocked_statuses = {s.lower() for s in self.config.blocked_author_statuses}

    def violation(self, candidate: Rankable) -> Optional[str]:
        """Return the name of the first rule the candidate breaks, or None."""
        text = (candidate.text_content or "").lower()
        if text and any(keyword in text for keyword in self.keywords):
            return "keyword"
        if candidate.moderation.report_count > self.config.report_threshold:
            return "reports"
        if candidate.moderation.author_status.value in self.blocked_statuses:
            return "author_status"
        return None

    def is_allowed(self, candidate: Rankable) -> bool:
        return self.violation(candidate) is None

    def partition(
        self, candidates: Sequence[Rankable]
    ) -> Tuple[List[Rankable], List[RejectedCandidate]]:
        """Split candidates into allowed (order preserved) and rejected."""
        allowed: List[Rankable] = []
        rejected: List[RejectedCandidate] = []
        for candidate in candidates:
            rule = self.violation(candidate)
            if rule is None:
                allowed.append(candidate)
            else:
                rejected.append(RejectedCandidate(candidate_id=candidate.id, rule=rule))

        if rejected:
            logger.debug("Safety filter removed %d of %d candidates", len(rejected), len(candidates))
        return allowed, rejected

    def filter(self, candidates: Sequence[Rankable]) -> List[Rankable]:
        """Return the allowed candidates in their original order."""
        allowed, _ = self.partition(candidates)
        return allowed
