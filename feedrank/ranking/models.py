"""Ranking models."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..models import Candidate


class FactorScore(BaseModel):
    """Output of a single factor scorer."""

    score: float = Field(..., description="Factor sub-score")
    reasons: List[str] = Field(default_factory=list, description="Match reasons")


class ScoreBreakdown(BaseModel):
    """Per-candidate score with factor breakdown."""

    candidate_id: str = Field(..., description="Candidate identifier")
    interest: Optional[float] = Field(None, description="Interest match score")
    geo: Optional[float] = Field(None, description="Geo relevance score")
    temporal: float = Field(1.0, description="Temporal relevance score")
    popularity: float = Field(1.0, description="Popularity score")
    behavioral: Optional[float] = Field(None, description="Behavioral affinity score")
    diversity: float = Field(1.0, description="Diversity multiplier at selection time")
    composed: float = Field(..., description="Weighted score before diversity")
    final: Optional[float] = Field(None, description="Score after diversity adjustment")


class RankedItem(BaseModel):
    """A selected candidate with its scores and reasons."""

    candidate: Candidate
    breakdown: ScoreBreakdown
    match_reasons: List[str] = Field(default_factory=list)


class RejectedCandidate(BaseModel):
    """A candidate removed by the safety filter."""

    candidate_id: str
    rule: str = Field(..., description="keyword, reports or author_status")


class RankingResult(BaseModel):
    """Result of ranking candidates."""

    items: List[RankedItem] = Field(default_factory=list, description="Ranked items")
    total_candidates: int = Field(0, description="Candidates supplied")
    filtered_out: List[RejectedCandidate] = Field(
        default_factory=list, description="Candidates removed by the safety filter"
    )
    relaxed_fill: int = Field(0, description="Items admitted by the relaxed pass")
    personalized: bool = Field(True, description="False on the anonymous fallback path")
    ranked_at: datetime = Field(..., description="Reference time used for scoring")
    config_used: Dict = Field(default_factory=dict, description="Ranking configuration used")

    def __len__(self) -> int:
        return len(self.items)

    @property
    def candidate_ids(self) -> List[str]:
        return [item.candidate.id for item in self.items]
