"""Candidate ranking and scoring."""

from .composer import ScoreComposer
from .engine import RankingEngine, print_ranking_summary
from .geo import haversine_km
from .models import FactorScore, RankedItem, RankingResult, RejectedCandidate, ScoreBreakdown
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

__all__ = [
    "BehavioralScorer",
    "DiversifiedSelector",
    "FactorScore",
    "GeoScorer",
    "InterestScorer",
    "PopularityScorer",
    "RankedItem",
    "RankingEngine",
    "RankingResult",
    "RejectedCandidate",
    "SafetyFilter",
    "ScoreBreakdown",
    "ScoreComposer",
    "TemporalScorer",
    "budget_reasons",
    "haversine_km",
    "print_ranking_summary",
]
