"""Weighted combination of factor scores."""

from typing import Dict, Optional

from ..config import RankingConfig

FACTORS = ("interest", "geo", "temporal", "popularity", "behavioral")


class ScoreComposer:
    """Combine factor sub-scores with the configured weights."""

    def __init__(self, config: Optional[RankingConfig] = None) -> None:
        self.config = config or RankingConfig()
        self.weights = {
            "interest": self.config.interest_weight,
            "geo": self.config.geo_weight,
            "temporal": self.config.temporal_weight,
            "popularity": self.config.popularity_weight,
            "behavioral": self.config.behavioral_weight,
        }

    def compose(self, scores: Dict[str, float], diversity: float = 1.0) -> float:
        """
        Weighted sum of factor scores.

        Args:
            scores: Sub-score per factor name; missing factors count as 0
            diversity: Diversity value, neutral (1.0) before selection

        Returns:
            Composed ranking score
        """
        total = sum(scores.get(name, 0.0) * weight for name, weight in self.weights.items())
        return total + diversity * self.config.diversity_weight
