"""Abstract read paths the feed service depends on."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..ingestion import ProfileSignals, candidates_from_records
from ..models import CANDIDATE_KINDS, Candidate


class CandidateSource(ABC):
    """Supplies already-published, non-deleted records per kind."""

    @abstractmethod
    def fetch_records(self, kind: str) -> List[Dict]:
        """
        Return raw records for a candidate kind.

        Args:
            kind: location, post or event

        Returns:
            Raw records; an unknown kind yields an empty list
        """
        pass

    def load_candidates(self, kinds=CANDIDATE_KINDS) -> List[Candidate]:
        """Fetch and convert records of the given kinds into candidates."""
        records = []
        for kind in kinds:
            records.extend(
                {**record, "kind": kind} if isinstance(record, dict) else record
                for record in self.fetch_records(kind)
            )
        return candidates_from_records(records)


class ProfileSource(ABC):
    """Supplies the raw signals needed to build a user profile."""

    @abstractmethod
    def fetch_signals(self, user_id: str) -> Optional[ProfileSignals]:
        """
        Return profile signals for a user.

        Returns:
            Signals, or None when the user is unknown
        """
        pass
