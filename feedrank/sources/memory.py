"""In-memory and JSON-file backed collaborators."""

import json
from pathlib import Path
from typing import Dict, List, Optional

from ..ingestion import ProfileSignals
from ..models import CANDIDATE_KINDS
from .base import CandidateSource, ProfileSource

# JSON files group records under plural keys
KIND_KEYS = {"location": "locations", "post": "posts", "event": "events"}


class InMemoryCandidateSource(CandidateSource):
    """Candidate records held in memory, keyed by kind."""

    def __init__(self, records: Optional[Dict[str, List[Dict]]] = None) -> None:
        self.records = {kind: list((records or {}).get(kind, [])) for kind in CANDIDATE_KINDS}

    def fetch_records(self, kind: str) -> List[Dict]:
        return list(self.records.get(kind, []))

    @classmethod
    def from_json(cls, path: Path) -> "InMemoryCandidateSource":
        """
        Load records from a JSON file.

        The file holds an object with ``locations``, ``posts`` and ``events``
        arrays, or a flat array of records carrying a ``kind`` field.
        """
        if not path.exists():
            raise FileNotFoundError(f"Candidates file not found: {path}")

        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in candidates file: {e}")

        records: Dict[str, List[Dict]] = {kind: [] for kind in CANDIDATE_KINDS}
        if isinstance(data, list):
            for record in data:
                kind = (record.get("kind") or record.get("type")) if isinstance(record, dict) else None
                if kind in records:
                    records[kind].append(record)
        elif isinstance(data, dict):
            for kind, key in KIND_KEYS.items():
                records[kind] = list(data.get(key) or [])
        else:
            raise ValueError("Candidates file must contain a JSON object or array")
        return cls(records)


class InMemoryProfileSource(ProfileSource):
    """Profile signals held in memory, keyed by user id."""

    def __init__(self, signals: Optional[Dict[str, ProfileSignals]] = None) -> None:
        self.signals = dict(signals or {})

    def fetch_signals(self, user_id: str) -> Optional[ProfileSignals]:
        return self.signals.get(user_id)

    @classmethod
    def from_json(cls, path: Path, user_id: str) -> "InMemoryProfileSource":
        """Load a single user's signals from a JSON file."""
        if not path.exists():
            raise FileNotFoundError(f"Profile file not found: {path}")

        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in profile file: {e}")

        if not isinstance(data, dict):
            raise ValueError("Profile file must contain a JSON object")
        signals = ProfileSignals(
            user=data.get("user") or {},
            saved_items=data.get("saved") or data.get("saved_items") or [],
            liked_items=data.get("liked") or data.get("liked_items") or [],
            followed_authors=data.get("following") or data.get("followed_authors") or [],
            interactions=data.get("interactions") or [],
        )
        return cls({user_id: signals})
