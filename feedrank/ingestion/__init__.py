"""Conversion of collaborator data into engine inputs."""

from .profiles import ProfileBuilder, ProfileSignals, build_profile, travel_radius_km
from .records import candidate_from_record, candidates_from_records, normalize_record

__all__ = [
    "ProfileBuilder",
    "ProfileSignals",
    "build_profile",
    "candidate_from_record",
    "candidates_from_records",
    "normalize_record",
    "travel_radius_km",
]
