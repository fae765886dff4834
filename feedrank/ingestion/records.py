"""Convert raw collaborator records into typed candidates."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from ..models import CANDIDATE_KINDS, AuthorStatus, Candidate

logger = logging.getLogger(__name__)

_candidate_adapter = TypeAdapter(Candidate)

TEXT_FIELDS = ("textContent", "text_content", "content", "caption", "description")
TIMESTAMP_FIELDS = ("createdAt", "created_at", "publishedAt", "published_at")


def _first(record: Dict, *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def _count(value: Any) -> int:
    """Non-negative integer or 0."""
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, count)


def ref_id(value: Any) -> Optional[str]:
    """Identifier from a scalar or a populated relation dict."""
    if isinstance(value, dict):
        value = value.get("id")
    if value in (None, ""):
        return None
    return str(value)


def coordinate_dict(value: Any) -> Optional[Dict[str, float]]:
    if not isinstance(value, dict):
        return None
    lat = _first(value, "latitude", "lat")
    lon = _first(value, "longitude", "lng", "lon")
    try:
        return {"latitude": float(lat), "longitude": float(lon)}
    except (TypeError, ValueError):
        return None


def category_labels(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple, set)):
        return []
    labels = []
    for cat in value:
        if isinstance(cat, dict):
            cat = cat.get("name") or cat.get("label")
        if isinstance(cat, str) and cat.strip():
            labels.append(cat.strip())
    return labels


def _author_status(record: Dict, author: Any) -> str:
    status = _first(record, "authorStatus", "author_status")
    if status is None and isinstance(author, dict):
        status = author.get("status")
    if isinstance(status, str) and status.lower() in {s.value for s in AuthorStatus}:
        return status.lower()
    return AuthorStatus.ACTIVE.value


def normalize_record(record: Dict, kind: Optional[str] = None) -> Dict:
    """
    Map a loosely shaped record onto the candidate schema.

    Missing engagement counts become 0, unparseable coordinates become None
    and unparseable timestamps are left for the model to turn into None.
    """
    kind = kind or record.get("kind") or record.get("type")
    engagement = record.get("engagement") if isinstance(record.get("engagement"), dict) else {}
    moderation = record.get("moderation") if isinstance(record.get("moderation"), dict) else {}
    author = _first(record, "author", "authorId", "author_id", "createdBy")

    location = record.get("location")
    coordinates = coordinate_dict(record.get("coordinates"))
    if coordinates is None and isinstance(location, dict):
        coordinates = coordinate_dict(location.get("coordinates"))

    normalized = {
        "kind": kind,
        "id": ref_id(record.get("id")),
        "categories": category_labels(record.get("categories")),
        "coordinates": coordinates,
        "created_at": _first(record, *TIMESTAMP_FIELDS),
        "author_id": ref_id(author),
        "engagement": {
            "likes": _count(_first(record, "likeCount", "likes") or _first(engagement, "likeCount", "likes")),
            "comments": _count(
                _first(record, "commentCount", "comments") or _first(engagement, "commentCount", "comments")
            ),
            "saves": _count(_first(record, "saveCount", "saves") or _first(engagement, "saveCount", "saves")),
        },
        "moderation": {
            "report_count": _count(
                _first(record, "reportCount", "report_count")
                or _first(moderation, "reportCount", "report_count")
            ),
            "author_status": _author_status({**moderation, **record}, author),
        },
        "text_content": _first(record, *TEXT_FIELDS),
    }

    if kind == "location":
        normalized["name"] = record.get("name")
        normalized["price_range"] = _first(record, "priceRange", "price_range")
    elif kind in ("post", "event"):
        normalized["location_id"] = ref_id(_first(record, "locationId", "location_id") or location)
        if kind == "event":
            normalized["starts_at"] = _first(record, "startDate", "starts_at", "startsAt")
            if normalized["created_at"] is None:
                normalized["created_at"] = normalized["starts_at"]

    if not isinstance(normalized["text_content"], str):
        normalized["text_content"] = None
    return normalized


def candidate_from_record(record: Dict, kind: Optional[str] = None) -> Optional[Candidate]:
    """Convert one raw record, returning None (and logging) if it is unusable."""
    if not isinstance(record, dict):
        logger.warning("Skipping non-mapping record of type %s", type(record).__name__)
        return None

    normalized = normalize_record(record, kind)
    if normalized["kind"] not in CANDIDATE_KINDS:
        logger.warning("Skipping record %s with unknown kind %r", normalized["id"], normalized["kind"])
        return None
    if normalized["id"] is None:
        logger.warning("Skipping %s record without an id", normalized["kind"])
        return None

    try:
        return _candidate_adapter.validate_python(normalized)
    except ValidationError as e:
        logger.warning("Skipping invalid %s record %s: %s", normalized["kind"], normalized["id"], e)
        return None


def candidates_from_records(records: Iterable[Dict], kind: Optional[str] = None) -> List[Candidate]:
    """Convert raw records, dropping unusable ones and duplicate ids."""
    candidates = []
    seen = set()
    for record in records:
        candidate = candidate_from_record(record, kind)
        if candidate is None:
            continue
        if candidate.id in seen:
            logger.warning("Skipping duplicate candidate id %s", candidate.id)
            continue
        seen.add(candidate.id)
        candidates.append(candidate)
    return candidates
