"""Deduplication of NOTAMs returned by overlapping route queries."""

import hashlib
import logging
import re
from typing import Dict, Iterable, List, Optional

from route_notams.models.notam import NotamRecord
from route_notams.scoring.base import as_utc

logger = logging.getLogger(__name__)


def _has(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def normalize_text(text: Optional[str]) -> str:
    """Uppercase and collapse whitespace so formatting differences don't matter."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text.upper()).strip()


def text_hash(text: Optional[str]) -> str:
    """Short digest of normalized text, 16 hex characters."""
    normalized = normalize_text(text)
    if not normalized:
        return ""
    return hashlib.md5(normalized.encode('utf-8')).hexdigest()[:16]


def dedup_key(record: NotamRecord) -> Optional[str]:
    """
    Derive the key used to recognise the same NOTAM across queries.

    In order of preference:
    - ID|<id>
    - NLT|<number>|<location>|<category>|<text hash>
    - NLI|<number>|<location>|<issued, truncated to the minute>

    Returns:
        The key, or None when nothing reliable identifies the record
    """
    if _has(record.id):
        return f"ID|{record.id.strip()}"

    number = record.number.strip() if _has(record.number) else ""
    location = record.location.strip().upper() if _has(record.location) else ""

    if number and location and _has(record.text):
        return f"NLT|{number}|{location}|{record.category.value}|{text_hash(record.text)}"

    if number and location and record.issued_at is not None:
        issued_minute = as_utc(record.issued_at).replace(second=0, microsecond=0).isoformat()
        return f"NLI|{number}|{location}|{issued_minute}"

    return None


def prefer(candidate: NotamRecord, current: NotamRecord) -> bool:
    """
    Decide whether candidate should replace current on a key collision.

    Later issue time wins, then a record with a radius, then the longer
    text. On a full tie the current record stays. Naive issue times are
    taken as UTC.
    """
    candidate_issued = as_utc(candidate.issued_at)
    current_issued = as_utc(current.issued_at)
    if candidate_issued is not None and current_issued is not None:
        if candidate_issued != current_issued:
            return candidate_issued > current_issued
    elif candidate_issued is not None:
        return True
    elif current_issued is not None:
        return False

    candidate_has_radius = candidate.radius_nm is not None
    current_has_radius = current.radius_nm is not None
    if candidate_has_radius != current_has_radius:
        return candidate_has_radius

    candidate_len = len(candidate.text or "")
    current_len = len(current.text or "")
    if candidate_len != current_len:
        return candidate_len > current_len

    return False


class Deduplicator:
    """
    Collapse NOTAMs seen through several overlapping waypoint queries.

    Output keeps the order in which keys were first seen; a better duplicate
    takes over the slot of the record it replaces.

    Example:
        unique = Deduplicator().dedup(records)
    """

    def dedup(self, records: Iterable[Optional[NotamRecord]]) -> List[NotamRecord]:
        """
        Remove duplicates.

        Args:
            records: Records from all pages of all queries

        Returns:
            Unique records in first-seen order
        """
        out: List[NotamRecord] = []
        positions: Dict[str, int] = {}
        seen = 0

        for record in records:
            if record is None:
                continue
            seen += 1
            key = dedup_key(record)
            if key is None:
                out.append(record)
                continue

            position = positions.get(key)
            if position is None:
                positions[key] = len(out)
                out.append(record)
            elif prefer(record, out[position]):
                out[position] = record

        logger.debug(f"Deduplicated {seen} NOTAMs into {len(out)}")
        return out

    def merge(self, *batches: Iterable[NotamRecord]) -> List[NotamRecord]:
        """Deduplicate several batches, taken in the order given."""
        return self.dedup(record for batch in batches for record in batch)
