"""NOTAM collections."""

from route_notams.collections.deduplicator import Deduplicator, dedup_key

__all__ = ['Deduplicator', 'dedup_key']
