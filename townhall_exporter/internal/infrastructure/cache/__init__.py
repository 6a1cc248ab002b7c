"""
Snapshot caching.
"""
from .snapshot_cache import SnapshotCache, DEFAULT_TTL

__all__ = ["SnapshotCache", "DEFAULT_TTL"]
