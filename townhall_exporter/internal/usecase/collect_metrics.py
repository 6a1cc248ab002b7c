"""
Collect Metrics Use Case.

Owns the exporter's shared state (snapshot cache and ticket tracker) and
turns it into exposition text for the metrics endpoint.
"""
import asyncio
from datetime import timedelta
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, generate_latest

from townhall_exporter.internal.infrastructure.cache.snapshot_cache import SnapshotCache
from townhall_exporter.internal.metrics.exposition import DEFAULT_PREFIX, render_metrics
from townhall_exporter.internal.tracker.ticket_tracker import TicketTracker


class MetricsService:
    """
    Context object for the cache/scrape pipeline.

    A single lock covers the whole check-scrape-store-render sequence, so
    concurrent requests never trigger parallel scrapes and the tracker only
    ever sees one scrape at a time.
    """

    def __init__(
        self,
        cache: SnapshotCache,
        tracker: TicketTracker,
        ttl: Optional[timedelta] = None,
        prefix: str = DEFAULT_PREFIX,
        internal_registry: Optional[CollectorRegistry] = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            cache: Snapshot cache in front of the scraper.
            tracker: Ticket tracker shared with the scraper.
            ttl: Cache time-to-live, the cache default if None.
            prefix: Metric name prefix.
            internal_registry: When set, the exporter's own metrics from this
                registry are appended to every response.
        """
        self._cache = cache
        self._tracker = tracker
        self._ttl = ttl
        self._prefix = prefix
        self._internal_registry = internal_registry
        self._lock = asyncio.Lock()

    @classmethod
    def with_internal_metrics(
        cls,
        cache: SnapshotCache,
        tracker: TicketTracker,
        **kwargs,
    ) -> "MetricsService":
        """Service that also exposes the default prometheus_client registry."""
        return cls(cache, tracker, internal_registry=REGISTRY, **kwargs)

    @property
    def tracker(self) -> TicketTracker:
        return self._tracker

    async def render(self) -> str:
        """
        Produce the metrics response body.

        Raises:
            ScrapeError: No fresh snapshot and the refresh scrape failed.
        """
        async with self._lock:
            snapshot = await self._cache.get_or_scrape(self._ttl)
            body = render_metrics(snapshot, len(self._tracker), self._prefix)

        if self._internal_registry is not None:
            body += "\n# Exporter internals\n" + generate_latest(self._internal_registry).decode("utf-8")
        return body
