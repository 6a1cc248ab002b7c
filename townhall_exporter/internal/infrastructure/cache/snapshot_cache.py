"""
In-memory snapshot cache.

Holds the most recent successful Snapshot so that Prometheus scrapes do not
hammer the town hall website.
"""
import time
from datetime import timedelta
from typing import Callable, Optional, Protocol

from townhall_exporter.internal.domain.snapshot import Snapshot
from townhall_exporter.internal.metrics import CACHE_LOOKUPS
from townhall_exporter.pkg.logger.logger import get_logger


logger = get_logger(__name__)


# Default TTL (30 seconds)
DEFAULT_TTL = timedelta(seconds=30)


class ScraperProtocol(Protocol):
    """Protocol for snapshot producers."""

    async def scrape(self) -> Snapshot:
        """Scrape a fresh snapshot, raising ScrapeError on failure."""
        ...


class SnapshotCache:
    """
    Single-slot cache in front of the scraper.

    Not safe for concurrent use on its own; MetricsService serializes calls
    so that at most one scrape is in flight.
    """

    def __init__(
        self,
        scraper: ScraperProtocol,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the cache.

        Args:
            scraper: Producer of fresh snapshots.
            ttl: Default time-to-live of a cached snapshot.
            clock: Monotonic clock in seconds, same as the scraper's.
        """
        self._scraper = scraper
        self._ttl = ttl
        self._clock = clock
        self._snapshot: Optional[Snapshot] = None

    @property
    def cached(self) -> Optional[Snapshot]:
        """Snapshot currently held, expired or not."""
        return self._snapshot

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def is_fresh(self, ttl: Optional[timedelta] = None) -> bool:
        """Whether the held snapshot may still be served."""
        if self._snapshot is None:
            return False
        return self._snapshot.age(self._clock()) <= (ttl if ttl is not None else self._ttl)

    async def get_or_scrape(self, ttl: Optional[timedelta] = None) -> Snapshot:
        """
        Return the cached snapshot or scrape a new one.

        A hit returns the held snapshot unchanged. A miss scrapes, stores the
        result flagged as cached and returns it. If the scrape fails the error
        propagates and the slot keeps its previous content.

        Args:
            ttl: Override for the default time-to-live.

        Raises:
            ScrapeError: The refresh scrape failed.
        """
        if self.is_fresh(ttl):
            CACHE_LOOKUPS.labels(result="hit").inc()
            logger.debug("Cache hit")
            return self._snapshot

        CACHE_LOOKUPS.labels(result="miss").inc()
        logger.debug("Cache miss", has_stale=self._snapshot is not None)

        snapshot = (await self._scraper.scrape()).mark_cached()
        self._snapshot = snapshot
        return snapshot
