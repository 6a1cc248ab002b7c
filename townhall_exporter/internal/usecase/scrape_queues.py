"""
Scrape Queues Use Case.

Fetches the waiting-time page, extracts both service queues, feeds them
through the ticket tracker and assembles a timestamped Snapshot.
"""
import time
from datetime import timedelta
from typing import Callable, Protocol

from townhall_exporter.internal.domain.errors import FetchError, ParseError, ScrapeError
from townhall_exporter.internal.domain.snapshot import Snapshot
from townhall_exporter.internal.domain.ticket import TicketCategory
from townhall_exporter.internal.metrics import SCRAPES_TOTAL, SCRAPE_DURATION, TRACKED_TICKETS
from townhall_exporter.internal.parsers.base import BaseQueueParser
from townhall_exporter.internal.tracker.ticket_tracker import TicketTracker
from townhall_exporter.pkg.logger.logger import get_logger


logger = get_logger(__name__)


class PageFetcherProtocol(Protocol):
    """Protocol for page retrieval."""

    async def fetch(self, url: str) -> str:
        """Fetch a page, raising FetchError on failure."""
        ...


def wall_clock_since_epoch(clock: Callable[[], float] = time.time) -> timedelta:
    """
    Current wall-clock time as a duration since the Unix epoch.

    Falls back to zero when the clock cannot be read; the timestamp is
    informational and must never fail a scrape.
    """
    try:
        return timedelta(seconds=clock())
    except (OSError, OverflowError, ValueError) as e:
        logger.warning("Wall clock unavailable", error=str(e))
        return timedelta(0)


class QueueScraper:
    """
    Scrape orchestrator.

    Queue blocks are taken positionally: the first block is citizen
    services, the second drivers-license services. Block identity is not
    validated.
    """

    def __init__(
        self,
        fetcher: PageFetcherProtocol,
        parser: BaseQueueParser,
        tracker: TicketTracker,
        source_url: str,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the scraper.

        Args:
            fetcher: Page fetcher.
            parser: Page parser producing queue snapshots.
            tracker: Shared ticket tracker.
            source_url: URL of the waiting-time page.
            clock: Monotonic clock in seconds.
            wall_clock: Wall clock in seconds since the epoch.
        """
        self._fetcher = fetcher
        self._parser = parser
        self._tracker = tracker
        self._source_url = source_url
        self._clock = clock
        self._wall_clock = wall_clock

    @property
    def tracker(self) -> TicketTracker:
        return self._tracker

    async def scrape(self) -> Snapshot:
        """
        Produce a fresh Snapshot.

        Returns:
            Snapshot with ``from_cache`` unset.

        Raises:
            ScrapeError: Fetching or parsing failed.
        """
        start = self._clock()

        try:
            document = await self._fetcher.fetch(self._source_url)
        except FetchError as e:
            SCRAPES_TOTAL.labels(status="fetch_error").inc()
            raise ScrapeError(e) from e

        try:
            candidates = self._parser.parse(document)
        except ParseError as e:
            SCRAPES_TOTAL.labels(status="parse_error").inc()
            raise ScrapeError(e) from e

        if len(candidates) > 2:
            logger.warning(
                "More queue blocks than expected, using the first two",
                parser=self._parser.name,
                count=len(candidates),
            )

        citizen, drivers_license = candidates[0], candidates[1]
        citizen = citizen.with_tracked_wait(
            self._tracker.update(
                citizen.last_called_ticket,
                citizen.people_waiting,
                TicketCategory.CITIZEN,
            )
        )
        drivers_license = drivers_license.with_tracked_wait(
            self._tracker.update(
                drivers_license.last_called_ticket,
                drivers_license.people_waiting,
                TicketCategory.DRIVERS_LICENSE,
            )
        )

        now = self._clock()
        duration = timedelta(seconds=now - start)

        SCRAPES_TOTAL.labels(status="success").inc()
        SCRAPE_DURATION.observe(duration.total_seconds())
        TRACKED_TICKETS.set(len(self._tracker))

        logger.info(
            "Scrape completed",
            duration_ms=duration // timedelta(milliseconds=1),
            citizen_waiting=citizen.people_waiting,
            drivers_license_waiting=drivers_license.people_waiting,
            tracked_tickets=len(self._tracker),
        )

        return Snapshot(
            citizen=citizen,
            drivers_license=drivers_license,
            from_cache=False,
            scrape_duration=duration,
            created_at_monotonic=now,
            created_at_wall=wall_clock_since_epoch(self._wall_clock),
        )
